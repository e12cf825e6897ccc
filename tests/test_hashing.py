"""Tests for digest and HMAC computation."""

import base64
import hashlib

import pytest

from aksk.core.hashing import HashAlgorithm, Hasher, canonicalize


class TestCanonicalize:
    """Element canonicalization."""

    def test_sorted_concatenation(self):
        """Elements are sorted and joined without a separator."""
        assert canonicalize(["b", "c", "a"]) == b"abc"

    def test_does_not_mutate_input(self):
        """The caller's list keeps its order."""
        elements = ["b", "a"]
        canonicalize(elements)
        assert elements == ["b", "a"]


class TestHasher:
    """Hasher behavior."""

    def test_default_is_sha256(self):
        """SHA-256 is the default algorithm."""
        hasher = Hasher()
        assert hasher.algorithm is HashAlgorithm.SHA256
        assert hasher.digest(b"helloworld") == hashlib.sha256(b"helloworld").digest()

    def test_known_hmac(self):
        """HMAC matches the reference fixture."""
        mac = Hasher().hmac(b"123", ["123456", "helloworld"])
        assert base64.b64encode(mac).decode() == "TwcsQLXoVS8PeAJYptZqZuCVHfIkMWwuWF4k0EvKRVA="

    def test_hmac_order_independent(self):
        """Permuting the elements does not change the MAC."""
        hasher = Hasher()
        assert hasher.hmac("k", ["a", "b"]) == hasher.hmac("k", ["b", "a"])
        assert hasher.hmac("k", ["x", "1", "zz", ""]) == hasher.hmac("k", ["", "zz", "1", "x"])

    def test_str_and_bytes_secret_match(self):
        """A str secret is UTF-8 encoded."""
        hasher = Hasher()
        assert hasher.hmac("456", ["a"]) == hasher.hmac(b"456", ["a"])

    def test_empty_elements_do_not_contribute(self):
        """Empty strings leave the canonical form unchanged."""
        hasher = Hasher()
        assert hasher.hmac("k", ["a", "b", ""]) == hasher.hmac("k", ["a", "b"])

    @pytest.mark.parametrize(
        ("algorithm", "size"),
        [("md5", 16), ("sha1", 20), ("sha224", 28), ("sha256", 32), ("sha384", 48), ("sha512", 64)],
    )
    def test_algorithms(self, algorithm, size):
        """Each built-in algorithm yields its digest size."""
        hasher = Hasher(algorithm)
        assert len(hasher.digest(b"x")) == size
        assert len(hasher.hmac("k", ["x"])) == size

    def test_unknown_algorithm(self):
        """Unknown algorithm names are rejected."""
        with pytest.raises(ValueError):
            Hasher("sha3_999")
