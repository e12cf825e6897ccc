"""Tests for the replay nonce cache."""

from aksk.common.replay import NonceCache


class TestNonceCache:
    """NonceCache behavior."""

    def test_first_use_accepted(self):
        cache = NonceCache()
        assert cache.check_and_store("ak", "nonce", "1") is True

    def test_repeat_rejected(self):
        cache = NonceCache()
        cache.check_and_store("ak", "nonce", "1")
        assert cache.check_and_store("ak", "nonce", "1") is False

    def test_distinct_triples(self):
        """Any differing component makes a new entry."""
        cache = NonceCache()
        assert cache.check_and_store("ak", "nonce", "1")
        assert cache.check_and_store("ak2", "nonce", "1")
        assert cache.check_and_store("ak", "nonce2", "1")
        assert cache.check_and_store("ak", "nonce", "2")
        assert len(cache) == 4

    def test_expired_entries_evicted(self, clock):
        cache = NonceCache(ttl_seconds=10, clock=clock)
        cache.check_and_store("ak", "nonce", "1")
        clock.advance(11)
        assert cache.check_and_store("ak", "nonce", "1") is True

    def test_max_entries(self):
        cache = NonceCache(max_entries=2)
        cache.check_and_store("ak", "a", "1")
        cache.check_and_store("ak", "b", "1")
        cache.check_and_store("ak", "c", "1")
        assert len(cache) == 2
        # Oldest entry was dropped
        assert cache.check_and_store("ak", "a", "1") is True
