"""Tests for the aksk CLI."""

import json

import pytest
from click.testing import CliRunner

from aksk.cli import cli
from aksk.common.settings import get_settings


@pytest.fixture(autouse=True)
def clear_settings_cache(monkeypatch):
    for name in ("AKSK_ACCESS_KEY", "AKSK_SECRET_KEY", "AKSK_SKIP_BODY", "AKSK_ENCODER"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def _last_json(output: str) -> dict:
    return json.loads(output.strip().splitlines()[-1])


def _sign(runner: CliRunner, *extra: str) -> dict:
    result = runner.invoke(
        cli,
        [*extra, "sign", "-a", "123", "-s", "456", "-X", "POST", "-u", "http://example.com/echo", "-d", "helloworld", "--json"],
    )
    assert result.exit_code == 0, result.output
    return _last_json(result.output)


def _header_args(headers: dict) -> list[str]:
    args: list[str] = []
    for name, value in headers.items():
        args.extend(["-H", f"{name}: {value}"])
    return args


class TestKeygen:
    def test_json_output(self, runner):
        result = runner.invoke(cli, ["keygen", "--json"])
        assert result.exit_code == 0
        keys = _last_json(result.output)
        assert len(keys["access_key"]) == 20
        assert len(keys["secret_key"]) >= 32

    def test_keys_are_unique(self, runner):
        first = _last_json(runner.invoke(cli, ["keygen", "--json"]).output)
        second = _last_json(runner.invoke(cli, ["keygen", "--json"]).output)
        assert first != second


class TestSignAndVerify:
    def test_sign_outputs_headers(self, runner):
        headers = _sign(runner)
        assert headers["x-auth-access-key"] == "123"
        assert headers["x-auth-body-hash"] == "k2oYXKqiZrucvpgengXLeM1zKwsygOuURBK7b4+PB68="
        assert set(headers) >= {"x-auth-timestamp", "x-auth-signature", "x-auth-random-str"}

    def test_sign_table_output(self, runner):
        result = runner.invoke(cli, ["sign", "-a", "123", "-s", "456", "-u", "http://example.com/"])
        assert result.exit_code == 0
        assert "x-auth-signature" in result.output

    def test_sign_requires_credentials(self, runner):
        result = runner.invoke(cli, ["sign", "-u", "http://example.com/"])
        assert result.exit_code == 1

    def test_sign_credentials_from_env(self, runner, monkeypatch):
        monkeypatch.setenv("AKSK_ACCESS_KEY", "envkey")
        monkeypatch.setenv("AKSK_SECRET_KEY", "envsecret")
        result = runner.invoke(cli, ["sign", "-u", "http://example.com/", "--json"])
        assert result.exit_code == 0, result.output
        assert _last_json(result.output)["x-auth-access-key"] == "envkey"

    def test_sign_invalid_url(self, runner):
        result = runner.invoke(cli, ["sign", "-a", "123", "-s", "456", "-u", "not-a-url"])
        assert result.exit_code == 1

    def test_round_trip(self, runner):
        headers = _sign(runner)
        result = runner.invoke(cli, ["verify", "-s", "456", *_header_args(headers), "-d", "helloworld"])
        assert result.exit_code == 0, result.output
        assert "Valid signature for access key 123" in result.output

    def test_verify_body_file(self, runner, tmp_path):
        body_file = tmp_path / "body.txt"
        body_file.write_bytes(b"helloworld")
        headers = _sign(runner)
        result = runner.invoke(
            cli,
            ["verify", "-s", "456", *_header_args(headers), "--data-file", str(body_file)],
        )
        assert result.exit_code == 0, result.output

    def test_verify_wrong_secret(self, runner):
        headers = _sign(runner)
        result = runner.invoke(cli, ["verify", "-s", "789", *_header_args(headers), "-d", "helloworld"])
        assert result.exit_code == 1
        assert "signature_invalid" in result.output

    def test_verify_tampered_body(self, runner):
        headers = _sign(runner)
        result = runner.invoke(cli, ["verify", "-s", "456", *_header_args(headers), "-d", "goodbye"])
        assert result.exit_code == 1
        assert "body_invalid" in result.output

    def test_hex_encoder_option(self, runner):
        headers = _sign(runner, "--encoder", "hex")
        assert headers["x-auth-body-hash"] == "936a185caaa266bb9cbe981e9e05cb78cd732b0b3280eb944412bb6f8f8f07af"
        result = runner.invoke(
            cli,
            ["--encoder", "hex", "verify", "-s", "456", *_header_args(headers), "-d", "helloworld"],
        )
        assert result.exit_code == 0, result.output

    def test_malformed_header_option(self, runner):
        result = runner.invoke(cli, ["verify", "-s", "456", "-H", "no-colon"])
        assert result.exit_code == 2

    def test_negative_skew(self, runner):
        result = runner.invoke(cli, ["--skew", "-5", "keygen"])
        assert result.exit_code == 2
