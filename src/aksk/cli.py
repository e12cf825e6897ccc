"""aksk CLI - key generation, request signing and verification."""

import asyncio
import functools
import json
import secrets
import sys
from collections.abc import Callable, Coroutine
from typing import IO, Any, ParamSpec, TypeVar

import click
from rich.console import Console
from rich.table import Table

from aksk.common.errors import AkskError, AuthError
from aksk.common.logging import setup_logging
from aksk.common.settings import Settings, get_settings
from aksk.core.auth import Auth
from aksk.request.signer import RequestSigner, SigningClient
from aksk.request.validator import RequestValidator

console = Console()

P = ParamSpec("P")
R = TypeVar("R")


def async_command(f: Callable[P, Coroutine[Any, Any, R]]) -> Callable[P, R]:
    """Decorator to run async commands."""

    @functools.wraps(f)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        return asyncio.run(f(*args, **kwargs))

    return wrapper


def _read_body(data: str | None, data_file: IO[bytes] | None) -> bytes | IO[bytes] | None:
    if data is not None and data_file is not None:
        raise click.UsageError("Use only one of --data and --data-file")
    if data is not None:
        return data.encode("utf-8")
    return data_file


def _parse_headers(values: tuple[str, ...]) -> dict[str, str]:
    headers: dict[str, str] = {}
    for value in values:
        name, sep, content = value.partition(":")
        if not sep or not name.strip():
            raise click.BadParameter(f"expected 'name: value', got {value!r}", param_hint="--header")
        headers[name.strip().lower()] = content.strip()
    return headers


def _build_signer(ctx: click.Context, access_key: str | None, secret_key: str | None) -> RequestSigner:
    settings: Settings = ctx.obj["settings"]
    access_key = access_key or settings.access_key
    secret_key = secret_key or settings.secret_key
    if not access_key or not secret_key:
        console.print("[red]Access key and secret key are required (options or AKSK_ACCESS_KEY/AKSK_SECRET_KEY)[/red]")
        sys.exit(1)
    return RequestSigner(
        access_key,
        secret_key,
        auth=ctx.obj["auth"],
        skip_body=ctx.obj["skip_body"],
    )


@click.group()
@click.option(
    "--encoder",
    type=click.Choice(["base64", "hex"]),
    default=None,
    help="Encoding for signatures and hashes",
)
@click.option(
    "--hash",
    "hash_algorithm",
    type=click.Choice(["md5", "sha1", "sha224", "sha256", "sha384", "sha512"]),
    default=None,
    help="Hash algorithm",
)
@click.option("--skew", type=int, default=None, help="Acceptable clock skew in seconds")
@click.option("--skip-body", is_flag=True, help="Do not sign or verify bodies")
@click.option("--log-level", default=None, help="Log level")
@click.pass_context
def cli(
    ctx: click.Context,
    encoder: str | None,
    hash_algorithm: str | None,
    skew: int | None,
    skip_body: bool,
    log_level: str | None,
) -> None:
    """aksk - sign and verify HTTP requests with access/secret keys."""
    overrides: dict[str, Any] = {}
    if encoder:
        overrides["encoder"] = encoder
    if hash_algorithm:
        overrides["hash_algorithm"] = hash_algorithm
    if skew is not None:
        if skew < 0:
            raise click.BadParameter("must be >= 0", param_hint="--skew")
        overrides["acceptable_skew_seconds"] = skew
    if skip_body:
        overrides["skip_body"] = True
    settings = get_settings().model_copy(update=overrides)
    setup_logging(log_level or settings.log_level, settings.log_json)

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings
    ctx.obj["skip_body"] = settings.skip_body
    ctx.obj["auth"] = Auth.from_settings(settings)


# === Keys ===


@cli.command("keygen")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
def keygen(as_json: bool) -> None:
    """Generate a random access key / secret key pair."""
    access_key = secrets.token_hex(10)
    secret_key = secrets.token_urlsafe(32)
    if as_json:
        click.echo(json.dumps({"access_key": access_key, "secret_key": secret_key}))
        return

    console.print(f"[green]Access key:[/green] {access_key}")
    console.print(f"[green]Secret key:[/green] {secret_key}")
    console.print("[yellow]Store the secret key securely; it is not shown again[/yellow]")


# === Signing ===


@cli.command("sign")
@click.option("--access-key", "-a", help="Access key")
@click.option("--secret-key", "-s", help="Secret key")
@click.option("--method", "-X", default="GET", show_default=True, help="HTTP method")
@click.option("--url", "-u", required=True, help="Request URL")
@click.option("--data", "-d", help="Request body")
@click.option("--data-file", type=click.File("rb"), help="Read request body from file")
@click.option("--json", "as_json", is_flag=True, help="Output headers as JSON")
@click.pass_context
def sign(
    ctx: click.Context,
    access_key: str | None,
    secret_key: str | None,
    method: str,
    url: str,
    data: str | None,
    data_file: IO[bytes] | None,
    as_json: bool,
) -> None:
    """Print signature headers for a request."""
    signer = _build_signer(ctx, access_key, secret_key)
    try:
        signed = signer.sign(method.upper(), url, _read_body(data, data_file))
    except AkskError as exc:
        console.print(f"[red]Error: {exc.message}[/red]")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(signed.headers))
        return

    table = Table(title=f"{signed.method} {signed.url}")
    table.add_column("Header", style="cyan")
    table.add_column("Value", style="green")
    for name, value in signed.headers.items():
        table.add_row(name, value)
    console.print(table)


@cli.command("verify")
@click.option("--secret-key", "-s", required=True, help="Secret key of the access key in the headers")
@click.option("--header", "-H", "header_values", multiple=True, help="Header as 'name: value'")
@click.option("--data", "-d", help="Request body")
@click.option("--data-file", type=click.File("rb"), help="Read request body from file")
@click.pass_context
def verify(
    ctx: click.Context,
    secret_key: str,
    header_values: tuple[str, ...],
    data: str | None,
    data_file: IO[bytes] | None,
) -> None:
    """Verify signature headers offline."""
    headers = _parse_headers(header_values)
    validator = RequestValidator(
        lambda _access_key: secret_key,
        auth=ctx.obj["auth"],
        skip_body=ctx.obj["skip_body"],
    )
    try:
        result = validator.validate(headers, _read_body(data, data_file))
    except AuthError as exc:
        console.print(f"[red]Invalid: {exc.message} ({exc.code})[/red]")
        sys.exit(1)

    console.print(f"[green]Valid signature for access key {result.access_key}[/green]")


@cli.command("request")
@click.option("--access-key", "-a", help="Access key")
@click.option("--secret-key", "-s", help="Secret key")
@click.option("--method", "-X", default="GET", show_default=True, help="HTTP method")
@click.option("--url", "-u", required=True, help="Request URL")
@click.option("--data", "-d", help="Request body")
@click.option("--data-file", type=click.File("rb"), help="Read request body from file")
@click.option("--header", "-H", "header_values", multiple=True, help="Extra header as 'name: value'")
@click.pass_context
@async_command
async def send_request(
    ctx: click.Context,
    access_key: str | None,
    secret_key: str | None,
    method: str,
    url: str,
    data: str | None,
    data_file: IO[bytes] | None,
    header_values: tuple[str, ...],
) -> None:
    """Send a signed request and print the response."""
    signer = _build_signer(ctx, access_key, secret_key)
    settings: Settings = ctx.obj["settings"]
    extra_headers = _parse_headers(header_values)

    async with SigningClient(signer, timeout=settings.http_timeout) as client:
        try:
            response = await client.request(
                method.upper(),
                url,
                body=_read_body(data, data_file),
                headers=extra_headers,
            )
            async with response:
                text = await response.text()
                status = response.status
        except AkskError as exc:
            console.print(f"[red]Error: {exc.message}[/red]")
            sys.exit(1)

    style = "green" if status < 400 else "red"
    console.print(f"[{style}]HTTP {status}[/{style}]")
    click.echo(text)
    if status >= 400:
        sys.exit(1)


# === Server ===


@cli.command("serve")
@click.option("--host", default=None, help="Bind address")
@click.option("--port", type=int, default=None, help="Port")
@click.pass_context
def serve(ctx: click.Context, host: str | None, port: int | None) -> None:
    """Run the bundled echo server behind signature verification."""
    from aksk.server.main import run

    settings: Settings = ctx.obj["settings"]
    update: dict[str, Any] = {}
    if host:
        update["host"] = host
    if port:
        update["port"] = port
    run(settings.model_copy(update=update))


def main() -> None:
    """Entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
