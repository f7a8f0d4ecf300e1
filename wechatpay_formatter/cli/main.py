# wechatpay_formatter/cli/main.py
"""
CLI for building WeChat Pay canonical strings and headers by hand, to debug signature mismatches.
"""

import os
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from wechatpay_formatter.core.canon import authorization as build_authorization
from wechatpay_formatter.core.canon import request as canonical_request
from wechatpay_formatter.core.canon import response as canonical_response
from wechatpay_formatter.core.entropy import nonce as new_nonce
from wechatpay_formatter.core.entropy import timestamp as now_timestamp
from wechatpay_formatter.core.legacy import ksort, query_string_like, legacy_signing_string

app = typer.Typer(
    name="wechatpay-formatter",
    help="Build canonical strings, nonces and Authorization headers for WeChat Pay signing",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()


def resolve_setting(flag: Optional[str], env_var: str, label: str) -> str:
    """Resolve a value in this order:
    1. command-line flag
    2. environment variable
    Exits with code 1 when neither is set.
    """
    value = flag or os.environ.get(env_var)
    if not value:
        console.print(f"[red]Missing {label}[/]")
        console.print(f"  • Pass it as a flag or set env var: export {env_var}=...")
        raise typer.Exit(1)
    return value


def show_canonical(value: str) -> None:
    """Print a canonical string with its line feeds made visible."""
    console.print(value.replace("\n", "\\n\n"), end="", markup=False, highlight=False, soft_wrap=True)
    console.print(f"[dim]({value.count(chr(10))} line feeds, {len(value.encode('utf-8'))} bytes)[/]")


@app.command()
def nonce(
    size: int = typer.Option(32, "--size", "-s", help="Nonce length (zero/negative gives abs(size)+2)"),
):
    """Print a fresh random nonce."""
    console.print(new_nonce(size), markup=False, highlight=False, soft_wrap=True)


@app.command()
def timestamp():
    """Print the current Unix timestamp in seconds."""
    console.print(str(now_timestamp()), highlight=False)


@app.command()
def request(
    method: str = typer.Argument(..., help="HTTP method, e.g. POST"),
    uri: str = typer.Argument(..., help="Path and query string exactly as sent"),
    body: str = typer.Option("", "--body", "-b", help="Raw request body"),
    ts: Optional[str] = typer.Option(None, "--timestamp", "-t", help="Timestamp (default: now)"),
    nonce_str: Optional[str] = typer.Option(None, "--nonce", "-n", help="Nonce (default: random)"),
):
    """Show the canonical string of an outbound request."""
    value = canonical_request(method, uri, ts or str(now_timestamp()), nonce_str or new_nonce(), body)
    show_canonical(value)


@app.command()
def response(
    ts: str = typer.Option(..., "--timestamp", "-t", help="Value of the Wechatpay-Timestamp header"),
    nonce_str: str = typer.Option(..., "--nonce", "-n", help="Value of the Wechatpay-Nonce header"),
    body: str = typer.Option("", "--body", "-b", help="Raw response body"),
):
    """Show the canonical string of an inbound response."""
    show_canonical(canonical_response(ts, nonce_str, body))


@app.command()
def authorization(
    signature: str = typer.Option(..., "--signature", help="Base64 signature of the canonical request"),
    mchid: Optional[str] = typer.Option(None, "--mchid", help="Merchant id (overrides WECHATPAY_MERCHANT_ID)"),
    serial: Optional[str] = typer.Option(None, "--serial", help="Certificate serial (overrides WECHATPAY_SERIAL_NO)"),
    ts: Optional[str] = typer.Option(None, "--timestamp", "-t", help="Timestamp (default: now)"),
    nonce_str: Optional[str] = typer.Option(None, "--nonce", "-n", help="Nonce (default: random)"),
):
    """Print an Authorization header value."""
    merchant_id = resolve_setting(mchid, "WECHATPAY_MERCHANT_ID", "merchant id")
    serial_number = resolve_setting(serial, "WECHATPAY_SERIAL_NO", "certificate serial number")

    value = build_authorization(
        merchant_id,
        nonce_str or new_nonce(),
        signature,
        ts or str(now_timestamp()),
        serial_number,
    )
    console.print(value, markup=False, highlight=False, soft_wrap=True)


@app.command()
def query(
    pairs: List[str] = typer.Argument(..., help="Parameters as KEY=VALUE"),
    sort: bool = typer.Option(False, "--sort", help="Order keys the way legacy signing does"),
    key: Optional[str] = typer.Option(None, "--key", help="API key; prints the full legacy string-to-sign"),
):
    """Serialize parameters query-string-like (drops `sign` and empty values)."""
    params = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name:
            console.print(f"[red]Not a KEY=VALUE pair: {pair}[/]")
            raise typer.Exit(1)
        params[name] = value

    if key:
        ordered = ksort(params)
        result = legacy_signing_string(params, key)
    else:
        ordered = ksort(params) if sort else params
        result = query_string_like(ordered)

    table = Table(title="Parameters")
    table.add_column("Key")
    table.add_column("Value")
    table.add_column("Signed")
    for name, value in ordered.items():
        signed = name != "sign" and value != ""
        table.add_row(Text(name), Text(value), "yes" if signed else "no")
    console.print(table)
    console.print(result, markup=False, highlight=False, soft_wrap=True)


if __name__ == "__main__":
    app()
