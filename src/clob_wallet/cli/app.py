"""CLI for clob-wallet - connect a wallet and authenticate against the CLOB."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

app = typer.Typer(
    name="clob-wallet",
    help="Manage a local trading wallet and its CLOB API credentials.",
    no_args_is_help=True,
)
console = Console()

_config_path: Path | None = None


def _version_callback(value: bool):
    if value:
        from importlib.metadata import version
        console.print(f"clob-wallet {version('clob-wallet')}")
        raise typer.Exit()


@app.callback()
def main(
    config: Path = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config.yaml (default: ~/.clob-wallet/config.yaml)",
        envvar="CLOB_WALLET_CONFIG",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
):
    """Manage a local trading wallet and its CLOB API credentials."""
    global _config_path
    _config_path = config
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


def _run(coro):
    """Run an async function synchronously."""
    return asyncio.run(coro)


def _manager():
    from clob_wallet.config import build_manager, load_config

    return build_manager(load_config(_config_path))


def _mask(value: str, keep: int = 4) -> str:
    if len(value) <= keep:
        return "*" * len(value)
    return "*" * (len(value) - keep) + value[-keep:]


# ------------------------------------------------------------------
# wallet sub-commands
# ------------------------------------------------------------------

wallet_app = typer.Typer(
    name="wallet",
    help="Connect, inspect and disconnect the local wallet.",
    no_args_is_help=True,
)
app.add_typer(wallet_app, name="wallet")


@wallet_app.command("connect")
def wallet_connect():
    """Connect a wallet from its private key (stored locally, owner-only)."""
    mgr = _manager()
    if mgr.is_connected():
        console.print(f"[yellow]Replacing connected wallet {mgr.label()}.[/yellow]")
        typer.confirm("Continue?", abort=True)

    private_key = console.input("[bold]Private key (hex): [/bold]", password=True)
    try:
        record = mgr.connect(private_key)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    creds = _run(mgr.ensure_credentials())
    console.print(Panel(
        f"[bold green]Wallet connected![/bold green]\n\n"
        f"Address: [cyan]{record.address}[/cyan]\n"
        f"API credentials: "
        + ("[green]ready[/green]" if creds else "[red]unavailable[/red]")
        + f"\n\n[dim]Stored at {mgr.store.path}[/dim]",
        title="CLOB Wallet",
    ))


@wallet_app.command("disconnect")
def wallet_disconnect():
    """Forget the local wallet and its API credentials."""
    mgr = _manager()
    if not mgr.is_connected():
        console.print("[dim]No wallet connected.[/dim]")
        return
    typer.confirm(f"Disconnect {mgr.label()}?", abort=True)
    mgr.disconnect()
    console.print("[bold]Wallet disconnected.[/bold]")


@wallet_app.command("address")
def wallet_address():
    """Show the connected wallet address."""
    mgr = _manager()
    addr = mgr.address
    if addr is None:
        console.print("[yellow]No wallet found.[/yellow] Run 'clob-wallet wallet connect' first.")
        raise typer.Exit(1)

    console.print(Panel(
        f"[cyan]{addr}[/cyan]\n\n"
        f"[dim]Explorer: {mgr.chain.explorer_url}/address/{addr}[/dim]",
        title="Wallet Address",
    ))


@wallet_app.command("balance")
def wallet_balance():
    """Show the USDC balance of the connected wallet."""
    mgr = _manager()
    if not mgr.is_connected():
        console.print("[yellow]No wallet found.[/yellow] Run 'clob-wallet wallet connect' first.")
        raise typer.Exit(1)

    balance = _run(mgr.get_balance())
    console.print(f"[bold]{mgr.label()}:[/bold] {balance} USDC")


@wallet_app.command("status")
def wallet_status():
    """Show address, balance and credential status."""
    mgr = _manager()
    status = _run(mgr.refresh())

    table = Table(title="Wallet Status")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Connected", "[green]yes[/green]" if status.connected else "[red]no[/red]")
    table.add_row("Address", status.address or "-")
    table.add_row("Chain", mgr.chain.name)
    table.add_row("Balance", f"{status.balance} USDC")
    table.add_row(
        "API credentials",
        "[green]ready[/green]" if status.has_credentials else "[red]unavailable[/red]",
    )
    table.add_row("API key", status.api_key or "-")
    console.print(table)


@wallet_app.command("credentials")
def wallet_credentials():
    """Derive or create CLOB API credentials for the connected wallet."""
    mgr = _manager()
    if not mgr.is_connected():
        console.print("[yellow]No wallet found.[/yellow] Run 'clob-wallet wallet connect' first.")
        raise typer.Exit(1)

    creds = _run(mgr.ensure_credentials())
    if creds is None:
        console.print("[red]Unable to obtain CLOB API credentials.[/red]")
        raise typer.Exit(1)

    console.print(Panel(
        f"API key:    [cyan]{creds.api_key}[/cyan]\n"
        f"Secret:     [dim]{_mask(creds.api_secret)}[/dim]\n"
        f"Passphrase: [dim]{_mask(creds.api_passphrase)}[/dim]",
        title="CLOB API Credentials",
    ))


@wallet_app.command("sign")
def wallet_sign(
    method: str = typer.Argument(help="HTTP method (GET, POST, DELETE)"),
    path: str = typer.Argument(help="Request path including query string"),
    body: str = typer.Option(None, "--body", "-b", help="Exact request body to sign"),
):
    """Print L2 headers for one request (passphrase masked)."""
    from clob_wallet.clob.client import ClobClient

    client = ClobClient(_manager())
    headers = _run(client.build_headers(method, path, body))
    if headers is None:
        console.print("[red]Wallet is not authenticated.[/red]")
        raise typer.Exit(1)

    table = Table(title=f"{method.upper()} {path}")
    table.add_column("Header", style="cyan")
    table.add_column("Value")
    for name, value in headers.items():
        shown = _mask(value) if name == "POLY_PASSPHRASE" else value
        table.add_row(name, shown)
    console.print(table)


if __name__ == "__main__":
    app()
