"""CLI entrypoint for the stable vault."""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Annotated, Awaitable, Callable, TypeVar

import typer
from pydantic import ValidationError
from rich.console import Console

from .engine.vault import Vault
from .errors import VaultError
from .logger import setup_logging
from .report.formatter import print_events, print_status
from .settings import Network, VaultSettings
from .state import AppState

T = TypeVar("T")

console = Console()

app = typer.Typer(
    add_completion=False,
    no_args_is_help=False,
    add_help_option=True,
    pretty_exceptions_enable=True,
    pretty_exceptions_short=True,
    pretty_exceptions_show_locals=False,
    rich_markup_mode="rich",
    help="Keep a stable/volatile vault on target and pay its dividends.",
)

CallerOption = Annotated[
    str | None,
    typer.Option(
        "--caller",
        help="Address the operation is invoked as. Defaults to caller_address, then the signer.",
    ),
]


def _build_logger() -> logging.Logger:
    return logging.getLogger("stable_vault")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to a TOML config file (can include [stable_vault] table).",
        ),
    ] = None,
    network: Annotated[
        Network | None,
        typer.Option("--network", "-n", help="Network to use (mainnet or sepolia)."),
    ] = None,
    rpc_url: Annotated[
        str | None,
        typer.Option("--rpc-url", help="RPC endpoint; overrides the network default."),
    ] = None,
    state_path: Annotated[
        Path | None,
        typer.Option("--state-path", help="Where the vault state file lives."),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            help="Override logging verbosity (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL).",
        ),
    ] = None,
    show_config: Annotated[
        bool,
        typer.Option(
            "--show-config",
            help="Print effective config (with secrets redacted) and exit.",
        ),
    ] = False,
):
    """Load configuration and prepare the vault for the chosen command."""
    if config_path:
        os.environ["STABLE_VAULT_CONFIG"] = str(config_path)

    init_kwargs: dict[str, Network | Path | str] = {}
    if network is not None:
        init_kwargs["network"] = network
    if rpc_url is not None:
        init_kwargs["rpc_url"] = rpc_url
    if state_path is not None:
        init_kwargs["state_path"] = state_path
    if log_level is not None:
        init_kwargs["log_level"] = log_level.upper()

    try:
        settings = VaultSettings(**init_kwargs)
    except ValidationError as e:
        raise typer.BadParameter(str(e)) from e

    setup_logging(settings.log_level)
    ctx.obj = AppState(settings=settings, logger=_build_logger())

    if show_config:
        typer.echo(json.dumps(settings.as_safe_dict(), indent=2))
        raise typer.Exit(code=0)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=0)


def _vault(state: AppState) -> Vault:
    try:
        return state.vault
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e


def _resolve_caller(state: AppState, caller: str | None) -> str:
    return caller or state.settings.caller_address or _vault(state).address


def _execute(state: AppState, operation: Callable[[Vault], Awaitable[T]]) -> T:
    """Run one vault operation and print the events it published."""
    vault = _vault(state)
    published_before = len(vault.events)
    try:
        result = asyncio.run(operation(vault))
    except VaultError as e:
        state.logger.debug("Operation failed", exc_info=True)
        console.print(f"[bold red]✗ {type(e).__name__}:[/] {e.reason}")
        raise typer.Exit(code=1) from e
    except ValueError as e:
        console.print(f"[bold red]✗ Configuration error:[/] {e}")
        raise typer.Exit(code=1) from e
    print_events(vault.events.events[published_before:], console)
    return result


@app.command()
def status(ctx: typer.Context) -> None:
    """Show balances, price, allocation and the dividend schedule."""
    state: AppState = ctx.obj
    vault_status = _execute(state, lambda vault: vault.status())
    print_status(vault_status, console)


@app.command()
def rebalance(ctx: typer.Context, caller: CallerOption = None) -> None:
    """Make one corrective trade towards the target allocation."""
    state: AppState = ctx.obj
    who = _resolve_caller(state, caller)
    outcome = _execute(state, lambda vault: vault.rebalance(who))
    if outcome.fill is None:
        console.print("[green]Already on target, no trade made[/]")


@app.command()
def distribute(ctx: typer.Context, caller: CallerOption = None) -> None:
    """Pay the due dividend to the principal."""
    state: AppState = ctx.obj
    who = _resolve_caller(state, caller)
    _execute(state, lambda vault: vault.distribute_dividends(who))


@app.command()
def wrap(
    ctx: typer.Context,
    amount: Annotated[
        int | None,
        typer.Option("--amount", help="Native units to wrap; default is all above the reserve."),
    ] = None,
) -> None:
    """Wrap native currency held by the vault into the volatile asset."""
    state: AppState = ctx.obj
    _execute(state, lambda vault: vault.wrap_native(amount))


@app.command()
def quote(ctx: typer.Context) -> None:
    """Refresh the informational market quote from the swap venue."""
    state: AppState = ctx.obj
    _execute(state, lambda vault: vault.refresh_market_quote())


@app.command("transfer-ownership")
def transfer_ownership(
    ctx: typer.Context,
    new_principal: Annotated[str, typer.Argument(help="Address of the new principal.")],
    caller: CallerOption = None,
    yes: Annotated[
        bool, typer.Option("--yes", "-y", help="Skip the confirmation prompt.")
    ] = False,
) -> None:
    """Hand the vault to a new principal. Takes effect immediately."""
    state: AppState = ctx.obj
    who = _resolve_caller(state, caller)
    if not yes:
        typer.confirm(
            f"Transfer ownership to {new_principal}? This cannot be undone by the current principal",
            abort=True,
        )
    _execute(state, lambda vault: vault.transfer_ownership(who, new_principal))


@app.command()
def close(
    ctx: typer.Context,
    caller: CallerOption = None,
    yes: Annotated[
        bool, typer.Option("--yes", "-y", help="Skip the confirmation prompt.")
    ] = False,
) -> None:
    """Sweep both balances to the principal."""
    state: AppState = ctx.obj
    who = _resolve_caller(state, caller)
    if not yes:
        typer.confirm("Send all stable and volatile balances to the principal?", abort=True)
    _execute(state, lambda vault: vault.close_account(who))


def run() -> None:
    """Entrypoint used by the console script."""
    app()


if __name__ == "__main__":
    run()
