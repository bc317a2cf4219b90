"""Rich console formatting for vault status and operation results."""

from __future__ import annotations

from datetime import datetime, timezone

from rich.columns import Columns
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table

from ..engine.dividends import format_time_remaining
from ..engine.vault import VaultStatus
from ..events import VaultEvent
from ..units import format_units


def _truncate_address(address: str | None) -> str:
    """Truncate address for display."""
    if not address:
        return "[dim]<unset>[/]"
    return f"{address[:10]}...{address[-4:]}"


def _format_timestamp(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime(
        "%Y-%m-%d %H:%M:%S UTC"
    )


def _format_amount(amount: int) -> str:
    return f"{format_units(amount)} [dim]({amount:,})[/]"


def build_status_panel(status: VaultStatus) -> Panel:
    """Two-column dashboard: identity/schedule on the left, holdings on the right."""
    vault_table = Table(show_header=False, box=None, padding=(0, 1))
    vault_table.add_column("Key", style="dim")
    vault_table.add_column("Value", style="cyan")
    vault_table.add_row("Address", _truncate_address(status.vault_address))
    vault_table.add_row("Principal", _truncate_address(status.principal))
    vault_table.add_row("Version", str(status.version))
    vault_table.add_row("Next dividend", _format_timestamp(status.next_dividend_time))
    due_in = (
        format_time_remaining(status.seconds_until_dividend)
        if status.seconds_until_dividend
        else "[green]due now[/]"
    )
    vault_table.add_row("Due in", due_in)

    vault_panel = Panel(vault_table, title="[bold]Vault[/]", border_style="blue")

    holdings_table = Table(show_header=False, box=None, padding=(0, 1))
    holdings_table.add_column("Key", style="dim")
    holdings_table.add_column("Value", style="green")
    holdings_table.add_row("Stable", _format_amount(status.stable_balance))
    holdings_table.add_row("Volatile", _format_amount(status.volatile_balance))
    holdings_table.add_row("Native", _format_amount(status.native_balance))
    holdings_table.add_row("Oracle price", format_units(status.price))
    if status.last_market_quote is not None:
        holdings_table.add_row("Market quote", format_units(status.last_market_quote))
    holdings_table.add_row("Total value", format_units(status.total_value))
    allocation = (
        f"{status.stable_percentage}%"
        if status.stable_percentage is not None
        else "[dim]<empty>[/]"
    )
    holdings_table.add_row(
        "Stable share", f"{allocation} (target {status.target_stable_percentage}%)"
    )

    holdings_panel = Panel(
        holdings_table, title="[bold]Holdings[/]", border_style="green"
    )

    return Panel(
        Group(Columns([vault_panel, holdings_panel], equal=True, expand=True)),
        title="[bold white]Stable Vault[/]",
        border_style="white",
        padding=(1, 2),
    )


def build_events_table(events: list[VaultEvent]) -> Table:
    table = Table(title=None, expand=True, show_lines=False)
    table.add_column("Event", style="cyan", no_wrap=True)
    table.add_column("Fields", style="yellow")
    for event in events:
        fields = ", ".join(
            f"{key}={value}" for key, value in event.to_dict().items() if key != "event"
        )
        table.add_row(event.name, fields)
    return table


def print_status(status: VaultStatus, console: Console | None = None) -> None:
    console = console or Console()
    console.print()
    console.print(build_status_panel(status))
    console.print()


def print_events(events: list[VaultEvent], console: Console | None = None) -> None:
    console = console or Console()
    if not events:
        console.print("[dim]No events published[/]")
        return
    console.print(build_events_table(events))
