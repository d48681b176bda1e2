"""Board management commands."""

import click
from splitboard.cli.error_handling import handle_domain_error
from splitboard.domain.board import BoardService
from splitboard.domain.entities import BoardSettings, SymbolPosition
from splitboard.domain.errors import DomainError
from splitboard.utils.amount_format import format_amount_with_symbol

SYMBOL_POSITIONS = [p.value for p in SymbolPosition]


def describe_range(settings: BoardSettings) -> str:
    """Human-readable budget range of a board."""
    def fmt(value):
        return format_amount_with_symbol(value, settings.symbol, settings.symbol_position)

    if settings.min_allocation > 0 and settings.max_allocation > 0:
        return f"{fmt(settings.min_allocation)} - {fmt(settings.max_allocation)} {settings.unit}"
    if settings.min_allocation > 0:
        return f"at least {fmt(settings.min_allocation)} {settings.unit}"
    if settings.max_allocation > 0:
        return f"at most {fmt(settings.max_allocation)} {settings.unit}"
    return "no limits"


@click.group()
def board_group():
    """Manage boards."""
    pass


@board_group.command("create")
@click.argument("name", metavar="BOARD_NAME")
@click.option("--description", default="", help="Board description")
@click.option("--unit", default="USD", show_default=True, help="Unit of the budget")
@click.option("--symbol", default="$", show_default=True, help="Currency symbol")
@click.option("--symbol-position", type=click.Choice(SYMBOL_POSITIONS), default="prefix", show_default=True)
@click.option("--min", "min_allocation", type=float, default=0, help="Minimum participant budget (0 = none)")
@click.option("--max", "max_allocation", type=float, default=0, help="Maximum participant budget (0 = none)")
@click.pass_context
def create_board(ctx, name, description, unit, symbol, symbol_position, min_allocation, max_allocation):
    """Create a new board.

    Examples:
        splitboard board create "City Budget 2026"
        splitboard board create "Team Offsite" --unit EUR --symbol € --symbol-position suffix
    """
    service = BoardService(ctx.obj["db"])
    settings = BoardSettings(
        unit=unit,
        symbol=symbol,
        symbol_position=SymbolPosition(symbol_position),
        min_allocation=min_allocation,
        max_allocation=max_allocation,
    )
    try:
        board_id = service.create_board(name=name, description=description, settings=settings)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Created board '{name}' (ID: {board_id})")


@board_group.command("list")
@click.pass_context
def list_boards(ctx):
    """List all boards."""
    service = BoardService(ctx.obj["db"])

    boards = service.list_boards()
    if not boards:
        click.echo("No boards found.")
        return

    click.echo("\nBoards:")
    click.echo("-" * 60)
    for b in boards:
        click.echo(f"ID: {b.id:3d} | {b.name:30s} | {b.settings.unit}")


@board_group.command("show")
@click.argument("board_id", type=int)
@click.pass_context
def show_board(ctx, board_id: int):
    """Show a board's settings."""
    service = BoardService(ctx.obj["db"])
    try:
        b = service.require_board(board_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Board: {b.name} (ID: {b.id})")
    if b.description:
        click.echo(f"Description: {b.description}")
    click.echo(f"Unit: {b.settings.unit}")
    click.echo(f"Symbol: {b.settings.symbol} ({b.settings.symbol_position.value})")
    click.echo(f"Budget range: {describe_range(b.settings)}")


@board_group.command("delete")
@click.argument("board_id", type=int)
@click.pass_context
def delete_board(ctx, board_id: int):
    """Delete a board with all its categories and allocations.

    Examples:
        splitboard board delete 1
    """
    service = BoardService(ctx.obj["db"])
    try:
        b = service.require_board(board_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not click.confirm(f"Are you sure you want to delete board '{b.name}' (ID: {board_id})?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_board(board_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted board '{b.name}'")


@board_group.command("settings")
@click.argument("board_id", type=int)
@click.option("--unit", help="Unit of the budget")
@click.option("--symbol", help="Currency symbol")
@click.option("--symbol-position", type=click.Choice(SYMBOL_POSITIONS))
@click.option("--min", "min_allocation", type=float, help="Minimum participant budget (0 = none)")
@click.option("--max", "max_allocation", type=float, help="Maximum participant budget (0 = none)")
@click.pass_context
def update_settings(ctx, board_id, unit, symbol, symbol_position, min_allocation, max_allocation):
    """Update a board's settings.

    Participant budgets outside a new range are clamped into it.
    """
    service = BoardService(ctx.obj["db"])
    try:
        settings = service.update_settings(
            board_id,
            unit=unit,
            symbol=symbol,
            symbol_position=symbol_position,
            min_allocation=min_allocation,
            max_allocation=max_allocation,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Updated board {board_id}: budget range {describe_range(settings)}")


@board_group.command("budget")
@click.argument("board_id", type=int)
@click.option("--user", "user_id", required=True, help="User ID")
@click.argument("amount", type=float, required=False)
@click.pass_context
def budget(ctx, board_id: int, user_id: str, amount: float | None):
    """Show or set a participant's total budget.

    Examples:
        splitboard board budget 1 --user alice
        splitboard board budget 1 --user alice 250
    """
    service = BoardService(ctx.obj["db"])
    try:
        b = service.require_board(board_id)
        if amount is not None:
            service.set_allocation_total(board_id, user_id, amount)
        total = service.get_allocation_total(board_id, user_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    formatted = format_amount_with_symbol(total, b.settings.symbol, b.settings.symbol_position)
    verb = "set to" if amount is not None else "is"
    click.echo(f"Budget for {user_id} on '{b.name}' {verb} {formatted}")


def register_commands(cli):
    """Register board commands with main CLI."""
    cli.add_command(board_group, name="board")
