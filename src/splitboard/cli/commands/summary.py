"""Summary commands."""

import click
from splitboard.cli.error_handling import handle_domain_error
from splitboard.domain.board import BoardService
from splitboard.domain.category import CategoryService
from splitboard.domain.entities import ROOT_KEY
from splitboard.domain.errors import (
    DomainError,
    NotFoundError,
    ValidationError,
    category_path_not_found,
)
from splitboard.domain.statistics import SORT_BY_AMOUNT, SORT_BY_COVERAGE, StatisticsService
from splitboard.utils.amount_format import format_amount_with_symbol, format_percent


@click.command("summary")
@click.option("--board", "board_id", type=int, required=True, help="Board ID")
@click.option("--level", help="Category path whose subcategories to summarize (default: root level)")
@click.option("--all", "all_levels", is_flag=True, help="Summarize every category regardless of level")
@click.option(
    "--sort",
    "sort_by",
    type=click.Choice([SORT_BY_AMOUNT, SORT_BY_COVERAGE]),
    default=SORT_BY_AMOUNT,
    show_default=True,
    help="Sort by average amount or by response coverage",
)
@click.pass_context
def summary(ctx, board_id: int, level: str | None, all_levels: bool, sort_by: str):
    """Show how participants split the budget on average."""
    db = ctx.obj["db"]
    service = StatisticsService(db)

    try:
        if level and all_levels:
            raise ValidationError("--level cannot be combined with --all")
        board = BoardService(db).require_board(board_id)
        scope = None if all_levels else ROOT_KEY
        if level:
            category = CategoryService(db).get_category_by_path(board_id, level)
            if category is None:
                raise NotFoundError(category_path_not_found(level))
            scope = category.id
        participants = service.participant_count(board_id)
        rows = service.build_rows(
            board_id, scope_parent_id=scope, sort_by=sort_by, participant_count=participants
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not rows:
        click.echo("No allocations found.")
        return

    settings = board.settings

    def fmt(value):
        return format_amount_with_symbol(value, settings.symbol, settings.symbol_position)

    click.echo(f"\nAllocation Summary ({participants} participants):")
    click.echo("-" * 80)
    click.echo(f"{'Category':<30} {'Avg Share':>10} {'Avg Amount':>14} {'Total':>14} {'Responses':>9}")
    click.echo("-" * 80)
    for row in rows:
        click.echo(
            f"{row.name:<30} {format_percent(row.average_percentage):>10} "
            f"{fmt(row.average_amount):>14} {fmt(row.total_amount):>14} "
            f"{row.total_responses:>4}/{participants:<4}"
        )


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(summary)
