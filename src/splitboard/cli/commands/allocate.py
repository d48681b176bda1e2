"""Allocation commands."""

import click
from splitboard.cli.error_handling import handle_domain_error
from splitboard.domain.amounts import effective_amount
from splitboard.domain.board import BoardService
from splitboard.domain.category_tree import CategoryTree
from splitboard.domain.distribution import DistributionService
from splitboard.domain.entities import ROOT_KEY, BoardSettings
from splitboard.domain.errors import (
    DomainError,
    InvalidAllocationSum,
    NotFoundError,
    category_path_not_found,
)
from splitboard.domain.validation import sums_to_hundred
from splitboard.utils.amount_format import (
    format_amount_with_symbol,
    format_percent,
    parse_percentage,
)

INDENT_SIZE = 4


def parse_assignment(assignment: str) -> tuple[str, float]:
    """Split a NAME=PERCENT argument."""
    name, sep, value = assignment.rpartition("=")
    if not sep or not name.strip():
        raise ValueError(f"Expected NAME=PERCENT, got '{assignment}'")
    return name.strip(), parse_percentage(value)


@click.group()
def allocate_group():
    """Edit and inspect allocations."""
    pass


@allocate_group.command("set")
@click.argument("assignments", nargs=-1, required=True, metavar="NAME=PERCENT...")
@click.option("--board", "board_id", type=int, required=True, help="Board ID")
@click.option("--user", "user_id", required=True, help="User ID")
@click.option("--parent", help="Parent category path of the level (default: root level)")
@click.pass_context
def set_allocations(ctx, assignments, board_id: int, user_id: str, parent: str | None):
    """Set percentages for categories of one level.

    Categories of the level not named keep their saved value; give 0 to
    clear one. The level is saved only if it adds up to 100%.

    Examples:
        splitboard allocate set --board 1 --user alice Healthcare=60 Education=40
        splitboard allocate set --board 1 --user alice --parent Healthcare Medicare=100
    """
    db = ctx.obj["db"]
    config = ctx.obj["config"]
    service = DistributionService(db)
    errors: list[Exception] = []

    try:
        tree = service.categories.get_tree(board_id)
        parent_id = None
        if parent:
            parent_category = tree.find_by_path(parent)
            if parent_category is None:
                raise NotFoundError(category_path_not_found(parent))
            parent_id = parent_category.id
        level = tree.children_of(parent_id)
        by_name = {cat.name: cat for cat in level}

        with service.open_session(
            board_id, user_id, save_delay=config.save_delay, on_error=errors.append
        ) as session:
            for assignment in assignments:
                name, value = parse_assignment(assignment)
                if name not in by_name:
                    path = f"{parent} > {name}" if parent else name
                    raise NotFoundError(category_path_not_found(path))
                session.set_allocation(by_name[name].id, value)
            saved = session.flush()
            total = session.total_allocated(level)
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)
        return

    if not sums_to_hundred(total):
        level_key = parent_id if parent_id is not None else ROOT_KEY
        handle_domain_error(ctx, InvalidAllocationSum(level_key, total))
        return
    if not saved:
        reason = f": {errors[-1]}" if errors else ""
        click.echo(f"Error: Could not save allocations{reason}", err=True)
        ctx.exit(1)
        return

    where = f"under '{parent}'" if parent else "at the root level"
    click.echo(f"Saved allocations {where} for {user_id}")


def _print_level(
    tree: CategoryTree,
    allocations: dict[int, float],
    settings: BoardSettings,
    budget: float,
    parent_id,
    indent: int,
) -> None:
    for cat in tree.children_of(parent_id):
        percentage = allocations.get(cat.id, 0)
        if percentage > 0:
            amount = effective_amount(cat.id, allocations, tree, budget)
            indent_str = " " * (INDENT_SIZE * indent)
            amount_str = format_amount_with_symbol(amount, settings.symbol, settings.symbol_position)
            category_width = 40 - (INDENT_SIZE * indent)
            click.echo(
                f"{indent_str}{cat.name:<{category_width}} {format_percent(percentage):>8} {amount_str:>16}"
            )
        _print_level(tree, allocations, settings, budget, cat.id, indent + 1)


@allocate_group.command("show")
@click.option("--board", "board_id", type=int, required=True, help="Board ID")
@click.option("--user", "user_id", required=True, help="User ID")
@click.option("--budget", "total_budget", type=float, help="Budget to split (default: user's budget)")
@click.pass_context
def show_allocations(ctx, board_id: int, user_id: str, total_budget: float | None):
    """Show a user's allocations with effective amounts."""
    db = ctx.obj["db"]
    service = DistributionService(db)
    boards = BoardService(db)

    try:
        board = boards.require_board(board_id)
        if total_budget is None:
            total_budget = boards.get_allocation_total(board_id, user_id)
        distribution = service.get_distribution(board_id, user_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if distribution is None or not distribution.allocations:
        click.echo("No allocations saved.")
        return

    settings = board.settings
    budget_str = format_amount_with_symbol(total_budget, settings.symbol, settings.symbol_position)
    click.echo(f"\nAllocations for {user_id} on '{board.name}' (budget {budget_str}):")
    click.echo("-" * 66)
    click.echo(f"{'Category':<40} {'Share':>8} {'Amount':>16}")
    click.echo("-" * 66)
    tree = service.categories.get_tree(board_id)
    _print_level(tree, distribution.as_map(), settings, total_budget, None, 0)


def register_commands(cli):
    """Register allocation commands with main CLI."""
    cli.add_command(allocate_group, name="allocate")
