"""Category management commands."""

import click
from splitboard.cli.error_handling import handle_domain_error
from splitboard.domain.category import CategoryService
from splitboard.domain.errors import DomainError, NotFoundError, category_path_not_found


def print_category_tree(categories: list[dict], indent: int = 0) -> None:
    """Recursively print category tree."""
    for cat in categories:
        prefix = "  " * indent
        click.echo(f"{prefix}{cat['name']} (ID: {cat['id']})")
        if cat.get("children"):
            print_category_tree(cat["children"], indent + 1)


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("list")
@click.option("--board", "board_id", type=int, required=True, help="Board ID")
@click.pass_context
def list_categories(ctx, board_id: int):
    """List a board's categories in tree format."""
    service = CategoryService(ctx.obj["db"])

    tree = service.get_tree(board_id).as_nested()
    if not tree:
        click.echo("No categories found.")
        return

    click.echo("\nCategories:")
    print_category_tree(tree)


@category_group.command("create")
@click.argument("name")
@click.option("--board", "board_id", type=int, required=True, help="Board ID")
@click.option("--parent", help="Parent category path (e.g., 'Healthcare')")
@click.option("--description", default="", help="Category description")
@click.option("--color", default="", help="Display color (e.g., '#4f46e5')")
@click.pass_context
def create_category(ctx, name: str, board_id: int, parent: str, description: str, color: str):
    """Create a new category at the end of its level."""
    service = CategoryService(ctx.obj["db"])

    try:
        category_id = service.create_category(
            board_id=board_id,
            name=name,
            parent_path=parent,
            description=description,
            color=color,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    parent_str = f" under '{parent}'" if parent else ""
    click.echo(f"Created category '{name}'{parent_str} (ID: {category_id})")


@category_group.command("delete")
@click.argument("path")
@click.option("--board", "board_id", type=int, required=True, help="Board ID")
@click.pass_context
def delete_category(ctx, path: str, board_id: int):
    """Delete a category, its subcategories and their allocations."""
    service = CategoryService(ctx.obj["db"])

    try:
        category = service.get_category_by_path(board_id, path)
        if category is None:
            raise NotFoundError(category_path_not_found(path))
        removed = service.delete_category(board_id, category.id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted '{path}' and {len(removed) - 1} subcategories")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
