"""Main CLI entry point."""

import click
from splitboard.database.factories import create_sqlite_database
from splitboard.utils.config import DB_PATH_ENV, LOG_LEVEL_ENV, load_config
from splitboard.utils.logger import setup_logging

# Import and register all commands at module level
from splitboard.cli.commands import allocate, board, category, summary


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help=f"Path to database file (overrides {DB_PATH_ENV} environment variable)",
    envvar=DB_PATH_ENV,
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help=f"Log level (overrides {LOG_LEVEL_ENV} environment variable)",
    envvar=LOG_LEVEL_ENV,
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str | None):
    """Splitboard - split a budget across a tree of categories.

    Every level of the tree (siblings under one parent) splits 100% of the
    share its parent received.
    """
    ctx.ensure_object(dict)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        try:
            config = load_config()
        except ValueError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)
        if log_level:
            config.log_level = log_level.upper()
        setup_logging(config.log_level)

        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["config"] = config
        ctx.call_on_close(db.disconnect)


# Register all commands
board.register_commands(cli)
category.register_commands(cli)
allocate.register_commands(cli)
summary.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
