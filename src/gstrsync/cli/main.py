"""Main CLI entry point."""

import logging

import click
from gstrsync.database.factories import create_sqlite_database

# Import and register all commands at module level
from gstrsync.cli.commands import (
    append,
    edit,
    import_cmd,
    init_states,
    ledger,
    party,
    process,
    reconcile,
)

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides GSTRSYNC_DB_PATH environment variable)",
    envvar="GSTRSYNC_DB_PATH",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """gstrsync - GSTR-2A/2B purchase register preparation.

    Import GSTR-2A and GSTR-2B exports, classify every invoice line into a
    GST rate slab, review the reverse-charge, mismatched and disallow views,
    and reconcile a 2A document against the matching 2B document.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
init_states.register_commands(cli)
party.register_commands(cli)
ledger.register_commands(cli)
import_cmd.register_commands(cli)
process.register_commands(cli)
edit.register_commands(cli)
append.register_commands(cli)
reconcile.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
