"""Main CLI entry point."""

from pathlib import Path

import click
from ledgerkit.database.factories import create_sqlite_database
from ledgerkit.logging_config import LOG_FORMATS, LOG_LEVELS, configure_logging

# Import and register all commands at module level
from ledgerkit.cli.commands import (
    account,
    balance,
    event,
    import_cmd,
    instrument,
    runs,
    user,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides LEDGERKIT_DB_PATH environment variable)",
    envvar="LEDGERKIT_DB_PATH",
)
@click.option(
    "--user",
    "user",
    help="Acting user name or ID (or set LEDGERKIT_USER)",
    envvar="LEDGERKIT_USER",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="LEDGERKIT_LOG_LEVEL",
    help="Log level for messages written to stderr",
)
@click.option(
    "--log-format",
    type=click.Choice(LOG_FORMATS),
    default="console",
    show_default=True,
    envvar="LEDGERKIT_LOG_FORMAT",
    help="Log output format",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="LEDGERKIT_LOG_FILE",
    help="Also write log records to this file",
)
@click.pass_context
def cli(
    ctx,
    db_path: str | None,
    user: str | None,
    log_level: str,
    log_format: str,
    log_file: Path | None,
):
    """Ledgerkit - Ledger import and reconciliation.

    Import bank and brokerage exports into a double-entry style ledger.
    Re-importing the same or an overlapping file never duplicates history,
    and balances are derived from the recorded legs.
    """
    ctx.ensure_object(dict)
    configure_logging(level=log_level, log_format=log_format, log_file=log_file)
    ctx.obj["user"] = user

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
user.register_commands(cli)
account.register_commands(cli)
instrument.register_commands(cli)
import_cmd.register_commands(cli)
runs.register_commands(cli)
event.register_commands(cli)
balance.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
