"""Import run commands."""

import click
from ledgerkit.cli.account_resolution import resolve_account_or_exit, resolve_user_or_exit
from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.domain.account import AccountService
from ledgerkit.domain.entities import ImportRun
from ledgerkit.domain.errors import DomainError
from ledgerkit.domain.importer import ImportService


def echo_import_run(run: ImportRun, show_details: bool = True) -> None:
    """Print an import run summary, with per-row errors when requested."""
    click.echo(f"Import run {run.id}: {run.filename}")
    click.echo(f"  Imported: {run.imported_count}")
    click.echo(f"  Skipped: {run.skipped_count}")
    click.echo(f"  Restored: {run.restored_count}")
    click.echo(f"  Errors: {run.error_count}")
    if show_details and run.errors:
        for error in run.errors:
            click.echo(f"    line {error.line} [{error.phase.value}]: {error.message}")


@click.group()
def runs_group():
    """Inspect and revert import runs."""
    pass


@runs_group.command("list")
@click.option("--account", help="Only runs for this account (name or ID)")
@click.pass_context
def list_runs(ctx, account: str | None):
    """List import runs, newest first."""
    user_id = resolve_user_or_exit(ctx)
    db = ctx.obj["db"]

    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, AccountService(db), user_id, account)

    runs = ImportService(db).list_import_runs(user_id, account_id)
    if not runs:
        click.echo("No import runs found.")
        return

    click.echo("\nImport runs:")
    click.echo("-" * 80)
    for run in runs:
        click.echo(
            f"ID: {run.id:3d} | {run.created_at:%Y-%m-%d %H:%M} | {run.filename:24s} | "
            f"+{run.imported_count} ={run.skipped_count} ^{run.restored_count} !{run.error_count}"
        )


@runs_group.command("show")
@click.argument("run_id", type=int)
@click.pass_context
def show_run(ctx, run_id: int):
    """Show an import run with its errors and skipped keys."""
    user_id = resolve_user_or_exit(ctx)
    try:
        run = ImportService(ctx.obj["db"]).get_import_run(user_id, run_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    echo_import_run(run)
    click.echo(f"  Restore deleted: {'yes' if run.restore_deleted else 'no'}")
    if run.skipped_keys:
        click.echo("  Skipped keys:")
        for key in run.skipped_keys:
            click.echo(f"    {key}")


@runs_group.command("revert")
@click.argument("run_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def revert_run(ctx, run_id: int, yes: bool):
    """Delete every event an import run created.

    Events are soft-deleted and can be brought back by re-importing the
    file with --restore-deleted or with 'event restore'.
    """
    user_id = resolve_user_or_exit(ctx)
    service = ImportService(ctx.obj["db"])
    try:
        run = service.get_import_run(user_id, run_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(
        f"Delete the events created by import run {run.id} ({run.filename})?"
    ):
        click.echo("Revert cancelled.")
        return

    try:
        count = service.revert_import_run(user_id, run_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted {count} event{'s' if count != 1 else ''} from import run {run_id}")


def register_commands(cli):
    """Register import run commands with main CLI."""
    cli.add_command(runs_group, name="runs")
