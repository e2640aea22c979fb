"""File import command."""

from pathlib import Path

import click
from ledgerkit.cli.account_resolution import resolve_account_or_exit, resolve_user_or_exit
from ledgerkit.cli.commands.runs import echo_import_run
from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.domain.account import AccountService
from ledgerkit.domain.entities import InstrumentKind
from ledgerkit.domain.errors import DomainError
from ledgerkit.domain.importer import ImportRequest, ImportService
from ledgerkit.domain.instrument import InstrumentDraft


def parse_instrument_draft(value: str, account_scoped: bool = False) -> InstrumentDraft:
    """Parse a CODE:KIND:MINOR_UNIT[:NAME] instrument definition.

    Raises:
        ValueError: If the definition is malformed
    """
    parts = value.split(":", 3)
    if len(parts) < 3:
        raise ValueError(f"Expected CODE:KIND:MINOR_UNIT[:NAME], got '{value}'")
    code, kind, minor_unit = (p.strip() for p in parts[:3])
    name = parts[3].strip() if len(parts) == 4 else None
    if not code:
        raise ValueError(f"Missing instrument code in '{value}'")
    try:
        kind_enum = InstrumentKind(kind.lower())
    except ValueError:
        choices = ", ".join(k.value for k in InstrumentKind)
        raise ValueError(f"Unknown instrument kind '{kind}' (expected one of: {choices})")
    try:
        minor = int(minor_unit)
    except ValueError:
        raise ValueError(f"Minor unit must be an integer, got '{minor_unit}'")
    return InstrumentDraft(
        code=code.upper(),
        kind=kind_enum,
        minor_unit=minor,
        name=name or None,
        account_scoped=account_scoped,
    )


@click.command("import")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--account", required=True, help="Account name or ID to import into")
@click.option(
    "--restore-deleted",
    is_flag=True,
    help="Bring back previously deleted events that appear in the file",
)
@click.option(
    "--new-instrument",
    "new_instruments",
    multiple=True,
    metavar="CODE:KIND:MINOR_UNIT[:NAME]",
    help="Create this instrument if the file uses it and it does not exist yet (repeatable)",
)
@click.option(
    "--scope-to-account",
    is_flag=True,
    help="Create --new-instrument instruments for this account only",
)
@click.pass_context
def import_file(
    ctx,
    file: str,
    account: str,
    restore_deleted: bool,
    new_instruments: tuple[str, ...],
    scope_to_account: bool,
):
    """Import a provider export into an account.

    The parser is chosen by the account's importer. Rows already in the
    ledger are skipped, so the same file can be imported again safely.

    Examples:
        ledgerkit --user alice import statement.csv --account Everyday
        ledgerkit --user alice import wise.csv --account Wise --new-instrument EUR:fiat:2
    """
    user_id = resolve_user_or_exit(ctx)
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, AccountService(db), user_id, account)

    try:
        drafts = tuple(parse_instrument_draft(v, scope_to_account) for v in new_instruments)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--new-instrument")

    path = Path(file)
    request = ImportRequest(
        user_id=user_id,
        account_id=account_id,
        filename=path.name,
        raw_content=path.read_text(encoding="utf-8-sig"),
        restore_deleted=restore_deleted,
        instrument_drafts=drafts,
    )

    try:
        run = ImportService(db).run_import(request)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo("\nImport complete:")
    echo_import_run(run)


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_file)
