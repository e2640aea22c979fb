"""Instrument management commands."""

import click
from ledgerkit.cli.account_resolution import resolve_account_or_exit, resolve_user_or_exit
from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.domain.account import AccountService
from ledgerkit.domain.entities import InstrumentKind
from ledgerkit.domain.errors import DomainError
from ledgerkit.domain.instrument import InstrumentService

KIND_CHOICES = [k.value for k in InstrumentKind]


@click.group()
def instrument_group():
    """Manage instruments (currencies, securities)."""
    pass


@instrument_group.command("create")
@click.argument("code", metavar="CODE")
@click.option("--kind", type=click.Choice(KIND_CHOICES), default="fiat", show_default=True)
@click.option("--minor-unit", type=int, required=True, help="Decimal places of the smallest unit")
@click.option("--name", help="Display name (defaults to the code)")
@click.option("--account", help="Restrict the instrument to one account (name or ID)")
@click.pass_context
def create_instrument(ctx, code: str, kind: str, minor_unit: int, name: str | None, account: str | None):
    """Create a new instrument.

    Examples:
        ledgerkit --user alice instrument create AUD --minor-unit 2
        ledgerkit --user alice instrument create VDAL --kind security --minor-unit 0 --account Vanguard
    """
    user_id = resolve_user_or_exit(ctx)
    db = ctx.obj["db"]

    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, AccountService(db), user_id, account)

    try:
        instrument_id = InstrumentService(db).create_instrument(
            user_id=user_id,
            code=code,
            kind=InstrumentKind(kind),
            minor_unit=minor_unit,
            name=name,
            account_id=account_id,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created instrument '{code.strip().upper()}' (ID: {instrument_id})")


@instrument_group.command("list")
@click.option("--account", help="Show the instruments visible to one account (name or ID)")
@click.pass_context
def list_instruments(ctx, account: str | None):
    """List instruments."""
    user_id = resolve_user_or_exit(ctx)
    db = ctx.obj["db"]

    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, AccountService(db), user_id, account)

    instruments = InstrumentService(db).list_instruments(user_id, account_id)
    if not instruments:
        click.echo("No instruments found.")
        return

    click.echo("\nInstruments:")
    click.echo("-" * 70)
    for inst in instruments:
        scope = f"account {inst.account_id}" if inst.account_id is not None else "all accounts"
        click.echo(
            f"ID: {inst.id:3d} | {inst.code:8s} | {inst.kind.value:8s} | "
            f"minor unit {inst.minor_unit} | {inst.name} ({scope})"
        )


@instrument_group.command("update")
@click.argument("instrument_id", type=int)
@click.option("--kind", type=click.Choice(KIND_CHOICES))
@click.option("--minor-unit", type=int)
@click.option("--name")
@click.pass_context
def update_instrument(ctx, instrument_id: int, kind: str | None, minor_unit: int | None, name: str | None):
    """Update an instrument's kind, minor unit or name.

    The minor unit cannot change once amounts have been recorded in the
    instrument.
    """
    user_id = resolve_user_or_exit(ctx)
    if kind is None and minor_unit is None and name is None:
        click.echo("Error: Nothing to update. Pass --kind, --minor-unit or --name.", err=True)
        ctx.exit(1)

    try:
        InstrumentService(ctx.obj["db"]).update_instrument(
            user_id,
            instrument_id,
            kind=InstrumentKind(kind) if kind else None,
            minor_unit=minor_unit,
            name=name,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated instrument {instrument_id}")


def register_commands(cli):
    """Register instrument commands with main CLI."""
    cli.add_command(instrument_group, name="instrument")
