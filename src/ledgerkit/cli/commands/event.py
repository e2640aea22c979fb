"""Event commands."""

import click
from ledgerkit.cli.account_resolution import resolve_account_or_exit, resolve_user_or_exit
from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.domain.account import AccountService
from ledgerkit.domain.balance import format_amount
from ledgerkit.domain.entities import EventState
from ledgerkit.domain.errors import DomainError
from ledgerkit.domain.event import EventService
from ledgerkit.domain.instrument import InstrumentService

STATE_CHOICES = {
    "active": EventState.ACTIVE,
    "deleted": EventState.DELETED,
    "all": None,
}


@click.group()
def event_group():
    """View, delete and restore ledger events."""
    pass


@event_group.command("list")
@click.option("--account", help="Only events of this account (name or ID)")
@click.option(
    "--state",
    type=click.Choice(list(STATE_CHOICES)),
    default="active",
    show_default=True,
)
@click.pass_context
def list_events(ctx, account: str | None, state: str):
    """List events, newest first."""
    user_id = resolve_user_or_exit(ctx)
    db = ctx.obj["db"]

    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, AccountService(db), user_id, account)

    events = EventService(db).list_events(user_id, state=STATE_CHOICES[state], account_id=account_id)
    if not events:
        click.echo("No events found.")
        return

    click.echo(f"\n{'ID':>4}  {'Date':10}  {'Type':12}  {'State':7}  Description")
    click.echo("-" * 80)
    for ev in events:
        click.echo(
            f"{ev.id:>4}  {ev.effective_at:%Y-%m-%d}  {ev.event_type.value:12}  "
            f"{ev.state.value:7}  {ev.description}"
        )


@event_group.command("show")
@click.argument("event_id", type=int)
@click.pass_context
def show_event(ctx, event_id: int):
    """Show an event with its legs."""
    user_id = resolve_user_or_exit(ctx)
    db = ctx.obj["db"]
    try:
        detail = EventService(db).get_owned_event(user_id, event_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    ev = detail.event
    click.echo(f"Event {ev.id}: {ev.description}")
    click.echo(f"  Type: {ev.event_type.value}")
    click.echo(f"  Effective: {ev.effective_at:%Y-%m-%d}")
    if ev.posted_at is not None:
        click.echo(f"  Posted: {ev.posted_at:%Y-%m-%d}")
    click.echo(f"  State: {ev.state.value}")
    if ev.external_id:
        click.echo(f"  External ID: {ev.external_id}")
    click.echo(f"  Dedupe key: {ev.dedupe_key}")
    if ev.import_run_id is not None:
        click.echo(f"  Import run: {ev.import_run_id}")

    instruments = InstrumentService(db)
    click.echo("  Legs:")
    for leg in detail.legs:
        inst = instruments.get_instrument(leg.instrument_id)
        amount = format_amount(leg.amount_minor, inst.minor_unit)
        note = f"  {leg.description}" if leg.description else ""
        click.echo(f"    {amount:>16} {inst.code}{note}")


@event_group.command("delete")
@click.argument("event_id", type=int)
@click.pass_context
def delete_event(ctx, event_id: int):
    """Soft-delete an event. Its legs stop counting toward balances."""
    user_id = resolve_user_or_exit(ctx)
    try:
        changed = EventService(ctx.obj["db"]).soft_delete_event(user_id, event_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    if changed:
        click.echo(f"Deleted event {event_id}")
    else:
        click.echo(f"Event {event_id} is already deleted")


@event_group.command("restore")
@click.argument("event_id", type=int)
@click.pass_context
def restore_event(ctx, event_id: int):
    """Restore a deleted event."""
    user_id = resolve_user_or_exit(ctx)
    try:
        changed = EventService(ctx.obj["db"]).restore_event(user_id, event_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    if changed:
        click.echo(f"Restored event {event_id}")
    else:
        click.echo(f"Event {event_id} is not deleted")


def register_commands(cli):
    """Register event commands with main CLI."""
    cli.add_command(event_group, name="event")
