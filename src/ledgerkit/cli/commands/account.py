"""Account management commands."""

import click
from ledgerkit.cli.account_resolution import resolve_user_or_exit
from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.domain.account import AccountService
from ledgerkit.domain.entities import ImporterKind
from ledgerkit.domain.errors import DomainError


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option(
    "--importer",
    required=True,
    type=click.Choice([k.value for k in ImporterKind]),
    help="Export format the account's files come in",
)
@click.option(
    "--cash-instrument",
    default="AUD",
    show_default=True,
    help="Instrument code for the account's cash amounts",
)
@click.pass_context
def create_account(ctx, name: str, importer: str, cash_instrument: str):
    """Create a new account.

    Examples:
        ledgerkit --user alice account create "Everyday" --importer commbank_csv
        ledgerkit --user alice account create "Wise" --importer wise_csv --cash-instrument EUR
    """
    user_id = resolve_user_or_exit(ctx)
    service = AccountService(ctx.obj["db"])

    try:
        account_id = service.create_account(
            user_id=user_id,
            name=name,
            importer=ImporterKind(importer),
            cash_instrument_code=cash_instrument,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created account '{name.strip()}' (ID: {account_id})")


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List the user's accounts."""
    user_id = resolve_user_or_exit(ctx)
    service = AccountService(ctx.obj["db"])

    accounts = service.list_accounts(user_id)
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 60)
    for acc in accounts:
        click.echo(
            f"ID: {acc.id:3d} | {acc.name:20s} | {acc.importer.value:14s} | {acc.cash_instrument_code}"
        )


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
