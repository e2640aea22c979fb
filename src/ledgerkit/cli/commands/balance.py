"""Balance command."""

import click
from ledgerkit.cli.account_resolution import resolve_account_or_exit, resolve_user_or_exit
from ledgerkit.domain.account import AccountService
from ledgerkit.domain.balance import BalanceService, format_amount


@click.command("balance")
@click.option("--account", help="Only this account (name or ID)")
@click.pass_context
def show_balance(ctx, account: str | None):
    """Show current balances per account and instrument.

    Deleted events are not counted.
    """
    user_id = resolve_user_or_exit(ctx)
    db = ctx.obj["db"]

    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, AccountService(db), user_id, account)

    balances = BalanceService(db).get_balances(user_id, account_id)
    if not balances:
        click.echo("No balances found.")
        return

    click.echo(f"\n{'Account':24}  {'Instrument':10}  {'Balance':>16}")
    click.echo("-" * 56)
    for bal in balances:
        amount = format_amount(bal.amount_minor, bal.minor_unit)
        click.echo(f"{bal.account_name:24}  {bal.instrument_code:10}  {amount:>16}")


def register_commands(cli):
    """Register balance command with main CLI."""
    cli.add_command(show_balance)
