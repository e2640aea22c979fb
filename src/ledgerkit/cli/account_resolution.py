"""CLI helpers for user and account resolution."""

from __future__ import annotations

import click
from ledgerkit.domain.account import AccountService
from ledgerkit.domain.user import UserService
from ledgerkit.utils.resolvers import resolve_account, resolve_user


def resolve_user_or_exit(ctx: click.Context) -> int:
    """Resolve the acting user from --user / LEDGERKIT_USER, or exit with a CLI error."""
    user = ctx.obj.get("user")
    if not user:
        click.echo("Error: No user selected. Pass --user or set LEDGERKIT_USER.", err=True)
        ctx.exit(1)
    try:
        return resolve_user(UserService(ctx.obj["db"]), user)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)


def resolve_account_or_exit(
    ctx: click.Context, account_service: AccountService, user_id: int, account: str | int
) -> int:
    """Resolve account name or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_account(account_service, user_id, account)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)
