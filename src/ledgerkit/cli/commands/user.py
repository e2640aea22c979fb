"""User management commands."""

import click
from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.domain.errors import DomainError
from ledgerkit.domain.user import UserService


@click.group()
def user_group():
    """Manage users."""
    pass


@user_group.command("create")
@click.argument("name", metavar="USER_NAME")
@click.pass_context
def create_user(ctx, name: str):
    """Create a new user.

    Examples:
        ledgerkit user create "alice"
    """
    service = UserService(ctx.obj["db"])
    try:
        user_id = service.create_user(name)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created user '{name.strip()}' (ID: {user_id})")


@user_group.command("list")
@click.pass_context
def list_users(ctx):
    """List all users."""
    service = UserService(ctx.obj["db"])

    users = service.list_users()
    if not users:
        click.echo("No users found.")
        return

    click.echo("\nUsers:")
    click.echo("-" * 40)
    for u in users:
        click.echo(f"ID: {u.id:3d} | {u.name}")


def register_commands(cli):
    """Register user commands with main CLI."""
    cli.add_command(user_group, name="user")
