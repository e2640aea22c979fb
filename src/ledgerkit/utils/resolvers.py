"""Utilities for resolving user and account names to IDs."""

from ledgerkit.domain.account import AccountService
from ledgerkit.domain.errors import NotFoundError
from ledgerkit.domain.user import UserService


def _as_id(value: str | int) -> int | None:
    if isinstance(value, int):
        return value
    try:
        return int(value)
    except (ValueError, TypeError):
        return None


def resolve_user(user_service: UserService, user: str | int) -> int:
    """Resolve user name or ID to user ID.

    A value that parses as an integer is treated as an ID.

    Raises:
        NotFoundError: If the user is not found
    """
    user_id = _as_id(user)
    if user_id is not None:
        if user_service.get_user(user_id) is None:
            raise NotFoundError(f"User ID {user_id} not found")
        return user_id

    for candidate in user_service.list_users():
        if candidate.name == user:
            return candidate.id

    raise NotFoundError(f"User '{user}' not found")


def resolve_account(account_service: AccountService, user_id: int, account: str | int) -> int:
    """Resolve account name or ID to the ID of an account owned by ``user_id``.

    Args:
        account_service: AccountService instance
        user_id: Owning user ID
        account: Account name (str) or ID (int or string representation of int)

    Returns:
        Account ID

    Raises:
        NotFoundError: If the user has no such account
    """
    account_id = _as_id(account)
    if account_id is not None:
        acc = account_service.get_account(account_id)
        if acc is None or acc.user_id != user_id:
            raise NotFoundError(f"Account ID {account_id} not found")
        return account_id

    for acc in account_service.list_accounts(user_id):
        if acc.name == account:
            return acc.id

    raise NotFoundError(f"Account '{account}' not found")
