"""Account domain service."""

from typing import Optional
from ledgerkit.database.base import Database
from ledgerkit.domain.entities import Account as AccountEntity, ImporterKind
from ledgerkit.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_not_found,
    user_not_found,
)


class AccountService:
    """Service for managing accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self,
        user_id: int,
        name: str,
        importer: ImporterKind,
        cash_instrument_code: str,
    ) -> int:
        """Create a new account.

        Args:
            user_id: Owning user ID
            name: Account name, unique per user
            importer: Export format of the provider the account is fed from
            cash_instrument_code: Instrument code for single-currency rows (e.g. "AUD")

        Returns:
            Account ID

        Raises:
            NotFoundError: If the user does not exist
            ValidationError: If name or instrument code is blank
            ConflictError: If the user already has an account with this name
        """
        if self.db.get_user(user_id) is None:
            raise NotFoundError(user_not_found(user_id))

        name = name.strip()
        cash_instrument_code = cash_instrument_code.strip().upper()
        if not name:
            raise ValidationError("Account name must not be empty")
        if not cash_instrument_code:
            raise ValidationError("Cash instrument code must not be empty")

        for acc in self.db.list_accounts(user_id):
            if acc.name == name:
                raise ConflictError(f"Account with name '{name}' already exists")

        return self.db.create_account(
            user_id=user_id,
            name=name,
            importer=ImporterKind(importer),
            cash_instrument_code=cash_instrument_code,
        )

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def get_owned_account(self, user_id: int, account_id: int) -> AccountEntity:
        """Get an account that belongs to ``user_id``.

        Accounts owned by someone else are reported as missing.

        Raises:
            NotFoundError: If the account does not exist or is not owned by the user
        """
        account = self.db.get_account(account_id)
        if account is None or account.user_id != user_id:
            raise NotFoundError(account_not_found(account_id))
        return account

    def list_accounts(self, user_id: int) -> list[AccountEntity]:
        """List all accounts of a user.

        Returns:
            List of account entities
        """
        return self.db.list_accounts(user_id)
