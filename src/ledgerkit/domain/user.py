"""User domain service."""

from typing import Optional
from ledgerkit.database.base import Database
from ledgerkit.domain.entities import User as UserEntity
from ledgerkit.domain.errors import ConflictError, NotFoundError, ValidationError, user_not_found


class UserService:
    """Service for managing the users that own ledger data."""

    def __init__(self, db: Database):
        """Initialize user service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_user(self, name: str) -> int:
        """Create a new user.

        Raises:
            ValidationError: If the name is blank
            ConflictError: If a user with the same name exists
        """
        name = name.strip()
        if not name:
            raise ValidationError("User name must not be empty")
        for user in self.db.list_users():
            if user.name == name:
                raise ConflictError(f"User with name '{name}' already exists")
        return self.db.create_user(name)

    def get_user(self, user_id: int) -> Optional[UserEntity]:
        """Get user by ID."""
        return self.db.get_user(user_id)

    def require_user(self, user_id: int) -> UserEntity:
        """Get user by ID or raise NotFoundError."""
        user = self.db.get_user(user_id)
        if user is None:
            raise NotFoundError(user_not_found(user_id))
        return user

    def list_users(self) -> list[UserEntity]:
        """List all users."""
        return self.db.list_users()
