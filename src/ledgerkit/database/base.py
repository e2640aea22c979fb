"""Abstract database interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Optional, Sequence

# Import entities directly to avoid pulling in the domain services
from ledgerkit.domain.entities import (
    Account,
    Balance,
    Category,
    Event,
    EventState,
    EventType,
    ImporterKind,
    ImportRun,
    Instrument,
    InstrumentKind,
    Leg,
    ResolvedLeg,
    User,
)


class Database(ABC):
    """Abstract database interface for ledgerkit."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # User operations
    @abstractmethod
    def create_user(self, name: str) -> int:
        """Create a user. Returns user ID."""
        pass

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        pass

    @abstractmethod
    def list_users(self) -> list[User]:
        """List all users."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self, user_id: int, name: str, importer: ImporterKind, cash_instrument_code: str
    ) -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def list_accounts(self, user_id: int) -> list[Account]:
        """List accounts owned by a user."""
        pass

    # Instrument operations
    @abstractmethod
    def create_instrument(
        self,
        user_id: int,
        code: str,
        kind: InstrumentKind,
        minor_unit: int,
        name: str,
        account_id: Optional[int] = None,
    ) -> int:
        """Create an instrument. Returns instrument ID."""
        pass

    @abstractmethod
    def get_instrument(self, instrument_id: int) -> Optional[Instrument]:
        """Get instrument by ID."""
        pass

    @abstractmethod
    def list_instruments(self, user_id: int, account_id: Optional[int] = None) -> list[Instrument]:
        """List instruments visible in a scope.

        With ``account_id`` None, every instrument the user owns is returned.
        Otherwise user-wide instruments plus those scoped to that account.
        """
        pass

    @abstractmethod
    def update_instrument(
        self,
        instrument_id: int,
        kind: Optional[InstrumentKind] = None,
        minor_unit: Optional[int] = None,
        name: Optional[str] = None,
    ) -> None:
        """Update instrument fields."""
        pass

    @abstractmethod
    def count_legs_for_instrument(self, instrument_id: int) -> int:
        """Count legs denominated in an instrument."""
        pass

    # Category operations
    @abstractmethod
    def create_category(self, user_id: int, name: str, parent_id: Optional[int] = None) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def list_categories(self, user_id: int) -> list[Category]:
        """List every category owned by a user."""
        pass

    # Event operations
    @abstractmethod
    def get_event(self, event_id: int) -> Optional[Event]:
        """Get event by ID, whatever its state."""
        pass

    @abstractmethod
    def get_event_by_dedupe_key(self, dedupe_key: str) -> Optional[Event]:
        """Get event by dedupe key, whatever its state."""
        pass

    @abstractmethod
    def insert_event_with_legs(
        self,
        user_id: int,
        account_id: int,
        event_type: EventType,
        effective_at: datetime,
        description: str,
        dedupe_key: str,
        legs: Sequence[ResolvedLeg],
        posted_at: Optional[datetime] = None,
        external_id: Optional[str] = None,
        meta: Optional[dict[str, Any]] = None,
    ) -> int:
        """Insert an event and all of its legs in one transaction.

        Returns event ID.

        Raises:
            DuplicateDedupeKeyError: If an event with the dedupe key exists
            PersistenceError: If the write fails for any other reason; no
                row of the event is left behind
        """
        pass

    @abstractmethod
    def set_event_deleted_at(self, event_id: int, deleted_at: Optional[datetime]) -> bool:
        """Set or clear an event's soft-delete timestamp.

        Returns True if the event changed state.
        """
        pass

    @abstractmethod
    def soft_delete_import_run_events(self, import_run_id: int, deleted_at: datetime) -> int:
        """Soft-delete every active event created by an import run. Returns the count."""
        pass

    @abstractmethod
    def list_events(
        self,
        user_id: int,
        *,
        state: Optional[EventState],
        account_id: Optional[int] = None,
    ) -> list[Event]:
        """List events in a lifecycle state (None for every state)."""
        pass

    @abstractmethod
    def get_legs(self, event_id: int) -> list[Leg]:
        """Get the legs of an event in insertion order."""
        pass

    # Import run operations
    @abstractmethod
    def create_import_run(
        self,
        user_id: int,
        account_id: int,
        filename: str,
        imported_count: int,
        skipped_count: int,
        restored_count: int,
        error_count: int,
        skipped_keys: Sequence[str],
        errors: Sequence[dict[str, Any]],
        restore_deleted: bool,
        created_event_ids: Sequence[int] = (),
    ) -> int:
        """Persist an import run and link the events it created. Returns run ID."""
        pass

    @abstractmethod
    def get_import_run(self, import_run_id: int) -> Optional[ImportRun]:
        """Get import run by ID."""
        pass

    @abstractmethod
    def list_import_runs(self, user_id: int, account_id: Optional[int] = None) -> list[ImportRun]:
        """List import runs, newest first."""
        pass

    # Balance operations
    @abstractmethod
    def get_balances(self, user_id: int, account_id: Optional[int] = None) -> list[Balance]:
        """Sum leg amounts of active events grouped by (account, instrument)."""
        pass
