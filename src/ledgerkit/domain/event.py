"""Event lifecycle domain service."""

from datetime import datetime, UTC
from typing import Optional

from ledgerkit.database.base import Database
from ledgerkit.domain.entities import Event, EventDetail, EventState
from ledgerkit.domain.errors import NotFoundError, event_not_found
from ledgerkit.logging_config import get_logger

logger = get_logger(__name__)


class EventService:
    """Service for reading, deleting and restoring ledger events.

    Deletion is soft: the event keeps its legs and dedupe key, so a later
    import of the same transaction finds it and either skips or restores it.
    """

    def __init__(self, db: Database):
        """Initialize event service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_event(self, event_id: int) -> Optional[EventDetail]:
        """Get an event with its legs, whatever its state."""
        event = self.db.get_event(event_id)
        if event is None:
            return None
        return EventDetail(event=event, legs=tuple(self.db.get_legs(event_id)))

    def get_owned_event(self, user_id: int, event_id: int) -> EventDetail:
        """Get an event owned by the user.

        Raises:
            NotFoundError: If the event does not exist or is not owned by the user
        """
        detail = self.get_event(event_id)
        if detail is None or detail.event.user_id != user_id:
            raise NotFoundError(event_not_found(event_id))
        return detail

    def list_events(
        self,
        user_id: int,
        *,
        state: Optional[EventState],
        account_id: Optional[int] = None,
    ) -> list[Event]:
        """List events, newest first.

        Args:
            user_id: Owning user ID
            state: ``EventState.ACTIVE``, ``EventState.DELETED``, or None for both
            account_id: Optional account filter

        Returns:
            List of event entities
        """
        return self.db.list_events(user_id, state=state, account_id=account_id)

    def soft_delete_event(self, user_id: int, event_id: int) -> bool:
        """Mark an event as deleted. Its legs stop counting toward balances.

        Returns:
            True if the event was active, False if it was already deleted

        Raises:
            NotFoundError: If the event does not exist or is not owned by the user
        """
        detail = self.get_owned_event(user_id, event_id)
        changed = self.db.set_event_deleted_at(detail.event.id, datetime.now(UTC))
        if changed:
            logger.info("event_deleted", event_id=event_id)
        return changed

    def restore_event(self, user_id: int, event_id: int) -> bool:
        """Clear an event's deleted mark.

        Returns:
            True if the event was deleted, False if it was already active

        Raises:
            NotFoundError: If the event does not exist or is not owned by the user
        """
        detail = self.get_owned_event(user_id, event_id)
        changed = self.db.set_event_deleted_at(detail.event.id, None)
        if changed:
            logger.info("event_restored", event_id=event_id)
        return changed
