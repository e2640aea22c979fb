"""Posting canonical transactions to the ledger."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from ledgerkit.database.base import Database
from ledgerkit.domain.dedupe import compute_dedupe_key
from ledgerkit.domain.entities import Account, CanonicalTransaction, ResolvedLeg
from ledgerkit.domain.errors import DuplicateDedupeKeyError, PersistenceError
from ledgerkit.logging_config import get_logger

logger = get_logger(__name__)


class PostOutcome(str, Enum):
    """What happened to one transaction when it was posted."""

    CREATED = "created"
    SKIPPED = "skipped"
    RESTORED = "restored"
    FAILED = "failed"


@dataclass(frozen=True)
class PostResult:
    """Result of posting one transaction."""

    outcome: PostOutcome
    dedupe_key: str
    event_id: Optional[int] = None
    message: Optional[str] = None


class LedgerWriter:
    """Write transactions as events with legs, idempotently.

    The dedupe key decides whether a transaction is new. An active event
    with the same key is left alone; a soft-deleted one is either left
    alone or brought back, depending on ``restore_deleted``. New events and
    their legs are written in a single database transaction.
    """

    def __init__(self, db: Database):
        self.db = db

    def post_transaction(
        self,
        account: Account,
        transaction: CanonicalTransaction,
        resolved_legs: Sequence[ResolvedLeg],
        restore_deleted: bool = False,
    ) -> PostResult:
        if not resolved_legs:
            return PostResult(
                outcome=PostOutcome.FAILED,
                dedupe_key="",
                message="Transaction has no legs",
            )

        dedupe_key = compute_dedupe_key(
            account.id,
            transaction.external_id,
            transaction.effective_at,
            resolved_legs[0].amount_minor,
            transaction.description,
        )

        try:
            existing = self.db.get_event_by_dedupe_key(dedupe_key)
            if existing is not None:
                if existing.deleted_at is not None and restore_deleted:
                    if self.db.set_event_deleted_at(existing.id, None):
                        logger.info("event_restored", event_id=existing.id, dedupe_key=dedupe_key)
                        return PostResult(PostOutcome.RESTORED, dedupe_key, event_id=existing.id)
                    # Restored by another writer since the lookup
                logger.debug("event_skipped", event_id=existing.id, dedupe_key=dedupe_key)
                return PostResult(PostOutcome.SKIPPED, dedupe_key, event_id=existing.id)

            event_id = self.db.insert_event_with_legs(
                user_id=account.user_id,
                account_id=account.id,
                event_type=transaction.event_type,
                effective_at=transaction.effective_at,
                description=transaction.description,
                dedupe_key=dedupe_key,
                legs=resolved_legs,
                posted_at=transaction.posted_at,
                external_id=transaction.external_id,
                meta=transaction.meta,
            )
        except DuplicateDedupeKeyError:
            # Another writer inserted the same key between lookup and insert
            return PostResult(PostOutcome.SKIPPED, dedupe_key)
        except PersistenceError as e:
            return PostResult(PostOutcome.FAILED, dedupe_key, message=str(e))

        logger.info("event_created", event_id=event_id, dedupe_key=dedupe_key, legs=len(resolved_legs))
        return PostResult(PostOutcome.CREATED, dedupe_key, event_id=event_id)
