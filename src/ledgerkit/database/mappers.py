"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, making it easy to change when
the database schema changes. SQLite hands back naive datetimes, so every
timestamp is re-attached to UTC on the way out.
"""

from datetime import datetime, timezone
from typing import Optional

from ledgerkit.domain import entities as domain
from ledgerkit.domain.errors import ImportErrorRecord
from ledgerkit.database.models import (
    Account as ORMAccount,
    Category as ORMCategory,
    Event as ORMEvent,
    ImportRun as ORMImportRun,
    Instrument as ORMInstrument,
    Leg as ORMLeg,
    User as ORMUser,
)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def user_to_domain(orm_user: ORMUser) -> domain.User:
    """Convert SQLAlchemy User model to domain User entity."""
    return domain.User(
        id=orm_user.id,
        name=orm_user.name,
        created_at=_as_utc(orm_user.created_at),
    )


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        user_id=orm_account.user_id,
        name=orm_account.name,
        importer=domain.ImporterKind(orm_account.importer),
        cash_instrument_code=orm_account.cash_instrument_code,
        created_at=_as_utc(orm_account.created_at),
    )


def instrument_to_domain(orm_instrument: ORMInstrument) -> domain.Instrument:
    """Convert SQLAlchemy Instrument model to domain Instrument entity."""
    return domain.Instrument(
        id=orm_instrument.id,
        user_id=orm_instrument.user_id,
        account_id=orm_instrument.account_id,
        code=orm_instrument.code,
        kind=domain.InstrumentKind(orm_instrument.kind),
        minor_unit=orm_instrument.minor_unit,
        name=orm_instrument.name,
        created_at=_as_utc(orm_instrument.created_at),
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        user_id=orm_category.user_id,
        name=orm_category.name,
        parent_id=orm_category.parent_id,
    )


def event_to_domain(orm_event: ORMEvent) -> domain.Event:
    """Convert SQLAlchemy Event model to domain Event entity."""
    return domain.Event(
        id=orm_event.id,
        user_id=orm_event.user_id,
        account_id=orm_event.account_id,
        event_type=domain.EventType(orm_event.event_type),
        effective_at=_as_utc(orm_event.effective_at),
        posted_at=_as_utc(orm_event.posted_at),
        description=orm_event.description,
        external_id=orm_event.external_id,
        dedupe_key=orm_event.dedupe_key,
        import_run_id=orm_event.import_run_id,
        deleted_at=_as_utc(orm_event.deleted_at),
        meta=orm_event.meta,
        created_at=_as_utc(orm_event.created_at),
    )


def leg_to_domain(orm_leg: ORMLeg) -> domain.Leg:
    """Convert SQLAlchemy Leg model to domain Leg entity."""
    return domain.Leg(
        id=orm_leg.id,
        event_id=orm_leg.event_id,
        account_id=orm_leg.account_id,
        instrument_id=orm_leg.instrument_id,
        amount_minor=int(orm_leg.amount_minor),
        category_id=orm_leg.category_id,
        description=orm_leg.description,
    )


def import_run_to_domain(orm_run: ORMImportRun) -> domain.ImportRun:
    """Convert SQLAlchemy ImportRun model to domain ImportRun entity."""
    return domain.ImportRun(
        id=orm_run.id,
        user_id=orm_run.user_id,
        account_id=orm_run.account_id,
        filename=orm_run.filename,
        imported_count=orm_run.imported_count,
        skipped_count=orm_run.skipped_count,
        restored_count=orm_run.restored_count,
        error_count=orm_run.error_count,
        skipped_keys=tuple(orm_run.skipped_keys or ()),
        errors=tuple(ImportErrorRecord.from_dict(e) for e in (orm_run.errors or ())),
        restore_deleted=orm_run.restore_deleted,
        created_at=_as_utc(orm_run.created_at),
    )
