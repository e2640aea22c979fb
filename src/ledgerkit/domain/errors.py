"""Shared domain error messages and error types."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist or is not owned by the caller."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


class UnknownInstrumentError(DomainError):
    """An instrument code has no persisted instrument and no draft."""

    def __init__(self, code: str):
        super().__init__(unknown_instrument(code))
        self.code = code


class PersistenceError(DomainError):
    """The storage layer rejected a write."""


class DuplicateDedupeKeyError(ConflictError):
    """The storage layer rejected an event because its dedupe key exists."""

    def __init__(self, dedupe_key: str):
        super().__init__(f"Event with dedupe key '{dedupe_key}' already exists")
        self.dedupe_key = dedupe_key


class ImportPhase(str, Enum):
    """Stage of the import pipeline an error was raised in."""

    PARSE = "parse"
    RESOLVE = "resolve"
    INSERT = "insert"


@dataclass(frozen=True)
class ImportErrorRecord:
    """One row-level failure recorded on an import run."""

    line: int
    message: str
    phase: ImportPhase

    def to_dict(self) -> dict[str, Any]:
        return {"line": self.line, "message": self.message, "phase": self.phase.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ImportErrorRecord":
        return cls(line=int(data["line"]), message=str(data["message"]), phase=ImportPhase(data["phase"]))


def user_not_found(user_id: int) -> str:
    """Return message for missing user."""
    return f"User {user_id} not found"


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def event_not_found(event_id: int) -> str:
    """Return message for missing event."""
    return f"Event {event_id} not found"


def instrument_not_found(instrument_id: int) -> str:
    """Return message for missing instrument."""
    return f"Instrument {instrument_id} not found"


def import_run_not_found(run_id: int) -> str:
    """Return message for missing import run."""
    return f"Import run {run_id} not found"


def unknown_instrument(code: str) -> str:
    """Return message for an instrument code that cannot be resolved."""
    return f"Unknown instrument: {code}"


def duplicate_instrument_code(code: str) -> str:
    """Return message for an instrument code already visible in scope."""
    return f"Instrument with code '{code}' already exists in this scope"


def amount_precision_exceeded(amount: Any, code: str, minor_unit: int) -> str:
    """Return message for an amount with more decimals than the instrument allows."""
    return (
        f"Amount {amount} has more decimal places than {code} allows "
        f"({minor_unit})"
    )


def amount_out_of_range(amount: Any, code: str) -> str:
    """Return message for an amount that does not fit a 64-bit minor-unit column."""
    return f"Amount {amount} {code} is outside the storable range"
