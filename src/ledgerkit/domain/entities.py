"""Domain model entities for ledgerkit.

These are pure data classes representing business concepts, independent of
database schema. Parsers produce the canonical transaction types at the
bottom of this module; everything above them is read back from storage.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Union

from ledgerkit.domain.errors import ImportErrorRecord


class ImporterKind(str, Enum):
    """Provider export formats an account can be configured with."""

    COMMBANK_CSV = "commbank_csv"
    WISE_CSV = "wise_csv"
    VANGUARD_CSV = "vanguard_csv"
    CANONICAL_CSV = "canonical_csv"


class InstrumentKind(str, Enum):
    """Kind of unit an instrument measures."""

    FIAT = "fiat"
    SECURITY = "security"
    CRYPTO = "crypto"
    OTHER = "other"


class EventType(str, Enum):
    """Kind of financial occurrence recorded by an event."""

    PURCHASE = "purchase"
    TRANSFER = "transfer"
    EXCHANGE = "exchange"
    TRADE = "trade"
    BILL_PAYMENT = "bill_payment"
    PAYOUT = "payout"


class EventState(str, Enum):
    """Lifecycle state of an event."""

    ACTIVE = "active"
    DELETED = "deleted"


@dataclass(frozen=True)
class User:
    """Owner of accounts, instruments and events."""

    id: int
    name: str
    created_at: datetime


@dataclass(frozen=True)
class Account:
    """Bank or brokerage account domain entity."""

    id: int
    user_id: int
    name: str
    importer: ImporterKind
    cash_instrument_code: str
    created_at: datetime


@dataclass(frozen=True)
class Instrument:
    """Currency, security or other unit of value."""

    id: int
    user_id: int
    account_id: Optional[int]
    code: str
    kind: InstrumentKind
    minor_unit: int
    name: str
    created_at: datetime


@dataclass(frozen=True)
class Category:
    """Category domain entity with hierarchical structure."""

    id: int
    user_id: int
    name: str
    parent_id: Optional[int]


@dataclass(frozen=True)
class Event:
    """One financial occurrence recorded in the ledger."""

    id: int
    user_id: int
    account_id: int
    event_type: EventType
    effective_at: datetime
    posted_at: Optional[datetime]
    description: str
    external_id: Optional[str]
    dedupe_key: str
    import_run_id: Optional[int]
    deleted_at: Optional[datetime]
    meta: Optional[dict[str, Any]]
    created_at: datetime

    @property
    def state(self) -> EventState:
        """Lifecycle state derived from the soft-delete timestamp."""
        return EventState.ACTIVE if self.deleted_at is None else EventState.DELETED


@dataclass(frozen=True)
class Leg:
    """One signed money movement of an event, in minor units."""

    id: int
    event_id: int
    account_id: int
    instrument_id: int
    amount_minor: int
    category_id: Optional[int]
    description: Optional[str]


@dataclass(frozen=True)
class ResolvedLeg:
    """A canonical leg after instrument resolution, ready to be written."""

    instrument_id: int
    amount_minor: int
    category_id: Optional[int] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class EventDetail:
    """An event together with its legs."""

    event: Event
    legs: tuple[Leg, ...]


@dataclass(frozen=True)
class ImportRun:
    """Audit record of one batch import."""

    id: int
    user_id: int
    account_id: int
    filename: str
    imported_count: int
    skipped_count: int
    restored_count: int
    error_count: int
    skipped_keys: tuple[str, ...]
    errors: tuple[ImportErrorRecord, ...]
    restore_deleted: bool
    created_at: datetime


@dataclass(frozen=True)
class Balance:
    """Current balance of one instrument in one account."""

    account_id: int
    instrument_id: int
    amount_minor: int
    account_name: str
    instrument_code: str
    minor_unit: int


# Canonical transaction model produced by every provider parser


@dataclass(frozen=True)
class CanonicalLeg:
    """A leg as reported by a parser.

    ``amount`` is either a ``Decimal`` in major units (converted with the
    instrument's minor unit during import) or an ``int`` already in minor
    units.
    """

    instrument_code: str
    amount: Union[Decimal, int]
    description: Optional[str] = None
    category_path: Optional[str] = None


@dataclass(frozen=True)
class CanonicalTransaction:
    """A format-independent transaction ready to be posted."""

    group_key: str
    effective_at: datetime
    description: str
    event_type: EventType
    legs: tuple[CanonicalLeg, ...]
    external_id: Optional[str] = None
    posted_at: Optional[datetime] = None
    meta: Optional[dict[str, Any]] = None
    line: Optional[int] = None


@dataclass(frozen=True)
class ParseError:
    """A row the parser could not interpret."""

    line: int
    message: str


@dataclass
class ParseResult:
    """Output of a provider parser."""

    transactions: list[CanonicalTransaction] = field(default_factory=list)
    errors: list[ParseError] = field(default_factory=list)
