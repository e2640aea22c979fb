"""Instrument domain service and batch instrument resolution."""

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional

from ledgerkit.database.base import Database
from ledgerkit.domain.entities import Instrument, InstrumentKind
from ledgerkit.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    PersistenceError,
    ValidationError,
    account_not_found,
    duplicate_instrument_code,
    instrument_not_found,
    unknown_instrument,
    user_not_found,
)
from ledgerkit.logging_config import get_logger

logger = get_logger(__name__)

MAX_MINOR_UNIT = 18


def normalize_code(code: str) -> str:
    """Instrument codes are compared case-insensitively."""
    return code.strip().upper()


def _validate_minor_unit(minor_unit: int) -> None:
    if isinstance(minor_unit, bool) or not isinstance(minor_unit, int):
        raise ValidationError(f"Minor unit must be an integer, got {minor_unit!r}")
    if minor_unit < 0 or minor_unit > MAX_MINOR_UNIT:
        raise ValidationError(f"Minor unit must be between 0 and {MAX_MINOR_UNIT}")


@dataclass(frozen=True)
class InstrumentDraft:
    """Definition of an instrument to create if an import references it."""

    code: str
    kind: InstrumentKind
    minor_unit: int
    name: Optional[str] = None
    account_scoped: bool = False


@dataclass
class InstrumentResolution:
    """Outcome of resolving a batch's instrument codes."""

    instruments: dict[str, Instrument] = field(default_factory=dict)
    failures: dict[str, str] = field(default_factory=dict)

    def get(self, code: str) -> Optional[Instrument]:
        return self.instruments.get(normalize_code(code))


class InstrumentResolver:
    """Map instrument codes to persisted instruments for one import batch.

    Codes already visible in the scope (user-wide plus the target account)
    are reused as-is; a matching draft never changes an existing
    instrument's kind or minor unit. Missing codes are created from drafts
    when one is supplied and reported as failures otherwise.
    """

    def __init__(self, db: Database):
        self.db = db

    def resolve(
        self,
        user_id: int,
        account_id: int,
        codes: Iterable[str],
        drafts: Mapping[str, InstrumentDraft] | Iterable[InstrumentDraft] = (),
    ) -> InstrumentResolution:
        if isinstance(drafts, Mapping):
            drafts = drafts.values()
        drafts_by_code = {normalize_code(d.code): d for d in drafts}

        existing = {
            normalize_code(inst.code): inst
            for inst in self.db.list_instruments(user_id, account_id)
        }

        resolution = InstrumentResolution()
        for raw_code in codes:
            code = normalize_code(raw_code)
            if not code or code in resolution.instruments or code in resolution.failures:
                continue

            if code in existing:
                resolution.instruments[code] = existing[code]
                continue

            draft = drafts_by_code.get(code)
            if draft is None:
                resolution.failures[code] = unknown_instrument(code)
                continue

            try:
                _validate_minor_unit(draft.minor_unit)
            except ValidationError as e:
                resolution.failures[code] = f"Invalid draft for {code}: {e}"
                continue

            try:
                instrument_id = self.db.create_instrument(
                    user_id=user_id,
                    code=code,
                    kind=InstrumentKind(draft.kind),
                    minor_unit=draft.minor_unit,
                    name=(draft.name or code).strip(),
                    account_id=account_id if draft.account_scoped else None,
                )
            except PersistenceError as e:
                # A concurrent import may have created the code first
                instrument = self._find(user_id, account_id, code)
                if instrument is None:
                    resolution.failures[code] = str(e)
                    logger.warning("instrument_create_failed", code=code, error=str(e))
                    continue
            else:
                instrument = self.db.get_instrument(instrument_id)
                logger.info(
                    "instrument_created",
                    instrument_id=instrument_id,
                    code=code,
                    account_scoped=draft.account_scoped,
                )
            resolution.instruments[code] = instrument
            existing[code] = instrument

        return resolution

    def _find(self, user_id: int, account_id: int, code: str) -> Optional[Instrument]:
        for inst in self.db.list_instruments(user_id, account_id):
            if normalize_code(inst.code) == code:
                return inst
        return None


class InstrumentService:
    """Service for managing instruments."""

    def __init__(self, db: Database):
        """Initialize instrument service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_instrument(
        self,
        user_id: int,
        code: str,
        kind: InstrumentKind,
        minor_unit: int,
        name: Optional[str] = None,
        account_id: Optional[int] = None,
    ) -> int:
        """Create a new instrument.

        Args:
            user_id: Owning user ID
            code: Instrument code (e.g. "AUD", "VAS"), stored upper-case
            kind: Instrument kind
            minor_unit: Number of decimal places of the smallest unit
            name: Display name, defaults to the code
            account_id: Restrict the instrument to one account

        Returns:
            Instrument ID

        Raises:
            NotFoundError: If the user or account does not exist
            ValidationError: If code or minor unit is invalid
            ConflictError: If the code is already visible in the same scope
        """
        if self.db.get_user(user_id) is None:
            raise NotFoundError(user_not_found(user_id))
        if account_id is not None:
            account = self.db.get_account(account_id)
            if account is None or account.user_id != user_id:
                raise NotFoundError(account_not_found(account_id))

        code = normalize_code(code)
        if not code:
            raise ValidationError("Instrument code must not be empty")
        _validate_minor_unit(minor_unit)

        # An account-scoped code may not shadow a user-wide one, and a new
        # user-wide code may not clash with any account's instrument.
        for inst in self.db.list_instruments(user_id, account_id):
            if normalize_code(inst.code) == code:
                raise ConflictError(duplicate_instrument_code(code))

        return self.db.create_instrument(
            user_id=user_id,
            code=code,
            kind=InstrumentKind(kind),
            minor_unit=minor_unit,
            name=(name or code).strip(),
            account_id=account_id,
        )

    def get_instrument(self, instrument_id: int) -> Optional[Instrument]:
        """Get instrument by ID."""
        return self.db.get_instrument(instrument_id)

    def list_instruments(self, user_id: int, account_id: Optional[int] = None) -> list[Instrument]:
        """List instruments visible to a user, optionally narrowed to one account's scope."""
        return self.db.list_instruments(user_id, account_id)

    def update_instrument(
        self,
        user_id: int,
        instrument_id: int,
        kind: Optional[InstrumentKind] = None,
        minor_unit: Optional[int] = None,
        name: Optional[str] = None,
    ) -> None:
        """Update an instrument's kind, minor unit or name.

        This is the only path that changes an existing instrument. Imports
        never do.

        Raises:
            NotFoundError: If the instrument does not exist or is not owned
            ValidationError: If the new values are invalid
            DependencyError: If the minor unit would change while legs exist
        """
        instrument = self.db.get_instrument(instrument_id)
        if instrument is None or instrument.user_id != user_id:
            raise NotFoundError(instrument_not_found(instrument_id))

        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError("Instrument name must not be empty")

        if minor_unit is not None and minor_unit != instrument.minor_unit:
            _validate_minor_unit(minor_unit)
            leg_count = self.db.count_legs_for_instrument(instrument_id)
            if leg_count > 0:
                raise DependencyError(
                    f"Cannot change minor unit of {instrument.code}: "
                    f"{leg_count} leg(s) are recorded in it"
                )

        self.db.update_instrument(
            instrument_id,
            kind=InstrumentKind(kind) if kind is not None else None,
            minor_unit=minor_unit,
            name=name,
        )
