"""Import orchestration: parse, resolve, post and record one batch."""

from dataclasses import dataclass
from datetime import datetime, UTC
from typing import Optional, Sequence

from ledgerkit.database.base import Database
from ledgerkit.domain.entities import (
    Account,
    CanonicalTransaction,
    Category,
    ImportRun,
    ResolvedLeg,
)
from ledgerkit.domain.errors import (
    ImportErrorRecord,
    ImportPhase,
    NotFoundError,
    UnknownInstrumentError,
    ValidationError,
    account_not_found,
    amount_out_of_range,
    amount_precision_exceeded,
    import_run_not_found,
)
from ledgerkit.domain.instrument import (
    InstrumentDraft,
    InstrumentResolution,
    InstrumentResolver,
    normalize_code,
)
from ledgerkit.domain.ledger import LedgerWriter, PostOutcome
from ledgerkit.importers import ParserContext, get_parser
from ledgerkit.logging_config import LogContext, get_logger
from ledgerkit.utils.amount_parser import MAX_AMOUNT_MINOR, MIN_AMOUNT_MINOR, to_minor_units

logger = get_logger(__name__)


@dataclass(frozen=True)
class ImportRequest:
    """Everything needed to import one file into one account."""

    user_id: int
    account_id: int
    filename: str
    raw_content: str
    restore_deleted: bool = False
    instrument_drafts: Sequence[InstrumentDraft] = ()


def resolve_category_path(path: Optional[str], categories: Sequence[Category]) -> Optional[int]:
    """Resolve a colon-separated category path such as "food:coffee".

    Each segment is matched case-insensitively against the children of the
    previous one, starting at the top level. Returns None when any segment
    is missing.
    """
    if not path or not path.strip():
        return None

    parent_id = None
    for part in path.strip().lower().split(":"):
        part = part.strip()
        match = next(
            (c for c in categories if c.name.lower() == part and c.parent_id == parent_id),
            None,
        )
        if match is None:
            return None
        parent_id = match.id
    return parent_id


class ImportService:
    """Service driving batch imports and their audit records."""

    def __init__(self, db: Database):
        """Initialize import service.

        Args:
            db: Database instance
        """
        self.db = db
        self.resolver = InstrumentResolver(db)
        self.writer = LedgerWriter(db)

    def run_import(self, request: ImportRequest) -> ImportRun:
        """Import a file and record exactly one import run for it.

        Row-level failures never stop the batch: they are collected on the
        run with the phase they happened in (parse, resolve or insert).

        Args:
            request: Import request

        Returns:
            The persisted import run

        Raises:
            NotFoundError: If the account does not exist or is not owned by the user
            ValidationError: If the filename is empty
        """
        account = self.db.get_account(request.account_id)
        if account is None or account.user_id != request.user_id:
            raise NotFoundError(account_not_found(request.account_id))
        filename = (request.filename or "").strip()
        if not filename:
            raise ValidationError("Filename must not be empty")

        parser = get_parser(account.importer)

        with LogContext(user_id=request.user_id, account_id=account.id, filename=filename):
            logger.info("import_started", importer=account.importer.value)

            parsed = parser.parse(request.raw_content, account_context(account))
            errors = [
                ImportErrorRecord(line=e.line, message=e.message, phase=ImportPhase.PARSE)
                for e in parsed.errors
            ]
            for record in errors:
                logger.warning("import_row_failed", line=record.line, phase=record.phase.value, error=record.message)

            codes = []
            for transaction in parsed.transactions:
                for leg in transaction.legs:
                    code = normalize_code(leg.instrument_code)
                    if code not in codes:
                        codes.append(code)
            resolution = self.resolver.resolve(
                request.user_id, account.id, codes, request.instrument_drafts
            )
            categories = self.db.list_categories(request.user_id)

            imported = skipped = restored = 0
            skipped_keys: list[str] = []
            created_event_ids: list[int] = []

            for index, transaction in enumerate(parsed.transactions):
                line = transaction.line if transaction.line is not None else index + 1

                try:
                    legs = self._resolve_legs(transaction, resolution, categories)
                except (UnknownInstrumentError, ValidationError) as e:
                    errors.append(ImportErrorRecord(line=line, message=str(e), phase=ImportPhase.RESOLVE))
                    logger.warning("import_row_failed", line=line, phase="resolve", error=str(e))
                    continue

                result = self.writer.post_transaction(
                    account, transaction, legs, restore_deleted=request.restore_deleted
                )
                if result.outcome is PostOutcome.CREATED:
                    imported += 1
                    created_event_ids.append(result.event_id)
                elif result.outcome is PostOutcome.RESTORED:
                    restored += 1
                elif result.outcome is PostOutcome.SKIPPED:
                    skipped += 1
                    skipped_keys.append(result.dedupe_key)
                else:
                    errors.append(
                        ImportErrorRecord(line=line, message=result.message or "", phase=ImportPhase.INSERT)
                    )
                    logger.warning("import_row_failed", line=line, phase="insert", error=result.message)

            run_id = self.db.create_import_run(
                user_id=request.user_id,
                account_id=account.id,
                filename=filename,
                imported_count=imported,
                skipped_count=skipped,
                restored_count=restored,
                error_count=len(errors),
                skipped_keys=skipped_keys,
                errors=[e.to_dict() for e in errors],
                restore_deleted=request.restore_deleted,
                created_event_ids=created_event_ids,
            )
            logger.info(
                "import_completed",
                import_run_id=run_id,
                imported=imported,
                skipped=skipped,
                restored=restored,
                errors=len(errors),
            )

        return self.db.get_import_run(run_id)

    def _resolve_legs(
        self,
        transaction: CanonicalTransaction,
        resolution: InstrumentResolution,
        categories: Sequence[Category],
    ) -> list[ResolvedLeg]:
        legs = []
        for leg in transaction.legs:
            code = normalize_code(leg.instrument_code)
            instrument = resolution.get(code)
            if instrument is None:
                if code in resolution.failures:
                    raise ValidationError(resolution.failures[code])
                raise UnknownInstrumentError(code)
            try:
                amount_minor = to_minor_units(leg.amount, instrument.minor_unit)
            except ValueError:
                raise ValidationError(
                    amount_precision_exceeded(leg.amount, instrument.code, instrument.minor_unit)
                )
            if not MIN_AMOUNT_MINOR <= amount_minor <= MAX_AMOUNT_MINOR:
                raise ValidationError(amount_out_of_range(leg.amount, instrument.code))
            legs.append(
                ResolvedLeg(
                    instrument_id=instrument.id,
                    amount_minor=amount_minor,
                    category_id=resolve_category_path(leg.category_path, categories),
                    description=leg.description,
                )
            )
        return legs

    def get_import_run(self, user_id: int, import_run_id: int) -> ImportRun:
        """Get an import run owned by the user.

        Raises:
            NotFoundError: If the run does not exist or is not owned by the user
        """
        run = self.db.get_import_run(import_run_id)
        if run is None or run.user_id != user_id:
            raise NotFoundError(import_run_not_found(import_run_id))
        return run

    def list_import_runs(self, user_id: int, account_id: Optional[int] = None) -> list[ImportRun]:
        """List a user's import runs, newest first."""
        return self.db.list_import_runs(user_id, account_id)

    def revert_import_run(self, user_id: int, import_run_id: int) -> int:
        """Soft-delete every active event created by an import run.

        Events stay restorable through a later import with restore enabled
        or through the event service.

        Returns:
            Number of events deleted
        """
        run = self.get_import_run(user_id, import_run_id)
        count = self.db.soft_delete_import_run_events(run.id, datetime.now(UTC))
        logger.info("import_run_reverted", import_run_id=run.id, deleted=count)
        return count


def account_context(account: Account) -> ParserContext:
    """Parser context for an account."""
    return ParserContext(account_id=account.id, cash_instrument_code=account.cash_instrument_code)
