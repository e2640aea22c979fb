"""Dedupe key computation.

An event's dedupe key is its identity across re-imports. Providers that
supply a stable transaction id get ``{account_id}:{external_id}``; everyone
else gets a SHA-256 over the fields that do not change between exports of
the same transaction.

Only the first leg's amount takes part in the hash, so two multi-leg
transactions that agree on account, date, description and first-leg amount
collide even if their later legs differ. Two genuinely distinct same-day
transactions with identical amount and description collide as well.
"""

import hashlib
import re
from datetime import datetime, timezone
from typing import Optional

_WHITESPACE = re.compile(r"\s+")


def normalize_description(description: str) -> str:
    """Trim, lowercase and collapse internal whitespace to single spaces."""
    return _WHITESPACE.sub(" ", description.strip().lower())


def format_timestamp(value: datetime) -> str:
    """Render a timestamp as UTC ISO-8601 with milliseconds, e.g. 2025-01-10T00:00:00.000Z.

    Naive datetimes are taken to be UTC already.
    """
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def compute_dedupe_key(
    account_id: int | str,
    external_id: Optional[str],
    effective_at: datetime,
    primary_amount_minor: int,
    description: str,
) -> str:
    """Compute the dedupe key for a transaction.

    Args:
        account_id: Account the transaction is imported into
        external_id: Provider-supplied transaction id, if any
        effective_at: Economic date of the transaction
        primary_amount_minor: Signed amount of the first leg in minor units
        description: Transaction description

    Returns:
        ``"{account_id}:{external_id}"`` when an external id is present,
        otherwise a hex SHA-256 digest
    """
    if external_id is not None and external_id.strip():
        return f"{account_id}:{external_id.strip()}"

    payload = "|".join(
        [
            str(account_id),
            format_timestamp(effective_at),
            str(int(primary_amount_minor)),
            normalize_description(description),
        ]
    )
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()
