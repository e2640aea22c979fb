"""Parser interface shared by every provider format."""

import csv
import io
from abc import ABC, abstractmethod
from dataclasses import dataclass

from ledgerkit.domain.entities import ParseResult


@dataclass(frozen=True)
class ParserContext:
    """Account settings a parser needs to interpret a file."""

    account_id: int
    cash_instrument_code: str


class CSVParseError(ValueError):
    """The file as a whole could not be read as CSV."""


def read_rows(raw_content: str) -> list[list[str]]:
    """Read CSV text into rows of trimmed cells, dropping blank lines.

    Raises:
        CSVParseError: If the text is not valid CSV
    """
    text = raw_content.lstrip("\ufeff")
    try:
        rows = list(csv.reader(io.StringIO(text)))
    except csv.Error as e:
        raise CSVParseError(f"CSV parse error: {e}")
    return [[cell.strip() for cell in row] for row in rows if any(cell.strip() for cell in row)]


def read_records(raw_content: str) -> tuple[list[str], list[dict[str, str]]]:
    """Read CSV text with a header row.

    Returns:
        Tuple of (header names, records keyed by header name). Missing
        trailing cells read as empty strings.

    Raises:
        CSVParseError: If the text is not valid CSV
    """
    rows = read_rows(raw_content)
    if not rows:
        return [], []
    header = rows[0]
    records = [
        {name: (row[i] if i < len(row) else "") for i, name in enumerate(header)}
        for row in rows[1:]
    ]
    return header, records


class Parser(ABC):
    """Turns a provider export into canonical transactions.

    Parsers never touch the database and never raise for a bad row: every
    row they cannot interpret becomes a ``ParseError`` with its line number.
    """

    @abstractmethod
    def parse(self, raw_content: str, context: ParserContext) -> ParseResult:
        """Parse raw file content."""
        pass
