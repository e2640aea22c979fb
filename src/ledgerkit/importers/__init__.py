"""Provider parsers producing canonical transactions."""

from ledgerkit.domain.entities import ImporterKind
from ledgerkit.domain.errors import ValidationError
from ledgerkit.importers.base import Parser, ParserContext
from ledgerkit.importers.canonical import CanonicalParser
from ledgerkit.importers.commbank import CommBankParser
from ledgerkit.importers.vanguard import VanguardParser
from ledgerkit.importers.wise import WiseParser

PARSERS: dict[ImporterKind, type[Parser]] = {
    ImporterKind.COMMBANK_CSV: CommBankParser,
    ImporterKind.WISE_CSV: WiseParser,
    ImporterKind.VANGUARD_CSV: VanguardParser,
    ImporterKind.CANONICAL_CSV: CanonicalParser,
}


def get_parser(importer: ImporterKind | str) -> Parser:
    """Return the parser for an importer kind.

    Raises:
        ValidationError: If the importer kind is not supported
    """
    try:
        return PARSERS[ImporterKind(importer)]()
    except (KeyError, ValueError):
        raise ValidationError(f"Unsupported importer: {importer}")


__all__ = [
    "Parser",
    "ParserContext",
    "CanonicalParser",
    "CommBankParser",
    "VanguardParser",
    "WiseParser",
    "PARSERS",
    "get_parser",
]
