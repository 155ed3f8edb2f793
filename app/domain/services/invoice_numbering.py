# app/domain/services/invoice_numbering.py
"""
Fiscal-year scoped invoice numbering.

Numbers look like ``FY25-26/007``: the short fiscal year, a slash, and the
sequence within that year. Sequences below 10 are zero-padded to three
digits; larger sequences are written as-is (``FY25-26/42``).

These helpers hold no state. Callers that assign numbers concurrently must
serialize assignment themselves (e.g. a row lock on the user's invoices).
"""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import Iterable

logger = logging.getLogger("invoice_numbering")

_FISCAL_YEAR_RE = re.compile(r"([0-9]{4})-([0-9]{2})")
_TRAILING_SEQUENCE_RE = re.compile(r"/([0-9]+)\Z")

# Indian fiscal year starts on April 1
_FY_START_MONTH = 4


class InvalidFiscalYearError(ValueError):
    """Raised when a fiscal year is not in ``YYYY-YY`` form."""

    def __init__(self, fiscal_year: str):
        self.fiscal_year = fiscal_year
        super().__init__(f"Invalid fiscal year {fiscal_year!r}: expected YYYY-YY, e.g. 2025-26")


def _short_fiscal_year(fiscal_year: str) -> str:
    match = _FISCAL_YEAR_RE.fullmatch(fiscal_year or "")
    if not match:
        raise InvalidFiscalYearError(fiscal_year)
    start, end = match.groups()
    return f"{start[-2:]}-{end}"


def format_invoice_number(fiscal_year: str, sequence: int) -> str:
    """Render ``sequence`` of ``fiscal_year`` as an invoice number.

    >>> format_invoice_number("2025-26", 7)
    'FY25-26/007'
    >>> format_invoice_number("2025-26", 42)
    'FY25-26/42'
    """
    if sequence < 1:
        raise ValueError(f"Invoice sequence must be >= 1, got {sequence}")

    padded = f"{sequence:03d}" if sequence < 10 else str(sequence)
    return f"FY{_short_fiscal_year(fiscal_year)}/{padded}"


def fiscal_year_prefix(fiscal_year: str) -> str:
    """Common prefix of every invoice number in ``fiscal_year`` (``FY25-26/``)."""
    return f"FY{_short_fiscal_year(fiscal_year)}/"


def next_sequence(existing_invoice_numbers: Iterable[str]) -> int:
    """Next free sequence given the numbers already issued.

    Numbers without a trailing ``/<digits>`` are ignored. Returns 1 when
    nothing parses.
    """
    sequences = []
    for number in existing_invoice_numbers:
        match = _TRAILING_SEQUENCE_RE.search(number or "")
        if match:
            sequences.append(int(match.group(1)))

    if not sequences:
        return 1
    return max(sequences) + 1


def next_invoice_sequence(fiscal_year: str, existing_invoice_numbers: Iterable[str]) -> int:
    """Next sequence within ``fiscal_year``; numbers of other years are ignored."""
    prefix = fiscal_year_prefix(fiscal_year)
    same_year = [n for n in existing_invoice_numbers if n and n.startswith(prefix)]
    return next_sequence(same_year)


def next_invoice_number(fiscal_year: str, existing_invoice_numbers: Iterable[str]) -> str:
    """Format the next invoice number, counting only numbers of this fiscal year."""
    number = format_invoice_number(
        fiscal_year, next_invoice_sequence(fiscal_year, existing_invoice_numbers)
    )
    logger.debug("Next invoice number for %s: %s", fiscal_year, number)
    return number


def current_fiscal_year(on: date | None = None) -> str:
    """Fiscal year (``YYYY-YY``) containing ``on``; defaults to today.

    April to December belong to the year starting that calendar year,
    January to March to the year that started the previous one.
    """
    on = on or date.today()
    start = on.year if on.month >= _FY_START_MONTH else on.year - 1
    return f"{start}-{str(start + 1)[-2:]}"
