"""
Query -- due-date range parsing for invoice listings.

Bounds are inclusive and independently optional.  An absent bound leaves
that side open.  A bound that is present but not a YYYY-MM-DD calendar date
is an error, never a silently empty result.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime

from invoice_kernel.exceptions import InvalidDateFormatError

DATE_FORMAT = "%Y-%m-%d"
_DATE_SHAPE = re.compile(r"\d{4}-\d{2}-\d{2}")


def parse_query_date(raw: str | date | None) -> date | None:
    """
    Parse one query bound.

    None and blank strings mean "no bound".

    Raises:
        InvalidDateFormatError: If raw is present but not a calendar date
            in YYYY-MM-DD form (this includes dates like 2025-02-30).
    """
    if raw is None:
        return None
    if isinstance(raw, date):
        return raw
    text = raw.strip()
    if not text:
        return None
    # strptime alone would accept "2025-1-5"
    if not _DATE_SHAPE.fullmatch(text):
        raise InvalidDateFormatError(raw)
    try:
        return datetime.strptime(text, DATE_FORMAT).date()
    except ValueError as e:
        raise InvalidDateFormatError(raw) from e


@dataclass(frozen=True)
class InvoiceDateRange:
    """Inclusive [start, end] window on payment_due_date."""

    start: date | None = None
    end: date | None = None

    @classmethod
    def from_strings(
        cls,
        start: str | date | None = None,
        end: str | date | None = None,
    ) -> InvoiceDateRange:
        return cls(start=parse_query_date(start), end=parse_query_date(end))

    def contains(self, day: date) -> bool:
        if self.start is not None and day < self.start:
            return False
        if self.end is not None and day > self.end:
            return False
        return True
