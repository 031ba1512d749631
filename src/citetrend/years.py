"""
Publication year extraction.
"""

from __future__ import annotations

import re
from datetime import UTC, datetime
from typing import Optional

from .models import Record


EARLIEST_YEAR = 1700

_LEADING_INT = re.compile(r"\s*([+-]?\d{1,6})(?!\d)")


def _parse_int(raw: str) -> Optional[int]:
    # Leading digits only: "2019abc" is 2019, "abc" is nothing.
    match = _LEADING_INT.match(raw)
    if not match:
        return None
    return int(match.group(1))


def _candidate(record: Record) -> Optional[str]:
    if record.pub_year:
        return record.pub_year
    if record.first_publication_date:
        return record.first_publication_date[:4]
    if record.electronic_publication_date:
        return record.electronic_publication_date[:4]
    return None


def extract_year(record: Record, current_year: Optional[int] = None) -> Optional[int]:
    """
    Derive a plausible publication year for ``record``.

    The first non-empty field wins: ``pubYear``, then the first four
    characters of ``firstPublicationDate``, then those of
    ``electronicPublicationDate``. Returns ``None`` when the winning value is
    not numeric or falls outside ``[1700, current_year + 1]``.
    """

    raw = _candidate(record)
    if raw is None:
        return None
    year = _parse_int(raw)
    if year is None:
        return None
    if current_year is None:
        current_year = datetime.now(tz=UTC).year
    if EARLIEST_YEAR <= year <= current_year + 1:
        return year
    return None
