"""
Core data structures used throughout citetrend.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


YearCounts = Dict[int, int]

DEFAULT_PAGE_SIZE = 1000


@dataclass(frozen=True)
class SearchSettings:
    """
    Tunables for a single search run.
    """

    page_size: int = DEFAULT_PAGE_SIZE
    timeout: float = 30.0
    max_pages: Optional[int] = None


@dataclass
class Record:
    """
    One bibliographic entry from a result page, reduced to its date fields.
    """

    pub_year: Optional[str] = None
    first_publication_date: Optional[str] = None
    electronic_publication_date: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_json(cls, item: Dict[str, Any]) -> "Record":
        def text(key: str) -> Optional[str]:
            value = item.get(key)
            if value is None:
                return None
            return str(value)

        return cls(
            pub_year=text("pubYear"),
            first_publication_date=text("firstPublicationDate"),
            electronic_publication_date=text("electronicPublicationDate"),
            raw=item,
        )


@dataclass
class Page:
    hit_count: int
    next_cursor: Optional[str]
    records: List[Record] = field(default_factory=list)


@dataclass(frozen=True)
class ChartPoint:
    year: int
    citations: int


@dataclass
class RunStats:
    """
    Diagnostics collected during a run. Never persisted.
    """

    total_results: int = 0
    processed_results: int = 0
    years_found: int = 0
    pages_fetched: int = 0
    sample_record: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Running:
    processed: int = 0
    total: int = 0

    def describe(self) -> str:
        if not self.total and not self.processed:
            return "Starting search..."
        return f"Processed {self.processed} of {self.total} results..."


@dataclass(frozen=True)
class Done:
    series: List[ChartPoint]
    stats: RunStats


@dataclass(frozen=True)
class Failed:
    message: str


RunState = Union[Idle, Running, Done, Failed]
