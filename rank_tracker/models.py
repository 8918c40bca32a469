# rank_tracker/models.py
"""
Data models shared by the harvesting pipeline.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

DEVICES: Tuple[str, ...] = ("desktop", "mobile")

#: Column order of the CSV report. ``country`` is deliberately not part of it.
CSV_COLUMNS: Tuple[str, ...] = (
    "keyword",
    "engine",
    "surface",
    "city",
    "device",
    "position",
    "title",
    "url",
    "domain",
    "snippet",
)


class Surface(str, Enum):
    """Result type being tracked."""

    SEARCH = "search"
    MAPS = "maps"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Query:
    keyword: str


@dataclass(frozen=True, slots=True)
class Location:
    """Search origin: where and on which device the query is issued."""

    city: str
    country: str
    language: str = ""
    device: str = "desktop"


@dataclass(frozen=True, slots=True)
class Task:
    """One (query, location, surface) unit of work – exactly one provider call."""

    query: Query
    location: Location
    surface: Surface

    @property
    def description(self) -> str:
        return f'"{self.query.keyword}" in {self.location.city} ({self.surface})'


@dataclass(frozen=True, slots=True)
class RawResult:
    """A result entry as found in the provider payload, before normalization."""

    position: int
    title: str
    url: str
    snippet: str = ""


@dataclass(frozen=True, slots=True)
class CanonicalRecord:
    """Unified output row every provider response shape is normalized into."""

    keyword: str
    engine: str
    surface: str
    city: str
    country: str
    device: str
    position: int
    title: str
    url: str
    domain: str
    snippet: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def csv_row(self) -> Dict[str, Any]:
        return {column: getattr(self, column) for column in CSV_COLUMNS}


@dataclass(frozen=True, slots=True)
class TaskResult:
    """Outcome of one executed task.

    ``index`` is the submission position of ``task``; results are produced in
    completion order, so the index is what ties them back to the generator's
    ordering.
    """

    index: int
    task: Any
    value: Any = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.value is not None


__all__ = [
    "DEVICES",
    "CSV_COLUMNS",
    "Surface",
    "Query",
    "Location",
    "Task",
    "RawResult",
    "CanonicalRecord",
    "TaskResult",
]
