# File: rank_tracker/inputs.py
"""rank_tracker.inputs: Чтение запросов и локаций из CSV-файлов."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Dict, Iterator, List, Sequence, Union

from rank_tracker.logger import logger
from rank_tracker.models import DEVICES, Location, Query

__all__: Sequence[str] = ("read_rows", "read_queries", "read_locations")

LOCATION_COLUMNS = ("city", "country", "language", "device")


def read_rows(path: Union[str, Path], required: Sequence[str]) -> Iterator[Dict[str, str]]:
    """Отдаёт строки CSV как словари без пробелов по краям; сначала проверяет колонки *required*."""
    p = Path(path)
    if not p.is_file():
        logger.error("Input file not found: %s", p)
        raise FileNotFoundError(f"Input file not found: {p}")
    with p.open(newline="", encoding="utf-8-sig") as handle:
        reader = csv.DictReader(handle)
        header = [name.strip() for name in reader.fieldnames or []]
        missing = [column for column in required if column not in header]
        if missing:
            raise ValueError(f"{p}: missing column(s) {', '.join(missing)}")
        reader.fieldnames = header
        for row in reader:
            yield {key: (value or "").strip() for key, value in row.items() if key is not None}


def read_queries(path: Union[str, Path]) -> List[Query]:
    queries = [Query(keyword=row["keyword"]) for row in read_rows(path, ("keyword",)) if row["keyword"]]
    logger.debug("Loaded %d queries from %s", len(queries), path)
    return queries


def read_locations(path: Union[str, Path]) -> List[Location]:
    """Читает локации; пустой device означает desktop, иначе значение должно быть известным."""
    locations: List[Location] = []
    for line, row in enumerate(read_rows(path, LOCATION_COLUMNS), start=2):
        device = (row["device"] or "desktop").lower()
        if device not in DEVICES:
            raise ValueError(f"{path}:{line}: unknown device {row['device']!r}, expected one of {DEVICES}")
        locations.append(
            Location(
                city=row["city"],
                country=row["country"],
                language=row["language"],
                device=device,
            )
        )
    logger.debug("Loaded %d locations from %s", len(locations), path)
    return locations
