# File: rank_tracker/extractor.py
"""rank_tracker.extractor: provider payload → raw result entries.

Example payloads (abbreviated)::

    {"organic": [{"link": "https://example.com/", "title": "Example", ...}]}

    {"body": "{\\"organic\\": [...]}"}      # JSON wrapped in a string

    {"body": "<!doctype html><html>..."}   # raw result page

Every shape is first unwrapped to a plain mapping (:func:`unwrap_payload`);
the extractors only ever look at that mapping.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Sequence, Tuple, Union

from rank_tracker.logger import logger
from rank_tracker.models import RawResult, Surface
from rank_tracker.parser.html_parser import looks_like_html, parse_serp_html

__all__ = [
    "FIELD_CHAINS",
    "ORGANIC_KEY",
    "LOCAL_KEY",
    "Direct",
    "Enveloped",
    "PayloadShapeError",
    "classify_payload",
    "unwrap_payload",
    "first_non_empty",
    "extract_entries",
    "extract_organic",
    "extract_local",
    "extract",
]

ORGANIC_KEY = "organic"
LOCAL_KEY = "local_results"

#: Candidate field names per logical attribute, first non-empty wins.
FIELD_CHAINS: Dict[str, Tuple[str, ...]] = {
    "title": ("title", "link_title"),
    "url": ("link", "url"),
    "snippet": ("snippet", "description"),
}


class PayloadShapeError(ValueError):
    """The payload does not have any shape the extractor understands."""


@dataclass(frozen=True, slots=True)
class Direct:
    """Payload whose result arrays sit at the top level."""

    data: Mapping[str, Any]


@dataclass(frozen=True, slots=True)
class Enveloped:
    """Payload whose data is a string in the ``body`` field (JSON or HTML)."""

    body: str


PayloadShape = Union[Direct, Enveloped]


def classify_payload(payload: Any) -> PayloadShape:
    if not isinstance(payload, Mapping):
        raise PayloadShapeError(f"expected a JSON object, got {type(payload).__name__}")
    body = payload.get("body")
    if isinstance(body, str) and body:
        return Enveloped(body)
    return Direct(payload)


def unwrap_payload(payload: Any) -> Mapping[str, Any]:
    """Return the mapping holding the result arrays, unwrapping one ``body`` level."""
    shape = classify_payload(payload)
    if isinstance(shape, Direct):
        return shape.data

    if looks_like_html(shape.body):
        return {ORGANIC_KEY: parse_serp_html(shape.body)}
    try:
        inner = json.loads(shape.body)
    except (ValueError, RecursionError) as exc:
        # ValueError covers JSONDecodeError and oversized integer literals
        raise PayloadShapeError(f"body is neither JSON nor HTML: {exc}") from exc
    if not isinstance(inner, Mapping):
        raise PayloadShapeError(f"body holds {type(inner).__name__}, expected a JSON object")
    return inner


def first_non_empty(entry: Mapping[str, Any], chain: Sequence[str]) -> str:
    """Value of the first field in *chain* that is a non-empty string, else ``""``."""
    for name in chain:
        value = entry.get(name)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


def extract_entries(payload: Any, key: str) -> List[RawResult]:
    """
    Read the array stored under *key* and convert it to :class:`RawResult`.

    ``position`` is the 1-based array index; entries without a title or url
    are skipped without renumbering the rest. A missing array or a payload of
    unknown shape gives an empty list.
    """
    try:
        data = unwrap_payload(payload)
    except PayloadShapeError as exc:
        logger.warning("Unusable payload: %s", exc)
        return []

    items = data.get(key)
    if not isinstance(items, list):
        logger.debug("Payload has no '%s' array", key)
        return []

    results: List[RawResult] = []
    for index, item in enumerate(items):
        if not isinstance(item, Mapping):
            continue
        title = first_non_empty(item, FIELD_CHAINS["title"])
        url = first_non_empty(item, FIELD_CHAINS["url"])
        if not title or not url:
            continue
        results.append(
            RawResult(
                position=index + 1,
                title=title,
                url=url,
                snippet=first_non_empty(item, FIELD_CHAINS["snippet"]),
            )
        )
    logger.debug("Found %d '%s' entries, kept %d", len(items), key, len(results))
    return results


def extract_organic(payload: Any) -> List[RawResult]:
    return extract_entries(payload, ORGANIC_KEY)


def extract_local(payload: Any) -> List[RawResult]:
    return extract_entries(payload, LOCAL_KEY)


_EXTRACTORS: Dict[Surface, Callable[[Any], List[RawResult]]] = {
    Surface.SEARCH: extract_organic,
    Surface.MAPS: extract_local,
}


def extract(payload: Any, surface: Union[Surface, str]) -> List[RawResult]:
    """Pick the extractor for *surface* and run it."""
    return _EXTRACTORS[Surface(surface)](payload)
