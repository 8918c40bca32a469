# === FILE: rank_tracker/geo.py ===
"""
Geo targeting helpers: canonical location names and the uule token.

The canonical names follow Google's geo target naming
(``City,Region,Country``). The table is small and static; it is mirrored to
a JSON cache file so it can be extended by hand without touching code.
"""
from __future__ import annotations

import base64
import json
from pathlib import Path
from typing import Dict, Optional, Union

from rank_tracker.logger import logger

UULE_PREFIX = "w+CAIQICIN"

GeoTable = Dict[str, Dict[str, str]]

DEFAULT_GEO_TARGETS: GeoTable = {
    "US": {
        "New York": "New York,New York,United States",
        "Los Angeles": "Los Angeles,California,United States",
        "Chicago": "Chicago,Illinois,United States",
        "Houston": "Houston,Texas,United States",
        "Phoenix": "Phoenix,Arizona,United States",
    },
    "GB": {
        "London": "London,England,United Kingdom",
        "Manchester": "Manchester,England,United Kingdom",
        "Birmingham": "Birmingham,England,United Kingdom",
    },
    "FR": {
        "Paris": "Paris,France",
        "Marseille": "Marseille,France",
        "Lyon": "Lyon,France",
    },
    "CA": {
        "Toronto": "Toronto,Ontario,Canada",
        "Montreal": "Montreal,Quebec,Canada",
        "Vancouver": "Vancouver,British Columbia,Canada",
    },
    "DE": {
        "Berlin": "Berlin,Germany",
        "Munich": "Munich,Bavaria,Germany",
        "Hamburg": "Hamburg,Germany",
    },
    "JP": {
        "Tokyo": "Tokyo,Japan",
        "Osaka": "Osaka,Japan",
        "Kyoto": "Kyoto,Japan",
    },
    "AU": {
        "Sydney": "Sydney,New South Wales,Australia",
        "Melbourne": "Melbourne,Victoria,Australia",
        "Brisbane": "Brisbane,Queensland,Australia",
    },
    "MX": {
        "Mexico City": "Mexico City,Mexico",
        "Guadalajara": "Guadalajara,Jalisco,Mexico",
        "Monterrey": "Monterrey,Nuevo Leon,Mexico",
    },
}


class GeoResolutionError(Exception):
    """The geo target table could not be loaded."""


def encode_location(canonical_name: str) -> str:
    """Return the uule token for *canonical_name*: fixed prefix + Base64."""
    encoded = base64.b64encode(canonical_name.encode("utf-8")).decode("ascii")
    return f"{UULE_PREFIX}{encoded}"


class GeoTargetResolver:
    """Maps (city, country) to a canonical location name.

    The table is loaded on first use from *cache_path*; when the file does not
    exist it is created from :data:`DEFAULT_GEO_TARGETS`. ``cache_path=None``
    keeps everything in memory.
    """

    def __init__(
        self,
        cache_path: Union[str, Path, None] = None,
        table: Optional[GeoTable] = None,
    ) -> None:
        self.cache_path = Path(cache_path) if cache_path is not None else None
        self._table: Optional[GeoTable] = table
        self._error: Optional[GeoResolutionError] = None

    @property
    def table(self) -> GeoTable:
        # a broken cache is read once; later lookups re-raise the same error
        if self._error is not None:
            raise self._error
        if self._table is None:
            try:
                self._table = self._load()
            except GeoResolutionError as exc:
                self._error = exc
                raise
        return self._table

    def load(self) -> bool:
        """Load the table now. Returns False (and logs) when the cache is unusable."""
        try:
            self.table
        except GeoResolutionError as exc:
            logger.warning("%s; geo targeting disabled", exc)
            return False
        return True

    def resolve(self, city: str, country: str) -> str:
        """Canonical name for the pair, ``"{city},{country}"`` when unknown."""
        canonical = self.table.get(country, {}).get(city)
        if canonical:
            return canonical
        logger.debug("No geo target for %s, %s; using plain name", city, country)
        return f"{city},{country}"

    def token_for(self, city: str, country: str) -> str:
        return encode_location(self.resolve(city, country))

    def _load(self) -> GeoTable:
        if self.cache_path is None:
            return DEFAULT_GEO_TARGETS

        if self.cache_path.is_file():
            logger.debug("Using cached geo targets: %s", self.cache_path)
            try:
                data = json.loads(self.cache_path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as exc:
                raise GeoResolutionError(f"Cannot read geo targets cache {self.cache_path}: {exc}") from exc
            if not isinstance(data, dict) or not all(isinstance(v, dict) for v in data.values()):
                raise GeoResolutionError(f"Geo targets cache {self.cache_path} must map country -> city -> name")
            return data

        try:
            self.cache_path.parent.mkdir(parents=True, exist_ok=True)
            self.cache_path.write_text(
                json.dumps(DEFAULT_GEO_TARGETS, ensure_ascii=False, indent=2), encoding="utf-8"
            )
            logger.info("Geo targets cached to %s", self.cache_path)
        except OSError as exc:
            logger.warning("Could not write geo targets cache %s: %s", self.cache_path, exc)
        return DEFAULT_GEO_TARGETS


__all__ = [
    "UULE_PREFIX",
    "DEFAULT_GEO_TARGETS",
    "GeoResolutionError",
    "GeoTargetResolver",
    "encode_location",
]
