# File: tests/conftest.py
from pathlib import Path
from typing import Any, Dict, List

import pytest

from rank_tracker.config import TrackerConfig
from rank_tracker.models import Location, Query, Surface, Task


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep real credentials out of the tests."""
    monkeypatch.delenv("BRIGHT_DATA_API_KEY", raising=False)
    monkeypatch.delenv("BRIGHT_DATA_ZONE", raising=False)


@pytest.fixture()
def queries() -> List[Query]:
    return [Query("coffee shops"), Query("best pizza near me")]


@pytest.fixture()
def locations() -> List[Location]:
    return [
        Location(city="New York", country="US", language="en", device="desktop"),
        Location(city="London", country="GB", language="en", device="mobile"),
    ]


@pytest.fixture()
def task(queries, locations) -> Task:
    return Task(query=queries[0], location=locations[0], surface=Surface.SEARCH)


def organic_payload(*domains: str) -> Dict[str, Any]:
    """Provider answer with one organic entry per domain."""
    return {
        "organic": [
            {
                "title": f"Result on {domain}",
                "link": f"https://www.{domain}/page",
                "description": f"Snippet for {domain}",
            }
            for domain in domains
        ]
    }


@pytest.fixture()
def input_files(tmp_path) -> Dict[str, Path]:
    """Queries and locations CSV files: 2 queries x 2 locations."""
    queries_csv = tmp_path / "queries.csv"
    locations_csv = tmp_path / "locations.csv"
    queries_csv.write_text("keyword\ncoffee shops\ndentist office\n", encoding="utf-8")
    locations_csv.write_text(
        "city,country,language,device\nNew York,US,en,desktop\nLondon,GB,en,mobile\n",
        encoding="utf-8",
    )
    return {"queries": queries_csv, "locations": locations_csv}


@pytest.fixture()
def basic_config(tmp_path, input_files) -> TrackerConfig:
    return TrackerConfig(
        api_token="test-token",
        queries_path=input_files["queries"],
        locations_path=input_files["locations"],
        output_dir=tmp_path / "output",
        geo_cache_path=None,
        timeout=2.0,
    )
