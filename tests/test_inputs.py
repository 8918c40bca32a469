import pytest

from rank_tracker.inputs import read_locations, read_queries
from rank_tracker.models import Location, Query


def test_read_queries(input_files):
    assert read_queries(input_files["queries"]) == [Query("coffee shops"), Query("dentist office")]


def test_read_queries_skips_blank_rows_and_strips(tmp_path):
    path = tmp_path / "q.csv"
    path.write_text("keyword,notes\n  pizza  ,x\n,empty\nsushi,\n", encoding="utf-8")

    assert read_queries(path) == [Query("pizza"), Query("sushi")]


def test_read_queries_with_bom(tmp_path):
    path = tmp_path / "q.csv"
    path.write_bytes("keyword\ncafé\n".encode("utf-8-sig"))

    assert read_queries(path) == [Query("café")]


def test_read_locations(input_files):
    assert read_locations(input_files["locations"]) == [
        Location(city="New York", country="US", language="en", device="desktop"),
        Location(city="London", country="GB", language="en", device="mobile"),
    ]


def test_read_locations_default_device(tmp_path):
    path = tmp_path / "l.csv"
    path.write_text("city,country,language,device\nParis,FR,fr,\nLyon,FR,fr,MOBILE\n", encoding="utf-8")

    assert [loc.device for loc in read_locations(path)] == ["desktop", "mobile"]


def test_read_locations_unknown_device(tmp_path):
    path = tmp_path / "l.csv"
    path.write_text("city,country,language,device\nParis,FR,fr,tablet\n", encoding="utf-8")

    with pytest.raises(ValueError, match="tablet"):
        read_locations(path)


def test_missing_column(tmp_path):
    path = tmp_path / "l.csv"
    path.write_text("city,country\nParis,FR\n", encoding="utf-8")

    with pytest.raises(ValueError, match="language, device"):
        read_locations(path)


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_queries(tmp_path / "missing.csv")
