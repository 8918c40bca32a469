import pytest

from rank_tracker.models import Location, Query, RawResult, Surface, Task
from rank_tracker.normalizer import extract_domain, normalize


@pytest.mark.parametrize(
    "url,domain",
    [
        ("https://www.en.wikipedia.org/wiki/Coffeehouse", "en.wikipedia.org"),
        ("https://en.wikipedia.org/wiki/Coffeehouse", "en.wikipedia.org"),
        ("http://WWW.Example.COM:8080/path?q=1", "example.com"),
        ("https://wwwexample.com/", "wwwexample.com"),
        ("not a url", "not a url"),
        ("http://[::1", "http://[::1"),
        ("", ""),
    ],
)
def test_extract_domain(url, domain):
    assert extract_domain(url) == domain


def test_normalize_builds_canonical_record():
    task = Task(
        query=Query("coffee shops"),
        location=Location(city="New York", country="US", language="en", device="mobile"),
        surface=Surface.MAPS,
    )
    raw = RawResult(
        position=4,
        title="Coffeehouse",
        url="https://www.en.wikipedia.org/wiki/Coffeehouse",
        snippet="A coffeehouse, coffee shop, or café...",
    )

    record = normalize(raw, task)

    assert record.to_dict() == {
        "keyword": "coffee shops",
        "engine": "google",
        "surface": "maps",
        "city": "New York",
        "country": "US",
        "device": "mobile",
        "position": 4,
        "title": "Coffeehouse",
        "url": "https://www.en.wikipedia.org/wiki/Coffeehouse",
        "domain": "en.wikipedia.org",
        "snippet": "A coffeehouse, coffee shop, or café...",
    }


def test_record_is_immutable(task):
    record = normalize(RawResult(1, "t", "https://a.com/"), task)
    with pytest.raises(AttributeError):
        record.domain = "b.com"
