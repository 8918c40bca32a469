# File: rank_tracker/normalizer.py
"""rank_tracker.normalizer: Приведение сырых результатов к каноническим записям."""

from __future__ import annotations

from urllib.parse import urlparse

from rank_tracker.models import CanonicalRecord, RawResult, Task

__all__ = ["extract_domain", "normalize"]


def extract_domain(url: str) -> str:
    """Возвращает хост из *url* без префикса ``www.``; если хоста нет, сам *url*."""
    try:
        host = urlparse(url).hostname
    except ValueError:
        return url
    if not host:
        return url
    return host.removeprefix("www.")


def normalize(raw: RawResult, task: Task, engine: str = "google") -> CanonicalRecord:
    location = task.location
    return CanonicalRecord(
        keyword=task.query.keyword,
        engine=engine,
        surface=str(task.surface),
        city=location.city,
        country=location.country,
        device=location.device,
        position=raw.position,
        title=raw.title,
        url=raw.url,
        domain=extract_domain(raw.url),
        snippet=raw.snippet,
    )
