# === FILE: rank_tracker/parser/html_parser.py ===
"""HTML parsing of raw Google result pages.

The provider normally answers with parsed JSON, but when the zone is set up
for raw output the page markup arrives as a string in the ``body`` field.
:func:`parse_serp_html` turns such markup into the same ``organic`` entry
shape the JSON answer uses, so the extractor does not need to care where the
entries came from.

Only the organic block is understood:

* each result is a ``div`` carrying the ``g`` class,
* title: text of the first ``<h3>``,
* link: first ``<a href>`` that is an absolute http(s) URL,
* snippet: text of the ``VwiC3b`` div, if present.
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import asdict, dataclass
from typing import Any, Dict, List

from bs4 import BeautifulSoup

__all__: Sequence[str] = ("SerpEntry", "parse_serp_html", "looks_like_html", "MAX_RESULTS")

#: a result page never holds more organic entries than this
MAX_RESULTS = 20


@dataclass(slots=True)
class SerpEntry:
    """One organic entry found in the markup."""

    title: str
    link: str
    snippet: str

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def looks_like_html(text: str) -> bool:
    head = text.lstrip()[:512].lower()
    return head.startswith("<") and ("<html" in head or "<!doctype" in head or "<div" in head)


def _first_link(block: Any) -> str:
    for tag in block.find_all("a", href=True):
        href = tag["href"].strip()
        if href.startswith(("http://", "https://")):
            return href
    return ""


def parse_serp_html(html: str) -> List[Dict[str, Any]]:
    """Return organic entries (``title``/``link``/``snippet`` dicts) in page order.

    Blocks without a title or link are skipped; nested ``g`` blocks are only
    counted once.
    """
    soup = BeautifulSoup(html, "html.parser")

    entries: List[Dict[str, Any]] = []
    seen_links: set[str] = set()
    for block in soup.select("div.g"):
        if block.find_parent("div", class_="g") is not None:
            continue
        heading = block.find("h3")
        title = heading.get_text(" ", strip=True) if heading else ""
        link = _first_link(block)
        if not title or not link or link in seen_links:
            continue
        snippet_tag = block.find("div", class_="VwiC3b")
        snippet = snippet_tag.get_text(" ", strip=True) if snippet_tag else ""

        seen_links.add(link)
        entries.append(SerpEntry(title=title, link=link, snippet=snippet).as_dict())
        if len(entries) >= MAX_RESULTS:
            break
    return entries
