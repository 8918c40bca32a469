"""rank_tracker.parser: parsers for raw (non-JSON) provider bodies."""

from rank_tracker.parser.html_parser import looks_like_html, parse_serp_html

__all__ = ["looks_like_html", "parse_serp_html"]
