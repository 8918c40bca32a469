# rank_tracker/client.py
"""
SERP provider client: builds the search URL for a task and posts it to the
provider's request endpoint.
"""
from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional
from urllib.parse import quote

from aiohttp import ClientError, ClientSession, ClientTimeout, ContentTypeError

from rank_tracker.config import TrackerConfig
from rank_tracker.geo import GeoResolutionError, GeoTargetResolver, encode_location
from rank_tracker.logger import logger
from rank_tracker.models import Task

__all__ = ("SEARCH_URL", "SerpClient")

SEARCH_URL = "https://www.google.com/search"

#: provider answers are logged up to this many characters
_LOG_BODY_LIMIT = 500


class SerpClient:
    """Async client for the SERP API, one call per :class:`Task`.

    Use as an async context manager so the underlying ``aiohttp`` session is
    closed::

        async with SerpClient(config) as client:
            payload = await client.fetch(task)
    """

    def __init__(self, config: TrackerConfig, resolver: Optional[GeoTargetResolver] = None) -> None:
        self.config = config
        self.resolver = resolver or GeoTargetResolver(config.geo_cache_path)
        self.session: Optional[ClientSession] = None

    async def __aenter__(self) -> SerpClient:
        self.session = ClientSession(
            timeout=ClientTimeout(total=self.config.timeout),
            headers={
                "Authorization": f"Bearer {self.config.api_token}",
                "Content-Type": "application/json",
            },
            raise_for_status=False,
        )
        # file I/O for the geo table happens here, once, off the event loop
        await asyncio.to_thread(self.resolver.load)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    def build_search_url(self, task: Task) -> str:
        location = task.location
        params = [f"q={quote(task.query.keyword, safe='')}", "brd_json=1"]

        if location.city and location.country:
            try:
                canonical = self.resolver.resolve(location.city, location.country)
                uule = encode_location(canonical)
            except GeoResolutionError as exc:
                # already reported when the table was loaded
                logger.debug("No uule for %s, %s: %s", location.city, location.country, exc)
                params.append(f"gl={quote(location.country, safe='')}")
            except Exception as exc:
                logger.warning(
                    "Could not build uule for %s, %s: %s; falling back to gl/hl",
                    location.city, location.country, exc,
                )
                params.append(f"gl={quote(location.country, safe='')}")
            else:
                # the token is a pre-agreed wire value and goes out verbatim
                params.append(f"uule={uule}")
                logger.debug("Geo targeting: %s -> %s", canonical, uule)

        if location.language:
            params.append(f"hl={quote(location.language, safe='')}")
        if location.device == "mobile":
            params.append("mobile=1")

        return f"{SEARCH_URL}?{'&'.join(params)}"

    async def fetch(self, task: Task) -> Optional[Dict[str, Any]]:
        """
        Issue the provider call for *task*.

        Returns the decoded payload, or None when the call failed (network
        error, timeout, non-2xx status, error body). Failures are logged here
        with the task description and never raised.
        """
        if not self.session:
            raise RuntimeError("Session not initialized")

        envelope = {
            "zone": self.config.zone,
            "url": self.build_search_url(task),
            "format": "json",
        }
        try:
            async with self.session.post(str(self.config.api_url), json=envelope) as resp:
                if not 200 <= resp.status < 300:
                    text = await resp.text(errors="replace")
                    logger.error(
                        "SERP API call for %s failed: HTTP %s %s",
                        task.description, resp.status, text[:_LOG_BODY_LIMIT],
                    )
                    return None
                try:
                    payload: Any = await resp.json(content_type=None)
                except (ContentTypeError, ValueError):
                    payload = {"body": await resp.text(errors="replace")}
        except (ClientError, asyncio.TimeoutError) as exc:
            logger.error("SERP API call for %s failed: %s", task.description, str(exc) or type(exc).__name__)
            return None

        if not isinstance(payload, dict):
            logger.error("SERP API call for %s returned %s, expected an object", task.description, type(payload).__name__)
            return None
        if payload.get("error"):
            logger.error("SERP API call for %s returned an error: %s", task.description, payload["error"])
            return None
        return payload
