"""
News provider ingestion.
Fetches world-section articles from the Guardian content API and the
NYTimes Top Stories API and validates them with Pydantic.
"""

from __future__ import annotations

import logging
from typing import Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from newsmap_geo.config import GuardianConfig, NYTimesConfig, get_settings
from newsmap_geo.models import GuardianArticle, NYTimesArticle

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class MissingAPIKey(RuntimeError):
    pass


def parse_articles(raw_list: list[dict], model: Type[ModelT]) -> list[ModelT]:
    """
    Validate raw API dicts into article models.
    Skips invalid entries with a warning.
    """
    results = []
    for raw in raw_list:
        try:
            results.append(model.model_validate(raw))
        except ValidationError as e:
            aid = raw.get("id", raw.get("uri", "unknown")) if isinstance(raw, dict) else "unknown"
            logger.warning("Failed to parse %s %s: %s", model.__name__, aid, e)
    return results


def _results_list(body: object, provider: str) -> list:
    """The `results` array of a provider payload; [] when the payload has another shape."""
    if not isinstance(body, dict):
        logger.warning("Unexpected %s response body: %s", provider, type(body).__name__)
        return []
    results = body.get("results") or []
    if not isinstance(results, list):
        logger.warning("Unexpected %s results field: %s", provider, type(results).__name__)
        return []
    return results


class GuardianClient:
    """Async client for the Guardian content search API."""

    def __init__(self, config: Optional[GuardianConfig] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config or get_settings().guardian
        self._transport = transport

    async def fetch_raw(self) -> list[dict]:
        if not self.config.api_key:
            raise MissingAPIKey("Guardian API key not configured")

        params = {
            "section": self.config.section,
            "show-fields": self.config.show_fields,
            "show-tags": self.config.show_tags,
            "api-key": self.config.api_key,
        }
        async with httpx.AsyncClient(transport=self._transport) as client:
            resp = await client.get(
                f"{self.config.base_url}{self.config.search_endpoint}",
                params=params,
                timeout=self.config.request_timeout,
            )
            resp.raise_for_status()
            data = resp.json()

        body = data.get("response") if isinstance(data, dict) else None
        results = _results_list(body, "Guardian")
        logger.info("Received %d Guardian articles", len(results))
        return results

    async def fetch_articles(self) -> list[GuardianArticle]:
        return parse_articles(await self.fetch_raw(), GuardianArticle)


class NYTimesClient:
    """Async client for the NYTimes Top Stories API."""

    def __init__(self, config: Optional[NYTimesConfig] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config or get_settings().nytimes
        self._transport = transport

    async def fetch_raw(self) -> list[dict]:
        if not self.config.api_key:
            raise MissingAPIKey("NYTimes API key not configured")

        endpoint = self.config.top_stories_endpoint.format(section=self.config.section)
        async with httpx.AsyncClient(transport=self._transport) as client:
            resp = await client.get(
                f"{self.config.base_url}{endpoint}",
                params={"api-key": self.config.api_key},
                timeout=self.config.request_timeout,
            )
            resp.raise_for_status()
            data = resp.json()

        results = _results_list(data, "NYTimes")
        if not results:
            logger.warning("No results returned from NYTimes API")
        else:
            logger.info("Received %d articles from NYTimes API", len(results))
        return results

    async def fetch_articles(self) -> list[NYTimesArticle]:
        return parse_articles(await self.fetch_raw(), NYTimesArticle)
