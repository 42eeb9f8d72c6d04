"""
Pipeline orchestrator.
Ties together fetch -> extract -> resolve for each news provider, and runs
the providers concurrently.

Each provider pipeline is independent: its own article batch, read-only
reference tables. Results are concatenated NYTimes first, then Guardian.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import Counter
from typing import Callable, Optional, Sequence

import httpx

from newsmap_geo.config import get_settings
from newsmap_geo.extract import SourceExtractor, guardian_extractor, has_geo_facets, nytimes_extractor
from newsmap_geo.ingest import GuardianClient, MissingAPIKey, NYTimesClient
from newsmap_geo.models import GuardianArticle, LocationCandidate, NYTimesArticle, RawArticle, ResolvedItem
from newsmap_geo.resolver import LocationResolver

logger = logging.getLogger(__name__)

GUARDIAN_SOURCE = "The Guardian"
NYTIMES_SOURCE = "The New York Times"
NO_DESCRIPTION = "No description available"

ItemBuilder = Callable[[RawArticle, LocationCandidate, LocationResolver], ResolvedItem]


# ── Item builders ──────────────────────────────────────────────────────

def guardian_item(article: GuardianArticle, candidate: LocationCandidate, resolver: LocationResolver) -> ResolvedItem:
    fields = article.fields
    abstract = (fields and (fields.trail_text or fields.standfirst)) or NO_DESCRIPTION
    return resolver.build_item(
        candidate,
        item_id=f"guardian-{article.id}",
        title=article.web_title or "",
        abstract=abstract,
        url=article.web_url or "",
        published_date=article.web_publication_date or "",
        source_name=GUARDIAN_SOURCE,
    )


def nytimes_item(article: NYTimesArticle, candidate: LocationCandidate, resolver: LocationResolver) -> ResolvedItem:
    return resolver.build_item(
        candidate,
        item_id=article.uri,
        title=article.title or "",
        abstract=article.abstract or "",
        url=article.url or "",
        published_date=article.published_date or "",
        source_name=NYTIMES_SOURCE,
    )


# ── Per-source pipeline ───────────────────────────────────────────────

def run_source_pipeline(
    articles: Sequence[RawArticle],
    extractor: SourceExtractor,
    resolver: LocationResolver,
    build: ItemBuilder,
) -> tuple[list[ResolvedItem], dict]:
    """
    Extract and resolve every article, in input order.
    Articles with no location are skipped, never raised.
    Returns (items, stats).
    """
    items: list[ResolvedItem] = []
    tiers: Counter = Counter()
    skipped = 0

    for article in articles:
        candidate = extractor.extract(article)
        if candidate is None:
            skipped += 1
            continue
        item = build(article, candidate, resolver)
        tiers[item.match_tier.value] += 1
        items.append(item)

    stats = {
        "source": extractor.source_name,
        "articles": len(articles),
        "resolved": len(items),
        "skipped": skipped,
        "tiers": dict(tiers),
    }
    logger.info("Returning %d valid %s articles with locations: %s",
                len(items), extractor.source_name, stats)
    return items, stats


def resolve_guardian(
    articles: Sequence[GuardianArticle],
    resolver: LocationResolver,
    extractor: Optional[SourceExtractor] = None,
) -> list[ResolvedItem]:
    extractor = extractor or guardian_extractor(get_settings().guardian.required_section_name)
    items, _ = run_source_pipeline(articles, extractor, resolver, guardian_item)
    return items


def resolve_nytimes(
    articles: Sequence[NYTimesArticle],
    resolver: LocationResolver,
    extractor: Optional[SourceExtractor] = None,
) -> list[ResolvedItem]:
    limit = get_settings().nytimes.max_articles
    with_facets = [a for a in articles if has_geo_facets(a)][:limit]
    items, _ = run_source_pipeline(with_facets, extractor or nytimes_extractor(), resolver, nytimes_item)
    return items


# ── Fetch + resolve ───────────────────────────────────────────────────

async def fetch_guardian_items(resolver: LocationResolver, client: Optional[GuardianClient] = None) -> list[ResolvedItem]:
    """Guardian headlines with locations; [] if the provider is unavailable."""
    client = client or GuardianClient()
    try:
        articles = await client.fetch_articles()
    except (MissingAPIKey, httpx.HTTPError, ValueError) as e:
        logger.error("Error fetching Guardian headlines: %s", e)
        return []
    return resolve_guardian(articles, resolver)


async def fetch_nytimes_items(resolver: LocationResolver, client: Optional[NYTimesClient] = None) -> list[ResolvedItem]:
    """NYTimes headlines with locations; [] if the provider is unavailable."""
    client = client or NYTimesClient()
    try:
        articles = await client.fetch_articles()
    except (MissingAPIKey, httpx.HTTPError, ValueError) as e:
        logger.error("Error fetching NYTimes headlines: %s", e)
        return []
    return resolve_nytimes(articles, resolver)


async def collect_headlines(
    resolver: LocationResolver,
    nytimes_client: Optional[NYTimesClient] = None,
    guardian_client: Optional[GuardianClient] = None,
) -> list[ResolvedItem]:
    """
    Fetch both providers concurrently and concatenate, NYTimes first.
    One provider failing leaves the other's items intact.
    """
    start_time = time.monotonic()
    nytimes_items, guardian_items = await asyncio.gather(
        fetch_nytimes_items(resolver, nytimes_client),
        fetch_guardian_items(resolver, guardian_client),
    )
    combined = [*nytimes_items, *guardian_items]
    logger.info("Returning combined %d news items from NYTimes and Guardian in %.1fs",
                len(combined), time.monotonic() - start_time)
    return combined
