"""
Per-source location extraction.

Each provider gets a ``SourceExtractor``: an optional editorial-section gate
followed by an ordered chain of strategies. The first strategy that finds a
place wins; an article no strategy can place yields ``None`` and is skipped
downstream (logged, never raised).

Strategies:
  - TagStrategy:          keyword tags overlapping an alias key
  - TitleStrategy:        alias key appearing verbatim in the headline
  - CityFallbackStrategy: well-known city in the headline -> its country
  - GeoFacetStrategy:     provider-supplied geo tags (NYTimes geo_facet)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Sequence

from newsmap_geo.aliases import CITY_TABLE, GUARDIAN_TABLE, NYTIMES_TABLE, AliasTable
from newsmap_geo.models import (
    ExtractionTier,
    GuardianArticle,
    LocationCandidate,
    NYTimesArticle,
    RawArticle,
)

logger = logging.getLogger(__name__)


class ExtractionStrategy(Protocol):
    def extract(self, article: RawArticle) -> Optional[LocationCandidate]:
        ...


# ── Guardian strategies ───────────────────────────────────────────────

def _overlaps(a: str, b: str) -> bool:
    return a in b or b in a


@dataclass(frozen=True)
class TagStrategy:
    """Keyword tags whose title overlaps an alias key, in tag order."""

    aliases: AliasTable = GUARDIAN_TABLE
    tag_type: str = "keyword"

    def extract(self, article: RawArticle) -> Optional[LocationCandidate]:
        for tag in getattr(article, "tags", None) or []:
            title = tag.web_title
            if tag.type != self.tag_type or not title:
                continue
            for alias, canonical in self.aliases.items():
                if _overlaps(title, alias):
                    logger.debug("Found location in tag: %s (from %s)", canonical, title)
                    return LocationCandidate(name=canonical, tier=ExtractionTier.TAG, source_text=title)
        return None


def _article_title(article: RawArticle) -> str:
    return getattr(article, "web_title", None) or getattr(article, "title", None) or ""


@dataclass(frozen=True)
class TitleStrategy:
    """First alias key found verbatim in the headline, in table order."""

    aliases: AliasTable = GUARDIAN_TABLE
    tier: ExtractionTier = ExtractionTier.TITLE

    def extract(self, article: RawArticle) -> Optional[LocationCandidate]:
        title = _article_title(article)
        if not title:
            return None
        for alias, canonical in self.aliases.items():
            if alias in title:
                logger.debug("Found location in title: %s (from %s)", canonical, title)
                return LocationCandidate(name=canonical, tier=self.tier, source_text=title)
        return None


@dataclass(frozen=True)
class CityFallbackStrategy(TitleStrategy):
    """Title scan over city names, mapping each to its country."""

    aliases: AliasTable = CITY_TABLE
    tier: ExtractionTier = ExtractionTier.CITY


# ── NYTimes strategy ──────────────────────────────────────────────────

@dataclass(frozen=True)
class GeoFacetStrategy:
    """
    Pick one entry from a list of provider geo tags.

    The first entry is kept unless a later one normalizes to a single word
    while the current pick is several words; single-word names are taken
    to be countries and preferred over cities and regions. Multi-word
    countries ("South Korea") lose to any single-word facet.
    """

    aliases: AliasTable = NYTIMES_TABLE

    def extract(self, article: RawArticle) -> Optional[LocationCandidate]:
        selected = ""
        chosen_from = None
        for facet in getattr(article, "geo_facet", None) or []:
            if not facet or not facet.strip():
                continue
            standard = self.aliases.normalize(facet)
            logger.debug("Considering location: %s (standardized: %s)", facet, standard)
            if not selected or (" " in selected and " " not in standard):
                selected = standard
                chosen_from = facet
        if not selected:
            return None
        return LocationCandidate(name=selected, tier=ExtractionTier.GEO_FACET, source_text=chosen_from)


# ── Source extractors ─────────────────────────────────────────────────

@dataclass(frozen=True)
class SourceExtractor:
    """Section gate plus a priority-ordered strategy chain for one provider."""

    source_name: str
    strategies: Sequence[ExtractionStrategy]
    section_of: Optional[Callable[[RawArticle], Optional[str]]] = None
    required_section: Optional[str] = None

    def in_section(self, article: RawArticle) -> bool:
        if self.required_section is None or self.section_of is None:
            return True
        return self.section_of(article) == self.required_section

    def extract(self, article: RawArticle) -> Optional[LocationCandidate]:
        if not self.in_section(article):
            logger.debug("Skipping %s article outside section %r: %s",
                         self.source_name, self.required_section, _article_title(article))
            return None
        for strategy in self.strategies:
            candidate = strategy.extract(article)
            if candidate is not None:
                return candidate
        logger.info("No location found for %s article: %s", self.source_name, _article_title(article))
        return None


def _guardian_section(article: RawArticle) -> Optional[str]:
    return article.section_name if isinstance(article, GuardianArticle) else None


def guardian_extractor(required_section: str = "World news") -> SourceExtractor:
    return SourceExtractor(
        source_name="The Guardian",
        strategies=(TagStrategy(), TitleStrategy(), CityFallbackStrategy()),
        section_of=_guardian_section,
        required_section=required_section,
    )


def nytimes_extractor() -> SourceExtractor:
    return SourceExtractor(
        source_name="The New York Times",
        strategies=(GeoFacetStrategy(),),
    )


def has_geo_facets(article: NYTimesArticle) -> bool:
    return bool(article.geo_facet)
