"""
Location resolver: raw place string -> coordinate, never failing.

Strategy (first tier that hits wins):
  1. Normalize the string through the alias table ("U.S." -> "United States")
  2. Exact key match in the gazetteer
  3. Case-insensitive key match
  4. Substring match in either direction, in gazetteer order
  5. Continent inference from name fragments, Europe by default

Tier 5 always produces a coordinate, so every retained article is plottable.
The tier that answered is reported on the result and logged.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional

from newsmap_geo.aliases import DEFAULT_TABLE, AliasTable
from newsmap_geo.gazetteer import DEFAULT_REFERENCE, Coordinate, ReferenceData
from newsmap_geo.models import LocationCandidate, MatchTier, Resolution, ResolvedItem

logger = logging.getLogger(__name__)


class LocationResolver:
    """Tiered lookup against a fixed ``ReferenceData`` bundle."""

    def __init__(
        self,
        reference: ReferenceData = DEFAULT_REFERENCE,
        aliases: AliasTable = DEFAULT_TABLE,
    ):
        self.reference = reference
        self.aliases = aliases
        # Lowercased keys, computed once; order follows the gazetteer
        self._lowered: tuple[tuple[str, str], ...] = tuple(
            (key.lower(), key) for key in reference.gazetteer
        )

    # ── Tiers ──────────────────────────────────────────────────────────

    def match_exact(self, name: str) -> Optional[str]:
        return name if name in self.reference.gazetteer else None

    def match_case_insensitive(self, name: str) -> Optional[str]:
        lowered = name.lower()
        for key_lower, key in self._lowered:
            if key_lower == lowered:
                return key
        return None

    def match_substring(self, name: str) -> Optional[str]:
        lowered = name.lower()
        if not lowered:
            return None
        for key_lower, key in self._lowered:
            if lowered in key_lower or key_lower in lowered:
                return key
        return None

    def infer_continent(self, name: str) -> str:
        for rule in self.reference.continent_rules:
            if rule.matches(name):
                return rule.continent
        return self.reference.default_continent

    # ── Public API ─────────────────────────────────────────────────────

    def resolve(self, candidate: str) -> Resolution:
        """
        Resolve a place string to a coordinate.
        Returns a Resolution carrying the matched gazetteer key (or the
        continent name on fallback) and the tier that produced it.
        """
        name = self.aliases.normalize(candidate.strip())

        tiers = (
            (MatchTier.EXACT, self.match_exact),
            (MatchTier.CASE_INSENSITIVE, self.match_case_insensitive),
            (MatchTier.SUBSTRING, self.match_substring),
        )
        if name:
            for tier, matcher in tiers:
                key = matcher(name)
                if key is not None:
                    coord = self.reference.gazetteer[key]
                    logger.debug("Resolved '%s' -> '%s' (%s)", candidate, key, tier.value)
                    return _resolution(coord, key, tier)

        continent = self.infer_continent(name)
        coord = self.reference.continent_centroids[continent]
        logger.info("Using continental fallback for '%s' -> %s", candidate, continent)
        return _resolution(coord, continent, MatchTier.CONTINENT_FALLBACK)

    def resolve_country_center(self, country: str) -> Coordinate:
        """Curated country centroid, else whatever ``resolve`` finds."""
        center = self.reference.country_centers.get(country)
        if center is not None:
            return center
        res = self.resolve(country)
        return Coordinate(res.latitude, res.longitude)

    def country_centers(self) -> Mapping[str, Coordinate]:
        """Centre for every name in the country list, computed eagerly."""
        return {name: self.resolve_country_center(name) for name in self.reference.country_names}

    def is_country_level(self, location: str) -> bool:
        return self.reference.is_country_name(location)

    def build_item(
        self,
        candidate: LocationCandidate,
        *,
        item_id: str,
        title: str,
        abstract: str = "",
        url: str = "",
        published_date: str = "",
        source_name: Optional[str] = None,
    ) -> ResolvedItem:
        """Resolve a candidate and wrap it with the article's metadata."""
        res = self.resolve(candidate.name)
        return ResolvedItem(
            id=item_id,
            title=title,
            abstract=abstract,
            url=url,
            published_date=published_date,
            source_name=source_name,
            canonical_location=candidate.name,
            latitude=res.latitude,
            longitude=res.longitude,
            is_country_level=self.is_country_level(candidate.name),
            match_tier=res.tier,
        )


def _resolution(coord: Coordinate, matched: str, tier: MatchTier) -> Resolution:
    return Resolution(
        latitude=coord.latitude,
        longitude=coord.longitude,
        matched_name=matched,
        tier=tier,
    )


def resolve(candidate: str) -> Resolution:
    """Resolve against the bundled reference tables."""
    return _default_resolver.resolve(candidate)


_default_resolver = LocationResolver()
