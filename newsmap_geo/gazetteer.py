"""
Reference gazetteer: the curated, size-bounded tables the resolver and the
layout engine consult.

Design:
  - Every entry maps a canonical place name (country, major city or named
    region) to one coordinate. Insertion order is significant: the
    resolver's substring tier takes the first key that matches.
  - Country-level stories are pinned to a separate, smaller table of
    country centres so they do not sit on a capital city.
  - Continent inference is an ordered rule list of (pattern, continent);
    the first matching rule wins and Europe is the default bucket.
  - All tables are bundled in a frozen ``ReferenceData`` object that is
    constructed once and handed to the resolver; nothing here is mutated
    after import.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Mapping


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class ContinentRule:
    pattern: re.Pattern
    continent: str

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None


# ══════════════════════════════════════════════════════════════════════
# GAZETTEER DATA
# ══════════════════════════════════════════════════════════════════════

def _adder(table: dict[str, Coordinate]) -> Callable[[str, float, float], None]:
    """Entry builder bound to one table; insertion order is lookup order."""
    def add(name: str, lat: float, lon: float) -> None:
        table[name] = Coordinate(lat, lon)
    return add


_GAZETTEER: dict[str, Coordinate] = {}
_add = _adder(_GAZETTEER)


# ── Countries (capital or centre as the anchor point) ─────────────────

_add("United States", 37.0902, -95.7129)
_add("Russia", 55.7558, 37.6173)            # Moscow
_add("China", 39.9042, 116.4074)            # Beijing
_add("United Kingdom", 51.5074, -0.1278)    # London
_add("France", 48.8566, 2.3522)             # Paris
_add("Germany", 52.5200, 13.4050)           # Berlin
_add("Japan", 35.6895, 139.6917)            # Tokyo
_add("India", 28.6139, 77.2090)             # New Delhi
_add("Brazil", -15.7801, -47.9292)          # Brasilia
_add("Canada", 45.4215, -75.6972)           # Ottawa
_add("Australia", -35.2809, 149.1300)       # Canberra
_add("South Africa", -26.2041, 28.0473)     # Johannesburg
_add("Mexico", 19.4326, -99.1332)           # Mexico City
_add("Italy", 41.9028, 12.4964)             # Rome
_add("Spain", 40.4168, -3.7038)             # Madrid
_add("Ukraine", 50.4501, 30.5234)           # Kyiv
_add("Indonesia", -6.2088, 106.8456)        # Jakarta
_add("South Korea", 37.5665, 126.9780)      # Seoul
_add("North Korea", 39.0392, 125.7625)      # Pyongyang
_add("Turkey", 39.9334, 32.8597)            # Ankara
_add("Israel", 31.7683, 35.2137)            # Jerusalem
_add("Palestine", 31.9522, 35.2332)
_add("Gaza", 31.5017, 34.4668)
_add("Egypt", 30.0444, 31.2357)             # Cairo
_add("Pakistan", 33.6844, 73.0479)          # Islamabad
_add("Afghanistan", 34.5553, 69.2075)       # Kabul
_add("Iran", 35.6892, 51.3890)              # Tehran
_add("Iraq", 33.3152, 44.3661)              # Baghdad
_add("Syria", 33.5138, 36.2765)             # Damascus
_add("Saudi Arabia", 24.7136, 46.6753)      # Riyadh
_add("Bangladesh", 23.8103, 90.4125)        # Dhaka
_add("Myanmar", 19.7633, 96.0785)           # Naypyidaw
_add("Thailand", 13.7563, 100.5018)         # Bangkok
_add("Vietnam", 21.0278, 105.8342)          # Hanoi
_add("Philippines", 14.5995, 120.9842)      # Manila
_add("Malaysia", 3.1390, 101.6869)          # Kuala Lumpur
_add("Nigeria", 9.0765, 7.3986)             # Abuja
_add("Kenya", -1.2921, 36.8219)             # Nairobi
_add("Ethiopia", 9.0300, 38.7400)           # Addis Ababa
_add("Argentina", -34.6037, -58.3816)       # Buenos Aires
_add("Colombia", 4.7110, -74.0721)          # Bogota
_add("Venezuela", 10.4806, -66.9036)        # Caracas

# ── Major cities ──────────────────────────────────────────────────────

_add("New York", 40.7128, -74.0060)
_add("Los Angeles", 34.0522, -118.2437)
_add("Chicago", 41.8781, -87.6298)
_add("London", 51.5074, -0.1278)
_add("Paris", 48.8566, 2.3522)
_add("Tokyo", 35.6895, 139.6917)
_add("Beijing", 39.9042, 116.4074)
_add("Moscow", 55.7558, 37.6173)
_add("Sydney", -33.8688, 151.2093)
_add("Toronto", 43.6532, -79.3832)
_add("Berlin", 52.5200, 13.4050)
_add("Istanbul", 41.0082, 28.9784)
_add("Dubai", 25.2048, 55.2708)
_add("Hong Kong", 22.3193, 114.1694)
_add("Singapore", 1.3521, 103.8198)

# ── Regions ───────────────────────────────────────────────────────────

_add("Middle East", 33.0, 44.015)
_add("Europe", 48.69, 9.19)
_add("Asia", 34.0, 100.0)
_add("Africa", 5.0, 20.0)
_add("North America", 40.0, -100.0)
_add("South America", -20.0, -60.0)
_add("Central America", 15.0, -85.0)
_add("Caribbean", 18.0, -75.0)
_add("Eastern Europe", 52.0, 25.0)
_add("Western Europe", 48.0, 5.0)
_add("Southeast Asia", 13.0, 107.0)
_add("East Asia", 35.0, 115.0)
_add("South Asia", 20.0, 80.0)
_add("Central Asia", 43.0, 65.0)
_add("North Africa", 28.0, 20.0)
_add("Sub-Saharan Africa", 0.0, 20.0)
_add("Scandinavia", 62.0, 15.0)
_add("Balkans", 42.0, 21.0)
_add("Latin America", -10.0, -80.0)


# ── Country centres (geographic centroid, used to de-cluster country pins)

_COUNTRY_CENTERS: dict[str, Coordinate] = {}
_add_center = _adder(_COUNTRY_CENTERS)

_add_center("United States", 37.0902, -95.7129)
_add_center("US", 37.0902, -95.7129)
_add_center("USA", 37.0902, -95.7129)
_add_center("United Kingdom", 55.3781, -3.4360)
_add_center("UK", 55.3781, -3.4360)
_add_center("Russia", 61.5240, 105.3188)
_add_center("China", 35.8617, 104.1954)
_add_center("India", 20.5937, 78.9629)
_add_center("Japan", 36.2048, 138.2529)
_add_center("Germany", 51.1657, 10.4515)
_add_center("France", 46.2276, 2.2137)
_add_center("Brazil", -14.2350, -51.9253)
_add_center("Canada", 56.1304, -106.3468)
_add_center("Australia", -25.2744, 133.7751)
_add_center("Italy", 41.8719, 12.5674)
_add_center("Spain", 40.4637, -3.7492)
_add_center("Mexico", 23.6345, -102.5528)
_add_center("Indonesia", -0.7893, 113.9213)
_add_center("South Korea", 35.9078, 127.7669)
_add_center("Turkey", 38.9637, 35.2433)
_add_center("Israel", 31.0461, 34.8516)
_add_center("Ukraine", 48.3794, 31.1656)
_add_center("South Africa", -30.5595, 22.9375)
_add_center("Egypt", 26.8206, 30.8025)
_add_center("Pakistan", 30.3753, 69.3451)
_add_center("Iran", 32.4279, 53.6880)
_add_center("Saudi Arabia", 23.8859, 45.0792)


# ── Continental fallbacks ─────────────────────────────────────────────

_CONTINENT_CENTROIDS: dict[str, Coordinate] = {}
_add_centroid = _adder(_CONTINENT_CENTROIDS)

_add_centroid("North America", 40.0, -100.0)
_add_centroid("South America", -20.0, -60.0)
_add_centroid("Europe", 48.69, 9.19)
_add_centroid("Asia", 34.0, 100.0)
_add_centroid("Africa", 5.0, 20.0)
_add_centroid("Australia", -26.0, 134.0)
_add_centroid("Antarctica", -90.0, 0.0)

DEFAULT_CONTINENT = "Europe"


def _rule(fragments: str, continent: str) -> ContinentRule:
    return ContinentRule(re.compile(fragments, re.IGNORECASE), continent)


# Checked in order; first hit wins. Europe is listed first, so "uk" inside
# "Ukraine" and similar overlaps resolve to Europe.
CONTINENT_RULES: tuple[ContinentRule, ...] = (
    _rule(r"europe|france|germany|italy|spain|uk|england|britain|portugal|greece|"
          r"netherlands|belgium|switzerland|austria|poland|ukraine|russia", "Europe"),
    _rule(r"asia|china|japan|india|korea|thailand|vietnam|philippines|indonesia|"
          r"malaysia|singapore|pakistan|bangladesh", "Asia"),
    _rule(r"africa|egypt|nigeria|kenya|south africa|morocco|algeria|tunisia|ghana|"
          r"ethiopia|somalia|sudan", "Africa"),
    _rule(r"north america|united states|usa|u\.s\.|canada|mexico", "North America"),
    _rule(r"south america|brazil|argentina|chile|peru|colombia|venezuela|ecuador|bolivia",
          "South America"),
    _rule(r"australia|new zealand|pacific|oceania", "Australia"),
)


# Locations treated as "the whole country" when laying out pins
COUNTRY_NAMES: tuple[str, ...] = (
    "United States", "US", "USA", "China", "Russia", "India", "Brazil",
    "United Kingdom", "UK", "France", "Germany", "Japan", "Canada", "Italy",
    "Spain", "Australia", "South Korea", "Mexico", "Indonesia", "Netherlands",
    "Saudi Arabia", "Turkey", "Switzerland", "Israel", "Poland", "Sweden",
    "Belgium", "Norway", "Austria", "Ukraine", "South Africa", "Egypt",
    "Denmark", "Singapore", "Hong Kong", "Finland", "Ireland", "Portugal",
    "Greece", "New Zealand", "Czech Republic", "Romania", "Chile", "Peru",
    "Pakistan", "Vietnam", "Bangladesh", "Nigeria", "Kenya", "Ghana",
)


# ══════════════════════════════════════════════════════════════════════
# REFERENCE BUNDLE
# ══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ReferenceData:
    """
    Immutable bundle of every lookup table the resolver needs.
    Build custom instances in tests to exercise a single tier in isolation.
    """

    gazetteer: Mapping[str, Coordinate]
    country_centers: Mapping[str, Coordinate]
    continent_centroids: Mapping[str, Coordinate]
    continent_rules: tuple[ContinentRule, ...] = CONTINENT_RULES
    country_names: tuple[str, ...] = COUNTRY_NAMES
    default_continent: str = DEFAULT_CONTINENT
    _country_set: frozenset = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.default_continent not in self.continent_centroids:
            raise ValueError(f"default continent {self.default_continent!r} has no centroid")
        object.__setattr__(self, "_country_set", frozenset(self.country_names))

    @classmethod
    def build(
        cls,
        gazetteer: Mapping[str, Coordinate],
        country_centers: Mapping[str, Coordinate] | None = None,
        continent_centroids: Mapping[str, Coordinate] | None = None,
        **kwargs,
    ) -> "ReferenceData":
        """Copy the given tables into read-only mappings."""
        return cls(
            gazetteer=MappingProxyType(dict(gazetteer)),
            country_centers=MappingProxyType(dict(country_centers or {})),
            continent_centroids=MappingProxyType(dict(continent_centroids or _CONTINENT_CENTROIDS)),
            **kwargs,
        )

    def is_country_name(self, location: str) -> bool:
        return location in self._country_set


DEFAULT_REFERENCE = ReferenceData.build(_GAZETTEER, _COUNTRY_CENTERS, _CONTINENT_CENTROIDS)
