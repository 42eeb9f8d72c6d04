"""
Alias normalization for place names as the news providers spell them.

Each provider has its own table of spellings and abbreviations ("U.S.",
"Britain", "Burma") mapped to the canonical names the gazetteer uses.
Lookup is an exact, case-sensitive dictionary hit; anything unknown is
passed through unchanged, so normalization never fails.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterator, Mapping

# ── Provider alias tables ──────────────────────────────────────────────

# Guardian keyword tags and headlines. Iteration order matters: tag and title
# matching take the first alias that overlaps.
GUARDIAN_ALIASES: dict[str, str] = {
    "US": "United States",
    "USA": "United States",
    "America": "United States",
    "UK": "United Kingdom",
    "Britain": "United Kingdom",
    "England": "United Kingdom",
    "Russia": "Russia",
    "China": "China",
    "India": "India",
    "Japan": "Japan",
    "Germany": "Germany",
    "France": "France",
    "Italy": "Italy",
    "Spain": "Spain",
    "Canada": "Canada",
    "Australia": "Australia",
    "Brazil": "Brazil",
    "South Korea": "South Korea",
    "North Korea": "North Korea",
    "Pakistan": "Pakistan",
    "Bangladesh": "Bangladesh",
    "Iran": "Iran",
    "Iraq": "Iraq",
    "Saudi Arabia": "Saudi Arabia",
    "Israel": "Israel",
    "Palestine": "Palestine",
    "Gaza": "Gaza",
    "Syria": "Syria",
    "Egypt": "Egypt",
    "South Africa": "South Africa",
    "Nigeria": "Nigeria",
    "Kenya": "Kenya",
    "Ethiopia": "Ethiopia",
    "Mexico": "Mexico",
    "Argentina": "Argentina",
    "Colombia": "Colombia",
    "Venezuela": "Venezuela",
    "Turkey": "Turkey",
    "Indonesia": "Indonesia",
    "Malaysia": "Malaysia",
    "Philippines": "Philippines",
    "Vietnam": "Vietnam",
    "Thailand": "Thailand",
    "Myanmar": "Myanmar",
    "Burma": "Myanmar",
    "Afghanistan": "Afghanistan",
    "Ukraine": "Ukraine",
}

# NYTimes geo facets use dotted abbreviations
NYTIMES_ALIASES: dict[str, str] = {
    "U.S.": "United States",
    "United States": "United States",
    "America": "United States",
    "U.K.": "United Kingdom",
    "Britain": "United Kingdom",
    "England": "United Kingdom",
}

# World cities that, found in a Guardian headline, pin the story to a country
CITY_TO_COUNTRY: dict[str, str] = {
    "Beijing": "China",
    "Shanghai": "China",
    "Delhi": "India",
    "Mumbai": "India",
    "New York": "United States",
    "Washington": "United States",
    "London": "United Kingdom",
    "Paris": "France",
    "Berlin": "Germany",
    "Tokyo": "Japan",
    "Moscow": "Russia",
    "Cairo": "Egypt",
    "Dhaka": "Bangladesh",
    "Islamabad": "Pakistan",
    "Kyiv": "Ukraine",
    "Kabul": "Afghanistan",
    "Tehran": "Iran",
    "Baghdad": "Iraq",
    "Seoul": "South Korea",
    "Pyongyang": "North Korea",
    "Bangkok": "Thailand",
    "Yangon": "Myanmar",
    "Istanbul": "Turkey",
    "Tel Aviv": "Israel",
    "Jerusalem": "Israel",
    "Gaza City": "Gaza",
    "Nairobi": "Kenya",
    "Lagos": "Nigeria",
    "Johannesburg": "South Africa",
}


@dataclass(frozen=True)
class AliasTable:
    """Read-only, ordered alias -> canonical name mapping."""

    name: str
    entries: Mapping[str, str]

    @classmethod
    def from_dict(cls, name: str, entries: Mapping[str, str]) -> "AliasTable":
        return cls(name=name, entries=MappingProxyType(dict(entries)))

    @classmethod
    def merged(cls, name: str, *tables: "AliasTable") -> "AliasTable":
        """Union of several tables; earlier tables win on conflicting keys."""
        combined: dict[str, str] = {}
        for table in tables:
            for alias, canonical in table.items():
                combined.setdefault(alias, canonical)
        return cls.from_dict(name, combined)

    def normalize(self, raw: str) -> str:
        return self.entries.get(raw, raw)

    def items(self) -> Iterator[tuple[str, str]]:
        return iter(self.entries.items())

    def __contains__(self, alias: object) -> bool:
        return alias in self.entries

    def __len__(self) -> int:
        return len(self.entries)


GUARDIAN_TABLE = AliasTable.from_dict("guardian", GUARDIAN_ALIASES)
NYTIMES_TABLE = AliasTable.from_dict("nytimes", NYTIMES_ALIASES)
CITY_TABLE = AliasTable.from_dict("guardian-cities", CITY_TO_COUNTRY)
DEFAULT_TABLE = AliasTable.merged("default", NYTIMES_TABLE, GUARDIAN_TABLE)


def normalize(raw: str, table: AliasTable = DEFAULT_TABLE) -> str:
    """
    Map a provider spelling to its canonical name.
    Unknown names come back unchanged; e.g. "U.S." -> "United States",
    "Ruritania" -> "Ruritania".
    """
    return table.normalize(raw)
