"""
Pydantic models used across the pipeline for validation and serialization.
These are pure data objects — no I/O coupling.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator


# ── Enums ──────────────────────────────────────────────────────────────

class ExtractionTier(str, Enum):
    """Which extraction strategy produced a candidate, strongest first."""
    TAG = "tag"
    GEO_FACET = "geo_facet"
    TITLE = "title"
    CITY = "city"


class MatchTier(str, Enum):
    """Which resolver tier produced a coordinate, most precise first."""
    EXACT = "exact"
    CASE_INSENSITIVE = "case_insensitive"
    SUBSTRING = "substring"
    CONTINENT_FALLBACK = "continent_fallback"


# ── Provider raw models ───────────────────────────────────────────────

class GuardianTag(BaseModel):
    id: Optional[str] = None
    type: Optional[str] = None
    web_title: Optional[str] = Field(None, alias="webTitle")

    model_config = {"populate_by_name": True, "extra": "allow"}


class GuardianFields(BaseModel):
    headline: Optional[str] = None
    standfirst: Optional[str] = None
    trail_text: Optional[str] = Field(None, alias="trailText")

    model_config = {"populate_by_name": True, "extra": "allow"}


class GuardianArticle(BaseModel):
    """Represents an article as returned by the Guardian content API."""
    id: str
    section_name: Optional[str] = Field(None, alias="sectionName")
    web_title: Optional[str] = Field(None, alias="webTitle")
    web_url: Optional[str] = Field(None, alias="webUrl")
    web_publication_date: Optional[str] = Field(None, alias="webPublicationDate")
    tags: list[GuardianTag] = Field(default_factory=list)
    fields: Optional[GuardianFields] = None

    model_config = {"populate_by_name": True, "extra": "allow", "frozen": True}

    @field_validator("tags", mode="before")
    @classmethod
    def none_tags_to_empty(cls, v):
        return [] if v is None else v


class NYTimesArticle(BaseModel):
    """Represents a story as returned by the NYTimes Top Stories API."""
    uri: str
    title: Optional[str] = None
    abstract: Optional[str] = None
    url: Optional[str] = None
    published_date: Optional[str] = None
    geo_facet: list[str] = Field(default_factory=list)

    model_config = {"populate_by_name": True, "extra": "allow", "frozen": True}

    @field_validator("geo_facet", mode="before")
    @classmethod
    def parse_geo_facet(cls, v):
        """The API sends an empty string instead of an empty list."""
        if v is None or v == "":
            return []
        return v


RawArticle = Union[GuardianArticle, NYTimesArticle]


# ── Extraction / resolution models ────────────────────────────────────

class LocationCandidate(BaseModel):
    """The single place name extracted from an article."""
    name: str = Field(..., min_length=1)
    tier: ExtractionTier
    source_text: Optional[str] = Field(None, description="Tag, title or facet the name came from")

    model_config = {"frozen": True}


class Resolution(BaseModel):
    """Coordinate for a candidate plus how confidently it was matched."""
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)
    matched_name: str
    tier: MatchTier

    model_config = {"frozen": True}


class ResolvedItem(BaseModel):
    id: str
    title: str
    abstract: str = ""
    url: str = ""
    published_date: str = ""
    source_name: Optional[str] = None
    canonical_location: str = Field(..., min_length=1)
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)
    is_country_level: bool = False
    match_tier: Optional[MatchTier] = None

    model_config = {"frozen": True}


# ── Layout models ─────────────────────────────────────────────────────

class Cluster(BaseModel):
    kind: Literal["cluster"] = "cluster"
    location: str
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)
    count: int = Field(..., ge=1)
    is_country_level: bool = False
    members: list[ResolvedItem]

    model_config = {"frozen": True}


class OffsetPoint(BaseModel):
    kind: Literal["point"] = "point"
    item: ResolvedItem
    offset_lat: float = 0.0
    offset_lon: float = 0.0

    model_config = {"frozen": True}

    @property
    def display_latitude(self) -> float:
        return self.item.latitude + self.offset_lat

    @property
    def display_longitude(self) -> float:
        return self.item.longitude + self.offset_lon


MarkerGroup = Union[Cluster, OffsetPoint]


class ClusterSummary(BaseModel):
    """What a click on a multi-article cluster opens."""
    id: str
    title: str
    abstract: str
    location: str
    latitude: float
    longitude: float
    source_name: str = "Multiple Sources"
    articles: list[ResolvedItem] = Field(default_factory=list)


# ── API response models ───────────────────────────────────────────────

class HeadlinesResponse(BaseModel):
    news_items: list[ResolvedItem] = Field(default_factory=list)


class MarkersResponse(BaseModel):
    zoom: float
    aggregate: bool
    markers: list[MarkerGroup] = Field(default_factory=list)


class ResolveResponse(BaseModel):
    query: str
    normalized: str
    resolution: Resolution
    is_country_level: bool


class HealthResponse(BaseModel):
    status: str = "ok"
    total_items: int = 0
    sources: dict[str, int] = Field(default_factory=dict)
    last_refresh: Optional[str] = None
