"""
Central configuration loaded from environment variables with sensible defaults.
All secrets come from env vars; no hardcoded credentials.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache


@dataclass(frozen=True)
class GuardianConfig:
    api_key: str = os.getenv("GUARDIAN_API_KEY", "")
    base_url: str = os.getenv("GUARDIAN_API_URL", "https://content.guardianapis.com")
    search_endpoint: str = "/search"
    section: str = os.getenv("GUARDIAN_SECTION", "world")
    show_fields: str = "headline,standfirst,trailText"
    show_tags: str = "keyword"
    # Articles outside this editorial section never yield a location
    required_section_name: str = os.getenv("GUARDIAN_SECTION_NAME", "World news")
    request_timeout: int = int(os.getenv("GUARDIAN_TIMEOUT", "30"))


@dataclass(frozen=True)
class NYTimesConfig:
    api_key: str = os.getenv("NYTIMES_API_KEY", "")
    base_url: str = os.getenv("NYTIMES_API_URL", "https://api.nytimes.com")
    top_stories_endpoint: str = "/svc/topstories/v2/{section}.json"
    section: str = os.getenv("NYTIMES_SECTION", "world")
    request_timeout: int = int(os.getenv("NYTIMES_TIMEOUT", "30"))
    max_articles: int = int(os.getenv("NYTIMES_MAX_ARTICLES", "50"))


@dataclass(frozen=True)
class LayoutConfig:
    # Below this zoom the map shows one cluster per location
    cluster_zoom_threshold: float = float(os.getenv("LAYOUT_CLUSTER_ZOOM", "2.5"))
    base_offset: float = float(os.getenv("LAYOUT_BASE_OFFSET", "0.7"))
    country_offset_multiplier: float = float(os.getenv("LAYOUT_COUNTRY_MULTIPLIER", "1.5"))
    # 3 decimal degrees is roughly 111 m
    collision_precision: int = int(os.getenv("LAYOUT_COLLISION_PRECISION", "3"))
    min_zoom: float = 1.0
    max_zoom: float = 4.0
    zoom_step: float = 1.5


@dataclass(frozen=True)
class SchedulerConfig:
    enabled: bool = os.getenv("SCHEDULER_ENABLED", "true").lower() == "true"
    # Provider responses were revalidated hourly
    refresh_interval_minutes: int = int(os.getenv("SCHEDULER_REFRESH_MIN", "60"))


@dataclass(frozen=True)
class APIConfig:
    host: str = os.getenv("API_HOST", "0.0.0.0")
    port: int = int(os.getenv("API_PORT", "8000"))


@dataclass(frozen=True)
class Settings:
    guardian: GuardianConfig = field(default_factory=GuardianConfig)
    nytimes: NYTimesConfig = field(default_factory=NYTimesConfig)
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)
    api: APIConfig = field(default_factory=APIConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    env: str = os.getenv("APP_ENV", "development")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Singleton settings instance."""
    return Settings()
