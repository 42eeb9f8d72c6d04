"""
FastAPI service exposing located headlines and map markers.

Endpoints:
  GET  /headlines          - NYTimes items from the current snapshot
  GET  /all-headlines      - Combined NYTimes + Guardian items
  GET  /markers            - Clusters or offset points for a zoom level
  GET  /clusters/{name}    - What clicking a cluster opens
  GET  /resolve            - Resolve a place string, with the tier used
  POST /refresh            - Refetch both providers now
  GET  /health             - Snapshot size and age
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional, Union

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from newsmap_geo.config import get_settings
from newsmap_geo.layout import LayoutEngine, describe_cluster, filter_by_source
from newsmap_geo.models import (
    Cluster,
    ClusterSummary,
    HeadlinesResponse,
    HealthResponse,
    MarkersResponse,
    ResolvedItem,
    ResolveResponse,
)
from newsmap_geo.pipeline import NYTIMES_SOURCE
from newsmap_geo.resolver import LocationResolver
from newsmap_geo.scheduler import HeadlineStore, refresh_job, start_scheduler, stop_scheduler

logger = logging.getLogger(__name__)

resolver = LocationResolver()
engine = LayoutEngine.from_resolver(resolver, get_settings().layout)
store = HeadlineStore(resolver)


# ── Lifespan ──────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: first refresh in the background + scheduler. Shutdown: stop it."""
    logger.info("Starting up API server...")
    initial = asyncio.create_task(refresh_job(store))
    start_scheduler(store)
    yield
    stop_scheduler()
    if not initial.done():
        initial.cancel()
    logger.info("API server shut down.")


# ── App ───────────────────────────────────────────────────────────────

app = FastAPI(
    title="NewsMap Geo API",
    description="World headlines placed on the map",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


# ── Helpers ───────────────────────────────────────────────────────────

def _visible_items(sources: Optional[list[str]]) -> list[ResolvedItem]:
    items = list(store.items)
    if sources is None:
        return items
    return filter_by_source(items, sources)


# ══════════════════════════════════════════════════════════════════════
# ENDPOINTS
# ══════════════════════════════════════════════════════════════════════

@app.get("/headlines", response_model=HeadlinesResponse)
async def headlines():
    return HeadlinesResponse(news_items=filter_by_source(store.items, [NYTIMES_SOURCE]))


@app.get("/all-headlines", response_model=HeadlinesResponse)
async def all_headlines():
    return HeadlinesResponse(news_items=list(store.items))


@app.get("/markers", response_model=MarkersResponse)
async def markers(
    zoom: float = Query(1.0, gt=0, le=64, description="Current map zoom"),
    source: Optional[list[str]] = Query(None, description="Sources to show; all when omitted"),
):
    """
    Markers for the current zoom: clusters below the cluster threshold,
    individually offset points above it.
    """
    aggregate = engine.is_aggregate_zoom(zoom)
    return MarkersResponse(
        zoom=zoom,
        aggregate=aggregate,
        markers=engine.layout(_visible_items(source), aggregate, zoom),
    )


@app.get("/clusters/{location}", response_model=Union[ClusterSummary, ResolvedItem])
async def cluster_detail(
    location: str,
    source: Optional[list[str]] = Query(None),
):
    for marker in engine.layout(_visible_items(source), aggregate=True):
        if isinstance(marker, Cluster) and marker.location == location:
            return describe_cluster(marker)
    raise HTTPException(404, f"No cluster at {location!r}")


@app.get("/resolve", response_model=ResolveResponse)
async def resolve_location(
    q: str = Query(..., min_length=1, max_length=200, description="Place name as a provider writes it"),
):
    normalized = resolver.aliases.normalize(q.strip())
    return ResolveResponse(
        query=q,
        normalized=normalized,
        resolution=resolver.resolve(q),
        is_country_level=resolver.is_country_level(normalized),
    )


@app.post("/refresh", response_model=HealthResponse)
async def refresh():
    await store.refresh()
    return await health_check()


@app.get("/health", response_model=HealthResponse)
async def health_check():
    last = store.last_refresh
    return HealthResponse(
        status="ok",
        total_items=len(store.items),
        sources=store.source_counts(),
        last_refresh=last.isoformat() if last else None,
    )
