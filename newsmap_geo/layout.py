"""
Clustering and offset layout for resolved items.

Given the resolved items and the current zoom, produce the markers a map
should draw:
  - aggregate mode (low zoom): one Cluster per canonical location,
    anchored at its first member
  - detail mode: one OffsetPoint per item; items whose coordinates round
    to the same point are fanned out on a circle so each stays clickable

Country-level items are first moved to their country's centre so a story
about "France" does not land on whichever city the gazetteer holds.

``LayoutEngine.layout`` is a pure function of its inputs and performs no
I/O; call it on every zoom or filter change.
"""

from __future__ import annotations

import math
from typing import Iterable, Mapping, Optional, Sequence

from newsmap_geo.config import LayoutConfig
from newsmap_geo.gazetteer import Coordinate
from newsmap_geo.models import Cluster, ClusterSummary, MarkerGroup, OffsetPoint, ResolvedItem
from newsmap_geo.resolver import LocationResolver


class LayoutEngine:
    def __init__(
        self,
        country_centers: Mapping[str, Coordinate],
        config: Optional[LayoutConfig] = None,
    ):
        self._centers = dict(country_centers)
        self.config = config or LayoutConfig()

    @classmethod
    def from_resolver(cls, resolver: LocationResolver, config: Optional[LayoutConfig] = None) -> "LayoutEngine":
        return cls(resolver.country_centers(), config)

    # ── Steps ──────────────────────────────────────────────────────────

    def anchor_countries(self, items: Iterable[ResolvedItem]) -> list[ResolvedItem]:
        anchored = []
        for item in items:
            center = self._centers.get(item.canonical_location) if item.is_country_level else None
            if center is not None:
                item = item.model_copy(update={"latitude": center.latitude, "longitude": center.longitude})
            anchored.append(item)
        return anchored

    def collision_key(self, item: ResolvedItem) -> str:
        p = self.config.collision_precision
        return f"{item.latitude:.{p}f},{item.longitude:.{p}f}"

    def offset_radius(self, zoom_factor: float, country_level: bool) -> float:
        radius = self.config.base_offset / max(zoom_factor, 1.0)
        if country_level:
            radius *= self.config.country_offset_multiplier
        return radius

    # ── Public API ─────────────────────────────────────────────────────

    def is_aggregate_zoom(self, zoom: float) -> bool:
        return zoom < self.config.cluster_zoom_threshold

    def layout(
        self,
        items: Sequence[ResolvedItem],
        aggregate: bool,
        zoom_factor: float = 1.0,
    ) -> list[MarkerGroup]:
        anchored = self.anchor_countries(items)

        if aggregate:
            clusters = []
            for location, members in _group_by(anchored, lambda i: i.canonical_location).items():
                first = members[0]
                clusters.append(Cluster(
                    location=location,
                    latitude=first.latitude,
                    longitude=first.longitude,
                    count=len(members),
                    is_country_level=first.is_country_level,
                    members=members,
                ))
            return clusters

        points: list[MarkerGroup] = []
        for group in _group_by(anchored, self.collision_key).values():
            if len(group) == 1:
                points.append(OffsetPoint(item=group[0]))
                continue
            radius = self.offset_radius(zoom_factor, group[0].is_country_level)
            step = 2 * math.pi / len(group)
            for k, item in enumerate(group):
                angle = k * step
                points.append(OffsetPoint(
                    item=item,
                    offset_lat=math.sin(angle) * radius,
                    offset_lon=math.cos(angle) * radius,
                ))
        return points

    def layout_for_zoom(self, items: Sequence[ResolvedItem], zoom: float) -> list[MarkerGroup]:
        return self.layout(items, self.is_aggregate_zoom(zoom), zoom)

    def zoom_in(self, zoom: float) -> float:
        if zoom >= self.config.max_zoom:
            return zoom
        return zoom * self.config.zoom_step

    def zoom_out(self, zoom: float) -> float:
        if zoom <= self.config.min_zoom:
            return zoom
        return zoom / self.config.zoom_step


def _group_by(items, key) -> dict[str, list[ResolvedItem]]:
    groups: dict[str, list[ResolvedItem]] = {}
    for item in items:
        groups.setdefault(key(item), []).append(item)
    return groups


def filter_by_source(items: Iterable[ResolvedItem], enabled: Iterable[str]) -> list[ResolvedItem]:
    """Keep items whose source is enabled; items with no source never show."""
    allowed = set(enabled)
    return [item for item in items if item.source_name and item.source_name in allowed]


def describe_cluster(cluster: Cluster) -> ResolvedItem | ClusterSummary:
    """What clicking a cluster opens: the lone article, or a summary card."""
    if cluster.count == 1:
        return cluster.members[0]
    n = len(cluster.members)
    return ClusterSummary(
        id=f"cluster-{cluster.location}",
        title=f"{n} articles about {cluster.location}",
        abstract=f"This cluster contains {n} news items about {cluster.location} from different sources.",
        location=cluster.location,
        latitude=cluster.latitude,
        longitude=cluster.longitude,
        articles=list(cluster.members),
    )
