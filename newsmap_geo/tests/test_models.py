"""
Tests for Pydantic model validation.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from newsmap_geo.models import (
    Cluster,
    ExtractionTier,
    GuardianArticle,
    LocationCandidate,
    MatchTier,
    NYTimesArticle,
    OffsetPoint,
    Resolution,
    ResolvedItem,
)


def _item(**overrides):
    data = dict(id="a", title="t", canonical_location="France", latitude=46.2, longitude=2.2)
    data.update(overrides)
    return ResolvedItem(**data)


class TestGuardianArticle:
    def test_alias_fields(self):
        data = {
            "id": "world/2024/may/01/story",
            "sectionName": "World news",
            "webTitle": "Heatwave grips Tehran",
            "webUrl": "https://www.theguardian.com/world/2024/may/01/story",
            "webPublicationDate": "2024-05-01T10:00:00Z",
            "tags": [{"id": "world/iran", "type": "keyword", "webTitle": "Iran"}],
            "fields": {"trailText": "Temperatures soar", "standfirst": "Longer text"},
        }
        article = GuardianArticle.model_validate(data)
        assert article.section_name == "World news"
        assert article.web_title == "Heatwave grips Tehran"
        assert article.tags[0].web_title == "Iran"
        assert article.fields.trail_text == "Temperatures soar"

    def test_extra_fields_allowed(self):
        article = GuardianArticle.model_validate({"id": "x", "pillarName": "News", "isHosted": False})
        assert article.id == "x"
        assert article.tags == []

    def test_id_required(self):
        with pytest.raises(ValidationError):
            GuardianArticle.model_validate({"webTitle": "No id"})


class TestNYTimesArticle:
    def test_basic_parsing(self):
        article = NYTimesArticle.model_validate({
            "uri": "nyt://article/abc",
            "title": "Talks resume",
            "abstract": "Diplomats meet.",
            "url": "https://www.nytimes.com/x.html",
            "published_date": "2024-05-01T05:00:00-04:00",
            "geo_facet": ["Paris (France)", "France"],
        })
        assert article.geo_facet == ["Paris (France)", "France"]

    def test_missing_geo_facet(self):
        assert NYTimesArticle.model_validate({"uri": "nyt://1"}).geo_facet == []


class TestResolvedItem:
    def test_coordinate_bounds(self):
        with pytest.raises(ValidationError):
            _item(latitude=91.0)
        with pytest.raises(ValidationError):
            _item(longitude=-180.5)

    def test_location_required(self):
        with pytest.raises(ValidationError):
            _item(canonical_location="")

    def test_frozen(self):
        with pytest.raises(ValidationError):
            _item().latitude = 0.0


class TestResolutionModels:
    def test_resolution(self):
        res = Resolution(latitude=48.69, longitude=9.19, matched_name="Europe",
                         tier=MatchTier.CONTINENT_FALLBACK)
        assert res.model_dump(mode="json")["tier"] == "continent_fallback"

    def test_candidate_needs_name(self):
        with pytest.raises(ValidationError):
            LocationCandidate(name="", tier=ExtractionTier.TITLE)


class TestMarkerModels:
    def test_cluster_count_positive(self):
        with pytest.raises(ValidationError):
            Cluster(location="France", latitude=0.0, longitude=0.0, count=0, members=[])

    def test_cluster_coordinate_bounds(self):
        with pytest.raises(ValidationError):
            Cluster(location="x", latitude=95.0, longitude=0.0, count=1, members=[_item()])
        with pytest.raises(ValidationError):
            Cluster(location="x", latitude=0.0, longitude=200.0, count=1, members=[_item()])

    def test_offset_point_display_position(self):
        p = OffsetPoint(item=_item(), offset_lat=0.5, offset_lon=-0.25)
        assert p.display_latitude == pytest.approx(46.7)
        assert p.display_longitude == pytest.approx(1.95)
        assert p.kind == "point"
