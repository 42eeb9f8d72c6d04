"""
Tests for provider ingestion and the per-source pipelines.
HTTP is served by httpx.MockTransport — no network required.
"""

from __future__ import annotations

import asyncio

import httpx
import pytest

from newsmap_geo.config import GuardianConfig, NYTimesConfig
from newsmap_geo.ingest import GuardianClient, MissingAPIKey, NYTimesClient, parse_articles
from newsmap_geo.models import GuardianArticle, MatchTier, NYTimesArticle
from newsmap_geo.pipeline import (
    GUARDIAN_SOURCE,
    NO_DESCRIPTION,
    NYTIMES_SOURCE,
    collect_headlines,
    guardian_item,
    resolve_guardian,
    resolve_nytimes,
    run_source_pipeline,
)
from newsmap_geo.extract import guardian_extractor
from newsmap_geo.resolver import LocationResolver

GUARDIAN_PAYLOAD = {
    "response": {
        "status": "ok",
        "total": 3,
        "results": [
            {
                "id": "world/1",
                "sectionName": "World news",
                "webTitle": "Rail strike spreads",
                "webUrl": "https://www.theguardian.com/world/1",
                "webPublicationDate": "2024-05-01T10:00:00Z",
                "tags": [{"id": "uk/uk", "type": "keyword", "webTitle": "UK news"}],
                "fields": {"trailText": "Unions walk out"},
            },
            {
                "id": "world/2",
                "sectionName": "World news",
                "webTitle": "A quiet day everywhere",
                "tags": [],
            },
            {
                "id": "world/3",
                "sectionName": "World news",
                "webTitle": "Heatwave grips Tehran",
                "tags": [],
                "fields": {"standfirst": "Records broken"},
            },
        ],
    }
}

NYTIMES_PAYLOAD = {
    "status": "OK",
    "results": [
        {
            "uri": "nyt://article/1",
            "title": "Summit in Paris",
            "abstract": "Leaders meet.",
            "url": "https://www.nytimes.com/1.html",
            "published_date": "2024-05-01T05:00:00-04:00",
            "geo_facet": ["Paris (France)", "France"],
        },
        {"uri": "nyt://article/2", "title": "Markets", "geo_facet": ""},
        {"uri": "nyt://article/3", "title": "Ruritanian crisis", "geo_facet": ["Ruritania"]},
        {"title": "Missing uri", "geo_facet": ["France"]},
    ],
}


def _transport(status: int, payload: dict, seen: list | None = None) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status, json=payload)
    return httpx.MockTransport(handler)


def _raw_transport(content: bytes) -> httpx.MockTransport:
    return httpx.MockTransport(lambda request: httpx.Response(200, content=content))


def _guardian_client(status=200, payload=GUARDIAN_PAYLOAD, key="test-key", seen=None):
    return GuardianClient(GuardianConfig(api_key=key), transport=_transport(status, payload, seen))


def _nytimes_client(status=200, payload=NYTIMES_PAYLOAD, key="test-key", seen=None):
    return NYTimesClient(NYTimesConfig(api_key=key), transport=_transport(status, payload, seen))


@pytest.fixture(scope="module")
def resolver():
    return LocationResolver()


class TestClients:
    def test_guardian_request(self):
        seen: list[httpx.Request] = []
        articles = asyncio.run(_guardian_client(seen=seen).fetch_articles())
        assert [a.id for a in articles] == ["world/1", "world/2", "world/3"]
        params = seen[0].url.params
        assert seen[0].url.path == "/search"
        assert params["section"] == "world"
        assert params["show-tags"] == "keyword"
        assert params["api-key"] == "test-key"

    def test_nytimes_request(self):
        seen: list[httpx.Request] = []
        articles = asyncio.run(_nytimes_client(seen=seen).fetch_articles())
        assert seen[0].url.path == "/svc/topstories/v2/world.json"
        # The record without a uri is skipped during validation
        assert [a.uri for a in articles] == ["nyt://article/1", "nyt://article/2", "nyt://article/3"]

    def test_missing_key(self):
        with pytest.raises(MissingAPIKey):
            asyncio.run(_guardian_client(key="").fetch_raw())

    def test_http_error_raises(self):
        with pytest.raises(httpx.HTTPStatusError):
            asyncio.run(_nytimes_client(status=500, payload={}).fetch_raw())

    @pytest.mark.parametrize("content", [
        b"[]", b"null", b'"oops"', b'{"response": []}', b'{"response": {"results": {}}}'])
    def test_guardian_unexpected_body(self, content):
        client = GuardianClient(GuardianConfig(api_key="k"), transport=_raw_transport(content))
        assert asyncio.run(client.fetch_raw()) == []

    @pytest.mark.parametrize("content", [b"[]", b"null", b"42", b'{"results": "none"}'])
    def test_nytimes_unexpected_body(self, content):
        client = NYTimesClient(NYTimesConfig(api_key="k"), transport=_raw_transport(content))
        assert asyncio.run(client.fetch_raw()) == []

    def test_parse_articles_skips_invalid(self):
        parsed = parse_articles([{"uri": "a"}, {"title": "no uri"}, {"uri": "b"}], NYTimesArticle)
        assert [a.uri for a in parsed] == ["a", "b"]


class TestSourcePipelines:
    def test_guardian_items(self, resolver):
        articles = parse_articles(GUARDIAN_PAYLOAD["response"]["results"], GuardianArticle)
        items = resolve_guardian(articles, resolver)
        assert [i.id for i in items] == ["guardian-world/1", "guardian-world/3"]

        uk, iran = items
        assert uk.canonical_location == "United Kingdom"
        assert uk.abstract == "Unions walk out"
        assert uk.source_name == GUARDIAN_SOURCE
        assert uk.is_country_level is True
        assert iran.canonical_location == "Iran"
        assert iran.abstract == "Records broken"

    def test_guardian_abstract_default(self, resolver):
        article = GuardianArticle.model_validate(
            {"id": "w", "sectionName": "World news", "webTitle": "Crisis in Japan"})
        [item] = resolve_guardian([article], resolver)
        assert item.abstract == NO_DESCRIPTION

    def test_nytimes_items(self, resolver):
        articles = parse_articles(NYTIMES_PAYLOAD["results"], NYTimesArticle)
        items = resolve_nytimes(articles, resolver)
        assert [i.id for i in items] == ["nyt://article/1", "nyt://article/3"]
        assert items[0].canonical_location == "France"
        assert items[0].source_name == NYTIMES_SOURCE
        assert items[1].canonical_location == "Ruritania"
        assert items[1].match_tier == MatchTier.CONTINENT_FALLBACK

    def test_nytimes_capped_at_fifty(self, resolver):
        articles = [NYTimesArticle(uri=f"nyt://{i}", title="t", geo_facet=["France"]) for i in range(60)]
        items = resolve_nytimes(articles, resolver)
        assert len(items) == 50
        assert items[-1].id == "nyt://49"

    def test_stats(self, resolver):
        articles = parse_articles(GUARDIAN_PAYLOAD["response"]["results"], GuardianArticle)
        items, stats = run_source_pipeline(articles, guardian_extractor(), resolver, guardian_item)
        assert stats["articles"] == 3
        assert stats["resolved"] == 2
        assert stats["skipped"] == 1
        assert stats["tiers"] == {"exact": 2}


class TestCollectHeadlines:
    def test_nytimes_then_guardian(self, resolver):
        items = asyncio.run(collect_headlines(
            resolver, nytimes_client=_nytimes_client(), guardian_client=_guardian_client()))
        assert [i.source_name for i in items] == [NYTIMES_SOURCE] * 2 + [GUARDIAN_SOURCE] * 2

    def test_one_provider_down(self, resolver):
        items = asyncio.run(collect_headlines(
            resolver,
            nytimes_client=_nytimes_client(status=503, payload={}),
            guardian_client=_guardian_client(),
        ))
        assert [i.id for i in items] == ["guardian-world/1", "guardian-world/3"]

    def test_missing_keys_yield_nothing(self, resolver):
        items = asyncio.run(collect_headlines(
            resolver, nytimes_client=_nytimes_client(key=""), guardian_client=_guardian_client(key="")))
        assert items == []

    def test_coordinates_in_range(self, resolver):
        items = asyncio.run(collect_headlines(
            resolver, nytimes_client=_nytimes_client(), guardian_client=_guardian_client()))
        for i in items:
            assert -90 <= i.latitude <= 90
            assert -180 <= i.longitude <= 180

    def test_malformed_body_keeps_other_provider(self, resolver):
        guardian = GuardianClient(GuardianConfig(api_key="k"), transport=_raw_transport(b"[]"))
        nytimes = _nytimes_client(payload={"results": [{"uri": "nyt://1", "geo_facet": ["France"]}]})
        items = asyncio.run(collect_headlines(resolver, nytimes_client=nytimes, guardian_client=guardian))
        assert [i.canonical_location for i in items] == ["France"]
