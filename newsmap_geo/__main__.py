"""CLI entrypoint for newsmap_geo."""

from __future__ import annotations

import argparse
import asyncio
import json

from newsmap_geo.logging_config import setup_logging


def main() -> None:
    setup_logging()

    parser = argparse.ArgumentParser(prog="newsmap-geo")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("serve")
    sub.add_parser("fetch")

    resolve_parser = sub.add_parser("resolve")
    resolve_parser.add_argument("names", nargs="+")

    layout_parser = sub.add_parser("layout")
    layout_parser.add_argument("--zoom", type=float, default=1.0)
    layout_parser.add_argument("--source", action="append", default=None)

    args = parser.parse_args()

    if args.command == "serve":
        _serve()
    elif args.command == "fetch":
        asyncio.run(_fetch_once())
    elif args.command == "resolve":
        _resolve(args.names)
    elif args.command == "layout":
        asyncio.run(_layout_once(args.zoom, args.source))


def _serve() -> None:
    import uvicorn

    from newsmap_geo.config import get_settings

    settings = get_settings()
    uvicorn.run(
        "newsmap_geo.api:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=(settings.env == "development"),
        log_level=settings.log_level.lower(),
    )


async def _fetch_once() -> None:
    from newsmap_geo.pipeline import collect_headlines
    from newsmap_geo.resolver import LocationResolver

    items = await collect_headlines(LocationResolver())
    print(json.dumps([i.model_dump(mode="json") for i in items], ensure_ascii=False, indent=2))


def _resolve(names: list[str]) -> None:
    from newsmap_geo.resolver import LocationResolver

    resolver = LocationResolver()
    for name in names:
        res = resolver.resolve(name)
        print(f"{name!r:<28} -> {res.matched_name:<20} "
              f"({res.latitude:.4f}, {res.longitude:.4f})  [{res.tier.value}]")


async def _layout_once(zoom: float, sources: list[str] | None) -> None:
    from newsmap_geo.config import get_settings
    from newsmap_geo.layout import LayoutEngine, filter_by_source
    from newsmap_geo.pipeline import collect_headlines
    from newsmap_geo.resolver import LocationResolver

    resolver = LocationResolver()
    engine = LayoutEngine.from_resolver(resolver, get_settings().layout)
    items = await collect_headlines(resolver)
    if sources:
        items = filter_by_source(items, sources)

    markers = engine.layout_for_zoom(items, zoom)
    print(json.dumps([m.model_dump(mode="json") for m in markers], ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
