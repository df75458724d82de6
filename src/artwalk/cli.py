"""
ArtWalk CLI entrypoint.

Intended for local demos and debugging without a browser:
- `tours`: list the catalog
- `walk`: replay a GPS trace through a tour session and print what the UI would show
- `serve`: run the API with uvicorn
"""

from __future__ import annotations

import argparse
import csv
import json
import sys
from pathlib import Path
from typing import Any, Iterable, Iterator

import httpx

from artwalk.catalog.loader import TourCatalog
from artwalk.catalog.remote import HttpTourSource
from artwalk.config.settings import SessionSettings, Settings, get_settings
from artwalk.core.logging import configure_logging
from artwalk.session.render import ConsoleRenderer
from artwalk.session.tour_session import TourSession


def _parse_point(value: str) -> tuple[float, float]:
    """Parse `LAT,LON` into floats."""
    if "," not in value:
        raise ValueError(f"Invalid point '{value}', expected LAT,LON")
    lat, lon = value.split(",", 1)
    return float(lat), float(lon)


def read_trace(lines: Iterable[str]) -> Iterator[tuple[float, float]]:
    """Yield `(lat, lon)` rows from CSV text; blank lines and `#` comments are skipped."""
    rows = (ln for ln in lines if ln.strip() and not ln.lstrip().startswith("#"))
    for row in csv.reader(rows):
        if len(row) < 2:
            raise ValueError(f"Invalid trace row {row!r}, expected lat,lon")
        yield float(row[0]), float(row[1])


def _load_catalog(settings: Settings, args: argparse.Namespace) -> TourCatalog:
    if getattr(args, "catalog_url", None):
        return HttpTourSource(args.catalog_url, timeout_seconds=settings.app.http_timeout_seconds).fetch_catalog()
    if getattr(args, "catalog", None):
        return TourCatalog.from_file(args.catalog)
    return TourCatalog.from_settings(settings)


def _cmd_tours(args: argparse.Namespace) -> int:
    settings = get_settings()
    catalog = _load_catalog(settings, args)

    if args.json:
        payload = [t.model_dump(mode="json") for t in catalog.list_tours()]
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return 0

    for tour in catalog.list_tours():
        print(f"{tour.id}: {tour.title} ({len(tour.artworks)} artworks)")
        if tour.description:
            print(f"    {tour.description}")
    return 0


def _cmd_walk(args: argparse.Namespace) -> int:
    settings = get_settings()
    catalog = _load_catalog(settings, args)

    session_settings = settings.session
    if args.radius is not None:
        session_settings = SessionSettings.model_validate(
            {**session_settings.model_dump(), "trigger_radius_m": args.radius}
        )

    session = TourSession(catalog, settings=session_settings)
    session.subscribe(ConsoleRenderer())
    session.select_tour(args.tour)

    points: list[tuple[float, float]] = [_parse_point(p) for p in args.point]
    if args.trace:
        if args.trace == "-":
            points.extend(read_trace(sys.stdin))
        else:
            with Path(args.trace).open(encoding="utf-8") as fh:
                points.extend(read_trace(fh))

    for lat, lon in points:
        session.update_position(lat, lon)
        if args.verbose:
            nearest = session.nearest()
            left, top = session.indicator_position()
            near = f"{nearest[0].id} {nearest[1]:.1f} m" if nearest else "none"
            print(f"  at {lat:.6f},{lon:.6f} nearest={near} indicator=({left:.1f}%, {top:.1f}%)")

    active = session.triggered_artwork
    print(f"Final: {active.id if active else 'no artwork'} active")
    return 0


def _cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("artwalk.api.app:app", host=args.host, port=int(args.port), reload=bool(args.reload))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the ArtWalk CLI."""
    parser = argparse.ArgumentParser(prog="artwalk")
    sub = parser.add_subparsers(dest="command", required=True)

    def add_catalog_args(p: argparse.ArgumentParser) -> None:
        p.add_argument("--catalog", type=str, default=None, help="Path to a tours JSON file")
        p.add_argument("--catalog-url", type=str, default=None, help="Base URL of a remote ArtWalk API")

    tours = sub.add_parser("tours", help="List tours in the catalog.")
    add_catalog_args(tours)
    tours.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    tours.set_defaults(func=_cmd_tours)

    walk = sub.add_parser("walk", help="Replay positions through a tour session.")
    add_catalog_args(walk)
    walk.add_argument("--tour", required=True, help="Tour id to walk")
    walk.add_argument("--point", action="append", default=[], help="Repeatable position: LAT,LON")
    walk.add_argument("--trace", type=str, default=None, help="CSV file of lat,lon rows ('-' for stdin)")
    walk.add_argument("--radius", type=float, default=None, help="Override the trigger radius (meters)")
    walk.add_argument("-v", "--verbose", action="store_true", help="Print nearest artwork per update")
    walk.set_defaults(func=_cmd_walk)

    serve = sub.add_parser("serve", help="Run the ArtWalk API.")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=3000)
    serve.add_argument("--reload", action="store_true")
    serve.set_defaults(func=_cmd_serve)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m artwalk.cli`."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    func: Any = getattr(args, "func")
    try:
        return int(func(args))
    except (OSError, ValueError, httpx.HTTPError) as e:
        if args.command == "tours":
            print("Could not load tours.", file=sys.stderr)
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
