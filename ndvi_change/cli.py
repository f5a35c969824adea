"""Command-line entry point.

Runs one NDVI change analysis for an AOI stored in a JSON file and
prints the summary, without a map UI::

    ndvi-change run --aoi field.json --before 2024-01-01 --after 2024-02-01
    ndvi-change area --aoi field.json

AOI files hold either a list of ``[lat, lon]`` pairs or a GeoJSON
Polygon (bare geometry or Feature) whose exterior ring is ``[lon, lat]``.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any

from ndvi_change.analysis.session import AnalysisSession, default_dates
from ndvi_change.core.config import BackendConfig, ConfigValidationError
from ndvi_change.core.geometry import geodesic_area_km2, open_ring, polygon_area_km2
from ndvi_change.models.geo import LatLng, as_lat_lng
from ndvi_change.providers.ndvi_backend import ChangeRequestClient

logger = logging.getLogger("ndvi_change.cli")


def load_aoi(path: str | Path) -> list[LatLng]:
    """Load AOI points as ``(lat, lon)`` from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not JSON or holds no usable polygon.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"AOI file not found: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}") from e

    try:
        return _points_from_json(data)
    except (TypeError, KeyError, IndexError) as e:
        raise ValueError(f"No usable AOI polygon in {path}: {e}") from e


def _points_from_json(data: Any) -> list[LatLng]:
    if isinstance(data, list):
        return [as_lat_lng(p) for p in data]

    if isinstance(data, dict):
        if data.get("type") == "Feature":
            return _points_from_json(data["geometry"])
        if data.get("type") == "Polygon":
            return open_ring(data["coordinates"][0])

    raise TypeError(f"expected a list of [lat, lon] pairs or a GeoJSON Polygon, got {type(data).__name__}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ndvi-change",
        description="Request a before/after NDVI change analysis for an AOI.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    default_before, default_after = default_dates()

    run_parser = subparsers.add_parser("run", help="Run a change analysis")
    run_parser.add_argument("--aoi", required=True, help="Path to AOI JSON file")
    run_parser.add_argument("--before", default=default_before, help="Baseline date (YYYY-MM-DD)")
    run_parser.add_argument("--after", default=default_after, help="Comparison date (YYYY-MM-DD)")
    run_parser.add_argument(
        "--no-cloud-mask",
        dest="cloud_mask",
        action="store_false",
        help="Disable cloud masking",
    )
    run_parser.add_argument(
        "--backend-url",
        default=None,
        help="Backend base URL (default: $NDVI_BACKEND_URL or http://localhost:8080)",
    )

    area_parser = subparsers.add_parser("area", help="Print AOI area estimates")
    area_parser.add_argument("--aoi", required=True, help="Path to AOI JSON file")

    return parser


def _cmd_run(args: argparse.Namespace) -> int:
    config = BackendConfig.from_env()
    if args.backend_url:
        config = replace(config, backend_url=args.backend_url)

    session = AnalysisSession(
        ChangeRequestClient(config),
        initial_aoi=load_aoi(args.aoi),
        before_date=args.before,
        after_date=args.after,
        cloud_mask=args.cloud_mask,
    )
    state = asyncio.run(session.run())

    if state.error or state.result is None or state.summary is None:
        print(f"Error: {state.error}", file=sys.stderr)
        return 1

    print(f"Overlay: {state.result.overlay_url}")
    print(f"Bounds: {state.overlay_bounds.to_list() if state.overlay_bounds else '-'}")
    for line in state.summary.describe():
        print(line)
    return 0


def _cmd_area(args: argparse.Namespace) -> int:
    points = load_aoi(args.aoi)
    print(f"Vertices: {len(points)}")
    print(f"AOI size (rough): {polygon_area_km2(points):.2f} km²")
    print(f"AOI size (geodesic): {geodesic_area_km2(points):.2f} km²")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "run":
            return _cmd_run(args)
        return _cmd_area(args)
    except (FileNotFoundError, ValueError, ConfigValidationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
