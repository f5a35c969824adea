"""Geometry kernel: centroid, bounds normalisation, area and ring closing.

Pure, deterministic helpers over ``(lat, lon)`` points.  None of them
raise on bad numeric input: non-finite or degenerate values are absorbed
into a safe default.

Area comes in two flavours:

- ``polygon_area_km2`` is the equirectangular approximation shown in the
  UI.  It is only meaningful for small AOIs.
- ``geodesic_area_km2`` uses ``pyproj.Geod`` on the WGS 84 ellipsoid and
  is accurate at any latitude.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from ndvi_change.core.constants import (
    METRES_PER_DEG_LAT,
    METRES_PER_DEG_LON_EQUATOR,
    MIN_BOUNDS_PAD_DEG,
    MIN_POLYGON_POINTS,
    SAFE_CENTER,
    SQ_METRES_PER_SQ_KM,
)
from ndvi_change.models.geo import BoundingBox

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ndvi_change.models.geo import LatLng, LonLat

logger = logging.getLogger(__name__)

_MAX_LAT = 90.0
_MAX_LON = 180.0


# ---------------------------------------------------------------------------
# Centroid
# ---------------------------------------------------------------------------


def centroid(points: Sequence[LatLng], fallback: LatLng = SAFE_CENTER) -> LatLng:
    """Return the arithmetic mean of *points* as ``(lat, lon)``.

    Returns *fallback* unchanged when *points* is empty.  If either mean
    is not finite, that axis alone is replaced by the matching fallback
    component.
    """
    if not points:
        return fallback

    n = len(points)
    mean_lat = sum(p[0] for p in points) / n
    mean_lon = sum(p[1] for p in points) / n
    return (
        mean_lat if math.isfinite(mean_lat) else fallback[0],
        mean_lon if math.isfinite(mean_lon) else fallback[1],
    )


# ---------------------------------------------------------------------------
# Bounds
# ---------------------------------------------------------------------------


def normalize_bounds(box: BoundingBox) -> BoundingBox:
    """Return a renderable copy of *box* with strictly positive extent.

    - Any non-finite or out-of-range edge discards the whole box in favour
      of a minimal box around ``SAFE_CENTER``.
    - Inverted edges are swapped.
    - A zero-height or zero-width box is padded by ``MIN_BOUNDS_PAD_DEG``
      on both sides of the collapsed axis.

    The result always satisfies ``north > south`` and ``east > west``.
    Use ``BoundingBox.corners`` for the ``[[south, west], [north, east]]``
    form expected by image overlays.
    """
    if not _is_usable(box):
        logger.debug("normalize_bounds fallback | box=%s", box)
        return _default_box()

    south, north = sorted((box.south, box.north))
    west, east = sorted((box.west, box.east))

    if north == south:
        north += MIN_BOUNDS_PAD_DEG
        south -= MIN_BOUNDS_PAD_DEG
    if east == west:
        east += MIN_BOUNDS_PAD_DEG
        west -= MIN_BOUNDS_PAD_DEG

    return BoundingBox(north=north, south=south, east=east, west=west)


def bounds_of(points: Sequence[LatLng]) -> BoundingBox:
    """Return the normalised bounding box enclosing *points*."""
    if not points:
        return _default_box()
    lats = [p[0] for p in points]
    lons = [p[1] for p in points]
    return normalize_bounds(
        BoundingBox(north=max(lats), south=min(lats), east=max(lons), west=min(lons))
    )


def _is_usable(box: BoundingBox) -> bool:
    edges = (box.north, box.south, box.east, box.west)
    if not all(math.isfinite(v) for v in edges):
        return False
    lats_ok = all(-_MAX_LAT <= v <= _MAX_LAT for v in (box.north, box.south))
    lons_ok = all(-_MAX_LON <= v <= _MAX_LON for v in (box.east, box.west))
    return lats_ok and lons_ok


def _default_box() -> BoundingBox:
    lat, lon = SAFE_CENTER
    return BoundingBox(
        north=lat + MIN_BOUNDS_PAD_DEG,
        south=lat - MIN_BOUNDS_PAD_DEG,
        east=lon + MIN_BOUNDS_PAD_DEG,
        west=lon - MIN_BOUNDS_PAD_DEG,
    )


# ---------------------------------------------------------------------------
# Area
# ---------------------------------------------------------------------------


def polygon_area_km2(points: Sequence[LatLng]) -> float:
    """Approximate polygon area in square kilometres.

    Projects each point with an equirectangular approximation centred on
    the mean latitude, then applies the shoelace formula over the ring
    (last point wraps back to the first).  Winding order does not matter.

    Returns ``0.0`` for fewer than three points.
    """
    if len(points) < MIN_POLYGON_POINTS:
        return 0.0

    mean_lat = sum(p[0] for p in points) / len(points)
    if not math.isfinite(mean_lat):
        return 0.0
    m_per_deg_lon = METRES_PER_DEG_LON_EQUATOR * math.cos(math.radians(mean_lat))
    projected = [(lon * m_per_deg_lon, lat * METRES_PER_DEG_LAT) for lat, lon in points]

    twice_area = 0.0
    for i, (x1, y1) in enumerate(projected):
        x2, y2 = projected[(i + 1) % len(projected)]
        twice_area += x1 * y2 - x2 * y1

    area_km2 = abs(twice_area) / 2 / SQ_METRES_PER_SQ_KM
    return area_km2 if math.isfinite(area_km2) else 0.0


def geodesic_area_km2(points: Sequence[LatLng]) -> float:
    """Geodesic polygon area in square kilometres on the WGS 84 ellipsoid.

    Returns ``0.0`` for fewer than three points.
    """
    if len(points) < MIN_POLYGON_POINTS:
        return 0.0

    from pyproj import Geod

    geod = Geod(ellps="WGS84")
    lats = [p[0] for p in points]
    lons = [p[1] for p in points]
    area_m2, _perimeter = geod.polygon_area_perimeter(lons, lats)
    area_km2 = abs(area_m2) / SQ_METRES_PER_SQ_KM
    return area_km2 if math.isfinite(area_km2) else 0.0


# ---------------------------------------------------------------------------
# Rings
# ---------------------------------------------------------------------------


def close_ring(points: Sequence[LatLng]) -> list[LonLat]:
    """Convert ``(lat, lon)`` points into a closed ``(lon, lat)`` ring.

    The first transformed point is appended unless the ring already ends
    where it starts.  Empty and single-point input are returned as-is
    (transformed), so the output has ``len(points)`` or ``len(points) + 1``
    entries.
    """
    ring = [(float(lon), float(lat)) for lat, lon in points]
    if ring and ring[0] != ring[-1]:
        ring.append(ring[0])
    return ring


def open_ring(ring: Sequence[LonLat]) -> list[LatLng]:
    """Inverse of ``close_ring``: ``(lon, lat)`` ring back to open ``(lat, lon)`` points."""
    points = [(float(lat), float(lon)) for lon, lat in ring]
    if len(points) > 1 and points[0] == points[-1]:
        points.pop()
    return points


# ---------------------------------------------------------------------------
# Validity
# ---------------------------------------------------------------------------


def distinct_point_count(points: Sequence[LatLng]) -> int:
    """Number of distinct vertices in *points*."""
    return len({(float(p[0]), float(p[1])) for p in points})


def is_simple_polygon(points: Sequence[LatLng]) -> bool:
    """Whether *points* form a valid, non-self-intersecting polygon.

    Uses Shapely on the ``(lon, lat)`` ring.  Anything Shapely cannot
    build is reported as not simple.
    """
    if distinct_point_count(points) < MIN_POLYGON_POINTS:
        return False

    from shapely.geometry import Polygon

    try:
        polygon = Polygon(close_ring(points))
    except (ValueError, TypeError):
        return False
    return bool(polygon.is_valid) and not polygon.is_empty
