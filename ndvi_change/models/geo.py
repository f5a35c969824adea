"""Geographic primitives shared by drawing, geometry and request building.

Points travel as plain tuples so they can be handed to a map renderer
or serialised without conversion:

- ``LatLng`` is ``(latitude, longitude)``: the order the map and the
  drawing controller use.
- ``LonLat`` is ``(longitude, latitude)``: the GeoJSON order the
  backend expects.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

LatLng: TypeAlias = tuple[float, float]
LonLat: TypeAlias = tuple[float, float]
Corners: TypeAlias = tuple[tuple[float, float], tuple[float, float]]


def as_lat_lng(point: object) -> LatLng:
    """Coerce a two-element sequence into a ``(lat, lon)`` float tuple.

    Raises:
        TypeError: If *point* is not a two-element sequence.
        ValueError: If an element cannot be converted to ``float``.
    """
    try:
        lat, lon = point  # type: ignore[misc]
    except (TypeError, ValueError) as exc:
        msg = f"point must be a (lat, lon) pair, got {point!r}"
        raise TypeError(msg) from exc
    return (float(lat), float(lon))


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """Axis-aligned box in degrees.

    Nothing is checked on construction: raw boxes coming from the
    backend or from user input may be degenerate, inverted or non-finite.
    ``ndvi_change.core.geometry.normalize_bounds`` produces a box with
    ``north > south`` and ``east > west``.
    """

    north: float
    south: float
    east: float
    west: float

    @property
    def corners(self) -> Corners:
        """``((south, west), (north, east))``: min corner then max corner."""
        return ((self.south, self.west), (self.north, self.east))

    @classmethod
    def from_corners(cls, corners: Corners) -> BoundingBox:
        """Build from ``[[south, west], [north, east]]``."""
        (south, west), (north, east) = corners
        return cls(north=float(north), south=float(south), east=float(east), west=float(west))

    def to_list(self) -> list[list[float]]:
        """Serialise as ``[[south, west], [north, east]]``."""
        return [[self.south, self.west], [self.north, self.east]]
