"""Data models and wire schemas.

- geo: ``LatLng`` / ``LonLat`` aliases and ``BoundingBox``
- change: ``ChangeRequest``, ``ChangeResult``, ``Summary``
- contracts: TypedDict request/response bodies
- response: pydantic response validation
"""

from ndvi_change.models.change import ChangeRequest, ChangeResult, Summary
from ndvi_change.models.geo import BoundingBox, LatLng, LonLat, as_lat_lng

__all__ = [
    "BoundingBox",
    "ChangeRequest",
    "ChangeResult",
    "LatLng",
    "LonLat",
    "Summary",
    "as_lat_lng",
]
