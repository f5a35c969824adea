"""Wire contracts for the ``/ndvi-change`` endpoint.

The request body is defined here as a ``TypedDict`` so the field names
live in one place.  Responses are validated by the pydantic models in
``ndvi_change.models.response``.
"""

from __future__ import annotations

from typing import TypedDict

# ---------------------------------------------------------------------------
# Request  (client → backend)
# ---------------------------------------------------------------------------


class PolygonGeometry(TypedDict):
    """GeoJSON Polygon with a single exterior ring of ``[lon, lat]`` pairs."""

    type: str
    coordinates: list[list[list[float]]]


class NdviChangeRequestBody(TypedDict):
    """JSON body POSTed to ``{backend}/ndvi-change``."""

    aoi_geojson: PolygonGeometry
    before_date: str
    after_date: str
    cloud_mask: bool
