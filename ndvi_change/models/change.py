"""Request, result and summary models for an NDVI change analysis.

- ``ChangeRequest``: what is sent to the backend; built fresh per run.
- ``ChangeResult``: what came back, with the overlay locator already
  resolved to an absolute URL.
- ``Summary``: display values derived from a result and its AOI.

All three are frozen: a new analysis produces new objects rather than
mutating the previous ones.
"""

from __future__ import annotations

from dataclasses import dataclass

from ndvi_change.models.contracts import NdviChangeRequestBody
from ndvi_change.models.geo import BoundingBox, LonLat


@dataclass(frozen=True, slots=True)
class ChangeRequest:
    """A well-formed change-detection request.

    Attributes:
        ring: Closed exterior ring of ``(lon, lat)`` pairs.
        before_date: Baseline date, ``YYYY-MM-DD``.
        after_date: Comparison date, ``YYYY-MM-DD``.
        cloud_mask: Whether the backend should mask clouds.
    """

    ring: tuple[LonLat, ...]
    before_date: str
    after_date: str
    cloud_mask: bool = True

    def to_body(self) -> NdviChangeRequestBody:
        """Serialise to the JSON body expected by ``/ndvi-change``."""
        return {
            "aoi_geojson": {
                "type": "Polygon",
                "coordinates": [[[lon, lat] for lon, lat in self.ring]],
            },
            "before_date": self.before_date,
            "after_date": self.after_date,
            "cloud_mask": self.cloud_mask,
        }


@dataclass(frozen=True, slots=True)
class ChangeResult:
    """A successful change-detection response.

    Attributes:
        overlay_url: Absolute URL of the change overlay image.
        bounds: Overlay bounds exactly as returned by the backend.
        mean_delta: Mean NDVI difference over the AOI.
        pct_gain_pixels: Percentage of pixels with NDVI gain.
        pct_loss_pixels: Percentage of pixels with NDVI loss.
    """

    overlay_url: str
    bounds: BoundingBox
    mean_delta: float
    pct_gain_pixels: float
    pct_loss_pixels: float


@dataclass(frozen=True, slots=True)
class Summary:
    """User-facing numbers for one analysis.

    ``approx_area_km2`` and ``change_proxy_pct`` are rough UI indicators.
    The backend statistics are carried verbatim alongside them and are the
    authoritative values.

    Attributes:
        approx_area_km2: Equirectangular AOI area.
        change_proxy_pct: ``abs(mean_delta) * 100``.
        mean_delta: Backend mean NDVI difference, unmodified.
        pct_gain_pixels: Backend gain percentage, unmodified.
        pct_loss_pixels: Backend loss percentage, unmodified.
        geodesic_area_km2: WGS 84 ellipsoidal AOI area.
    """

    approx_area_km2: float
    change_proxy_pct: float
    mean_delta: float = 0.0
    pct_gain_pixels: float = 0.0
    pct_loss_pixels: float = 0.0
    geodesic_area_km2: float = 0.0

    def describe(self) -> list[str]:
        """Display lines for the summary panel."""
        return [
            f"AOI size (rough): {self.approx_area_km2:.2f} km²",
            f"|ΔNDVI| proxy: {self.change_proxy_pct:.1f}%",
            (
                f"mean ΔNDVI={self.mean_delta:.3f}, "
                f"gain%={self.pct_gain_pixels:.1f}, "
                f"loss%={self.pct_loss_pixels:.1f}"
            ),
        ]
