"""Summary numbers for a completed NDVI change analysis."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ndvi_change.core.geometry import geodesic_area_km2, polygon_area_km2
from ndvi_change.models.change import Summary

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ndvi_change.models.change import ChangeResult
    from ndvi_change.models.geo import LatLng

logger = logging.getLogger(__name__)

PERCENT = 100.0


def build_summary(aoi: Sequence[LatLng], result: ChangeResult) -> Summary:
    """Derive display values from *result* and the AOI it was computed for.

    ``change_proxy_pct`` (``abs(mean_delta) * 100``) is a rough indicator
    for the UI, not a pixel statistic.  The backend's ``mean_delta``,
    ``pct_gain_pixels`` and ``pct_loss_pixels`` are copied through
    unmodified for display next to it.
    """
    summary = Summary(
        approx_area_km2=polygon_area_km2(aoi),
        change_proxy_pct=abs(result.mean_delta) * PERCENT,
        mean_delta=result.mean_delta,
        pct_gain_pixels=result.pct_gain_pixels,
        pct_loss_pixels=result.pct_loss_pixels,
        geodesic_area_km2=geodesic_area_km2(aoi),
    )
    logger.debug(
        "summary built | area=%.3f km2 | geodesic=%.3f km2 | proxy=%.1f%%",
        summary.approx_area_km2,
        summary.geodesic_area_km2,
        summary.change_proxy_pct,
    )
    return summary
