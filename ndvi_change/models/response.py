"""Pydantic schema for the ``/ndvi-change`` response body.

Parsing through these models turns a missing field, a wrong type or a
non-finite statistic into a single ``pydantic.ValidationError`` that the
client reports as a malformed response.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class NdviChangeSummaryModel(BaseModel):
    """``summary`` block of the response.

    Attributes:
        mean_delta: Mean NDVI difference (after − before) over the AOI.
        pct_gain_pixels: Percentage of pixels whose NDVI increased past
            the backend's threshold.
        pct_loss_pixels: Percentage of pixels whose NDVI decreased past
            the backend's threshold.
    """

    model_config = ConfigDict(frozen=True)

    mean_delta: float = Field(allow_inf_nan=False)
    pct_gain_pixels: float = Field(allow_inf_nan=False)
    pct_loss_pixels: float = Field(allow_inf_nan=False)


class NdviChangeResponseModel(BaseModel):
    """Top-level response document.

    Attributes:
        overlay_url: Path (or absolute URL) of the rendered change overlay.
        bounds: Overlay bounds as ``((south, west), (north, east))``.
        summary: Raw change statistics.
    """

    model_config = ConfigDict(frozen=True)

    overlay_url: str = Field(min_length=1)
    bounds: tuple[tuple[float, float], tuple[float, float]]
    summary: NdviChangeSummaryModel
