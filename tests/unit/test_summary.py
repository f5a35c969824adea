"""Unit tests for summary building and display formatting."""

from __future__ import annotations

import pytest

from ndvi_change.analysis.summary import build_summary
from ndvi_change.core.geometry import polygon_area_km2
from ndvi_change.models.change import ChangeResult, Summary
from ndvi_change.models.geo import BoundingBox

BOUNDS = BoundingBox(north=34.07, south=34.05, east=-118.23, west=-118.25)


def _result(mean_delta: float = 0.12, gain: float = 30.0, loss: float = 5.0) -> ChangeResult:
    return ChangeResult(
        overlay_url="http://localhost:8080/img/1.png",
        bounds=BOUNDS,
        mean_delta=mean_delta,
        pct_gain_pixels=gain,
        pct_loss_pixels=loss,
    )


class TestBuildSummary:
    """Derived values and verbatim backend statistics."""

    def test_proxy_is_abs_mean_delta_percent(self, la_rectangle) -> None:
        summary = build_summary(la_rectangle, _result(0.12))
        assert summary.change_proxy_pct == pytest.approx(12.0)

    def test_negative_delta_gives_positive_proxy(self, la_rectangle) -> None:
        summary = build_summary(la_rectangle, _result(-0.2))
        assert summary.change_proxy_pct == pytest.approx(20.0)
        assert summary.mean_delta == -0.2

    def test_zero_delta(self, la_rectangle) -> None:
        assert build_summary(la_rectangle, _result(0.0)).change_proxy_pct == 0.0

    def test_area_matches_geometry_kernel(self, la_square) -> None:
        summary = build_summary(la_square, _result())
        assert summary.approx_area_km2 == polygon_area_km2(la_square)
        assert 0.9 < summary.approx_area_km2 < 1.2

    def test_geodesic_area_is_close_to_rough_area(self, la_square) -> None:
        summary = build_summary(la_square, _result())
        assert summary.geodesic_area_km2 == pytest.approx(summary.approx_area_km2, rel=0.01)

    def test_backend_stats_are_carried_verbatim(self, la_rectangle) -> None:
        summary = build_summary(la_rectangle, _result(0.05, 12.5, 7.25))
        assert summary.mean_delta == 0.05
        assert summary.pct_gain_pixels == 12.5
        assert summary.pct_loss_pixels == 7.25


class TestDescribe:
    """Display lines for the summary panel."""

    def test_formatting(self) -> None:
        summary = Summary(
            approx_area_km2=2.0556,
            change_proxy_pct=12.04,
            mean_delta=0.1204,
            pct_gain_pixels=30.0,
            pct_loss_pixels=5.0,
        )
        assert summary.describe() == [
            "AOI size (rough): 2.06 km²",
            "|ΔNDVI| proxy: 12.0%",
            "mean ΔNDVI=0.120, gain%=30.0, loss%=5.0",
        ]

    def test_summary_is_frozen(self) -> None:
        summary = Summary(approx_area_km2=1.0, change_proxy_pct=1.0)
        with pytest.raises(AttributeError):
            summary.approx_area_km2 = 2.0  # type: ignore[misc]
