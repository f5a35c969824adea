"""Tests for geographic primitives, change models and the response schema."""

from __future__ import annotations

import pytest
from pydantic import ValidationError as PydanticValidationError

from ndvi_change.models.change import ChangeRequest
from ndvi_change.models.geo import BoundingBox, as_lat_lng
from ndvi_change.models.response import NdviChangeResponseModel


class TestAsLatLng:
    """Coercion of user-supplied points."""

    def test_tuple(self) -> None:
        assert as_lat_lng((1, 2)) == (1.0, 2.0)

    def test_list_of_strings(self) -> None:
        assert as_lat_lng(["34.5", "-118"]) == (34.5, -118.0)

    @pytest.mark.parametrize("point", [(1.0,), (1.0, 2.0, 3.0), 5, None])
    def test_not_a_pair(self, point: object) -> None:
        with pytest.raises(TypeError, match="pair"):
            as_lat_lng(point)

    def test_not_numeric(self) -> None:
        with pytest.raises(ValueError):
            as_lat_lng(("north", 1.0))


class TestBoundingBox:
    """Corner conversions."""

    def test_from_corners(self) -> None:
        box = BoundingBox.from_corners(((34.05, -118.25), (34.07, -118.23)))
        assert box == BoundingBox(north=34.07, south=34.05, east=-118.23, west=-118.25)

    def test_to_list_round_trips_corners(self) -> None:
        box = BoundingBox(north=2.0, south=1.0, east=4.0, west=3.0)
        assert box.to_list() == [[1.0, 3.0], [2.0, 4.0]]
        assert BoundingBox.from_corners(box.corners) == box

    def test_no_validation_on_construction(self) -> None:
        box = BoundingBox(north=0.0, south=1.0, east=float("nan"), west=0.0)
        assert box.south == 1.0


class TestChangeRequest:
    """Request body serialisation."""

    def test_to_body(self) -> None:
        request = ChangeRequest(
            ring=((-118.0, 34.0), (-118.0, 34.1), (-117.9, 34.1), (-118.0, 34.0)),
            before_date="2024-01-01",
            after_date="2024-02-01",
        )
        assert request.to_body() == {
            "aoi_geojson": {
                "type": "Polygon",
                "coordinates": [
                    [[-118.0, 34.0], [-118.0, 34.1], [-117.9, 34.1], [-118.0, 34.0]]
                ],
            },
            "before_date": "2024-01-01",
            "after_date": "2024-02-01",
            "cloud_mask": True,
        }


class TestResponseModel:
    """Pydantic validation of the backend reply."""

    def _payload(self, **overrides: object) -> dict[str, object]:
        payload: dict[str, object] = {
            "overlay_url": "/img/1.png",
            "bounds": [[34.05, -118.25], [34.07, -118.23]],
            "summary": {"mean_delta": 0.12, "pct_gain_pixels": 30, "pct_loss_pixels": 5},
        }
        payload.update(overrides)
        return payload

    def test_valid(self) -> None:
        model = NdviChangeResponseModel.model_validate(self._payload())
        assert model.bounds == ((34.05, -118.25), (34.07, -118.23))
        assert model.summary.pct_gain_pixels == 30.0

    def test_empty_overlay_url_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            NdviChangeResponseModel.model_validate(self._payload(overlay_url=""))

    def test_non_finite_stat_rejected(self) -> None:
        summary = {"mean_delta": float("nan"), "pct_gain_pixels": 1, "pct_loss_pixels": 1}
        with pytest.raises(PydanticValidationError):
            NdviChangeResponseModel.model_validate(self._payload(summary=summary))

    def test_extra_fields_ignored(self) -> None:
        model = NdviChangeResponseModel.model_validate(self._payload(tile_url="/t/{z}/{x}/{y}"))
        assert model.overlay_url == "/img/1.png"
