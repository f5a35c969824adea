"""Application state for one AOI change-analysis page.

``AnalysisSession`` ties the pieces together the way a map UI uses them:

- an ``AoiDrawingController`` owning the committed AOI (seeded with
  ``DEFAULT_AOI``) and the drawing draft;
- the before/after dates and cloud-mask flag for the next run;
- an immutable ``AnalysisState`` snapshot with the latest result, its
  summary or the error message.

Renderers read ``state`` (or subscribe to it) and never mutate it.

Overlapping runs: every ``run()`` is tagged with a monotonically
increasing generation.  A response whose generation is no longer current
(a newer run started, or ``reset()`` was called) is discarded, so the
visible state always belongs to the most recent request.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import TYPE_CHECKING

from ndvi_change.analysis.summary import build_summary
from ndvi_change.core.constants import DEFAULT_AOI, DEFAULT_LOOKBACK_DAYS, SAFE_CENTER
from ndvi_change.core.exceptions import NdviChangeError
from ndvi_change.core.geometry import centroid, normalize_bounds
from ndvi_change.drawing.controller import AoiDrawingController

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from ndvi_change.models.change import ChangeResult, Summary
    from ndvi_change.models.geo import BoundingBox, LatLng
    from ndvi_change.providers.ndvi_backend import ChangeRequestClient

logger = logging.getLogger(__name__)

REQUEST_FAILED_MESSAGE = "Request failed"


@dataclass(frozen=True, slots=True)
class AnalysisState:
    """Snapshot of the analysis panel.

    Either ``result`` and ``summary`` are both set, or both are ``None``.

    Attributes:
        loading: A request for ``generation`` is in flight.
        result: Latest successful result.
        summary: Display values derived from ``result``.
        error: Human-readable message from the latest failure.
        generation: Request generation this snapshot belongs to.
    """

    loading: bool = False
    result: ChangeResult | None = None
    summary: Summary | None = None
    error: str | None = None
    generation: int = 0

    @property
    def overlay_bounds(self) -> BoundingBox | None:
        """Renderable overlay bounds, or ``None`` without a result."""
        if self.result is None:
            return None
        return normalize_bounds(self.result.bounds)


def default_dates(today: date | None = None) -> tuple[str, str]:
    """Return ``(today - 30 days, today)`` as ``YYYY-MM-DD`` strings."""
    today = today or date.today()
    before = today - timedelta(days=DEFAULT_LOOKBACK_DAYS)
    return before.isoformat(), today.isoformat()


class AnalysisSession:
    """Owns the AOI, run parameters and latest analysis outcome.

    Args:
        client: Backend client used by ``run``.
        initial_aoi: Seed AOI; defaults to ``DEFAULT_AOI``.
        before_date: Baseline date; defaults to 30 days before *today*.
        after_date: Comparison date; defaults to *today*.
        cloud_mask: Whether to request cloud masking.
        today: Reference date for the defaults (tests pin this).
    """

    def __init__(
        self,
        client: ChangeRequestClient,
        *,
        initial_aoi: Iterable[LatLng] = DEFAULT_AOI,
        before_date: str | None = None,
        after_date: str | None = None,
        cloud_mask: bool = True,
        today: date | None = None,
    ) -> None:
        default_before, default_after = default_dates(today)
        self.drawing = AoiDrawingController(initial_aoi)
        self.before_date = before_date or default_before
        self.after_date = after_date or default_after
        self.cloud_mask = cloud_mask
        self._client = client
        self._state = AnalysisState()
        self._generation = 0
        self._listeners: list[Callable[[AnalysisState], None]] = []

    # ------------------------------------------------------------------
    # Read-only snapshot
    # ------------------------------------------------------------------

    @property
    def state(self) -> AnalysisState:
        return self._state

    @property
    def backend_url(self) -> str:
        return self._client.config.backend_url

    @property
    def map_center(self) -> LatLng:
        """Centre of the draft while drawing, else of the committed AOI."""
        drawing = self.drawing
        target = (
            drawing.draft_points
            if drawing.is_drawing and drawing.draft_points
            else drawing.committed_aoi
        )
        return centroid(target, SAFE_CENTER)

    def subscribe(self, listener: Callable[[AnalysisState], None]) -> Callable[[], None]:
        """Register *listener* for state changes; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def run(self) -> AnalysisState:
        """Run an analysis for the committed AOI and return the new state.

        Any previous result is cleared as soon as the run starts.  On
        failure the result stays cleared and ``error`` holds the message;
        the committed AOI is never touched.  A cancelled run clears
        ``loading`` and re-raises ``CancelledError``.
        """
        self._generation += 1
        generation = self._generation
        aoi = self.drawing.committed_aoi
        self._set(AnalysisState(loading=True, generation=generation))

        try:
            result = await self._client.run(aoi, self.before_date, self.after_date, self.cloud_mask)
        except NdviChangeError as exc:
            if self._is_stale(generation, "failure"):
                return self._state
            self._set(AnalysisState(error=str(exc), generation=generation))
            return self._state
        except asyncio.CancelledError:
            if not self._is_stale(generation, "cancellation"):
                self._set(AnalysisState(generation=generation))
            raise
        except Exception:
            logger.exception("analysis run crashed | generation=%d", generation)
            if not self._is_stale(generation, "crash"):
                self._set(AnalysisState(error=REQUEST_FAILED_MESSAGE, generation=generation))
            raise

        if self._is_stale(generation, "result"):
            return self._state

        summary = build_summary(aoi, result)
        self._set(AnalysisState(result=result, summary=summary, generation=generation))
        return self._state

    def reset(self) -> None:
        """Clear result, summary and error; any in-flight run is discarded."""
        self._generation += 1
        self._set(AnalysisState(generation=self._generation))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _is_stale(self, generation: int, outcome: str) -> bool:
        if generation == self._generation:
            return False
        logger.warning(
            "discarding stale %s | generation=%d | current=%d",
            outcome,
            generation,
            self._generation,
        )
        return True

    def _set(self, state: AnalysisState) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(state)
