"""AOI drawing state machine.

Turns a stream of map clicks into a committed AOI polygon.  State is an
immutable ``DrawingState`` value and every transition is a pure function
returning the next state; ``AoiDrawingController`` only holds the current
value and tells observers when it changes.

States:
    IDLE:    no draft points held; clicks are ignored.
    DRAWING: clicks append draft points in arrival order.

Transitions:
    start_drawing   IDLE|DRAWING → DRAWING, draft cleared.
    add_point       DRAWING → DRAWING, one point appended.
    finish_drawing  DRAWING → IDLE, draft committed if it has ≥ 3 points.
    cancel_drawing  DRAWING → IDLE, draft discarded.

Anything else is a no-op that returns the state unchanged.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from ndvi_change.core.constants import MIN_POLYGON_POINTS
from ndvi_change.models.geo import as_lat_lng

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from ndvi_change.models.geo import LatLng

logger = logging.getLogger(__name__)

# The draft is shown as a preview polygon once it has this many points.
MIN_PREVIEW_POINTS = 2


class DrawingMode(enum.Enum):
    """Whether the map is currently capturing AOI vertices."""

    IDLE = "idle"
    DRAWING = "drawing"


@dataclass(frozen=True, slots=True)
class DrawingSession:
    """The in-progress draft.

    Attributes:
        mode: Current drawing mode.
        draft_points: Vertices clicked so far, in order.  Always empty
            while ``mode`` is ``IDLE``.
    """

    mode: DrawingMode = DrawingMode.IDLE
    draft_points: tuple[LatLng, ...] = ()

    @property
    def is_drawing(self) -> bool:
        return self.mode is DrawingMode.DRAWING


@dataclass(frozen=True, slots=True)
class DrawingState:
    """Drawing session plus the AOI it commits into.

    Attributes:
        session: Current drawing session.
        committed_aoi: Last committed polygon as open ``(lat, lon)`` points.
    """

    session: DrawingSession = DrawingSession()
    committed_aoi: tuple[LatLng, ...] = ()


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


def start_drawing(state: DrawingState) -> DrawingState:
    """Enter DRAWING with an empty draft.  The committed AOI is kept."""
    return replace(state, session=DrawingSession(mode=DrawingMode.DRAWING))


def add_point(state: DrawingState, point: LatLng) -> DrawingState:
    """Append *point* to the draft.  Ignored while IDLE."""
    if not state.session.is_drawing:
        return state
    draft = (*state.session.draft_points, as_lat_lng(point))
    return replace(state, session=replace(state.session, draft_points=draft))


def finish_drawing(state: DrawingState) -> DrawingState:
    """Leave DRAWING, committing the draft if it has enough points.

    A draft shorter than three points is discarded and the committed AOI
    is left as it was.
    """
    if not state.session.is_drawing:
        return state
    draft = state.session.draft_points
    committed = draft if len(draft) >= MIN_POLYGON_POINTS else state.committed_aoi
    return DrawingState(session=DrawingSession(), committed_aoi=committed)


def cancel_drawing(state: DrawingState) -> DrawingState:
    """Leave DRAWING and discard the draft."""
    if not state.session.is_drawing:
        return state
    return replace(state, session=DrawingSession())


def can_finish(state: DrawingState) -> bool:
    """Whether ``finish_drawing`` would commit a new AOI."""
    return state.session.is_drawing and len(state.session.draft_points) >= MIN_POLYGON_POINTS


# ---------------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------------


class AoiDrawingController:
    """Holds the current ``DrawingState`` and applies transitions to it.

    Observers registered with ``subscribe`` receive the new state after
    every transition that changes it.  Mutations must come from a single
    thread of control (the UI event loop).

    Example usage::

        controller = AoiDrawingController(initial_aoi=DEFAULT_AOI)
        controller.start_drawing()
        for click in clicks:
            controller.add_point(click)
        if controller.can_finish:
            controller.finish()
    """

    def __init__(self, initial_aoi: Iterable[LatLng] = ()) -> None:
        self._state = DrawingState(committed_aoi=tuple(as_lat_lng(p) for p in initial_aoi))
        self._listeners: list[Callable[[DrawingState], None]] = []

    # ------------------------------------------------------------------
    # Read-only snapshot
    # ------------------------------------------------------------------

    @property
    def state(self) -> DrawingState:
        return self._state

    @property
    def mode(self) -> DrawingMode:
        return self._state.session.mode

    @property
    def is_drawing(self) -> bool:
        return self._state.session.is_drawing

    @property
    def draft_points(self) -> tuple[LatLng, ...]:
        return self._state.session.draft_points

    @property
    def committed_aoi(self) -> tuple[LatLng, ...]:
        return self._state.committed_aoi

    @property
    def can_finish(self) -> bool:
        return can_finish(self._state)

    @property
    def preview_points(self) -> tuple[LatLng, ...]:
        """Draft points worth drawing as a dashed preview (two or more)."""
        draft = self._state.session.draft_points
        return draft if len(draft) >= MIN_PREVIEW_POINTS else ()

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------

    def start_drawing(self) -> None:
        self._apply(start_drawing(self._state), "start_drawing")

    def add_point(self, point: LatLng) -> None:
        self._apply(add_point(self._state, point), "add_point")

    def finish(self) -> None:
        self._apply(finish_drawing(self._state), "finish")

    def cancel(self) -> None:
        self._apply(cancel_drawing(self._state), "cancel")

    def subscribe(self, listener: Callable[[DrawingState], None]) -> Callable[[], None]:
        """Register *listener*; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _apply(self, new_state: DrawingState, action: str) -> None:
        if new_state is self._state:
            logger.debug("drawing %s ignored | mode=%s", action, self.mode.value)
            return
        self._state = new_state
        logger.debug(
            "drawing %s | mode=%s | draft=%d | committed=%d",
            action,
            new_state.session.mode.value,
            len(new_state.session.draft_points),
            len(new_state.committed_aoi),
        )
        for listener in list(self._listeners):
            listener(new_state)
