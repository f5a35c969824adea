"""Interactive AOI drawing: state machine and controller."""

from ndvi_change.drawing.controller import (
    AoiDrawingController,
    DrawingMode,
    DrawingSession,
    DrawingState,
    can_finish,
    cancel_drawing,
    finish_drawing,
    start_drawing,
)
from ndvi_change.drawing.controller import add_point as add_draft_point

__all__ = [
    "AoiDrawingController",
    "DrawingMode",
    "DrawingSession",
    "DrawingState",
    "add_draft_point",
    "can_finish",
    "cancel_drawing",
    "finish_drawing",
    "start_drawing",
]
