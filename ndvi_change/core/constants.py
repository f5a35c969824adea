"""Shared constants for the NDVI change core.

Centralises the fallback map position, geometry tolerances, backend
endpoint path and the seed AOI so that geometry, request building and
the analysis session agree on them.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Map fallbacks
# ---------------------------------------------------------------------------

SAFE_CENTER: tuple[float, float] = (34.05, -118.25)
"""Fallback ``(lat, lon)`` used when no usable point is available (Los Angeles)."""

MIN_BOUNDS_PAD_DEG: float = 1e-4
"""Padding applied to degenerate bounds; roughly 11 m of latitude."""

# ---------------------------------------------------------------------------
# Equirectangular area approximation
# ---------------------------------------------------------------------------

METRES_PER_DEG_LAT: float = 111_132.0
"""Average metres per degree of latitude."""

METRES_PER_DEG_LON_EQUATOR: float = 111_320.0
"""Metres per degree of longitude at the equator; scaled by cos(latitude)."""

SQ_METRES_PER_SQ_KM: float = 1e6

MIN_POLYGON_POINTS: int = 3
"""Minimum vertex count for a committed AOI."""

# ---------------------------------------------------------------------------
# Backend
# ---------------------------------------------------------------------------

DEFAULT_BACKEND_URL: str = "http://localhost:8080"
NDVI_CHANGE_PATH: str = "/ndvi-change"
DEFAULT_REQUEST_TIMEOUT_S: float = 60.0

NO_BODY_PLACEHOLDER: str = "(no body)"
"""Diagnostic text used when the backend response body cannot be read."""

# ---------------------------------------------------------------------------
# Analysis defaults
# ---------------------------------------------------------------------------

DEFAULT_AOI: tuple[tuple[float, float], ...] = (
    (34.0522, -118.2437),
    (34.0622, -118.2437),
    (34.0622, -118.2237),
    (34.0522, -118.2237),
)
"""Seed AOI shown before the user draws anything (downtown Los Angeles)."""

DEFAULT_LOOKBACK_DAYS: int = 30
"""Default gap between the "before" and "after" dates."""
