"""Shared pytest fixtures for the NDVI change test suite."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from ndvi_change.core.config import BackendConfig

# ---------------------------------------------------------------------------
# Reference polygons  (lat, lon)
# ---------------------------------------------------------------------------

# 0.01° x 0.01° square in downtown Los Angeles (~1.02 km²)
LA_SQUARE = [
    (34.05, -118.25),
    (34.06, -118.25),
    (34.06, -118.24),
    (34.05, -118.24),
]

# 4-point rectangle used by the end-to-end scenario
LA_RECTANGLE = [
    (34.0522, -118.2437),
    (34.0622, -118.2437),
    (34.0622, -118.2237),
    (34.0522, -118.2237),
]

BACKEND_URL = "http://localhost:8080"

STUB_RESPONSE: dict[str, Any] = {
    "overlay_url": "/img/1.png",
    "bounds": [[34.05, -118.25], [34.07, -118.23]],
    "summary": {"mean_delta": 0.12, "pct_gain_pixels": 30, "pct_loss_pixels": 5},
}


@pytest.fixture()
def la_square() -> list[tuple[float, float]]:
    """The 0.01-degree reference square."""
    return list(LA_SQUARE)


@pytest.fixture()
def la_rectangle() -> list[tuple[float, float]]:
    """The default 4-point Los Angeles rectangle."""
    return list(LA_RECTANGLE)


@pytest.fixture()
def backend_config() -> BackendConfig:
    """Config pointing at the local development backend."""
    return BackendConfig(backend_url=BACKEND_URL, request_timeout_s=5.0)


# ---------------------------------------------------------------------------
# Stub backend
# ---------------------------------------------------------------------------


class StubBackend:
    """Records requests and answers them with a canned response.

    Set ``status`` and ``payload`` (JSON) or ``text`` (raw body) to shape
    the reply, or ``error`` to a factory returning an ``httpx`` exception
    to simulate a transport failure.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.status: int = 200
        self.payload: Any = STUB_RESPONSE
        self.text: str | None = None
        self.error: Callable[[httpx.Request], Exception] | None = None

    @property
    def bodies(self) -> list[dict[str, Any]]:
        return [json.loads(r.content) for r in self.requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error(request)
        if self.text is not None:
            return httpx.Response(self.status, text=self.text)
        return httpx.Response(self.status, json=self.payload)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture()
def stub_backend() -> StubBackend:
    """A fresh stub backend per test."""
    return StubBackend()
