"""Client for the NDVI change-detection backend.

Builds a ``ChangeRequest`` from a committed AOI, POSTs it to
``{backend_url}/ndvi-change`` with ``httpx.AsyncClient`` and parses the
reply into a ``ChangeResult``.

One call produces exactly one outcome.  There are no retries and no
caching; superseding an in-flight request is the caller's concern
(see ``ndvi_change.analysis.session``).

Failure modes:
    - AOI or date problems raise a ``ValidationError`` subclass before
      any network activity.
    - Non-2xx statuses, transport failures and malformed bodies all raise a
      ``BackendError`` subclass carrying the status code (``0`` when no response
      arrived) and the server's diagnostic text.
"""

from __future__ import annotations

import logging
import math
import re
import time
import uuid
from datetime import date, datetime
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError as PydanticValidationError

from ndvi_change.core.config import BackendConfig
from ndvi_change.core.constants import MIN_POLYGON_POINTS, NO_BODY_PLACEHOLDER
from ndvi_change.core.exceptions import (
    AoiValidationError,
    BackendError,
    BackendRejectedError,
    BackendUnavailableError,
    BackendUnreachableError,
    MalformedResponseError,
    RequestValidationError,
)
from ndvi_change.core.geometry import close_ring, distinct_point_count, is_simple_polygon
from ndvi_change.models.change import ChangeRequest, ChangeResult
from ndvi_change.models.geo import BoundingBox, as_lat_lng
from ndvi_change.models.response import NdviChangeResponseModel

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ndvi_change.models.geo import LatLng

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

TOO_FEW_POINTS_MESSAGE = "Please draw a polygon with at least 3 points."

CORRELATION_HEADER = "X-Correlation-ID"

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# Statuses worth retrying by the user: throttling and server-side failures.
_RETRYABLE_STATUS_FLOOR = 500
_TOO_MANY_REQUESTS = 429

# Diagnostic text is truncated so an HTML error page cannot flood the UI.
_MAX_DETAIL_CHARS = 500


# ---------------------------------------------------------------------------
# Request building
# ---------------------------------------------------------------------------


def build_change_request(
    aoi: Sequence[LatLng],
    before_date: str | date,
    after_date: str | date,
    cloud_mask: bool = True,
) -> ChangeRequest:
    """Validate the inputs and build a ``ChangeRequest``.

    Args:
        aoi: Committed AOI as open ``(lat, lon)`` points.
        before_date: Baseline date (``date`` or ``YYYY-MM-DD``).
        after_date: Comparison date (``date`` or ``YYYY-MM-DD``).
        cloud_mask: Whether the backend should mask clouds.

    Returns:
        A request whose ring is closed and in ``(lon, lat)`` order.

    Raises:
        AoiValidationError: If the AOI has fewer than three (distinct)
            points or a point is malformed or non-finite.
        RequestValidationError: If a date is not ``YYYY-MM-DD``.
    """
    points = _validate_aoi(aoi)
    before = _normalise_date("before_date", before_date)
    after = _normalise_date("after_date", after_date)

    if before > after:
        logger.warning("before_date %s is later than after_date %s", before, after)

    return ChangeRequest(
        ring=tuple(close_ring(points)),
        before_date=before,
        after_date=after,
        cloud_mask=bool(cloud_mask),
    )


def _validate_aoi(aoi: Sequence[LatLng]) -> list[LatLng]:
    """Coerce and validate AOI points.  Raises ``AoiValidationError``."""
    try:
        points = [as_lat_lng(p) for p in aoi]
    except (TypeError, ValueError) as exc:
        raise AoiValidationError(
            f"AOI contains an invalid point: {exc}",
            point_count=len(aoi),
            code="AOI_INVALID_POINT",
        ) from exc

    if len(points) < MIN_POLYGON_POINTS:
        raise AoiValidationError(TOO_FEW_POINTS_MESSAGE, point_count=len(points))

    if not all(math.isfinite(lat) and math.isfinite(lon) for lat, lon in points):
        raise AoiValidationError(
            "AOI contains a non-finite coordinate.",
            point_count=len(points),
            code="AOI_NON_FINITE_POINT",
        )

    if distinct_point_count(points) < MIN_POLYGON_POINTS:
        raise AoiValidationError(
            TOO_FEW_POINTS_MESSAGE,
            point_count=len(points),
            code="AOI_TOO_FEW_DISTINCT_POINTS",
        )

    if not is_simple_polygon(points):
        logger.warning("AOI polygon is self-intersecting | points=%d", len(points))

    return points


def _normalise_date(field_name: str, value: str | date) -> str:
    """Return *value* as ``YYYY-MM-DD``.  Raises ``RequestValidationError``."""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()

    text = str(value).strip()
    if not _ISO_DATE_RE.match(text):
        raise RequestValidationError(
            field_name, value, "expected YYYY-MM-DD", code="INVALID_DATE"
        )
    try:
        return date.fromisoformat(text).isoformat()
    except ValueError as exc:
        raise RequestValidationError(field_name, value, str(exc), code="INVALID_DATE") from exc


# ---------------------------------------------------------------------------
# Response parsing
# ---------------------------------------------------------------------------


def resolve_overlay_url(backend_url: str, overlay_url: str) -> str:
    """Prefix a backend-relative overlay path with the backend base address.

    Absolute ``http(s)`` URLs are returned unchanged.
    """
    if overlay_url.lower().startswith(("http://", "https://")):
        return overlay_url
    return f"{backend_url.rstrip('/')}/{overlay_url.lstrip('/')}"


def parse_change_response(response: httpx.Response, backend_url: str) -> ChangeResult:
    """Turn a backend response into a ``ChangeResult``.

    Raises:
        BackendError: If the status is not 2xx or the body does not match
            the expected schema.
    """
    status = response.status_code
    if not response.is_success:
        if status >= _RETRYABLE_STATUS_FLOOR or status == _TOO_MANY_REQUESTS:
            raise BackendUnavailableError(status, _read_detail(response))
        raise BackendRejectedError(status, _read_detail(response))

    try:
        payload = response.json()
    except ValueError as exc:
        raise MalformedResponseError(
            status, "malformed response: body is not valid JSON"
        ) from exc

    try:
        model = NdviChangeResponseModel.model_validate(payload)
    except PydanticValidationError as exc:
        fields = sorted({".".join(str(p) for p in err["loc"]) or "body" for err in exc.errors()})
        raise MalformedResponseError(
            status, f"malformed response: invalid or missing {', '.join(fields)}"
        ) from exc

    return ChangeResult(
        overlay_url=resolve_overlay_url(backend_url, model.overlay_url),
        bounds=BoundingBox.from_corners(model.bounds),
        mean_delta=model.summary.mean_delta,
        pct_gain_pixels=model.summary.pct_gain_pixels,
        pct_loss_pixels=model.summary.pct_loss_pixels,
    )


def _read_detail(response: httpx.Response) -> str:
    """Best-effort diagnostic text from an error response."""
    try:
        text = response.text.strip()
    except (UnicodeDecodeError, LookupError, httpx.ResponseNotRead):
        return NO_BODY_PLACEHOLDER
    if not text:
        return NO_BODY_PLACEHOLDER
    return text[:_MAX_DETAIL_CHARS]


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class ChangeRequestClient:
    """Submits NDVI change requests to the backend.

    Example usage::

        client = ChangeRequestClient(BackendConfig.from_env())
        result = await client.run(aoi, "2024-01-01", "2024-02-01", True)

    Args:
        config: Backend address and timeout.  Defaults to
            ``BackendConfig.from_env()``.
        transport: Optional ``httpx`` transport, e.g. ``httpx.MockTransport``
            for a stub backend.
    """

    def __init__(
        self,
        config: BackendConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config if config is not None else BackendConfig.from_env()
        self._transport = transport

    @property
    def config(self) -> BackendConfig:
        """Return the backend configuration (read-only)."""
        return self._config

    async def run(
        self,
        aoi: Sequence[LatLng],
        before_date: str | date,
        after_date: str | date,
        cloud_mask_enabled: bool = True,
    ) -> ChangeResult:
        """Request an NDVI change analysis for *aoi*.

        Raises:
            AoiValidationError: AOI unusable; raised before any network call.
            RequestValidationError: A date is malformed; raised before any
                network call.
            BackendError: Non-2xx status, network failure or malformed body.
        """
        request = build_change_request(aoi, before_date, after_date, cloud_mask_enabled)
        return await self.submit(request)

    async def submit(self, request: ChangeRequest) -> ChangeResult:
        """POST an already-built *request* and parse the reply."""
        correlation_id = uuid.uuid4().hex
        endpoint = self._config.endpoint

        logger.info(
            "ndvi-change started | endpoint=%s | vertices=%d | before=%s | after=%s | "
            "cloud_mask=%s | correlation_id=%s",
            endpoint,
            len(request.ring),
            request.before_date,
            request.after_date,
            request.cloud_mask,
            correlation_id,
        )
        started = time.monotonic()

        try:
            async with httpx.AsyncClient(
                timeout=self._config.request_timeout_s,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    endpoint,
                    json=request.to_body(),
                    headers={CORRELATION_HEADER: correlation_id},
                )
        except httpx.HTTPError as exc:
            logger.warning(
                "ndvi-change unreachable | endpoint=%s | error=%s | correlation_id=%s",
                endpoint,
                exc,
                correlation_id,
            )
            raise BackendUnreachableError(
                str(exc) or type(exc).__name__, correlation_id=correlation_id
            ) from exc

        try:
            result = parse_change_response(response, self._config.backend_url)
        except BackendError as exc:
            exc.correlation_id = correlation_id
            logger.warning(
                "ndvi-change failed | status=%d | code=%s | correlation_id=%s",
                exc.status_code,
                exc.code,
                correlation_id,
            )
            raise

        logger.info(
            "ndvi-change completed | status=%d | overlay=%s | mean_delta=%.4f | "
            "duration=%.2fs | correlation_id=%s",
            response.status_code,
            result.overlay_url,
            result.mean_delta,
            time.monotonic() - started,
            correlation_id,
        )
        return result
