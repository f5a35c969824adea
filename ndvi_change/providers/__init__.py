"""Remote service adapters.

- ndvi_backend: HTTP client for the ``/ndvi-change`` endpoint
"""

from ndvi_change.providers.ndvi_backend import (
    ChangeRequestClient,
    build_change_request,
    parse_change_response,
    resolve_overlay_url,
)

__all__ = [
    "ChangeRequestClient",
    "build_change_request",
    "parse_change_response",
    "resolve_overlay_url",
]
