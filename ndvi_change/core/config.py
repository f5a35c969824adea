"""Backend configuration loaded from environment variables.

The backend address is read once at startup and threaded through the
client and the analysis session.  ``from_env()`` raises
``ConfigValidationError`` if a value is out of range so that a bad
deployment fails before the first request rather than on it.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from ndvi_change.core.constants import (
    DEFAULT_BACKEND_URL,
    DEFAULT_REQUEST_TIMEOUT_S,
    NDVI_CHANGE_PATH,
)
from ndvi_change.core.exceptions import NdviChangeError

_ALLOWED_SCHEMES = ("http://", "https://")


class ConfigValidationError(NdviChangeError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
        message: Human-readable description of the valid range.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        self.message = message
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class BackendConfig:
    """Immutable backend configuration.

    Attributes:
        backend_url: Base address of the change-detection service, without
            a trailing slash.
        request_timeout_s: Total HTTP timeout for one analysis request.
    """

    backend_url: str = DEFAULT_BACKEND_URL
    request_timeout_s: float = DEFAULT_REQUEST_TIMEOUT_S

    def __post_init__(self) -> None:
        object.__setattr__(self, "backend_url", self.backend_url.strip().rstrip("/"))
        _validate(self)

    @classmethod
    def from_env(cls) -> BackendConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If the URL is empty or not http(s), or
                the timeout is not positive.
            ValueError: If ``NDVI_REQUEST_TIMEOUT_S`` cannot be parsed.
        """
        return cls(
            backend_url=os.getenv("NDVI_BACKEND_URL", DEFAULT_BACKEND_URL),
            request_timeout_s=float(
                os.getenv("NDVI_REQUEST_TIMEOUT_S", str(DEFAULT_REQUEST_TIMEOUT_S))
            ),
        )

    @property
    def endpoint(self) -> str:
        """Absolute URL of the NDVI change endpoint."""
        return f"{self.backend_url}{NDVI_CHANGE_PATH}"


def _validate(config: BackendConfig) -> None:
    """Validate configuration values.  Raises ``ConfigValidationError``."""
    if not config.backend_url:
        raise ConfigValidationError("NDVI_BACKEND_URL", config.backend_url, "must not be empty")

    if not config.backend_url.lower().startswith(_ALLOWED_SCHEMES):
        raise ConfigValidationError(
            "NDVI_BACKEND_URL",
            config.backend_url,
            "must start with http:// or https://",
        )

    if not config.request_timeout_s > 0:
        raise ConfigValidationError(
            "NDVI_REQUEST_TIMEOUT_S",
            config.request_timeout_s,
            "must be > 0 (seconds)",
        )
