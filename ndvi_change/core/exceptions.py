"""Exception taxonomy for the NDVI change core.

Every domain exception inherits from ``NdviChangeError`` and carries
structured context fields so the UI layer can show a single readable
message while logs keep the machine-readable detail.

Taxonomy categories
-------------------
- ``ValidationError``: bad AOI or request input, never retryable.
- ``TransientError``: network failures and throttling, retryable.
- ``PermanentError``: unrecoverable failures, not retryable.
- ``ContractError``: response schema drift from the backend.

Geometry helpers never raise; only request building and the backend
exchange use this hierarchy.
"""

from __future__ import annotations


class NdviChangeError(Exception):
    """Base exception for all NDVI-change domain errors.

    Attributes:
        message: Human-readable error description.
        stage: Where the error occurred (e.g. ``"build_request"``).
        code: Machine-readable error code (e.g. ``"AOI_TOO_FEW_POINTS"``).
        retryable: Whether resubmitting the same request may succeed.
        correlation_id: Request correlation identifier, if any.
    """

    #: Default stage for subclasses (override via class attribute or kwarg).
    default_stage: str = ""
    #: Default code for subclasses (override via class attribute or kwarg).
    default_code: str = ""

    def __init__(
        self,
        message: str = "",
        *,
        stage: str = "",
        code: str = "",
        retryable: bool = False,
        correlation_id: str = "",
    ) -> None:
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        self.retryable = retryable
        self.correlation_id = correlation_id
        super().__init__(message)

    @property
    def category(self) -> str:
        """Return the error category based on concrete class."""
        if isinstance(self, ContractError):
            return "contract"
        if isinstance(self, ValidationError):
            return "validation"
        if isinstance(self, TransientError):
            return "transient"
        if isinstance(self, PermanentError):
            return "permanent"
        return "transient" if self.retryable else "permanent"

    def to_error_dict(self) -> dict[str, object]:
        """Return a structured error payload with stable keys."""
        return {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
            "retryable": self.retryable,
            "correlation_id": self.correlation_id,
        }


# ---------------------------------------------------------------------------
# Category base classes
# ---------------------------------------------------------------------------


class ValidationError(NdviChangeError):
    """Input or domain-model validation failure. Never retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class TransientError(NdviChangeError):
    """Temporary failure that may succeed on retry."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", True)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class PermanentError(NdviChangeError):
    """Unrecoverable failure. Not retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class ContractError(NdviChangeError):
    """Payload or schema drift between client and backend. Never retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Concrete errors
# ---------------------------------------------------------------------------


class AoiValidationError(ValidationError):
    """The AOI cannot be submitted (too few points or too few distinct points).

    Attributes:
        point_count: Number of points in the rejected AOI.
    """

    default_stage = "build_request"
    default_code = "AOI_TOO_FEW_POINTS"

    def __init__(self, message: str, *, point_count: int = 0, code: str = "") -> None:
        self.point_count = point_count
        super().__init__(message, code=code)


class RequestValidationError(ValidationError):
    """A request parameter other than the AOI is malformed (e.g. a date).

    Attributes:
        field_name: The request field that failed validation.
        value: The rejected value.
    """

    default_stage = "build_request"
    default_code = "INVALID_REQUEST"

    def __init__(self, field_name: str, value: object, message: str, *, code: str = "") -> None:
        self.field_name = field_name
        self.value = value
        super().__init__(f"Invalid {field_name}={value!r}: {message}", code=code)


class BackendError(NdviChangeError):
    """The change-detection backend did not produce a usable result.

    Callers catch this one type; the concrete subclass fixes the category
    and retry semantics of the failure.

    Attributes:
        status_code: HTTP status code, or ``0`` when no response arrived.
        detail: Diagnostic text returned by the server (or a placeholder).
    """

    default_stage = "ndvi_change"
    default_code = "BACKEND_HTTP_ERROR"

    def __init__(self, status_code: int, detail: str, *, correlation_id: str = "") -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"Backend {status_code}: {detail}", correlation_id=correlation_id)


class BackendUnavailableError(BackendError, TransientError):
    """Server-side failure or throttling (5xx, 429)."""


class BackendRejectedError(BackendError, PermanentError):
    """The backend refused the request (4xx other than 429)."""


class BackendUnreachableError(BackendError, TransientError):
    """No HTTP response arrived (connection, DNS or timeout failure)."""

    default_code = "BACKEND_UNREACHABLE"

    def __init__(self, detail: str, *, correlation_id: str = "") -> None:
        super().__init__(0, detail, correlation_id=correlation_id)


class MalformedResponseError(BackendError, ContractError):
    """A 2xx response whose body does not match the expected schema."""

    default_code = "BACKEND_MALFORMED_RESPONSE"
