"""Tests for the exception taxonomy.

Validates:
- NdviChangeError hierarchy and structured attributes
- Category classification (validation, transient, permanent, contract)
- ``to_error_dict()`` produces stable payload keys
- Concrete errors carry their context and defaults
"""

from __future__ import annotations

from typing import ClassVar

import pytest

from ndvi_change.core.config import ConfigValidationError
from ndvi_change.core.exceptions import (
    AoiValidationError,
    BackendError,
    BackendRejectedError,
    BackendUnavailableError,
    BackendUnreachableError,
    ContractError,
    MalformedResponseError,
    NdviChangeError,
    PermanentError,
    RequestValidationError,
    TransientError,
    ValidationError,
)


class TestNdviChangeErrorBase:
    """NdviChangeError base class behaviour."""

    def test_default_attributes(self) -> None:
        err = NdviChangeError("boom")
        assert err.message == "boom"
        assert err.stage == ""
        assert err.code == ""
        assert err.retryable is False
        assert err.correlation_id == ""
        assert str(err) == "boom"

    def test_explicit_attributes(self) -> None:
        err = NdviChangeError(
            "boom", stage="ndvi_change", code="X", retryable=True, correlation_id="abc"
        )
        assert (err.stage, err.code, err.retryable, err.correlation_id) == (
            "ndvi_change",
            "X",
            True,
            "abc",
        )

    def test_category_follows_retryable_on_base(self) -> None:
        assert NdviChangeError("x", retryable=True).category == "transient"
        assert NdviChangeError("x").category == "permanent"

    def test_to_error_dict_keys(self) -> None:
        payload = NdviChangeError("boom", code="X").to_error_dict()
        assert set(payload) == {
            "category",
            "code",
            "stage",
            "message",
            "retryable",
            "correlation_id",
        }
        assert payload["message"] == "boom"


class TestCategoryClasses:
    """Category base classes fix category and retry defaults."""

    CASES: ClassVar[list[tuple[type[NdviChangeError], str, bool]]] = [
        (ValidationError, "validation", False),
        (TransientError, "transient", True),
        (PermanentError, "permanent", False),
        (ContractError, "contract", False),
    ]

    @pytest.mark.parametrize(("cls", "category", "retryable"), CASES)
    def test_category_and_retry_default(
        self, cls: type[NdviChangeError], category: str, retryable: bool
    ) -> None:
        err = cls("x")
        assert err.category == category
        assert err.retryable is retryable
        assert isinstance(err, NdviChangeError)


class TestConcreteErrors:
    """Domain errors raised by request building, config and the client."""

    def test_aoi_validation_error(self) -> None:
        err = AoiValidationError("too few", point_count=2)
        assert err.category == "validation"
        assert err.code == "AOI_TOO_FEW_POINTS"
        assert err.stage == "build_request"
        assert err.point_count == 2
        assert err.retryable is False

    def test_aoi_validation_error_code_override(self) -> None:
        err = AoiValidationError("dupes", point_count=3, code="AOI_TOO_FEW_DISTINCT_POINTS")
        assert err.code == "AOI_TOO_FEW_DISTINCT_POINTS"

    def test_request_validation_error(self) -> None:
        err = RequestValidationError("before_date", "x", "expected YYYY-MM-DD", code="INVALID_DATE")
        assert str(err) == "Invalid before_date='x': expected YYYY-MM-DD"
        assert err.field_name == "before_date"
        assert err.category == "validation"
        assert err.code == "INVALID_DATE"

    def test_request_validation_error_default_code(self) -> None:
        assert RequestValidationError("f", 1, "bad").code == "INVALID_REQUEST"

    def test_backend_error_message(self) -> None:
        err = BackendUnavailableError(502, "bad gateway")
        assert str(err) == "Backend 502: bad gateway"
        assert err.message == "Backend 502: bad gateway"
        assert err.code == "BACKEND_HTTP_ERROR"
        assert err.stage == "ndvi_change"
        assert err.status_code == 502
        assert err.detail == "bad gateway"

    def test_correlation_id_passed_through(self) -> None:
        err = BackendRejectedError(404, "gone", correlation_id="abc")
        assert err.to_error_dict()["correlation_id"] == "abc"


class TestBackendErrorTaxonomy:
    """Each backend failure is a BackendError placed in one category."""

    CASES: ClassVar[list[tuple[BackendError, type[NdviChangeError], str, bool, str]]] = [
        (
            BackendUnavailableError(503, "busy"),
            TransientError,
            "transient",
            True,
            "BACKEND_HTTP_ERROR",
        ),
        (
            BackendRejectedError(422, "bad aoi"),
            PermanentError,
            "permanent",
            False,
            "BACKEND_HTTP_ERROR",
        ),
        (
            BackendUnreachableError("connection refused"),
            TransientError,
            "transient",
            True,
            "BACKEND_UNREACHABLE",
        ),
        (
            MalformedResponseError(200, "malformed response"),
            ContractError,
            "contract",
            False,
            "BACKEND_MALFORMED_RESPONSE",
        ),
    ]

    @pytest.mark.parametrize(("err", "base", "category", "retryable", "code"), CASES)
    def test_category_from_class(
        self,
        err: BackendError,
        base: type[NdviChangeError],
        category: str,
        retryable: bool,
        code: str,
    ) -> None:
        assert isinstance(err, BackendError)
        assert isinstance(err, base)
        assert err.category == category
        assert err.retryable is retryable
        assert err.code == code
        assert err.to_error_dict()["category"] == category

    def test_unreachable_has_status_zero(self) -> None:
        err = BackendUnreachableError("timed out")
        assert err.status_code == 0
        assert str(err) == "Backend 0: timed out"

    def test_plain_backend_error_is_permanent(self) -> None:
        assert BackendError(400, "bad").category == "permanent"


class TestConfigError:
    """Configuration failures share the base class."""

    def test_config_validation_error_is_domain_error(self) -> None:
        err = ConfigValidationError("NDVI_BACKEND_URL", "", "must not be empty")
        assert isinstance(err, NdviChangeError)
        assert err.category == "permanent"
        assert err.to_error_dict()["stage"] == "config"
