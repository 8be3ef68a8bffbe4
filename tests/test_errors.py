"""Tests for error taxonomy and API error mapping."""

import json

import httplib2
import pytest
from googleapiclient.errors import HttpError

from core.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    ExternalAPIError,
    InternalError,
    InvalidArgumentError,
    NotFoundError,
    RateLimitError,
    TimeoutError,
    map_api_exception,
)


def make_http_error(status, message=None, headers=None):
    info = {"status": str(status)}
    info.update(headers or {})
    content = b""
    if message is not None:
        content = json.dumps({"error": {"code": status, "message": message}}).encode("utf-8")
    return HttpError(httplib2.Response(info), content)


class TestMapApiException:
    """Tests for map_api_exception."""

    @pytest.mark.parametrize(
        "status, error_class",
        [
            (400, InvalidArgumentError),
            (401, AuthenticationError),
            (403, AuthorizationError),
            (404, NotFoundError),
            (409, ConflictError),
            (429, RateLimitError),
            (504, TimeoutError),
            (500, ExternalAPIError),
            (503, ExternalAPIError),
            (418, ExternalAPIError),
        ],
    )
    def test_status_mapping(self, status, error_class):
        """Test that HTTP statuses map to typed errors."""
        error = map_api_exception(make_http_error(status, "boom"))

        assert type(error) is error_class

    def test_message_extracted_from_payload(self):
        """Test that the API's own message is used."""
        error = map_api_exception(make_http_error(400, "Filter set name is invalid"))

        assert str(error) == "Filter set name is invalid"

    def test_retryable_classification(self):
        """Test which mapped errors are retryable."""
        assert map_api_exception(make_http_error(429, "slow down")).retryable is True
        assert map_api_exception(make_http_error(503, "unavailable")).retryable is True
        assert map_api_exception(make_http_error(418, "teapot")).retryable is False
        assert map_api_exception(make_http_error(404, "missing")).retryable is False

    def test_retry_after_header(self):
        """Test that Retry-After is carried into the error details."""
        error = map_api_exception(make_http_error(429, "slow down", {"retry-after": "30"}))

        assert error.error_detail.details["retry_after"] == 30

    def test_resource_in_details(self):
        """Test that the targeted resource is recorded."""
        error = map_api_exception(
            make_http_error(404, "missing"),
            resource="bidders/1/accounts/2/filterSets/x",
        )

        assert error.error_detail.details == {"resource": "bidders/1/accounts/2/filterSets/x"}

    def test_external_error_status(self):
        """Test that unmapped statuses keep the API status code."""
        error = map_api_exception(make_http_error(502, "bad gateway"))

        assert error.error_detail.http_status == 502
        assert error.error_detail.details["api_status"] == 502

    def test_typed_errors_pass_through(self):
        """Test that already-typed errors are returned unchanged."""
        original = ConflictError("exists")

        assert map_api_exception(original) is original

    def test_unexpected_exception(self):
        """Test that other exceptions become internal errors."""
        error = map_api_exception(ValueError("bad"))

        assert isinstance(error, InternalError)
        assert error.error_detail.http_status == 500


class TestErrorDetail:
    """Tests for error serialization."""

    def test_to_dict(self):
        """Test the JSON error body."""
        error = InvalidArgumentError("Both start date and end date must be set", details={"start_date": "20240101"})

        assert error.error_detail.to_dict() == {
            "category": "validation",
            "code": "INVALID_ARGUMENT",
            "message": "Both start date and end date must be set",
            "retryable": False,
            "details": {"start_date": "20240101"},
        }

    def test_to_dict_omits_empty_details(self):
        """Test that empty details are left out."""
        assert "details" not in AuthenticationError().error_detail.to_dict()
