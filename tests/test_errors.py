"""
Ragora Python SDK - Error Tests
"""

import pytest

from ragora.errors import (
    APIError,
    RagoraError,
    AuthenticationError,
    NotFoundError,
    RateLimitError,
    InvalidRequestError,
    ServerError,
    TimeoutError,
    ConnectionError,
    StreamError,
    DocumentProcessingError,
    is_retryable_error,
)


class TestRagoraError:
    """Tests for RagoraError base class."""

    def test_error_creation(self):
        error = RagoraError("Something went wrong")
        assert error.message == "Something went wrong"
        assert error.status_code == 500
        assert error.code == "unknown"
        assert isinstance(error, Exception)

    def test_str_with_request_id(self):
        error = RagoraError("Bad", status_code=400, request_id="req_1")
        assert str(error) == "[400] Bad (Request ID: req_1)"

    def test_str_without_request_id(self):
        assert str(RagoraError("Bad", status_code=400)) == "[400] Bad"

    def test_error_repr(self):
        repr_str = repr(RagoraError("Test error", status_code=400))
        assert "RagoraError" in repr_str
        assert "Test error" in repr_str

    def test_code_from_structured_error(self):
        error = RagoraError("x", error=APIError(code="quota_exceeded", message="x"))
        assert error.code == "quota_exceeded"

    def test_flags(self):
        assert RagoraError("x", status_code=429).is_rate_limited
        assert RagoraError("x", status_code=403).is_auth_error
        assert RagoraError("x", status_code=503).is_retryable
        assert not RagoraError("x", status_code=400).is_retryable


class TestFromResponse:
    """Tests for building errors from API responses."""

    def test_structured_error(self):
        body = {"error": {
            "code": "invalid_collection",
            "message": "Collection is archived",
            "details": [{"field": "collection_id", "reason": "archived"}, "free text"],
        }}
        error = RagoraError.from_response(400, body, request_id="req_9")

        assert isinstance(error, InvalidRequestError)
        assert error.message == "Collection is archived"
        assert error.code == "invalid_collection"
        assert error.error.request_id == "req_9"
        assert error.error.details[0].field == "collection_id"
        assert error.error.details[1].reason == "free text"

    def test_string_error(self):
        error = RagoraError.from_response(500, {"error": "upstream failed"})
        assert isinstance(error, ServerError)
        assert error.message == "upstream failed"
        assert error.error is None

    def test_top_level_message(self):
        error = RagoraError.from_response(404, {"message": "No such document"})
        assert isinstance(error, NotFoundError)
        assert error.message == "No such document"

    def test_no_body_uses_reason(self):
        error = RagoraError.from_response(502, None, reason="Bad Gateway")
        assert error.message == "Bad Gateway"

    def test_no_body_no_reason(self):
        error = RagoraError.from_response(599)
        assert error.message == "HTTP 599"

    @pytest.mark.parametrize("status,error_class", [
        (400, InvalidRequestError),
        (401, AuthenticationError),
        (403, AuthenticationError),
        (404, NotFoundError),
        (409, InvalidRequestError),
        (422, InvalidRequestError),
        (429, RateLimitError),
        (500, ServerError),
        (503, ServerError),
        (418, RagoraError),
    ])
    def test_status_mapping(self, status, error_class):
        error = RagoraError.from_response(status)
        assert type(error) is error_class
        assert error.status_code == status

    def test_retry_after(self):
        error = RagoraError.from_response(429, None, retry_after=7)
        assert error.retry_after == 7


class TestSubclasses:
    """Tests for error subclasses."""

    def test_authentication_error(self):
        error = AuthenticationError()
        assert error.status_code == 401
        assert isinstance(error, RagoraError)

    def test_rate_limit_error(self):
        error = RateLimitError("Too many", retry_after=30)
        assert error.retry_after == 30
        assert error.status_code == 429
        assert error.is_retryable

    def test_timeout_error(self):
        error = TimeoutError()
        assert error.status_code == 408
        assert not error.is_retryable

    def test_connection_error(self):
        error = ConnectionError()
        assert error.status_code == 503
        assert error.is_retryable

    def test_stream_error(self):
        error = StreamError("Stream interrupted", partial_content="Hello, wor")
        assert error.partial_content == "Hello, wor"
        assert not error.is_retryable

    def test_document_processing_error(self):
        error = DocumentProcessingError("Failed", document_id="doc-1")
        assert error.document_id == "doc-1"
        assert not error.is_retryable


class TestIsRetryableError:
    """Tests for is_retryable_error function."""

    def test_server_error_retryable(self):
        assert is_retryable_error(ServerError())

    def test_rate_limit_retryable(self):
        assert is_retryable_error(RateLimitError())

    def test_invalid_request_not_retryable(self):
        assert not is_retryable_error(InvalidRequestError())

    def test_stream_error_not_retryable(self):
        assert not is_retryable_error(StreamError())

    def test_other_exceptions_not_retryable(self):
        assert not is_retryable_error(ValueError("x"))
