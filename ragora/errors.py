"""
Ragora SDK - Error Classes

Error handling for Ragora API interactions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


RETRYABLE_STATUS_CODES = (429, 500, 502, 503, 504)


@dataclass
class APIErrorDetail:
    """A single detail entry of a structured API error."""
    field: Optional[str] = None
    reason: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> APIErrorDetail:
        if not isinstance(data, dict):
            return cls(reason=str(data))
        return cls(field=data.get("field"), reason=data.get("reason"))


@dataclass
class APIError:
    """Structured error body returned by the API."""
    code: str
    message: str
    details: List[APIErrorDetail] = field(default_factory=list)
    request_id: Optional[str] = None


class RagoraError(Exception):
    """
    Base exception for the Ragora SDK.

    All SDK errors inherit from this class.

    Attributes:
        message: Human-readable error message
        status_code: HTTP status code (client-side errors use the closest match)
        error: Structured error from the API, when the body carried one
        request_id: Request ID for support/debugging
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error: Optional[APIError] = None,
        request_id: Optional[str] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.error = error
        self.request_id = request_id
        super().__init__(message)

    @property
    def code(self) -> str:
        """Error code from the API, or ``"unknown"``."""
        return self.error.code if self.error else "unknown"

    @property
    def is_rate_limited(self) -> bool:
        return self.status_code == 429

    @property
    def is_auth_error(self) -> bool:
        return self.status_code in (401, 403)

    @property
    def is_retryable(self) -> bool:
        """Whether the request is worth retrying."""
        return self.status_code in RETRYABLE_STATUS_CODES

    def __str__(self) -> str:
        parts = [f"[{self.status_code}] {self.message}"]
        if self.request_id:
            parts.append(f"(Request ID: {self.request_id})")
        return " ".join(parts)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"status_code={self.status_code}, "
            f"request_id={self.request_id!r})"
        )

    @classmethod
    def from_response(
        cls,
        status_code: int,
        body: Any = None,
        request_id: Optional[str] = None,
        reason: str = "",
        retry_after: Optional[int] = None,
    ) -> RagoraError:
        """
        Create an error from a non-2xx API response.

        Args:
            status_code: HTTP status code
            body: Decoded JSON body, or None if it could not be decoded
            request_id: Value of the X-Request-ID header
            reason: HTTP reason phrase
            retry_after: Parsed Retry-After header, if any

        Returns:
            An instance of the RagoraError subclass matching the status code.
        """
        error: Optional[APIError] = None
        message = reason or f"HTTP {status_code}"

        if isinstance(body, dict):
            error_data = body.get("error")
            if isinstance(error_data, dict):
                details = error_data.get("details")
                error = APIError(
                    code=str(error_data.get("code", "unknown")),
                    message=str(error_data.get("message", "Unknown error")),
                    details=[APIErrorDetail.from_dict(d) for d in details]
                    if isinstance(details, list) else [],
                    request_id=request_id,
                )
                message = error.message
            elif error_data:
                message = str(error_data)
            elif body.get("message"):
                message = str(body["message"])

        error_class = _error_class_for_status(status_code)
        kwargs: Dict[str, Any] = {
            "status_code": status_code,
            "error": error,
            "request_id": request_id,
        }
        if error_class is RateLimitError and retry_after is not None:
            kwargs["retry_after"] = retry_after
        return error_class(message, **kwargs)


class AuthenticationError(RagoraError):
    """
    API key is invalid, missing, or lacks permission.

    Raised for 401/403 responses, and client-side when no API key is set.
    """

    def __init__(self, message: str = "Invalid or missing API key", **kwargs):
        super().__init__(
            message,
            status_code=kwargs.pop("status_code", 401),
            **kwargs
        )


class NotFoundError(RagoraError):
    """The requested resource does not exist."""

    def __init__(self, message: str = "Resource not found", **kwargs):
        super().__init__(
            message,
            status_code=kwargs.pop("status_code", 404),
            **kwargs
        )


class RateLimitError(RagoraError):
    """
    Rate limit exceeded.

    Attributes:
        retry_after: Seconds to wait before retrying
    """

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        retry_after: int = 60,
        **kwargs
    ):
        super().__init__(
            message,
            status_code=kwargs.pop("status_code", 429),
            **kwargs
        )
        self.retry_after = retry_after


class InvalidRequestError(RagoraError):
    """
    Request parameters are invalid.

    Raised for 400, 409 and 422 responses.
    """

    def __init__(self, message: str = "Invalid request", **kwargs):
        super().__init__(
            message,
            status_code=kwargs.pop("status_code", 400),
            **kwargs
        )


class ServerError(RagoraError):
    """The API failed to process a valid request (5xx)."""

    def __init__(self, message: str = "Internal server error", **kwargs):
        super().__init__(
            message,
            status_code=kwargs.pop("status_code", 500),
            **kwargs
        )


class TimeoutError(RagoraError):
    """
    Request timed out.

    Raised when connecting, or waiting for the next piece of the
    response, takes longer than the configured timeout. Also raised by
    ``wait_for_document`` when processing does not finish in time.
    """

    def __init__(self, message: str = "Request timed out", **kwargs):
        super().__init__(
            message,
            status_code=kwargs.pop("status_code", 408),
            **kwargs
        )


class ConnectionError(RagoraError):
    """
    Failed to connect to the API.

    This error occurs when:
    - Network is unavailable
    - DNS resolution fails
    - Connection is refused
    """

    def __init__(self, message: str = "Failed to connect to API", **kwargs):
        super().__init__(
            message,
            status_code=kwargs.pop("status_code", 503),
            **kwargs
        )


class StreamError(RagoraError):
    """
    Error during a streaming response.

    The transport failed after the stream was opened.

    Attributes:
        partial_content: Content received before the error
    """

    def __init__(
        self,
        message: str = "Stream interrupted",
        partial_content: str = "",
        **kwargs
    ):
        super().__init__(
            message,
            status_code=kwargs.pop("status_code", 500),
            **kwargs
        )
        self.partial_content = partial_content

    @property
    def is_retryable(self) -> bool:
        # Can't resume mid-stream
        return False


class DocumentProcessingError(RagoraError):
    """A document failed server-side processing."""

    def __init__(
        self,
        message: str = "Document processing failed",
        document_id: Optional[str] = None,
        **kwargs
    ):
        super().__init__(
            message,
            status_code=kwargs.pop("status_code", 500),
            **kwargs
        )
        self.document_id = document_id

    @property
    def is_retryable(self) -> bool:
        return False


def _error_class_for_status(status_code: int) -> type:
    if status_code in (401, 403):
        return AuthenticationError
    if status_code == 404:
        return NotFoundError
    if status_code == 429:
        return RateLimitError
    if status_code in (400, 409, 422):
        return InvalidRequestError
    if status_code >= 500:
        return ServerError
    return RagoraError


def is_retryable_error(error: Any) -> bool:
    """
    Check if an error is retryable.

    Rate limits and server-side failures are retryable. Semantic errors
    (invalid request, authentication, not found) are not.

    Args:
        error: The error to check

    Returns:
        True if the error is retryable, False otherwise
    """
    if isinstance(error, RagoraError):
        return error.is_retryable

    return False
