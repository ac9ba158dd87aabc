"""
Error taxonomy for memory buffers, postprocessors, evaluators and providers.

Two families matter to callers:

1. TransportError: the request may succeed if sent again
   (rate limits, 5xx, dropped connections, transport timeouts).
2. PermanentError: sending the same request again is pointless
   (4xx payloads, bad configuration, missing inputs, unreadable judge output).

``asyncio.CancelledError`` is outside this hierarchy and is never
wrapped or retried.

Usage:
    try:
        result = await evaluator.evaluate(sample)
    except TransportError as e:
        logger.warning(f"Provider unreachable, retry after {e.retry_after}s")
    except ParseError as e:
        logger.error(f"Judge answered something unreadable: {e.response!r}")
"""

from typing import Any


class RAGCoreError(Exception):
    """
    Base exception for all ragcore errors.

    Attributes:
        message: Human-readable error description
        details: Structured context for logs
        original_error: The exception this one was translated from
    """

    default_message = "ragcore error"

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message or self.default_message
        self.details = dict(details or {})
        self.original_error = original_error
        super().__init__(self.message)

    def __str__(self) -> str:
        text = self.message
        if self.details:
            text += f" | Details: {self.details}"
        if self.original_error:
            text += f" | Caused by: {type(self.original_error).__name__}: {self.original_error}"
        return text

    def to_dict(self) -> dict[str, Any]:
        return {
            "error_type": type(self).__name__,
            "message": self.message,
            "details": self.details,
            "original_error": str(self.original_error) if self.original_error else None,
        }


# ==================== Transport ====================

class TransportError(RAGCoreError):
    """
    The request may succeed if sent again.

    Attributes:
        retry_after: Provider's hint for the wait before retrying (seconds)
    """

    default_message = "Transport failure"

    def __init__(
        self,
        message: str | None = None,
        retry_after: float | None = None,
        details: dict[str, Any] | None = None,
        original_error: Exception | None = None,
    ):
        super().__init__(message, details, original_error)
        self.retry_after = retry_after


class RateLimitError(TransportError):
    """HTTP 429 without a quota message."""

    default_message = "API rate limit exceeded"


class ServiceUnavailableError(TransportError):
    """HTTP 5xx."""

    default_message = "Service temporarily unavailable"


class NetworkError(TransportError):
    """DNS failures, refused connections and connections dropped mid-response."""

    default_message = "Failed to connect to service"


class RequestTimeoutError(TransportError):
    """
    The provider did not answer within the transport timeout.

    Caller deadlines surface as ``TimeoutError`` from ``asyncio.timeout``
    instead; this error only covers the client's own timeout.
    """

    default_message = "Request timed out"

    def __init__(
        self,
        message: str | None = None,
        timeout: float | None = None,
        details: dict[str, Any] | None = None,
        original_error: Exception | None = None,
    ):
        super().__init__(message, details={**(details or {}), "timeout": timeout},
                         original_error=original_error)
        self.timeout = timeout


# ==================== Permanent ====================

class PermanentError(RAGCoreError):
    """Sending the same request again will fail the same way."""


class ProviderError(PermanentError):
    """The provider answered with an error payload or unusable output."""

    default_message = "Provider returned an error"


class AuthenticationError(ProviderError):
    """HTTP 401/403."""

    default_message = "Authentication failed"


class InvalidRequestError(ProviderError):
    """HTTP 400/422."""

    default_message = "Invalid request parameters"


class NotFoundError(ProviderError):
    """Unknown model or endpoint (HTTP 404)."""

    default_message = "Resource not found"


class QuotaExceededError(ProviderError):
    """
    HTTP 429 whose message mentions the quota.

    The account is out of credit, so waiting does not help.
    """

    default_message = "Account quota exceeded"


class ResponseFormatError(ProviderError):
    """Structured output that does not match the requested format."""

    default_message = "Response does not match the requested format"


class ConfigurationError(PermanentError):
    """
    Invalid construction parameters or environment.

    For example a missing API key, a token limit smaller than the sticky
    system message, or an unknown component type.
    """

    default_message = "Configuration error"


class ValidationError(PermanentError, ValueError):
    """Caller-supplied input is missing or malformed."""

    default_message = "Invalid input"


class ParseError(PermanentError, ValueError):
    """
    A judge or reranker response could not be interpreted.

    Attributes:
        response: The raw model text
    """

    default_message = "Could not parse model response"

    def __init__(
        self,
        message: str | None = None,
        response: str = "",
        details: dict[str, Any] | None = None,
        original_error: Exception | None = None,
    ):
        super().__init__(message, {**(details or {}), "response": response[:200]}, original_error)
        self.response = response


# ==================== Helpers ====================

def is_retryable(error: BaseException) -> bool:
    return isinstance(error, TransportError)


def _parse_retry_after(headers: dict) -> float | None:
    value = headers.get("Retry-After") or headers.get("retry-after")
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        # HTTP-date form is not supported
        return None


def classify_http_error(status_code: int, message: str = "", headers: dict | None = None) -> RAGCoreError:
    """
    Map an HTTP error status onto the taxonomy.

    Args:
        status_code: HTTP status code
        message: Error text from the response body
        headers: Response headers, read for ``Retry-After``
    """
    retry_after = _parse_retry_after(headers or {})
    details = {"status_code": status_code}
    message = message or None

    if status_code == 429:
        if message and "quota" in message.lower():
            return QuotaExceededError(message, details=details)
        return RateLimitError(message, retry_after=retry_after, details=details)
    if status_code in (401, 403):
        return AuthenticationError(message, details=details)
    if status_code in (400, 422):
        return InvalidRequestError(message, details=details)
    if status_code == 404:
        return NotFoundError(message, details=details)
    if status_code in (408, 409):
        return TransportError(message or f"Transient HTTP error {status_code}",
                              retry_after=retry_after, details=details)
    if status_code >= 500:
        return ServiceUnavailableError(message or f"Server error (HTTP {status_code})",
                                       retry_after=retry_after, details=details)
    return ProviderError(message or f"HTTP error {status_code}", details=details)


_NETWORK_HINTS = ("connection", "network", "dns")
_RATE_LIMIT_HINTS = ("rate limit", "too many requests", "429")
_AUTH_HINTS = ("api key", "credential", "unauthorized", "401", "403")


def wrap_exception(error: Exception, context: str = "") -> RAGCoreError:
    """
    Translate an arbitrary exception raised by a provider SDK.

    RAGCoreErrors pass through unchanged. Anything not recognisable as a
    transport or credential problem becomes a ProviderError.
    """
    if isinstance(error, RAGCoreError):
        return error

    text = str(error).lower()
    message = f"{context}: {error}" if context else str(error)

    if isinstance(error, TimeoutError) or "timeout" in text or "timed out" in text:
        return RequestTimeoutError(message, original_error=error)
    if isinstance(error, ConnectionError) or any(hint in text for hint in _NETWORK_HINTS):
        return NetworkError(message, original_error=error)
    if any(hint in text for hint in _RATE_LIMIT_HINTS):
        return RateLimitError(message, original_error=error)
    if any(hint in text for hint in _AUTH_HINTS):
        return AuthenticationError(message, original_error=error)
    return ProviderError(message, original_error=error)
