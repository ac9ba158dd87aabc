"""Tests for the error taxonomy and HTTP classification."""

import pytest

from ragcore.errors import (
    AuthenticationError,
    ConfigurationError,
    InvalidRequestError,
    NetworkError,
    NotFoundError,
    ParseError,
    PermanentError,
    ProviderError,
    QuotaExceededError,
    RAGCoreError,
    RateLimitError,
    RequestTimeoutError,
    ServiceUnavailableError,
    TransportError,
    ValidationError,
    classify_http_error,
    is_retryable,
    wrap_exception,
)


class TestHierarchy:

    def test_transport_errors_are_retryable(self):
        for cls in (RateLimitError, ServiceUnavailableError, NetworkError, RequestTimeoutError):
            assert issubclass(cls, TransportError)
            assert is_retryable(cls())

    def test_permanent_errors_are_not_retryable(self):
        for error in (ProviderError(), ConfigurationError(), ValidationError(), ParseError()):
            assert isinstance(error, PermanentError)
            assert not is_retryable(error)

    def test_validation_and_parse_errors_are_value_errors(self):
        assert isinstance(ValidationError(), ValueError)
        assert isinstance(ParseError(), ValueError)

    def test_parse_error_keeps_response(self):
        error = ParseError("bad verdict", response="perhaps")
        assert error.response == "perhaps"
        assert error.details["response"] == "perhaps"

    def test_str_includes_details_and_cause(self):
        cause = KeyError("x")
        error = RAGCoreError("failed", details={"k": 1}, original_error=cause)
        text = str(error)
        assert "failed" in text
        assert "Details" in text
        assert "KeyError" in text

    def test_to_dict(self):
        data = ConfigurationError("bad limit").to_dict()
        assert data["error_type"] == "ConfigurationError"
        assert data["message"] == "bad limit"


class TestClassifyHttpError:

    @pytest.mark.parametrize("status,expected", [
        (401, AuthenticationError),
        (403, AuthenticationError),
        (400, InvalidRequestError),
        (422, InvalidRequestError),
        (404, NotFoundError),
        (429, RateLimitError),
        (500, ServiceUnavailableError),
        (503, ServiceUnavailableError),
        (418, ProviderError),
    ])
    def test_status_mapping(self, status, expected):
        assert type(classify_http_error(status)) is expected

    def test_quota_is_permanent(self):
        error = classify_http_error(429, "You exceeded your current quota")
        assert isinstance(error, QuotaExceededError)
        assert not is_retryable(error)

    def test_retry_after_header(self):
        error = classify_http_error(429, "slow down", {"Retry-After": "3"})
        assert error.retry_after == 3.0

    def test_conflict_is_transient(self):
        assert is_retryable(classify_http_error(409))


class TestWrapException:

    def test_ragcore_errors_pass_through(self):
        error = NetworkError()
        assert wrap_exception(error) is error

    def test_builtin_timeout(self):
        assert isinstance(wrap_exception(TimeoutError()), RequestTimeoutError)

    def test_connection_error(self):
        assert isinstance(wrap_exception(ConnectionError("reset")), NetworkError)
