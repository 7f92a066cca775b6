"""
Tests for the error taxonomy and lookup results.
"""

import pytest

from topiclookup.errors import (
    ConflictError,
    InterruptedLookupError,
    LookupTimeoutError,
    NotAllowedError,
    NotAuthorizedError,
    NotFoundError,
    NotPartitionedError,
    PreconditionFailedError,
    ServerSideError,
    TopicLookupError,
    TransportError,
    error_from_status,
)
from topiclookup.lookup.result import LookupData, ResolvedEndpoint, Result


class TestErrorFromStatus:
    """Test error_from_status."""

    @pytest.mark.parametrize("status_code,error_class", [
        (401, NotAuthorizedError),
        (403, NotAuthorizedError),
        (404, NotFoundError),
        (405, NotAllowedError),
        (409, ConflictError),
        (412, PreconditionFailedError),
        (500, ServerSideError),
        (502, ServerSideError),
        (418, TransportError),
    ])
    def test_mapping(self, status_code, error_class):
        """Test each status picks its class."""
        error = error_from_status(status_code, "reason")

        assert type(error) is error_class
        assert error.status_code == status_code
        assert str(error) == "reason"

    def test_cause_is_chained(self):
        """Test the cause is kept for tracebacks."""
        cause = OSError("reset by peer")
        error = error_from_status(500, "reason", cause=cause)

        assert error.cause is cause
        assert error.__cause__ is cause


class TestErrorKinds:
    """Test the error hierarchy."""

    def test_all_are_lookup_errors(self):
        """Test every kind shares the base class."""
        for error_class in (
            NotPartitionedError,
            TransportError,
            LookupTimeoutError,
            InterruptedLookupError,
        ):
            assert issubclass(error_class, TopicLookupError)

    def test_timeout_is_not_transport_error(self):
        """Test timeouts are their own kind."""
        assert not issubclass(LookupTimeoutError, TransportError)
        assert issubclass(LookupTimeoutError, TimeoutError)


class TestResult:
    """Test Result."""

    def test_ok(self):
        """Test successful results."""
        result = Result.ok(5)

        assert result.is_ok
        assert result.unwrap() == 5
        assert result.map(lambda value: value * 2).unwrap() == 10

    def test_failure(self):
        """Test failed results raise on unwrap and skip map."""
        error = NotFoundError("gone")
        result = Result.failure(error)

        assert not result.is_ok
        with pytest.raises(NotFoundError):
            result.unwrap()
        assert result.map(lambda value: value * 2).error is error

    def test_ok_with_none_value(self):
        """Test None is a valid success value."""
        assert Result.ok(None).is_ok


class TestLookupData:
    """Test LookupData."""

    def test_from_dict(self):
        """Test parsing a complete lookup response."""
        data = LookupData.from_dict({
            "brokerUrl": "pulsar://b1:6650",
            "brokerUrlTls": "pulsar+ssl://b1:6651",
            "httpUrl": "http://b1:8080",
            "httpUrlTls": "https://b1:8443",
            "nativeUrl": "pulsar://b1:6650",
        })

        assert data.broker_url == "pulsar://b1:6650"
        assert data.http_url_tls == "https://b1:8443"
        assert data.endpoint(use_tls=False) == ResolvedEndpoint("pulsar://b1:6650", False)
        assert data.endpoint(use_tls=True) == ResolvedEndpoint("pulsar+ssl://b1:6651", True)

    def test_missing_broker_url(self):
        """Test responses without brokerUrl are rejected."""
        with pytest.raises(TransportError):
            LookupData.from_dict({"brokerUrlTls": "pulsar+ssl://b1:6651"})

    def test_endpoint_str(self):
        """Test endpoints render as their URL."""
        assert str(ResolvedEndpoint("pulsar://b1:6650")) == "pulsar://b1:6650"
