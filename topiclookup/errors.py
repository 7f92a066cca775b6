"""
Error taxonomy for topic lookups.

Every failure surfaced by topiclookup is a TopicLookupError. Transport
failures keep the underlying exception both as ``cause`` and as
``__cause__`` so tracebacks show the original error.
"""

from typing import Optional


class TopicLookupError(Exception):
    """Base class for all lookup failures."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause


class NotPartitionedError(TopicLookupError):
    """Raised when a partitioned lookup targets a non-partitioned topic."""
    pass


class InvalidTopicNameError(TopicLookupError, ValueError):
    """Raised when a topic name cannot be parsed."""
    pass


class TransportError(TopicLookupError):
    """
    The lookup request failed.

    Covers connection failures, non-2xx HTTP responses and response bodies
    that cannot be decoded.

    Attributes:
        status_code: HTTP status code, if a response was received
    """

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, cause)
        self.status_code = status_code


class NotAuthorizedError(TransportError):
    """HTTP 401 or 403."""
    pass


class NotFoundError(TransportError):
    """HTTP 404."""
    pass


class NotAllowedError(TransportError):
    """HTTP 405."""
    pass


class ConflictError(TransportError):
    """HTTP 409."""
    pass


class PreconditionFailedError(TransportError):
    """HTTP 412."""
    pass


class ServerSideError(TransportError):
    """HTTP 5xx."""
    pass


class LookupTimeoutError(TopicLookupError, TimeoutError):
    """A blocking call did not complete before its deadline."""
    pass


class InterruptedLookupError(TopicLookupError):
    """A blocking wait was cancelled before the lookup completed."""
    pass


_STATUS_ERRORS = {
    401: NotAuthorizedError,
    403: NotAuthorizedError,
    404: NotFoundError,
    405: NotAllowedError,
    409: ConflictError,
    412: PreconditionFailedError,
}


def error_from_status(
    status_code: int,
    reason: str,
    cause: Optional[BaseException] = None,
) -> TransportError:
    """
    Build the TransportError subclass matching an HTTP status.

    Args:
        status_code: HTTP status code
        reason: Human readable failure reason
        cause: Underlying exception

    Returns:
        TransportError instance
    """
    if status_code >= 500:
        error_class = ServerSideError
    else:
        error_class = _STATUS_ERRORS.get(status_code, TransportError)
    return error_class(reason, cause=cause, status_code=status_code)
