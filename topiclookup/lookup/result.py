"""
Lookup data and results.

The asynchronous core returns Result values instead of raising, so the
blocking adapter and the async facade only have to look at one object to
decide between returning and raising.
"""

from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from topiclookup.errors import TopicLookupError, TransportError

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Outcome of one asynchronous lookup operation.

    Exactly one of ``value`` and ``error`` is meaningful: a result with an
    error is a failure, anything else is a success.
    """
    value: Optional[T] = None
    error: Optional[TopicLookupError] = None

    @classmethod
    def ok(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: TopicLookupError) -> "Result[T]":
        return cls(error=error)

    @property
    def is_ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """
        Get the value.

        Raises:
            TopicLookupError: The stored error, if this is a failure
        """
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    def map(self, fn: Callable[[T], U]) -> "Result[U]":
        """Transform the value of a success; failures pass through."""
        if self.error is not None:
            return Result.failure(self.error)
        return Result.ok(fn(self.value))  # type: ignore[arg-type]


@dataclass(frozen=True)
class ResolvedEndpoint:
    """
    Broker endpoint chosen for a topic.

    Attributes:
        url: Broker service URL
        is_tls: Whether the URL is the TLS endpoint
    """
    url: str
    is_tls: bool = False

    def __str__(self) -> str:
        return self.url


@dataclass(frozen=True)
class LookupData:
    """
    Body of a lookup response.

    Attributes:
        broker_url: Plain broker service URL
        broker_url_tls: TLS broker service URL
        http_url: Plain broker web service URL
        http_url_tls: TLS broker web service URL
        native_url: Native protocol URL
    """
    broker_url: str
    broker_url_tls: Optional[str] = None
    http_url: Optional[str] = None
    http_url_tls: Optional[str] = None
    native_url: Optional[str] = None

    @staticmethod
    def from_dict(data: Any) -> "LookupData":
        """
        Build from a decoded lookup response.

        Raises:
            TransportError: If the document has no broker URL
        """
        if not isinstance(data, dict) or not data.get("brokerUrl"):
            raise TransportError(f"Invalid lookup response: {data!r}")
        return LookupData(
            broker_url=data["brokerUrl"],
            broker_url_tls=data.get("brokerUrlTls") or None,
            http_url=data.get("httpUrl") or None,
            http_url_tls=data.get("httpUrlTls") or None,
            native_url=data.get("nativeUrl") or None,
        )

    def endpoint(self, use_tls: bool) -> ResolvedEndpoint:
        """
        Select the plain or TLS broker endpoint.

        Raises:
            TransportError: If TLS is requested but the broker reported no TLS URL
        """
        if not use_tls:
            return ResolvedEndpoint(url=self.broker_url, is_tls=False)
        if not self.broker_url_tls:
            raise TransportError(
                f"Lookup response for {self.broker_url} has no TLS broker URL"
            )
        return ResolvedEndpoint(url=self.broker_url_tls, is_tls=True)
