"""
Lookup client.

Exposes every lookup operation twice: as a coroutine that can be awaited
from any event loop, and as a blocking call bounded by a timeout. Both
run the lookup on the event loop thread owned by the transport layer.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Coroutine, Dict, List, Optional, TypeVar

from topiclookup.errors import TopicLookupError
from topiclookup.lookup.aggregator import PartitionedTopicAggregator
from topiclookup.lookup.blocking import BlockingAdapter, CancellationToken
from topiclookup.lookup.resolver import TopicResolver
from topiclookup.lookup.result import Result
from topiclookup.metadata import HttpPartitionMetadataProvider, PartitionMetadataProvider
from topiclookup.transport.http import HttpTransport, LookupTransport
from topiclookup.transport.loop import EventLoopThread
from topiclookup.utils.config import Config, parse_bool
from topiclookup.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass
class LookupConfig:
    """
    Configuration for the lookup client.

    Attributes:
        service_url: Base URL of the lookup REST service
        use_tls: Return TLS broker endpoints instead of plain ones
        read_timeout_ms: HTTP read timeout and default blocking deadline
        max_concurrent_lookups: Cap on in-flight partition lookups (None = unbounded)
    """
    service_url: str = "http://localhost:8080"
    use_tls: bool = False
    read_timeout_ms: int = 60000
    max_concurrent_lookups: Optional[int] = None

    @staticmethod
    def from_config(config: Config) -> "LookupConfig":
        """Build from the application configuration."""
        max_lookups = config.get("lookup.max_concurrent_lookups")
        return LookupConfig(
            service_url=config.get("lookup.service_url", "http://localhost:8080"),
            use_tls=parse_bool(config.get("lookup.use_tls", False)),
            read_timeout_ms=int(config.get("lookup.read_timeout_ms", 60000)),
            max_concurrent_lookups=int(max_lookups) if max_lookups is not None else None,
        )


class LookupClient:
    """
    Topic lookup client.

    Operations:
    - lookup_topic: broker URL serving a topic
    - lookup_partitioned_topic: partition name -> broker URL
    - lookup_partitioned_topic_sort_by_broker: broker URL -> partition names
    - get_bundle_range: bundle range owning a topic

    Each has an ``*_async`` coroutine counterpart.
    """

    def __init__(
        self,
        config: Optional[LookupConfig] = None,
        transport: Optional[LookupTransport] = None,
        metadata_provider: Optional[PartitionMetadataProvider] = None,
        io_thread: Optional[EventLoopThread] = None,
    ):
        """
        Initialize lookup client.

        Args:
            config: Client configuration (defaults if None)
            transport: REST transport (HttpTransport on config.service_url if None)
            metadata_provider: Partition metadata source (admin REST API if None)
            io_thread: Event loop thread to run lookups on (owned thread if None)
        """
        self.config = config or LookupConfig()
        self._transport = transport or HttpTransport(
            self.config.service_url,
            read_timeout_ms=self.config.read_timeout_ms,
        )
        self._owns_io_thread = io_thread is None
        self._io = io_thread or EventLoopThread()

        self._resolver = TopicResolver(self._transport, use_tls=self.config.use_tls)
        self._aggregator = PartitionedTopicAggregator(
            self._resolver,
            metadata_provider or HttpPartitionMetadataProvider(self._transport),
            max_concurrent_lookups=self.config.max_concurrent_lookups,
        )
        self._blocking = BlockingAdapter(self._io, self.config.read_timeout_ms)
        self._closed = False

        logger.info(
            "LookupClient initialized",
            service_url=self.config.service_url,
            use_tls=self.config.use_tls,
            read_timeout_ms=self.config.read_timeout_ms,
            max_concurrent_lookups=self.config.max_concurrent_lookups,
        )

    async def _dispatch(self, coro: Coroutine[Any, Any, Result[T]]) -> T:
        """Run a coroutine on the io loop and await it from the caller's loop."""
        if self._closed:
            coro.close()
            raise TopicLookupError("LookupClient is closed")
        result = await asyncio.wrap_future(self._io.submit(coro))
        return result.unwrap()

    async def _lookup_topic(self, topic: str) -> Result[str]:
        result = await self._resolver.resolve(topic)
        return result.map(lambda endpoint: endpoint.url)

    # Async surface

    async def lookup_topic_async(self, topic: str) -> str:
        """
        Look up the broker serving a topic.

        Args:
            topic: Topic name

        Returns:
            Broker URL (TLS or plain, per configuration)
        """
        return await self._dispatch(self._lookup_topic(topic))

    async def lookup_partitioned_topic_async(self, topic: str) -> Dict[str, str]:
        """
        Look up the broker of every partition of a topic.

        Args:
            topic: Partitioned topic name

        Returns:
            Partition name -> broker URL, in partition order
        """
        return await self._dispatch(self._aggregator.resolve_partitioned(topic))

    async def lookup_partitioned_topic_sort_by_broker_async(
        self,
        topic: str,
    ) -> Dict[str, List[str]]:
        """
        Look up every partition of a topic, grouped by broker.

        Args:
            topic: Partitioned topic name

        Returns:
            Broker URL -> partition names
        """
        return await self._dispatch(
            self._aggregator.resolve_partitioned_sort_by_broker(topic)
        )

    async def get_bundle_range_async(self, topic: str) -> str:
        """
        Get the bundle range owning a topic.

        Args:
            topic: Topic name

        Returns:
            Bundle range, as returned by the service
        """
        return await self._dispatch(self._resolver.resolve_bundle_range(topic))

    # Blocking surface

    def _call(self, operation, **kwargs):
        if self._closed:
            raise TopicLookupError("LookupClient is closed")
        return self._blocking.call(operation, **kwargs)

    def lookup_topic(
        self,
        topic: str,
        timeout_ms: Optional[int] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> str:
        """Blocking form of lookup_topic_async."""
        return self._call(
            lambda: self._lookup_topic(topic),
            timeout_ms=timeout_ms,
            cancel_token=cancel_token,
            name="lookup_topic",
        )

    def lookup_partitioned_topic(
        self,
        topic: str,
        timeout_ms: Optional[int] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Dict[str, str]:
        """Blocking form of lookup_partitioned_topic_async."""
        return self._call(
            lambda: self._aggregator.resolve_partitioned(topic),
            timeout_ms=timeout_ms,
            cancel_token=cancel_token,
            name="lookup_partitioned_topic",
        )

    def lookup_partitioned_topic_sort_by_broker(
        self,
        topic: str,
        timeout_ms: Optional[int] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Dict[str, List[str]]:
        """Blocking form of lookup_partitioned_topic_sort_by_broker_async."""
        return self._call(
            lambda: self._aggregator.resolve_partitioned_sort_by_broker(topic),
            timeout_ms=timeout_ms,
            cancel_token=cancel_token,
            name="lookup_partitioned_topic_sort_by_broker",
        )

    def get_bundle_range(
        self,
        topic: str,
        timeout_ms: Optional[int] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> str:
        """Blocking form of get_bundle_range_async."""
        return self._call(
            lambda: self._resolver.resolve_bundle_range(topic),
            timeout_ms=timeout_ms,
            cancel_token=cancel_token,
            name="get_bundle_range",
        )

    def close(self) -> None:
        """Close the transport and stop the owned event loop thread."""
        if self._closed:
            return
        self._closed = True

        try:
            self._io.submit(self._transport.close()).result()
        finally:
            if self._owns_io_thread:
                self._io.stop()

        logger.info("LookupClient closed", service_url=self.config.service_url)

    def __enter__(self) -> "LookupClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
