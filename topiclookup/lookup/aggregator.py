"""
Partitioned-topic aggregator.

Fans out one resolver lookup per partition, joins them all, then merges
the results in partition-index order. There is no partial-success mode:
one failed partition fails the whole aggregate.
"""

import asyncio
from typing import Dict, List, Optional

from topiclookup.errors import NotPartitionedError, TopicLookupError, TransportError
from topiclookup.lookup.resolver import TopicResolver
from topiclookup.lookup.result import ResolvedEndpoint, Result
from topiclookup.metadata import PartitionMetadataProvider
from topiclookup.naming.topic_name import PARTITIONED_TOPIC_SUFFIX
from topiclookup.utils.logging import get_logger

logger = get_logger(__name__)


def partition_topic_names(topic: str, partitions: int) -> List[str]:
    """
    Build partition names in index order.

    Args:
        topic: Partitioned topic name, as given by the caller
        partitions: Number of partitions

    Returns:
        ``<topic>-partition-<i>`` for i in [0, partitions)
    """
    return [f"{topic}{PARTITIONED_TOPIC_SUFFIX}{i}" for i in range(partitions)]


def sort_by_broker(partition_lookup: Dict[str, str]) -> Dict[str, List[str]]:
    """
    Group partitions by the broker that serves them.

    Brokers appear in the order their first partition is encountered and
    each list keeps the order of the input mapping.

    Args:
        partition_lookup: Partition name -> broker URL, in partition order

    Returns:
        Broker URL -> partition names
    """
    result: Dict[str, List[str]] = {}
    for partition, broker_url in partition_lookup.items():
        result.setdefault(broker_url, []).append(partition)
    return result


class PartitionedTopicAggregator:
    """
    Resolves every partition of a partitioned topic.

    Every partition lookup is started before any is awaited. By default
    there is no ceiling on how many are in flight; ``max_concurrent_lookups``
    caps it per aggregate call.
    """

    def __init__(
        self,
        resolver: TopicResolver,
        metadata_provider: PartitionMetadataProvider,
        max_concurrent_lookups: Optional[int] = None,
    ):
        """
        Initialize aggregator.

        Args:
            resolver: Single-topic resolver used for each partition
            metadata_provider: Source of partition counts
            max_concurrent_lookups: Max in-flight lookups per call (None = unbounded)
        """
        if max_concurrent_lookups is not None and max_concurrent_lookups <= 0:
            raise ValueError("max_concurrent_lookups must be positive")

        self._resolver = resolver
        self._metadata_provider = metadata_provider
        self.max_concurrent_lookups = max_concurrent_lookups

    async def _partition_count(self, topic: str) -> Result[int]:
        try:
            metadata = await self._metadata_provider.get_partitioned_topic_metadata(topic)
        except TopicLookupError as e:
            return Result.failure(e)
        except Exception as e:
            return Result.failure(
                TransportError(f"Failed to get partitioned metadata of {topic}: {e}", cause=e)
            )
        return Result.ok(metadata.partitions)

    async def resolve_partitioned(self, topic: str) -> Result[Dict[str, str]]:
        """
        Resolve the broker of every partition.

        Args:
            topic: Partitioned topic name

        Returns:
            Result holding partition name -> broker URL in partition order,
            or the first failure by partition index
        """
        count = await self._partition_count(topic)
        if not count.is_ok:
            logger.warning(
                "Partitioned metadata lookup failed",
                topic=topic,
                error=str(count.error),
            )
            return Result.failure(count.error)

        partitions = count.unwrap()
        if partitions <= 0:
            return Result.failure(
                NotPartitionedError(f"Topic {topic} is not a partitioned topic")
            )

        semaphore = (
            asyncio.Semaphore(self.max_concurrent_lookups)
            if self.max_concurrent_lookups is not None
            else None
        )

        async def resolve_one(partition: str) -> Result[ResolvedEndpoint]:
            if semaphore is None:
                return await self._resolver.resolve(partition)
            async with semaphore:
                return await self._resolver.resolve(partition)

        pending: Dict[str, "asyncio.Task[Result[ResolvedEndpoint]]"] = {
            partition: asyncio.ensure_future(resolve_one(partition))
            for partition in partition_topic_names(topic, partitions)
        }

        results = await asyncio.gather(*pending.values())

        partition_lookup: Dict[str, str] = {}
        for partition, result in zip(pending, results):
            if not result.is_ok:
                logger.warning(
                    "Partitioned lookup failed",
                    topic=topic,
                    partition=partition,
                    error=str(result.error),
                )
                return Result.failure(result.error)
            partition_lookup[partition] = result.unwrap().url

        logger.info(
            "Resolved partitioned topic",
            topic=topic,
            partitions=partitions,
            brokers=len(set(partition_lookup.values())),
        )

        return Result.ok(partition_lookup)

    async def resolve_partitioned_sort_by_broker(
        self,
        topic: str,
    ) -> Result[Dict[str, List[str]]]:
        """
        Resolve every partition and group them by broker.

        Args:
            topic: Partitioned topic name

        Returns:
            Result holding broker URL -> partition names
        """
        result = await self.resolve_partitioned(topic)
        return result.map(sort_by_broker)
