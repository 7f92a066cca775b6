"""
Partitioned topic metadata.

The aggregator only needs the partition count of a topic. The provider is
an external collaborator; HttpPartitionMetadataProvider reads it from the
admin REST API through the same transport as the lookups.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict

from topiclookup.errors import TransportError
from topiclookup.naming.topic_name import TopicName
from topiclookup.transport.http import LookupTransport
from topiclookup.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class PartitionedTopicMetadata:
    """
    Partition metadata of a topic.

    Attributes:
        partitions: Number of partitions (0 for a non-partitioned topic)
        properties: Topic properties reported by the admin API
    """
    partitions: int = 0
    properties: Dict[str, str] = field(default_factory=dict)

    @staticmethod
    def from_dict(data: Any) -> "PartitionedTopicMetadata":
        """
        Build from a decoded admin API response.

        Raises:
            TransportError: If the document is not partition metadata
        """
        if not isinstance(data, dict):
            raise TransportError(f"Invalid partitioned topic metadata: {data!r}")
        try:
            partitions = int(data.get("partitions", 0))
        except (TypeError, ValueError) as e:
            raise TransportError(
                f"Invalid partition count in metadata: {data.get('partitions')!r}", cause=e
            ) from e
        return PartitionedTopicMetadata(
            partitions=partitions,
            properties=dict(data.get("properties") or {}),
        )


class PartitionMetadataProvider(ABC):
    """Source of partition counts."""

    @abstractmethod
    async def get_partitioned_topic_metadata(self, topic: str) -> PartitionedTopicMetadata:
        """
        Get partition metadata for a topic.

        Args:
            topic: Topic name

        Returns:
            Partition metadata
        """
        pass


class HttpPartitionMetadataProvider(PartitionMetadataProvider):
    """Reads partition metadata from the admin REST API."""

    def __init__(self, transport: LookupTransport):
        self._transport = transport

    @staticmethod
    def metadata_path(topic_name: TopicName) -> str:
        base = "/admin/v2" if topic_name.is_v2 else "/admin"
        return f"{base}/{topic_name.lookup_name}/partitions"

    async def get_partitioned_topic_metadata(self, topic: str) -> PartitionedTopicMetadata:
        path = self.metadata_path(TopicName.get(topic))
        metadata = PartitionedTopicMetadata.from_dict(await self._transport.get_json(path))

        logger.debug(
            "Fetched partitioned topic metadata",
            topic=topic,
            partitions=metadata.partitions,
        )

        return metadata
