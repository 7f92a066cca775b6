"""
Topic names.

Two naming schemes coexist:
- v2: ``<domain>://<tenant>/<namespace>/<topic>``
- legacy: ``<domain>://<tenant>/<cluster>/<namespace>/<topic>``

Short names are expanded: ``my-topic`` becomes
``persistent://public/default/my-topic`` and ``tenant/ns/my-topic`` becomes
``persistent://tenant/ns/my-topic``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional
from urllib.parse import quote_plus

from topiclookup.errors import InvalidTopicNameError

PARTITIONED_TOPIC_SUFFIX = "-partition-"

DEFAULT_TENANT = "public"
DEFAULT_NAMESPACE = "default"


class TopicDomain(Enum):
    """Topic persistence domain."""

    PERSISTENT = "persistent"
    NON_PERSISTENT = "non-persistent"


def partition_index_of(local_name: str) -> int:
    """
    Extract the partition index from a local topic name.

    Args:
        local_name: Local part of the topic name

    Returns:
        Partition index, or -1 if the name is not a partition
    """
    position = local_name.rfind(PARTITIONED_TOPIC_SUFFIX)
    if position < 0:
        return -1
    try:
        return int(local_name[position + len(PARTITIONED_TOPIC_SUFFIX):])
    except ValueError:
        return -1


@dataclass(frozen=True)
class TopicName:
    """
    Parsed, immutable topic name.

    Attributes:
        domain: Persistence domain
        tenant: Tenant (or property, for legacy names)
        cluster: Cluster segment, only present in legacy names
        namespace_portion: Namespace segment
        local_name: Topic name within the namespace
        partition_index: Partition number, -1 when not a partition
    """
    domain: TopicDomain
    tenant: str
    cluster: Optional[str]
    namespace_portion: str
    local_name: str
    partition_index: int = -1

    @classmethod
    def get(cls, topic: str) -> "TopicName":
        """
        Parse a topic name.

        Args:
            topic: Complete or short topic name

        Returns:
            TopicName

        Raises:
            InvalidTopicNameError: If the name is malformed
        """
        if not topic:
            raise InvalidTopicNameError("Topic name must not be empty")

        complete = topic
        if "://" not in topic:
            parts = topic.split("/")
            if len(parts) == 3:
                complete = f"{TopicDomain.PERSISTENT.value}://{topic}"
            elif len(parts) == 1:
                complete = (
                    f"{TopicDomain.PERSISTENT.value}://"
                    f"{DEFAULT_TENANT}/{DEFAULT_NAMESPACE}/{topic}"
                )
            else:
                raise InvalidTopicNameError(
                    f"Invalid short topic name '{topic}', it should be in the format "
                    "of <tenant>/<namespace>/<topic> or <topic>"
                )

        domain_value, _, rest = complete.partition("://")
        try:
            domain = TopicDomain(domain_value)
        except ValueError:
            raise InvalidTopicNameError(
                f"Invalid topic domain '{domain_value}' in topic name '{topic}'"
            ) from None

        parts = rest.split("/", 3)
        if len(parts) == 3:
            tenant, namespace_portion, local_name = parts
            cluster = None
        elif len(parts) == 4:
            tenant, cluster, namespace_portion, local_name = parts
            if not cluster:
                raise InvalidTopicNameError(f"Invalid topic name '{topic}': empty cluster")
        else:
            raise InvalidTopicNameError(f"Invalid topic name '{topic}'")

        if not tenant or not namespace_portion or not local_name:
            raise InvalidTopicNameError(f"Invalid topic name '{topic}'")

        return cls(
            domain=domain,
            tenant=tenant,
            cluster=cluster,
            namespace_portion=namespace_portion,
            local_name=local_name,
            partition_index=partition_index_of(local_name),
        )

    @property
    def is_v2(self) -> bool:
        """True for names without a cluster segment."""
        return self.cluster is None

    @property
    def namespace(self) -> str:
        if self.is_v2:
            return f"{self.tenant}/{self.namespace_portion}"
        return f"{self.tenant}/{self.cluster}/{self.namespace_portion}"

    @property
    def encoded_local_name(self) -> str:
        return quote_plus(self.local_name, safe="*")

    @property
    def lookup_name(self) -> str:
        """Path segment used by the lookup and admin REST endpoints."""
        return f"{self.domain.value}/{self.namespace}/{self.encoded_local_name}"

    @property
    def is_partition(self) -> bool:
        return self.partition_index >= 0

    def partition(self, index: int) -> "TopicName":
        """
        Get the name of one partition of this topic.

        Args:
            index: Partition number

        Returns:
            TopicName of the partition
        """
        if index < 0:
            raise InvalidTopicNameError(f"Invalid partition index {index}")
        return TopicName.get(f"{self}{PARTITIONED_TOPIC_SUFFIX}{index}")

    def __str__(self) -> str:
        return f"{self.domain.value}://{self.namespace}/{self.local_name}"
