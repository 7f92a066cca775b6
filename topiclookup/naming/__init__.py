"""Topic naming."""

from topiclookup.naming.topic_name import (
    PARTITIONED_TOPIC_SUFFIX,
    TopicDomain,
    TopicName,
    partition_index_of,
)

__all__ = [
    "PARTITIONED_TOPIC_SUFFIX",
    "TopicDomain",
    "TopicName",
    "partition_index_of",
]
