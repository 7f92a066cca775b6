"""Topic lookup: resolver, partitioned aggregator and client facade."""

from topiclookup.lookup.aggregator import (
    PartitionedTopicAggregator,
    partition_topic_names,
    sort_by_broker,
)
from topiclookup.lookup.blocking import BlockingAdapter, CancellationToken
from topiclookup.lookup.client import LookupClient, LookupConfig
from topiclookup.lookup.resolver import TopicResolver
from topiclookup.lookup.result import LookupData, ResolvedEndpoint, Result

__all__ = [
    "PartitionedTopicAggregator",
    "partition_topic_names",
    "sort_by_broker",
    "BlockingAdapter",
    "CancellationToken",
    "LookupClient",
    "LookupConfig",
    "TopicResolver",
    "LookupData",
    "ResolvedEndpoint",
    "Result",
]
