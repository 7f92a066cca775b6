"""
topiclookup - broker lookup for partitioned pub/sub topics.

Resolves which broker serves a topic through the lookup REST service:
- Single-topic lookups and bundle-range lookups
- Concurrent lookup of every partition of a partitioned topic
- Async and timeout-bounded blocking call surfaces
"""

__version__ = "0.1.0"

from topiclookup.errors import (
    InterruptedLookupError,
    LookupTimeoutError,
    NotPartitionedError,
    TopicLookupError,
    TransportError,
)
from topiclookup.lookup import CancellationToken, LookupClient, LookupConfig

__all__ = [
    "CancellationToken",
    "LookupClient",
    "LookupConfig",
    "InterruptedLookupError",
    "LookupTimeoutError",
    "NotPartitionedError",
    "TopicLookupError",
    "TransportError",
]
