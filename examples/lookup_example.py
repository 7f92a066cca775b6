#!/usr/bin/env python3
"""
Look up the brokers serving a partitioned topic.

Runs both call surfaces against a lookup service:
    python examples/lookup_example.py http://localhost:8080 persistent://public/default/orders
"""

import asyncio
import sys

from topiclookup import LookupClient, LookupConfig, TopicLookupError
from topiclookup.utils.logging import configure_logging


async def async_lookups(client: LookupClient, topic: str) -> None:
    """Resolve all partitions from an asyncio program."""
    by_broker = await client.lookup_partitioned_topic_sort_by_broker_async(topic)
    for broker_url, partitions in by_broker.items():
        print(f"{broker_url}: {len(partitions)} partition(s)")
        for partition in partitions:
            print(f"  {partition}")


def main():
    service_url = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:8080"
    topic = sys.argv[2] if len(sys.argv) > 2 else "persistent://public/default/orders"

    configure_logging(log_level="WARNING", log_format="console", log_output="stderr")

    config = LookupConfig(service_url=service_url, read_timeout_ms=5000)

    with LookupClient(config) as client:
        try:
            print("[1] Blocking lookup of partition 0")
            print(f"    {client.lookup_topic(f'{topic}-partition-0')}")

            print("[2] Bundle range of partition 0")
            print(f"    {client.get_bundle_range(f'{topic}-partition-0')}")

            print(f"[3] Async lookup of every partition of {topic}")
            asyncio.run(async_lookups(client, topic))

        except TopicLookupError as e:
            print(f"Lookup failed: {e}", file=sys.stderr)
            sys.exit(1)


if __name__ == '__main__':
    main()
