#!/usr/bin/env python3
"""
Command-line entry point for topic lookups.

Usage:
    # Broker serving a topic
    python -m topiclookup.main --service-url http://localhost:8080 lookup persistent://public/default/orders

    # Broker of every partition, grouped by broker
    python -m topiclookup.main partitioned-lookup orders --sort-by-broker

    # Bundle range owning a topic
    python -m topiclookup.main bundle-range orders
"""

import argparse
import json
import sys
from typing import List, Optional

import yaml

from topiclookup.errors import TopicLookupError
from topiclookup.lookup.client import LookupClient, LookupConfig
from topiclookup.utils.config import Config
from topiclookup.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog='topiclookup',
        description='Look up the brokers serving pub/sub topics',
    )

    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='YAML configuration file',
    )

    parser.add_argument(
        '--service-url',
        type=str,
        default=None,
        help='Lookup service URL (default: lookup.service_url from config)',
    )

    parser.add_argument(
        '--tls',
        action='store_true',
        default=None,
        help='Return TLS broker URLs',
    )

    parser.add_argument(
        '--timeout-ms',
        type=int,
        default=None,
        help='Timeout for each lookup in milliseconds (default: lookup.read_timeout_ms)',
    )

    parser.add_argument(
        '--log-level',
        type=str,
        default=None,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level (default: logging.level from config)',
    )

    parser.add_argument(
        '--log-format',
        type=str,
        default=None,
        choices=['json', 'console'],
        help='Logging format (default: logging.format from config)',
    )

    commands = parser.add_subparsers(dest='command', required=True)

    lookup = commands.add_parser('lookup', help='Look up the broker serving a topic')
    lookup.add_argument('topic', help='Topic name')

    partitioned = commands.add_parser(
        'partitioned-lookup',
        help='Look up the broker of every partition of a topic',
    )
    partitioned.add_argument('topic', help='Partitioned topic name')
    partitioned.add_argument(
        '--sort-by-broker',
        action='store_true',
        help='Group partitions by broker',
    )

    bundle = commands.add_parser('bundle-range', help='Get the bundle range owning a topic')
    bundle.add_argument('topic', help='Topic name')

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> Config:
    """Load configuration and apply command-line overrides."""
    config = Config(args.config)

    if args.service_url is not None:
        config.set('lookup.service_url', args.service_url)
    if args.tls is not None:
        config.set('lookup.use_tls', args.tls)
    if args.timeout_ms is not None:
        config.set('lookup.read_timeout_ms', args.timeout_ms)
    if args.log_level is not None:
        config.set('logging.level', args.log_level)
    if args.log_format is not None:
        config.set('logging.format', args.log_format)

    return config


def run(client: LookupClient, args: argparse.Namespace) -> str:
    """Execute the selected command and render its output."""
    if args.command == 'lookup':
        return client.lookup_topic(args.topic)

    if args.command == 'partitioned-lookup':
        if args.sort_by_broker:
            return json.dumps(
                client.lookup_partitioned_topic_sort_by_broker(args.topic),
                indent=2,
            )
        return json.dumps(client.lookup_partitioned_topic(args.topic), indent=2)

    return client.get_bundle_range(args.topic)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    try:
        config = build_config(args)
        lookup_config = LookupConfig.from_config(config)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 1

    configure_logging(
        log_level=config.get('logging.level', 'INFO'),
        log_format=config.get('logging.format', 'json'),
        log_output='stderr',
    )

    logger.debug("Running lookup command", command=args.command, topic=args.topic)

    try:
        with LookupClient(lookup_config) as client:
            output = run(client, args)
    except TopicLookupError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(output)
    return 0


if __name__ == '__main__':
    sys.exit(main())
