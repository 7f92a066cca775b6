"""
Single-topic resolver.

Issues exactly one lookup request per call and turns the response into a
Result. Nothing is cached and nothing is retried: two calls for the same
topic are two requests.
"""

from topiclookup.errors import TopicLookupError, TransportError
from topiclookup.lookup.result import LookupData, ResolvedEndpoint, Result
from topiclookup.naming.topic_name import TopicName
from topiclookup.transport.http import LookupTransport
from topiclookup.utils.logging import get_logger

logger = get_logger(__name__)

LOOKUP_BASE_PATH = "/lookup/v2"
V2_PREFIX = "topic"
LEGACY_PREFIX = "destination"
BUNDLE_SUFFIX = "bundle"


class TopicResolver:
    """
    Resolves a topic to the broker that serves it.

    The TLS preference is fixed at construction and applies to every
    lookup made through this resolver.
    """

    def __init__(self, transport: LookupTransport, use_tls: bool = False):
        """
        Initialize resolver.

        Args:
            transport: REST transport to the lookup service
            use_tls: Return the TLS endpoint instead of the plain one
        """
        self._transport = transport
        self.use_tls = use_tls

    @staticmethod
    def lookup_path(topic_name: TopicName) -> str:
        """
        Build the lookup path for a topic.

        v2 names are looked up under ``topic``, legacy names under
        ``destination``.
        """
        prefix = V2_PREFIX if topic_name.is_v2 else LEGACY_PREFIX
        return f"{LOOKUP_BASE_PATH}/{prefix}/{topic_name.lookup_name}"

    async def resolve(self, topic: str) -> Result[ResolvedEndpoint]:
        """
        Look up the broker serving a topic.

        Args:
            topic: Topic name

        Returns:
            Result holding the selected endpoint, or the failure
        """
        try:
            path = self.lookup_path(TopicName.get(topic))
            logger.debug("Looking up topic", topic=topic, path=path)

            data = LookupData.from_dict(await self._transport.get_json(path))
            endpoint = data.endpoint(self.use_tls)
        except TopicLookupError as e:
            logger.warning("Topic lookup failed", topic=topic, error=str(e))
            return Result.failure(e)
        except Exception as e:
            logger.warning("Topic lookup failed", topic=topic, error=str(e))
            return Result.failure(TransportError(f"Lookup of {topic} failed: {e}", cause=e))

        logger.debug("Resolved topic", topic=topic, endpoint=endpoint.url)
        return Result.ok(endpoint)

    async def resolve_bundle_range(self, topic: str) -> Result[str]:
        """
        Look up the bundle range that owns a topic.

        Args:
            topic: Topic name

        Returns:
            Result holding the raw bundle range string, or the failure
        """
        try:
            path = f"{self.lookup_path(TopicName.get(topic))}/{BUNDLE_SUFFIX}"
            logger.debug("Looking up bundle range", topic=topic, path=path)

            bundle_range = await self._transport.get_text(path)
        except TopicLookupError as e:
            logger.warning("Bundle range lookup failed", topic=topic, error=str(e))
            return Result.failure(e)
        except Exception as e:
            logger.warning("Bundle range lookup failed", topic=topic, error=str(e))
            return Result.failure(
                TransportError(f"Bundle range lookup of {topic} failed: {e}", cause=e)
            )

        return Result.ok(bundle_range)
