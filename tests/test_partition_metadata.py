"""
Tests for partitioned topic metadata.
"""

import pytest

from topiclookup.errors import NotFoundError, TransportError
from topiclookup.metadata import HttpPartitionMetadataProvider, PartitionedTopicMetadata
from topiclookup.naming.topic_name import TopicName
from topiclookup.transport.http import LookupTransport


class StubTransport(LookupTransport):
    """Returns one document for every path."""

    def __init__(self, document=None, error=None):
        self.document = document
        self.error = error
        self.paths = []

    async def get_json(self, path):
        self.paths.append(path)
        if self.error is not None:
            raise self.error
        return self.document

    async def get_text(self, path):
        raise NotImplementedError


class TestPartitionedTopicMetadata:
    """Test PartitionedTopicMetadata."""

    def test_from_dict(self):
        """Test parsing an admin API response."""
        metadata = PartitionedTopicMetadata.from_dict(
            {"partitions": 4, "properties": {"owner": "billing"}}
        )

        assert metadata.partitions == 4
        assert metadata.properties == {"owner": "billing"}

    def test_defaults(self):
        """Test missing fields mean a non-partitioned topic."""
        metadata = PartitionedTopicMetadata.from_dict({})

        assert metadata.partitions == 0
        assert metadata.properties == {}

    @pytest.mark.parametrize("document", [None, [], {"partitions": "many"}])
    def test_invalid_documents(self, document):
        """Test malformed responses are transport failures."""
        with pytest.raises(TransportError):
            PartitionedTopicMetadata.from_dict(document)


class TestHttpPartitionMetadataProvider:
    """Test HttpPartitionMetadataProvider."""

    def test_v2_path(self):
        """Test v2 names use the v2 admin API."""
        path = HttpPartitionMetadataProvider.metadata_path(TopicName.get("t"))

        assert path == "/admin/v2/persistent/public/default/t/partitions"

    def test_legacy_path(self):
        """Test legacy names use the v1 admin API."""
        path = HttpPartitionMetadataProvider.metadata_path(
            TopicName.get("persistent://acme/us-west/billing/t")
        )

        assert path == "/admin/persistent/acme/us-west/billing/t/partitions"

    @pytest.mark.asyncio
    async def test_fetch(self):
        """Test fetching metadata through the transport."""
        transport = StubTransport(document={"partitions": 3})
        provider = HttpPartitionMetadataProvider(transport)

        metadata = await provider.get_partitioned_topic_metadata("acme/billing/t")

        assert metadata.partitions == 3
        assert transport.paths == ["/admin/v2/persistent/acme/billing/t/partitions"]

    @pytest.mark.asyncio
    async def test_fetch_failure(self):
        """Test transport errors propagate."""
        provider = HttpPartitionMetadataProvider(
            StubTransport(error=NotFoundError("Topic not found", status_code=404))
        )

        with pytest.raises(NotFoundError):
            await provider.get_partitioned_topic_metadata("t")
