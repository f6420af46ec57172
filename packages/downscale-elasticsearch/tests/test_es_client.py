"""
Tests for the Elasticsearch API client.

These tests verify the ElasticsearchClient correctly:
- Fetches and parses shard copies from the cat shards API
- Fetches and parses node info
- Sends the expected cluster settings bodies
- Raises on HTTP errors (fail loudly)
"""

import httpx
import pytest

from downscale_elasticsearch.es_client import (
    ALLOCATION_EXCLUDE_SETTING,
    MINIMUM_MASTER_NODES_SETTING,
    ElasticsearchClient,
)
from downscale_elasticsearch.types import CatShard, NodeInfo


@pytest.fixture
def shards_response():
    """Sample response for /_cat/shards?format=json."""
    return [
        {"index": "logs", "shard": "0", "prirep": "p", "state": "STARTED", "node": "data-0"},
        {"index": "logs", "shard": "0", "prirep": "r", "state": "STARTED", "node": "data-1"},
        {
            "index": "logs",
            "shard": "1",
            "prirep": "p",
            "state": "RELOCATING",
            "node": "data-2 -> 10.0.0.4 Hx3fKcLK data-0",
        },
        {"index": "logs", "shard": "1", "prirep": "r", "state": "UNASSIGNED", "node": None},
    ]


class TestGetShards:
    """Tests for ElasticsearchClient.get_shards() method."""

    @pytest.mark.asyncio
    async def test_get_shards_returns_list_of_shards(self, mock_transport, shards_response):
        """get_shards should return list[CatShard] with keys and node names."""
        transport = mock_transport({"/_cat/shards": {"json": shards_response}})
        async with httpx.AsyncClient(
            transport=transport, base_url="http://es:9200"
        ) as http:
            client = ElasticsearchClient(http=http)
            shards = await client.get_shards()

        assert len(shards) == 4
        assert all(isinstance(s, CatShard) for s in shards)
        assert shards[0].key == "logs/0"
        assert shards[0].node_name == "data-0"
        assert shards[0].is_started()

    @pytest.mark.asyncio
    async def test_relocating_shard_reports_source_node(self, mock_transport, shards_response):
        """A relocating copy belongs to its source node until the move completes."""
        transport = mock_transport({"/_cat/shards": {"json": shards_response}})
        async with httpx.AsyncClient(
            transport=transport, base_url="http://es:9200"
        ) as http:
            shards = await ElasticsearchClient(http=http).get_shards()

        assert shards[2].node_name == "data-2"
        assert not shards[2].is_started()

    @pytest.mark.asyncio
    async def test_unassigned_shard_has_empty_node_name(self, mock_transport, shards_response):
        transport = mock_transport({"/_cat/shards": {"json": shards_response}})
        async with httpx.AsyncClient(
            transport=transport, base_url="http://es:9200"
        ) as http:
            shards = await ElasticsearchClient(http=http).get_shards()

        assert shards[3].node_name == ""

    @pytest.mark.asyncio
    async def test_get_shards_requests_json_columns(self, mock_transport):
        transport = mock_transport({"/_cat/shards": {"json": []}})
        async with httpx.AsyncClient(
            transport=transport, base_url="http://es:9200"
        ) as http:
            await ElasticsearchClient(http=http).get_shards()

        params = transport.requests[0].url.params
        assert params["format"] == "json"
        assert params["h"] == "index,shard,prirep,state,node"

    @pytest.mark.asyncio
    async def test_get_shards_http_error_raises(self, mock_transport):
        """get_shards should raise httpx.HTTPStatusError on HTTP errors."""
        transport = mock_transport(
            {"/_cat/shards": {"status_code": 503, "json": {"error": "unavailable"}}}
        )
        async with httpx.AsyncClient(
            transport=transport, base_url="http://es:9200"
        ) as http:
            client = ElasticsearchClient(http=http)
            with pytest.raises(httpx.HTTPStatusError):
                await client.get_shards()


class TestGetNodes:
    """Tests for ElasticsearchClient.get_nodes() method."""

    @pytest.mark.asyncio
    async def test_get_nodes_returns_node_info(self, mock_transport, nodes_response_v7):
        transport = mock_transport({"/_nodes/_all/no-metrics": {"json": nodes_response_v7}})
        async with httpx.AsyncClient(
            transport=transport, base_url="http://es:9200"
        ) as http:
            nodes = await ElasticsearchClient(http=http).get_nodes()

        assert len(nodes) == 3
        assert all(isinstance(n, NodeInfo) for n in nodes)
        by_name = {n.name: n for n in nodes}
        assert by_name["master-0"].is_master_eligible()
        assert not by_name["data-0"].is_master_eligible()
        assert by_name["data-0"].version == "7.4.0"

    @pytest.mark.asyncio
    async def test_get_nodes_empty_response(self, mock_transport):
        """filter_path drops the nodes key entirely when nothing matches."""
        transport = mock_transport({"/_nodes/_all/no-metrics": {"json": {}}})
        async with httpx.AsyncClient(
            transport=transport, base_url="http://es:9200"
        ) as http:
            nodes = await ElasticsearchClient(http=http).get_nodes()

        assert nodes == []


class TestClusterSettings:
    """Tests for the settings-based operations."""

    @pytest.mark.asyncio
    async def test_exclude_from_shard_allocation_is_transient(self, mock_transport, acknowledged):
        transport = mock_transport({"/_cluster/settings": acknowledged})
        async with httpx.AsyncClient(
            transport=transport, base_url="http://es:9200"
        ) as http:
            await ElasticsearchClient(http=http).exclude_from_shard_allocation(
                "data-2,data-1"
            )

        assert transport.requests[0].method == "PUT"
        assert transport.bodies("/_cluster/settings") == [
            {"transient": {ALLOCATION_EXCLUDE_SETTING: "data-2,data-1"}}
        ]

    @pytest.mark.asyncio
    async def test_set_minimum_master_nodes_sets_both_scopes(self, mock_transport, acknowledged):
        transport = mock_transport({"/_cluster/settings": acknowledged})
        async with httpx.AsyncClient(
            transport=transport, base_url="http://es:9200"
        ) as http:
            await ElasticsearchClient(http=http).set_minimum_master_nodes(1)

        assert transport.bodies("/_cluster/settings") == [
            {
                "persistent": {MINIMUM_MASTER_NODES_SETTING: 1},
                "transient": {MINIMUM_MASTER_NODES_SETTING: 1},
            }
        ]

    @pytest.mark.asyncio
    async def test_settings_http_error_raises(self, mock_transport):
        transport = mock_transport(
            {"/_cluster/settings": {"status_code": 400, "json": {"error": "bad"}}}
        )
        async with httpx.AsyncClient(
            transport=transport, base_url="http://es:9200"
        ) as http:
            client = ElasticsearchClient(http=http)
            with pytest.raises(httpx.HTTPStatusError):
                await client.set_minimum_master_nodes(1)


class TestVotingConfigExclusions:
    """Tests for ElasticsearchClient.add_voting_config_exclusions()."""

    @pytest.mark.asyncio
    async def test_posts_comma_separated_node_names(self, mock_transport):
        transport = mock_transport({"/_cluster/voting_config_exclusions": {"json": {}}})
        async with httpx.AsyncClient(
            transport=transport, base_url="http://es:9200"
        ) as http:
            await ElasticsearchClient(http=http).add_voting_config_exclusions(
                ["master-2", "master-1"]
            )

        request = transport.requests[0]
        assert request.method == "POST"
        assert request.url.params["node_names"] == "master-2,master-1"

    @pytest.mark.asyncio
    async def test_http_error_raises(self, mock_transport):
        transport = mock_transport({})
        async with httpx.AsyncClient(
            transport=transport, base_url="http://es:9200"
        ) as http:
            client = ElasticsearchClient(http=http)
            with pytest.raises(httpx.HTTPStatusError):
                await client.add_voting_config_exclusions(["master-1"])
