"""
Elasticsearch HTTP API client for downscale coordination.

This module provides the ElasticsearchClient class for the handful of
cluster APIs the downscale engine relies on: shard allocation listing,
node info, cluster settings updates and voting configuration exclusions.

ElasticsearchClient receives an injected httpx.AsyncClient with base_url
set to the cluster's HTTP endpoint. All methods are async and fail loudly
on HTTP errors.
"""

from dataclasses import dataclass

import httpx

from downscale_elasticsearch.types import (
    AcknowledgedResponse,
    CatShard,
    NodeInfo,
    NodesResponse,
)

ALLOCATION_EXCLUDE_SETTING = "cluster.routing.allocation.exclude._name"
MINIMUM_MASTER_NODES_SETTING = "discovery.zen.minimum_master_nodes"


@dataclass
class ElasticsearchClient:
    """
    Elasticsearch API client with injected httpx client.

    Attributes:
        http: Pre-configured httpx.AsyncClient with base_url set to the
            cluster's HTTP endpoint (and auth, if any).

    Example:
        async with httpx.AsyncClient(base_url="http://es-http:9200") as http:
            client = ElasticsearchClient(http=http)
            shards = await client.get_shards()
    """

    http: httpx.AsyncClient

    async def get_shards(self) -> list[CatShard]:
        """
        List every shard copy in the cluster.

        Calls GET /_cat/shards in JSON format.

        Raises:
            httpx.HTTPStatusError: On HTTP errors (4xx, 5xx responses).
            pydantic.ValidationError: On malformed response data.
        """
        response = await self.http.get(
            "/_cat/shards",
            params={"format": "json", "h": "index,shard,prirep,state,node"},
        )
        response.raise_for_status()
        return [CatShard.model_validate(row) for row in response.json()]

    async def get_nodes(self) -> list[NodeInfo]:
        """
        List running nodes with their version and roles.

        Raises:
            httpx.HTTPStatusError: On HTTP errors (4xx, 5xx responses).
            pydantic.ValidationError: On malformed response data.
        """
        response = await self.http.get(
            "/_nodes/_all/no-metrics",
            params={"filter_path": "nodes.*.name,nodes.*.version,nodes.*.roles"},
        )
        response.raise_for_status()
        data = NodesResponse.model_validate(response.json())
        return list(data.nodes.values())

    async def exclude_from_shard_allocation(self, exclusions: str) -> None:
        """
        Set the transient allocation exclusion by node name.

        Args:
            exclusions: Comma-separated node names, or a value matching no
                node to clear the exclusion.
        """
        await self._update_settings(transient={ALLOCATION_EXCLUDE_SETTING: exclusions})

    async def set_minimum_master_nodes(self, n: int) -> None:
        """Set discovery.zen.minimum_master_nodes, persistent and transient."""
        value = {MINIMUM_MASTER_NODES_SETTING: n}
        await self._update_settings(persistent=value, transient=value)

    async def add_voting_config_exclusions(self, node_names: list[str]) -> None:
        """
        Exclude nodes from the voting configuration.

        Calls POST /_cluster/voting_config_exclusions?node_names=a,b

        Raises:
            httpx.HTTPStatusError: On HTTP errors (4xx, 5xx responses).
        """
        response = await self.http.post(
            "/_cluster/voting_config_exclusions",
            params={"node_names": ",".join(node_names)},
        )
        response.raise_for_status()

    async def _update_settings(
        self,
        persistent: dict | None = None,
        transient: dict | None = None,
    ) -> None:
        body: dict[str, dict] = {}
        if persistent:
            body["persistent"] = persistent
        if transient:
            body["transient"] = transient
        response = await self.http.put("/_cluster/settings", json=body)
        response.raise_for_status()
        AcknowledgedResponse.model_validate(response.json())
