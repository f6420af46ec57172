"""
Shard migration collaborators backed by the Elasticsearch API.

- ShardLister decides whether a node still hosts data that would be lost
  if it were removed now
- AllocationExclusion asks the cluster to move shards off leaving nodes

The core rule lives in node_is_migrating_data, which does no I/O so it
can be tested against plain shard lists.
"""

import logging
from dataclasses import dataclass

from downscale_protocols import NodeName

from downscale_elasticsearch.es_client import ElasticsearchClient
from downscale_elasticsearch.types import CatShard

logger = logging.getLogger(__name__)

# matches no node name, so the exclusion is effectively cleared
NONE_EXCLUDED = "none_excluded"


def node_is_migrating_data(
    node: NodeName, shards: list[CatShard], leaving_nodes: set[NodeName]
) -> bool:
    """
    Check whether a node holds a shard with no safe copy elsewhere.

    A copy is safe when it is STARTED on a node that is neither the node
    itself nor another leaving node. A shard moving between two leaving
    nodes therefore keeps both of them migrating.

    Args:
        node: Node considered for removal.
        shards: Every shard copy in the cluster.
        leaving_nodes: Every node leaving in this pass.

    Returns:
        True if at least one shard on the node has no safe copy.
    """
    copies: dict[str, list[CatShard]] = {}
    candidates: list[CatShard] = []
    for shard in shards:
        copies.setdefault(shard.key, []).append(shard)
        if shard.node_name == node:
            candidates.append(shard)

    for candidate in candidates:
        has_safe_copy = any(
            copy.is_started()
            and copy.node_name
            and copy.node_name != node
            and copy.node_name not in leaving_nodes
            for copy in copies[candidate.key]
        )
        if not has_safe_copy:
            return True
    return False


@dataclass
class ShardLister:
    """ShardListerProtocol implementation over the cat shards API."""

    client: ElasticsearchClient

    async def is_migrating_data(
        self, node: NodeName, leaving_nodes: list[NodeName]
    ) -> bool:
        shards = await self.client.get_shards()
        return node_is_migrating_data(node, shards, set(leaving_nodes))


@dataclass
class AllocationExclusion:
    """MigrationExclusionProtocol implementation over cluster settings."""

    client: ElasticsearchClient

    async def migrate_data(self, leaving_nodes: list[NodeName]) -> None:
        exclusions = ",".join(leaving_nodes) if leaving_nodes else NONE_EXCLUDED
        logger.debug(f"Setting shard allocation exclusion to {exclusions}")
        await self.client.exclude_from_shard_allocation(exclusions)
