"""
Quorum collaborators backed by the Elasticsearch API.

- LegacyQuorum (zen1): minimum_master_nodes, used by versions before 7.0
- VotingExclusions (zen2): voting configuration exclusions, 7.0 onwards

During a rolling upgrade both generations can be present at once, so
legacy detection looks at the declared group versions and at the
versions of the members actually running.
"""

import logging
from dataclasses import dataclass

from downscale_protocols import NodeGroup, NodeName

from downscale_elasticsearch.es_client import ElasticsearchClient
from downscale_elasticsearch.version import is_legacy_quorum_version

logger = logging.getLogger(__name__)


@dataclass
class LegacyQuorum:
    """LegacyQuorumProtocol implementation (zen1 minimum_master_nodes)."""

    client: ElasticsearchClient

    async def is_any_member_on_legacy_protocol(self, groups: list[NodeGroup]) -> bool:
        if any(is_legacy_quorum_version(group.version) for group in groups):
            return True
        nodes = await self.client.get_nodes()
        return any(is_legacy_quorum_version(node.version) for node in nodes)

    async def set_minimum_quorum_size(self, size: int) -> None:
        await self.client.set_minimum_master_nodes(size)


@dataclass
class VotingExclusions:
    """
    VotingExclusionProtocol implementation (zen2 voting config exclusions).

    The exclusion API only exists once every running member speaks the
    modern protocol. Before that the call is a logged no-op, which lets
    the engine call it regardless of protocol generation.
    """

    client: ElasticsearchClient

    async def add_to_voting_exclusions(self, nodes: list[NodeName]) -> None:
        if not nodes:
            return
        running = await self.client.get_nodes()
        if any(is_legacy_quorum_version(node.version) for node in running):
            logger.debug(
                "Skipping voting config exclusions: "
                "at least one running node uses the legacy quorum protocol"
            )
            return
        await self.client.add_voting_config_exclusions(nodes)
