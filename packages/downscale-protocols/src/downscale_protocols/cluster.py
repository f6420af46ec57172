"""
Protocols for the data cluster's own APIs.

The orchestration engine never talks to the search cluster directly. It
goes through these collaborators:

- ShardListerProtocol: answers whether a member still hosts data that is
  not safely copied elsewhere
- MigrationExclusionProtocol: asks the cluster to move shards off leaving
  members
- LegacyQuorumProtocol: minimum-master-count quorum scheme
- VotingExclusionProtocol: voting-configuration exclusion quorum scheme
"""

from typing import Protocol, runtime_checkable

from downscale_protocols.types import NodeGroup, NodeName


@runtime_checkable
class ShardListerProtocol(Protocol):
    """Protocol for shard allocation lookups."""

    async def is_migrating_data(
        self, node: NodeName, leaving_nodes: list[NodeName]
    ) -> bool:
        """
        Check whether a node still hosts data not fully relocated elsewhere.

        Args:
            node: The member being considered for removal.
            leaving_nodes: Every member leaving the cluster in this pass,
                across all node groups. A copy held by one of them does not
                count as a safe copy.

        Returns:
            True if removing the node now could lose data.
        """
        ...


@runtime_checkable
class MigrationExclusionProtocol(Protocol):
    """Protocol for the cluster-wide shard allocation exclusion setting."""

    async def migrate_data(self, leaving_nodes: list[NodeName]) -> None:
        """
        Exclude the given nodes from shard allocation.

        An empty list clears any existing exclusion.
        """
        ...


@runtime_checkable
class LegacyQuorumProtocol(Protocol):
    """Protocol for the legacy minimum-master-count quorum scheme."""

    async def is_any_member_on_legacy_protocol(self, groups: list[NodeGroup]) -> bool:
        """True if at least one group or running member uses the legacy scheme."""
        ...

    async def set_minimum_quorum_size(self, size: int) -> None:
        """Set the minimum number of master-eligible members forming a quorum."""
        ...


@runtime_checkable
class VotingExclusionProtocol(Protocol):
    """Protocol for the voting-configuration exclusion scheme."""

    async def add_to_voting_exclusions(self, nodes: list[NodeName]) -> None:
        """Stop counting the given members in the voting configuration."""
        ...
