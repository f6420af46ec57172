"""
Topology source protocol.

A TopologySource supplies the expected node groups computed from the cluster
resource definition. The orchestration engine only shrinks actual groups towards
this list; it never computes it.
"""

from typing import Protocol, runtime_checkable

from downscale_protocols.types import NodeGroup


@runtime_checkable
class TopologySourceProtocol(Protocol):
    """Protocol for the desired topology of a cluster."""

    async def list_expected_groups(self) -> list[NodeGroup]:
        """Return the node groups the cluster should converge to."""
        ...
