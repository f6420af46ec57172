"""
Resource store protocol and error types.

The ResourceClientProtocol is the interface the orchestration engine needs
from the eventually-consistent API object store holding node groups and
their dependent resources (headless discovery service, configuration
secret). ExpectationsProtocol is the write side of the cache that
suppresses re-processing of the controller's own writes.
"""

from typing import Protocol, runtime_checkable

from downscale_protocols.types import ClusterId, NodeGroup, NodeGroupId, NodeName


class NotFoundError(Exception):
    """
    Raised by resource clients when the requested resource does not exist.

    Attributes:
        kind: Resource kind (e.g. "NodeGroup", "Service", "Secret")
        namespace: Namespace that was searched
        name: Name that was not found
    """

    def __init__(self, kind: str, namespace: str, name: str) -> None:
        self.kind = kind
        self.namespace = namespace
        self.name = name
        super().__init__(f"{kind} {namespace}/{name} not found")


@runtime_checkable
class ResourceClientProtocol(Protocol):
    """
    Protocol for the node group resource store.

    Implementations must raise NotFoundError when a get or delete targets
    a resource that does not exist. All other failures propagate as the
    implementation's own exception types.
    """

    async def list_node_groups(self, cluster: ClusterId) -> list[NodeGroup]:
        """List the actual node groups of a cluster."""
        ...

    async def get_node_group(self, group_id: NodeGroupId) -> NodeGroup:
        """Get a node group by identity."""
        ...

    async def update_node_group(self, group: NodeGroup) -> NodeGroup:
        """
        Update a node group.

        Returns:
            The stored group, carrying the generation assigned by the store
            after this update.
        """
        ...

    async def delete_node_group(self, group_id: NodeGroupId) -> None:
        """Delete a node group resource."""
        ...

    async def delete_service(self, namespace: str, name: str) -> None:
        """Delete a headless discovery service."""
        ...

    async def delete_config(self, namespace: str, name: str) -> None:
        """Delete a per-group configuration object."""
        ...

    async def get_ready_nodes(self, groups: list[NodeGroup]) -> set[NodeName]:
        """Names of the members of the given groups that are running and ready."""
        ...


@runtime_checkable
class ExpectationsProtocol(Protocol):
    """Protocol for the cache of generations this controller expects to observe."""

    def expect_generation(self, group_id: NodeGroupId, generation: int) -> None:
        """Record that the cache must reflect at least this generation."""
        ...
