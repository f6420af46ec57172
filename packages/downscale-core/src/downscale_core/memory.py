"""
In-memory collaborators for dry runs and tests.

InMemoryResourceStore implements ResourceClientProtocol over plain dicts,
assigning generations the way an API server does (bumped only when the
desired state actually changes). InMemoryCluster implements the data cluster
protocols and records every settings change it receives.

Both are used by the `downscale simulate` command to replay passes
without a live cluster.
"""

from dataclasses import dataclass, field, replace

from downscale_protocols import (
    ClusterId,
    NodeGroup,
    NodeGroupId,
    NodeName,
    NotFoundError,
    config_secret_name,
    headless_service_name,
)


class InMemoryResourceStore:
    """
    Resource store keeping node groups and dependent resources in memory.

    Example:
        store = InMemoryResourceStore()
        store.seed([NodeGroup(namespace="ns", name="data", replicas=3, data=True)])
        groups = await store.list_node_groups(ClusterId("ns", "es"))
    """

    def __init__(self) -> None:
        self.groups: dict[NodeGroupId, NodeGroup] = {}
        self.services: set[tuple[str, str]] = set()
        self.configs: set[tuple[str, str]] = set()
        self.not_ready: set[NodeName] = set()
        self.deleted: list[tuple[str, str, str]] = []

    def seed(self, groups: list[NodeGroup]) -> None:
        """Store groups together with their service and config secret."""
        for group in groups:
            self.groups[group.id] = replace(group, generation=max(group.generation, 1))
            self.services.add((group.namespace, headless_service_name(group.name)))
            self.configs.add((group.namespace, config_secret_name(group.name)))

    async def list_node_groups(self, cluster: ClusterId) -> list[NodeGroup]:
        return [
            replace(g) for g in self.groups.values() if g.namespace == cluster.namespace
        ]

    async def get_node_group(self, group_id: NodeGroupId) -> NodeGroup:
        group = self.groups.get(group_id)
        if group is None:
            raise NotFoundError("NodeGroup", group_id.namespace, group_id.name)
        return replace(group)

    async def update_node_group(self, group: NodeGroup) -> NodeGroup:
        current = self.groups.get(group.id)
        if current is None:
            raise NotFoundError("NodeGroup", group.namespace, group.name)
        generation = current.generation
        if group.compute_template_hash() != current.template_hash:
            generation += 1
        stored = replace(group, generation=generation, template_hash="")
        self.groups[group.id] = stored
        return replace(stored)

    async def delete_node_group(self, group_id: NodeGroupId) -> None:
        if self.groups.pop(group_id, None) is None:
            raise NotFoundError("NodeGroup", group_id.namespace, group_id.name)
        self.deleted.append(("NodeGroup", group_id.namespace, group_id.name))

    async def delete_service(self, namespace: str, name: str) -> None:
        if (namespace, name) not in self.services:
            raise NotFoundError("Service", namespace, name)
        self.services.discard((namespace, name))
        self.deleted.append(("Service", namespace, name))

    async def delete_config(self, namespace: str, name: str) -> None:
        if (namespace, name) not in self.configs:
            raise NotFoundError("Secret", namespace, name)
        self.configs.discard((namespace, name))
        self.deleted.append(("Secret", namespace, name))

    async def get_ready_nodes(self, groups: list[NodeGroup]) -> set[NodeName]:
        return {
            name
            for group in groups
            for name in group.node_names()
            if name not in self.not_ready
        }


@dataclass
class InMemoryCluster:
    """
    Data cluster collaborators backed by in-memory state.

    Attributes:
        migrating: Members reported as still hosting data.
        legacy: Report every member as running the legacy quorum scheme.
        allocation_exclusions: Last value pushed to the allocation exclusion.
        minimum_quorum_sizes: Every minimum quorum size set, in order.
        voting_exclusions: Every member added to the voting exclusions.
        calls: Ordered log of settings calls, for asserting ordering.
    """

    migrating: set[NodeName] = field(default_factory=set)
    legacy: bool = False
    allocation_exclusions: list[NodeName] = field(default_factory=list)
    minimum_quorum_sizes: list[int] = field(default_factory=list)
    voting_exclusions: list[NodeName] = field(default_factory=list)
    calls: list[str] = field(default_factory=list)

    async def is_migrating_data(
        self, node: NodeName, leaving_nodes: list[NodeName]
    ) -> bool:
        return node in self.migrating

    async def migrate_data(self, leaving_nodes: list[NodeName]) -> None:
        self.allocation_exclusions = list(leaving_nodes)
        self.calls.append("migrate_data")

    async def is_any_member_on_legacy_protocol(self, groups: list[NodeGroup]) -> bool:
        return self.legacy

    async def set_minimum_quorum_size(self, size: int) -> None:
        self.minimum_quorum_sizes.append(size)
        self.calls.append("set_minimum_quorum_size")

    async def add_to_voting_exclusions(self, nodes: list[NodeName]) -> None:
        self.voting_exclusions.extend(nodes)
        self.calls.append("add_to_voting_exclusions")
