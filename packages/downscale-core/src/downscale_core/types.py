"""
Downscale operation types.

This module defines the unit of work the planner produces and the
executor applies:
- DownscaleOperation: one node group's replica change for this pass
- leaving_node_names: the members removed by a replica change

Per project patterns:
- Dataclasses for internal types
- Leaving members are always listed highest ordinal first, since members
  are removed strictly in that order and the member set never has gaps
"""

from dataclasses import dataclass, replace

from downscale_protocols import NodeGroup, NodeName, node_name


def leaving_node_names(group_name: str, target: int, initial: int) -> list[NodeName]:
    """
    Names of the members between two replica counts, highest ordinal first.

    Args:
        group_name: Name of the node group.
        target: Replica count after the change (exclusive lower bound).
        initial: Replica count before the change (inclusive upper bound
            is initial - 1).

    Returns:
        Member names for ordinals initial-1 down to target. Empty when
        target >= initial.

    Example:
        leaving_node_names("data", 2, 5) == ["data-4", "data-3", "data-2"]
    """
    return [node_name(group_name, ordinal) for ordinal in range(initial - 1, target - 1, -1)]


@dataclass
class DownscaleOperation:
    """
    A replica decrease or removal of one node group.

    Invariant: final_replicas <= target_replicas <= initial_replicas.

    Attributes:
        group: The actual node group being downscaled.
        initial_replicas: Current replica count.
        target_replicas: Replica count this pass attempts to reach.
        final_replicas: Fully desired replica count (0 means removal).
    """

    group: NodeGroup
    initial_replicas: int
    target_replicas: int
    final_replicas: int

    def is_removal(self) -> bool:
        """The group should end up with no replica at all."""
        return self.final_replicas == 0 and self.initial_replicas > 0

    def is_replica_decrease(self) -> bool:
        """This pass removes at least one member."""
        return self.target_replicas < self.initial_replicas

    def leaving_node_names(self) -> list[NodeName]:
        """Members removed by this operation, highest ordinal first."""
        return leaving_node_names(self.group.name, self.target_replicas, self.initial_replicas)

    def with_target(self, target_replicas: int) -> "DownscaleOperation":
        """Copy of this operation with another target replica count."""
        return replace(self, target_replicas=target_replicas)
