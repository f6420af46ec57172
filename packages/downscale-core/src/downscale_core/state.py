"""
Pass-scoped downscale budget tracking.

DownscaleState tracks, across one reconciliation pass, how many member
removals are still permitted cluster-wide and whether a master-eligible
group already claimed this pass's single master removal.

The state is built fresh at the start of every pass and discarded after
it. It is never shared between passes or clusters.
"""

import logging
from dataclasses import dataclass, field

from downscale_protocols import NodeGroup, NodeName, ResourceClientProtocol

logger = logging.getLogger(__name__)


@dataclass
class DownscaleState:
    """
    Removal budget and master bookkeeping for one reconciliation pass.

    Attributes:
        running_masters: Master-eligible members currently running and ready.
        removals_allowed: Member removals still permitted in this pass.
            None means unbounded.
        master_removal_in_progress: A master-eligible group recorded a
            removal earlier in this pass.
        blocked: Groups skipped by a downscale invariant, mapped to the
            reason they were skipped.

    Example:
        state = DownscaleState(running_masters=3, removals_allowed=2)
        state.get_max_nodes_to_remove(5)  # 2
        state.record_removal(group, 2)
        state.get_max_nodes_to_remove(1)  # 0
    """

    running_masters: int = 0
    removals_allowed: int | None = None
    master_removal_in_progress: bool = False
    blocked: dict[str, str] = field(default_factory=dict)

    def get_max_nodes_to_remove(self, requested: int) -> int:
        """Clamp a requested removal count to the remaining budget."""
        if self.removals_allowed is None:
            return requested
        return max(0, min(requested, self.removals_allowed))

    def record_removal(self, group: NodeGroup, count: int) -> None:
        """Consume budget for members removed from the given group."""
        if count <= 0:
            return
        if group.master:
            self.master_removal_in_progress = True
        if self.removals_allowed is not None:
            self.removals_allowed -= count

    def record_blocked(self, group: NodeGroup, reason: str) -> None:
        """Remember that an invariant kept a group from being downscaled."""
        self.blocked[group.name] = reason


def calculate_removals_allowed(
    max_unavailable: int | None, total_nodes: int, ready_nodes: int
) -> int | None:
    """
    Compute how many members may be removed given the unavailability policy.

    Members that are already not ready count against the budget.

    Args:
        max_unavailable: Maximum members allowed to be unavailable at once,
            or None for no limit.
        total_nodes: Members across all actual groups.
        ready_nodes: Members currently running and ready.

    Returns:
        Remaining removal budget, never negative, or None if unbounded.
    """
    if max_unavailable is None:
        return None
    unavailable = max(0, total_nodes - ready_nodes)
    return max(0, max_unavailable - unavailable)


async def new_downscale_state(
    resources: ResourceClientProtocol,
    actual_groups: list[NodeGroup],
    max_unavailable: int | None,
) -> DownscaleState:
    """
    Build the downscale state for a new pass from observed members.

    Args:
        resources: Resource store reporting which members are ready.
        actual_groups: Node groups currently present in the store.
        max_unavailable: Unavailability policy (None for unbounded).

    Returns:
        A fresh DownscaleState.

    Raises:
        Any error from the resource store.
    """
    ready: set[NodeName] = await resources.get_ready_nodes(actual_groups)

    all_nodes = [name for group in actual_groups for name in group.node_names()]
    master_nodes = [
        name for group in actual_groups if group.master for name in group.node_names()
    ]
    running_masters = sum(1 for name in master_nodes if name in ready)
    ready_count = sum(1 for name in all_nodes if name in ready)

    state = DownscaleState(
        running_masters=running_masters,
        removals_allowed=calculate_removals_allowed(
            max_unavailable, len(all_nodes), ready_count
        ),
    )
    logger.debug(
        f"Downscale state: {running_masters} running masters, "
        f"{ready_count}/{len(all_nodes)} nodes ready, "
        f"removals allowed: {state.removals_allowed}"
    )
    return state
