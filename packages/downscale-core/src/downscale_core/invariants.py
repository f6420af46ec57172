"""
Downscale invariant checks.

Invariants decide whether a node group may be downscaled at all in the
current pass. A failed invariant is not an error: the group is skipped
for this pass and reconsidered on the next one, once conditions change.

Each invariant is a function over (state, group) returning
(allowed, reason). They are evaluated in order and short-circuit on the
first failure. New policies are added by appending to the list passed to
the planner.
"""

from collections.abc import Callable, Sequence

from downscale_protocols import NodeGroup

from downscale_core.state import DownscaleState

DownscaleInvariant = Callable[[DownscaleState, NodeGroup], tuple[bool, str]]
"""Predicate deciding whether a group may be downscaled in this pass."""

ONE_MASTER_AT_A_TIME = "A master node is already in the process of being removed"
AT_LEAST_ONE_RUNNING_MASTER = "Cannot remove the last running master node"


def one_master_at_a_time(state: DownscaleState, group: NodeGroup) -> tuple[bool, str]:
    """Only one master-eligible member may leave per pass, cluster-wide."""
    if group.master and state.master_removal_in_progress:
        return False, ONE_MASTER_AT_A_TIME
    return True, ""


def at_least_one_running_master(
    state: DownscaleState, group: NodeGroup
) -> tuple[bool, str]:
    """Never remove the only running master-eligible member."""
    if group.master and state.running_masters <= 1:
        return False, AT_LEAST_ONE_RUNNING_MASTER
    return True, ""


DEFAULT_INVARIANTS: tuple[DownscaleInvariant, ...] = (
    one_master_at_a_time,
    at_least_one_running_master,
)


def check_downscale_invariants(
    state: DownscaleState,
    group: NodeGroup,
    invariants: Sequence[DownscaleInvariant] = DEFAULT_INVARIANTS,
) -> tuple[bool, str]:
    """
    Evaluate invariants in order, stopping at the first failure.

    Returns:
        (True, "") if every invariant allows the downscale, otherwise
        (False, reason) for the first failing one.
    """
    for invariant in invariants:
        allowed, reason = invariant(state, group)
        if not allowed:
            return False, reason
    return True, ""
