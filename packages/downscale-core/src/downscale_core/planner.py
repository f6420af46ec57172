"""
Downscale planning.

The planner compares expected and actual node groups and produces the
downscale operations for one pass. It performs no I/O: everything it
needs is in the in-memory snapshots and the pass-scoped DownscaleState.

Per-group rules:
- groups missing from the expected list are removed (expected replicas 0)
- master-eligible groups lose at most one member per pass
- removals are clamped to the remaining budget of the pass
- a group failing a downscale invariant is skipped for this pass
"""

import logging
from collections.abc import Sequence

from downscale_protocols import NodeGroup, NodeName, get_by_name

from downscale_core.invariants import (
    DEFAULT_INVARIANTS,
    DownscaleInvariant,
    check_downscale_invariants,
)
from downscale_core.state import DownscaleState
from downscale_core.types import DownscaleOperation

logger = logging.getLogger(__name__)


def calculate_downscales(
    state: DownscaleState,
    expected_groups: list[NodeGroup],
    actual_groups: list[NodeGroup],
    invariants: Sequence[DownscaleInvariant] = DEFAULT_INVARIANTS,
) -> list[DownscaleOperation]:
    """
    Compute the downscale operations to attempt in this pass.

    Group removals (groups absent from expected_groups) are included as
    operations with final_replicas == 0.

    Args:
        state: Budget tracker for this pass; mutated as removals are planned.
        expected_groups: Node groups the cluster should converge to.
        actual_groups: Node groups currently present.
        invariants: Ordered downscale invariants.

    Returns:
        One operation per group needing a downscale and allowed by the
        invariants. An operation may have target == initial when the
        budget is exhausted.
    """
    downscales: list[DownscaleOperation] = []
    for actual in actual_groups:
        actual_replicas = actual.replicas
        expected = get_by_name(expected_groups, actual.name)
        expected_replicas = expected.replicas if expected is not None else 0

        if expected_replicas >= actual_replicas:
            # nothing to remove, upscales are handled elsewhere
            continue

        to_delete = actual_replicas - expected_replicas
        if actual.master and to_delete > 0:
            # only one master removal per pass, even for a whole-group removal
            to_delete = 1
        to_delete = state.get_max_nodes_to_remove(to_delete)

        allowed, reason = check_downscale_invariants(state, actual, invariants)
        if not allowed:
            logger.debug(f"Cannot downscale node group {actual.id}: {reason}")
            state.record_blocked(actual, reason)
            continue

        downscales.append(
            DownscaleOperation(
                group=actual,
                initial_replicas=actual_replicas,
                target_replicas=actual_replicas - to_delete,
                final_replicas=expected_replicas,
            )
        )
        state.record_removal(actual, to_delete)

    return downscales


def leaving_node_names(downscales: list[DownscaleOperation]) -> list[NodeName]:
    """Union of members leaving in this pass across all operations."""
    leaving: list[NodeName] = []
    for downscale in downscales:
        leaving.extend(downscale.leaving_node_names())
    return leaving
