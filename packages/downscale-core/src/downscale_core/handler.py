"""
Downscale orchestration entry point.

handle_downscale runs one reconciliation pass that moves actual node
groups one safe step closer to the expected ones:

1. build the pass budget from observed members
2. plan the downscale operations and the members leaving in this pass
3. exclude the leaving members from shard allocation (or clear it)
4. attempt every operation in turn: migration gate, quorum safety,
   then the replica update or group removal
5. stop at the first error; request a requeue if anything is left

The pass is sequential. Budget and quorum changes are cluster-wide, so
two groups must never be processed concurrently.
"""

import logging

from downscale_protocols import NodeGroup

from downscale_core.context import DownscaleContext
from downscale_core.executor import attempt_downscale
from downscale_core.migration import migrate_data
from downscale_core.planner import calculate_downscales, leaving_node_names
from downscale_core.results import ReconcileResults
from downscale_core.state import new_downscale_state

logger = logging.getLogger(__name__)


async def handle_downscale(
    ctx: DownscaleContext,
    expected_groups: list[NodeGroup],
    actual_groups: list[NodeGroup],
) -> ReconcileResults:
    """
    Attempt to downscale actual node groups towards expected ones.

    Args:
        ctx: Downscale context for the cluster.
        expected_groups: Node groups the cluster should converge to.
        actual_groups: Node groups currently present.

    Returns:
        ReconcileResults with the error that aborted the pass, if any,
        and whether the pass should be requeued. Collaborator errors are
        returned, never raised.
    """
    results = ReconcileResults()

    # make sure we only downscale nodes we're allowed to
    try:
        state = await new_downscale_state(ctx.resources, actual_groups, ctx.max_unavailable)
    except Exception as e:
        return results.with_error(e)

    try:
        downscales = calculate_downscales(
            state, expected_groups, actual_groups, ctx.invariants
        )
    except Exception as e:
        logger.debug(f"Downscale planning failed for cluster {ctx.cluster}: {e}")
        return results.with_error(e)
    leaving = leaving_node_names(downscales)

    if state.blocked:
        # invariants may allow these groups on a later pass
        results.with_requeue(ctx.requeue_after)

    # an empty list clears any existing exclusion
    try:
        await migrate_data(ctx, leaving)
    except Exception as e:
        return results.with_error(e)

    for downscale in downscales:
        try:
            requeue = await attempt_downscale(ctx, downscale, leaving, actual_groups)
        except Exception as e:
            logger.debug(f"Downscale of node group {downscale.group.id} failed: {e}")
            return results.with_error(e)
        if requeue:
            results.with_requeue(ctx.requeue_after)

    return results
