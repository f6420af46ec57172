"""
Quorum safety for master-eligible member removal.

Before a master-eligible member leaves, the quorum settings of the
cluster must account for its departure:

1. Legacy scheme (minimum master count): when going from 2 to 1 master,
   the minimum must be lowered to 1 before the member is removed,
   otherwise the remaining master can never form a quorum. This ordering
   can cause a split brain and is flagged with a warning event. For every
   other transition (e.g. 3 -> 2) the minimum is adjusted after removal by
   the general settings path.
2. Voting exclusions: leaving masters are always excluded from the voting
   configuration before removal.

Any failure aborts the downscale of the group for this pass.
"""

import logging

from downscale_protocols import NodeGroup, NodeName

from downscale_core.context import DownscaleContext
from downscale_core.events import EVENT_REASON_UNHEALTHY, EventType

logger = logging.getLogger(__name__)

TWO_TO_ONE_MASTER_MESSAGE = "Downscaling from 2 to 1 master nodes: unsafe operation"


def count_actual_masters(actual_groups: list[NodeGroup]) -> int:
    """Master-eligible members across all actual groups."""
    return sum(group.replicas for group in actual_groups if group.master)


async def maybe_update_legacy_quorum_for_downscale(
    ctx: DownscaleContext, actual_groups: list[NodeGroup]
) -> None:
    """Lower the legacy minimum master count to 1 on a 2 -> 1 master transition."""
    if not await ctx.legacy_quorum.is_any_member_on_legacy_protocol(actual_groups):
        return

    if count_actual_masters(actual_groups) != 2:
        # not in the 2 -> 1 situation
        return

    ctx.reconcile_state.add_event(
        EventType.WARNING, EVENT_REASON_UNHEALTHY, TWO_TO_ONE_MASTER_MESSAGE
    )
    logger.info(f"Setting minimum master nodes to 1 for cluster {ctx.cluster}")
    await ctx.legacy_quorum.set_minimum_quorum_size(1)


async def update_quorum_for_downscale(
    ctx: DownscaleContext,
    actual_groups: list[NodeGroup],
    leaving_masters: list[NodeName],
) -> None:
    """
    Prepare quorum settings for the removal of master-eligible members.

    Args:
        ctx: Downscale context (quorum collaborators, reconcile state).
        actual_groups: Node groups currently present.
        leaving_masters: Master-eligible members about to be removed.

    Raises:
        Any error from the quorum collaborators.
    """
    if not leaving_masters:
        return

    await maybe_update_legacy_quorum_for_downscale(ctx, actual_groups)

    logger.info(f"Adding nodes to voting config exclusions: {', '.join(leaving_masters)}")
    await ctx.voting.add_to_voting_exclusions(leaving_masters)
