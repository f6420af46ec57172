"""
Data migration gating.

Before a member can be removed, every shard it holds must have a safe
copy elsewhere. This module:
- pushes the leaving members to the cluster's shard allocation exclusion,
  so the cluster starts moving data away from them
- computes the largest downscale that is safe right now, walking leaving
  members highest ordinal first and stopping at the first one still
  hosting data
"""

import logging

from downscale_protocols import NodeName

from downscale_core.context import DownscaleContext
from downscale_core.types import DownscaleOperation

logger = logging.getLogger(__name__)


async def migrate_data(ctx: DownscaleContext, leaving_nodes: list[NodeName]) -> None:
    """
    Exclude leaving members from shard allocation.

    An empty list clears any exclusion left over from a previous pass.
    """
    if leaving_nodes:
        logger.debug(f"Migrating data away from nodes: {', '.join(leaving_nodes)}")
    await ctx.migration.migrate_data(leaving_nodes)


async def calculate_performable_downscale(
    ctx: DownscaleContext,
    downscale: DownscaleOperation,
    all_leaving_nodes: list[NodeName],
) -> DownscaleOperation:
    """
    Reduce a downscale to the members whose data migration is over.

    Starts from "no member can leave" and lowers the target by one for
    each leaving member (highest ordinal first) that no longer hosts
    data. Stops at the first member still migrating: members leave
    strictly in ordinal order, so no member behind it can leave either.

    Args:
        ctx: Downscale context (shard lister, reconcile state).
        downscale: The planned operation for one group.
        all_leaving_nodes: Members leaving in this pass across all groups.

    Returns:
        A copy of the operation with target_replicas between the planned
        target and initial_replicas.

    Raises:
        Any error from the shard lister. No partial result is returned
        in that case.
    """
    performable = downscale.with_target(downscale.initial_replicas)
    for node in downscale.leaving_node_names():
        migrating = await ctx.shard_lister.is_migrating_data(node, all_leaving_nodes)
        if migrating:
            logger.debug(
                f"Data migration not over yet for node {node} "
                f"of node group {downscale.group.id}, skipping node deletion"
            )
            ctx.reconcile_state.update_migrating()
            return performable
        logger.info(
            f"Data migration completed successfully for node {node}, "
            "starting node deletion"
        )
        performable.target_replicas -= 1
    return performable
