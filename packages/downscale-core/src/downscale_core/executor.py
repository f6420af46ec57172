"""
Downscale execution.

Applies the performable part of a planned downscale:
- a replica decrease updates the node group's replica count and records
  the expected generation, so the next pass does not act on stale reads
- a removal whose members have all been evacuated deletes the node group
  along with its headless service and configuration secret
- a downscale with no member ready to leave changes nothing and asks for
  a requeue

Quorum settings are always prepared before a master-eligible member is
removed.
"""

import logging

from downscale_protocols import (
    NodeGroup,
    NodeName,
    NotFoundError,
    config_secret_name,
    headless_service_name,
)

from downscale_core.context import DownscaleContext
from downscale_core.migration import calculate_performable_downscale
from downscale_core.quorum import update_quorum_for_downscale
from downscale_core.types import DownscaleOperation

logger = logging.getLogger(__name__)


async def attempt_downscale(
    ctx: DownscaleContext,
    downscale: DownscaleOperation,
    all_leaving_nodes: list[NodeName],
    actual_groups: list[NodeGroup],
) -> bool:
    """
    Perform as much of a downscale as is safe right now.

    Args:
        ctx: Downscale context.
        downscale: Planned operation for one group.
        all_leaving_nodes: Members leaving in this pass across all groups.
        actual_groups: Node groups currently present.

    Returns:
        True if the downscale is not complete and the pass should be
        requeued.

    Raises:
        Any error from the shard lister, quorum collaborators or resource
        store.
    """
    if not downscale.is_replica_decrease():
        # clamped to zero removals this pass, retry later if anything is left
        return downscale.final_replicas < downscale.initial_replicas

    # adjust the planned downscale to one we can safely perform
    performable = await calculate_performable_downscale(ctx, downscale, all_leaving_nodes)
    if not performable.is_replica_decrease():
        # waiting for data migration
        return True

    if performable.is_removal() and performable.target_replicas == 0:
        if performable.group.master:
            await update_quorum_for_downscale(
                ctx, actual_groups, performable.leaving_node_names()
            )
        await remove_node_group_resources(ctx, performable.group)
        return False

    await do_downscale(ctx, performable, actual_groups)
    return performable.target_replicas != downscale.final_replicas


async def remove_node_group_resources(ctx: DownscaleContext, group: NodeGroup) -> None:
    """
    Delete a node group with its headless service and configuration secret.

    Resources that are already gone are treated as deleted, so calling
    this again after a successful removal is a no-op.
    """
    try:
        await ctx.resources.delete_service(group.namespace, headless_service_name(group.name))
    except NotFoundError:
        pass

    try:
        await ctx.resources.delete_config(group.namespace, config_secret_name(group.name))
    except NotFoundError:
        pass

    logger.info(f"Deleting node group {group.id}")
    try:
        await ctx.resources.delete_node_group(group.id)
    except NotFoundError:
        logger.debug(f"Node group {group.id} already deleted")


async def do_downscale(
    ctx: DownscaleContext,
    downscale: DownscaleOperation,
    actual_groups: list[NodeGroup],
) -> None:
    """Update quorum settings if needed, then apply the new replica count."""
    logger.info(
        f"Scaling replicas down for node group {downscale.group.id} "
        f"from {downscale.initial_replicas} to {downscale.target_replicas}"
    )

    if downscale.group.master:
        await update_quorum_for_downscale(
            ctx, actual_groups, downscale.leaving_node_names()
        )

    updated = await ctx.resources.update_node_group(
        downscale.group.with_replicas(downscale.target_replicas)
    )

    # expect the updated group in the cache for the next pass
    ctx.expectations.expect_generation(updated.id, updated.generation)
