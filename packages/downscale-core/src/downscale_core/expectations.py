"""
Expected generations of node groups written by this controller.

The resource store is eventually consistent: right after the controller
updates a node group, the next read may still return the previous
version. Expectations remember the generation each update produced, so
that a pass observing an older generation can be skipped instead of
re-applying the same step from stale data.
"""

from downscale_protocols import NodeGroup, NodeGroupId


class Expectations:
    """
    Process-wide cache of expected node group generations.

    Example:
        expectations = Expectations()
        updated = await resources.update_node_group(group)
        expectations.expect_generation(updated.id, updated.generation)

        # next pass
        if not expectations.generation_expected(*actual_groups):
            ...  # cache is stale, requeue
    """

    def __init__(self) -> None:
        self._generations: dict[NodeGroupId, int] = {}

    def expect_generation(self, group_id: NodeGroupId, generation: int) -> None:
        """Record that reads must reflect at least this generation."""
        current = self._generations.get(group_id)
        if current is None or generation > current:
            self._generations[group_id] = generation

    def generation_expected(self, *groups: NodeGroup) -> bool:
        """
        Check that observed groups are at least as recent as expected.

        Satisfied expectations are cleared. Groups with no recorded
        expectation are always satisfied.

        Returns:
            True if every given group reflects its expected generation.
        """
        satisfied = True
        for group in groups:
            expected = self._generations.get(group.id)
            if expected is None:
                continue
            if group.generation >= expected:
                del self._generations[group.id]
            else:
                satisfied = False
        return satisfied

    def get_generations(self) -> dict[NodeGroupId, int]:
        """Copy of the pending expectations."""
        return dict(self._generations)

    def clear(self, group_id: NodeGroupId) -> None:
        """Forget the expectation for a group (e.g. after deleting it)."""
        self._generations.pop(group_id, None)
