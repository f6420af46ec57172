"""
Tests for quorum safety before master-eligible member removal.
"""

from unittest.mock import AsyncMock

import pytest

from downscale_core.events import EVENT_REASON_UNHEALTHY, EventType
from downscale_core.quorum import (
    TWO_TO_ONE_MASTER_MESSAGE,
    count_actual_masters,
    maybe_update_legacy_quorum_for_downscale,
    update_quorum_for_downscale,
)


class TestCountActualMasters:
    def test_sums_master_groups_only(self, make_group):
        groups = [
            make_group("m1", 2, master=True),
            make_group("m2", 1, master=True),
            make_group("data", 5),
        ]
        assert count_actual_masters(groups) == 3


class TestLegacyQuorum:
    @pytest.mark.asyncio
    async def test_two_to_one_on_legacy_sets_minimum_and_warns(self, ctx, cluster, make_group):
        cluster.legacy = True

        await maybe_update_legacy_quorum_for_downscale(ctx, [make_group("m", 2, master=True)])

        assert cluster.minimum_quorum_sizes == [1]
        [event] = ctx.reconcile_state.warnings()
        assert event.type == EventType.WARNING
        assert event.reason == EVENT_REASON_UNHEALTHY
        assert event.message == TWO_TO_ONE_MASTER_MESSAGE

    @pytest.mark.asyncio
    async def test_three_to_two_left_to_general_path(self, ctx, cluster, make_group):
        cluster.legacy = True

        await maybe_update_legacy_quorum_for_downscale(ctx, [make_group("m", 3, master=True)])

        assert cluster.minimum_quorum_sizes == []
        assert ctx.reconcile_state.events == []

    @pytest.mark.asyncio
    async def test_masters_split_across_groups_count_together(self, ctx, cluster, make_group):
        cluster.legacy = True
        groups = [make_group("m1", 1, master=True), make_group("m2", 1, master=True)]

        await maybe_update_legacy_quorum_for_downscale(ctx, groups)

        assert cluster.minimum_quorum_sizes == [1]

    @pytest.mark.asyncio
    async def test_modern_cluster_untouched(self, ctx, cluster, make_group):
        await maybe_update_legacy_quorum_for_downscale(ctx, [make_group("m", 2, master=True)])

        assert cluster.minimum_quorum_sizes == []
        assert ctx.reconcile_state.events == []

    @pytest.mark.asyncio
    async def test_setting_error_propagates(self, ctx, make_group):
        ctx.legacy_quorum = AsyncMock()
        ctx.legacy_quorum.is_any_member_on_legacy_protocol.return_value = True
        ctx.legacy_quorum.set_minimum_quorum_size.side_effect = RuntimeError("rejected")

        with pytest.raises(RuntimeError):
            await maybe_update_legacy_quorum_for_downscale(ctx, [make_group("m", 2, master=True)])


class TestUpdateQuorumForDownscale:
    @pytest.mark.asyncio
    async def test_legacy_step_runs_before_voting_exclusions(self, ctx, cluster, make_group):
        cluster.legacy = True

        await update_quorum_for_downscale(ctx, [make_group("m", 2, master=True)], ["m-1"])

        assert cluster.calls == ["set_minimum_quorum_size", "add_to_voting_exclusions"]
        assert cluster.voting_exclusions == ["m-1"]

    @pytest.mark.asyncio
    async def test_no_leaving_masters_is_noop(self, ctx, cluster, make_group):
        cluster.legacy = True

        await update_quorum_for_downscale(ctx, [make_group("m", 2, master=True)], [])

        assert cluster.calls == []

    @pytest.mark.asyncio
    async def test_voting_error_propagates(self, ctx, make_group):
        ctx.voting = AsyncMock()
        ctx.voting.add_to_voting_exclusions.side_effect = RuntimeError("timeout")

        with pytest.raises(RuntimeError):
            await update_quorum_for_downscale(ctx, [make_group("m", 3, master=True)], ["m-2"])
