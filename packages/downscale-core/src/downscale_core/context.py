"""
Pass-scoped downscale context.

DownscaleContext bundles the collaborators and policy values a downscale
pass needs. It is passed explicitly through every step, so passes for
different clusters never share mutable state.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field

from downscale_protocols import (
    ClusterId,
    ExpectationsProtocol,
    LegacyQuorumProtocol,
    MigrationExclusionProtocol,
    ResourceClientProtocol,
    ShardListerProtocol,
    VotingExclusionProtocol,
)

from downscale_core.events import ReconcileState
from downscale_core.invariants import DEFAULT_INVARIANTS, DownscaleInvariant
from downscale_core.results import DEFAULT_REQUEUE_AFTER_SECONDS


@dataclass
class DownscaleContext:
    """
    Collaborators and policy for one cluster's downscale passes.

    Attributes:
        cluster: Identity of the cluster being reconciled.
        resources: Node group resource store.
        expectations: Expected-generation cache written after updates.
        shard_lister: Answers whether a member still hosts unique data.
        migration: Shard allocation exclusion setting.
        legacy_quorum: Minimum-master-count quorum scheme.
        voting: Voting-configuration exclusion scheme.
        reconcile_state: Events and phase for the current pass.
        max_unavailable: Members allowed to be unavailable at once
            (None for unbounded).
        invariants: Ordered downscale invariants.
        requeue_after: Delay in seconds for requeued passes.
    """

    cluster: ClusterId
    resources: ResourceClientProtocol
    expectations: ExpectationsProtocol
    shard_lister: ShardListerProtocol
    migration: MigrationExclusionProtocol
    legacy_quorum: LegacyQuorumProtocol
    voting: VotingExclusionProtocol
    reconcile_state: ReconcileState = field(default_factory=ReconcileState)
    max_unavailable: int | None = 1
    invariants: Sequence[DownscaleInvariant] = DEFAULT_INVARIANTS
    requeue_after: float = DEFAULT_REQUEUE_AFTER_SECONDS
