"""
Downscale orchestration engine.

This package implements safe removal of members from a search cluster's
node groups. It depends only on the protocols from downscale-protocols;
concrete Kubernetes and Elasticsearch collaborators live in their own
packages.

Key components:
- handle_downscale: one reconciliation pass
- calculate_downscales: pure planning under budget and invariants
- DownscaleContext: collaborators and policy for one cluster
- ReconcileLoop: daemon re-running passes until convergence
- Expectations: guard against acting on stale reads
"""

from downscale_core.context import DownscaleContext
from downscale_core.events import ClusterPhase, Event, EventType, ReconcileState
from downscale_core.executor import (
    attempt_downscale,
    do_downscale,
    remove_node_group_resources,
)
from downscale_core.expectations import Expectations
from downscale_core.handler import handle_downscale
from downscale_core.invariants import (
    AT_LEAST_ONE_RUNNING_MASTER,
    DEFAULT_INVARIANTS,
    ONE_MASTER_AT_A_TIME,
    DownscaleInvariant,
    check_downscale_invariants,
)
from downscale_core.loop import ReconcileLoop
from downscale_core.migration import calculate_performable_downscale, migrate_data
from downscale_core.planner import calculate_downscales, leaving_node_names
from downscale_core.quorum import (
    TWO_TO_ONE_MASTER_MESSAGE,
    maybe_update_legacy_quorum_for_downscale,
    update_quorum_for_downscale,
)
from downscale_core.results import ReconcileResults
from downscale_core.state import DownscaleState, new_downscale_state
from downscale_core.types import DownscaleOperation

__all__ = [
    # Entry points
    "handle_downscale",
    "ReconcileLoop",
    "DownscaleContext",
    # Planning
    "calculate_downscales",
    "leaving_node_names",
    "DownscaleOperation",
    "DownscaleState",
    "new_downscale_state",
    # Invariants
    "DownscaleInvariant",
    "DEFAULT_INVARIANTS",
    "ONE_MASTER_AT_A_TIME",
    "AT_LEAST_ONE_RUNNING_MASTER",
    "check_downscale_invariants",
    # Execution
    "attempt_downscale",
    "calculate_performable_downscale",
    "do_downscale",
    "migrate_data",
    "remove_node_group_resources",
    "maybe_update_legacy_quorum_for_downscale",
    "update_quorum_for_downscale",
    "TWO_TO_ONE_MASTER_MESSAGE",
    # Results and observability
    "ReconcileResults",
    "ReconcileState",
    "ClusterPhase",
    "Event",
    "EventType",
    "Expectations",
]
