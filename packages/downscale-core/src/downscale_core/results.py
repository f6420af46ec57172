"""
Reconciliation results.

ReconcileResults is the aggregated outcome of a reconciliation pass: an
optional terminal error and whether the pass should be re-run later.
"""

from dataclasses import dataclass

DEFAULT_REQUEUE_AFTER_SECONDS = 10.0
"""Delay before re-running a pass that did not fully converge."""


@dataclass
class ReconcileResults:
    """
    Outcome of a reconciliation pass.

    Attributes:
        error: The error that aborted the pass, if any.
        requeue: The pass did not fully converge and should be retried.
        requeue_after: Seconds to wait before retrying. When several
            requeues are requested, the shortest delay wins.

    Example:
        results = ReconcileResults()
        results.with_requeue(10.0)
        if results.has_error():
            ...
    """

    error: Exception | None = None
    requeue: bool = False
    requeue_after: float | None = None

    def with_error(self, error: Exception) -> "ReconcileResults":
        """Record the error aborting the pass. The first error is kept."""
        if self.error is None:
            self.error = error
        return self

    def with_requeue(
        self, after: float = DEFAULT_REQUEUE_AFTER_SECONDS
    ) -> "ReconcileResults":
        """Request a bounded-delay retry of the whole pass."""
        self.requeue = True
        if self.requeue_after is None or after < self.requeue_after:
            self.requeue_after = after
        return self

    def has_error(self) -> bool:
        return self.error is not None

    def is_empty(self) -> bool:
        """No error and no requeue: the pass converged."""
        return self.error is None and not self.requeue
