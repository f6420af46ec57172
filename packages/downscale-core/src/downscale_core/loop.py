"""
ReconcileLoop daemon for continuous downscale reconciliation.

This module implements the reconcile loop daemon that:
- Runs one downscale pass per cycle for a single cluster
- Skips a pass while the resource cache has not observed this
  controller's own writes yet
- Re-runs sooner when a pass requests a requeue
- Handles graceful shutdown on SIGINT/SIGTERM

Passes for the same cluster never overlap: the loop awaits each pass
before scheduling the next one.
"""

import asyncio
import functools
import logging
import signal
from dataclasses import replace
from datetime import datetime

from downscale_protocols import TopologySourceProtocol

from downscale_core.context import DownscaleContext
from downscale_core.events import ReconcileState
from downscale_core.expectations import Expectations
from downscale_core.handler import handle_downscale
from downscale_core.results import ReconcileResults

logger = logging.getLogger(__name__)


class ReconcileLoop:
    """
    Long-running daemon reconciling one cluster's node groups.

    Uses asyncio.Event for shutdown coordination.

    Example:
        ctx = DownscaleContext(cluster=..., resources=..., ...)
        loop = ReconcileLoop(
            ctx=ctx,
            topology=FileTopologySource(Path("topology.yaml")),
            expectations=expectations,
            interval_seconds=30.0,
        )
        await loop.run()  # Runs until SIGINT/SIGTERM
    """

    def __init__(
        self,
        ctx: DownscaleContext,
        topology: TopologySourceProtocol,
        expectations: Expectations,
        interval_seconds: float = 30.0,
    ) -> None:
        """
        Initialize reconcile loop.

        Args:
            ctx: Downscale context for the cluster. Its expectations must be
                the same object as `expectations`.
            topology: Source of the expected node groups
            expectations: Expected-generation cache read before each pass
            interval_seconds: Seconds between passes when no requeue is
                requested (default 30)
        """
        self.ctx = ctx
        self.topology = topology
        self.expectations = expectations
        self.interval = interval_seconds
        self._shutdown = asyncio.Event()

        # Stats for heartbeat
        self._pass_count = 0
        self._last_pass: datetime | None = None
        self.last_state: ReconcileState | None = None

    async def run(self) -> None:
        """
        Run the reconcile loop until shutdown signal.

        Registers SIGINT and SIGTERM handlers for graceful shutdown.
        """
        loop = asyncio.get_running_loop()

        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(
                sig,
                functools.partial(self._handle_signal, sig),
            )

        logger.info(f"Reconcile loop starting for cluster {self.ctx.cluster} (interval: {self.interval}s)")

        while not self._shutdown.is_set():
            results = await self.reconcile_once()
            delay = self._next_delay(results)

            # Wait for delay or shutdown signal
            try:
                await asyncio.wait_for(self._shutdown.wait(), timeout=delay)
            except asyncio.TimeoutError:
                pass  # Normal timeout, continue loop

        logger.info("Reconcile loop stopped")

    def stop(self) -> None:
        """Request shutdown after the current pass."""
        self._shutdown.set()

    def _handle_signal(self, sig: signal.Signals) -> None:
        """Handle shutdown signal by setting shutdown event."""
        logger.info(f"Received {sig.name}, shutting down...")
        self._shutdown.set()

    def _next_delay(self, results: ReconcileResults) -> float:
        if results.requeue and results.requeue_after is not None:
            return min(results.requeue_after, self.interval)
        return self.interval

    async def reconcile_once(self) -> ReconcileResults:
        """
        Run one reconciliation pass.

        Never raises: observation and pass errors are logged and reported
        in the returned results, and the next pass starts from fresh state.
        """
        self._last_pass = datetime.now()
        self._pass_count += 1
        pass_ctx = replace(self.ctx, reconcile_state=ReconcileState())
        self.last_state = pass_ctx.reconcile_state

        try:
            expected = await self.topology.list_expected_groups()
            actual = await self.ctx.resources.list_node_groups(self.ctx.cluster)
        except Exception as e:
            logger.error(f"Failed to observe cluster {self.ctx.cluster}: {e}")
            return ReconcileResults(error=e)

        if not self.expectations.generation_expected(*actual):
            logger.debug("Node group cache is not up to date yet, requeueing")
            return ReconcileResults().with_requeue(self.ctx.requeue_after)

        results = await handle_downscale(pass_ctx, expected, actual)
        if results.has_error():
            logger.error(f"Downscale pass failed for cluster {self.ctx.cluster}: {results.error}")
        self._log_heartbeat(results)
        return results

    def _log_heartbeat(self, results: ReconcileResults) -> None:
        status = "requeue requested" if results.requeue else "converged"
        if results.has_error():
            status = "failed"
        logger.info(
            f"Pass {self._pass_count} complete: {status}, "
            f"phase {self.last_state.phase.value if self.last_state else '-'}"
        )
