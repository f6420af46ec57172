"""Downscale CLI commands.

This module provides CLI commands for the downscale engine:
- plan: Show the downscale operations for a topology file
- simulate: Replay passes against in-memory collaborators
- run: Start the reconcile loop against a live cluster

Patterns:
- asyncio.run() to execute async passes in sync CLI commands
- Rich Table for formatted output, JSON for automation
"""

import asyncio
import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Optional

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from downscale_core.cli.factory import create_live_context
from downscale_core.config import Settings
from downscale_core.context import DownscaleContext
from downscale_core.events import ReconcileState
from downscale_core.expectations import Expectations
from downscale_core.handler import handle_downscale
from downscale_core.loop import ReconcileLoop
from downscale_core.memory import InMemoryCluster, InMemoryResourceStore
from downscale_core.planner import calculate_downscales
from downscale_core.state import DownscaleState, calculate_removals_allowed
from downscale_core.topology import FileTopologySource, TopologyFile, load_topology

downscale_app = typer.Typer(
    name="downscale",
    help="Safe node group downscaling for search clusters",
    no_args_is_help=True,
)


def _load(path: Path) -> TopologyFile:
    try:
        return load_topology(path)
    except (OSError, yaml.YAMLError, ValidationError) as e:
        print(f"Error: cannot load topology {path}: {e}")
        raise typer.Exit(1)


def _budget(max_unavailable: Optional[int], unbounded: bool) -> Optional[int]:
    """Resolve the unavailability budget. None means unbounded."""
    if unbounded:
        return None
    if max_unavailable is None:
        return Settings().max_unavailable
    return max_unavailable


@downscale_app.command("plan")
def plan(
    topology: Path = typer.Argument(..., help="Topology YAML with expected and actual groups"),
    max_unavailable: Optional[int] = typer.Option(
        None,
        "--max-unavailable",
        "-u",
        help="Members allowed to be unavailable at once (default: settings)",
    ),
    unbounded: bool = typer.Option(
        False, "--unbounded", help="Ignore the unavailability budget"
    ),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """
    Show the downscale operations one pass would plan.

    Every actual member is assumed running and ready.
    """
    topo = _load(topology)
    max_unavailable = _budget(max_unavailable, unbounded)

    actual = topo.actual_groups()
    total = sum(g.replicas for g in actual)
    state = DownscaleState(
        running_masters=sum(g.replicas for g in actual if g.master),
        removals_allowed=calculate_removals_allowed(max_unavailable, total, total),
    )
    downscales = calculate_downscales(state, topo.expected_groups(), actual)

    if json_output:
        data = {
            "operations": [
                {
                    "group": d.group.name,
                    "initial_replicas": d.initial_replicas,
                    "target_replicas": d.target_replicas,
                    "final_replicas": d.final_replicas,
                    "leaving": d.leaving_node_names(),
                }
                for d in downscales
            ],
            "blocked": state.blocked,
        }
        print(json.dumps(data, indent=2))
        return

    console = Console()
    table = Table(title=f"Downscale plan for {topo.cluster_id}")
    table.add_column("Group", style="cyan")
    table.add_column("Initial", justify="right")
    table.add_column("Target", justify="right")
    table.add_column("Final", justify="right")
    table.add_column("Leaving")

    for d in downscales:
        table.add_row(
            d.group.name,
            str(d.initial_replicas),
            str(d.target_replicas),
            str(d.final_replicas),
            ", ".join(d.leaving_node_names()) or "-",
        )
    console.print(table)

    for name, reason in state.blocked.items():
        console.print(f"[yellow]Blocked[/yellow] {name}: {reason}")


@downscale_app.command("simulate")
def simulate(
    topology: Path = typer.Argument(..., help="Topology YAML with expected and actual groups"),
    passes: int = typer.Option(10, "--passes", "-n", help="Maximum passes to replay"),
    migrating: str = typer.Option(
        "", "--migrating", "-m", help="Comma-separated members still hosting data"
    ),
    legacy: bool = typer.Option(
        False, "--legacy", help="Treat members as using the legacy quorum scheme"
    ),
    max_unavailable: Optional[int] = typer.Option(
        None,
        "--max-unavailable",
        "-u",
        help="Members allowed to be unavailable at once (default: settings)",
    ),
    unbounded: bool = typer.Option(
        False, "--unbounded", help="Ignore the unavailability budget"
    ),
) -> None:
    """
    Replay downscale passes against in-memory collaborators.

    Stops when a pass converges, fails, or the pass limit is reached.
    Members listed with --migrating never finish migrating.
    """
    topo = _load(topology)
    max_unavailable = _budget(max_unavailable, unbounded)

    async def _simulate() -> None:
        store = InMemoryResourceStore()
        store.seed(topo.actual_groups())
        cluster = InMemoryCluster(
            migrating={n.strip() for n in migrating.split(",") if n.strip()},
            legacy=legacy,
        )
        expectations = Expectations()
        ctx = DownscaleContext(
            cluster=topo.cluster_id,
            resources=store,
            expectations=expectations,
            shard_lister=cluster,
            migration=cluster,
            legacy_quorum=cluster,
            voting=cluster,
            max_unavailable=max_unavailable,
        )
        expected = topo.expected_groups()
        console = Console()

        for n in range(1, passes + 1):
            pass_ctx = replace(ctx, reconcile_state=ReconcileState())
            actual = await store.list_node_groups(topo.cluster_id)
            results = await handle_downscale(pass_ctx, expected, actual)

            table = Table(title=f"Pass {n} ({pass_ctx.reconcile_state.phase.value})")
            table.add_column("Group", style="cyan")
            table.add_column("Replicas", justify="right")
            table.add_column("Generation", justify="right")
            for group in await store.list_node_groups(topo.cluster_id):
                table.add_row(group.name, str(group.replicas), str(group.generation))
            console.print(table)

            for event in pass_ctx.reconcile_state.events:
                console.print(f"[red]{event.type.value}[/red] {event.reason}: {event.message}")
            if cluster.allocation_exclusions:
                console.print(f"Excluded from allocation: {', '.join(cluster.allocation_exclusions)}")

            if results.has_error():
                console.print(f"[red]Pass failed:[/red] {results.error}")
                raise typer.Exit(1)
            if not results.requeue:
                console.print("[green]Converged[/green]")
                return

        console.print(f"[yellow]Not converged after {passes} passes[/yellow]")

    asyncio.run(_simulate())


@downscale_app.command("run")
def run(
    topology: Path = typer.Argument(..., help="Topology YAML with the expected groups"),
    interval: Optional[float] = typer.Option(
        None, "--interval", "-i", help="Seconds between passes (default: settings)"
    ),
    once: bool = typer.Option(False, "--once", help="Run a single pass and exit"),
) -> None:
    """
    Run the reconcile loop against a live cluster.

    Reads node groups from Kubernetes and coordinates with Elasticsearch
    through the DOWNSCALE_* environment settings. Runs until interrupted
    with Ctrl+C.
    """
    settings = Settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    interval_seconds = interval if interval is not None else settings.interval_seconds

    print(f"Starting downscale reconcile loop for {settings.namespace}/{settings.cluster_name}")
    print(f"  Elasticsearch: {settings.elasticsearch_url}")
    print(f"  Topology: {topology}")
    print(f"  Interval: {interval_seconds}s")
    print()

    async def _run() -> None:
        live = await create_live_context(settings)
        try:
            loop = ReconcileLoop(
                ctx=live.ctx,
                topology=FileTopologySource(topology),
                expectations=live.expectations,
                interval_seconds=interval_seconds,
            )
            if once:
                results = await loop.reconcile_once()
                if results.has_error():
                    print(f"Error: {results.error}")
                    raise typer.Exit(1)
                return
            await loop.run()
        finally:
            await live.aclose()

    asyncio.run(_run())
