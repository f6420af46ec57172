"""
Factory for creating live collaborators.

Uses lazy imports so plan and simulate work without the Kubernetes and
Elasticsearch packages being importable.
"""

from dataclasses import dataclass
from typing import Any

from downscale_protocols import ClusterId

from downscale_core.config import Settings
from downscale_core.context import DownscaleContext
from downscale_core.expectations import Expectations


@dataclass
class LiveCollaborators:
    """A live DownscaleContext plus the clients that must be closed afterwards."""

    ctx: DownscaleContext
    expectations: Expectations
    closers: list[Any]

    async def aclose(self) -> None:
        for closer in self.closers:
            await closer.aclose()


async def create_live_context(settings: Settings) -> LiveCollaborators:
    """
    Create a DownscaleContext backed by Kubernetes and Elasticsearch.

    Args:
        settings: Operator settings (endpoints, cluster identity, policy)

    Returns:
        LiveCollaborators. Call aclose() when done.

    Example:
        live = await create_live_context(Settings())
        try:
            await handle_downscale(live.ctx, expected, actual)
        finally:
            await live.aclose()
    """
    # Lazy imports to avoid loading adapter packages unless needed
    from downscale_elasticsearch.factory import create_elasticsearch_collaborators
    from downscale_kubernetes.factory import create_kubernetes_resource_client

    resources = await create_kubernetes_resource_client(settings.cluster_name)
    es = create_elasticsearch_collaborators(
        settings.elasticsearch_url,
        username=settings.elasticsearch_username,
        password=settings.elasticsearch_password,
        timeout=settings.request_timeout_seconds,
    )
    expectations = Expectations()
    ctx = DownscaleContext(
        cluster=ClusterId(namespace=settings.namespace, name=settings.cluster_name),
        resources=resources,
        expectations=expectations,
        shard_lister=es.shard_lister,
        migration=es.migration,
        legacy_quorum=es.legacy_quorum,
        voting=es.voting,
        max_unavailable=settings.max_unavailable,
        requeue_after=settings.requeue_after_seconds,
    )
    return LiveCollaborators(ctx=ctx, expectations=expectations, closers=[resources, es])
