"""
Factory function for creating Elasticsearch-backed collaborators.

This module provides a factory function for CLI integration, allowing
the downscale-core CLI to create every cluster collaborator from one
endpoint without direct imports of each class.
"""

from dataclasses import dataclass

import httpx

from downscale_elasticsearch.es_client import ElasticsearchClient
from downscale_elasticsearch.migration import AllocationExclusion, ShardLister
from downscale_elasticsearch.quorum import LegacyQuorum, VotingExclusions


@dataclass
class ElasticsearchCollaborators:
    """The four data cluster collaborators sharing one HTTP client."""

    http: httpx.AsyncClient
    shard_lister: ShardLister
    migration: AllocationExclusion
    legacy_quorum: LegacyQuorum
    voting: VotingExclusions

    async def aclose(self) -> None:
        await self.http.aclose()


def create_elasticsearch_collaborators(
    url: str,
    username: str | None = None,
    password: str | None = None,
    timeout: float = 10.0,
    http: httpx.AsyncClient | None = None,
) -> ElasticsearchCollaborators:
    """
    Create shard lister, allocation exclusion and quorum collaborators.

    Args:
        url: Cluster HTTP endpoint (e.g., "https://es-http:9200")
        username: Optional basic auth user
        password: Optional basic auth password
        timeout: Request timeout in seconds
        http: Optional pre-configured httpx client. If None, a new client
            is created from url, credentials and timeout.

    Returns:
        ElasticsearchCollaborators ready for a DownscaleContext.

    Example:
        es = create_elasticsearch_collaborators("http://es-http:9200")
        ctx = DownscaleContext(
            cluster=cluster,
            resources=resources,
            expectations=expectations,
            shard_lister=es.shard_lister,
            migration=es.migration,
            legacy_quorum=es.legacy_quorum,
            voting=es.voting,
        )
    """
    if http is None:
        auth = (username, password or "") if username else None
        http = httpx.AsyncClient(base_url=url, auth=auth, timeout=timeout)

    client = ElasticsearchClient(http=http)
    return ElasticsearchCollaborators(
        http=http,
        shard_lister=ShardLister(client=client),
        migration=AllocationExclusion(client=client),
        legacy_quorum=LegacyQuorum(client=client),
        voting=VotingExclusions(client=client),
    )
