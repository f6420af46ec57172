"""
Elasticsearch collaborators for the downscale operator.

This package implements the data cluster protocols defined in
downscale-protocols against the Elasticsearch HTTP API. It includes:

- ElasticsearchClient: thin httpx-based API client
- ShardLister / AllocationExclusion: data migration gating
- LegacyQuorum / VotingExclusions: quorum safety (zen1 / zen2)
- Pydantic response types for API parsing
"""

from downscale_elasticsearch.es_client import ElasticsearchClient
from downscale_elasticsearch.factory import (
    ElasticsearchCollaborators,
    create_elasticsearch_collaborators,
)
from downscale_elasticsearch.migration import (
    NONE_EXCLUDED,
    AllocationExclusion,
    ShardLister,
    node_is_migrating_data,
)
from downscale_elasticsearch.quorum import LegacyQuorum, VotingExclusions
from downscale_elasticsearch.types import CatShard, NodeInfo, NodesResponse
from downscale_elasticsearch.version import is_legacy_quorum_version, parse_version

__all__ = [
    # Client
    "ElasticsearchClient",
    # Collaborators
    "ShardLister",
    "AllocationExclusion",
    "LegacyQuorum",
    "VotingExclusions",
    "ElasticsearchCollaborators",
    "create_elasticsearch_collaborators",
    # Migration rule
    "NONE_EXCLUDED",
    "node_is_migrating_data",
    # API types
    "CatShard",
    "NodeInfo",
    "NodesResponse",
    # Versions
    "is_legacy_quorum_version",
    "parse_version",
]
