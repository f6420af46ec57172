"""
Protocol definitions for the downscale operator.

This package provides the Protocol definitions of every collaborator the
downscale orchestration engine depends on, plus the shared node group
types. It has zero dependencies on other downscale-* packages.

Key protocols:
- ResourceClientProtocol: Node group resource store
- ExpectationsProtocol: Expected-generation cache
- ShardListerProtocol: Shard allocation lookups
- MigrationExclusionProtocol: Shard allocation exclusion
- LegacyQuorumProtocol: Minimum-master-count quorum scheme
- VotingExclusionProtocol: Voting-configuration exclusions
- TopologySourceProtocol: Desired node groups

Key types:
- NodeGroup: StatefulSet-like group of ordinal members
- NodeGroupId, ClusterId: Identities
- NodeName: Type alias for member names
- NotFoundError: Distinguishable not-found error kind
"""

from downscale_protocols.cluster import (
    LegacyQuorumProtocol,
    MigrationExclusionProtocol,
    ShardListerProtocol,
    VotingExclusionProtocol,
)
from downscale_protocols.store import (
    ExpectationsProtocol,
    NotFoundError,
    ResourceClientProtocol,
)
from downscale_protocols.topology import TopologySourceProtocol
from downscale_protocols.types import (
    ClusterId,
    NodeGroup,
    NodeGroupId,
    NodeName,
    config_secret_name,
    get_by_name,
    headless_service_name,
    node_name,
)

__all__ = [
    # Protocols
    "ResourceClientProtocol",
    "ExpectationsProtocol",
    "ShardListerProtocol",
    "MigrationExclusionProtocol",
    "LegacyQuorumProtocol",
    "VotingExclusionProtocol",
    "TopologySourceProtocol",
    # Data types
    "ClusterId",
    "NodeGroup",
    "NodeGroupId",
    "NodeName",
    "NotFoundError",
    # Naming helpers
    "config_secret_name",
    "get_by_name",
    "headless_service_name",
    "node_name",
]
