"""
Elasticsearch-specific Pydantic response types.

This module provides Pydantic models for parsing responses from:
- Cat shards API: shard copies and the node holding each of them
- Nodes info API: node names, versions and roles

These are API response types for external data validation. Internal
types (NodeGroup, etc.) are dataclasses in downscale_protocols.types.

Notes:
- _cat APIs return every value as a string, shard numbers included
- A relocating shard's node column reads "source -> ip id target"
- Unassigned shards have a null node
"""

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Cat Shards API Response Types
# =============================================================================
# GET /_cat/shards?format=json&h=index,shard,prirep,state,node
# Response structure: [{"index": "idx", "shard": "0", "prirep": "p", ...}]


SHARD_STATE_STARTED = "STARTED"


class CatShard(BaseModel):
    """
    Single shard copy from the cat shards API.

    Example row:
    {"index": "logs", "shard": "0", "prirep": "p", "state": "STARTED", "node": "es-data-1"}
    """

    model_config = ConfigDict(extra="ignore")

    index: str
    shard: str
    prirep: str = ""  # "p" (primary) or "r" (replica)
    state: str
    node: str | None = None

    @property
    def key(self) -> str:
        """Identity of the shard shared by all its copies."""
        return f"{self.index}/{self.shard}"

    @property
    def node_name(self) -> str:
        """Name of the node currently holding this copy ("" if unassigned)."""
        if not self.node:
            return ""
        # relocating copies read "source -> 10.0.0.1 nodeid target"
        return self.node.split(" ")[0]

    def is_started(self) -> bool:
        return self.state == SHARD_STATE_STARTED


# =============================================================================
# Nodes Info API Response Types
# =============================================================================
# GET /_nodes/_all/no-metrics?filter_path=nodes.*.name,nodes.*.version,nodes.*.roles


class NodeInfo(BaseModel):
    """Info about a single running node."""

    model_config = ConfigDict(extra="ignore")

    name: str
    version: str
    roles: list[str] = Field(default_factory=list)

    def is_master_eligible(self) -> bool:
        return "master" in self.roles


class NodesResponse(BaseModel):
    """
    Response from GET /_nodes.

    Example response:
    {
        "nodes": {
            "Hx3fKcLKTzSZ2lPh7HX7tQ": {"name": "es-master-0", "version": "7.4.0", "roles": ["master"]}
        }
    }
    """

    nodes: dict[str, NodeInfo] = Field(default_factory=dict)


class AcknowledgedResponse(BaseModel):
    """Response from settings updates."""

    model_config = ConfigDict(extra="allow")

    acknowledged: bool = True
