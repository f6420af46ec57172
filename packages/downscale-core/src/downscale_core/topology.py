"""Topology YAML loading for the downscale operator."""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator

from downscale_protocols import ClusterId, NodeGroup


class NodeGroupSpec(BaseModel):
    """One node group entry of a topology file."""
    name: str
    replicas: int = Field(ge=0)
    master: bool = False
    data: bool = False
    ingest: bool = False
    version: str = ""
    update_strategy: str = "OnDelete"

    def to_node_group(self, namespace: str) -> NodeGroup:
        return NodeGroup(
            namespace=namespace,
            name=self.name,
            replicas=self.replicas,
            master=self.master,
            data=self.data,
            ingest=self.ingest,
            version=self.version,
            update_strategy=self.update_strategy,
        )


class TopologyFile(BaseModel):
    """Topology YAML schema with validation."""
    namespace: str = "default"
    cluster: str
    expected: list[NodeGroupSpec]
    actual: list[NodeGroupSpec] = Field(default_factory=list)

    @field_validator("expected", "actual")
    @classmethod
    def validate_unique_names(cls, v: list[NodeGroupSpec]) -> list[NodeGroupSpec]:
        names = [g.name for g in v]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate node group names: {duplicates}")
        return v

    @property
    def cluster_id(self) -> ClusterId:
        return ClusterId(namespace=self.namespace, name=self.cluster)

    def expected_groups(self) -> list[NodeGroup]:
        return [g.to_node_group(self.namespace) for g in self.expected]

    def actual_groups(self) -> list[NodeGroup]:
        return [g.to_node_group(self.namespace) for g in self.actual]


def load_topology(path: Path) -> TopologyFile:
    """Load and validate a topology file from YAML."""
    with open(path) as f:
        data = yaml.safe_load(f)
    return TopologyFile.model_validate(data)


class FileTopologySource:
    """TopologySource re-reading the expected groups from a YAML file on every pass."""

    def __init__(self, path: Path) -> None:
        self.path = path

    async def list_expected_groups(self) -> list[NodeGroup]:
        return load_topology(self.path).expected_groups()
