"""
Generic types for the downscale protocol system.

This module defines the data structures shared by the orchestration engine
and every collaborator implementation: node groups (StatefulSet-like
resources with ordinal member identities) and the naming rules that derive
member and dependent-resource names from a group.

All types use @dataclass. Pydantic models are reserved for API responses
and file parsing.
"""

import hashlib
import json
from dataclasses import dataclass, field, replace

# Type aliases for common patterns
NodeName = str
"""Name of a single cluster member, e.g. "es-data-2"."""


@dataclass(frozen=True)
class NodeGroupId:
    """
    Identity of a node group.

    Attributes:
        namespace: Namespace the group resource lives in.
        name: Group name, also the prefix of every member name.
    """

    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"


@dataclass(frozen=True)
class ClusterId:
    """Identity of the cluster owning a set of node groups."""

    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"


@dataclass
class NodeGroup:
    """
    A set of homogeneously-configured cluster members managed as a unit.

    Members are identified by ordinal: a group named "data" with 3 replicas
    has members data-0, data-1 and data-2. Members always join and leave
    at the highest ordinal, so the member set never has gaps.

    Attributes:
        namespace: Namespace of the group resource.
        name: Group name.
        replicas: Current member count.
        master: Members are master-eligible (participate in quorum).
        data: Members hold data shards.
        ingest: Members run ingest pipelines.
        version: Search engine version the members run (e.g. "7.4.0").
        update_strategy: Rollout strategy of the resource ("OnDelete",
            "RollingUpdate").
        generation: Store-assigned generation, bumped on desired-state changes.
            Zero for a group that was never persisted.
        template_hash: Digest of the desired-state fields, used to detect drift.
            Computed automatically when left empty.
    """

    namespace: str
    name: str
    replicas: int
    master: bool = False
    data: bool = False
    ingest: bool = False
    version: str = ""
    update_strategy: str = "OnDelete"
    generation: int = 0
    template_hash: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        if not self.template_hash:
            self.template_hash = self.compute_template_hash()

    @property
    def id(self) -> NodeGroupId:
        return NodeGroupId(namespace=self.namespace, name=self.name)

    def compute_template_hash(self) -> str:
        """Hash every desired-state field, replicas included."""
        spec = {
            "name": self.name,
            "namespace": self.namespace,
            "replicas": self.replicas,
            "master": self.master,
            "data": self.data,
            "ingest": self.ingest,
            "version": self.version,
            "update_strategy": self.update_strategy,
        }
        encoded = json.dumps(spec, sort_keys=True).encode()
        return hashlib.sha256(encoded).hexdigest()[:16]

    def with_replicas(self, replicas: int) -> "NodeGroup":
        """Return a copy with a new replica count and a refreshed hash."""
        updated = replace(self, replicas=replicas, template_hash="")
        return updated

    def node_names(self) -> list[NodeName]:
        """All member names, lowest ordinal first."""
        return [node_name(self.name, ordinal) for ordinal in range(self.replicas)]


def node_name(group_name: str, ordinal: int) -> NodeName:
    """Name of the member at the given ordinal."""
    return f"{group_name}-{ordinal}"


def headless_service_name(group_name: str) -> str:
    """Name of the headless discovery service of a group."""
    return group_name


def config_secret_name(group_name: str) -> str:
    """Name of the per-group configuration secret."""
    return f"{group_name}-es-config"


def get_by_name(groups: list[NodeGroup], name: str) -> NodeGroup | None:
    """Find a group by name, or None."""
    for group in groups:
        if group.name == name:
            return group
    return None
