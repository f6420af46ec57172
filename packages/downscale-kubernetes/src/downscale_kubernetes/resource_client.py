"""
Kubernetes-backed resource store for node groups.

This module implements ResourceClientProtocol on top of the Kubernetes
API via kubernetes_asyncio:

- Node groups are StatefulSets labelled with their cluster name
- Each group has a headless Service and a configuration Secret
- Readiness comes from the pods selected by the cluster label

ApiException with status 404 is translated to NotFoundError. Every other
API error propagates unchanged.
"""

import logging
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import TypeVar

from kubernetes_asyncio.client import (
    ApiClient,
    ApiException,
    AppsV1Api,
    CoreV1Api,
    V1Pod,
    V1StatefulSet,
)

from downscale_protocols import (
    ClusterId,
    NodeGroup,
    NodeGroupId,
    NodeName,
    NotFoundError,
)
from downscale_kubernetes.labels import (
    CLUSTER_NAME_LABEL,
    NODE_DATA_LABEL,
    NODE_INGEST_LABEL,
    NODE_MASTER_LABEL,
    STATEFULSET_NAME_LABEL,
    TEMPLATE_HASH_LABEL,
    VERSION_LABEL,
    bool_label,
    cluster_selector,
    parse_bool_label,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

NODE_GROUP_KIND = "NodeGroup"
SERVICE_KIND = "Service"
SECRET_KIND = "Secret"


async def _translate_not_found(
    call: Awaitable[T], kind: str, namespace: str, name: str
) -> T:
    try:
        return await call
    except ApiException as e:
        if e.status == 404:
            raise NotFoundError(kind, namespace, name) from e
        raise


def group_labels(cluster_name: str, group: NodeGroup) -> dict[str, str]:
    """Labels the controller keeps on a group's StatefulSet."""
    return {
        CLUSTER_NAME_LABEL: cluster_name,
        STATEFULSET_NAME_LABEL: group.name,
        NODE_MASTER_LABEL: bool_label(group.master),
        NODE_DATA_LABEL: bool_label(group.data),
        NODE_INGEST_LABEL: bool_label(group.ingest),
        VERSION_LABEL: group.version,
        TEMPLATE_HASH_LABEL: group.template_hash,
    }


def statefulset_to_node_group(sset: V1StatefulSet) -> NodeGroup:
    """Rebuild a NodeGroup from a StatefulSet and its labels."""
    labels = sset.metadata.labels or {}
    strategy = "OnDelete"
    if sset.spec.update_strategy is not None and sset.spec.update_strategy.type:
        strategy = sset.spec.update_strategy.type
    return NodeGroup(
        namespace=sset.metadata.namespace,
        name=sset.metadata.name,
        replicas=sset.spec.replicas or 0,
        master=parse_bool_label(labels, NODE_MASTER_LABEL),
        data=parse_bool_label(labels, NODE_DATA_LABEL),
        ingest=parse_bool_label(labels, NODE_INGEST_LABEL),
        version=labels.get(VERSION_LABEL, ""),
        update_strategy=strategy,
        generation=sset.metadata.generation or 0,
    )


def pod_is_ready(pod: V1Pod) -> bool:
    """Running, not terminating, and reporting the Ready condition."""
    if pod.metadata.deletion_timestamp is not None:
        return False
    if pod.status is None or pod.status.phase != "Running":
        return False
    for condition in pod.status.conditions or []:
        if condition.type == "Ready":
            return condition.status == "True"
    return False


@dataclass
class KubernetesResourceClient:
    """
    ResourceClientProtocol implementation over the Kubernetes API.

    Attributes:
        api: Shared ApiClient, closed by aclose().
        cluster_name: Cluster whose resources this client labels and selects.
    """

    api: ApiClient
    cluster_name: str

    def __post_init__(self) -> None:
        self.apps = AppsV1Api(self.api)
        self.core = CoreV1Api(self.api)

    async def aclose(self) -> None:
        await self.api.close()

    async def list_node_groups(self, cluster: ClusterId) -> list[NodeGroup]:
        result = await self.apps.list_namespaced_stateful_set(
            namespace=cluster.namespace,
            label_selector=cluster_selector(cluster.name),
        )
        return [statefulset_to_node_group(sset) for sset in result.items]

    async def get_node_group(self, group_id: NodeGroupId) -> NodeGroup:
        sset = await _translate_not_found(
            self.apps.read_namespaced_stateful_set(
                name=group_id.name, namespace=group_id.namespace
            ),
            NODE_GROUP_KIND, group_id.namespace, group_id.name,
        )
        return statefulset_to_node_group(sset)

    async def update_node_group(self, group: NodeGroup) -> NodeGroup:
        """
        Replace the replica count and labels of an existing StatefulSet.

        Read-modify-write on the current object, so a concurrent change
        fails with a 409 conflict instead of being overwritten.
        """
        current = await _translate_not_found(
            self.apps.read_namespaced_stateful_set(
                name=group.name, namespace=group.namespace
            ),
            NODE_GROUP_KIND, group.namespace, group.name,
        )
        labels = group_labels(self.cluster_name, group)
        logger.debug(
            f"Replacing StatefulSet {group.id} replicas "
            f"{current.spec.replicas} -> {group.replicas}"
        )
        current.spec.replicas = group.replicas
        current.metadata.labels = {**(current.metadata.labels or {}), **labels}
        updated = await self.apps.replace_namespaced_stateful_set(
            name=group.name, namespace=group.namespace, body=current
        )
        return statefulset_to_node_group(updated)

    async def delete_node_group(self, group_id: NodeGroupId) -> None:
        await _translate_not_found(
            self.apps.delete_namespaced_stateful_set(
                name=group_id.name, namespace=group_id.namespace
            ),
            NODE_GROUP_KIND, group_id.namespace, group_id.name,
        )

    async def delete_service(self, namespace: str, name: str) -> None:
        await _translate_not_found(
            self.core.delete_namespaced_service(name=name, namespace=namespace),
            SERVICE_KIND, namespace, name,
        )

    async def delete_config(self, namespace: str, name: str) -> None:
        await _translate_not_found(
            self.core.delete_namespaced_secret(name=name, namespace=namespace),
            SECRET_KIND, namespace, name,
        )

    async def get_ready_nodes(self, groups: list[NodeGroup]) -> set[NodeName]:
        expected: dict[str, set[NodeName]] = {}
        for group in groups:
            expected.setdefault(group.namespace, set()).update(group.node_names())

        ready: set[NodeName] = set()
        for namespace, names in expected.items():
            pods = await self.core.list_namespaced_pod(
                namespace=namespace,
                label_selector=cluster_selector(self.cluster_name),
            )
            for pod in pods.items:
                if pod.metadata.name in names and pod_is_ready(pod):
                    ready.add(pod.metadata.name)
        return ready
