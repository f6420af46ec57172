"""
Kubernetes resource store for the downscale operator.

Implements ResourceClientProtocol with StatefulSets as node groups, plus
their headless Services and configuration Secrets.
"""

from downscale_kubernetes.factory import (
    create_kubernetes_resource_client,
    load_kubernetes_config,
)
from downscale_kubernetes.resource_client import (
    KubernetesResourceClient,
    pod_is_ready,
    statefulset_to_node_group,
)

__all__ = [
    "KubernetesResourceClient",
    "create_kubernetes_resource_client",
    "load_kubernetes_config",
    "pod_is_ready",
    "statefulset_to_node_group",
]
