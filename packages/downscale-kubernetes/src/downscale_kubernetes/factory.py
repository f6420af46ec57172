"""
Factory function for creating the Kubernetes resource client.

Loads in-cluster configuration when running inside a pod (service
account token present), and the local kubeconfig otherwise.
"""

import logging
import os

import kubernetes_asyncio.client
import kubernetes_asyncio.config

from downscale_kubernetes.resource_client import KubernetesResourceClient

logger = logging.getLogger(__name__)

SERVICE_ACCOUNT_TOKEN = "/var/run/secrets/kubernetes.io/serviceaccount/token"


async def load_kubernetes_config() -> None:
    if os.path.exists(SERVICE_ACCOUNT_TOKEN):
        logger.debug("Loading in-cluster Kubernetes configuration")
        kubernetes_asyncio.config.load_incluster_config()
    else:
        logger.debug("Loading Kubernetes configuration from kubeconfig")
        await kubernetes_asyncio.config.load_kube_config()


async def create_kubernetes_resource_client(cluster_name: str) -> KubernetesResourceClient:
    """
    Create a resource client bound to one cluster.

    Args:
        cluster_name: Value of the cluster-name label on the cluster's
            StatefulSets and pods.

    Returns:
        KubernetesResourceClient. Call aclose() when done.
    """
    await load_kubernetes_config()
    api = kubernetes_asyncio.client.ApiClient()
    return KubernetesResourceClient(api=api, cluster_name=cluster_name)
