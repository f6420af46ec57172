"""
Labels linking StatefulSets and pods to their cluster and node group.

Node roles and version are stored as labels on the StatefulSet and on
its pod template, so a NodeGroup can be rebuilt from the StatefulSet
alone and pods can be selected per cluster.
"""

CLUSTER_NAME_LABEL = "elasticsearch.k8s.elastic.co/cluster-name"
STATEFULSET_NAME_LABEL = "elasticsearch.k8s.elastic.co/statefulset-name"
NODE_MASTER_LABEL = "elasticsearch.k8s.elastic.co/node-master"
NODE_DATA_LABEL = "elasticsearch.k8s.elastic.co/node-data"
NODE_INGEST_LABEL = "elasticsearch.k8s.elastic.co/node-ingest"
VERSION_LABEL = "elasticsearch.k8s.elastic.co/version"
TEMPLATE_HASH_LABEL = "common.k8s.elastic.co/template-hash"


def cluster_selector(cluster_name: str) -> str:
    """Label selector matching every resource of a cluster."""
    return f"{CLUSTER_NAME_LABEL}={cluster_name}"


def bool_label(value: bool) -> str:
    return "true" if value else "false"


def parse_bool_label(labels: dict[str, str], key: str) -> bool:
    return labels.get(key, "false") == "true"
