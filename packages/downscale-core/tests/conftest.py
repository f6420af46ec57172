"""Shared fixtures for downscale engine tests."""

import pytest

from downscale_protocols import ClusterId, NodeGroup

from downscale_core.context import DownscaleContext
from downscale_core.expectations import Expectations
from downscale_core.memory import InMemoryCluster, InMemoryResourceStore


@pytest.fixture
def cluster_id():
    return ClusterId(namespace="ns", name="es")


@pytest.fixture
def store():
    return InMemoryResourceStore()


@pytest.fixture
def cluster():
    return InMemoryCluster()


@pytest.fixture
def expectations():
    return Expectations()


@pytest.fixture
def ctx(cluster_id, store, cluster, expectations):
    """Context wired to in-memory collaborators with an unbounded budget."""
    return DownscaleContext(
        cluster=cluster_id,
        resources=store,
        expectations=expectations,
        shard_lister=cluster,
        migration=cluster,
        legacy_quorum=cluster,
        voting=cluster,
        max_unavailable=None,
    )


@pytest.fixture
def make_group():
    """Factory for node groups in the test namespace."""

    def _make(name: str, replicas: int, master: bool = False, **kwargs) -> NodeGroup:
        return NodeGroup(
            namespace="ns",
            name=name,
            replicas=replicas,
            master=master,
            data=not master,
            **kwargs,
        )

    return _make
