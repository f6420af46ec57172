"""Tests for topology file loading and environment settings."""

import pytest
from pydantic import ValidationError

from downscale_core.config import Settings
from downscale_core.topology import FileTopologySource, load_topology

TOPOLOGY_YAML = """
namespace: search
cluster: logs
expected:
  - name: master
    replicas: 3
    master: true
    version: 7.4.0
  - name: data
    replicas: 2
    data: true
actual:
  - name: master
    replicas: 3
    master: true
    version: 7.4.0
  - name: data
    replicas: 4
    data: true
  - name: old-data
    replicas: 2
    data: true
"""


@pytest.fixture
def topology_path(tmp_path):
    path = tmp_path / "topology.yaml"
    path.write_text(TOPOLOGY_YAML)
    return path


class TestLoadTopology:
    def test_loads_groups(self, topology_path):
        topo = load_topology(topology_path)

        assert str(topo.cluster_id) == "search/logs"
        assert [g.name for g in topo.expected_groups()] == ["master", "data"]
        master = topo.actual_groups()[0]
        assert master.master and master.namespace == "search"
        assert master.version == "7.4.0"

    def test_duplicate_names_rejected(self, tmp_path):
        path = tmp_path / "dup.yaml"
        path.write_text(
            "cluster: logs\nexpected:\n  - {name: data, replicas: 1}\n  - {name: data, replicas: 2}\n"
        )

        with pytest.raises(ValidationError, match="Duplicate"):
            load_topology(path)

    def test_negative_replicas_rejected(self, tmp_path):
        path = tmp_path / "neg.yaml"
        path.write_text("cluster: logs\nexpected:\n  - {name: data, replicas: -1}\n")

        with pytest.raises(ValidationError):
            load_topology(path)

    @pytest.mark.asyncio
    async def test_file_source_rereads_file(self, topology_path):
        source = FileTopologySource(topology_path)
        assert len(await source.list_expected_groups()) == 2

        topology_path.write_text("cluster: logs\nexpected: []\n")
        assert await source.list_expected_groups() == []


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("DOWNSCALE_MAX_UNAVAILABLE", raising=False)
        settings = Settings()

        assert settings.max_unavailable == 1
        assert settings.elasticsearch_url == "http://localhost:9200"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("DOWNSCALE_MAX_UNAVAILABLE", "3")
        monkeypatch.setenv("DOWNSCALE_CLUSTER_NAME", "logs")

        settings = Settings()

        assert settings.max_unavailable == 3
        assert settings.cluster_name == "logs"
