"""
Tests for the shared node group types and naming helpers.
"""

from downscale_protocols import (
    ClusterId,
    NodeGroup,
    NodeGroupId,
    NotFoundError,
    config_secret_name,
    get_by_name,
    headless_service_name,
    node_name,
)


class TestNodeGroup:
    def test_node_names_lowest_ordinal_first(self):
        group = NodeGroup("ns", "data", 3)
        assert group.node_names() == ["data-0", "data-1", "data-2"]

    def test_id(self):
        assert NodeGroup("ns", "data", 3).id == NodeGroupId("ns", "data")
        assert str(NodeGroupId("ns", "data")) == "ns/data"
        assert str(ClusterId("ns", "es")) == "ns/es"

    def test_template_hash_computed(self):
        group = NodeGroup("ns", "data", 3)
        assert group.template_hash == group.compute_template_hash()
        assert len(group.template_hash) == 16

    def test_with_replicas_refreshes_hash(self):
        group = NodeGroup("ns", "data", 3, generation=4)
        smaller = group.with_replicas(2)

        assert smaller.replicas == 2
        assert smaller.generation == 4
        assert smaller.template_hash != group.template_hash
        assert group.replicas == 3

    def test_equality_ignores_hash(self):
        a = NodeGroup("ns", "data", 3)
        b = NodeGroup("ns", "data", 3, template_hash="stale")
        assert a == b


class TestNaming:
    def test_member_and_resource_names(self):
        assert node_name("master", 2) == "master-2"
        assert headless_service_name("master") == "master"
        assert config_secret_name("master") == "master-es-config"

    def test_get_by_name(self):
        groups = [NodeGroup("ns", "a", 1), NodeGroup("ns", "b", 2)]
        assert get_by_name(groups, "b").replicas == 2
        assert get_by_name(groups, "c") is None


class TestNotFoundError:
    def test_message_and_fields(self):
        error = NotFoundError("Secret", "ns", "data-es-config")

        assert error.kind == "Secret"
        assert str(error) == "Secret ns/data-es-config not found"
