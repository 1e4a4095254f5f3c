from __future__ import annotations

from pgc_ansible_inventory.inventory.models import AnsibleGroup, NodeRecord


def test_null_collections_from_go_are_tolerated() -> None:
    node = NodeRecord.model_validate(
        {
            "Hostname": "n1",
            "Tags": None,
            "Networks": {"provisioning": {"Network": None, "Config": {"IP": None, "Gateway": None}}},
            "Environment": {"Metadata": None},
        }
    )

    assert node.tags == []
    assert node.networks["provisioning"].network.domain == ""
    assert node.networks["provisioning"].config.ip == []
    assert node.environment is not None
    assert node.environment.metadata == {}


def test_control_plane_network_name_requires_string(make_node) -> None:
    assert make_node(metadata={"kubernetes_control_plane_network": "cp0"}).control_plane_network_name() == "cp0"
    assert make_node(metadata={"kubernetes_control_plane_network": 7}).control_plane_network_name() is None
    assert make_node(metadata={"unrelated": "value"}).control_plane_network_name() is None
    assert make_node(Environment=None).control_plane_network_name() is None


def test_system_id_prefers_short_name(make_node) -> None:
    assert make_node(system="sys7").system_id == "sys7"
    assert make_node(System={"Name": "longname"}).system_id == "longname"
    assert make_node(System=None).system_id is None


def test_snapshot_is_detached_and_keeps_wire_keys(make_node) -> None:
    node = make_node(Extra={"kept": True})

    snapshot = node.snapshot()
    snapshot["Tags"].append("mutated")

    assert snapshot["Hostname"] == "node1"
    assert snapshot["Extra"] == {"kept": True}
    assert snapshot["LastUpdated"] == "2019-04-02T15:04:05.123456789Z"
    assert node.tags == ["gpu", "ib"]


def test_group_starts_empty() -> None:
    group = AnsibleGroup()
    group.add_host("a")
    group.add_host("a")

    assert group.model_dump() == {"hosts": ["a", "a"], "vars": {}}
