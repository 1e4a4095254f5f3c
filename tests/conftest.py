"""Shared fixtures: node records in the inventory API's wire format."""

from __future__ import annotations

from typing import Any, Callable

import pytest

from pgc_ansible_inventory.inventory.models import NodeRecord


def network(domain: str = "", ip: list[str] | None = None, gateway: list[str] | None = None) -> dict[str, Any]:
    """Build a ``Networks`` entry as the API serves it."""
    return {
        "Network": {"Name": domain or "net", "Domain": domain},
        "Config": {"IP": ip, "Gateway": gateway, "DNS": None},
    }


@pytest.fixture
def make_node() -> Callable[..., NodeRecord]:
    def _make_node(
        hostname: str = "node1",
        system: str = "sys7",
        role: str = "worker",
        networks: dict[str, Any] | None = None,
        metadata: dict[str, Any] | None = None,
        **overrides: Any,
    ) -> NodeRecord:
        payload: dict[str, Any] = {
            "Hostname": hostname,
            "InventoryID": f"inv-{hostname}",
            "Role": role,
            "Tags": ["gpu", "ib"],
            "Location": {"Name": "dc1", "Rack": "r12"},
            "System": {"Name": f"System {system}", "ShortName": system},
            "Environment": {"Name": "production", "Metadata": metadata},
            "Networks": networks,
            "LastUpdated": "2019-04-02T15:04:05.123456789Z",
        }
        payload.update(overrides)
        return NodeRecord.model_validate(payload)

    return _make_node


@pytest.fixture
def make_network() -> Callable[..., dict[str, Any]]:
    return network
