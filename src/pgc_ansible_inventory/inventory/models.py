"""Inventory data models based on Pydantic."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

CONTROL_PLANE_NETWORK_KEY = "kubernetes_control_plane_network"


class _Record(BaseModel):
    """Read-only view of an inventory API object.

    The API serialises Go structs, so wire keys are capitalised. Fields accept
    either the wire key or the python name and unknown keys are preserved.
    """

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)


class Network(_Record):
    name: str = Field(default="", alias="Name")
    domain: str = Field(default="", alias="Domain")

    @field_validator("name", "domain", mode="before")
    @classmethod
    def _null_string(cls, value: Any) -> Any:
        return "" if value is None else value


class NicConfig(_Record):
    """Per-node addressing; ``gateway[i]`` belongs to ``ip[i]`` when both exist."""

    ip: list[str] = Field(default_factory=list, alias="IP")
    gateway: list[str] = Field(default_factory=list, alias="Gateway")
    dns: list[str] = Field(default_factory=list, alias="DNS")

    @field_validator("ip", "gateway", "dns", mode="before")
    @classmethod
    def _null_list(cls, value: Any) -> Any:
        # Go encodes nil slices as null
        return [] if value is None else value


class NetworkAttachment(_Record):
    network: Network = Field(default_factory=Network, alias="Network")
    config: NicConfig = Field(default_factory=NicConfig, alias="Config")

    @field_validator("network", "config", mode="before")
    @classmethod
    def _null_object(cls, value: Any) -> Any:
        return {} if value is None else value


class Location(_Record):
    name: str = Field(default="", alias="Name")
    rack: str = Field(default="", alias="Rack")


class System(_Record):
    name: str = Field(default="", alias="Name")
    short_name: str = Field(default="", alias="ShortName")

    def id(self) -> str | None:
        return self.short_name or self.name or None


class Environment(_Record):
    name: str = Field(default="", alias="Name")
    metadata: dict[str, Any] = Field(default_factory=dict, alias="Metadata")

    @field_validator("metadata", mode="before")
    @classmethod
    def _null_metadata(cls, value: Any) -> Any:
        return {} if value is None else value

    def control_plane_network_name(self) -> str | None:
        """Return the configured control-plane network name, if it is a string."""
        value = self.metadata.get(CONTROL_PLANE_NETWORK_KEY)
        return value if isinstance(value, str) else None


class NodeRecord(_Record):
    """A single node as served by the inventory API's ``nodeconfig`` resource."""

    hostname: str = Field(default="", alias="Hostname")
    inventory_id: str = Field(default="", alias="InventoryID")
    role: str = Field(default="", alias="Role")
    tags: list[str] = Field(default_factory=list, alias="Tags")
    location: Location | None = Field(default=None, alias="Location")
    system: System | None = Field(default=None, alias="System")
    environment: Environment | None = Field(default=None, alias="Environment")
    networks: dict[str, NetworkAttachment] = Field(default_factory=dict, alias="Networks")
    # RFC 3339 string as served; passed through unchanged
    last_updated: str | None = Field(default=None, alias="LastUpdated")

    @field_validator("tags", "networks", mode="before")
    @classmethod
    def _null_collection(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return [] if info.field_name == "tags" else {}
        return value

    @property
    def system_id(self) -> str | None:
        return self.system.id() if self.system else None

    @property
    def rack(self) -> str:
        return self.location.rack if self.location else ""

    def control_plane_network_name(self) -> str | None:
        if self.environment is None:
            return None
        return self.environment.control_plane_network_name()

    def snapshot(self) -> dict[str, Any]:
        """Return a detached, JSON-compatible copy of the full record."""
        return self.model_dump(mode="json", by_alias=True)


class AnsibleGroup(BaseModel):
    """A group in Ansible's dynamic inventory format."""

    hosts: list[str] = Field(default_factory=list)
    vars: dict[str, Any] = Field(default_factory=dict)

    def add_host(self, alias: str) -> None:
        self.hosts.append(alias)
