"""Projection of inventory node records into Ansible hosts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Literal, Sequence

from ..exceptions import ProjectionError
from .models import NodeRecord
from .resolver import Connection, control_plane_ips, control_plane_network, resolve_connection, resolve_domain

META_KEY = "_meta"
DEFAULT_PYTHON_INTERPRETER = "/opt/ansible/bin/python"

AliasMode = Literal["fqdn", "hostname"]
GroupRule = Callable[[NodeRecord], Iterable[str]]


@dataclass
class ProjectedHost:
    """Everything the assembler needs to know about one node."""

    alias: str
    groups: list[str]
    variables: dict[str, Any]
    connection: Connection


# ------------------------------------------------------------------ groups
def derive_groups(system_id: str, role: str) -> list[str]:
    return [system_id, f"{system_id}-{role}"]


def system_groups(node: NodeRecord) -> list[str]:
    """Default rule: the system group and the ``<system>-<role>`` group."""
    system_id = node.system_id
    if not system_id:
        raise ProjectionError("node has no system identifier", node=node.inventory_id or node.hostname)
    return derive_groups(system_id, node.role)


DEFAULT_GROUP_RULES: tuple[GroupRule, ...] = (system_groups,)


# --------------------------------------------------------------- variables
def build_host_vars(
    node: NodeRecord,
    connection: Connection,
    *,
    python_interpreter: str | None = DEFAULT_PYTHON_INTERPRETER,
) -> dict[str, Any]:
    """Build the ``_meta.hostvars`` entry for a node."""
    variables: dict[str, Any] = {}
    if python_interpreter:
        variables["ansible_python_interpreter"] = python_interpreter
    variables.update(
        {
            "ansible_fqdn": connection.fqdn,
            "ansible_host": connection.host,
            "ansible_port": connection.port,
            "tags": list(node.tags),
            "inventory_id": node.inventory_id,
            "rack": node.rack,
            "role": node.role,
            "last_update": node.last_updated,
            "nodeconfig": node.snapshot(),
        }
    )

    control_plane = control_plane_network(node)
    if control_plane is not None:
        variables["kube_control_plane_domain"] = control_plane.network.domain
        variables["kube_control_plane_ips"] = control_plane_ips(control_plane)
    return variables


# --------------------------------------------------------------- projector
@dataclass
class HostProjector:
    """Turn a node record into a :class:`ProjectedHost`.

    ``alias_mode`` selects the inventory name: ``fqdn`` appends the
    provisioning/control-plane domain when one resolves, ``hostname`` always
    uses the bare hostname.
    """

    alias_mode: AliasMode = "fqdn"
    python_interpreter: str | None = DEFAULT_PYTHON_INTERPRETER
    group_rules: Sequence[GroupRule] = field(default_factory=lambda: DEFAULT_GROUP_RULES)

    def alias(self, node: NodeRecord) -> str:
        if not node.hostname:
            raise ProjectionError("node has no hostname", node=node.inventory_id or None)
        if self.alias_mode == "fqdn":
            domain = resolve_domain(node)
            if domain:
                return f"{node.hostname}.{domain}"
        return node.hostname

    def groups(self, node: NodeRecord) -> list[str]:
        groups: list[str] = []
        for rule in self.group_rules:
            groups.extend(rule(node))
        return groups

    def project(self, node: NodeRecord) -> ProjectedHost:
        alias = self.alias(node)
        if alias == META_KEY:
            raise ProjectionError(f"alias collides with reserved key {META_KEY!r}", node=node.inventory_id or None)
        groups = self.groups(node)
        if META_KEY in groups:
            raise ProjectionError(f"group collides with reserved key {META_KEY!r}", node=node.inventory_id or alias)

        connection = resolve_connection(node)
        variables = build_host_vars(node, connection, python_interpreter=self.python_interpreter)
        return ProjectedHost(alias=alias, groups=groups, variables=variables, connection=connection)
