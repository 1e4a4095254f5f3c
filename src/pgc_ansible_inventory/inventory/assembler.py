"""Assembly of projected hosts into an Ansible dynamic inventory document."""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable

from ..exceptions import ProjectionError, SerializationError
from .models import AnsibleGroup, NodeRecord
from .projector import META_KEY, HostProjector, ProjectedHost

logger = logging.getLogger(__name__)


class InventoryBuilder:
    """Accumulates groups and host variables for a single run."""

    def __init__(self) -> None:
        self.groups: dict[str, AnsibleGroup] = {}
        self.hostvars: dict[str, dict[str, Any]] = {}

    def group(self, name: str) -> AnsibleGroup:
        group = self.groups.get(name)
        if group is None:
            group = self.groups[name] = AnsibleGroup()
        return group

    def add_host(self, host: ProjectedHost) -> None:
        for name in host.groups:
            self.group(name).add_host(host.alias)
        if host.alias in self.hostvars:
            logger.debug("Host alias %s seen again; replacing its variables", host.alias)
        self.hostvars[host.alias] = host.variables

    def to_dict(self) -> dict[str, Any]:
        """Render the Ansible ``--list`` document."""
        document: dict[str, Any] = {name: group.model_dump() for name, group in self.groups.items()}
        document[META_KEY] = {"hostvars": self.hostvars}
        return document

    def to_json(self) -> str:
        return _dumps(self.to_dict())

    def host_json(self, alias: str) -> str:
        """Render the Ansible ``--host`` document; unknown aliases yield ``{}``."""
        return _dumps(self.hostvars.get(alias, {}))


def _dumps(document: Any) -> str:
    try:
        return json.dumps(document)
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"unable to render inventory: {exc}") from exc


def build_inventory(nodes: Iterable[NodeRecord], projector: HostProjector | None = None) -> InventoryBuilder:
    """Project every node and fold it into a fresh builder.

    Nodes that cannot be projected are logged and left out; the run goes on.
    """
    projector = projector or HostProjector()
    builder = InventoryBuilder()
    for node in nodes:
        try:
            host = projector.project(node)
        except ProjectionError as exc:
            logger.warning("Skipping node %s: %s", exc.node or node.inventory_id or "<unknown>", exc.message)
            continue
        builder.add_host(host)
    logger.info("Assembled %d hosts in %d groups", len(builder.hostvars), len(builder.groups))
    return builder
