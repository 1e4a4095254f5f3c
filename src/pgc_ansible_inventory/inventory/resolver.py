"""Domain, control-plane and connection resolution for a single node."""

from __future__ import annotations

import ipaddress
import logging
from dataclasses import dataclass
from typing import Iterable

from .models import NetworkAttachment, NodeRecord

logger = logging.getLogger(__name__)

PROVISIONING_NETWORK = "provisioning"
SSH_PORT = 22

IPAddress = ipaddress.IPv4Address | ipaddress.IPv6Address


@dataclass(frozen=True)
class Connection:
    """Connection parameters for ``ansible_fqdn``/``ansible_host``/``ansible_port``."""

    fqdn: str
    host: str
    port: int = SSH_PORT


# ------------------------------------------------------------------ parsing
def parse_cidr(value: str) -> IPAddress | None:
    """Parse ``addr/prefix`` and return the bare address, or None.

    The prefix must be a decimal length; netmask forms are rejected.
    """
    _, slash, prefix = value.partition("/")
    if not slash or not (prefix.isascii() and prefix.isdigit()):
        return None
    try:
        return ipaddress.ip_interface(value).ip
    except ValueError:
        return None


def _parse_host_address(value: str) -> IPAddress | None:
    if "/" in value:
        return parse_cidr(value)
    try:
        return ipaddress.ip_address(value)
    except ValueError:
        return None


def _is_address(value: str) -> bool:
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


# ------------------------------------------------------------- control plane
def control_plane_network(node: NodeRecord) -> NetworkAttachment | None:
    """Return the attachment named by the node's control-plane metadata key."""
    name = node.control_plane_network_name()
    if name is None:
        return None
    return node.networks.get(name)


def control_plane_ips(attachment: NetworkAttachment) -> list[str]:
    addresses = (parse_cidr(entry) for entry in attachment.config.ip)
    return [str(address) for address in addresses if address is not None]


def resolve_domain(node: NodeRecord) -> str:
    """Return the domain used to build the node's FQDN alias.

    The ``provisioning`` network supplies the default; a valid control-plane
    network always replaces it. Returns an empty string when neither exists.
    """
    domain = ""
    provisioning = node.networks.get(PROVISIONING_NETWORK)
    if provisioning is not None:
        domain = provisioning.network.domain
    control_plane = control_plane_network(node)
    if control_plane is not None:
        domain = control_plane.network.domain
    return domain


# --------------------------------------------------------------- connection
def _gateway_match(attachment: NetworkAttachment) -> tuple[bool, IPAddress | None]:
    """Pair gateways with IPs by index; the last valid gateway decides."""
    ips = attachment.config.ip
    matched, address = False, None
    for index, gateway in enumerate(attachment.config.gateway):
        if index >= len(ips) or not _is_address(gateway):
            continue
        matched, address = True, _parse_host_address(ips[index])
    return matched, address


def _gateway_networks(
    networks: dict[str, NetworkAttachment],
) -> Iterable[tuple[str, NetworkAttachment, IPAddress | None]]:
    for name in sorted(networks):
        attachment = networks[name]
        matched, address = _gateway_match(attachment)
        if matched:
            yield name, attachment, address


def resolve_connection(node: NodeRecord) -> Connection:
    """Resolve how Ansible should reach ``node``.

    Every attachment with a valid gateway is a candidate; attachments are
    visited by network name and the last candidate wins. Never fails: a node
    without usable network data is reached by its bare hostname.
    """
    matches = list(_gateway_networks(node.networks))
    domain = ""
    address: IPAddress | None = None
    if matches:
        name, attachment, address = matches[-1]
        domain = attachment.network.domain
        if len(matches) > 1:
            logger.warning(
                "Node %s has gateways on networks %s; using %s",
                node.inventory_id or node.hostname,
                ", ".join(match[0] for match in matches),
                name,
            )

    if domain:
        fqdn = f"{node.hostname}.{domain}"
        return Connection(fqdn=fqdn, host=fqdn)
    if address is not None:
        return Connection(fqdn="", host=str(address))
    return Connection(fqdn="", host=node.hostname)
