"""FastAPI application serving the dynamic inventory document."""

from __future__ import annotations

from typing import Any

from fastapi import Depends, FastAPI, HTTPException, status

from .config import Settings, get_settings
from .exceptions import ConfigurationError, NodeSourceError
from .inventory.assembler import InventoryBuilder, build_inventory
from .inventory.projector import HostProjector
from .source.client import InventoryApiClient

app = FastAPI(title="PGC Ansible Inventory", version="0.1.0")


def projector_from_settings(settings: Settings) -> HostProjector:
    return HostProjector(
        alias_mode=settings.host_alias,
        python_interpreter=settings.python_interpreter or None,
    )


def get_node_source(settings: Settings = Depends(get_settings)) -> InventoryApiClient:
    try:
        return InventoryApiClient.from_settings(settings)
    except ConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=exc.message) from exc


async def get_projector(settings: Settings = Depends(get_settings)) -> HostProjector:
    return projector_from_settings(settings)


def _assemble(source: InventoryApiClient, projector: HostProjector) -> InventoryBuilder:
    try:
        nodes = source.fetch_all()
    except NodeSourceError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.message) from exc
    return build_inventory(nodes, projector)


@app.get("/healthz")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/inventory")
def get_inventory(
    source: InventoryApiClient = Depends(get_node_source),
    projector: HostProjector = Depends(get_projector),
) -> dict[str, Any]:
    return _assemble(source, projector).to_dict()


@app.get("/inventory/hosts/{alias}")
def get_host(
    alias: str,
    source: InventoryApiClient = Depends(get_node_source),
    projector: HostProjector = Depends(get_projector),
) -> dict[str, Any]:
    hostvars = _assemble(source, projector).hostvars
    if alias not in hostvars:
        raise HTTPException(status_code=404, detail="Host not found")
    return hostvars[alias]
