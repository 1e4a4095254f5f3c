"""Ansible dynamic inventory entrypoint.

Usage::

    pgc-ansible-inventory --list
    pgc-ansible-inventory --host <alias>
    pgc-ansible-inventory --serve
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

import uvicorn
import yaml
from pydantic import ValidationError

from .api import projector_from_settings
from .config import get_settings
from .exceptions import InventoryError
from .inventory.assembler import build_inventory
from .source.client import InventoryApiClient

logger = logging.getLogger("pgc_ansible_inventory")


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pgc-ansible-inventory",
        description="Ansible dynamic inventory backed by the PGC inventory API.",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--list", action="store_true", help="Print the full inventory (default).")
    mode.add_argument("--host", metavar="ALIAS", help="Print the variables of a single host.")
    mode.add_argument("--serve", action="store_true", help="Serve the inventory over HTTP.")
    return parser.parse_args(argv)


def run(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    try:
        settings = get_settings()
    except (ValidationError, yaml.YAMLError) as exc:
        logging.basicConfig(stream=sys.stderr)
        logger.error("Invalid configuration: %s", exc)
        return 1
    logging.basicConfig(
        stream=sys.stderr,
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.serve:
        uvicorn.run(
            "pgc_ansible_inventory.api:app",
            host=settings.api_host,
            port=settings.api_port,
            reload=False,
            log_level=settings.log_level.lower(),
        )
        return 0

    try:
        nodes = InventoryApiClient.from_settings(settings).fetch_all()
        builder = build_inventory(nodes, projector_from_settings(settings))
        if args.host is not None:
            output = builder.host_json(args.host)
        else:
            output = builder.to_json()
    except InventoryError as exc:
        logger.error("%s", exc)
        return 1

    sys.stdout.write(output)
    sys.stdout.write("\n")
    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
