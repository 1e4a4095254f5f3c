"""Exception hierarchy for the inventory generator.

Exception tree::

    InventoryError
    ├── ConfigurationError
    ├── NodeSourceError
    ├── ProjectionError
    └── SerializationError
"""

from __future__ import annotations


class InventoryError(Exception):
    """Base exception for all inventory generation errors.

    Attributes:
        message: Human-readable error description.
        node: Optional inventory id of the node that triggered the error.

    """

    def __init__(self, message: str, node: str | None = None) -> None:
        self.message = message
        self.node = node
        super().__init__(f"[{node}] {message}" if node else message)


class ConfigurationError(InventoryError):
    """Raised when settings are missing or invalid (base URL, credentials)."""


class NodeSourceError(InventoryError):
    """Raised when node records cannot be fetched or decoded.

    Always fatal to a run; transport, auth and decoding failures are not
    distinguished.
    """


class ProjectionError(InventoryError):
    """Raised when a single node cannot be projected into a host entry."""


class SerializationError(InventoryError):
    """Raised when the assembled document cannot be rendered as JSON."""
