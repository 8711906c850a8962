"""Closed permission vocabulary for agent manifests.

Permissions follow the ``mcp.ac.<category>.<action>`` naming convention,
modelled on mobile OS permission grants.  The vocabulary is closed: a new
permission means a new :class:`Permission` member, never an ad hoc string.

Example
-------
::

    from agentbound.permissions import Permission, category_of

    category_of(Permission.FILESYSTEM_READ)   # "filesystem"
    is_valid_permission("mcp.ac.system.exec") # True
"""
from __future__ import annotations

from enum import Enum

_PREFIX = "mcp.ac."


class Permission(str, Enum):
    """Generic permissions an MCP server may declare."""

    FILESYSTEM_READ = "mcp.ac.filesystem.read"
    FILESYSTEM_WRITE = "mcp.ac.filesystem.write"
    FILESYSTEM_DELETE = "mcp.ac.filesystem.delete"
    NETWORK_CLIENT = "mcp.ac.network.client"
    NETWORK_SERVER = "mcp.ac.network.server"
    SYSTEM_ENV_READ = "mcp.ac.system.env.read"
    SYSTEM_EXEC = "mcp.ac.system.exec"

    def __str__(self) -> str:
        return self.value


ALL_PERMISSIONS: tuple[Permission, ...] = tuple(Permission)

PERMISSION_CATEGORIES: dict[str, tuple[Permission, ...]] = {
    "filesystem": (
        Permission.FILESYSTEM_READ,
        Permission.FILESYSTEM_WRITE,
        Permission.FILESYSTEM_DELETE,
    ),
    "network": (
        Permission.NETWORK_CLIENT,
        Permission.NETWORK_SERVER,
    ),
    "system": (
        Permission.SYSTEM_ENV_READ,
        Permission.SYSTEM_EXEC,
    ),
}

PERMISSION_DESCRIPTIONS: dict[Permission, str] = {
    Permission.FILESYSTEM_READ: "Read files and directories on the host filesystem",
    Permission.FILESYSTEM_WRITE: (
        "Create or modify files and directories on the host filesystem"
    ),
    Permission.FILESYSTEM_DELETE: "Delete files and directories on the host filesystem",
    Permission.NETWORK_CLIENT: (
        "Make outbound network requests (HTTP, TCP, WebSocket, etc.)"
    ),
    Permission.NETWORK_SERVER: (
        "Listen for inbound network connections (HTTP, SSE, gRPC, etc.)"
    ),
    Permission.SYSTEM_ENV_READ: (
        "Read environment variables and host configuration values"
    ),
    Permission.SYSTEM_EXEC: "Execute child processes and shell commands on the host",
}

_VALID_VALUES: frozenset[str] = frozenset(p.value for p in Permission)


def is_valid_permission(value: str) -> bool:
    """Return True when *value* is a recognised permission string."""
    return value in _VALID_VALUES


def category_of(permission: Permission | str) -> str:
    """Return the category segment of a permission.

    Parameters
    ----------
    permission:
        A :class:`Permission` or its string value.

    Returns
    -------
    str
        ``"filesystem"``, ``"network"`` or ``"system"``.

    Raises
    ------
    ValueError
        If *permission* is not part of the vocabulary.
    """
    value = Permission(permission).value
    return value[len(_PREFIX):].split(".")[0]
