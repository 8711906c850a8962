"""Runtime permission checker.

Evaluates whether a concrete resource access is allowed under a set of
:class:`~agentbound.box.policy.EffectivePermissions`.  A cooperating
caller (for example an enforcement proxy in front of an MCP server) asks
before every access; the checker answers with a boolean and records one
audit entry per call.

Checks never raise.  A missing scope means the permission was never
declared and is denied unconditionally.

Example
-------
::

    checker = PermissionChecker(effective)
    checker.check_file_read("/data/project/config.json")  # True
    checker.check_file_read("/etc/passwd")                # False
    checker.audit.denied()
"""
from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from typing import Literal

from agentbound.box.audit import AuditDecision, AuditLog
from agentbound.box.policy import WILDCARD_HOST, EffectivePermissions
from agentbound.permissions.vocabulary import Permission

logger = logging.getLogger(__name__)

FilesystemAction = Literal["read", "write", "delete"]

_FILESYSTEM_PERMISSIONS: dict[str, Permission] = {
    "read": Permission.FILESYSTEM_READ,
    "write": Permission.FILESYSTEM_WRITE,
    "delete": Permission.FILESYSTEM_DELETE,
}


def _canonical(path: str) -> str:
    return os.path.normcase(os.path.realpath(path))


def is_within(path: str, root: str) -> bool:
    """Return True if *path* equals *root* or lies beneath it.

    Both paths are canonicalised first (``.``/``..`` segments and symlinks
    resolved, relative paths taken against the current directory, case
    folded where the platform is case-insensitive).
    """
    if "\x00" in path or "\x00" in root:
        return False
    try:
        target = _canonical(path)
        base = _canonical(root)
        rel = os.path.relpath(target, base)
    except ValueError:
        # Different drives on Windows.
        return False
    if os.path.isabs(rel):
        return False
    return rel != os.pardir and not rel.startswith(os.pardir + os.sep)


class PermissionChecker:
    """Evaluates resource-access requests against effective permissions.

    Parameters
    ----------
    permissions:
        The resolved scope to enforce.
    audit:
        Log that receives one entry per check.  A fresh :class:`AuditLog`
        is created when omitted.
    """

    def __init__(
        self,
        permissions: EffectivePermissions,
        audit: AuditLog | None = None,
    ) -> None:
        self._permissions = permissions
        self._audit = audit if audit is not None else AuditLog()

    @property
    def permissions(self) -> EffectivePermissions:
        return self._permissions

    @property
    def audit(self) -> AuditLog:
        """The audit log this checker writes to."""
        return self._audit

    # ------------------------------------------------------------------
    # Filesystem
    # ------------------------------------------------------------------

    def check_file_read(self, path: str | os.PathLike[str]) -> bool:
        """Check whether reading *path* is allowed."""
        return self._check_filesystem("read", os.fspath(path))

    def check_file_write(self, path: str | os.PathLike[str]) -> bool:
        """Check whether creating or modifying *path* is allowed."""
        return self._check_filesystem("write", os.fspath(path))

    def check_file_delete(self, path: str | os.PathLike[str]) -> bool:
        """Check whether deleting *path* is allowed."""
        return self._check_filesystem("delete", os.fspath(path))

    # ------------------------------------------------------------------
    # Network
    # ------------------------------------------------------------------

    def check_network_client(self, host: str) -> bool:
        """Check whether an outbound connection to *host* is allowed.

        Matching is exact and case-sensitive; ``"*"`` in the allow-list
        admits every host.
        """
        network = self._permissions.network
        allowed = network.allowed_hosts if network is not None else None
        if allowed is None:
            return self._deny(Permission.NETWORK_CLIENT, host, "No network.client permission")
        ok = WILDCARD_HOST in allowed or host in allowed
        return self._decide(Permission.NETWORK_CLIENT, host, ok)

    def check_network_server(self, port: int) -> bool:
        """Check whether listening on *port* is allowed."""
        network = self._permissions.network
        allowed = network.listen_ports if network is not None else None
        if allowed is None:
            return self._deny(
                Permission.NETWORK_SERVER, str(port), "No network.server permission"
            )
        return self._decide(Permission.NETWORK_SERVER, str(port), port in allowed)

    # ------------------------------------------------------------------
    # System
    # ------------------------------------------------------------------

    def check_env_read(self, name: str) -> bool:
        """Check whether reading environment variable *name* is allowed."""
        system = self._permissions.system
        allowed = system.env_vars if system is not None else None
        if allowed is None:
            return self._deny(Permission.SYSTEM_ENV_READ, name, "No system.env.read permission")
        return self._decide(Permission.SYSTEM_ENV_READ, name, name in allowed)

    def check_exec(self, command: str) -> bool:
        """Check whether spawning *command* is allowed.

        An empty allow-list admits any command; an absent one admits none.
        """
        system = self._permissions.system
        allowed = system.allowed_commands if system is not None else None
        if allowed is None:
            return self._deny(Permission.SYSTEM_EXEC, command, "No system.exec permission")
        ok = len(allowed) == 0 or command in allowed
        return self._decide(Permission.SYSTEM_EXEC, command, ok)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _check_filesystem(self, action: FilesystemAction, path: str) -> bool:
        permission = _FILESYSTEM_PERMISSIONS[action]
        filesystem = self._permissions.filesystem
        roots: Sequence[str] | None = (
            getattr(filesystem, action) if filesystem is not None else None
        )
        if roots is None:
            return self._deny(permission, path, f"No filesystem.{action} permission")
        ok = any(is_within(path, root) for root in roots)
        return self._decide(permission, path, ok)

    def _deny(self, permission: Permission, resource: str, detail: str) -> bool:
        logger.debug("Permission DENY: %s %s (%s)", permission.value, resource, detail)
        self._audit.record(permission, resource, AuditDecision.DENY, detail)
        return False

    def _decide(self, permission: Permission, resource: str, ok: bool) -> bool:
        decision = AuditDecision.ALLOW if ok else AuditDecision.DENY
        logger.debug(
            "Permission %s: %s %s", decision.value.upper(), permission.value, resource
        )
        self._audit.record(permission, resource, decision)
        return ok
