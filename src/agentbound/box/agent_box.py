"""Enforcement facade — resolve, check, audit and launch in one call.

:func:`create_agent_box` resolves the policy once, builds one
:class:`PermissionChecker`/:class:`AuditLog` pair and launches one
sandboxed process.  The returned :class:`AgentBox` keeps all four
together for the lifetime of that process; after ``stop()`` the checker
and audit log stay queryable for post-mortem review.

Example
-------
::

    manifest = load_manifest("agent-manifest.json")
    with create_agent_box(
        manifest,
        ["node", "server.js"],
        overrides=PolicyOverrides(read_paths=["/data/shared"]),
    ) as box:
        box.checker.check_file_read("/data/shared/file.txt")  # True
        box.checker.check_file_read("/etc/passwd")            # False
    box.audit.denied()
"""
from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping, Sequence
from typing import TYPE_CHECKING

from agentbound.box.audit import AuditLog
from agentbound.box.checker import PermissionChecker
from agentbound.box.policy import EffectivePermissions, PolicyOverrides, resolve_policy
from agentbound.box.sandbox import SandboxedProcess, StdioMode, launch_sandbox
from agentbound.permissions.vocabulary import Permission

if TYPE_CHECKING:
    from agentbound.manifest.schema import AgentManifest

logger = logging.getLogger(__name__)


class AgentBox:
    """A launched MCP server bound to its policy, checker and audit log.

    Attributes
    ----------
    sandbox:
        The sandboxed server process.
    checker:
        Runtime checker for dynamic permission checks.
    effective_permissions:
        The resolved scope the server runs under.
    audit:
        Audit log shared with ``checker``.
    """

    def __init__(
        self,
        sandbox: SandboxedProcess,
        checker: PermissionChecker,
        effective_permissions: EffectivePermissions,
        audit: AuditLog,
    ) -> None:
        self.sandbox = sandbox
        self.checker = checker
        self.effective_permissions = effective_permissions
        self.audit = audit

    def stop(self) -> None:
        """Stop the sandboxed server.  Checker and audit log are untouched."""
        self.sandbox.stop()

    def __enter__(self) -> AgentBox:
        return self

    def __exit__(self, *args: object) -> None:
        self.stop()

    def __repr__(self) -> str:
        return f"AgentBox(sandbox={self.sandbox!r}, audit_entries={len(self.audit)})"


def create_agent_box(
    manifest: AgentManifest | Iterable[Permission | str],
    command: Sequence[str],
    *,
    overrides: PolicyOverrides | None = None,
    cwd: str | os.PathLike[str] | None = None,
    stdio: StdioMode = "pipe",
    environ: Mapping[str, str] | None = None,
    audit_max_entries: int | None = None,
) -> AgentBox:
    """Resolve the policy for *manifest* and launch *command* under it.

    Raises
    ------
    InvalidArgumentError
        For an empty command or unknown stdio mode (no process created).
    OSError
        Propagated unchanged from process creation.
    """
    effective = resolve_policy(manifest, overrides)
    audit = AuditLog(max_entries=audit_max_entries)
    checker = PermissionChecker(effective, audit)
    sandbox = launch_sandbox(
        command,
        permissions=effective,
        cwd=cwd,
        stdio=stdio,
        environ=environ,
    )
    logger.info(
        "AgentBox started pid=%d with categories: %s",
        sandbox.pid,
        ", ".join(effective.to_dict()) or "<none>",
    )
    return AgentBox(
        sandbox=sandbox,
        checker=checker,
        effective_permissions=effective,
        audit=audit,
    )
