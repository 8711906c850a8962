"""AgentBox — policy enforcement for MCP servers.

Turns the declarative intent of an agent manifest into enforceable
boundaries: a resolved :class:`EffectivePermissions` scope, a runtime
:class:`PermissionChecker` with an :class:`AuditLog`, and a sandboxed
process launched with a filtered environment.
"""
from __future__ import annotations

from agentbound.box.agent_box import AgentBox, create_agent_box
from agentbound.box.audit import AuditDecision, AuditEntry, AuditLog
from agentbound.box.checker import PermissionChecker, is_within
from agentbound.box.exporter import AuditExporter
from agentbound.box.policy import (
    EffectivePermissions,
    FilesystemScope,
    NetworkScope,
    PolicyOverrides,
    SystemScope,
    resolve_policy,
)
from agentbound.box.sandbox import (
    ALWAYS_ALLOWED_ENV,
    SAFE_PATH,
    SandboxedProcess,
    build_environment,
    launch_sandbox,
)

__all__ = [
    "ALWAYS_ALLOWED_ENV",
    "AgentBox",
    "AuditDecision",
    "AuditEntry",
    "AuditExporter",
    "AuditLog",
    "EffectivePermissions",
    "FilesystemScope",
    "NetworkScope",
    "PermissionChecker",
    "PolicyOverrides",
    "SAFE_PATH",
    "SandboxedProcess",
    "SystemScope",
    "build_environment",
    "create_agent_box",
    "is_within",
    "launch_sandbox",
    "resolve_policy",
]
