"""agentbound — access control and sandboxing for MCP servers.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> import agentbound as ab
>>> ab.__version__
'0.1.0'
>>> policy = ab.resolve_policy(["mcp.ac.filesystem.read"], cwd="/data/project")
>>> checker = ab.PermissionChecker(policy)
>>> checker.check_file_read("/data/project/README.md")
True
>>> checker.check_file_read("/etc/passwd")
False
"""
from __future__ import annotations

__version__: str = "0.1.0"

# ---------------------------------------------------------------------------
# Permission vocabulary
# ---------------------------------------------------------------------------
from agentbound.permissions.vocabulary import (
    ALL_PERMISSIONS,
    PERMISSION_CATEGORIES,
    PERMISSION_DESCRIPTIONS,
    Permission,
    category_of,
    is_valid_permission,
)

# ---------------------------------------------------------------------------
# Manifests
# ---------------------------------------------------------------------------
from agentbound.manifest.loader import create_manifest, load_manifest, save_manifest
from agentbound.manifest.schema import (
    AgentManifest,
    ValidationIssue,
    ValidationResult,
    validate_manifest,
)

# ---------------------------------------------------------------------------
# Enforcement
# ---------------------------------------------------------------------------
from agentbound.box.policy import (
    EffectivePermissions,
    FilesystemScope,
    NetworkScope,
    PolicyOverrides,
    SystemScope,
    resolve_policy,
)
from agentbound.box.checker import PermissionChecker, is_within
from agentbound.box.audit import AuditDecision, AuditEntry, AuditLog
from agentbound.box.exporter import AuditExporter
from agentbound.box.sandbox import SandboxedProcess, launch_sandbox
from agentbound.box.agent_box import AgentBox, create_agent_box

# ---------------------------------------------------------------------------
# Manifest generation
# ---------------------------------------------------------------------------
from agentbound.gen.generator import GenerationResult, generate_manifest
from agentbound.gen.heuristics import DetectionResult, detect_permissions

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------
from agentbound.config.config_loader import AgentBoundConfig, ConfigLoader

# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------
from agentbound.errors import (
    AgentBoundError,
    ConfigError,
    InvalidArgumentError,
    ManifestError,
)

__all__ = [
    "__version__",
    # Permission vocabulary
    "ALL_PERMISSIONS",
    "PERMISSION_CATEGORIES",
    "PERMISSION_DESCRIPTIONS",
    "Permission",
    "category_of",
    "is_valid_permission",
    # Manifests
    "AgentManifest",
    "ValidationIssue",
    "ValidationResult",
    "create_manifest",
    "load_manifest",
    "save_manifest",
    "validate_manifest",
    # Enforcement
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
    "SandboxedProcess",
    "SystemScope",
    "create_agent_box",
    "is_within",
    "launch_sandbox",
    "resolve_policy",
    # Manifest generation
    "DetectionResult",
    "GenerationResult",
    "detect_permissions",
    "generate_manifest",
    # Configuration
    "AgentBoundConfig",
    "ConfigLoader",
    # Errors
    "AgentBoundError",
    "ConfigError",
    "InvalidArgumentError",
    "ManifestError",
]
