"""Agent manifests: the declared, generic permission set of an MCP server.

Example
-------
::

    from agentbound.manifest import load_manifest

    manifest = load_manifest("agent-manifest.json")
    manifest.permission_set
"""
from __future__ import annotations

from agentbound.manifest.loader import create_manifest, load_manifest, save_manifest
from agentbound.manifest.schema import (
    AgentManifest,
    ValidationIssue,
    ValidationResult,
    validate_manifest,
)

__all__ = [
    "AgentManifest",
    "ValidationIssue",
    "ValidationResult",
    "create_manifest",
    "load_manifest",
    "save_manifest",
    "validate_manifest",
]
