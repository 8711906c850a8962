"""Tests for agentbound.manifest.schema."""
from __future__ import annotations

import pydantic
import pytest

from agentbound.manifest.schema import AgentManifest, ValidationIssue, validate_manifest
from agentbound.permissions.vocabulary import Permission


# ---------------------------------------------------------------------------
# AgentManifest
# ---------------------------------------------------------------------------


class TestAgentManifest:
    def test_parses_permission_strings(self) -> None:
        manifest = AgentManifest.model_validate(
            {"description": "reader", "permissions": ["mcp.ac.filesystem.read"]}
        )
        assert manifest.permissions == [Permission.FILESYSTEM_READ]

    def test_permission_set(self) -> None:
        manifest = AgentManifest(
            description="x",
            permissions=[Permission.NETWORK_CLIENT, Permission.SYSTEM_EXEC],
        )
        assert manifest.permission_set == frozenset(
            {Permission.NETWORK_CLIENT, Permission.SYSTEM_EXEC}
        )

    def test_permissions_default_to_empty(self) -> None:
        assert AgentManifest(description="x").permissions == []

    def test_is_frozen(self) -> None:
        manifest = AgentManifest(description="x")
        with pytest.raises(pydantic.ValidationError):
            manifest.description = "y"  # type: ignore[misc]

    def test_extra_keys_preserved(self) -> None:
        manifest = AgentManifest.model_validate(
            {"description": "x", "permissions": [], "$schema": "https://example.com/s.json"}
        )
        assert manifest.model_extra == {"$schema": "https://example.com/s.json"}

    def test_to_dict_uses_string_values(self) -> None:
        manifest = AgentManifest(description="x", permissions=[Permission.SYSTEM_ENV_READ])
        assert manifest.to_dict() == {
            "description": "x",
            "permissions": ["mcp.ac.system.env.read"],
        }


# ---------------------------------------------------------------------------
# validate_manifest
# ---------------------------------------------------------------------------


class TestValidateManifest:
    def test_valid_manifest(self) -> None:
        result = validate_manifest(
            {
                "description": "Filesystem server",
                "permissions": ["mcp.ac.filesystem.read", "mcp.ac.filesystem.write"],
            }
        )
        assert result.valid
        assert result.issues == []
        assert bool(result) is True

    def test_non_object_rejected(self) -> None:
        result = validate_manifest(["mcp.ac.filesystem.read"])
        assert not result.valid
        assert result.issues[0] == ValidationIssue("$", "Manifest must be a JSON object")

    def test_missing_description(self) -> None:
        result = validate_manifest({"permissions": []})
        assert not result.valid
        assert result.issues[0].path == "$.description"
        assert result.issues[0].message == "Must be a non-empty string"

    def test_blank_description(self) -> None:
        result = validate_manifest({"description": "   ", "permissions": []})
        assert not result.valid
        assert result.issues[0].path == "$.description"
        assert result.issues[0].message == "Must be a non-empty string"

    def test_non_string_description(self) -> None:
        result = validate_manifest({"description": 42, "permissions": []})
        assert not result.valid
        assert result.issues[0].message == "Must be a non-empty string"

    def test_permissions_not_a_list(self) -> None:
        result = validate_manifest({"description": "x", "permissions": "mcp.ac.system.exec"})
        assert not result.valid
        assert result.issues[0].path == "$.permissions"
        assert result.issues[0].message == "Must be an array of permission strings"

    def test_unknown_permission_located_by_index(self) -> None:
        result = validate_manifest(
            {"description": "x", "permissions": ["mcp.ac.filesystem.read", "mcp.ac.gpu"]}
        )
        assert not result.valid
        assert len(result.issues) == 1
        assert result.issues[0].path == "$.permissions[1]"
        assert "Unknown permission 'mcp.ac.gpu'" in result.issues[0].message

    @pytest.mark.parametrize("entry", [42, None, ["mcp.ac.system.exec"]])
    def test_non_string_permission(self, entry: object) -> None:
        result = validate_manifest({"description": "x", "permissions": ["mcp.ac.system.exec", entry]})
        assert not result.valid
        assert result.issues == [
            ValidationIssue("$.permissions[1]", "Each permission must be a string")
        ]

    def test_duplicate_permission(self) -> None:
        result = validate_manifest(
            {
                "description": "x",
                "permissions": ["mcp.ac.system.exec", "mcp.ac.system.exec"],
            }
        )
        assert not result.valid
        assert result.issues[0].path == "$.permissions"
        assert result.issues[0].message == "Duplicate permission 'mcp.ac.system.exec'"

    def test_multiple_issues_collected(self) -> None:
        result = validate_manifest({"description": "", "permissions": ["nope"]})
        paths = {issue.path for issue in result.issues}
        assert paths == {"$.description", "$.permissions[0]"}
