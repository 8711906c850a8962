"""Agent manifest schema — Pydantic v2 model and validation helpers.

An agent manifest is the declarative document an MCP server ships to
state which *generic* permissions it needs.  Operators review it before
launch and narrow it into effective permissions with
:func:`agentbound.box.policy.resolve_policy`.

Minimal manifest::

    {
      "description": "Filesystem MCP server with read-only access.",
      "permissions": ["mcp.ac.filesystem.read"]
    }

Example
-------
>>> result = validate_manifest({"description": "x", "permissions": ["bogus"]})
>>> result.valid
False
>>> result.issues[0].path
'$.permissions[0]'
"""
from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from agentbound.permissions.vocabulary import ALL_PERMISSIONS, Permission


class AgentManifest(BaseModel):
    """Declared intent of an MCP server: a description plus generic permissions.

    Attributes
    ----------
    description:
        Short English description of the server's purpose.
    permissions:
        Generic permissions drawn from the closed ``mcp.ac.*`` vocabulary.
        Duplicates are rejected.
    """

    model_config = ConfigDict(frozen=True, extra="allow", use_enum_values=False)

    description: str
    permissions: list[Permission] = Field(default_factory=list)

    @field_validator("description")
    @classmethod
    def validate_description(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Must be a non-empty string")
        return value

    @field_validator("permissions")
    @classmethod
    def validate_unique(cls, values: list[Permission]) -> list[Permission]:
        seen: set[Permission] = set()
        for perm in values:
            if perm in seen:
                raise ValueError(f"Duplicate permission '{perm.value}'")
            seen.add(perm)
        return values

    @property
    def permission_set(self) -> frozenset[Permission]:
        """The declared permissions as an unordered set."""
        return frozenset(self.permissions)

    def to_dict(self) -> dict[str, object]:
        """Return the manifest as a JSON-serialisable dict."""
        return {
            "description": self.description,
            "permissions": [p.value for p in self.permissions],
        }


# ---------------------------------------------------------------------------
# Validation result types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ValidationIssue:
    """A single schema violation, located with a JSON-path style string."""

    path: str
    message: str


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of :func:`validate_manifest`."""

    valid: bool
    issues: list[ValidationIssue] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.valid


def _json_path(loc: tuple[int | str, ...]) -> str:
    path = "$"
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}"
    return path


def _issue_message(error: dict[str, object]) -> str:
    kind = error.get("type")
    loc = tuple(error.get("loc", ()))  # type: ignore[arg-type]
    if kind == "model_type":
        return "Manifest must be a JSON object"
    if len(loc) == 2 and loc[0] == "permissions" and not isinstance(error.get("input"), str):
        return "Each permission must be a string"
    if kind == "enum":
        valid = ", ".join(p.value for p in ALL_PERMISSIONS)
        return f"Unknown permission {error.get('input')!r}. Valid: {valid}"
    if kind == "missing":
        if loc and loc[0] == "description":
            return "Must be a non-empty string"
        return "Must be an array of permission strings"
    if kind in ("string_type",) and loc and loc[0] == "description":
        return "Must be a non-empty string"
    if kind == "list_type":
        return "Must be an array of permission strings"
    message = str(error.get("msg", "Invalid value"))
    # Strip pydantic's "Value error, " prefix from custom validator messages.
    return message.removeprefix("Value error, ")


def validate_manifest(data: object) -> ValidationResult:
    """Validate a plain object against the manifest schema.

    Parameters
    ----------
    data:
        Parsed JSON/YAML content (normally a dict).

    Returns
    -------
    ValidationResult
        ``valid`` is True when no issues were found.
    """
    try:
        AgentManifest.model_validate(data)
    except ValidationError as exc:
        issues = [
            ValidationIssue(
                path=_json_path(tuple(err["loc"])),
                message=_issue_message(dict(err)),
            )
            for err in exc.errors()
        ]
        return ValidationResult(valid=False, issues=issues)
    return ValidationResult(valid=True)
