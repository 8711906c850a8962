"""Exception hierarchy for agentbound.

Denied permission checks are *not* errors: the checker returns ``False``
and records an audit entry.  Exceptions are reserved for malformed calls
into the core and for the manifest and configuration layers.  Process
creation failures are not wrapped; the original :class:`OSError` reaches
the caller.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from agentbound.manifest.schema import ValidationIssue


class AgentBoundError(Exception):
    """Base class for every error raised by agentbound."""


class InvalidArgumentError(AgentBoundError, ValueError):
    """Raised when a call into the core receives malformed input.

    Attributes
    ----------
    argument:
        Name of the offending argument.
    """

    def __init__(self, argument: str, message: str) -> None:
        self.argument = argument
        super().__init__(f"Invalid argument '{argument}': {message}")


class ManifestError(AgentBoundError, ValueError):
    """Raised when an agent manifest cannot be loaded, parsed or validated.

    Attributes
    ----------
    manifest_path:
        The manifest file involved, if any.
    issues:
        Validation issues collected for the manifest (may be empty for
        parse errors).
    """

    def __init__(
        self,
        message: str,
        manifest_path: str | None = None,
        issues: list[ValidationIssue] | None = None,
    ) -> None:
        self.manifest_path = manifest_path
        self.issues: list[ValidationIssue] = list(issues or [])
        prefix = f"[{manifest_path}] " if manifest_path else ""
        super().__init__(f"{prefix}{message}")


class ConfigError(AgentBoundError, ValueError):
    """Raised when an ``agentbound.yaml`` config is malformed or invalid."""

    def __init__(self, message: str, config_path: str | None = None) -> None:
        self.config_path = config_path
        prefix = f"[{config_path}] " if config_path else ""
        super().__init__(f"{prefix}{message}")
