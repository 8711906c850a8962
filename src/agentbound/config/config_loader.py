"""Operator configuration loader with Pydantic v2 validation.

Loads and validates an ``agentbound.yaml`` file into a typed
:class:`AgentBoundConfig`.  The ``overrides`` section is a
:class:`~agentbound.box.policy.PolicyOverrides` and rejects unknown keys
so a typo never silently widens a scope; other sections tolerate extra
keys for forward compatibility.

Example ``agentbound.yaml``::

    version: "1"
    overrides:
      read_paths: ["/data/project"]
      allowed_hosts: ["api.example.com"]
      env_vars: ["API_KEY"]
    audit:
      max_entries: 10000
      export_path: ./agentbound_audit.json
    sandbox:
      stdio: pipe
    logging:
      level: INFO
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, ValidationError

from agentbound.box.policy import PolicyOverrides
from agentbound.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("agentbound.yaml")


class AuditConfig(BaseModel):
    """Configuration for the in-memory audit log and its export."""

    model_config = {"extra": "allow"}

    max_entries: int | None = Field(default=None, ge=1)
    export_path: Path | None = Field(default=None)
    export_format: Literal["json", "jsonl", "csv"] = Field(default="json")


class SandboxConfig(BaseModel):
    """Configuration for the sandbox launcher."""

    model_config = {"extra": "allow"}

    stdio: Literal["pipe", "inherit"] = Field(default="pipe")
    cwd: Path | None = Field(default=None)


class LoggingConfig(BaseModel):
    """Log level for the ``agentbound`` logger hierarchy."""

    model_config = {"extra": "allow"}

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="WARNING")


class AgentBoundConfig(BaseModel):
    """Top-level operator configuration.

    All sections are optional and fall back to defaults.
    """

    model_config = {"extra": "allow"}

    version: str = Field(default="1")
    overrides: PolicyOverrides = Field(default_factory=PolicyOverrides)
    audit: AuditConfig = Field(default_factory=AuditConfig)
    sandbox: SandboxConfig = Field(default_factory=SandboxConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class ConfigLoader:
    """Loads and validates ``agentbound.yaml`` configuration.

    Example
    -------
    >>> loader = ConfigLoader()
    >>> config = loader.load(Path("agentbound.yaml"))
    """

    def load(self, config_path: Path) -> AgentBoundConfig:
        """Load and validate a YAML config file.

        Raises
        ------
        FileNotFoundError:
            When the config file does not exist.
        ConfigError:
            When the YAML cannot be parsed or fails validation.
        """
        if not config_path.exists():
            raise FileNotFoundError(f"agentbound config not found: {config_path}")

        with config_path.open("r", encoding="utf-8") as fh:
            text = fh.read()
        config = self._parse(text, str(config_path))
        logger.info("Loaded agentbound config from %s", config_path)
        return config

    def load_string(self, yaml_content: str) -> AgentBoundConfig:
        """Load and validate a YAML string directly."""
        return self._parse(yaml_content, None)

    def defaults(self) -> AgentBoundConfig:
        """Return a configuration with all defaults applied."""
        return AgentBoundConfig()

    def _parse(self, yaml_content: str, config_path: str | None) -> AgentBoundConfig:
        try:
            raw: object = yaml.safe_load(yaml_content) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse YAML: {exc}", config_path) from exc

        if not isinstance(raw, dict):
            raise ConfigError("Config must be a YAML mapping.", config_path)

        try:
            return AgentBoundConfig.model_validate(raw)
        except ValidationError as exc:
            raise ConfigError(f"Invalid config: {exc}", config_path) from exc
