"""Operator configuration (``agentbound.yaml``)."""
from __future__ import annotations

from agentbound.config.config_loader import (
    DEFAULT_CONFIG_PATH,
    AgentBoundConfig,
    AuditConfig,
    ConfigLoader,
    LoggingConfig,
    SandboxConfig,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "AgentBoundConfig",
    "AuditConfig",
    "ConfigLoader",
    "LoggingConfig",
    "SandboxConfig",
]
