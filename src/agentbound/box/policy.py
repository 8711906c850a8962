"""Policy resolution — narrow generic permissions into effective scopes.

Two layers:

1. **Generic permissions** are declared in the :class:`AgentManifest`
   ("this server reads files").
2. **Effective permissions** are the concrete scopes an operator approves
   at launch ("reads limited to ``/data/project``").

:func:`resolve_policy` combines the two.  A category struct exists on the
result only when one of its permissions was declared; inside a struct a
field is ``None`` when its permission was not declared.  ``None`` always
denies, whereas an empty tuple is a declared-but-empty scope.

Defaults when the operator gives no override:

=====================  ==========================================
permission             default scope
=====================  ==========================================
filesystem.read/write  ``(cwd,)``
filesystem.delete      resolved write scope, else ``(cwd,)``
network.client         ``("*",)`` (any host)
network.server         ``()`` (no ports)
system.env.read        ``()`` (no variables)
system.exec            ``()`` (read by the checker as any command)
=====================  ==========================================

Example
-------
::

    effective = resolve_policy(
        manifest,
        PolicyOverrides(read_paths=["/data/project"], allowed_hosts=["api.example.com"]),
    )
    effective.filesystem.read   # ("/data/project",)
"""
from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, field_validator

from agentbound.permissions.vocabulary import Permission

if TYPE_CHECKING:
    from agentbound.manifest.schema import AgentManifest

logger = logging.getLogger(__name__)

WILDCARD_HOST = "*"


# ---------------------------------------------------------------------------
# Operator overrides
# ---------------------------------------------------------------------------


class PolicyOverrides(BaseModel):
    """Concrete scoping supplied by the operator at launch time.

    Every field is optional.  ``None`` means "use the category default",
    never "deny".
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    read_paths: list[str] | None = Field(default=None)
    write_paths: list[str] | None = Field(default=None)
    delete_paths: list[str] | None = Field(default=None)
    allowed_hosts: list[str] | None = Field(default=None)
    listen_ports: list[int] | None = Field(default=None)
    env_vars: list[str] | None = Field(default=None)
    allowed_commands: list[str] | None = Field(default=None)

    @field_validator("listen_ports")
    @classmethod
    def validate_ports(cls, values: list[int] | None) -> list[int] | None:
        for port in values or []:
            if not 0 <= port <= 65535:
                raise ValueError(f"listen port {port} is outside 0-65535")
        return values

    def merged_with(self, other: PolicyOverrides) -> PolicyOverrides:
        """Return a copy where every field set on *other* replaces ours."""
        update = other.model_dump(exclude_none=True)
        return self.model_copy(update=update)


# ---------------------------------------------------------------------------
# Effective permissions
# ---------------------------------------------------------------------------


def _render(fields: dict[str, tuple[object, ...] | None]) -> dict[str, list[object]]:
    return {name: list(value) for name, value in fields.items() if value is not None}


@dataclass(frozen=True)
class FilesystemScope:
    """Allowed root paths per filesystem action; ``None`` = not declared."""

    read: tuple[str, ...] | None = None
    write: tuple[str, ...] | None = None
    delete: tuple[str, ...] | None = None

    def to_dict(self) -> dict[str, list[object]]:
        return _render({"read": self.read, "write": self.write, "delete": self.delete})


@dataclass(frozen=True)
class NetworkScope:
    """Outbound host allow-list and inbound listen ports."""

    allowed_hosts: tuple[str, ...] | None = None
    listen_ports: tuple[int, ...] | None = None

    def to_dict(self) -> dict[str, list[object]]:
        return _render(
            {"allowed_hosts": self.allowed_hosts, "listen_ports": self.listen_ports}
        )


@dataclass(frozen=True)
class SystemScope:
    """Readable environment variables and spawnable command names."""

    env_vars: tuple[str, ...] | None = None
    allowed_commands: tuple[str, ...] | None = None

    def to_dict(self) -> dict[str, list[object]]:
        return _render(
            {"env_vars": self.env_vars, "allowed_commands": self.allowed_commands}
        )


@dataclass(frozen=True)
class EffectivePermissions:
    """Resolved, immutable scope enforced for one sandboxed process.

    Safe to share across threads without synchronisation.
    """

    filesystem: FilesystemScope | None = None
    network: NetworkScope | None = None
    system: SystemScope | None = None

    @property
    def is_empty(self) -> bool:
        """True when no category struct is present at all."""
        return self.filesystem is None and self.network is None and self.system is None

    def to_dict(self) -> dict[str, dict[str, list[object]]]:
        """Return a JSON-serialisable dict containing only present scopes."""
        result: dict[str, dict[str, list[object]]] = {}
        if self.filesystem is not None:
            result["filesystem"] = self.filesystem.to_dict()
        if self.network is not None:
            result["network"] = self.network.to_dict()
        if self.system is not None:
            result["system"] = self.system.to_dict()
        return result


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


def _declared(manifest: AgentManifest | Iterable[Permission | str]) -> frozenset[Permission]:
    raw = getattr(manifest, "permissions", manifest)
    return frozenset(Permission(p) for p in raw)


def _pick(override: list[str] | None, default: tuple[str, ...]) -> tuple[str, ...]:
    return tuple(override) if override is not None else default


def resolve_policy(
    manifest: AgentManifest | Iterable[Permission | str],
    overrides: PolicyOverrides | None = None,
    *,
    cwd: str | None = None,
) -> EffectivePermissions:
    """Resolve generic permissions plus operator overrides into effective scopes.

    Parameters
    ----------
    manifest:
        An :class:`AgentManifest`, or any iterable of permissions.
    overrides:
        Operator scoping.  ``None`` applies every category default.
    cwd:
        Directory used for filesystem defaults.  Defaults to the current
        working directory.

    Returns
    -------
    EffectivePermissions
    """
    perms = _declared(manifest)
    if overrides is None:
        overrides = PolicyOverrides()
    here = (cwd if cwd is not None else os.getcwd(),)

    filesystem: FilesystemScope | None = None
    if perms & {
        Permission.FILESYSTEM_READ,
        Permission.FILESYSTEM_WRITE,
        Permission.FILESYSTEM_DELETE,
    }:
        read = (
            _pick(overrides.read_paths, here)
            if Permission.FILESYSTEM_READ in perms
            else None
        )
        write = (
            _pick(overrides.write_paths, here)
            if Permission.FILESYSTEM_WRITE in perms
            else None
        )
        delete = None
        if Permission.FILESYSTEM_DELETE in perms:
            # Delete inherits the resolved write scope by default.
            delete = _pick(overrides.delete_paths, write if write is not None else here)
        filesystem = FilesystemScope(read=read, write=write, delete=delete)

    network: NetworkScope | None = None
    if perms & {Permission.NETWORK_CLIENT, Permission.NETWORK_SERVER}:
        network = NetworkScope(
            allowed_hosts=(
                _pick(overrides.allowed_hosts, (WILDCARD_HOST,))
                if Permission.NETWORK_CLIENT in perms
                else None
            ),
            listen_ports=(
                tuple(overrides.listen_ports or ())
                if Permission.NETWORK_SERVER in perms
                else None
            ),
        )

    system: SystemScope | None = None
    if perms & {Permission.SYSTEM_ENV_READ, Permission.SYSTEM_EXEC}:
        system = SystemScope(
            env_vars=(
                _pick(overrides.env_vars, ())
                if Permission.SYSTEM_ENV_READ in perms
                else None
            ),
            allowed_commands=(
                _pick(overrides.allowed_commands, ())
                if Permission.SYSTEM_EXEC in perms
                else None
            ),
        )

    effective = EffectivePermissions(filesystem=filesystem, network=network, system=system)
    logger.info(
        "Resolved %d declared permission(s) into categories: %s",
        len(perms),
        ", ".join(effective.to_dict()) or "<none>",
    )
    return effective
