"""Manifest file I/O: create, load and save agent manifests.

JSON is the canonical on-disk format.  Files ending in ``.yaml`` or
``.yml`` are read and written with PyYAML so manifests can live beside
an ``agentbound.yaml`` operator config.

Example
-------
::

    manifest = create_manifest(
        "Reads project files and calls one API",
        [Permission.FILESYSTEM_READ, Permission.NETWORK_CLIENT],
    )
    save_manifest(manifest, Path("agent-manifest.json"))
    loaded = load_manifest(Path("agent-manifest.json"))
"""
from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path

import yaml

from agentbound.errors import ManifestError
from agentbound.manifest.schema import AgentManifest, validate_manifest
from agentbound.permissions.vocabulary import Permission

logger = logging.getLogger(__name__)

_YAML_SUFFIXES: frozenset[str] = frozenset([".yaml", ".yml"])


def _is_yaml(path: Path) -> bool:
    return path.suffix.lower() in _YAML_SUFFIXES


def create_manifest(
    description: str,
    permissions: Iterable[Permission | str],
) -> AgentManifest:
    """Build a validated manifest, collapsing duplicate permissions.

    Raises
    ------
    ManifestError
        If the resulting manifest fails validation.
    """
    unique: list[str] = []
    for perm in permissions:
        value = perm.value if isinstance(perm, Permission) else str(perm)
        if value not in unique:
            unique.append(value)

    raw = {"description": description, "permissions": unique}
    result = validate_manifest(raw)
    if not result.valid:
        summary = "; ".join(issue.message for issue in result.issues)
        raise ManifestError(f"Invalid manifest: {summary}", issues=result.issues)
    return AgentManifest.model_validate(raw)


def load_manifest(manifest_path: str | Path) -> AgentManifest:
    """Load and validate a manifest from disk.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ManifestError
        On unparsable content or schema violations.
    """
    manifest_path = Path(manifest_path)
    if not manifest_path.exists():
        raise FileNotFoundError(f"Manifest not found: {manifest_path}")

    text = manifest_path.read_text(encoding="utf-8")
    try:
        if _is_yaml(manifest_path):
            data: object = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ManifestError(
            f"Failed to parse manifest: {exc}", str(manifest_path)
        ) from exc

    result = validate_manifest(data)
    if not result.valid:
        details = "; ".join(f"{i.path}: {i.message}" for i in result.issues)
        raise ManifestError(
            f"Invalid manifest: {details}", str(manifest_path), result.issues
        )

    manifest = AgentManifest.model_validate(data)
    logger.info(
        "Loaded manifest %s with %d permission(s)",
        manifest_path,
        len(manifest.permissions),
    )
    return manifest


def save_manifest(manifest: AgentManifest, manifest_path: str | Path) -> None:
    """Persist a manifest to disk (JSON, or YAML for ``.yaml``/``.yml``)."""
    manifest_path = Path(manifest_path)
    data = manifest.to_dict()
    result = validate_manifest(data)
    if not result.valid:
        summary = "; ".join(issue.message for issue in result.issues)
        raise ManifestError(
            f"Refusing to save invalid manifest: {summary}",
            str(manifest_path),
            result.issues,
        )

    manifest_path.parent.mkdir(parents=True, exist_ok=True)
    with manifest_path.open("w", encoding="utf-8") as fh:
        if _is_yaml(manifest_path):
            yaml.safe_dump(data, fh, default_flow_style=False, sort_keys=False)
        else:
            fh.write(json.dumps(data, indent=2) + "\n")
