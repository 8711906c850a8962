"""Draft manifest generation from an MCP server's source tree.

Two stages:

1. **Source analysis** — :func:`~agentbound.gen.heuristics.detect_permissions`
   on every source file.
2. **Manifest assembly** — merge detections per permission and build a
   validated :class:`AgentManifest` for a developer to review.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from agentbound.gen.heuristics import DetectionResult, detect_permissions
from agentbound.manifest.loader import create_manifest
from agentbound.manifest.schema import AgentManifest
from agentbound.permissions.vocabulary import ALL_PERMISSIONS, Permission

logger = logging.getLogger(__name__)

SOURCE_EXTENSIONS: frozenset[str] = frozenset(
    [".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs", ".py", ".go", ".rs"]
)

IGNORE_DIRS: frozenset[str] = frozenset(
    [
        "node_modules",
        ".git",
        "dist",
        "build",
        "out",
        ".next",
        "__pycache__",
        "vendor",
        "target",
    ]
)

DEFAULT_DESCRIPTION = (
    "MCP server (auto-generated manifest, replace with a meaningful description)"
)


@dataclass
class GenerationResult:
    """Draft manifest plus the evidence it was derived from."""

    manifest: AgentManifest
    detections: list[DetectionResult] = field(default_factory=list)
    files_scanned: int = 0


def collect_source_files(root_dir: Path) -> list[Path]:
    """Return source files under *root_dir*, skipping build and vendor dirs."""
    files: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root_dir):
        dirnames[:] = sorted(d for d in dirnames if d not in IGNORE_DIRS)
        for name in sorted(filenames):
            if Path(name).suffix in SOURCE_EXTENSIONS:
                files.append(Path(dirpath) / name)
    return files


def generate_manifest(
    root_dir: str | Path,
    description: str | None = None,
) -> GenerationResult:
    """Analyse *root_dir* and generate a draft manifest.

    Parameters
    ----------
    root_dir:
        Path to the MCP server source tree.
    description:
        Server description.  A placeholder is used when omitted.

    Raises
    ------
    NotADirectoryError
        If *root_dir* is not a directory.
    """
    root = Path(root_dir)
    if not root.is_dir():
        raise NotADirectoryError(f"Not a directory: {root}")

    files = collect_source_files(root)
    merged: dict[Permission, DetectionResult] = {}

    for path in files:
        content = path.read_text(encoding="utf-8", errors="replace")
        for detection in detect_permissions(content):
            existing = merged.get(detection.permission)
            if existing is None:
                merged[detection.permission] = DetectionResult(
                    permission=detection.permission,
                    rationale=detection.rationale,
                    match_count=detection.match_count,
                )
            else:
                existing.match_count += detection.match_count

    ordered = [merged[p] for p in ALL_PERMISSIONS if p in merged]
    manifest = create_manifest(
        description or DEFAULT_DESCRIPTION,
        [d.permission for d in ordered],
    )
    logger.info(
        "Scanned %d source file(s) under %s; detected %d permission(s)",
        len(files),
        root,
        len(ordered),
    )
    return GenerationResult(manifest=manifest, detections=ordered, files_scanned=len(files))
