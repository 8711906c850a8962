"""Advisory manifest generation from source code.

Produces draft manifests for human review.  Never consulted during
enforcement.
"""
from __future__ import annotations

from agentbound.gen.generator import GenerationResult, collect_source_files, generate_manifest
from agentbound.gen.heuristics import DETECTION_PATTERNS, DetectionResult, detect_permissions

__all__ = [
    "DETECTION_PATTERNS",
    "DetectionResult",
    "GenerationResult",
    "collect_source_files",
    "detect_permissions",
    "generate_manifest",
]
