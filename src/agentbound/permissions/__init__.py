"""Permission vocabulary (``mcp.ac.<category>.<action>``)."""
from __future__ import annotations

from agentbound.permissions.vocabulary import (
    ALL_PERMISSIONS,
    PERMISSION_CATEGORIES,
    PERMISSION_DESCRIPTIONS,
    Permission,
    category_of,
    is_valid_permission,
)

__all__ = [
    "ALL_PERMISSIONS",
    "PERMISSION_CATEGORIES",
    "PERMISSION_DESCRIPTIONS",
    "Permission",
    "category_of",
    "is_valid_permission",
]
