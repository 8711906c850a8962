"""In-memory, append-only audit log of permission decisions.

Every call into :class:`~agentbound.box.checker.PermissionChecker` records
exactly one :class:`AuditEntry`, so operators can review afterwards what a
sandboxed server attempted and whether it was allowed.

Appends are serialised with a ``threading.Lock`` so concurrent checks
against one checker never lose or interleave entries.  Readers always get
snapshots (copies), never live views.

The log is unbounded unless ``max_entries`` is given, in which case the
oldest entries are evicted first.

Example
-------
>>> audit = AuditLog()
>>> _ = audit.record("mcp.ac.filesystem.read", "/etc/passwd", "deny")
>>> [e.resource for e in audit.denied()]
['/etc/passwd']
"""
from __future__ import annotations

import json
import threading
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from agentbound.permissions.vocabulary import Permission


class AuditDecision(str, Enum):
    """Outcome of a single permission check."""

    ALLOW = "allow"
    DENY = "deny"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class AuditEntry:
    """One immutable record of a permission-check decision.

    Attributes
    ----------
    timestamp:
        UTC ISO-8601 time the decision was recorded.
    permission:
        Permission string the check was made under.
    resource:
        The concrete resource requested (path, host, port, name, command).
    decision:
        ``allow`` or ``deny``.
    detail:
        Optional explanation, set when a check was denied because the
        permission was never declared.
    """

    timestamp: str
    permission: str
    resource: str
    decision: AuditDecision
    detail: str | None = None

    @property
    def allowed(self) -> bool:
        return self.decision is AuditDecision.ALLOW

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-serialisable dict; ``detail`` is omitted when unset."""
        record: dict[str, object] = {
            "timestamp": self.timestamp,
            "permission": self.permission,
            "resource": self.resource,
            "decision": self.decision.value,
        }
        if self.detail is not None:
            record["detail"] = self.detail
        return record


class AuditLog:
    """Append-only, timestamped record of checker decisions.

    Parameters
    ----------
    max_entries:
        Optional retention bound.  ``None`` keeps every entry for the
        lifetime of the log; a positive integer keeps only the most
        recent ``max_entries`` entries.
    """

    def __init__(self, max_entries: int | None = None) -> None:
        if max_entries is not None and max_entries < 1:
            raise ValueError(f"max_entries must be a positive integer; got {max_entries!r}.")
        self._max_entries = max_entries
        self._entries: deque[AuditEntry] = deque(maxlen=max_entries)
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Write API
    # ------------------------------------------------------------------

    def record(
        self,
        permission: Permission | str,
        resource: str,
        decision: AuditDecision | str,
        detail: str | None = None,
    ) -> AuditEntry:
        """Append a new entry stamped with the current UTC time.

        Returns
        -------
        AuditEntry
            The entry that was appended.
        """
        entry = AuditEntry(
            timestamp=datetime.now(tz=timezone.utc).isoformat(),
            permission=str(permission),
            resource=str(resource),
            decision=AuditDecision(decision),
            detail=detail,
        )
        with self._lock:
            self._entries.append(entry)
        return entry

    def clear(self) -> None:
        """Remove every entry (log rotation)."""
        with self._lock:
            self._entries.clear()

    # ------------------------------------------------------------------
    # Read API
    # ------------------------------------------------------------------

    def all(self) -> list[AuditEntry]:
        """Return a snapshot of all entries in append order."""
        with self._lock:
            return list(self._entries)

    def denied(self) -> list[AuditEntry]:
        """Return a snapshot of deny entries, preserving relative order."""
        with self._lock:
            return [e for e in self._entries if e.decision is AuditDecision.DENY]

    def to_dicts(self) -> list[dict[str, object]]:
        """Return all entries as plain dicts."""
        return [e.to_dict() for e in self.all()]

    def to_json(self, indent: int | None = 2) -> str:
        """Serialise the entry sequence as a JSON array."""
        return json.dumps(self.to_dicts(), indent=indent)

    @property
    def max_entries(self) -> int | None:
        """The retention bound, or ``None`` when unbounded."""
        return self._max_entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
