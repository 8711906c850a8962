"""Audit log exporter.

Writes the entries of an in-memory :class:`AuditLog` to JSON, JSONL or
CSV so the presentation layer can persist them after a sandboxed server
exits.

Example
-------
>>> from pathlib import Path
>>> exporter = AuditExporter(box.audit)
>>> exporter.to_csv(Path("/tmp/audit.csv"))
>>> exporter.to_json(Path("/tmp/denied.json"), denied_only=True)
"""
from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Literal

from agentbound.box.audit import AuditLog

ExportFormat = Literal["json", "jsonl", "csv"]

_CSV_FIELDS: list[str] = ["timestamp", "permission", "resource", "decision", "detail"]


class AuditExporter:
    """Exports audit entries to structured file formats.

    Parameters
    ----------
    audit:
        The :class:`AuditLog` to export from.
    """

    def __init__(self, audit: AuditLog) -> None:
        self._audit = audit

    def _records(self, denied_only: bool) -> list[dict[str, object]]:
        entries = self._audit.denied() if denied_only else self._audit.all()
        return [e.to_dict() for e in entries]

    def export(
        self,
        output_path: Path,
        output_format: ExportFormat = "json",
        denied_only: bool = False,
    ) -> int:
        """Export in *output_format*; returns the number of records written."""
        if output_format == "csv":
            return self.to_csv(output_path, denied_only=denied_only)
        if output_format == "jsonl":
            return self.to_jsonl(output_path, denied_only=denied_only)
        return self.to_json(output_path, denied_only=denied_only)

    def to_csv(self, output_path: Path, denied_only: bool = False) -> int:
        """Export entries to a CSV file with a fixed header row."""
        data = self._records(denied_only)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with output_path.open("w", newline="", encoding="utf-8") as fh:
            writer = csv.DictWriter(fh, fieldnames=_CSV_FIELDS, extrasaction="ignore")
            writer.writeheader()
            for record in data:
                writer.writerow(record)
        return len(data)

    def to_json(self, output_path: Path, denied_only: bool = False, indent: int = 2) -> int:
        """Export entries to a formatted JSON array file."""
        data = self._records(denied_only)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with output_path.open("w", encoding="utf-8") as fh:
            json.dump(data, fh, indent=indent)
        return len(data)

    def to_jsonl(self, output_path: Path, denied_only: bool = False) -> int:
        """Export entries as newline-delimited JSON."""
        data = self._records(denied_only)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with output_path.open("w", encoding="utf-8") as fh:
            for record in data:
                fh.write(json.dumps(record) + "\n")
        return len(data)
