"""Tests for agentbound.box.exporter."""
from __future__ import annotations

import csv
import json
from pathlib import Path

import pytest

from agentbound.box.audit import AuditLog
from agentbound.box.exporter import AuditExporter


@pytest.fixture()
def audit() -> AuditLog:
    log = AuditLog()
    log.record("mcp.ac.filesystem.read", "/data/a.txt", "allow")
    log.record("mcp.ac.system.exec", "rm", "deny", "No system.exec permission")
    log.record("mcp.ac.network.client", "evil.example.com", "deny")
    return log


@pytest.fixture()
def exporter(audit: AuditLog) -> AuditExporter:
    return AuditExporter(audit)


class TestToJson:
    def test_writes_all_entries(self, exporter: AuditExporter, tmp_path: Path) -> None:
        out = tmp_path / "audit.json"
        assert exporter.to_json(out) == 3
        data = json.loads(out.read_text(encoding="utf-8"))
        assert [r["decision"] for r in data] == ["allow", "deny", "deny"]

    def test_denied_only(self, exporter: AuditExporter, tmp_path: Path) -> None:
        out = tmp_path / "denied.json"
        assert exporter.to_json(out, denied_only=True) == 2
        data = json.loads(out.read_text(encoding="utf-8"))
        assert data[0]["detail"] == "No system.exec permission"
        assert "detail" not in data[1]

    def test_creates_parent_dirs(self, exporter: AuditExporter, tmp_path: Path) -> None:
        out = tmp_path / "nested" / "dir" / "audit.json"
        exporter.to_json(out)
        assert out.exists()


class TestToJsonl:
    def test_one_record_per_line(self, exporter: AuditExporter, tmp_path: Path) -> None:
        out = tmp_path / "audit.jsonl"
        assert exporter.to_jsonl(out) == 3
        lines = out.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 3
        assert json.loads(lines[2])["resource"] == "evil.example.com"


class TestToCsv:
    def test_header_and_rows(self, exporter: AuditExporter, tmp_path: Path) -> None:
        out = tmp_path / "audit.csv"
        assert exporter.to_csv(out) == 3
        with out.open(encoding="utf-8", newline="") as fh:
            rows = list(csv.DictReader(fh))
        assert list(rows[0]) == ["timestamp", "permission", "resource", "decision", "detail"]
        assert rows[1]["detail"] == "No system.exec permission"
        assert rows[0]["detail"] == ""

    def test_empty_log_writes_header_only(self, tmp_path: Path) -> None:
        out = tmp_path / "empty.csv"
        assert AuditExporter(AuditLog()).to_csv(out) == 0
        assert out.read_text(encoding="utf-8").strip() == (
            "timestamp,permission,resource,decision,detail"
        )


class TestExport:
    @pytest.mark.parametrize("fmt", ["json", "jsonl", "csv"])
    def test_dispatches_by_format(
        self, exporter: AuditExporter, tmp_path: Path, fmt: str
    ) -> None:
        out = tmp_path / f"audit.{fmt}"
        assert exporter.export(out, fmt) == 3  # type: ignore[arg-type]
        assert out.stat().st_size > 0

    def test_export_denied_only(self, exporter: AuditExporter, tmp_path: Path) -> None:
        assert exporter.export(tmp_path / "d.jsonl", "jsonl", denied_only=True) == 2
