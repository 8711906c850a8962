#!/usr/bin/env python3
"""Example: Run an MCP server inside an AgentBox

Launches a child process with a filtered environment, shows which
variables it could see, then stops it and exports the audit log.

Usage:
    API_KEY=demo SECRET_TOKEN=hidden python examples/02_run_sandboxed.py

Requirements:
    pip install agentbound
"""
from __future__ import annotations

import json
import sys
import tempfile
from pathlib import Path

import agentbound as ab

_CHILD = "import json, os; print(json.dumps(sorted(os.environ)))"


def main() -> None:
    manifest = ab.create_manifest(
        "Demo server that reads one API key",
        [ab.Permission.SYSTEM_ENV_READ],
    )

    with ab.create_agent_box(
        manifest,
        [sys.executable, "-c", _CHILD],
        overrides=ab.PolicyOverrides(env_vars=["API_KEY"]),
    ) as box:
        out, _ = box.sandbox.process.communicate(timeout=30)
        print(f"Child pid {box.sandbox.pid} saw: {json.loads(out)}")

        box.checker.check_env_read("API_KEY")
        box.checker.check_env_read("SECRET_TOKEN")

    print(f"Exit code: {box.sandbox.returncode}")

    out_path = Path(tempfile.gettempdir()) / "agentbound_audit.json"
    count = ab.AuditExporter(box.audit).to_json(out_path)
    print(f"Exported {count} audit entries to {out_path}")


if __name__ == "__main__":
    main()
