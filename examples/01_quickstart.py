#!/usr/bin/env python3
"""Example: Quickstart — agentbound

Minimal working example: declare a manifest, resolve it into an
effective policy, run permission checks and review the audit log.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install agentbound
"""
from __future__ import annotations

import agentbound as ab


def main() -> None:
    print(f"agentbound version: {ab.__version__}")

    # Step 1: The server declares what it needs
    manifest = ab.create_manifest(
        "Project assistant: reads project files and calls one API",
        [ab.Permission.FILESYSTEM_READ, ab.Permission.NETWORK_CLIENT],
    )
    print(f"Manifest declares {len(manifest.permissions)} permission(s)")

    # Step 2: The operator narrows it
    overrides = ab.PolicyOverrides(
        read_paths=["/data/project"],
        allowed_hosts=["api.example.com"],
    )
    effective = ab.resolve_policy(manifest, overrides)
    print(f"Effective policy: {effective.to_dict()}")

    # Step 3: Check concrete accesses
    checker = ab.PermissionChecker(effective)
    checks = [
        ("read", "/data/project/config.json", checker.check_file_read),
        ("read", "/data/project/../../etc/passwd", checker.check_file_read),
        ("connect", "api.example.com", checker.check_network_client),
        ("connect", "evil.example.com", checker.check_network_client),
        ("exec", "sh", checker.check_exec),
    ]
    print("\nPermission checks:")
    for verb, resource, check in checks:
        icon = "ALLOW" if check(resource) else "DENY"
        print(f"  [{icon}] {verb} {resource}")

    # Step 4: Review denials
    print("\nDenied entries:")
    for entry in checker.audit.denied():
        detail = f" ({entry.detail})" if entry.detail else ""
        print(f"  {entry.permission} {entry.resource}{detail}")


if __name__ == "__main__":
    main()
