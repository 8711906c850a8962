"""Tests for agentbound.box.checker."""
from __future__ import annotations

import os
import threading
from pathlib import Path

import pytest

from agentbound.box.audit import AuditDecision, AuditLog
from agentbound.box.checker import PermissionChecker, is_within
from agentbound.box.policy import (
    EffectivePermissions,
    FilesystemScope,
    NetworkScope,
    PolicyOverrides,
    SystemScope,
    resolve_policy,
)
from agentbound.permissions.vocabulary import Permission


def _checker(**scopes: object) -> PermissionChecker:
    return PermissionChecker(EffectivePermissions(**scopes))  # type: ignore[arg-type]


def _run_all_checks(checker: PermissionChecker) -> list[bool]:
    return [
        checker.check_file_read("/data/project/a.txt"),
        checker.check_file_write("/data/project/a.txt"),
        checker.check_file_delete("/data/project/a.txt"),
        checker.check_network_client("api.example.com"),
        checker.check_network_server(8080),
        checker.check_env_read("HOME"),
        checker.check_exec("git"),
    ]


# ---------------------------------------------------------------------------
# is_within
# ---------------------------------------------------------------------------


class TestIsWithin:
    def test_equal_path(self) -> None:
        assert is_within("/data/project", "/data/project")

    def test_descendant(self) -> None:
        assert is_within("/data/project/src/main.py", "/data/project")

    def test_sibling_with_common_prefix(self) -> None:
        assert not is_within("/data/project-evil/x", "/data/project")

    def test_parent_not_within(self) -> None:
        assert not is_within("/data", "/data/project")

    def test_traversal_out_of_root(self) -> None:
        assert not is_within("/data/project/../../etc/passwd", "/data/project")

    def test_nul_byte_never_within(self) -> None:
        assert not is_within("/data/a\x00b", "/data")
        assert not is_within("/data/a", "/data\x00")

    def test_traversal_that_stays_inside(self) -> None:
        assert is_within("/data/project/src/../README.md", "/data/project")

    def test_dot_segments_in_root(self) -> None:
        assert is_within("/data/project/a", "/data/./project/")

    def test_relative_path_resolved_against_cwd(self) -> None:
        assert is_within("some/file.txt", os.getcwd())

    def test_file_named_like_parent_marker(self, tmp_path: Path) -> None:
        assert is_within(str(tmp_path / "..hidden"), str(tmp_path))

    def test_symlink_escaping_root(self, tmp_path: Path) -> None:
        root = tmp_path / "root"
        outside = tmp_path / "outside"
        root.mkdir()
        outside.mkdir()
        link = root / "link"
        try:
            link.symlink_to(outside, target_is_directory=True)
        except (OSError, NotImplementedError):
            pytest.skip("symlinks not supported")
        assert not is_within(str(link / "secret.txt"), str(root))


# ---------------------------------------------------------------------------
# Filesystem checks
# ---------------------------------------------------------------------------


class TestFilesystemChecks:
    def test_scenario_read_scoped_to_project(self) -> None:
        effective = resolve_policy(
            [Permission.FILESYSTEM_READ], PolicyOverrides(read_paths=["/data/project"])
        )
        checker = PermissionChecker(effective)
        assert checker.check_file_read("/data/project/config.json") is True
        assert checker.check_file_read("/etc/passwd") is False

    def test_traversal_string_denied(self) -> None:
        checker = _checker(filesystem=FilesystemScope(read=("/data/project",)))
        assert checker.check_file_read("/data/project/../../etc/passwd") is False

    def test_any_root_allows(self) -> None:
        checker = _checker(filesystem=FilesystemScope(write=("/a", "/b")))
        assert checker.check_file_write("/b/out.txt")
        assert not checker.check_file_write("/c/out.txt")

    def test_absent_action_denied_with_detail(self) -> None:
        checker = _checker(filesystem=FilesystemScope(read=("/data",)))
        assert checker.check_file_write("/data/x") is False
        entry = checker.audit.all()[-1]
        assert entry.permission == Permission.FILESYSTEM_WRITE.value
        assert entry.decision is AuditDecision.DENY
        assert entry.detail == "No filesystem.write permission"

    def test_absent_category_denied(self) -> None:
        checker = _checker()
        assert checker.check_file_delete("/anything") is False
        assert checker.audit.all()[-1].detail == "No filesystem.delete permission"

    def test_empty_root_list_denies(self) -> None:
        checker = _checker(filesystem=FilesystemScope(read=()))
        assert checker.check_file_read("/data/x") is False
        assert checker.audit.all()[-1].detail is None

    def test_nul_byte_path_denied_and_audited(self) -> None:
        checker = _checker(filesystem=FilesystemScope(read=("/data",)))
        assert checker.check_file_read("/data/a\x00b") is False
        entries = checker.audit.all()
        assert len(entries) == 1
        assert entries[0].decision is AuditDecision.DENY
        assert entries[0].resource == "/data/a\x00b"

    def test_accepts_path_objects(self, tmp_path: Path) -> None:
        checker = _checker(filesystem=FilesystemScope(read=(str(tmp_path),)))
        assert checker.check_file_read(tmp_path / "file.txt")
        assert checker.audit.all()[-1].resource == str(tmp_path / "file.txt")

    def test_delete_scope_follows_write_override(self, tmp_path: Path) -> None:
        out = tmp_path / "out"
        effective = resolve_policy(
            [Permission.FILESYSTEM_WRITE, Permission.FILESYSTEM_DELETE],
            PolicyOverrides(write_paths=[str(out)]),
            cwd=str(tmp_path / "elsewhere"),
        )
        checker = PermissionChecker(effective)
        assert checker.check_file_delete(out / "stale.log")
        assert not checker.check_file_delete(tmp_path / "elsewhere" / "x")


# ---------------------------------------------------------------------------
# Network checks
# ---------------------------------------------------------------------------


class TestNetworkChecks:
    def test_scenario_client_wildcard_default(self) -> None:
        checker = PermissionChecker(resolve_policy([Permission.NETWORK_CLIENT]))
        assert checker.check_network_client("anything.example") is True

    @pytest.mark.parametrize("host", ["api.example.com", "localhost", "10.0.0.1", ""])
    def test_absent_hosts_deny_every_host(self, host: str) -> None:
        checker = _checker(network=NetworkScope(listen_ports=(8080,)))
        assert checker.check_network_client(host) is False

    @pytest.mark.parametrize("host", ["api.example.com", "localhost", "10.0.0.1"])
    def test_wildcard_allows_every_host(self, host: str) -> None:
        checker = _checker(network=NetworkScope(allowed_hosts=("*",)))
        assert checker.check_network_client(host) is True

    def test_exact_case_sensitive_match(self) -> None:
        checker = _checker(network=NetworkScope(allowed_hosts=("api.example.com",)))
        assert checker.check_network_client("api.example.com")
        assert not checker.check_network_client("API.example.com")
        assert not checker.check_network_client("evil.api.example.com")

    def test_empty_host_list_allows_nothing(self) -> None:
        checker = _checker(network=NetworkScope(allowed_hosts=()))
        assert checker.check_network_client("api.example.com") is False

    def test_server_port_exact_match(self) -> None:
        checker = _checker(network=NetworkScope(listen_ports=(8080,)))
        assert checker.check_network_server(8080)
        assert not checker.check_network_server(8081)
        assert checker.audit.all()[-1].resource == "8081"

    def test_server_default_grants_no_ports(self) -> None:
        checker = PermissionChecker(resolve_policy([Permission.NETWORK_SERVER]))
        assert checker.check_network_server(3000) is False

    def test_server_absent_detail(self) -> None:
        checker = _checker(network=NetworkScope(allowed_hosts=("*",)))
        assert not checker.check_network_server(80)
        assert checker.audit.all()[-1].detail == "No network.server permission"


# ---------------------------------------------------------------------------
# System checks
# ---------------------------------------------------------------------------


class TestSystemChecks:
    def test_env_read_named_variables_only(self) -> None:
        checker = _checker(system=SystemScope(env_vars=("API_KEY",)))
        assert checker.check_env_read("API_KEY")
        assert not checker.check_env_read("AWS_SECRET_ACCESS_KEY")

    def test_env_read_default_grants_nothing(self) -> None:
        checker = PermissionChecker(resolve_policy([Permission.SYSTEM_ENV_READ]))
        assert checker.check_env_read("HOME") is False

    def test_exec_empty_list_allows_any_command(self) -> None:
        checker = _checker(system=SystemScope(allowed_commands=()))
        assert checker.check_exec("rm") is True
        assert checker.check_exec("curl") is True

    def test_exec_absent_list_denies_every_command(self) -> None:
        checker = _checker(system=SystemScope(env_vars=("HOME",)))
        assert checker.check_exec("ls") is False
        assert checker.audit.all()[-1].detail == "No system.exec permission"

    def test_exec_empty_and_absent_differ(self) -> None:
        empty = _checker(system=SystemScope(allowed_commands=()))
        absent = _checker(system=SystemScope())
        assert empty.check_exec("git") != absent.check_exec("git")

    def test_exec_named_commands(self) -> None:
        checker = _checker(system=SystemScope(allowed_commands=("git", "npm")))
        assert checker.check_exec("git")
        assert not checker.check_exec("bash")


# ---------------------------------------------------------------------------
# Audit behaviour
# ---------------------------------------------------------------------------


class TestCheckerAudit:
    def test_scenario_nothing_declared_denies_everything(self) -> None:
        effective = resolve_policy([])
        assert effective.filesystem is None
        assert effective.network is None
        assert effective.system is None
        checker = PermissionChecker(effective)
        assert _run_all_checks(checker) == [False] * 7
        assert len(checker.audit.denied()) == 7

    def test_one_entry_per_check(self) -> None:
        checker = PermissionChecker(resolve_policy(
            [Permission.FILESYSTEM_READ, Permission.NETWORK_CLIENT], cwd="/data/project"
        ))
        results = _run_all_checks(checker)
        entries = checker.audit.all()
        assert len(entries) == len(results)
        assert [e.allowed for e in entries] == results

    def test_denied_is_ordered_subsequence_of_all(self) -> None:
        checker = PermissionChecker(resolve_policy([Permission.NETWORK_CLIENT]))
        _run_all_checks(checker)
        all_entries = checker.audit.all()
        denied = checker.audit.denied()
        allowed = [e for e in all_entries if e.allowed]
        assert len(denied) + len(allowed) == len(all_entries)
        iterator = iter(all_entries)
        assert all(any(d is e for e in iterator) for d in denied)

    def test_repeated_check_appends_new_entry(self) -> None:
        checker = _checker(network=NetworkScope(allowed_hosts=("a",)))
        first = checker.check_network_client("b")
        second = checker.check_network_client("b")
        assert first == second is False
        assert len(checker.audit) == 2

    def test_checks_after_clear_still_recorded(self) -> None:
        checker = _checker(system=SystemScope(env_vars=("A",)))
        checker.check_env_read("A")
        checker.audit.clear()
        assert checker.audit.all() == []
        checker.check_env_read("B")
        assert [e.resource for e in checker.audit.all()] == ["B"]

    def test_uses_supplied_audit_log(self) -> None:
        audit = AuditLog()
        checker = PermissionChecker(EffectivePermissions(), audit)
        checker.check_exec("ls")
        assert checker.audit is audit
        assert len(audit) == 1

    def test_concurrent_checks_lose_no_entries(self) -> None:
        checker = _checker(network=NetworkScope(allowed_hosts=("*",)))

        def worker(n: int) -> None:
            for i in range(200):
                checker.check_network_client(f"host-{n}-{i}")

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(checker.audit) == 1600
