"""Test that the top-level quickstart API works for agentbound."""
from __future__ import annotations


def test_quickstart_import() -> None:
    import agentbound

    assert agentbound.__version__ == "0.1.0"


def test_quickstart_resolve_and_check() -> None:
    import agentbound as ab

    manifest = ab.create_manifest("reader", [ab.Permission.FILESYSTEM_READ])
    checker = ab.PermissionChecker(
        ab.resolve_policy(manifest, ab.PolicyOverrides(read_paths=["/data/project"]))
    )
    assert checker.check_file_read("/data/project/config.json") is True
    assert checker.check_file_read("/etc/passwd") is False


def test_quickstart_public_names_importable() -> None:
    import agentbound

    for name in agentbound.__all__:
        assert hasattr(agentbound, name), name


def test_quickstart_errors_share_base() -> None:
    import agentbound as ab

    for error in (ab.ConfigError, ab.InvalidArgumentError, ab.ManifestError):
        assert issubclass(error, ab.AgentBoundError)
