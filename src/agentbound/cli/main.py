"""CLI entry point for agentbound.

Invoked as::

    agentbound [OPTIONS] COMMAND [ARGS]...

or during development::

    python -m agentbound.cli.main

Commands
--------
- permissions  List the permission vocabulary
- validate     Validate an agent manifest
- inspect      Show a manifest and its effective policy
- generate     Draft a manifest from an MCP server source tree
- run          Launch an MCP server inside an AgentBox
- version      Show version information
"""
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from agentbound.box.exporter import AuditExporter
from agentbound.box.policy import PolicyOverrides, resolve_policy
from agentbound.config.config_loader import DEFAULT_CONFIG_PATH, AgentBoundConfig, ConfigLoader
from agentbound.errors import ConfigError, ManifestError
from agentbound.manifest.loader import load_manifest, save_manifest
from agentbound.manifest.schema import AgentManifest
from agentbound.permissions.vocabulary import (
    ALL_PERMISSIONS,
    PERMISSION_DESCRIPTIONS,
    category_of,
)

console = Console()
err_console = Console(stderr=True)

_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]
_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_config_option = click.option(
    "--config",
    "-c",
    "config_path",
    default=str(DEFAULT_CONFIG_PATH),
    show_default=True,
    type=click.Path(),
    help="Path to agentbound.yaml.",
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_config(ctx: click.Context, config_path: str) -> AgentBoundConfig:
    """Load the config (or defaults) and apply its log level unless overridden."""
    loader = ConfigLoader()
    cfg_path = Path(config_path)
    try:
        config = loader.load(cfg_path) if cfg_path.exists() else loader.defaults()
    except ConfigError as exc:
        err_console.print(f"[red]Config error:[/red] {escape(str(exc))}")
        sys.exit(1)

    if ctx.find_root().obj.get("log_level") is None:
        logging.getLogger("agentbound").setLevel(config.logging.level)
    return config


def _load_manifest_or_exit(manifest_path: str) -> AgentManifest:
    try:
        return load_manifest(Path(manifest_path))
    except ManifestError as exc:
        err_console.print(f"[red]Invalid manifest:[/red] {escape(str(exc))}")
        sys.exit(1)


def _cli_overrides(
    read_paths: tuple[str, ...],
    write_paths: tuple[str, ...],
    delete_paths: tuple[str, ...],
    hosts: tuple[str, ...],
    ports: tuple[int, ...],
    env_vars: tuple[str, ...],
    commands: tuple[str, ...],
) -> PolicyOverrides:
    """Build overrides from repeatable CLI flags; unset flags stay ``None``."""
    return PolicyOverrides(
        read_paths=list(read_paths) or None,
        write_paths=list(write_paths) or None,
        delete_paths=list(delete_paths) or None,
        allowed_hosts=list(hosts) or None,
        listen_ports=list(ports) or None,
        env_vars=list(env_vars) or None,
        allowed_commands=list(commands) or None,
    )


# ---------------------------------------------------------------------------
# Root command group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="agentbound")
@click.option(
    "--log-level",
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Log level for agentbound (defaults to the config file, else WARNING).",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """AgentBound CLI — manifests, policies and sandboxed MCP servers."""
    ctx.ensure_object(dict)
    ctx.obj["log_level"] = log_level
    logging.basicConfig(format=_LOG_FORMAT)
    logging.getLogger("agentbound").setLevel((log_level or "WARNING").upper())


# ---------------------------------------------------------------------------
# version
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from agentbound import __version__

    console.print(
        Panel(
            f"[bold]agentbound[/bold]  v[cyan]{__version__}[/cyan]\n"
            "Access control and sandboxing for MCP servers.",
            title="Version",
            border_style="blue",
        )
    )


# ---------------------------------------------------------------------------
# permissions
# ---------------------------------------------------------------------------


@cli.command(name="permissions")
def permissions_command() -> None:
    """List every permission in the vocabulary."""
    table = Table(title="AgentBound Permissions", box=box.SIMPLE)
    table.add_column("Permission", style="cyan", no_wrap=True)
    table.add_column("Category", style="magenta")
    table.add_column("Description")

    for perm in ALL_PERMISSIONS:
        table.add_row(perm.value, category_of(perm), PERMISSION_DESCRIPTIONS[perm])

    console.print(table)


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------


@cli.command(name="validate")
@click.argument("manifest_path", type=click.Path(exists=True, dir_okay=False))
def validate_command(manifest_path: str) -> None:
    """Validate an agent manifest (JSON or YAML)."""
    try:
        manifest = load_manifest(Path(manifest_path))
    except ManifestError as exc:
        console.print(Panel("[red]INVALID[/red]", title="Manifest Validation", border_style="blue"))
        if exc.issues:
            table = Table(title="Issues", box=box.SIMPLE)
            table.add_column("Path", style="cyan")
            table.add_column("Message")
            for issue in exc.issues:
                table.add_row(escape(issue.path), escape(issue.message))
            console.print(table)
        else:
            console.print(f"  {escape(str(exc))}")
        sys.exit(1)

    console.print(Panel("[green]VALID[/green]", title="Manifest Validation", border_style="blue"))
    console.print(f"  Permissions: [cyan]{len(manifest.permissions)}[/cyan]")
    sys.exit(0)


# ---------------------------------------------------------------------------
# inspect
# ---------------------------------------------------------------------------


@cli.command(name="inspect")
@click.argument("manifest_path", type=click.Path(exists=True, dir_okay=False))
@_config_option
@click.pass_context
def inspect_command(ctx: click.Context, manifest_path: str, config_path: str) -> None:
    """Show a manifest's permissions and the effective policy they resolve to."""
    config = _load_config(ctx, config_path)
    manifest = _load_manifest_or_exit(manifest_path)

    console.print(Panel(escape(manifest.description), title="Description", border_style="blue"))

    table = Table(title="Declared Permissions", box=box.SIMPLE)
    table.add_column("Permission", style="cyan", no_wrap=True)
    table.add_column("Description")
    for perm in manifest.permissions:
        table.add_row(perm.value, PERMISSION_DESCRIPTIONS[perm])
    console.print(table)

    cwd = str(config.sandbox.cwd) if config.sandbox.cwd is not None else None
    effective = resolve_policy(manifest, config.overrides, cwd=cwd)
    console.print("[bold]Effective policy[/bold]")
    console.print_json(json.dumps(effective.to_dict()))


# ---------------------------------------------------------------------------
# generate
# ---------------------------------------------------------------------------


@cli.command(name="generate")
@click.argument("source_dir", type=click.Path(exists=True, file_okay=False))
@click.option("--output", "-o", "output_file", default=None, type=click.Path(), help="Write the manifest here.")
@click.option("--description", "-d", default=None, help="Server description for the manifest.")
def generate_command(source_dir: str, output_file: str | None, description: str | None) -> None:
    """Draft a manifest by scanning an MCP server's source code."""
    from agentbound.gen.generator import generate_manifest

    result = generate_manifest(Path(source_dir), description)

    table = Table(title="Detected Permissions", box=box.SIMPLE)
    table.add_column("Permission", style="cyan", no_wrap=True)
    table.add_column("Matches", style="bold", justify="right")
    table.add_column("Rationale")
    for detection in result.detections:
        table.add_row(detection.permission.value, str(detection.match_count), detection.rationale)
    console.print(table)
    console.print(f"  Files scanned: [cyan]{result.files_scanned}[/cyan]")

    if output_file is None:
        console.print_json(json.dumps(result.manifest.to_dict()))
        return

    out_path = Path(output_file)
    save_manifest(result.manifest, out_path)
    console.print(f"[green]Wrote[/green] draft manifest to [bold]{out_path}[/bold] (review before use).")


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------


@cli.command(
    name="run",
    context_settings={"ignore_unknown_options": True},
)
@click.argument("manifest_path", type=click.Path(exists=True, dir_okay=False))
@_config_option
@click.option("--read-path", "read_paths", multiple=True, help="Allowed read root (repeatable).")
@click.option("--write-path", "write_paths", multiple=True, help="Allowed write root (repeatable).")
@click.option("--delete-path", "delete_paths", multiple=True, help="Allowed delete root (repeatable).")
@click.option("--host", "hosts", multiple=True, help="Allowed outbound host (repeatable).")
@click.option("--port", "ports", multiple=True, type=click.IntRange(0, 65535), help="Allowed listen port (repeatable).")
@click.option("--env", "env_vars", multiple=True, help="Environment variable to pass through (repeatable).")
@click.option("--allow-command", "commands", multiple=True, help="Allowed command name (repeatable).")
@click.option("--audit-output", default=None, type=click.Path(), help="Export the audit log here on exit.")
@click.argument("command", nargs=-1, required=True, type=click.UNPROCESSED)
@click.pass_context
def run_command(
    ctx: click.Context,
    manifest_path: str,
    config_path: str,
    read_paths: tuple[str, ...],
    write_paths: tuple[str, ...],
    delete_paths: tuple[str, ...],
    hosts: tuple[str, ...],
    ports: tuple[int, ...],
    env_vars: tuple[str, ...],
    commands: tuple[str, ...],
    audit_output: str | None,
    command: tuple[str, ...],
) -> None:
    """Launch COMMAND as an MCP server bound to MANIFEST.

    Separate the server command with ``--``, e.g.
    ``agentbound run manifest.json --host api.example.com -- node server.js``.
    Flags override the ``overrides`` section of the config file.  Exits
    with the server's exit code.
    """
    from agentbound.box.agent_box import create_agent_box

    config = _load_config(ctx, config_path)
    manifest = _load_manifest_or_exit(manifest_path)
    overrides = config.overrides.merged_with(
        _cli_overrides(read_paths, write_paths, delete_paths, hosts, ports, env_vars, commands)
    )

    try:
        agent_box = create_agent_box(
            manifest,
            list(command),
            overrides=overrides,
            cwd=config.sandbox.cwd,
            stdio="inherit",
            audit_max_entries=config.audit.max_entries,
        )
    except OSError as exc:
        err_console.print(f"[red]Failed to launch[/red] {escape(command[0])}: {escape(str(exc))}")
        sys.exit(127)

    try:
        exit_code = agent_box.sandbox.wait()
    except KeyboardInterrupt:
        agent_box.stop()
        exit_code = agent_box.sandbox.wait()

    denied = agent_box.audit.denied()
    if denied:
        table = Table(title="Denied Operations", box=box.SIMPLE)
        table.add_column("Timestamp", style="dim", no_wrap=True)
        table.add_column("Permission", style="cyan")
        table.add_column("Resource")
        table.add_column("Detail", style="red")
        for entry in denied:
            ts = entry.timestamp[:19].replace("T", " ")
            table.add_row(ts, entry.permission, escape(entry.resource), entry.detail or "")
        err_console.print(table)

    export_target = audit_output or config.audit.export_path
    if export_target is not None:
        out_path = Path(export_target)
        count = AuditExporter(agent_box.audit).export(out_path, config.audit.export_format)
        err_console.print(f"[green]Exported[/green] {count} audit entries to [bold]{out_path}[/bold].")

    # Killed by signal N: report 128+N like a shell.
    sys.exit(128 - exit_code if exit_code < 0 else exit_code)


if __name__ == "__main__":
    cli()
