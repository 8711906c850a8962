"""Sandbox launcher — start an MCP server under its effective permissions.

The only OS-enforced boundary is the process environment:

- the child sees only a small always-allowed set of variables plus the
  names granted through ``system.env_vars``;
- when ``system.exec`` was not granted, ``PATH`` is narrowed to the
  standard system binary directories so arbitrary commands cannot be
  found through path search.

Everything else (filesystem, network) is advisory and enforced by a
cooperating caller through :class:`~agentbound.box.checker.PermissionChecker`.
This is not a kernel sandbox: no namespaces, cgroups or seccomp.

Example
-------
::

    proc = launch_sandbox(["node", "server.js"], permissions=effective)
    proc.on_exit(lambda code: print("exited", code))
    ...
    proc.stop()
"""
from __future__ import annotations

import logging
import os
import subprocess
import threading
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import IO, Literal

from agentbound.box.policy import EffectivePermissions
from agentbound.errors import InvalidArgumentError

logger = logging.getLogger(__name__)

StdioMode = Literal["pipe", "inherit"]

ALWAYS_ALLOWED_ENV: frozenset[str] = frozenset(
    ["PATH", "HOME", "USER", "LANG", "TERM", "NODE_ENV"]
)

SAFE_PATH: str = os.pathsep.join(["/usr/local/bin", "/usr/bin", "/bin"])

_STDIO_MODES: frozenset[str] = frozenset(["pipe", "inherit"])

ExitCallback = Callable[[int], None]


# ---------------------------------------------------------------------------
# Environment filtering
# ---------------------------------------------------------------------------


def build_environment(
    permissions: EffectivePermissions,
    environ: Mapping[str, str],
) -> dict[str, str]:
    """Build the child environment from an ambient environment snapshot.

    Parameters
    ----------
    permissions:
        Effective permissions of the process being launched.
    environ:
        Snapshot of the launching process's environment.  Not modified.

    Returns
    -------
    dict[str, str]
        Only the always-allowed names and granted ``env_vars`` that exist
        in *environ*; ``PATH`` replaced by :data:`SAFE_PATH` when exec was
        not granted.
    """
    system = permissions.system
    allowed = set(ALWAYS_ALLOWED_ENV)
    if system is not None and system.env_vars is not None:
        allowed.update(system.env_vars)

    env = {name: environ[name] for name in allowed if name in environ}

    if system is None or system.allowed_commands is None:
        env["PATH"] = SAFE_PATH

    return env


# ---------------------------------------------------------------------------
# Process handle
# ---------------------------------------------------------------------------


class SandboxedProcess:
    """A live OS process bound to the permissions it was launched under.

    ``stop()`` is idempotent and safe to call from several threads.  Exit
    notifications are delivered from a daemon watcher thread, so callers
    never block on the process.
    """

    def __init__(self, process: subprocess.Popen[bytes], permissions: EffectivePermissions) -> None:
        self._process = process
        self._permissions = permissions
        self._lock = threading.Lock()
        self._stopped = False
        self._callbacks: list[ExitCallback] = []
        self._watcher: threading.Thread | None = None

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def process(self) -> subprocess.Popen[bytes]:
        """The underlying :class:`subprocess.Popen` handle."""
        return self._process

    @property
    def permissions(self) -> EffectivePermissions:
        return self._permissions

    @property
    def pid(self) -> int:
        return self._process.pid

    @property
    def returncode(self) -> int | None:
        return self._process.returncode

    @property
    def stdin(self) -> IO[bytes] | None:
        return self._process.stdin

    @property
    def stdout(self) -> IO[bytes] | None:
        return self._process.stdout

    @property
    def stderr(self) -> IO[bytes] | None:
        return self._process.stderr

    @property
    def stopped(self) -> bool:
        """True once :meth:`stop` has sent the termination signal."""
        return self._stopped

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def stop(self) -> None:
        """Send SIGTERM to the process without waiting for it to exit.

        A no-op when already stopped or when the process has exited.
        """
        with self._lock:
            if self._stopped:
                return
            self._stopped = True
            if self._process.poll() is not None:
                return
            try:
                self._process.terminate()
            except ProcessLookupError:
                # Exited between poll() and terminate().
                return
        logger.info("Sent SIGTERM to sandboxed process pid=%d", self._process.pid)

    def poll(self) -> int | None:
        """Return the exit code if the process has exited, else ``None``."""
        return self._process.poll()

    def wait(self, timeout: float | None = None) -> int:
        """Block until the process exits and return its exit code.

        Raises
        ------
        subprocess.TimeoutExpired
            If *timeout* elapses first.
        """
        return self._process.wait(timeout=timeout)

    def on_exit(self, callback: ExitCallback) -> None:
        """Register *callback* to receive the exit code once the process exits.

        Callbacks registered after exit are invoked immediately.
        """
        with self._lock:
            code = self._process.poll()
            if code is None:
                self._callbacks.append(callback)
                if self._watcher is None:
                    self._watcher = threading.Thread(
                        target=self._watch,
                        name=f"agentbound-exit-{self._process.pid}",
                        daemon=True,
                    )
                    self._watcher.start()
                return
        callback(code)

    def _watch(self) -> None:
        code = self._process.wait()
        logger.info("Sandboxed process pid=%d exited with code %d", self._process.pid, code)
        with self._lock:
            callbacks = list(self._callbacks)
            self._callbacks.clear()
        for callback in callbacks:
            try:
                callback(code)
            except Exception:
                logger.exception("Exit callback for pid=%d failed", self._process.pid)

    def __enter__(self) -> SandboxedProcess:
        return self

    def __exit__(self, *args: object) -> None:
        self.stop()

    def __repr__(self) -> str:
        return f"SandboxedProcess(pid={self.pid}, returncode={self.returncode})"


# ---------------------------------------------------------------------------
# Launcher
# ---------------------------------------------------------------------------


def launch_sandbox(
    command: Sequence[str],
    *,
    permissions: EffectivePermissions,
    cwd: str | os.PathLike[str] | None = None,
    stdio: StdioMode = "pipe",
    environ: Mapping[str, str] | None = None,
) -> SandboxedProcess:
    """Start *command* with a filtered environment.

    Parameters
    ----------
    command:
        Non-empty argv, e.g. ``["node", "server.js"]``.
    permissions:
        Effective permissions applied to the process.
    cwd:
        Working directory; defaults to the current working directory.
    stdio:
        ``"pipe"`` (default) gives the caller stdin/stdout/stderr pipes;
        ``"inherit"`` shares the parent's streams.
    environ:
        Ambient environment snapshot to filter.  Defaults to a copy of
        ``os.environ``.

    Raises
    ------
    InvalidArgumentError
        If *command* is empty or a bare string, or *stdio* is unknown.  Raised before any
        process is created.
    OSError
        Propagated unchanged when the process cannot be created (for
        example ``FileNotFoundError`` for a missing executable).
    """
    if isinstance(command, (str, bytes)):
        raise InvalidArgumentError("command", "must be a sequence of arguments, not a string")
    argv = [str(part) for part in command]
    if not argv:
        raise InvalidArgumentError("command", "must contain at least one element")
    if stdio not in _STDIO_MODES:
        raise InvalidArgumentError("stdio", f"expected one of {sorted(_STDIO_MODES)}; got {stdio!r}")

    snapshot = dict(os.environ) if environ is None else environ
    env = build_environment(permissions, snapshot)
    resolved_cwd = str(Path(cwd).resolve()) if cwd is not None else os.getcwd()
    stream = subprocess.PIPE if stdio == "pipe" else None

    process = subprocess.Popen(
        argv,
        cwd=resolved_cwd,
        env=env,
        stdin=stream,
        stdout=stream,
        stderr=stream,
    )
    logger.info(
        "Launched sandboxed process pid=%d argv=%s cwd=%s env_keys=%s",
        process.pid,
        argv,
        resolved_cwd,
        sorted(env),
    )
    return SandboxedProcess(process, permissions)
