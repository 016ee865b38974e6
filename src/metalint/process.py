# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Run checker command templates through the platform shell."""

from __future__ import annotations

import os

# Bandit: shell execution is the contract here; command templates come from
# the merged tool configuration, not from tool output.
import signal
import subprocess  # nosec B404
from threading import Lock
from typing import Any, Final

from .logging import CLILogger
from .models import PATH_PLACEHOLDER

POSIX_SHELL: Final[tuple[str, str]] = ("/bin/sh", "-c")
WINDOWS_SHELL: Final[tuple[str, str]] = ("cmd", "/C")


def shell_command(command: str, *, platform_name: str | None = None) -> list[str]:
    """Return the argv that runs ``command`` through the platform shell.

    Args:
        command: Fully expanded command line.
        platform_name: ``os.name`` override used by tests.

    Returns:
        list[str]: Interpreter, its command flag, and ``command``.
    """

    name = os.name if platform_name is None else platform_name
    interpreter, flag = WINDOWS_SHELL if name == "nt" else POSIX_SHELL
    return [interpreter, flag, command]


def expand_command(template: str, target_path: str) -> str:
    """Return ``template`` with every ``{path}`` placeholder replaced.

    Args:
        template: Command template from the tool configuration.
        target_path: Literal path substituted for the placeholder.

    Returns:
        str: Command ready to hand to the shell.
    """

    return template.replace(PATH_PLACEHOLDER, target_path)


def _group_options(platform_name: str) -> dict[str, Any]:
    # Each checker leads its own process group so the shell's children can be
    # killed together with it.
    if platform_name == "nt":
        return {"creationflags": subprocess.CREATE_NEW_PROCESS_GROUP}
    return {"start_new_session": True}


def kill_process_group(process: subprocess.Popen[bytes], *, platform_name: str | None = None) -> None:
    """Kill ``process`` and every command it spawned in its process group.

    Args:
        process: Shell process started as a process-group leader.
        platform_name: ``os.name`` override used by tests.
    """

    name = os.name if platform_name is None else platform_name
    if name == "nt":
        if process.poll() is None:
            process.kill()
        return
    try:
        os.killpg(process.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass


class ToolInvoker:
    """Spawn checker commands and capture their combined output.

    Live processes are tracked so :meth:`terminate_all` can stop every running
    checker when the run is aborted.
    """

    def __init__(self, logger: CLILogger) -> None:
        """Initialise the invoker.

        Args:
            logger: Diagnostic logger receiving exit and launch notices.
        """

        self._logger = logger
        self._lock = Lock()
        self._live: set[subprocess.Popen[bytes]] = set()
        self._terminated = False

    def invoke(self, template: str, target_path: str, *, tool: str) -> bytes | None:
        """Run ``template`` against ``target_path`` and return the combined output.

        A non-zero exit status is reported at debug level only; checkers use it
        to signal findings.

        Args:
            template: Command template containing ``{path}`` placeholders.
            target_path: Path substituted into the template.
            tool: Tool name used in debug messages.

        Returns:
            bytes | None: Stdout and stderr interleaved, or ``None`` when the
            command could not be launched at all.
        """

        command = expand_command(template, target_path)
        argv = shell_command(command)
        self._logger.debug(f"executing tool={tool} command={command!r}")
        try:
            with self._lock:
                if self._terminated:
                    return None
                # Bandit: argv is a fixed interpreter plus the configured command.
                process = subprocess.Popen(  # nosec B603
                    argv,
                    stdin=subprocess.DEVNULL,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.STDOUT,
                    **_group_options(os.name),
                )
                self._live.add(process)
        except OSError as exc:
            self._logger.debug(f"warning: {command} failed: {exc}")
            return None
        try:
            output, _ = process.communicate()
        finally:
            with self._lock:
                self._live.discard(process)
        if process.returncode != 0:
            self._logger.debug(f"warning: {command} returned exit status {process.returncode}")
        return output

    def terminate_all(self) -> None:
        """Kill every running checker with its child commands and refuse new ones."""

        with self._lock:
            self._terminated = True
            live = list(self._live)
        for process in live:
            kill_process_group(process)


__all__ = [
    "POSIX_SHELL",
    "ToolInvoker",
    "WINDOWS_SHELL",
    "expand_command",
    "kill_process_group",
    "shell_command",
]
