# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Diagnostic-stream logging helpers built on Rich."""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass, field
from typing import Final

from rich.console import Console
from rich.text import Text

_KEY_VALUE_RE: Final[re.Pattern[str]] = re.compile(r"([\w-]+)=(\".*?\"|\S+)")


def detect_tty() -> bool:
    """Return ``True`` when stderr appears to be backed by a terminal."""

    try:
        return sys.stderr.isatty()
    except (AttributeError, ValueError):
        return False


@dataclass(slots=True)
class CLILogger:
    """Write debug and failure messages to the diagnostic stream.

    Debug messages are dropped entirely unless ``debug_enabled`` is set, so
    nothing reaches stderr during a normal run.
    """

    console: Console
    debug_enabled: bool = False
    _key_value_re: re.Pattern[str] = field(default=_KEY_VALUE_RE, repr=False)

    def debug(self, message: str) -> None:
        """Emit a debug message when debug logging is enabled.

        Args:
            message: Debug payload; ``key=value`` pairs are highlighted.
        """

        if not self.debug_enabled:
            return
        text = Text("DEBUG: ", style="bold cyan")
        cursor = 0
        for match in self._key_value_re.finditer(message):
            start, end = match.span()
            if start > cursor:
                text.append(message[cursor:start], style="dim")
            key, raw_value = match.group(1), match.group(2)
            text.append(key, style="bold magenta")
            text.append("=", style="dim")
            value_style = "bold blue" if key in {"command", "cmd"} else "bold green"
            text.append(raw_value, style=value_style)
            cursor = end
        if cursor < len(message):
            text.append(message[cursor:], style="dim")
        self.console.print(text)

    def fail(self, message: str) -> None:
        """Emit a fatal error line.

        Args:
            message: Text describing the failure.
        """

        self.console.print(Text(f"metalint: error: {message}", style="bold red"))


def build_cli_logger(*, debug: bool = False) -> CLILogger:
    """Return a :class:`CLILogger` bound to a stderr Rich console.

    Args:
        debug: Whether debug messages should be written.

    Returns:
        CLILogger: Logger writing to the diagnostic stream.
    """

    console = Console(
        stderr=True,
        no_color=not detect_tty(),
        highlight=False,
        soft_wrap=True,
    )
    return CLILogger(console=console, debug_enabled=debug)


__all__ = ["CLILogger", "build_cli_logger", "detect_tty"]
