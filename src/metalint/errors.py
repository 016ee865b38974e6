# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy for fatal metalint failures.

Tool execution problems are never raised: a checker that cannot be launched or
exits non-zero is handled inside its own task. Everything below aborts the run.
"""

from __future__ import annotations


class MetalintError(Exception):
    """Base class for errors that terminate a metalint run."""


class ConfigError(MetalintError):
    """Raised when configuration input is invalid."""


class PatternError(ConfigError):
    """Raised when a tool's extraction pattern cannot be used."""

    def __init__(self, tool: str | None, reason: str) -> None:
        """Initialise the error with the offending tool name.

        Args:
            tool: Name of the tool whose pattern is broken, when known.
            reason: Human-readable description of the problem.
        """

        subject = f"invalid pattern for '{tool}'" if tool else "invalid pattern"
        super().__init__(f"{subject}: {reason}")
        self.tool = tool
        self.reason = reason


class ExtractionError(MetalintError):
    """Raised when a matched numeric field cannot be parsed."""

    def __init__(self, tool: str, field: str, value: str | None) -> None:
        """Initialise the error with the tool, field and captured text.

        Args:
            tool: Name of the tool whose output was being parsed.
            field: Capture group that held the unparseable value.
            value: Captured text, or ``None`` when the group did not match.
        """

        shown = "<missing>" if value is None else repr(value)
        super().__init__(f"{tool}: {field} matched invalid integer {shown}")
        self.tool = tool
        self.field = field
        self.value = value


__all__ = ["ConfigError", "ExtractionError", "MetalintError", "PatternError"]
