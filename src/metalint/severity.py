# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Severity related types and helpers."""

from __future__ import annotations

from enum import Enum
from typing import Final

from .errors import ConfigError


class Severity(str, Enum):
    """Closed set of severities attached to every issue."""

    WARNING = "warning"
    ERROR = "error"


DEFAULT_SEVERITY: Final[Severity] = Severity.ERROR


def parse_severity(label: str | Severity, *, tool: str | None = None) -> Severity:
    """Return the :class:`Severity` named by ``label``.

    Args:
        label: Severity name such as ``"warning"``; matching is case-insensitive.
        tool: Optional tool name included in the error message.

    Returns:
        Severity: Parsed severity member.

    Raises:
        ConfigError: If ``label`` does not name a known severity.
    """

    if isinstance(label, Severity):
        return label
    try:
        return Severity(label.strip().lower())
    except ValueError as exc:
        allowed = ", ".join(member.value for member in Severity)
        owner = f" for '{tool}'" if tool else ""
        raise ConfigError(f"invalid severity '{label}'{owner} (expected one of: {allowed})") from exc


__all__ = ["DEFAULT_SEVERITY", "Severity", "parse_severity"]
