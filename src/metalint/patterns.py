# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Resolve symbolic or literal extraction patterns into compiled regexes."""

from __future__ import annotations

import re
from collections.abc import Mapping
from types import MappingProxyType
from typing import Final

from .errors import PatternError

PATH_GROUP: Final[str] = "path"
LINE_GROUP: Final[str] = "line"
COL_GROUP: Final[str] = "col"
MESSAGE_GROUP: Final[str] = "message"
ALLOWED_GROUPS: Final[frozenset[str]] = frozenset({PATH_GROUP, LINE_GROUP, COL_GROUP, MESSAGE_GROUP})

PATH_LINE_COL_MESSAGE: Final[str] = "PATH:LINE:COL:MESSAGE"
PATH_LINE_MESSAGE: Final[str] = "PATH:LINE:MESSAGE"

PREDEFINED_PATTERNS: Final[Mapping[str, str]] = MappingProxyType(
    {
        PATH_LINE_COL_MESSAGE: r"(?P<path>[^:]+):(?P<line>\d+):(?P<col>\d+):\s*(?P<message>.*)",
        PATH_LINE_MESSAGE: r"(?P<path>[^:]+):(?P<line>\d+):\s*(?P<message>.*)",
    }
)


def expand_pattern(pattern_ref: str) -> str:
    """Return the literal regex for ``pattern_ref``.

    Args:
        pattern_ref: Symbolic pattern name or a literal regular expression.

    Returns:
        str: Literal regular expression text.
    """

    return PREDEFINED_PATTERNS.get(pattern_ref, pattern_ref)


def validate_groups(compiled: re.Pattern[str], *, tool: str | None = None) -> None:
    """Ensure ``compiled`` only declares the supported named groups.

    Args:
        compiled: Compiled extraction pattern.
        tool: Optional tool name used in error messages.

    Raises:
        PatternError: If a named group outside :data:`ALLOWED_GROUPS` is present.
    """

    unknown = sorted(set(compiled.groupindex) - ALLOWED_GROUPS)
    if unknown:
        names = ", ".join(unknown)
        raise PatternError(tool, f"invalid subgroup(s) {names}")


def resolve_pattern(pattern_ref: str, *, tool: str | None = None) -> re.Pattern[str]:
    """Compile the extraction pattern referenced by ``pattern_ref``.

    Args:
        pattern_ref: Symbolic pattern name or literal regex with named groups.
        tool: Optional tool name used in error messages.

    Returns:
        re.Pattern[str]: Compiled matcher with validated capture groups.

    Raises:
        PatternError: If the pattern fails to compile or uses unknown groups.
    """

    literal = expand_pattern(pattern_ref)
    try:
        compiled = re.compile(literal)
    except re.error as exc:
        raise PatternError(tool, str(exc)) from exc
    validate_groups(compiled, tool=tool)
    return compiled


__all__ = [
    "ALLOWED_GROUPS",
    "COL_GROUP",
    "LINE_GROUP",
    "MESSAGE_GROUP",
    "PATH_GROUP",
    "PATH_LINE_COL_MESSAGE",
    "PATH_LINE_MESSAGE",
    "PREDEFINED_PATTERNS",
    "expand_pattern",
    "resolve_pattern",
    "validate_groups",
]
