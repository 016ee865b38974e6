# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Render aggregated issues as sorted, filterable text lines."""

from __future__ import annotations

import re
from collections.abc import Iterable

from .models import Issue


def format_issue(issue: Issue) -> str:
    """Return ``issue`` as ``path:line:col:severity: message``.

    An unset column (``0``) renders as an empty field.
    """

    col = str(issue.col) if issue.col else ""
    return f"{issue.path}:{issue.line}:{col}:{issue.severity.value}: {issue.message}"


def sort_key(issue: Issue) -> tuple[str, int, int]:
    """Return the (path, line, col) ordering key for ``issue``."""

    return issue.path, issue.line, issue.col


def render_report(issues: Iterable[Issue], exclude: re.Pattern[str] | None = None) -> list[str]:
    """Filter, sort and render ``issues``.

    Args:
        issues: Every issue gathered during the run.
        exclude: Optional matcher; issues whose rendered line matches it are dropped.

    Returns:
        list[str]: Rendered lines ordered by path, line, then column.
    """

    kept: list[Issue] = []
    for issue in issues:
        if exclude is not None and exclude.search(format_issue(issue)):
            continue
        kept.append(issue)
    return [format_issue(issue) for issue in sorted(kept, key=sort_key)]


__all__ = ["format_issue", "render_report", "sort_key"]
