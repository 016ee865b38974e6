# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Turn raw checker output into :class:`~metalint.models.Issue` records."""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Final

from .errors import ExtractionError
from .models import Issue, ToolSpec
from .patterns import COL_GROUP, LINE_GROUP, MESSAGE_GROUP, PATH_GROUP, validate_groups

_NEWLINE: Final[bytes] = b"\n"
_CARRIAGE_RETURN: Final[str] = "\r"


def iter_output_lines(raw_output: bytes) -> Iterator[str]:
    """Yield decoded lines from ``raw_output`` split on the newline byte.

    Invalid UTF-8 is replaced rather than rejected and a trailing carriage
    return is dropped so Windows output matches the same patterns.

    Args:
        raw_output: Combined stdout/stderr bytes captured from a checker.

    Yields:
        str: One decoded line at a time, in output order.
    """

    for raw_line in raw_output.split(_NEWLINE):
        line = raw_line.decode("utf-8", errors="replace")
        if line.endswith(_CARRIAGE_RETURN):
            line = line[:-1]
        yield line


def _parse_int(match: re.Match[str], group: str, *, tool: str) -> int:
    value = match.group(group)
    try:
        return int(value, 10)
    except (TypeError, ValueError) as exc:
        raise ExtractionError(tool, group, value) from exc


@dataclass(frozen=True, slots=True)
class IssueExtractor:
    """Bind a compiled matcher to the tool whose output it parses."""

    matcher: re.Pattern[str]
    tool: ToolSpec

    def __post_init__(self) -> None:
        validate_groups(self.matcher, tool=self.tool.name)

    def extract(self, raw_output: bytes) -> list[Issue]:
        """Return every issue found in ``raw_output``.

        Each non-overlapping match on a line becomes one issue; lines without a
        match are banners or summaries and are skipped.

        Args:
            raw_output: Combined output captured from the checker.

        Returns:
            list[Issue]: Issues in the order they appeared.

        Raises:
            ExtractionError: If a ``line`` or ``col`` capture is not an integer.
        """

        issues: list[Issue] = []
        for line in iter_output_lines(raw_output):
            for match in self.matcher.finditer(line):
                issues.append(self._build_issue(match))
        return issues

    def _build_issue(self, match: re.Match[str]) -> Issue:
        groups = self.matcher.groupindex
        name = self.tool.name
        path = match.group(PATH_GROUP) if PATH_GROUP in groups else None
        message = match.group(MESSAGE_GROUP) if MESSAGE_GROUP in groups else None
        line = _parse_int(match, LINE_GROUP, tool=name) if LINE_GROUP in groups else 0
        col = 0
        # An optional column group that did not take part leaves the column unset.
        if COL_GROUP in groups and match.group(COL_GROUP) is not None:
            col = _parse_int(match, COL_GROUP, tool=name)
        return Issue(
            severity=self.tool.effective_severity,
            path=path or "",
            line=line,
            col=col,
            message=self.tool.apply_message_override(message or ""),
        )


def extract_issues(raw_output: bytes, matcher: re.Pattern[str], tool: ToolSpec) -> list[Issue]:
    """Return the issues ``matcher`` finds in ``raw_output`` for ``tool``.

    Args:
        raw_output: Combined output captured from the checker.
        matcher: Compiled extraction pattern.
        tool: Tool specification supplying message and severity overrides.

    Returns:
        list[Issue]: Extracted issues in output order.
    """

    return IssueExtractor(matcher=matcher, tool=tool).extract(raw_output)


__all__ = ["IssueExtractor", "extract_issues", "iter_output_lines"]
