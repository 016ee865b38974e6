# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for report rendering, sorting and exclusion."""

from __future__ import annotations

import re

from metalint.models import Issue
from metalint.reporting import format_issue, render_report
from metalint.severity import Severity


def _issue(path: str, line: int, col: int = 0, message: str = "msg", severity: Severity = Severity.ERROR) -> Issue:
    return Issue(severity=severity, path=path, line=line, col=col, message=message)


def test_format_with_column() -> None:
    assert format_issue(_issue("a.go", 5, 3, "bad")) == "a.go:5:3:error: bad"


def test_format_without_column_leaves_empty_field() -> None:
    assert format_issue(_issue("a.go", 5, 0, "bad", Severity.WARNING)) == "a.go:5::warning: bad"


def test_format_keeps_empty_message_separator() -> None:
    assert format_issue(_issue("a.go", 1, 1, "")) == "a.go:1:1:error: "


def test_path_orders_before_line_and_column() -> None:
    issues = [_issue("b.go", 1, 1), _issue("a.go", 99, 99), _issue("a.go", 2, 5), _issue("a.go", 2, 1)]

    assert render_report(issues) == [
        "a.go:2:1:error: msg",
        "a.go:2:5:error: msg",
        "a.go:99:99:error: msg",
        "b.go:1:1:error: msg",
    ]


def test_lines_compare_numerically() -> None:
    issues = [_issue("a.go", 10), _issue("a.go", 9)]

    assert render_report(issues) == ["a.go:9::error: msg", "a.go:10::error: msg"]


def test_sort_is_stable_for_equal_keys() -> None:
    issues = [_issue("a.go", 1, 1, "first"), _issue("a.go", 1, 1, "second")]

    assert render_report(issues) == ["a.go:1:1:error: first", "a.go:1:1:error: second"]


def test_exclusion_matches_rendered_line() -> None:
    issues = [
        _issue("a.go", 1, 1, "keep me"),
        _issue("b.go", 2, 1, "drop me", Severity.WARNING),
        _issue("c_generated.go", 3, 1, "generated"),
    ]

    rendered = render_report(issues, re.compile(r":warning:|_generated\.go"))

    assert rendered == ["a.go:1:1:error: keep me"]


def test_exclusion_keeps_everything_that_does_not_match() -> None:
    issues = [_issue("a.go", 1), _issue("b.go", 2)]

    assert render_report(issues, re.compile("nothing-matches-this")) == render_report(issues)
