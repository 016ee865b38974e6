# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Smoke tests for lint CLI behaviors."""

from __future__ import annotations

import json
import os
import subprocess
import sys
import time
from pathlib import Path

import pytest
from typer.testing import CliRunner

import metalint
from metalint.cli import app
from metalint.config import DEFAULT_LINTERS

pytestmark = pytest.mark.skipif(os.name == "nt", reason="requires a POSIX shell")


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _emit(*lines: str) -> str:
    """Return a colon-free shell command printing ``lines``.

    Descriptors split on their first colon, so colons in the output are
    written as the octal escape understood by ``printf``.
    """

    body = "".join(f"{line}\\n" for line in lines).replace(":", "\\072")
    return f"printf '{body}'"


def _only(*linters: str) -> list[str]:
    """Return flags replacing the default Go linters with ``linters``."""

    args: list[str] = []
    for name in DEFAULT_LINTERS:
        args += ["-D", name]
    for linter in linters:
        args += ["--linter", linter]
    return args


def test_two_linters_render_sorted_report() -> None:
    runner = CliRunner()
    result = runner.invoke(
        app,
        [
            *_only(
                f"beta:{_emit('y.go:2:1: style nit')}:PATH:LINE:COL:MESSAGE",
                f"alpha:{_emit('x.go:1:1: real bug')}:PATH:LINE:COL:MESSAGE",
            ),
            "--severity",
            "beta:warning",
        ],
    )

    assert result.exit_code == 0, result.output
    assert result.stdout == "x.go:1:1:error: real bug\ny.go:2:1:warning: style nit\n"


def test_path_argument_and_message_override() -> None:
    runner = CliRunner()
    result = runner.invoke(
        app,
        [
            "pkg",
            *_only(f"vars:{_emit('{path}/a.go:3: counter')}:PATH:LINE:MESSAGE"),
            "--message-overrides",
            "vars:unused global variable {message}",
        ],
    )

    assert result.exit_code == 0, result.output
    assert result.stdout == "pkg/a.go:3::error: unused global variable counter\n"


def test_exclude_filters_rendered_lines() -> None:
    runner = CliRunner()
    result = runner.invoke(
        app,
        [
            *_only(f"multi:{_emit('a.go:1:1: keep', 'b.go:1:1: skip')}:PATH:LINE:COL:MESSAGE"),
            "--exclude",
            "skip$",
        ],
    )

    assert result.exit_code == 0, result.output
    assert result.stdout == "a.go:1:1:error: keep\n"


def test_missing_linter_binary_is_not_fatal() -> None:
    runner = CliRunner()
    result = runner.invoke(app, _only("ghost:definitely-not-a-real-linter-binary {path}:PATH:LINE:MESSAGE"))

    assert result.exit_code == 0, result.output
    assert result.stdout == ""


def test_invalid_exclude_is_fatal() -> None:
    runner = CliRunner()
    result = runner.invoke(app, [*_only(), "--exclude", "(unclosed"])

    assert result.exit_code == 1
    assert "invalid exclude pattern" in result.output


def test_invalid_pattern_is_fatal_and_names_tool() -> None:
    runner = CliRunner()
    result = runner.invoke(app, _only("broken:echo hi:(?P<path>[^:]+):(?P<rule>\\w+)"))

    assert result.exit_code == 1
    assert "'broken'" in result.output


def test_invalid_severity_is_fatal() -> None:
    runner = CliRunner()
    result = runner.invoke(app, [*_only(), "--severity", "golint:fatal"])

    assert result.exit_code == 1
    assert "invalid severity" in result.output


def test_malformed_mapping_is_a_usage_error() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["--severity", "no-separator"])

    assert result.exit_code == 2


def test_config_file_is_applied(isolated_cwd: Path) -> None:
    descriptor = f"{_emit('c.go:4:2: from config')}:PATH:LINE:COL:MESSAGE"
    (isolated_cwd / ".metalint.toml").write_text(
        "\n".join(
            [
                f"disable = {json.dumps(list(DEFAULT_LINTERS))}",
                "[linters]",
                f"conf = {json.dumps(descriptor)}",
                "[severity]",
                'conf = "warning"',
            ]
        ),
        encoding="utf-8",
    )
    runner = CliRunner()
    result = runner.invoke(app, [])

    assert result.exit_code == 0, result.output
    assert result.stdout == "c.go:4:2:warning: from config\n"


def test_debug_flag_writes_diagnostics() -> None:
    runner = CliRunner()
    result = runner.invoke(app, [*_only("quiet:true:PATH:LINE:MESSAGE"), "--debug"])

    assert result.exit_code == 0
    assert "DEBUG: linter golint disabled" in result.output
    assert "total elapsed time" in result.output


def test_fatal_error_exits_without_waiting_for_slow_linters(isolated_cwd: Path) -> None:
    env = {**os.environ, "PYTHONPATH": str(Path(metalint.__file__).resolve().parents[1])}
    args = [
        sys.executable,
        "-m",
        "metalint",
        *_only(
            "slow:sleep 30; echo done:PATH:LINE:MESSAGE",
            f"broken:sleep 0.5; {_emit('a.go:x: m')}:(?P<path>[^:]+):(?P<line>\\w+): (?P<message>.*)",
        ),
    ]
    start = time.monotonic()

    result = subprocess.run(args, cwd=isolated_cwd, env=env, capture_output=True, text=True, timeout=20, check=False)

    assert result.returncode == 1
    assert "broken: line matched invalid integer 'x'" in result.stderr
    assert time.monotonic() - start < 10
