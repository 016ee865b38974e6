# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for TOML configuration sources."""

from __future__ import annotations

from pathlib import Path
from textwrap import dedent

import pytest

from metalint.config_loader import (
    DEFAULT_CONFIG_FILENAME,
    PyProjectConfigSource,
    TomlConfigSource,
    discover_source,
    load_layer,
)
from metalint.errors import ConfigError


def test_dedicated_file_is_preferred(tmp_path: Path) -> None:
    (tmp_path / DEFAULT_CONFIG_FILENAME).write_text("concurrency = 3\n", encoding="utf-8")
    (tmp_path / "pyproject.toml").write_text("[tool.metalint]\nconcurrency = 9\n", encoding="utf-8")

    layer = load_layer(discover_source(tmp_path))

    assert layer.concurrency == 3


def test_pyproject_section_is_read(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        dedent(
            """
            [project]
            name = "demo"

            [tool.metalint]
            disable = ["vet"]
            fast = true

            [tool.metalint.severity]
            gotype = "warning"
            """
        ),
        encoding="utf-8",
    )

    source = discover_source(tmp_path)
    layer = load_layer(source)

    assert isinstance(source, PyProjectConfigSource)
    assert layer.disable == ("vet",)
    assert layer.fast is True
    assert layer.severity == {"gotype": "warning"}


def test_pyproject_without_section_is_empty(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text("[project]\nname = 'demo'\n", encoding="utf-8")

    assert load_layer(discover_source(tmp_path)).model_dump(exclude_defaults=True) == {}


def test_no_files_yields_empty_layer(tmp_path: Path) -> None:
    assert discover_source(tmp_path) is None
    assert load_layer(None).concurrency is None


def test_includes_are_merged_before_the_document(tmp_path: Path) -> None:
    (tmp_path / "base.toml").write_text(
        dedent(
            """
            concurrency = 2

            [linters]
            one = "one {path}:PATH:LINE:MESSAGE"
            """
        ),
        encoding="utf-8",
    )
    main = tmp_path / "main.toml"
    main.write_text(
        dedent(
            """
            include = "base.toml"
            concurrency = 5

            [linters]
            two = "two {path}:PATH:LINE:MESSAGE"
            """
        ),
        encoding="utf-8",
    )

    layer = load_layer(TomlConfigSource(main))

    assert layer.concurrency == 5
    assert set(layer.linters) == {"one", "two"}


def test_circular_include_is_rejected(tmp_path: Path) -> None:
    (tmp_path / "a.toml").write_text('include = "b.toml"\n', encoding="utf-8")
    (tmp_path / "b.toml").write_text('include = "a.toml"\n', encoding="utf-8")

    with pytest.raises(ConfigError, match="Circular include"):
        load_layer(TomlConfigSource(tmp_path / "a.toml"))


def test_unknown_keys_are_rejected(tmp_path: Path) -> None:
    path = tmp_path / "bad.toml"
    path.write_text("jobs = 4\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Invalid TOML configuration"):
        load_layer(TomlConfigSource(path))


def test_malformed_toml_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "broken.toml"
    path.write_text("concurrency = = 4\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Invalid TOML in"):
        load_layer(TomlConfigSource(path))


def test_missing_explicit_file_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Unable to read"):
        load_layer(discover_source(tmp_path, tmp_path / "absent.toml"))
