# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Concrete configuration sources (TOML file, pyproject) and file discovery."""

from __future__ import annotations

import tomllib
from collections.abc import Iterable, Mapping, MutableMapping
from pathlib import Path
from typing import Any, Final

from pydantic import ValidationError

from .config import ConfigLayer
from .errors import ConfigError

DEFAULT_INCLUDE_KEY: Final[str] = "include"
DEFAULT_CONFIG_FILENAME: Final[str] = ".metalint.toml"
PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "metalint"


def _merge_tables(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = _merge_tables(current, value)
        else:
            merged[key] = value
    return merged


class TomlConfigSource:
    """Load configuration data from a TOML document with include support."""

    def __init__(self, path: Path, *, include_key: str = DEFAULT_INCLUDE_KEY) -> None:
        self.path = path
        self._include_key = include_key

    def load(self) -> Mapping[str, Any]:
        return self._load(self.path, ())

    def _load(self, path: Path, stack: tuple[Path, ...]) -> Mapping[str, Any]:
        resolved = path.resolve()
        if resolved in stack:
            include_chain = " -> ".join(str(entry) for entry in (*stack, resolved))
            raise ConfigError(f"Circular include detected: {include_chain}")
        try:
            with resolved.open("rb") as handle:
                data = tomllib.load(handle)
        except OSError as exc:
            raise ConfigError(f"Unable to read configuration {path}: {exc}") from exc
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc
        document: dict[str, Any] = dict(self._select(data))
        includes = document.pop(self._include_key, None)
        merged: dict[str, Any] = {}
        for include_path in self._coerce_includes(includes, resolved.parent):
            merged = _merge_tables(merged, self._load(include_path, (*stack, resolved)))
        return _merge_tables(merged, document)

    def _select(self, data: Mapping[str, Any]) -> Mapping[str, Any]:
        return data

    def _coerce_includes(self, raw: Any, base_dir: Path) -> Iterable[Path]:
        if raw is None:
            return []
        if isinstance(raw, str):
            return [self._resolve_path(Path(raw), base_dir)]
        if isinstance(raw, list):
            return [self._resolve_path(Path(item), base_dir) for item in raw]
        raise ConfigError(f"Unsupported include declaration: {raw!r}")

    @staticmethod
    def _resolve_path(path: Path, base_dir: Path) -> Path:
        return path if path.is_absolute() else (base_dir / path)

    def describe(self) -> str:
        return f"TOML configuration at {self.path}"


class PyProjectConfigSource(TomlConfigSource):
    """Read configuration from ``[tool.metalint]`` within ``pyproject.toml``."""

    def _select(self, data: Mapping[str, Any]) -> Mapping[str, Any]:
        tool_section = data.get(PYPROJECT_TOOL_KEY)
        if not isinstance(tool_section, MutableMapping):
            return {}
        section = tool_section.get(PYPROJECT_SECTION_KEY)
        if not isinstance(section, MutableMapping):
            return {}
        return section

    def describe(self) -> str:
        return f"pyproject.toml ({self.path})"


def discover_source(root: Path, explicit: Path | None = None) -> TomlConfigSource | None:
    """Return the configuration source that applies to ``root``.

    Args:
        root: Directory searched for ``.metalint.toml`` and ``pyproject.toml``.
        explicit: Path given with ``--config``; always wins when provided.

    Returns:
        TomlConfigSource | None: Source to load, or ``None`` when nothing applies.
    """

    if explicit is not None:
        return TomlConfigSource(explicit)
    candidate = root / DEFAULT_CONFIG_FILENAME
    if candidate.is_file():
        return TomlConfigSource(candidate)
    pyproject = root / PYPROJECT_FILENAME
    if pyproject.is_file():
        return PyProjectConfigSource(pyproject)
    return None


def load_layer(source: TomlConfigSource | None) -> ConfigLayer:
    """Load ``source`` into a :class:`ConfigLayer`.

    Args:
        source: Source to read, or ``None`` for an empty layer.

    Returns:
        ConfigLayer: Parsed layer.

    Raises:
        ConfigError: If the document cannot be read or has unexpected keys.
    """

    if source is None:
        return ConfigLayer()
    data = source.load()
    try:
        return ConfigLayer.model_validate(dict(data))
    except ValidationError as exc:
        raise ConfigError(f"Invalid {source.describe()}: {exc}") from exc


__all__ = [
    "DEFAULT_CONFIG_FILENAME",
    "PyProjectConfigSource",
    "TomlConfigSource",
    "discover_source",
    "load_layer",
]
