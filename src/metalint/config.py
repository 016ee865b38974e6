# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models and the layered merge that produces a run configuration."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Final

from pydantic import BaseModel, ConfigDict, Field

from .errors import ConfigError
from .models import ToolSpec
from .patterns import PATH_LINE_COL_MESSAGE, PATH_LINE_MESSAGE
from .severity import Severity, parse_severity

DEFAULT_TARGET_PATH: Final[str] = "."
DEFAULT_CONCURRENCY: Final[int] = 16

DEFAULT_LINTERS: Final[Mapping[str, str]] = MappingProxyType(
    {
        # main.go:8:10: should omit type map[string]string from declaration of var linters
        "golint": f"golint {{path}}:{PATH_LINE_COL_MESSAGE}",
        # test/stutter.go:19: missing argument for Printf("%d"): format reads arg 1, have only 0 args
        "vet": f"go tool vet {{path}}:{PATH_LINE_MESSAGE}",
        "gotype": f"gotype {{path}}:{PATH_LINE_COL_MESSAGE}",
        "errcheck": r"errcheck {path}:(?P<path>[^:]+):(?P<line>\d+):(?P<col>\d+)\t(?P<message>.*)",
        "varcheck": f"varcheck {{path}}:{PATH_LINE_MESSAGE}",
        "structcheck": f"structcheck {{path}}:{PATH_LINE_MESSAGE}",
        "defercheck": f"defercheck {{path}}:{PATH_LINE_MESSAGE}",
    }
)

DEFAULT_MESSAGE_OVERRIDES: Final[Mapping[str, str]] = MappingProxyType(
    {
        "errcheck": "error return value not checked ({message})",
        "varcheck": "unused global variable {message}",
        "structcheck": "unused struct field {message}",
    }
)

DEFAULT_SEVERITIES: Final[Mapping[str, str]] = MappingProxyType(
    {
        "errcheck": Severity.WARNING.value,
        "golint": Severity.WARNING.value,
        "varcheck": Severity.WARNING.value,
        "structcheck": Severity.WARNING.value,
    }
)

FAST_MODE_DISABLED: Final[tuple[str, ...]] = ("structcheck", "varcheck", "errcheck")


class ConfigLayer(BaseModel):
    """One configuration fragment; ``None`` fields leave earlier layers untouched."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    path: str | None = None
    concurrency: int | None = None
    fast: bool | None = None
    debug: bool | None = None
    exclude: str | None = None
    disable: tuple[str, ...] = Field(default_factory=tuple)
    linters: dict[str, str] = Field(default_factory=dict)
    message_overrides: dict[str, str] = Field(default_factory=dict)
    severity: dict[str, str] = Field(default_factory=dict)


def default_layer() -> ConfigLayer:
    """Return the built-in defaults as a configuration layer."""

    return ConfigLayer(
        path=DEFAULT_TARGET_PATH,
        concurrency=DEFAULT_CONCURRENCY,
        fast=False,
        debug=False,
        linters=dict(DEFAULT_LINTERS),
        message_overrides=dict(DEFAULT_MESSAGE_OVERRIDES),
        severity=dict(DEFAULT_SEVERITIES),
    )


class RunConfiguration(BaseModel):
    """Immutable settings for a single metalint run."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    path: str = DEFAULT_TARGET_PATH
    concurrency: int = Field(default=DEFAULT_CONCURRENCY, ge=1)
    exclude: re.Pattern[str] | None = None
    disabled: frozenset[str] = Field(default_factory=frozenset)
    debug: bool = False
    tools: dict[str, ToolSpec] = Field(default_factory=dict)

    @property
    def enabled_tools(self) -> list[ToolSpec]:
        """Return enabled tool specs ordered by name."""

        return [self.tools[name] for name in sorted(self.tools) if name not in self.disabled]


def compile_exclude(pattern: str | None) -> re.Pattern[str] | None:
    """Compile the user-supplied exclusion regex.

    Args:
        pattern: Regular expression text, or ``None``/empty for no filter.

    Returns:
        re.Pattern[str] | None: Compiled matcher, or ``None`` when unset.

    Raises:
        ConfigError: If the expression does not compile.
    """

    if not pattern:
        return None
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise ConfigError(f"invalid exclude pattern {pattern!r}: {exc}") from exc


def _build_tools(
    linters: Mapping[str, str],
    message_overrides: Mapping[str, str],
    severities: Mapping[str, Severity],
) -> dict[str, ToolSpec]:
    return {
        name: ToolSpec.from_descriptor(
            name,
            descriptor,
            message_override=message_overrides.get(name),
            severity=severities.get(name),
        )
        for name, descriptor in linters.items()
    }


def build_configuration(layers: Iterable[ConfigLayer]) -> RunConfiguration:
    """Merge ``layers`` in order (later wins) into a :class:`RunConfiguration`.

    Tables merge by tool name and scalar values replace earlier ones. Severity
    labels and the exclusion regex are validated here so no task is launched
    with a broken configuration.

    Args:
        layers: Configuration fragments, typically defaults, file, then CLI.

    Returns:
        RunConfiguration: Fully merged, immutable configuration.

    Raises:
        ConfigError: If any layer carries an invalid value.
    """

    path = DEFAULT_TARGET_PATH
    concurrency = DEFAULT_CONCURRENCY
    fast = False
    debug = False
    exclude: str | None = None
    disabled: set[str] = set()
    linters: dict[str, str] = {}
    message_overrides: dict[str, str] = {}
    severities: dict[str, Severity] = {}

    for layer in layers:
        path = layer.path if layer.path is not None else path
        concurrency = layer.concurrency if layer.concurrency is not None else concurrency
        fast = layer.fast if layer.fast is not None else fast
        debug = layer.debug if layer.debug is not None else debug
        exclude = layer.exclude if layer.exclude is not None else exclude
        disabled.update(layer.disable)
        linters.update(layer.linters)
        message_overrides.update(layer.message_overrides)
        for name, label in layer.severity.items():
            severities[name] = parse_severity(label, tool=name)

    if concurrency < 1:
        raise ConfigError(f"concurrency must be at least 1, got {concurrency}")
    if fast:
        disabled.update(FAST_MODE_DISABLED)

    return RunConfiguration(
        path=path,
        concurrency=concurrency,
        exclude=compile_exclude(exclude),
        disabled=frozenset(disabled),
        debug=debug,
        tools=_build_tools(linters, message_overrides, severities),
    )


__all__ = [
    "DEFAULT_CONCURRENCY",
    "DEFAULT_LINTERS",
    "DEFAULT_MESSAGE_OVERRIDES",
    "DEFAULT_SEVERITIES",
    "DEFAULT_TARGET_PATH",
    "FAST_MODE_DISABLED",
    "ConfigError",
    "ConfigLayer",
    "RunConfiguration",
    "build_configuration",
    "compile_exclude",
    "default_layer",
]
