# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core data models shared across the metalint package."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from pydantic import BaseModel, ConfigDict, field_validator

from .errors import ConfigError
from .severity import DEFAULT_SEVERITY, Severity, parse_severity

PATH_PLACEHOLDER: Final[str] = "{path}"
MESSAGE_PLACEHOLDER: Final[str] = "{message}"
DESCRIPTOR_SEPARATOR: Final[str] = ":"


@dataclass(frozen=True, slots=True)
class Issue:
    """One normalised finding reported by a checker."""

    severity: Severity
    path: str
    line: int
    col: int
    message: str


class ToolSpec(BaseModel):
    """Describe how to run one external checker and read its output."""

    model_config = ConfigDict(frozen=True)

    name: str
    command: str
    pattern: str
    message_override: str | None = None
    severity: Severity | None = None

    @field_validator("name")
    @classmethod
    def _require_name(cls, value: str) -> str:
        """Reject blank tool names.

        Args:
            value: Candidate tool name.

        Returns:
            str: The stripped tool name.

        Raises:
            ConfigError: If the name is empty.
        """

        stripped = value.strip()
        if not stripped:
            raise ConfigError("tool name must not be empty")
        return stripped

    @field_validator("severity", mode="before")
    @classmethod
    def _coerce_severity(cls, value: object) -> Severity | None:
        """Validate severity labels against the closed :class:`Severity` set."""

        if value is None or isinstance(value, Severity):
            return value
        return parse_severity(str(value))

    @property
    def effective_severity(self) -> Severity:
        """Return the override severity or the system default."""

        return self.severity if self.severity is not None else DEFAULT_SEVERITY

    def apply_message_override(self, message: str) -> str:
        """Return ``message`` rewritten through the configured override template."""

        if self.message_override is None:
            return message
        return self.message_override.replace(MESSAGE_PLACEHOLDER, message)

    @classmethod
    def from_descriptor(
        cls,
        name: str,
        descriptor: str,
        *,
        message_override: str | None = None,
        severity: str | Severity | None = None,
    ) -> ToolSpec:
        """Build a spec from a ``command:pattern`` descriptor.

        The descriptor is split on its first colon, so the command part cannot
        itself contain one while the pattern part may.

        Args:
            name: Unique tool name.
            descriptor: ``command:pattern`` string.
            message_override: Optional template containing ``{message}``.
            severity: Optional severity label overriding the default.

        Returns:
            ToolSpec: Immutable tool specification.

        Raises:
            ConfigError: If the descriptor lacks a separator or either half is empty.
        """

        command, sep, pattern = descriptor.partition(DESCRIPTOR_SEPARATOR)
        if not sep or not command.strip() or not pattern:
            raise ConfigError(f"invalid linter descriptor for '{name}': expected COMMAND:PATTERN, got {descriptor!r}")
        if severity is not None:
            severity = parse_severity(severity, tool=name)
        return cls(
            name=name,
            command=command.strip(),
            pattern=pattern,
            message_override=message_override,
            severity=severity,
        )


__all__ = [
    "DESCRIPTOR_SEPARATOR",
    "Issue",
    "MESSAGE_PLACEHOLDER",
    "PATH_PLACEHOLDER",
    "ToolSpec",
]
