# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from io import StringIO

import pytest
from rich.console import Console

from metalint.logging import CLILogger


@pytest.fixture
def log_buffer() -> StringIO:
    """Return the buffer backing the ``logger`` fixture."""
    return StringIO()


@pytest.fixture
def logger(log_buffer: StringIO) -> CLILogger:
    """Return a debug-enabled logger writing into ``log_buffer``."""
    console = Console(file=log_buffer, no_color=True, highlight=False, width=200)
    return CLILogger(console=console, debug_enabled=True)
