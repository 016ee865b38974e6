# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Fan checker runs out to a bounded worker pool and fan their issues back in."""

from __future__ import annotations

import re
import time
from collections.abc import Sequence
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from queue import Empty, SimpleQueue
from typing import Protocol, runtime_checkable

from .config import RunConfiguration
from .logging import CLILogger
from .models import Issue, ToolSpec
from .parsers import IssueExtractor
from .patterns import resolve_pattern


@runtime_checkable
class Invoker(Protocol):
    """Callable surface the orchestrator needs from a tool invoker."""

    def invoke(self, template: str, target_path: str, *, tool: str) -> bytes | None:
        """Run ``template`` for ``target_path`` returning combined output or ``None``."""

        raise NotImplementedError

    def terminate_all(self) -> None:
        """Stop every running command."""

        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class ToolTask:
    """One scheduled checker run with its pattern already compiled."""

    spec: ToolSpec
    extractor: IssueExtractor


def plan_tasks(config: RunConfiguration, logger: CLILogger) -> list[ToolTask]:
    """Return a task for every enabled tool, compiling patterns up front.

    Args:
        config: Run configuration holding the merged tool table.
        logger: Logger receiving skip notices.

    Returns:
        list[ToolTask]: Tasks ordered by tool name.

    Raises:
        PatternError: If an enabled tool's pattern is invalid.
    """

    for name in sorted(config.disabled.intersection(config.tools)):
        logger.debug(f"linter {name} disabled")
    tasks: list[ToolTask] = []
    for spec in config.enabled_tools:
        matcher: re.Pattern[str] = resolve_pattern(spec.pattern, tool=spec.name)
        tasks.append(ToolTask(spec=spec, extractor=IssueExtractor(matcher=matcher, tool=spec)))
    return tasks


class Orchestrator:
    """Run every enabled checker with at most ``concurrency`` in flight."""

    def __init__(self, *, invoker: Invoker, logger: CLILogger) -> None:
        """Initialise the orchestrator.

        Args:
            invoker: Object that launches checker commands.
            logger: Diagnostic logger for timing and skip notices.
        """

        self._invoker = invoker
        self._logger = logger

    def run(self, config: RunConfiguration) -> list[Issue]:
        """Execute all enabled tools and return every issue they produced.

        Issues are only returned once every task has finished; their order is
        unspecified until the report is sorted.

        Args:
            config: Immutable configuration for this run.

        Returns:
            list[Issue]: All issues gathered from the aggregation queue.

        Raises:
            MetalintError: When any task hits a fatal configuration-class error.
        """

        start = time.perf_counter()
        tasks = plan_tasks(config, self._logger)
        issues: SimpleQueue[Issue] = SimpleQueue()
        if tasks:
            self._execute(tasks, config, issues)
        collected = _drain(issues)
        self._logger.debug(f"total elapsed time {time.perf_counter() - start:.3f}s")
        return collected

    def _execute(self, tasks: Sequence[ToolTask], config: RunConfiguration, issues: SimpleQueue[Issue]) -> None:
        target = str(config.path)
        executor = ThreadPoolExecutor(max_workers=config.concurrency, thread_name_prefix="metalint")
        futures: list[Future[None]] = [executor.submit(self._run_task, task, target, issues) for task in tasks]
        done, _ = wait(futures, return_when=FIRST_EXCEPTION)
        failure = next((future.exception() for future in done if future.exception() is not None), None)
        if failure is not None:
            executor.shutdown(wait=False, cancel_futures=True)
            self._invoker.terminate_all()
            raise failure
        executor.shutdown(wait=True)

    def _run_task(self, task: ToolTask, target: str, issues: SimpleQueue[Issue]) -> None:
        name = task.spec.name
        self._logger.debug(f"linting with {name}: {task.spec.command}")
        start = time.perf_counter()
        output = self._invoker.invoke(task.spec.command, target, tool=name)
        if output is None:
            return
        for issue in task.extractor.extract(output):
            issues.put(issue)
        self._logger.debug(f"{name} linter took {time.perf_counter() - start:.3f}s")


def _drain(issues: SimpleQueue[Issue]) -> list[Issue]:
    collected: list[Issue] = []
    while True:
        try:
            collected.append(issues.get_nowait())
        except Empty:
            return collected


__all__ = ["Invoker", "Orchestrator", "ToolTask", "plan_tasks"]
