"""
Side-effect dispatcher.

Runs auxiliary work (view counters, analytics records, emails) on a shared
thread pool after the primary operation has succeeded.

Key behaviors:
- A task failure is caught, logged and counted; it never reaches the caller
- The caller waits at most ``budget_seconds`` for the whole batch
- Tasks still running after the budget are detached, not cancelled
- No retries: each task runs at most once per dispatch
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor, wait

from portfolio.components.dispatch.models import (
    DispatcherConfig,
    DispatchReport,
    SideEffectTask,
)
from portfolio.components.dispatch.ports import DispatcherPort
from portfolio.domain.errors import SideEffectFailure

logger = logging.getLogger(__name__)


def run_task(task: SideEffectTask) -> bool:
    """Execute one task, converting any exception into a logged failure."""
    start = time.monotonic()
    try:
        task.fn()
    except Exception as exc:
        failure = SideEffectFailure(task.name, exc)
        logger.exception("%s", failure)
        return False
    elapsed_ms = int((time.monotonic() - start) * 1000)
    logger.debug("Side effect '%s' completed in %dms", task.name, elapsed_ms)
    return True


class SideEffectDispatcher:
    """
    Thread-pool backed dispatcher.

    Created once per process and shared by every request.
    """

    def __init__(self, config: DispatcherConfig | None = None) -> None:
        self.config = config or DispatcherConfig()
        self._executor = ThreadPoolExecutor(
            max_workers=self.config.max_workers,
            thread_name_prefix="side-effect",
        )

    def dispatch(self, tasks: Sequence[SideEffectTask]) -> DispatchReport:
        if not tasks:
            return DispatchReport()

        futures: dict[Future[bool], SideEffectTask] = {}
        failed: list[str] = []

        for task in tasks:
            try:
                futures[self._executor.submit(run_task, task)] = task
            except RuntimeError as exc:
                # Executor already shut down
                logger.error("Could not schedule side effect '%s': %s", task.name, exc)
                failed.append(task.name)

        done, not_done = wait(futures, timeout=self.config.budget_seconds)

        succeeded: list[str] = []
        for future in done:
            task = futures[future]
            if future.result():
                succeeded.append(task.name)
            else:
                failed.append(task.name)

        detached = [futures[f].name for f in not_done]
        for name in detached:
            logger.warning(
                "Side effect '%s' exceeded %.1fs budget; detaching",
                name,
                self.config.budget_seconds,
            )

        return DispatchReport(
            succeeded=tuple(succeeded),
            failed=tuple(failed),
            detached=tuple(detached),
        )

    def shutdown(self, wait_for_tasks: bool = True) -> None:
        self._executor.shutdown(wait=wait_for_tasks)


class InlineDispatcher:
    """
    Runs tasks synchronously in the calling thread.

    Used by the CLI and tests where a thread pool adds nothing.
    """

    def dispatch(self, tasks: Sequence[SideEffectTask]) -> DispatchReport:
        succeeded: list[str] = []
        failed: list[str] = []
        for task in tasks:
            if run_task(task):
                succeeded.append(task.name)
            else:
                failed.append(task.name)
        return DispatchReport(succeeded=tuple(succeeded), failed=tuple(failed))


def dispatch(
    tasks: Sequence[SideEffectTask],
    *,
    dispatcher: DispatcherPort | None = None,
) -> DispatchReport:
    """Dispatch ``tasks`` on the given dispatcher, or inline when none is supplied."""
    return (dispatcher or InlineDispatcher()).dispatch(tasks)
