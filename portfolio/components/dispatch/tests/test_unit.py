"""
Side-effect dispatcher unit tests.

Covers failure isolation, the wait budget and the inline dispatcher.
"""

from __future__ import annotations

import logging
import threading

import pytest

from portfolio.components.dispatch import (
    DispatcherConfig,
    InlineDispatcher,
    SideEffectDispatcher,
    SideEffectTask,
    dispatch,
    run_task,
)


def boom() -> None:
    raise RuntimeError("smtp down")


@pytest.fixture
def pool():
    dispatcher = SideEffectDispatcher(DispatcherConfig(budget_seconds=2.0, max_workers=2))
    yield dispatcher
    dispatcher.shutdown()


class TestRunTask:
    def test_success(self) -> None:
        calls: list[int] = []
        assert run_task(SideEffectTask("count", lambda: calls.append(1))) is True
        assert calls == [1]

    def test_failure_is_logged_not_raised(self, caplog) -> None:
        with caplog.at_level(logging.ERROR):
            assert run_task(SideEffectTask("email.welcome", boom)) is False
        assert "email.welcome" in caplog.text


class TestInlineDispatcher:
    def test_failures_isolated(self) -> None:
        calls: list[str] = []
        report = InlineDispatcher().dispatch(
            [
                SideEffectTask("first", lambda: calls.append("first")),
                SideEffectTask("broken", boom),
                SideEffectTask("last", lambda: calls.append("last")),
            ]
        )
        assert calls == ["first", "last"]
        assert report.succeeded == ("first", "last")
        assert report.failed == ("broken",)
        assert report.detached == ()
        assert report.total == 3

    def test_empty(self) -> None:
        assert InlineDispatcher().dispatch([]).total == 0

    def test_module_dispatch_defaults_inline(self) -> None:
        report = dispatch([SideEffectTask("noop", lambda: None)])
        assert report.succeeded == ("noop",)


class TestSideEffectDispatcher:
    def test_runs_all_tasks(self, pool) -> None:
        report = pool.dispatch(
            [SideEffectTask("a", lambda: None), SideEffectTask("b", boom)]
        )
        assert set(report.succeeded) == {"a"}
        assert report.failed == ("b",)

    def test_slow_task_detached_after_budget(self) -> None:
        release = threading.Event()
        finished = threading.Event()

        def slow() -> None:
            release.wait(5)
            finished.set()

        dispatcher = SideEffectDispatcher(DispatcherConfig(budget_seconds=0.05, max_workers=2))
        try:
            report = dispatcher.dispatch(
                [SideEffectTask("fast", lambda: None), SideEffectTask("slow", slow)]
            )
            assert report.succeeded == ("fast",)
            assert report.detached == ("slow",)
            assert not finished.is_set()
        finally:
            release.set()
            dispatcher.shutdown()
        # Detached work is not cancelled
        assert finished.is_set()

    def test_after_shutdown_tasks_fail(self) -> None:
        dispatcher = SideEffectDispatcher()
        dispatcher.shutdown()
        report = dispatcher.dispatch([SideEffectTask("late", lambda: None)])
        assert report.failed == ("late",)
