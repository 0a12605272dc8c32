"""
Side-effect dispatcher models.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True)
class SideEffectTask:
    """A named zero-argument callable run after a successful primary operation."""

    name: str
    fn: Callable[[], object]


@dataclass(frozen=True)
class DispatchReport:
    """
    Outcome of one dispatch call.

    Tasks still running when the budget ran out are listed in ``detached``;
    their eventual failure is only logged.
    """

    succeeded: tuple[str, ...] = ()
    failed: tuple[str, ...] = ()
    detached: tuple[str, ...] = ()

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failed) + len(self.detached)


@dataclass(frozen=True)
class DispatcherConfig:
    budget_seconds: float = 2.0
    max_workers: int = 4
