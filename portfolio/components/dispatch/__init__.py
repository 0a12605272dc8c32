"""
Side-effect dispatcher component.

Failure-isolated, time-bounded execution of post-commit side effects.
"""

from portfolio.components.dispatch.component import (
    InlineDispatcher,
    SideEffectDispatcher,
    dispatch,
    run_task,
)
from portfolio.components.dispatch.models import (
    DispatcherConfig,
    DispatchReport,
    SideEffectTask,
)
from portfolio.components.dispatch.ports import DispatcherPort

__all__ = [
    "dispatch",
    "run_task",
    "SideEffectDispatcher",
    "InlineDispatcher",
    "DispatcherConfig",
    "DispatchReport",
    "SideEffectTask",
    "DispatcherPort",
]
