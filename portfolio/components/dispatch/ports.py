from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from portfolio.components.dispatch.models import DispatchReport, SideEffectTask


class DispatcherPort(Protocol):
    """Runs side-effect tasks without letting them fail the caller."""

    def dispatch(self, tasks: Sequence[SideEffectTask]) -> DispatchReport: ...
