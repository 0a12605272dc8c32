"""
Settings component.

Singleton site configuration: read with defaults, admin update and reset.
"""

from portfolio.components.settings.component import (
    default_settings,
    merge_sections,
    run,
    run_get,
    run_reset,
    run_update,
)
from portfolio.components.settings.models import (
    GetSettingsInput,
    ResetSettingsInput,
    SettingsDefaults,
    SettingsOutput,
    SettingsUpdateSchema,
    UpdateSettingsInput,
)
from portfolio.components.settings.ports import SettingsRepoPort

__all__ = [
    "run",
    "run_get",
    "run_update",
    "run_reset",
    "default_settings",
    "merge_sections",
    "SettingsDefaults",
    "SettingsUpdateSchema",
    "GetSettingsInput",
    "UpdateSettingsInput",
    "ResetSettingsInput",
    "SettingsOutput",
    "SettingsRepoPort",
]
