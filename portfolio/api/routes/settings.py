"""
Site settings endpoints.

Anyone may read the settings; only admins may change or reset them.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Query

from portfolio.api.deps import Container, CurrentPrincipal, require_admin
from portfolio.api.responses import dump, envelope
from portfolio.components import settings as st
from portfolio.domain.entities import Principal, SiteSettings

router = APIRouter()


def serialize(settings: SiteSettings, principal: Principal) -> dict[str, Any]:
    data = dump(settings)
    if not principal.is_admin:
        # The maintenance allow-list names the owner's own addresses
        data["maintenance"].pop("allowed_ips", None)
    data["full_site_title"] = settings.full_site_title
    data["full_site_description"] = settings.full_site_description
    return data


@router.get("")
def get_settings(container: Container, principal: CurrentPrincipal) -> dict[str, Any]:
    out = st.run_get(
        st.GetSettingsInput(),
        repo=container.site_settings,
        time=container.clock,
        defaults=container.settings_defaults,
    )
    return envelope(serialize(out.settings, principal))


@router.put("")
def update_settings(
    container: Container,
    principal: Principal = Depends(require_admin),
    body: dict[str, Any] = Body(...),
    expected_version: int | None = Query(None),
) -> dict[str, Any]:
    out = st.run_update(
        st.UpdateSettingsInput(patch=body, expected_version=expected_version),
        repo=container.site_settings,
        time=container.clock,
        defaults=container.settings_defaults,
    )
    return envelope(serialize(out.settings, principal), "Settings updated successfully")


@router.post("/reset")
def reset_settings(
    container: Container,
    principal: Principal = Depends(require_admin),
) -> dict[str, Any]:
    out = st.run_reset(
        st.ResetSettingsInput(),
        repo=container.site_settings,
        time=container.clock,
        defaults=container.settings_defaults,
    )
    return envelope(serialize(out.settings, principal), "Settings reset to defaults")
