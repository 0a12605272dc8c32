from typing import Any

from fastapi import APIRouter, Depends

from portfolio.api.deps import Container, require_admin
from portfolio.api.responses import envelope
from portfolio.components.dashboard import run

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("")
def dashboard(container: Container) -> dict[str, Any]:
    """Site-wide counts and the latest activity."""
    return envelope(run(repo=container.dashboard).to_dict())
