from typing import Annotated, Any

from fastapi import APIRouter, Depends, Response
from fastapi.security import OAuth2PasswordRequestForm

from portfolio.api.deps import Container, CurrentPrincipal, require_admin
from portfolio.api.responses import envelope
from portfolio.components.auth import LoginInput, run_login
from portfolio.domain.entities import User
from portfolio.domain.errors import UnauthorizedError

router = APIRouter()


def user_public(user: User) -> dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "role": user.role,
        "is_active": user.is_active,
        "last_login": user.last_login.isoformat() if user.last_login else None,
    }


@router.post("/login")
def login_for_access_token(
    response: Response,
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    container: Container,
) -> dict[str, Any]:
    """Authenticate with email (as ``username``) and password."""
    ttl = container.rules.auth.token_ttl_minutes
    result = run_login(
        LoginInput(email=form_data.username, password=form_data.password),
        container.users,
        container.auth_adapter,
        container.clock,
        ttl_minutes=ttl,
    )

    # Set HttpOnly Cookie
    response.set_cookie(
        key="access_token",
        value=f"Bearer {result.token}",
        httponly=True,
        max_age=ttl * 60,
        samesite="lax",
        secure=container.rules.auth.cookie_secure,
    )

    return envelope(
        {
            "access_token": result.token,
            "token_type": "bearer",
            "expires_at": result.expires_at.isoformat(),
            "user": user_public(result.user),
        },
        "Login successful",
    )


@router.post("/logout")
def logout(response: Response) -> dict[str, Any]:
    """Log out user by clearing cookie."""
    response.delete_cookie(key="access_token")
    return envelope(None, "Logged out")


@router.get("/me")
def read_users_me(principal: CurrentPrincipal, container: Container) -> dict[str, Any]:
    """Current user info."""
    if not principal.authenticated or principal.user_id is None:
        raise UnauthorizedError("Not authenticated")
    user = container.users.get_by_id(principal.user_id)
    if user is None:
        raise UnauthorizedError("Not authenticated")
    return envelope(user_public(user))


@router.get("/verify", dependencies=[Depends(require_admin)])
def verify_admin() -> dict[str, Any]:
    """Cheap check used by the admin frontend to validate its session."""
    return envelope({"valid": True}, "Token is valid")
