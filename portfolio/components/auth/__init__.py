"""
Auth component - Authentication and admin bootstrap.

Handles login, principal resolution from access tokens, and creating the
first admin account.
"""

from .component import (
    DEFAULT_TOKEN_TTL_MINUTES,
    run,
    run_create_admin,
    run_login,
    run_resolve_principal,
)
from .models import (
    AuthOutput,
    CreateAdminInput,
    CreateAdminSchema,
    LoginInput,
    LoginSchema,
    PrincipalOutput,
    ResolvePrincipalInput,
    UserOutput,
)
from .ports import AuthAdapterPort, TimePort, UserRepoPort

__all__ = [
    # Entry points
    "run",
    "run_login",
    "run_resolve_principal",
    "run_create_admin",
    "DEFAULT_TOKEN_TTL_MINUTES",
    # Models
    "AuthOutput",
    "CreateAdminInput",
    "CreateAdminSchema",
    "LoginInput",
    "LoginSchema",
    "PrincipalOutput",
    "ResolvePrincipalInput",
    "UserOutput",
    # Ports
    "AuthAdapterPort",
    "TimePort",
    "UserRepoPort",
]
