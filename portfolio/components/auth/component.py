import logging
from datetime import timedelta

from portfolio.components.newsletter.component import validate_email
from portfolio.domain.entities import Principal, User
from portfolio.domain.errors import (
    ConflictError,
    DuplicateKeyError,
    ForbiddenError,
    UnauthorizedError,
    ValidationError,
)
from portfolio.domain.validation import parse_model

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

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_TTL_MINUTES = 24 * 60


def run_login(
    inp: LoginInput,
    user_repo: UserRepoPort,
    auth_adapter: AuthAdapterPort,
    time: TimePort,
    ttl_minutes: int = DEFAULT_TOKEN_TTL_MINUTES,
) -> AuthOutput:
    """
    Check credentials and issue an access token.

    Unknown email and wrong password are indistinguishable to the caller.
    A deactivated account with the right password is Forbidden.
    """
    creds = parse_model(LoginSchema, {"email": inp.email, "password": inp.password})
    email = creds.email.strip().lower()

    user = user_repo.get_by_email(email)
    if not user or not auth_adapter.verify_password(creds.password, user.password_hash):
        logger.warning("Login failed for %s: invalid credentials", email)
        raise UnauthorizedError("Invalid email or password")

    if not user.is_active:
        logger.warning("Login failed for %s: account deactivated", email)
        raise ForbiddenError("Account is deactivated")

    now = time.now_utc()
    token = auth_adapter.create_token(
        user.id, ttl_minutes, claims={"role": user.role}, now_utc=now
    )
    user_repo.touch_last_login(user.id, now)
    logger.info("User %s logged in", user.id)
    return AuthOutput(
        user=user.model_copy(update={"last_login": now}),
        token=token,
        expires_at=now + timedelta(minutes=ttl_minutes),
    )


def run_resolve_principal(
    inp: ResolvePrincipalInput,
    user_repo: UserRepoPort,
    auth_adapter: AuthAdapterPort,
) -> PrincipalOutput:
    """
    Map a bearer token to a principal.

    Missing, invalid or expired tokens and tokens for deleted users all
    resolve to the anonymous principal. Role and active flag come from the
    stored user, not from the token claims.
    """
    if not inp.token:
        return PrincipalOutput(principal=Principal.anonymous())

    claims = auth_adapter.decode_token(inp.token)
    user_id = claims.get("sub") if claims else None
    if not user_id:
        return PrincipalOutput(principal=Principal.anonymous())

    user = user_repo.get_by_id(str(user_id))
    if user is None:
        return PrincipalOutput(principal=Principal.anonymous())

    return PrincipalOutput(principal=Principal.for_user(user), user=user)


def run_create_admin(
    inp: CreateAdminInput,
    user_repo: UserRepoPort,
    auth_adapter: AuthAdapterPort,
    time: TimePort,
) -> UserOutput:
    data = parse_model(
        CreateAdminSchema, {"email": inp.email, "password": inp.password, "name": inp.name}
    )
    checked = validate_email(data.email)
    if not checked.is_valid or checked.normalized_email is None:
        raise ValidationError("email", checked.error or "Invalid email")
    email = checked.normalized_email

    if user_repo.get_by_email(email):
        raise ConflictError(f"User already exists with email: {email}")

    now = time.now_utc()
    user = User(
        email=email,
        name=data.name.strip(),
        password_hash=auth_adapter.hash_password(data.password),
        role="admin",
        is_active=True,
        created_at=now,
        updated_at=now,
    )
    try:
        saved = user_repo.insert(user)
    except DuplicateKeyError as e:
        raise ConflictError(f"User already exists with email: {email}") from e

    logger.info("Admin user %s created", saved.id)
    return UserOutput(user=saved)


def run(
    inp: LoginInput | ResolvePrincipalInput | CreateAdminInput,
    *,
    user_repo: UserRepoPort,
    auth_adapter: AuthAdapterPort,
    time: TimePort | None = None,
) -> AuthOutput | PrincipalOutput | UserOutput:
    if isinstance(inp, LoginInput):
        assert time
        return run_login(inp, user_repo, auth_adapter, time)

    elif isinstance(inp, ResolvePrincipalInput):
        return run_resolve_principal(inp, user_repo, auth_adapter)

    elif isinstance(inp, CreateAdminInput):
        assert time
        return run_create_admin(inp, user_repo, auth_adapter, time)

    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
