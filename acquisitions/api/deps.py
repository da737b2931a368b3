"""Shared route dependencies: services, current user resolution and the session cookie."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, Response, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from acquisitions.core.config import Settings, get_settings
from acquisitions.core.database import get_db
from acquisitions.core.exceptions import AuthorizationError, InvalidTokenError
from acquisitions.core.security import PasswordHasher, TokenService
from acquisitions.schemas.auth import Actor
from acquisitions.services.authorization import Action, authorize
from acquisitions.services.identity import IdentityService
from acquisitions.services.profiles import ProfileService
from acquisitions.services.user_store import UserStore

security = HTTPBearer(auto_error=False)

SettingsDep = Annotated[Settings, Depends(get_settings)]
DbDep = Annotated[Session, Depends(get_db)]


def get_user_store(db: DbDep) -> UserStore:
    return UserStore(db)


def get_password_hasher(settings: SettingsDep) -> PasswordHasher:
    return PasswordHasher.from_settings(settings)


def get_token_service(settings: SettingsDep) -> TokenService:
    return TokenService(settings)


def get_identity_service(
    store: Annotated[UserStore, Depends(get_user_store)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
) -> IdentityService:
    return IdentityService(store, hasher)


def get_profile_service(
    store: Annotated[UserStore, Depends(get_user_store)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
) -> ProfileService:
    return ProfileService(store, hasher)


def _unauthenticated(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    request: Request,
    settings: SettingsDep,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
    store: Annotated[UserStore, Depends(get_user_store)],
) -> Actor:
    """
    Dependency: resolve the acting user from the session cookie or a Bearer header.

    The cookie is tried first; a stale cookie does not shadow a valid Bearer token.
    Raises 401 if no token verifies or the token names a user that no longer exists.
    """
    candidates = [request.cookies.get(settings.COOKIE_NAME)]
    if credentials is not None:
        candidates.append(credentials.credentials)
    candidates = [t for t in candidates if t]
    if not candidates:
        raise _unauthenticated("Authentication required")

    claims = None
    error: InvalidTokenError | None = None
    for token in candidates:
        try:
            claims = tokens.verify(token)
            break
        except InvalidTokenError as e:
            error = e
    if claims is None:
        raise _unauthenticated(error.message) from error

    # Role and existence come from the store so demotions and deletions apply immediately
    user = store.find_by_id(claims.id)
    if user is None:
        raise _unauthenticated("User not found")
    return Actor.model_validate(user)


CurrentUser = Annotated[Actor, Depends(get_current_user)]


def require_admin(current_user: CurrentUser) -> Actor:
    """Dependency: require authenticated user with role 'admin'. Raises 403 for non-admin."""
    try:
        authorize(current_user, Action.VIEW_ALL)
    except AuthorizationError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=e.message) from e
    return current_user


AdminUser = Annotated[Actor, Depends(require_admin)]


def set_session_cookie(response: Response, token: str, settings: Settings, max_age: int) -> None:
    """Write the JWT as an httpOnly cookie that expires together with the token."""
    response.set_cookie(
        settings.COOKIE_NAME,
        value=token,
        httponly=True,
        samesite="strict",
        secure=settings.secure_cookies,
        max_age=max_age,
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        settings.COOKIE_NAME,
        httponly=True,
        samesite="strict",
        secure=settings.secure_cookies,
    )
