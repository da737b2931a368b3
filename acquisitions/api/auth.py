"""Sign-up, sign-in and sign-out. The session JWT is carried in an httpOnly cookie."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status

from acquisitions.api.deps import (
    CurrentUser,
    SettingsDep,
    clear_session_cookie,
    get_identity_service,
    get_token_service,
    set_session_cookie,
)
from acquisitions.core.config import Settings
from acquisitions.core.exceptions import (
    DuplicateEmailError,
    InvalidCredentialsError,
    UserNotFoundError,
)
from acquisitions.core.security import TokenService
from acquisitions.schemas.auth import (
    AuthResponse,
    MessageResponse,
    SignInRequest,
    SignUpRequest,
    TokenClaims,
)
from acquisitions.schemas.users import UserOut
from acquisitions.services.identity import IdentityService

logger = logging.getLogger(__name__)

router = APIRouter()

IdentityDep = Annotated[IdentityService, Depends(get_identity_service)]
TokensDep = Annotated[TokenService, Depends(get_token_service)]


def _start_session(response: Response, user: UserOut, tokens: TokenService, settings: Settings) -> None:
    token = tokens.issue(TokenClaims(id=user.id, email=user.email, role=user.role))
    set_session_cookie(response, token, settings, max_age=tokens.max_age_seconds)
    response.headers["Cache-Control"] = "no-store"


@router.post("/sign-up", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def sign_up(
    body: SignUpRequest,
    response: Response,
    identity: IdentityDep,
    tokens: TokensDep,
    settings: SettingsDep,
) -> AuthResponse:
    """Register a new user and start a session. Returns 409 if the email is already registered."""
    try:
        user = identity.register(body.name, body.email, body.password, body.role)
    except DuplicateEmailError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e

    _start_session(response, user, tokens, settings)
    return AuthResponse(message="User registered", user=user)


@router.post("/sign-in", response_model=AuthResponse)
def sign_in(
    body: SignInRequest,
    response: Response,
    identity: IdentityDep,
    tokens: TokensDep,
    settings: SettingsDep,
) -> AuthResponse:
    """
    Authenticate with email and password and start a session.
    Unknown email and wrong password both answer 401 with the same message.
    """
    try:
        user = identity.authenticate(body.email, body.password)
    except (UserNotFoundError, InvalidCredentialsError) as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=InvalidCredentialsError().message,
        ) from e

    _start_session(response, user, tokens, settings)
    return AuthResponse(message="User signed in successfully", user=user)


@router.post("/sign-out", response_model=MessageResponse)
def sign_out(
    response: Response,
    current_user: CurrentUser,
    settings: SettingsDep,
) -> MessageResponse:
    """Clear the session cookie."""
    clear_session_cookie(response, settings)
    logger.info("User %s signed out", current_user.email)
    return MessageResponse(message="User signed out successfully")
