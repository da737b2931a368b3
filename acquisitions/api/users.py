"""User management: list, view, update and delete profiles under role-based rules."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, status

from acquisitions.api.deps import AdminUser, CurrentUser, get_profile_service
from acquisitions.core.exceptions import (
    AuthorizationError,
    DuplicateEmailError,
    SelfDeletionError,
    UserNotFoundError,
)
from acquisitions.schemas.auth import MessageResponse
from acquisitions.schemas.users import UserResponse, UsersListResponse, UserUpdate
from acquisitions.services.authorization import Action, authorize, authorize_update
from acquisitions.services.profiles import ProfileService

logger = logging.getLogger(__name__)

router = APIRouter()

ProfilesDep = Annotated[ProfileService, Depends(get_profile_service)]
UserId = Annotated[int, Path(gt=0, description="User id")]


def _forbidden(e: AuthorizationError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=e.message)


def _not_found(e: UserNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)


@router.get("", response_model=UsersListResponse)
def list_users(admin: AdminUser, profiles: ProfilesDep) -> UsersListResponse:
    """List all users (admin only)."""
    users = profiles.list_all()
    logger.info("All users fetched by admin: %s", admin.email)
    return UsersListResponse(message="Users retrieved successfully", users=users)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: UserId, current_user: CurrentUser, profiles: ProfilesDep) -> UserResponse:
    """Return one user. Users may only view themselves unless they are admin."""
    try:
        authorize(current_user, Action.VIEW_ONE, user_id)
        user = profiles.get_by_id(user_id)
    except AuthorizationError as e:
        raise _forbidden(e) from e
    except UserNotFoundError as e:
        raise _not_found(e) from e

    logger.info("User %s fetched by %s", user_id, current_user.email)
    return UserResponse(message="User retrieved successfully", user=user)


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: UserId,
    body: UserUpdate,
    current_user: CurrentUser,
    profiles: ProfilesDep,
) -> UserResponse:
    """
    Sparse update of name, email, password and role.

    Users may only update themselves unless they are admin, and only admins may
    change a role. A denied request changes nothing.
    """
    changes = body.changes()
    try:
        authorize_update(current_user, user_id, changes)
        user = profiles.update(user_id, changes)
    except AuthorizationError as e:
        raise _forbidden(e) from e
    except UserNotFoundError as e:
        raise _not_found(e) from e
    except DuplicateEmailError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e

    logger.info("User %s updated by %s", user_id, current_user.email)
    return UserResponse(message="User updated successfully", user=user)


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(user_id: UserId, current_user: CurrentUser, profiles: ProfilesDep) -> MessageResponse:
    """Delete a user (admin only). Nobody can delete their own account."""
    try:
        authorize(current_user, Action.DELETE, user_id)
        profiles.remove(user_id)
    except SelfDeletionError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    except AuthorizationError as e:
        raise _forbidden(e) from e
    except UserNotFoundError as e:
        raise _not_found(e) from e

    logger.info("User %s deleted by admin: %s", user_id, current_user.email)
    return MessageResponse(message="User deleted successfully")
