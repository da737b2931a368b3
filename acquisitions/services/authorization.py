"""
Authorization rules for user management.

Every rule is a pure predicate over the acting identity and the target user id,
collected in one table keyed by Action so the rule set can be audited and
tested without HTTP.
"""

import logging
from collections.abc import Callable, Iterable
from enum import Enum

from acquisitions.core.exceptions import AuthorizationError, SelfDeletionError
from acquisitions.schemas.auth import Actor
from acquisitions.schemas.users import ROLE_ADMIN

logger = logging.getLogger(__name__)


class Action(str, Enum):
    VIEW_ALL = "view_all"
    VIEW_ONE = "view_one"
    UPDATE = "update"
    CHANGE_ROLE = "change_role"
    DELETE = "delete"


def is_admin(actor: Actor) -> bool:
    return actor.role == ROLE_ADMIN


def can_view_all(actor: Actor) -> bool:
    return is_admin(actor)


def can_view_one(actor: Actor, target: int) -> bool:
    return is_admin(actor) or actor.id == target


def can_update(actor: Actor, target: int) -> bool:
    return is_admin(actor) or actor.id == target


def can_change_role(actor: Actor) -> bool:
    return is_admin(actor)


def can_delete(actor: Actor, target: int) -> bool:
    """Admins may delete other accounts; nobody may delete their own."""
    return is_admin(actor) and actor.id != target


RULES: dict[Action, Callable[[Actor, int | None], bool]] = {
    Action.VIEW_ALL: lambda actor, _target: can_view_all(actor),
    Action.VIEW_ONE: can_view_one,
    Action.UPDATE: can_update,
    Action.CHANGE_ROLE: lambda actor, _target: can_change_role(actor),
    Action.DELETE: can_delete,
}

DENIAL_MESSAGES: dict[Action, str] = {
    Action.VIEW_ALL: "Only administrators can view all users",
    Action.VIEW_ONE: "You can only view your own profile",
    Action.UPDATE: "You can only update your own profile",
    Action.CHANGE_ROLE: "Only administrators can change user roles",
    Action.DELETE: "Only administrators can delete users",
}


def is_allowed(actor: Actor, action: Action, target: int | None = None) -> bool:
    return RULES[action](actor, target)


def authorize(actor: Actor, action: Action, target: int | None = None) -> None:
    """
    Raise if the actor may not perform action on target.

    An admin deleting their own account gets SelfDeletionError (a bad request);
    every other denial is an AuthorizationError.
    """
    if is_allowed(actor, action, target):
        return
    logger.warning(
        "Access denied: %s attempted %s on user %s", actor.email, action.value, target
    )
    if action is Action.DELETE and is_admin(actor) and actor.id == target:
        raise SelfDeletionError()
    raise AuthorizationError(DENIAL_MESSAGES[action])


def authorize_update(actor: Actor, target: int, fields: Iterable[str]) -> None:
    """Check the update rule, then the role rule when the payload carries a role."""
    authorize(actor, Action.UPDATE, target)
    if "role" in set(fields):
        authorize(actor, Action.CHANGE_ROLE, target)
