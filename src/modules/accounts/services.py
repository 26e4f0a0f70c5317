"""User administration use cases."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import structlog
from django.db import transaction

from modules.accounts.constants import UserRole
from modules.accounts.exceptions import UserNotFound
from modules.accounts.policy import Action, Actor, ResourceState, authorize
from modules.core.exceptions import InvalidInput

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.accounts.models import User
    from modules.accounts.repositories.interfaces import IUserRepository

logger = structlog.get_logger(__name__)


class UserService:
    def __init__(self, repository: IUserRepository) -> None:
        self._repo = repository

    @transaction.atomic
    def set_active(self, actor: Optional[Actor], user_id: str, active: bool) -> User:
        """Activate or deactivate a user.

        ADMIN may change anyone; GERENTE may change non-ADMIN users other
        than themselves.

        Raises:
            UserNotFound: the target user does not exist.
            Forbidden: the policy denies the change.
        """
        target = self._repo.get_for_update(user_id)
        if not target:
            raise UserNotFound(f"User {user_id} not found.")

        authorize(
            actor,
            Action.SET_USER_ACTIVE,
            ResourceState(
                target_role=target.role,
                is_self=actor is not None and actor.user_id == target.id,
            ),
        )

        target.is_active = active
        self._repo.save(target)
        logger.info(
            "user.status_changed",
            user_id=str(target.id),
            active=active,
            changed_by=str(actor.user_id),
        )
        return target

    def list_users(
        self, actor: Optional[Actor], role: Optional[str] = None
    ) -> QuerySet:
        authorize(actor, Action.LIST_USERS)
        if role and role not in UserRole.values:
            raise InvalidInput(f"Unknown role {role!r}.")
        return self._repo.list_by_role(role)
