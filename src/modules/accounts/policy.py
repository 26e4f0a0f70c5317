"""Authorization policy.

A single rule table mapping ``(role, action, resource state)`` to
allow/deny.  ``can`` is a pure predicate; ``authorize`` is the gate every
service command calls first and raises ``Unauthorized``/``Forbidden``.
Denials never mention which role would have been accepted.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Callable, Dict, FrozenSet, Optional
from uuid import UUID

import structlog

from modules.accounts.constants import UserRole
from modules.core.exceptions import Forbidden, Unauthorized

logger = structlog.get_logger(__name__)

ADMIN = UserRole.ADMIN
GERENTE = UserRole.GERENTE
USUARIO = UserRole.USUARIO
SEPARADOR = UserRole.SEPARADOR
CONFERENTE = UserRole.CONFERENTE
AUDITOR = UserRole.AUDITOR

ALL_ROLES: FrozenSet[str] = frozenset(UserRole.values)


class Action(str, enum.Enum):
    CREATE_SHIPMENT = "create_shipment"
    EDIT_SHIPMENT = "edit_shipment"
    SIGN_SHIPMENT = "sign_shipment"
    FINALIZE_SHIPMENT = "finalize_shipment"
    DELETE_SHIPMENT = "delete_shipment"
    CREATE_INVOICE = "create_invoice"
    BIND_INVOICE = "bind_invoice"
    UNBIND_INVOICE = "unbind_invoice"
    DELETE_INVOICE = "delete_invoice"
    CREATE_ORDER = "create_order"
    ASSIGN_SEPARATOR = "assign_separator"
    SUBMIT_CONFERENCE = "submit_conference"
    SUBMIT_AUDIT = "submit_audit"
    VALIDATE_ORDER = "validate_order"
    SET_USER_ACTIVE = "set_user_active"
    LIST_USERS = "list_users"
    VIEW_DASHBOARD = "view_dashboard"
    VIEW_REPORTS = "view_reports"
    MANAGE_DRIVERS = "manage_drivers"


@dataclass(frozen=True)
class Actor:
    """The authenticated caller as seen by the domain."""

    user_id: UUID
    role: str
    is_active: bool = True

    @classmethod
    def from_user(cls, user: Any) -> Optional["Actor"]:
        """Build an actor from a Django user; ``None`` for anonymous."""
        if user is None or not getattr(user, "is_authenticated", False):
            return None
        return cls(user_id=user.pk, role=user.role, is_active=user.is_active)


@dataclass(frozen=True)
class ResourceState:
    """Facts about the target resource that a rule may depend on.

    ``None`` means "not applicable / unknown"; rules that need a fact
    treat it as the least privileged case.
    """

    shipment_finalized: Optional[bool] = None
    invoice_bound: Optional[bool] = None
    validation_pending: Optional[bool] = None
    target_role: Optional[str] = None
    is_self: Optional[bool] = None


Rule = Callable[[str, ResourceState], bool]


# ---------------------------------------------------------------------------
# Rule table
# ---------------------------------------------------------------------------


def _roles(*allowed: str) -> Rule:
    allowed_set = frozenset(allowed)
    return lambda role, state: role in allowed_set


def _by_shipment_state(
    open_roles: FrozenSet[str], finalized_roles: FrozenSet[str]
) -> Rule:
    def rule(role: str, state: ResourceState) -> bool:
        if state.shipment_finalized:
            return role in finalized_roles
        return role in open_roles

    return rule


def _delete_invoice(role: str, state: ResourceState) -> bool:
    if state.shipment_finalized:
        return False
    if role in (ADMIN, GERENTE):
        return True
    return role == USUARIO and state.invoice_bound is False


def _validate_order(role: str, state: ResourceState) -> bool:
    if role not in (ADMIN, GERENTE):
        return False
    return state.validation_pending is not False


def _set_user_active(role: str, state: ResourceState) -> bool:
    if role == ADMIN:
        return True
    if role == GERENTE:
        return state.is_self is False and state.target_role not in (None, ADMIN)
    return False


_EDITORS = frozenset({ADMIN, GERENTE, USUARIO})
_ADMIN_ONLY = frozenset({ADMIN})

RULES: Dict[Action, Rule] = {
    Action.CREATE_SHIPMENT: _roles(ADMIN, GERENTE, USUARIO),
    Action.EDIT_SHIPMENT: _by_shipment_state(_EDITORS, _ADMIN_ONLY),
    Action.SIGN_SHIPMENT: _roles(*ALL_ROLES),
    Action.FINALIZE_SHIPMENT: _roles(ADMIN, GERENTE),
    Action.DELETE_SHIPMENT: _by_shipment_state(
        frozenset({ADMIN, GERENTE}), _ADMIN_ONLY
    ),
    Action.CREATE_INVOICE: _roles(ADMIN, GERENTE, USUARIO),
    Action.BIND_INVOICE: _by_shipment_state(_EDITORS, _ADMIN_ONLY),
    Action.UNBIND_INVOICE: _by_shipment_state(_EDITORS, _ADMIN_ONLY),
    Action.DELETE_INVOICE: _delete_invoice,
    Action.CREATE_ORDER: _roles(ADMIN, GERENTE),
    Action.ASSIGN_SEPARATOR: _roles(ADMIN, GERENTE, SEPARADOR),
    Action.SUBMIT_CONFERENCE: _roles(ADMIN, GERENTE, CONFERENTE),
    Action.SUBMIT_AUDIT: _roles(ADMIN, AUDITOR),
    Action.VALIDATE_ORDER: _validate_order,
    Action.SET_USER_ACTIVE: _set_user_active,
    Action.LIST_USERS: _roles(ADMIN, GERENTE),
    Action.VIEW_DASHBOARD: _roles(ADMIN, GERENTE),
    Action.VIEW_REPORTS: _roles(ADMIN, GERENTE, AUDITOR),
    Action.MANAGE_DRIVERS: _roles(ADMIN, GERENTE, USUARIO),
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def can(
    role: Optional[str],
    action: Action,
    state: Optional[ResourceState] = None,
) -> bool:
    """Return ``True`` if *role* may perform *action* on a resource in *state*.

    ``role=None`` is the anonymous caller and is always denied.
    """
    if role is None or role not in ALL_ROLES:
        return False
    return RULES[action](role, state or ResourceState())


def authorize(
    actor: Optional[Actor],
    action: Action,
    state: Optional[ResourceState] = None,
) -> None:
    """Raise unless *actor* may perform *action*.

    Raises:
        Unauthorized: no actor, or the actor is inactive.
        Forbidden: the rule table denies the actor's role.
    """
    if actor is None or not actor.is_active:
        logger.warning("policy.unauthenticated", action=action.value)
        raise Unauthorized()
    if not can(actor.role, action, state):
        logger.warning(
            "policy.denied",
            action=action.value,
            user_id=str(actor.user_id),
            role=actor.role,
        )
        raise Forbidden()
