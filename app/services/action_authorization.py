"""Authorization rules for mutating actions on users and tenants."""

from typing import Any, Callable, Mapping, Union

from app.models.decision import Action, Decision, DenyReason
from app.models.role import Role
from app.models.tenant import Tenant
from app.models.user import UserSnapshot
from app.services.tenant_isolation import in_scope

Target = Union[UserSnapshot, Tenant]

# Profile fields only ADMIN / SUPER_ADMIN may change
ADMIN_ONLY_PROFILE_FIELDS = frozenset({"role", "family_id", "status"})

# Set once at registration, never editable
READ_ONLY_PROFILE_FIELDS = frozenset({"created_by"})


def _change_own_password(actor: UserSnapshot, target: UserSnapshot, **_: Any) -> Decision:
    # Credential verification happens outside; this only gates the attempt
    if actor.id == target.id:
        return Decision.allow()
    return Decision.deny(DenyReason.INSUFFICIENT_ROLE)


def _edit_profile(actor: UserSnapshot, target: UserSnapshot, **_: Any) -> Decision:
    if actor.id == target.id or actor.role.is_admin:
        return Decision.allow()
    if actor.role == Role.MANAGER:
        if in_scope(actor, target):
            return Decision.allow()
        return Decision.deny(DenyReason.OUT_OF_SCOPE)
    return Decision.deny(DenyReason.INSUFFICIENT_ROLE)


def _delete_user(actor: UserSnapshot, target: UserSnapshot, **_: Any) -> Decision:
    if actor.id == target.id:
        return Decision.deny(DenyReason.SELF_ACTION_FORBIDDEN)

    if actor.role == Role.SUPER_ADMIN:
        return Decision.allow()
    if actor.role == Role.ADMIN:
        if target.role.is_admin:
            return Decision.deny(DenyReason.INSUFFICIENT_ROLE)
        return Decision.allow()
    if actor.role == Role.MANAGER:
        if not in_scope(actor, target):
            return Decision.deny(DenyReason.OUT_OF_SCOPE)
        if target.role != Role.MEMBER:
            return Decision.deny(DenyReason.INSUFFICIENT_ROLE)
        return Decision.allow()
    return Decision.deny(DenyReason.INSUFFICIENT_ROLE)


def _reset_password(actor: UserSnapshot, target: UserSnapshot, **_: Any) -> Decision:
    """
    Administrative force-reset of another user's password.

    Admins may reset every role except plain members; managers may reset
    only the members of their own family. Kept as observed in production
    pending product clarification.
    """
    if actor.id == target.id:
        return Decision.deny(DenyReason.SELF_ACTION_FORBIDDEN)

    if actor.role.is_admin:
        if target.role == Role.MEMBER:
            return Decision.deny(DenyReason.INSUFFICIENT_ROLE)
        return Decision.allow()
    if actor.role == Role.MANAGER:
        if not in_scope(actor, target):
            return Decision.deny(DenyReason.OUT_OF_SCOPE)
        if target.role != Role.MEMBER:
            return Decision.deny(DenyReason.INSUFFICIENT_ROLE)
        return Decision.allow()
    return Decision.deny(DenyReason.INSUFFICIENT_ROLE)


def _moderate_user(actor: UserSnapshot, target: UserSnapshot, **_: Any) -> Decision:
    """Approve or reject a pending registration."""
    if not actor.role.is_admin:
        return Decision.deny(DenyReason.INSUFFICIENT_ROLE)
    if not target.is_pending:
        return Decision.deny(DenyReason.TARGET_NOT_PENDING)
    return Decision.allow()


def _delete_tenant(
    actor: UserSnapshot, target: Tenant, *, reserved_tenant_id: str, **_: Any
) -> Decision:
    if actor.role != Role.SUPER_ADMIN:
        return Decision.deny(DenyReason.INSUFFICIENT_ROLE)
    if target.id == reserved_tenant_id:
        return Decision.deny(DenyReason.PROTECTED_TENANT)
    return Decision.allow()


RULES: Mapping[Action, Callable[..., Decision]] = {
    Action.CHANGE_OWN_PASSWORD: _change_own_password,
    Action.EDIT_PROFILE: _edit_profile,
    Action.DELETE_USER: _delete_user,
    Action.RESET_PASSWORD: _reset_password,
    Action.APPROVE_USER: _moderate_user,
    Action.REJECT_USER: _moderate_user,
    Action.DELETE_TENANT: _delete_tenant,
}


def authorize(
    actor: UserSnapshot, target: Target, action: Action, reserved_tenant_id: str
) -> Decision:
    """
    Decide whether actor may perform action on target.

    Args:
        actor: Authenticated user attempting the action
        target: UserSnapshot for user actions, Tenant for DELETE_TENANT
        action: Action being attempted
        reserved_tenant_id: ID of the family that can never be deleted

    Returns:
        Decision.allow() or Decision.deny(reason). Never raises for
        well-formed input.
    """
    rule = RULES[action]
    return rule(actor, target, reserved_tenant_id=reserved_tenant_id)


def filter_profile_changes(
    actor: UserSnapshot, changes: Mapping[str, Any]
) -> tuple[dict[str, Any], list[str]]:
    """
    Strip profile fields actor is not allowed to change.

    Only ADMIN / SUPER_ADMIN may change a user's role, family or
    registration status. For anyone else those fields are silently
    dropped (the rest of the edit still applies) rather than rejected.
    The creator of a user is never editable, not even by an admin.

    Returns:
        Tuple of (applicable changes, dropped field names)
    """
    locked = READ_ONLY_PROFILE_FIELDS
    if not actor.role.is_admin:
        locked = locked | ADMIN_ONLY_PROFILE_FIELDS

    applied = {}
    dropped = []
    for field_name, value in changes.items():
        if field_name in locked:
            dropped.append(field_name)
        else:
            applied[field_name] = value
    return applied, dropped
