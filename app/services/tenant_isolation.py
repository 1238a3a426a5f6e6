"""Tenant (family) isolation: which users and records an actor may enumerate."""

from typing import Iterable, Mapping

from app.models.role import Role
from app.models.transaction import RecordSnapshot
from app.models.user import UserSnapshot


def in_scope(actor: UserSnapshot, candidate: UserSnapshot) -> bool:
    """
    Check if actor may enumerate candidate at all.

    - SUPER_ADMIN / ADMIN: every user, across families
    - MANAGER: users of their own family
    - MEMBER: only themself
    - TRANSLATOR: nobody (no financial scope)

    Value-level masking is decided separately by the visibility policy.
    """
    if actor.role.is_admin:
        return True
    if actor.role == Role.MANAGER:
        if actor.family_id is None:
            return candidate.id == actor.id
        return candidate.family_id == actor.family_id
    if actor.role == Role.MEMBER:
        return candidate.id == actor.id
    return False


def visible_users(actor: UserSnapshot, users: Iterable[UserSnapshot]) -> list[UserSnapshot]:
    """Filter users down to those in actor's scope, preserving order."""
    return [user for user in users if in_scope(actor, user)]


def records_in_scope(
    actor: UserSnapshot,
    records: Iterable[RecordSnapshot],
    owners: Mapping[str, UserSnapshot],
) -> list[RecordSnapshot]:
    """
    Filter records down to those whose owner is in actor's scope.

    Args:
        actor: Viewing user
        records: Candidate records
        owners: User snapshots keyed by ID

    Returns:
        Records with a known, in-scope owner. Records whose owner is
        missing from owners are never enumerable.
    """
    result = []
    for record in records:
        owner = owners.get(record.owner_user_id)
        if owner is not None and in_scope(actor, owner):
            result.append(record)
    return result
