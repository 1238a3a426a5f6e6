"""User role enum and hierarchy predicates for role-based access control."""

from enum import Enum as PyEnum


class Role(str, PyEnum):
    """
    Application roles.

    Financial hierarchy (highest to lowest):
    1. SUPER_ADMIN - Everything, across all families, including family deletion
    2. ADMIN - Cross-family visibility, moderates pending users
    3. MANAGER - Manages the members of their own family
    4. MEMBER - Sees only their own data

    TRANSLATOR sits outside the hierarchy: it grants access to the
    translation subsystem only and has no financial scope.
    """

    SUPER_ADMIN = "SUPER_ADMIN"
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    TRANSLATOR = "TRANSLATOR"
    MEMBER = "MEMBER"

    @property
    def is_admin(self) -> bool:
        """ADMIN or SUPER_ADMIN (cross-family privilege)."""
        return self in (Role.SUPER_ADMIN, Role.ADMIN)


# TRANSLATOR has no rank
ROLE_RANKS = {
    Role.SUPER_ADMIN: 3,
    Role.ADMIN: 2,
    Role.MANAGER: 1,
    Role.MEMBER: 0,
}


def is_translator(role: Role) -> bool:
    return role == Role.TRANSLATOR


def rank(role: Role) -> int:
    """
    Position of a role in the financial hierarchy.

    Raises:
        ValueError: For TRANSLATOR, which has no rank
    """
    try:
        return ROLE_RANKS[role]
    except KeyError:
        raise ValueError(f"Role {role.value} has no rank in the financial hierarchy")


def at_least(role: Role, threshold: Role) -> bool:
    """Check if role meets or exceeds threshold. Never call with TRANSLATOR."""
    return rank(role) >= rank(threshold)


def can_access_translations(role: Role) -> bool:
    """Translation editor is open to translators and the super admin."""
    return role in (Role.TRANSLATOR, Role.SUPER_ADMIN)


def can_access_admin_panel(role: Role) -> bool:
    return role in (Role.SUPER_ADMIN, Role.ADMIN, Role.MANAGER)
