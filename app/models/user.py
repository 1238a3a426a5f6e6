"""Immutable user snapshots supplied by the user directory, with age and status helpers."""

from dataclasses import dataclass
from datetime import date
from enum import Enum as PyEnum
from typing import Optional

from app.models.role import Role


class UserStatus(str, PyEnum):
    """Account moderation status"""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


@dataclass(frozen=True)
class UserSnapshot:
    """
    Immutable view of a user supplied by the user directory.

    The engine never loads or stores users: callers read a consistent
    snapshot (one request, one DB transaction) and pass it in.

    Attributes:
        id: Unique user ID
        role: Application role
        family_id: Tenant the user belongs to (unset only for the bootstrap super admin)
        status: Moderation status
        created_by: ID of the user who created this account (parent/manager)
        birth_date: Used to derive age; unknown means adult
        allow_parent_view: Adult's consent for their creator to see their amounts
    """

    id: str
    role: Role
    family_id: Optional[str] = None
    status: UserStatus = UserStatus.APPROVED
    created_by: Optional[str] = None
    birth_date: Optional[date] = None
    allow_parent_view: bool = False

    def age(self, as_of: date) -> Optional[int]:
        """
        Whole years since birth_date: floor(days / 365.25).

        Returns:
            Age in years, or None if birth date is unknown
        """
        if self.birth_date is None:
            return None
        days = (as_of - self.birth_date).days
        return int(days // 365.25)

    def is_minor(self, as_of: date, adult_age: int = 18) -> bool:
        """Users without a birth date are treated as adults."""
        age = self.age(as_of)
        return age is not None and age < adult_age

    @property
    def is_pending(self) -> bool:
        return self.status == UserStatus.PENDING
