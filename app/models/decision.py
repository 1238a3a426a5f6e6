"""Authorization actions and verdicts."""

from dataclasses import dataclass
from enum import Enum as PyEnum
from typing import Optional


class Action(str, PyEnum):
    """Mutating actions that require authorization."""

    EDIT_PROFILE = "EDIT_PROFILE"
    DELETE_USER = "DELETE_USER"
    RESET_PASSWORD = "RESET_PASSWORD"
    APPROVE_USER = "APPROVE_USER"
    REJECT_USER = "REJECT_USER"
    DELETE_TENANT = "DELETE_TENANT"
    CHANGE_OWN_PASSWORD = "CHANGE_OWN_PASSWORD"

    @property
    def targets_tenant(self) -> bool:
        return self == Action.DELETE_TENANT


class DenyReason(str, PyEnum):
    """Machine-readable reason attached to a Deny verdict."""

    SELF_ACTION_FORBIDDEN = "SELF_ACTION_FORBIDDEN"
    OUT_OF_SCOPE = "OUT_OF_SCOPE"
    INSUFFICIENT_ROLE = "INSUFFICIENT_ROLE"
    TARGET_NOT_PENDING = "TARGET_NOT_PENDING"
    PROTECTED_TENANT = "PROTECTED_TENANT"


@dataclass(frozen=True)
class Decision:
    """
    Authorization verdict: Allow, or Deny with a reason.

    Use Decision.allow() / Decision.deny(reason) rather than the
    constructor. Decisions are values, never raised.
    """

    allowed: bool
    reason: Optional[DenyReason] = None

    @classmethod
    def allow(cls) -> "Decision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: DenyReason) -> "Decision":
        return cls(allowed=False, reason=reason)

    def __bool__(self) -> bool:
        return self.allowed

    def __repr__(self) -> str:
        if self.allowed:
            return "<Allow>"
        return f"<Deny(reason={self.reason.value})>"
