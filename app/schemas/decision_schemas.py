from pydantic import Field, field_validator
from pydantic.alias_generators import to_snake
from typing import Any, Optional

from app.models.decision import Action, DenyReason
from app.schemas.snapshot_schemas import CamelModel, UserSnapshotSchema


class ScopeRequest(CamelModel):
    """Can actor enumerate candidate?"""

    actor: UserSnapshotSchema
    candidate: UserSnapshotSchema


class ScopeResponse(CamelModel):
    in_scope: bool


class MaskRequest(CamelModel):
    """Must owner's amounts be hidden from viewer?"""

    viewer: UserSnapshotSchema
    owner: UserSnapshotSchema


class MaskResponse(CamelModel):
    masked: bool


class AuthorizeRequest(CamelModel):
    """
    Authorize a mutating action.

    target_user is required for user actions, target_tenant_id for
    DELETE_TENANT.
    """

    actor: UserSnapshotSchema
    action: Action
    target_user: Optional[UserSnapshotSchema] = None
    target_tenant_id: Optional[str] = Field(None, min_length=1)


class DecisionResponse(CamelModel):
    """Allow (reason is null) or Deny with a machine-readable reason"""

    allowed: bool
    reason: Optional[DenyReason] = None


class ProfileChangesRequest(CamelModel):
    """Proposed profile edit of target by actor"""

    actor: UserSnapshotSchema
    target: UserSnapshotSchema
    changes: dict[str, Any] = Field(default_factory=dict)

    @field_validator("changes")
    @classmethod
    def normalize_field_names(cls, value: dict[str, Any]) -> dict[str, Any]:
        """Accept familyId, family_id or FAMILY_ID alike"""
        return {to_snake(key): item for key, item in value.items()}


class ProfileChangesResponse(CamelModel):
    """Changes that may be applied; droppedFields were silently ignored"""

    changes: dict[str, Any]
    dropped_fields: list[str]


class CapabilitiesRequest(CamelModel):
    actor: UserSnapshotSchema


class CapabilitiesResponse(CamelModel):
    """Which restricted screens the actor's role opens"""

    admin_panel: bool
    translations: bool
