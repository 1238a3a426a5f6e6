from dataclasses import asdict
from datetime import date
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from typing import Optional

from app.models.role import Role
from app.models.transaction import RecordSnapshot, TransactionType
from app.models.user import UserSnapshot, UserStatus


class CamelModel(BaseModel):
    """
    Base for every request and response body.

    Serializes in camelCase (familyId) and accepts camelCase or
    snake_case (family_id) on input.
    """

    model_config = {"alias_generator": to_camel, "populate_by_name": True}

    @classmethod
    def from_dataclass(cls, obj):
        """Build from one of the frozen snapshot dataclasses"""
        return cls.model_validate(asdict(obj))


class UserSnapshotSchema(CamelModel):
    """User as supplied by the user directory"""

    id: str = Field(..., min_length=1)
    role: Role
    family_id: Optional[str] = None
    status: UserStatus = UserStatus.APPROVED
    created_by: Optional[str] = None
    birth_date: Optional[date] = None
    allow_parent_view: bool = False

    def to_snapshot(self) -> UserSnapshot:
        return UserSnapshot(
            id=self.id,
            role=self.role,
            family_id=self.family_id,
            status=self.status,
            created_by=self.created_by,
            birth_date=self.birth_date,
            allow_parent_view=self.allow_parent_view,
        )


class RecordSnapshotSchema(CamelModel):
    """Financial record as supplied by the record store"""

    id: str = Field(..., min_length=1)
    owner_user_id: str = Field(..., min_length=1)
    amount: float = Field(..., ge=0, description="Always positive; direction comes from type")
    category: str = Field(..., min_length=1, max_length=100)
    type: TransactionType
    date: date
    description: Optional[str] = Field(None, max_length=1000)

    def to_snapshot(self) -> RecordSnapshot:
        return RecordSnapshot(
            id=self.id,
            owner_user_id=self.owner_user_id,
            amount=self.amount,
            category=self.category,
            type=self.type,
            date=self.date,
            description=self.description,
        )


class MaskedRecordResponse(CamelModel):
    """Record as shown to the viewer; amount is 0 when is_masked"""

    id: str
    owner_user_id: str
    amount: float
    category: str
    type: TransactionType
    date: date
    description: Optional[str]
    is_masked: bool
