from app.schemas.snapshot_schemas import (
    CamelModel,
    MaskedRecordResponse,
    RecordSnapshotSchema,
    UserSnapshotSchema,
)


class UserListRequest(CamelModel):
    """Directory snapshot to filter for actor"""

    actor: UserSnapshotSchema
    users: list[UserSnapshotSchema]


class UserListResponse(CamelModel):
    users: list[UserSnapshotSchema]
    total: int


class LedgerRequest(CamelModel):
    """Records to render for viewer, with snapshots of their owners"""

    viewer: UserSnapshotSchema
    users: list[UserSnapshotSchema]
    transactions: list[RecordSnapshotSchema]


class LedgerResponse(CamelModel):
    """
    Records visible to the viewer.

    Totals treat masked amounts as 0; hasMaskedData asks the UI to show
    a hidden-data indicator.
    """

    transactions: list[MaskedRecordResponse]
    total_income: float
    total_expense: float
    balance: float
    has_masked_data: bool
