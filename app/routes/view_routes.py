from fastapi import APIRouter, Depends

from app.dependencies import get_access_service, get_current_caller
from app.services.access_service import AccessDecisionService
from app.schemas.snapshot_schemas import MaskedRecordResponse, UserSnapshotSchema
from app.schemas.view_schemas import (
    LedgerRequest,
    LedgerResponse,
    UserListRequest,
    UserListResponse,
)

router = APIRouter(dependencies=[Depends(get_current_caller)])


@router.post("/users", response_model=UserListResponse)
async def list_visible_users(
    request: UserListRequest,
    service: AccessDecisionService = Depends(get_access_service),
):
    """
    Filter a directory snapshot down to the users the actor may list.

    - SUPER_ADMIN / ADMIN: everyone
    - MANAGER: own family
    - MEMBER: only themself
    - TRANSLATOR: nobody
    """
    users = service.visible_users(
        request.actor.to_snapshot(), [u.to_snapshot() for u in request.users]
    )
    return {
        "users": [UserSnapshotSchema.from_dataclass(u) for u in users],
        "total": len(users),
    }


@router.post("/users/pending", response_model=UserListResponse)
async def list_pending_users(
    request: UserListRequest,
    service: AccessDecisionService = Depends(get_access_service),
):
    """
    Pending registrations the actor can approve or reject.

    Empty unless the actor is ADMIN or SUPER_ADMIN.
    """
    users = service.pending_users(
        request.actor.to_snapshot(), [u.to_snapshot() for u in request.users]
    )
    return {
        "users": [UserSnapshotSchema.from_dataclass(u) for u in users],
        "total": len(users),
    }


@router.post("/transactions", response_model=LedgerResponse)
async def view_transactions(
    request: LedgerRequest,
    service: AccessDecisionService = Depends(get_access_service),
):
    """
    Render transactions for a viewer with masking applied.

    Out-of-scope records are removed. Masked records keep category, type,
    date and description but report amount 0, and totals ignore them.
    """
    ledger = service.mask_transactions(
        request.viewer.to_snapshot(),
        [u.to_snapshot() for u in request.users],
        [t.to_snapshot() for t in request.transactions],
    )
    return {
        "transactions": [MaskedRecordResponse.from_dataclass(r) for r in ledger.records],
        "total_income": ledger.total_income,
        "total_expense": ledger.total_expense,
        "balance": ledger.balance,
        "has_masked_data": ledger.has_masked_data,
    }
