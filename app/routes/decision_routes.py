from fastapi import APIRouter, Depends, Response, status
from pydantic.alias_generators import to_camel

from app.core.exceptions import ValidationException
from app.dependencies import get_access_service, get_current_caller
from app.models.tenant import Tenant
from app.services.access_service import AccessDecisionService
from app.services.action_authorization import Target
from app.schemas.decision_schemas import (
    AuthorizeRequest,
    CapabilitiesRequest,
    CapabilitiesResponse,
    DecisionResponse,
    MaskRequest,
    MaskResponse,
    ProfileChangesRequest,
    ProfileChangesResponse,
    ScopeRequest,
    ScopeResponse,
)

router = APIRouter(dependencies=[Depends(get_current_caller)])


def _resolve_target(request: AuthorizeRequest) -> Target:
    """Pick the tenant or user target the action applies to."""
    if request.action.targets_tenant:
        if request.target_tenant_id is None:
            raise ValidationException(f"targetTenantId is required for {request.action.value}")
        return Tenant(id=request.target_tenant_id)

    if request.target_user is None:
        raise ValidationException(f"targetUser is required for {request.action.value}")
    return request.target_user.to_snapshot()


@router.post("/scope", response_model=ScopeResponse)
async def check_scope(
    request: ScopeRequest,
    service: AccessDecisionService = Depends(get_access_service),
):
    """
    Check tenant isolation.

    Returns whether the actor may enumerate the candidate user and their
    records at all.
    """
    in_scope = service.in_scope(request.actor.to_snapshot(), request.candidate.to_snapshot())
    return {"in_scope": in_scope}


@router.post("/mask", response_model=MaskResponse)
async def check_mask(
    request: MaskRequest,
    service: AccessDecisionService = Depends(get_access_service),
):
    """
    Check whether the owner's amounts must be hidden from the viewer.

    - Always false for the viewer's own data
    - Always true for an owner outside the viewer's scope
    """
    masked = service.should_mask_amount(request.viewer.to_snapshot(), request.owner.to_snapshot())
    return {"masked": masked}


@router.post("/authorize", response_model=DecisionResponse)
async def authorize_action(
    request: AuthorizeRequest,
    service: AccessDecisionService = Depends(get_access_service),
):
    """
    Authorize a mutating action.

    Always 200: a Deny is a normal verdict carrying a reason. Use
    /enforce to get a 403 instead.
    """
    target = _resolve_target(request)
    decision = service.authorize(request.actor.to_snapshot(), target, request.action)
    return {"allowed": decision.allowed, "reason": decision.reason}


@router.post("/enforce", status_code=status.HTTP_204_NO_CONTENT)
async def enforce_action(
    request: AuthorizeRequest,
    service: AccessDecisionService = Depends(get_access_service),
):
    """
    Authorize a mutating action, failing with 403 on Deny.

    - **204** when allowed
    - **403** with `reason` when denied
    """
    target = _resolve_target(request)
    service.enforce(request.actor.to_snapshot(), target, request.action)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/profile-changes", response_model=ProfileChangesResponse)
async def filter_profile_changes(
    request: ProfileChangesRequest,
    service: AccessDecisionService = Depends(get_access_service),
):
    """
    Authorize a profile edit and return the changes that may be applied.

    - 403 if the actor may not edit the target at all
    - `role`, `familyId` and `status` are dropped unless the actor is ADMIN
      or SUPER_ADMIN
    - `createdBy` is always dropped
    """
    changes, dropped = service.filter_profile_changes(
        request.actor.to_snapshot(), request.target.to_snapshot(), request.changes
    )
    return {
        "changes": {to_camel(field_name): value for field_name, value in changes.items()},
        "dropped_fields": [to_camel(field_name) for field_name in dropped],
    }


@router.post("/capabilities", response_model=CapabilitiesResponse)
async def check_capabilities(
    request: CapabilitiesRequest,
    service: AccessDecisionService = Depends(get_access_service),
):
    """
    Report which restricted screens the actor may open.

    - adminPanel: SUPER_ADMIN, ADMIN, MANAGER
    - translations: TRANSLATOR, SUPER_ADMIN
    """
    actor = request.actor.to_snapshot()
    return {
        "admin_panel": service.can_access_admin_panel(actor),
        "translations": service.can_access_translations(actor),
    }
