import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.config import settings
from app.core.exceptions import UnauthorizedException
from app.core.security import ServiceCaller, authenticate_caller
from app.services.access_service import AccessDecisionService

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


async def get_current_caller(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> ServiceCaller:
    """
    FastAPI dependency identifying the collaborator behind a request.

    Flow:
    1. Extract token from Authorization: Bearer <token>
    2. Validate it against the shared SECRET_KEY
    3. Return the caller named by its 'sub' claim

    The actor whose permissions are evaluated comes from the request
    body, not from the token.

    Raises:
        HTTPException 401: If token missing, invalid or expired
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        caller = authenticate_caller(credentials.credentials)
    except UnauthorizedException as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )

    logger.debug("Request from caller %s (token expires %s)", caller.caller_id, caller.expires_at)
    return caller


def get_access_service(
    caller: ServiceCaller = Depends(get_current_caller),
) -> AccessDecisionService:
    """
    FastAPI dependency providing the decision façade.

    A new instance per request pins the evaluation date for every
    decision made while serving that request, and tags its logs with
    the calling collaborator.
    """
    return AccessDecisionService(
        reserved_tenant_id=settings.RESERVED_TENANT_ID,
        adult_age=settings.ADULT_AGE,
        caller_id=caller.caller_id,
    )
