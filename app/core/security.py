"""Authentication of the collaborators (API layer, UI backend) that call this service."""

from dataclasses import dataclass
from datetime import datetime, UTC

from jose import JWTError, jwt

from app.config import settings
from app.core.exceptions import UnauthorizedException

TOKEN_ALGORITHM = "HS256"


@dataclass(frozen=True)
class ServiceCaller:
    """
    Collaborator identified by a validated service token.

    caller_id is the token's 'sub'. It labels decision logs and is never
    the actor whose permissions are evaluated.
    """

    caller_id: str
    expires_at: datetime


def authenticate_caller(token: str) -> ServiceCaller:
    """
    Validate a service token signed with the shared SECRET_KEY.

    Tokens are issued by the external auth service; this service only
    verifies them.

    Raises:
        UnauthorizedException: If the token is invalid, expired, or lacks
            'exp' or 'sub'
    """
    try:
        claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[TOKEN_ALGORITHM])
    except JWTError as e:
        raise UnauthorizedException(f"Invalid token: {str(e)}")

    exp = claims.get("exp")
    if exp is None:
        raise UnauthorizedException("Token missing expiration")

    caller_id = claims.get("sub")
    if not caller_id:
        raise UnauthorizedException("Token missing caller identifier")

    return ServiceCaller(caller_id=caller_id, expires_at=datetime.fromtimestamp(exp, UTC))
