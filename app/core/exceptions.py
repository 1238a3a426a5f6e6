from typing import Optional

from app.models.decision import DenyReason


class AccessEngineException(Exception):
    """Base exception for the access engine"""

    pass


class UnauthorizedException(AccessEngineException):
    """Raised when the caller's service token fails validation"""

    pass


class ForbiddenException(AccessEngineException):
    """Raised when a Deny verdict is enforced at the service boundary"""

    def __init__(self, message: str, reason: Optional[DenyReason] = None):
        super().__init__(message)
        self.reason = reason


class ValidationException(AccessEngineException):
    """Raised for malformed requests that pass schema validation"""

    pass
