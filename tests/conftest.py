import os

# Settings require SECRET_KEY; set it before the app is imported
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-access-engine")

import pytest
from datetime import date, datetime, timedelta, UTC
from fastapi.testclient import TestClient
from jose import jwt

from app.config import settings
from app.dependencies import get_access_service
from app.models.role import Role
from app.models.user import UserSnapshot, UserStatus
from app.services.access_service import AccessDecisionService
# Import FastAPI app AFTER settings are available
from app.main import app

# Fixed evaluation date so ages are deterministic
TODAY = date(2026, 6, 1)

ADULT_BIRTH_DATE = date(2004, 1, 15)  # 22 on TODAY
MINOR_BIRTH_DATE = date(2011, 3, 10)  # 15 on TODAY

FAMILY_A = "fam_a"
FAMILY_B = "fam_b"


def make_user(
    user_id: str,
    role: Role = Role.MEMBER,
    family_id: str | None = FAMILY_A,
    status: UserStatus = UserStatus.APPROVED,
    created_by: str | None = None,
    birth_date: date | None = None,
    allow_parent_view: bool = False,
) -> UserSnapshot:
    """Build a user snapshot with sensible defaults (approved member of family A)."""
    return UserSnapshot(
        id=user_id,
        role=role,
        family_id=family_id,
        status=status,
        created_by=created_by,
        birth_date=birth_date,
        allow_parent_view=allow_parent_view,
    )


def user_payload(user: UserSnapshot) -> dict:
    """Serialize a snapshot the way the user directory collaborator sends it (camelCase)."""
    return {
        "id": user.id,
        "role": user.role.value,
        "familyId": user.family_id,
        "status": user.status.value,
        "createdBy": user.created_by,
        "birthDate": user.birth_date.isoformat() if user.birth_date else None,
        "allowParentView": user.allow_parent_view,
    }


@pytest.fixture
def service():
    """Decision façade pinned to TODAY"""
    return AccessDecisionService(
        reserved_tenant_id=settings.RESERVED_TENANT_ID,
        adult_age=settings.ADULT_AGE,
        today=TODAY,
    )


@pytest.fixture(scope="function")
def client(service):
    """FastAPI test client with the decision façade pinned to TODAY"""

    def override_get_access_service():
        return service

    app.dependency_overrides[get_access_service] = override_get_access_service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def create_test_token(caller_id: str = "api-gateway", expired: bool = False) -> str:
    """
    Generate valid JWT token for testing.

    Args:
        caller_id: Caller ID to embed in 'sub' claim
        expired: If True, create expired token

    Returns:
        Encoded JWT token
    """
    if expired:
        exp = datetime.now(UTC) - timedelta(minutes=5)
    else:
        exp = datetime.now(UTC) + timedelta(minutes=15)

    payload = {"sub": caller_id, "exp": exp, "iat": datetime.now(UTC)}

    token = jwt.encode(payload, settings.SECRET_KEY, algorithm="HS256")
    return token


@pytest.fixture
def mock_jwt_token():
    """Generate valid JWT token"""
    return create_test_token()


@pytest.fixture
def auth_headers(mock_jwt_token):
    """Authorization headers for authenticated requests"""
    return {"Authorization": f"Bearer {mock_jwt_token}"}


# Cast shared by most tests:
# super admin (no family), admin in the reserved family, a manager per family,
# members of family A created by manager A, and a translator.


@pytest.fixture
def super_admin():
    return make_user("u_super", role=Role.SUPER_ADMIN, family_id=None)


@pytest.fixture
def admin():
    return make_user("u_admin", role=Role.ADMIN, family_id=settings.RESERVED_TENANT_ID)


@pytest.fixture
def manager():
    return make_user("u_manager_a", role=Role.MANAGER, family_id=FAMILY_A)


@pytest.fixture
def other_manager():
    return make_user("u_manager_b", role=Role.MANAGER, family_id=FAMILY_B)


@pytest.fixture
def adult_child(manager):
    """22 year old member created by the family A manager, no consent"""
    return make_user(
        "u_adult",
        created_by=manager.id,
        birth_date=ADULT_BIRTH_DATE,
    )


@pytest.fixture
def minor_child(manager):
    """15 year old member created by the family A manager"""
    return make_user(
        "u_minor",
        created_by=manager.id,
        birth_date=MINOR_BIRTH_DATE,
    )


@pytest.fixture
def other_family_member(other_manager):
    return make_user("u_member_b", family_id=FAMILY_B, created_by=other_manager.id)


@pytest.fixture
def translator():
    return make_user("u_translator", role=Role.TRANSLATOR, family_id=FAMILY_A)


@pytest.fixture
def pending_member():
    return make_user("u_pending", family_id=FAMILY_B, status=UserStatus.PENDING)
