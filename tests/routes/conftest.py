"""
Route test fixtures.

Database dependencies are overridden with the in-memory FakeSupabase client;
authentication is overridden only where a test asks for it.
"""

import pytest
from fastapi.testclient import TestClient

from backend.auth.dependencies import (
    AuthenticatedUser,
    get_authenticated_user,
    get_public_db,
    get_user_db,
)
from backend.main import app

TEST_USER = AuthenticatedUser(
    user_id="test-user-uuid-123",
    access_token="fake-test-token",
    scheme="supabase",
    email="staff@example.com",
)


@pytest.fixture
def client(fake_db):
    """Test client whose database dependencies use fake_db."""
    app.dependency_overrides[get_public_db] = lambda: fake_db
    app.dependency_overrides[get_user_db] = lambda: fake_db

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def mock_auth(client):
    """Authenticate every request as TEST_USER."""

    async def mock_get_authenticated_user():
        return TEST_USER

    app.dependency_overrides[get_authenticated_user] = mock_get_authenticated_user
    yield TEST_USER


@pytest.fixture
def facility_id(fake_db):
    """Id of a stored 'Sample Diner' facility."""
    fake_db.tables["facilities"].append({
        "id": 1,
        "facility_name": "Sample Diner",
        "business_type": "restaurant",
        "address": "東京都渋谷区神南1-2-3",
        "created_by": TEST_USER.user_id,
        "updated_by": TEST_USER.user_id,
        "created_at": "2025-06-01T09:00:00+00:00",
        "updated_at": "2025-06-01T09:00:00+00:00",
    })
    fake_db._id = 1
    return "1"
