"""Pytest fixtures and configuration for StashDog gateway tests."""

import pytest
import jwt
from fastapi.testclient import TestClient
from unittest.mock import MagicMock

from stashdog_gateway.integrations.stashdog import StashDogClient
from stashdog_gateway.models.inventory import Collection, Item, ItemImage


TEST_USER_ID = "44444444-4444-4444-4444-444444444444"


def make_response(json_data=None, status_code=200, headers=None, reason="OK"):
    """Build a stand-in for requests.Response."""
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.reason = reason
    response.headers = headers or {}
    response.text = "" if json_data is None else "json"
    response.json.return_value = json_data
    return response


@pytest.fixture
def test_user_id():
    """Subject of the test access token."""
    return TEST_USER_ID


@pytest.fixture
def access_token(test_user_id):
    """Access token carrying a sub claim."""
    payload = {"sub": test_user_id, "email": "test@example.com"}
    return jwt.encode(payload, "test-secret-key-long-enough-for-hs256", algorithm="HS256")


@pytest.fixture
def stashdog_client(access_token):
    """Client pointed at a fake backend."""
    return StashDogClient(
        supabase_url="https://stash.example.com/",
        auth_token=access_token,
        anon_key="anon-key",
        timeout=5,
    )


@pytest.fixture
def sample_item():
    """A favorited item with notes and a tag."""
    return Item(
        id="item-1",
        name="Camera",
        notes="Wide lens",
        tags=["photo"],
        is_favorited=True,
        images=[],
    )


@pytest.fixture
def sample_items(sample_item):
    """Two items, the second a storage box with images."""
    return [
        sample_item,
        Item(
            id="item-2",
            name="Shoebox",
            tags=["storage", "closet"],
            is_storage=True,
            images=[ItemImage(url="https://img.example.com/a.jpg"), ItemImage(url="https://img.example.com/b.jpg")],
        ),
    ]


@pytest.fixture
def sample_collections():
    """One shared and one private collection."""
    return [
        Collection(id="col-1", name="Kitchen", description="Pots and pans", visibility="SHARED"),
        Collection(id="col-2", name="Garage"),
    ]


@pytest.fixture
def mock_client():
    """MagicMock shaped like StashDogClient."""
    client = MagicMock(spec=StashDogClient)
    client.with_token.return_value = client
    return client


@pytest.fixture
def test_client(mock_client):
    """FastAPI test client with the backend client dependency overridden."""
    from stashdog_gateway.api.app import app
    from stashdog_gateway.api.dependencies import get_stashdog_client

    def override_get_stashdog_client():
        return mock_client

    app.dependency_overrides[get_stashdog_client] = override_get_stashdog_client

    with TestClient(app) as client:
        yield client

    # Clean up dependency overrides
    app.dependency_overrides.clear()


@pytest.fixture
def fake_response():
    """Factory for stand-in requests.Response objects."""
    return make_response
