"""Integration tests for API endpoints.

These tests drive the FastAPI app end-to-end with the backend client mocked.
"""

from unittest.mock import patch

from stashdog_gateway.api.tools import TOOLS
from stashdog_gateway.models.results import SearchResult


class TestServiceEndpoints:
    """Test health and tool listing."""

    def test_health(self, test_client):
        response = test_client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "version": "0.1.0"}

    def test_list_tools(self, test_client):
        response = test_client.get("/tools")

        assert response.status_code == 200
        names = [tool["name"] for tool in response.json()]
        assert names == [tool.name for tool in TOOLS]
        assert "manage_inventory_items" in names
        manage_items = response.json()[0]
        assert manage_items["input_schema"]["required"] == ["instruction"]


class TestToolEndpoint:
    """Test POST /tools/{name}."""

    def test_call_tool(self, test_client, mock_client, sample_items):
        mock_client.get_items.return_value = SearchResult(items=sample_items, total_count=2)

        response = test_client.post(
            "/tools/manage_inventory_items",
            json={"arguments": {"instruction": "Search for camera"}},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "🔍 Found 2 item(s) matching your search"
        assert data["data"]["items"][0]["name"] == "Camera"
        assert data["error"] is None

    def test_validation_failure_is_200_with_success_false(self, test_client, mock_client):
        response = test_client.post(
            "/tools/manage_inventory_items",
            json={"arguments": {"instruction": "Delete my old chair"}},
        )

        assert response.status_code == 200
        assert response.json()["success"] is False
        mock_client.delete_item.assert_not_called()

    def test_unknown_tool(self, test_client):
        response = test_client.post("/tools/launch_rocket", json={"arguments": {}})

        assert response.status_code == 404
        assert "launch_rocket" in response.json()["detail"]

    def test_missing_argument(self, test_client):
        response = test_client.post("/tools/manage_collections", json={"arguments": {}})

        assert response.status_code == 422
        assert "instruction" in response.json()["detail"]

    def test_arguments_default_to_empty(self, test_client, mock_client):
        mock_client.get_groups.return_value = []

        response = test_client.post("/tools/manage_groups", json={})

        assert response.status_code == 200
        assert response.json()["message"] == "Fetched 0 groups"

    def test_unexpected_error_is_500(self, test_client, mock_client):
        mock_client.get_groups.side_effect = RuntimeError("boom")

        response = test_client.post("/tools/manage_groups", json={"arguments": {}})

        assert response.status_code == 500
        assert response.json()["detail"] == "Error executing tool manage_groups: boom"


class TestBearerToken:
    """Test per-request token binding."""

    def test_bearer_header_binds_client(self):
        """A bearer token on the request uses a client bound to that token."""
        from fastapi.testclient import TestClient
        from stashdog_gateway.api import dependencies
        from stashdog_gateway.api.app import app
        from stashdog_gateway.integrations.stashdog import StashDogClient

        shared = StashDogClient(supabase_url="https://stash.example.com", auth_token="shared-token")
        seen = []

        def fake_get_groups(self):
            seen.append(self.auth_token)
            return []

        with patch.object(dependencies, "_shared_client", shared), \
                patch.object(StashDogClient, "get_groups", fake_get_groups):
            client = TestClient(app)
            client.post("/tools/manage_groups", json={"arguments": {}}, headers={"Authorization": "Bearer user-token"})
            client.post("/tools/manage_groups", json={"arguments": {}})

        assert seen == ["user-token", "shared-token"]
