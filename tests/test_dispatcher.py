"""Tests for tool dispatch, validation and response shaping."""

import pytest

from stashdog_gateway.api.dispatcher import (
    ToolArgumentError,
    ToolDispatcher,
    UnknownToolError,
)
from stashdog_gateway.integrations.stashdog import StashDogAPIError
from stashdog_gateway.models.inventory import (
    Group,
    Item,
    Notification,
    SignInResult,
    UsageStats,
    UserProfile,
)
from stashdog_gateway.models.request import Visibility
from stashdog_gateway.models.results import (
    ActionResult,
    CollectionListResult,
    CollectionResult,
    ImportResult,
    ItemResult,
    SearchResult,
    TagListResult,
    TagResult,
)


COLLECTION_ID = "22222222-2222-2222-2222-222222222222"
ITEM_ID = "11111111-1111-1111-1111-111111111111"


@pytest.fixture
def dispatcher(mock_client):
    return ToolDispatcher(mock_client)


class TestToolCall:
    """Test tool lookup and argument checks."""

    def test_unknown_tool(self, dispatcher):
        with pytest.raises(UnknownToolError):
            dispatcher.call("launch_rocket", {})

    def test_missing_required_argument(self, dispatcher, mock_client):
        with pytest.raises(ToolArgumentError) as exc_info:
            dispatcher.call("manage_inventory_items", {})

        assert exc_info.value.missing == ["instruction"]
        mock_client.get_items.assert_not_called()

    def test_blank_required_argument(self, dispatcher):
        with pytest.raises(ToolArgumentError):
            dispatcher.call("authenticate", {"email": "a@example.com", "password": ""})


class TestManageInventoryItems:
    """Test the item tool."""

    def test_add_item(self, dispatcher, mock_client):
        mock_client.add_item.return_value = ItemResult(item=Item(id="item-9", name="toolbox"))

        response = dispatcher.call("manage_inventory_items", {
            "instruction": "Add a new item called 'Toolbox' with notes 'Red metal' with tags tools, garage",
        })

        assert response.success is True
        assert response.message == '✅ Successfully added item "toolbox" with ID: item-9'
        assert response.data["item"]["id"] == "item-9"
        kwargs = mock_client.add_item.call_args.kwargs
        assert kwargs["name"] == "toolbox"
        assert kwargs["notes"] == "red metal"
        assert kwargs["tags"] == ["tools", "garage"]
        assert kwargs["is_classified"] is False

    def test_add_without_name_is_rejected(self, dispatcher, mock_client):
        """Missing fields become a failed response and the backend is not called."""
        response = dispatcher.call("manage_inventory_items", {"instruction": "Add"})

        assert response.success is False
        assert response.message == "❌ Failed to add: Item name is required for adding items"
        assert response.error == "Item name is required for adding items"
        mock_client.add_item.assert_not_called()

    @pytest.mark.parametrize("instruction,message", [
        ("Delete my old chair", "Item ID is required for deleting items"),
        ("Update the lamp", "Item ID is required for updating items"),
        ("Favorite the camera", "Item ID is required for favoriting items"),
    ])
    def test_id_actions_require_item_id(self, dispatcher, mock_client, instruction, message):
        response = dispatcher.call("manage_inventory_items", {"instruction": instruction})

        assert response.success is False
        assert response.error == message
        mock_client.update_item.assert_not_called()
        mock_client.delete_item.assert_not_called()
        mock_client.favorite_item.assert_not_called()

    def test_delete_item(self, dispatcher, mock_client):
        mock_client.delete_item.return_value = ActionResult()

        response = dispatcher.call("manage_inventory_items", {"instruction": f"Delete item {ITEM_ID}"})

        assert response.success is True
        assert response.message == "✅ Successfully deleted item"
        mock_client.delete_item.assert_called_once_with(ITEM_ID)

    def test_update_item_passes_extracted_fields(self, dispatcher, mock_client):
        mock_client.update_item.return_value = ItemResult()

        dispatcher.call("manage_inventory_items", {"instruction": f"Update item {ITEM_ID} notes: check warranty"})

        args, kwargs = mock_client.update_item.call_args
        assert args == (ITEM_ID,)
        assert kwargs["notes"] == "check warranty"
        assert kwargs["name"] is None

    def test_search_with_filters(self, dispatcher, mock_client, sample_items):
        mock_client.get_items.return_value = SearchResult(items=sample_items, total_count=2)

        response = dispatcher.call("manage_inventory_items", {
            "instruction": "Search for kitchen items limit 5 offset 10",
        })

        mock_client.get_items.assert_called_once_with(
            search="for kitchen items limit 5 offset 10", tags=None, limit=5, offset=10
        )
        assert response.success is True
        assert response.message == "🔍 Found 2 item(s) matching your search"
        assert "• Camera ⭐ #photo" in response.data["formatted_items"]

    def test_search_defaults(self, dispatcher, mock_client):
        mock_client.get_items.return_value = SearchResult()

        response = dispatcher.call("manage_inventory_items", {"instruction": "passport"})

        mock_client.get_items.assert_called_once_with(search="passport", tags=None, limit=20, offset=0)
        assert response.data["formatted_items"] == "No items found."

    def test_backend_error_becomes_failure(self, dispatcher, mock_client):
        mock_client.add_item.side_effect = StashDogAPIError("duplicate key", status_code=409)

        response = dispatcher.call("manage_inventory_items", {"instruction": "Add 'Mug'"})

        assert response.success is False
        assert response.message == "❌ Failed to add: duplicate key"


class TestManageCollections:
    """Test the collection tools."""

    def test_create_defaults_to_private(self, dispatcher, mock_client, sample_collections):
        mock_client.create_collection.return_value = CollectionResult(collection=sample_collections[1])

        response = dispatcher.call("manage_collections", {"instruction": "Create collection 'Garage'"})

        mock_client.create_collection.assert_called_once_with(
            name="Garage", description=None, visibility=Visibility.PRIVATE
        )
        assert response.message == '📁 Successfully created collection "Garage" with ID: col-2'

    def test_create_without_name(self, dispatcher, mock_client):
        response = dispatcher.call("manage_collections", {"instruction": "Kitchen stuff"})

        assert response.success is False
        assert response.error == "Collection name is required for creating collections"
        mock_client.create_collection.assert_not_called()

    def test_add_items(self, dispatcher, mock_client):
        mock_client.add_items_to_collection.return_value = ActionResult()

        response = dispatcher.call("manage_collections", {
            "instruction": f"Add items to collection {COLLECTION_ID} with {ITEM_ID}",
        })

        mock_client.add_items_to_collection.assert_called_once_with(COLLECTION_ID, [ITEM_ID])
        assert response.message == "✅ Successfully added items to collection"

    def test_add_items_without_item_ids(self, dispatcher, mock_client):
        response = dispatcher.call("manage_collections", {
            "instruction": f"Add items to collection {COLLECTION_ID}",
        })

        assert response.success is False
        assert response.message == (
            "❌ Failed to add_items: Collection ID and item IDs are required for adding items to collections"
        )
        mock_client.add_items_to_collection.assert_not_called()

    def test_remove_items(self, dispatcher, mock_client):
        mock_client.remove_items_from_collection.return_value = ActionResult()

        response = dispatcher.call("manage_collections", {
            "instruction": f"Remove from collection {COLLECTION_ID} the items {ITEM_ID}",
        })

        mock_client.remove_items_from_collection.assert_called_once_with(COLLECTION_ID, [ITEM_ID])
        assert response.success is True

    def test_delete_requires_id(self, dispatcher, mock_client):
        response = dispatcher.call("manage_collections", {"instruction": "Delete the old collection"})

        assert response.error == "Collection ID is required for deleting collections"
        mock_client.delete_collection.assert_not_called()

    def test_list_collections(self, dispatcher, mock_client, sample_collections):
        mock_client.get_collections.return_value = CollectionListResult(collections=sample_collections)

        response = dispatcher.call("list_collections", {})

        assert response.success is True
        assert len(response.data["collections"]) == 2
        assert "• Kitchen 🔗" in response.data["formatted_collections"]


class TestOtherTools:
    """Test import, tags, stats, auth and account tools."""

    def test_import_from_url(self, dispatcher, mock_client):
        mock_client.import_from_url.return_value = ImportResult(id="item-5", name="Kettle")

        response = dispatcher.call("import_from_url", {"url": "Grab https://shop.example.com/kettle please"})

        mock_client.import_from_url.assert_called_once_with("https://shop.example.com/kettle")
        assert response.message == "📥 Successfully imported item from URL with ID: item-5"

    def test_import_without_url(self, dispatcher, mock_client):
        response = dispatcher.call("import_from_url", {"url": "the kettle page"})

        assert response.success is False
        mock_client.import_from_url.assert_not_called()

    def test_rename_tag(self, dispatcher, mock_client):
        mock_client.rename_tag.return_value = TagResult()

        response = dispatcher.call("manage_tags", {"instruction": "Rename tag 9f8e7d6c to power tools"})

        mock_client.rename_tag.assert_called_once_with("9f8e7d6c", "power tools")
        assert response.success is True

    def test_tag_failure_uses_tool_name(self, dispatcher, mock_client):
        response = dispatcher.call("manage_tags", {"instruction": "Delete tag please"})

        assert response.success is False
        assert response.message == "❌ Failed to manage_tags: Tag ID is required for deleting tags"

    def test_list_tags(self, dispatcher, mock_client):
        mock_client.get_all_tags.return_value = TagListResult()

        response = dispatcher.call("manage_tags", {"instruction": "Show my tags"})

        mock_client.get_all_tags.assert_called_once_with()
        assert response.data == {"kind": "tags", "tags": []}

    def test_inventory_stats(self, dispatcher, mock_client):
        mock_client.get_usage_metrics.return_value = UsageStats(
            item_count=3, collection_count=1, storage_used=2048, shared_item_count=0
        )

        response = dispatcher.call("get_inventory_stats", {})

        assert response.message == "📊 Inventory Stats: 3 items, 1 collections, 2048 bytes used, 0 shared items"

    def test_authenticate_stores_token(self, dispatcher, mock_client):
        mock_client.sign_in.return_value = SignInResult(
            user_id="user-1", email="a@example.com", access_token="new-token"
        )

        response = dispatcher.call("authenticate", {"email": "a@example.com", "password": "pw"})

        mock_client.set_auth_token.assert_called_once_with("new-token")
        assert response.message == "Successfully authenticated as a@example.com"
        assert "access_token" not in response.data

    def test_authenticate_without_token(self, dispatcher, mock_client):
        mock_client.sign_in.return_value = SignInResult(email="a@example.com")

        response = dispatcher.call("authenticate", {"email": "a@example.com", "password": "pw"})

        assert response.success is False
        mock_client.set_auth_token.assert_not_called()

    def test_smart_search(self, dispatcher, mock_client):
        mock_client.get_items.return_value = SearchResult()

        dispatcher.call("smart_search", {"query": "Find #kitchen pans", "limit": 7})

        mock_client.get_items.assert_called_once_with(
            search="#kitchen pans", tags=["kitchen"], limit=7, offset=0
        )

    def test_manage_users(self, dispatcher, mock_client):
        mock_client.get_user.return_value = UserProfile(id="user-1", email="a@example.com")

        response = dispatcher.call("manage_users", {"userId": "user-1"})

        assert response.message == "User details for a@example.com"

    def test_manage_users_not_found(self, dispatcher, mock_client):
        mock_client.get_user.return_value = None

        response = dispatcher.call("manage_users", {"userId": "user-1"})

        assert response.success is False
        assert response.error == "User user-1 not found"

    def test_notifications_and_groups(self, dispatcher, mock_client):
        mock_client.get_notifications.return_value = [Notification(id="n-1")]
        mock_client.get_groups.return_value = [Group(id="g-1", name="Family"), Group(id="g-2", name="Work")]

        notifications = dispatcher.call("manage_notifications", {"status": "UNREAD", "limit": 5})
        groups = dispatcher.call("manage_groups", {})

        mock_client.get_notifications.assert_called_once_with(status="UNREAD", limit=5, offset=None)
        assert notifications.message == "Fetched 1 notifications"
        assert groups.message == "Fetched 2 groups"
        assert groups.data[1]["name"] == "Work"
