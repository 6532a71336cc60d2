"""Human-readable rendering of tool results.

Stateless helpers that turn operation results into the text returned to the
agent. Only the result fields documented on each function are read.
"""

from typing import List, Optional

from stashdog_gateway.models.inventory import Collection, Item
from stashdog_gateway.models.request import Visibility
from stashdog_gateway.models.results import (
    CollectionResult,
    ImportResult,
    ItemResult,
    OperationResult,
    SearchResult,
)


def _result_count(data: Optional[OperationResult]) -> int:
    """total_count, falling back to the number of items, falling back to 0."""
    if isinstance(data, SearchResult):
        if data.total_count is not None:
            return data.total_count
        return len(data.items)
    return 0


def message_for(
    operation: str,
    success: bool,
    data: Optional[OperationResult] = None,
    error: Optional[str] = None,
) -> str:
    """Build the status message for an operation.

    Args:
        operation: Operation name (e.g. "add_item", "search_items")
        success: Whether the operation succeeded
        data: Result returned by the data-access layer, if any
        error: Error text for failed operations

    Returns:
        One-line message for the agent
    """
    if not success and error:
        return f"❌ Failed to {operation}: {error}"

    if operation == "add_item":
        item = data.item if isinstance(data, ItemResult) else None
        name = item.name if item and item.name else "item"
        item_id = item.id if item else "unknown"
        return f'✅ Successfully added item "{name}" with ID: {item_id}'
    if operation == "update_item":
        return "✅ Successfully updated item"
    if operation == "delete_item":
        return "✅ Successfully deleted item"
    if operation == "search_items":
        return f"🔍 Found {_result_count(data)} item(s) matching your search"
    if operation == "favorite_item":
        return "⭐ Successfully favorited item"
    if operation == "unfavorite_item":
        return "✅ Successfully unfavorited item"
    if operation == "create_collection":
        collection = data.collection if isinstance(data, CollectionResult) else None
        name = collection.name if collection else "collection"
        collection_id = collection.id if collection else "unknown"
        return f'📁 Successfully created collection "{name}" with ID: {collection_id}'
    if operation == "add_to_collection":
        return "✅ Successfully added items to collection"
    if operation == "import_from_url":
        import_id = data.id if isinstance(data, ImportResult) and data.id else "unknown"
        return f"📥 Successfully imported item from URL with ID: {import_id}"

    return "✅ Operation completed successfully" if success else "❌ Operation failed"


def _format_item(item: Item) -> str:
    favorite = " ⭐" if item.is_favorited else ""
    storage = " 📦" if item.is_storage else ""
    image_count = len(item.images)
    images = f" ({image_count} image{'s' if image_count > 1 else ''})" if image_count else ""
    tags = f" #{' #'.join(item.tags)}" if item.tags else ""

    block = f"• {item.name}{favorite}{storage}{images}{tags}\n  ID: {item.id}"
    if item.notes:
        block += f"\n  Notes: {item.notes}"
    return block


def format_items(items: Optional[List[Item]]) -> str:
    """Render items as bullet blocks separated by blank lines."""
    if not items:
        return "No items found."
    return "\n\n".join(_format_item(item) for item in items)


def format_collections(collections: Optional[List[Collection]]) -> str:
    """Render collections with a shared/private marker and optional description."""
    if not collections:
        return "No collections found."

    blocks = []
    for collection in collections:
        marker = " 🔗" if collection.visibility == Visibility.SHARED else " 🔒"
        block = f"• {collection.name}{marker}\n  ID: {collection.id}"
        if collection.description:
            block += f"\n  Description: {collection.description}"
        blocks.append(block)
    return "\n\n".join(blocks)
