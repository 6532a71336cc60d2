"""Tool dispatcher for the StashDog gateway.

Maps tool calls to interpreter output and data-access calls, validates that
each parsed request carries the fields its action needs, and wraps every
outcome in a ToolResponse for the agent.
"""

import logging
from typing import Any, Callable, Dict, Optional, Tuple

from pydantic import BaseModel

from stashdog_gateway.api.tools import TOOLS_BY_NAME
from stashdog_gateway.formatting.display import format_collections, format_items, message_for
from stashdog_gateway.integrations.stashdog import StashDogAPIError, StashDogClient
from stashdog_gateway.interpreter import (
    extract_urls,
    parse_collection_request,
    parse_item_request,
    parse_tag_request,
)
from stashdog_gateway.models.constants import DEFAULT_SEARCH_LIMIT, DEFAULT_SEARCH_OFFSET
from stashdog_gateway.models.request import (
    CollectionAction,
    ItemAction,
    ParsedCollectionRequest,
    ParsedItemRequest,
    ParsedTagRequest,
    TagAction,
    Visibility,
)
from stashdog_gateway.models.results import OperationResult, SearchResult

logger = logging.getLogger(__name__)


class MissingRequiredFieldError(ValueError):
    """A parsed request lacks a field its action requires."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


class UnknownToolError(LookupError):
    """No tool is registered under the requested name."""


class ToolArgumentError(ValueError):
    """A required tool argument is missing."""

    def __init__(self, message: str, *, missing: Optional[list] = None):
        super().__init__(message)
        self.missing = missing or []


class ToolResponse(BaseModel):
    """Envelope returned by every tool."""
    success: bool
    message: str
    data: Any = None
    error: Optional[str] = None


def _failure(operation: str, error: Exception) -> ToolResponse:
    return ToolResponse(
        success=False,
        message=message_for(operation, False, None, str(error)),
        error=str(error),
    )


def _as_int(value: Any, default: Optional[int] = None) -> Optional[int]:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ToolArgumentError(f"Expected a number, got {value!r}")


class ToolDispatcher:
    """Runs tools against a StashDog client."""

    def __init__(self, client: StashDogClient):
        self.client = client
        self._handlers: Dict[str, Callable[[Dict[str, Any]], ToolResponse]] = {
            "manage_inventory_items": self.manage_inventory_items,
            "manage_collections": self.manage_collections,
            "list_collections": self.list_collections,
            "import_from_url": self.import_from_url,
            "manage_tags": self.manage_tags,
            "get_inventory_stats": self.get_inventory_stats,
            "authenticate": self.authenticate,
            "smart_search": self.smart_search,
            "manage_users": self.manage_users,
            "manage_notifications": self.manage_notifications,
            "manage_groups": self.manage_groups,
        }

    def call(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> ToolResponse:
        """Invoke a tool by name.

        Raises:
            UnknownToolError: If no tool has that name
            ToolArgumentError: If a required argument is missing
        """
        handler = self._handlers.get(name)
        definition = TOOLS_BY_NAME.get(name)
        if handler is None or definition is None:
            raise UnknownToolError(f"Unknown tool: {name}")

        arguments = arguments or {}
        missing = [arg for arg in definition.required_arguments if arguments.get(arg) in (None, "")]
        if missing:
            raise ToolArgumentError(f"Missing required argument(s): {', '.join(missing)}", missing=missing)

        logger.debug(f"Calling tool {name}")
        return handler(arguments)

    # --- items ---------------------------------------------------------

    def _run_item_action(self, parsed: ParsedItemRequest) -> Tuple[str, OperationResult]:
        action = parsed.action

        if action == ItemAction.ADD:
            if not parsed.item_name:
                raise MissingRequiredFieldError("item_name", "Item name is required for adding items")
            result = self.client.add_item(
                name=parsed.item_name,
                notes=parsed.notes,
                tags=parsed.tags or [],
                is_storage=parsed.is_storage or False,
                container_id=parsed.container_id,
                custom_fields=parsed.custom_fields,
                is_classified=False,
            )
            return "add_item", result

        if action in (ItemAction.UPDATE, ItemAction.DELETE, ItemAction.FAVORITE, ItemAction.UNFAVORITE):
            if not parsed.item_id:
                verb = {
                    ItemAction.UPDATE: "updating",
                    ItemAction.DELETE: "deleting",
                    ItemAction.FAVORITE: "favoriting",
                    ItemAction.UNFAVORITE: "unfavoriting",
                }[ItemAction(action)]
                raise MissingRequiredFieldError("item_id", f"Item ID is required for {verb} items")

        if action == ItemAction.UPDATE:
            result = self.client.update_item(
                parsed.item_id,
                name=parsed.item_name,
                notes=parsed.notes,
                tags=parsed.tags,
                is_storage=parsed.is_storage,
                container_id=parsed.container_id,
                custom_fields=parsed.custom_fields,
            )
            return "update_item", result
        if action == ItemAction.DELETE:
            return "delete_item", self.client.delete_item(parsed.item_id)
        if action == ItemAction.FAVORITE:
            return "favorite_item", self.client.favorite_item(parsed.item_id)
        if action == ItemAction.UNFAVORITE:
            return "unfavorite_item", self.client.unfavorite_item(parsed.item_id)

        filters = parsed.filters
        result = self.client.get_items(
            search=parsed.search_query,
            tags=filters.tags if filters else None,
            limit=filters.limit if filters and filters.limit is not None else DEFAULT_SEARCH_LIMIT,
            offset=filters.offset if filters and filters.offset is not None else DEFAULT_SEARCH_OFFSET,
        )
        return "search_items", result

    def manage_inventory_items(self, arguments: Dict[str, Any]) -> ToolResponse:
        parsed = parse_item_request(str(arguments["instruction"]))
        try:
            operation, result = self._run_item_action(parsed)
        except MissingRequiredFieldError as e:
            logger.info(f"Rejected {parsed.action} request: missing {e.field}")
            return _failure(parsed.action, e)
        except StashDogAPIError as e:
            logger.error(f"Item {parsed.action} failed: {type(e).__name__}: {str(e)}")
            return _failure(parsed.action, e)

        data = result.model_dump(mode="json")
        if isinstance(result, SearchResult):
            data["formatted_items"] = format_items(result.items)
        return ToolResponse(success=True, message=message_for(operation, True, result), data=data)

    def smart_search(self, arguments: Dict[str, Any]) -> ToolResponse:
        parsed = parse_item_request(str(arguments["query"]))
        limit = _as_int(arguments.get("limit"), DEFAULT_SEARCH_LIMIT)
        try:
            result = self.client.get_items(
                search=parsed.search_query,
                tags=parsed.tags,
                limit=limit,
                offset=DEFAULT_SEARCH_OFFSET,
            )
        except StashDogAPIError as e:
            logger.error(f"Smart search failed: {type(e).__name__}: {str(e)}")
            return _failure("smart_search", e)

        data = result.model_dump(mode="json")
        data["formatted_items"] = format_items(result.items)
        return ToolResponse(success=True, message=message_for("search_items", True, result), data=data)

    def import_from_url(self, arguments: Dict[str, Any]) -> ToolResponse:
        try:
            urls = extract_urls(str(arguments["url"]))
            if not urls:
                raise MissingRequiredFieldError("url", "A valid http(s) URL is required for importing")
            result = self.client.import_from_url(urls[0])
        except (MissingRequiredFieldError, StashDogAPIError) as e:
            logger.error(f"Import failed: {type(e).__name__}: {str(e)}")
            return _failure("import_from_url", e)

        return ToolResponse(
            success=True,
            message=message_for("import_from_url", True, result),
            data=result.model_dump(mode="json"),
        )

    # --- collections ---------------------------------------------------

    def _run_collection_action(self, parsed: ParsedCollectionRequest) -> Tuple[str, OperationResult]:
        action = parsed.action

        if action == CollectionAction.CREATE:
            if not parsed.collection_name:
                raise MissingRequiredFieldError(
                    "collection_name", "Collection name is required for creating collections"
                )
            result = self.client.create_collection(
                name=parsed.collection_name,
                description=parsed.description,
                visibility=parsed.visibility or Visibility.PRIVATE,
            )
            return "create_collection", result

        if action in (CollectionAction.UPDATE, CollectionAction.DELETE) and not parsed.collection_id:
            verb = "updating" if action == CollectionAction.UPDATE else "deleting"
            raise MissingRequiredFieldError("collection_id", f"Collection ID is required for {verb} collections")

        if action == CollectionAction.UPDATE:
            result = self.client.update_collection(
                parsed.collection_id,
                name=parsed.collection_name,
                description=parsed.description,
                visibility=parsed.visibility,
            )
            return "update_collection", result
        if action == CollectionAction.DELETE:
            return "delete_collection", self.client.delete_collection(parsed.collection_id)

        if not parsed.collection_id or not parsed.item_ids:
            direction = "adding items to" if action == CollectionAction.ADD_ITEMS else "removing items from"
            raise MissingRequiredFieldError(
                "item_ids" if parsed.collection_id else "collection_id",
                f"Collection ID and item IDs are required for {direction} collections",
            )
        if action == CollectionAction.ADD_ITEMS:
            return "add_to_collection", self.client.add_items_to_collection(parsed.collection_id, parsed.item_ids)
        return "remove_from_collection", self.client.remove_items_from_collection(
            parsed.collection_id, parsed.item_ids
        )

    def manage_collections(self, arguments: Dict[str, Any]) -> ToolResponse:
        parsed = parse_collection_request(str(arguments["instruction"]))
        try:
            operation, result = self._run_collection_action(parsed)
        except MissingRequiredFieldError as e:
            logger.info(f"Rejected collection {parsed.action} request: missing {e.field}")
            return _failure(parsed.action, e)
        except StashDogAPIError as e:
            logger.error(f"Collection {parsed.action} failed: {type(e).__name__}: {str(e)}")
            return _failure(parsed.action, e)

        return ToolResponse(
            success=True,
            message=message_for(operation, True, result),
            data=result.model_dump(mode="json"),
        )

    def list_collections(self, arguments: Dict[str, Any]) -> ToolResponse:
        try:
            result = self.client.get_collections()
        except StashDogAPIError as e:
            logger.error(f"Listing collections failed: {type(e).__name__}: {str(e)}")
            return _failure("list_collections", e)

        data = result.model_dump(mode="json")
        data["formatted_collections"] = format_collections(result.collections)
        return ToolResponse(success=True, message=message_for("list_collections", True, result), data=data)

    # --- tags ----------------------------------------------------------

    def _run_tag_action(self, parsed: ParsedTagRequest) -> Tuple[str, OperationResult]:
        action = parsed.action
        if action == TagAction.CREATE:
            if not parsed.tag_name:
                raise MissingRequiredFieldError("tag_name", "Tag name is required for creating tags")
            return "create_tag", self.client.create_tag(parsed.tag_name)
        if action == TagAction.SEARCH:
            return "search_tags", self.client.search_tags(parsed.query or "")
        if action == TagAction.RENAME:
            if not parsed.tag_id or not parsed.new_name:
                raise MissingRequiredFieldError("tag_id", "Tag ID and new name are required for renaming tags")
            return "rename_tag", self.client.rename_tag(parsed.tag_id, parsed.new_name)
        if action == TagAction.DELETE:
            if not parsed.tag_id:
                raise MissingRequiredFieldError("tag_id", "Tag ID is required for deleting tags")
            return "delete_tag", self.client.delete_tag(parsed.tag_id)
        return "list_tags", self.client.get_all_tags()

    def manage_tags(self, arguments: Dict[str, Any]) -> ToolResponse:
        parsed = parse_tag_request(str(arguments["instruction"]))
        try:
            operation, result = self._run_tag_action(parsed)
        except (MissingRequiredFieldError, StashDogAPIError) as e:
            logger.error(f"Tag {parsed.action} failed: {type(e).__name__}: {str(e)}")
            return _failure("manage_tags", e)

        return ToolResponse(
            success=True,
            message=message_for(operation, True, result),
            data=result.model_dump(mode="json"),
        )

    # --- account -------------------------------------------------------

    def authenticate(self, arguments: Dict[str, Any]) -> ToolResponse:
        try:
            result = self.client.sign_in(str(arguments["email"]), str(arguments["password"]))
            if not result.access_token:
                raise StashDogAPIError("Authentication failed - no token received")
        except StashDogAPIError as e:
            logger.error(f"Authentication failed: {type(e).__name__}: {str(e)}")
            return _failure("authenticate", e)

        self.client.set_auth_token(result.access_token)
        return ToolResponse(
            success=True,
            message=f"Successfully authenticated as {result.email}",
            data={"user_id": result.user_id, "email": result.email, "display_name": result.display_name},
        )

    def get_inventory_stats(self, arguments: Dict[str, Any]) -> ToolResponse:
        try:
            stats = self.client.get_usage_metrics()
            if stats is None:
                raise StashDogAPIError("No usage statistics available")
        except StashDogAPIError as e:
            logger.error(f"Stats lookup failed: {type(e).__name__}: {str(e)}")
            return _failure("get_stats", e)

        message = (
            f"📊 Inventory Stats: {stats.item_count} items, {stats.collection_count} collections, "
            f"{stats.storage_used} bytes used, {stats.shared_item_count} shared items"
        )
        return ToolResponse(success=True, message=message, data=stats.model_dump(mode="json"))

    def manage_users(self, arguments: Dict[str, Any]) -> ToolResponse:
        user_id = str(arguments["userId"])
        try:
            user = self.client.get_user(user_id)
            if user is None:
                raise StashDogAPIError(f"User {user_id} not found", status_code=404)
        except StashDogAPIError as e:
            logger.error(f"User lookup failed: {type(e).__name__}: {str(e)}")
            return _failure("manage_users", e)

        return ToolResponse(success=True, message=f"User details for {user.email}", data=user.model_dump(mode="json"))

    def manage_notifications(self, arguments: Dict[str, Any]) -> ToolResponse:
        try:
            notifications = self.client.get_notifications(
                status=arguments.get("status") or None,
                limit=_as_int(arguments.get("limit")),
                offset=_as_int(arguments.get("offset")),
            )
        except StashDogAPIError as e:
            logger.error(f"Notification lookup failed: {type(e).__name__}: {str(e)}")
            return _failure("manage_notifications", e)

        return ToolResponse(
            success=True,
            message=f"Fetched {len(notifications)} notifications",
            data=[n.model_dump(mode="json") for n in notifications],
        )

    def manage_groups(self, arguments: Dict[str, Any]) -> ToolResponse:
        try:
            groups = self.client.get_groups()
        except StashDogAPIError as e:
            logger.error(f"Group lookup failed: {type(e).__name__}: {str(e)}")
            return _failure("manage_groups", e)

        return ToolResponse(
            success=True,
            message=f"Fetched {len(groups)} groups",
            data=[g.model_dump(mode="json") for g in groups],
        )
