"""Data models for the StashDog gateway."""

from stashdog_gateway.models.request import (
    ItemAction,
    CollectionAction,
    TagAction,
    Visibility,
    CustomFieldInput,
    SearchFilters,
    ParsedItemRequest,
    ParsedCollectionRequest,
    ParsedTagRequest,
)
from stashdog_gateway.models.inventory import Item, ItemImage, Collection, Tag
from stashdog_gateway.models.results import (
    SearchResult,
    ItemResult,
    CollectionResult,
    CollectionListResult,
    TagResult,
    TagListResult,
    ImportResult,
    ActionResult,
    OperationResult,
)

__all__ = [
    "ItemAction",
    "CollectionAction",
    "TagAction",
    "Visibility",
    "CustomFieldInput",
    "SearchFilters",
    "ParsedItemRequest",
    "ParsedCollectionRequest",
    "ParsedTagRequest",
    "Item",
    "ItemImage",
    "Collection",
    "Tag",
    "SearchResult",
    "ItemResult",
    "CollectionResult",
    "CollectionListResult",
    "TagResult",
    "TagListResult",
    "ImportResult",
    "ActionResult",
    "OperationResult",
]
