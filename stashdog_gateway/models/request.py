"""Structured request models produced by the instruction interpreter.

Each request is created fresh per instruction, is immutable once returned,
and carries no state beyond its field values.
"""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field


class ItemAction(str, Enum):
    """Actions understood by the inventory items tool."""
    ADD = "add"
    UPDATE = "update"
    SEARCH = "search"
    DELETE = "delete"
    FAVORITE = "favorite"
    UNFAVORITE = "unfavorite"


class CollectionAction(str, Enum):
    """Actions understood by the collections tool."""
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    ADD_ITEMS = "add_items"
    REMOVE_ITEMS = "remove_items"


class TagAction(str, Enum):
    """Actions understood by the tags tool."""
    CREATE = "create"
    SEARCH = "search"
    RENAME = "rename"
    DELETE = "delete"
    LIST = "list"


class Visibility(str, Enum):
    """Collection visibility."""
    PRIVATE = "PRIVATE"
    SHARED = "SHARED"


class CustomFieldInput(BaseModel):
    """Free-form key/value pair attached to an item."""

    name: str
    type: str = "text"
    value: str

    class Config:
        """Pydantic configuration."""
        frozen = True


class SearchFilters(BaseModel):
    """Optional filters for an item search."""

    tags: Optional[List[str]] = None
    limit: Optional[int] = Field(None, ge=0)
    offset: Optional[int] = Field(None, ge=0)

    class Config:
        """Pydantic configuration."""
        frozen = True


class ParsedItemRequest(BaseModel):
    """Interpreted item instruction.

    Fields that do not apply to the chosen action may still be set; consumers
    ignore them.
    """

    action: ItemAction = Field(ItemAction.SEARCH, description="Classified action")
    item_name: Optional[str] = Field(None, description="Name for a new item (lower-cased)")
    item_id: Optional[str] = Field(None, description="Identifier of an existing item")
    notes: Optional[str] = None
    tags: Optional[List[str]] = Field(None, description="Deduplicated tags, first-seen order")
    is_storage: Optional[bool] = None
    container_id: Optional[str] = None
    custom_fields: Optional[List[CustomFieldInput]] = None
    search_query: Optional[str] = None
    filters: Optional[SearchFilters] = None

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
        frozen = True


class ParsedCollectionRequest(BaseModel):
    """Interpreted collection instruction."""

    action: CollectionAction = Field(CollectionAction.CREATE, description="Classified action")
    collection_name: Optional[str] = None
    collection_id: Optional[str] = None
    description: Optional[str] = None
    visibility: Optional[Visibility] = None
    item_ids: Optional[List[str]] = Field(None, description="Item identifiers in source order")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
        frozen = True


class ParsedTagRequest(BaseModel):
    """Interpreted tag instruction."""

    action: TagAction = Field(TagAction.LIST, description="Classified action")
    tag_name: Optional[str] = None
    tag_id: Optional[str] = None
    new_name: Optional[str] = None
    query: Optional[str] = None

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
        frozen = True
