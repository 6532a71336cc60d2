"""Operation results passed from the data-access layer to the formatter.

Results form a closed union discriminated on ``kind`` so every formatter
branch handles a known shape.
"""

from typing import Annotated, List, Literal, Optional, Union
from pydantic import BaseModel, Field

from stashdog_gateway.models.inventory import Collection, Item, Tag


class SearchResult(BaseModel):
    """Page of items plus the backend's total count."""
    kind: Literal["search"] = "search"
    items: List[Item] = Field(default_factory=list)
    total_count: Optional[int] = None


class ItemResult(BaseModel):
    """Single item (None when the backend returned no row)."""
    kind: Literal["item"] = "item"
    item: Optional[Item] = None


class CollectionResult(BaseModel):
    kind: Literal["collection"] = "collection"
    collection: Optional[Collection] = None


class CollectionListResult(BaseModel):
    kind: Literal["collections"] = "collections"
    collections: List[Collection] = Field(default_factory=list)


class TagResult(BaseModel):
    kind: Literal["tag"] = "tag"
    tag: Optional[Tag] = None


class TagListResult(BaseModel):
    kind: Literal["tags"] = "tags"
    tags: List[Tag] = Field(default_factory=list)


class ImportResult(BaseModel):
    """Item created by a URL import."""
    kind: Literal["import"] = "import"
    id: Optional[str] = None
    name: Optional[str] = None


class ActionResult(BaseModel):
    """Acknowledgement for operations with no payload."""
    kind: Literal["action"] = "action"
    success: bool = True


OperationResult = Annotated[
    Union[
        SearchResult,
        ItemResult,
        CollectionResult,
        CollectionListResult,
        TagResult,
        TagListResult,
        ImportResult,
        ActionResult,
    ],
    Field(discriminator="kind"),
]
