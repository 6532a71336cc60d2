"""Inventory data models returned by the StashDog backend."""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from stashdog_gateway.models.request import Visibility


class ItemImage(BaseModel):
    """Image attached to an item."""
    id: Optional[str] = None
    url: Optional[str] = None
    path: Optional[str] = None
    created_at: Optional[str] = None
    last_modified: Optional[str] = None


class CustomField(BaseModel):
    """Custom field stored on an item."""
    name: str
    type: str = "text"
    value: str


class Item(BaseModel):
    """Canonical inventory item."""

    id: str = Field(..., description="Item identifier")
    name: str = Field(..., description="Item name")
    notes: Optional[str] = Field(None, description="Item notes (backend 'description' column)")
    tags: List[str] = Field(default_factory=list)
    is_storage: bool = Field(False, description="Whether the item can contain other items")
    is_classified: bool = False
    is_favorited: bool = False
    container_id: Optional[str] = Field(None, description="Identifier of the containing item")
    images: List[ItemImage] = Field(default_factory=list)
    custom_fields: List[CustomField] = Field(default_factory=list)


class Collection(BaseModel):
    """Named group of items."""

    id: str
    name: str
    description: Optional[str] = None
    cover_image_url: Optional[str] = None
    visibility: Visibility = Visibility.PRIVATE
    user_id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    class Config:
        """Pydantic configuration."""
        use_enum_values = True


class CollectionItem(BaseModel):
    """Membership of an item in a collection."""
    id: str
    collection_id: str
    item_id: str
    position: int = 0
    added_at: Optional[str] = None
    added_by: Optional[str] = None
    item: Optional[Item] = None


class Tag(BaseModel):
    """Tag with usage statistics."""
    id: str
    name: str
    usage_count: int = 0
    created_at: str = ""
    updated_at: str = ""


class UsageStats(BaseModel):
    """Per-user usage metrics."""
    item_count: int = 0
    collection_count: int = 0
    storage_used: int = 0
    shared_item_count: int = 0


class UserProfile(BaseModel):
    """Public profile of a StashDog user."""
    id: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    created_at: Optional[str] = None
    last_sign_in: Optional[str] = None
    push_tokens: List[str] = Field(default_factory=list)
    subscription_tier: str = "FREE"
    is_premium: bool = False


class Notification(BaseModel):
    """User notification."""
    id: str
    user_id: Optional[str] = None
    type: Optional[str] = None
    title: Optional[str] = None
    message: Optional[str] = None
    entity_id: Optional[str] = None
    entity_type: Optional[str] = None
    status: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    is_deleted: bool = False
    metadata: Optional[Dict[str, Any]] = None


class Group(BaseModel):
    """Sharing group."""
    id: str
    name: str
    description: Optional[str] = None
    owner_id: Optional[str] = None
    organization_id: Optional[str] = None
    max_members: Optional[int] = None
    avatar_url: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    deleted_at: Optional[str] = None


class SignInResult(BaseModel):
    """Outcome of a password sign-in."""
    user_id: Optional[str] = None
    email: Optional[str] = None
    display_name: Optional[str] = None
    access_token: Optional[str] = None
