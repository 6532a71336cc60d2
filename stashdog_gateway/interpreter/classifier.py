"""Keyword-based intent classification.

Each domain has a fixed, ordered list of rules. The first rule whose keywords
are contained in the lower-cased instruction wins; otherwise the domain
default is returned. Containment is plain substring matching.
"""

from __future__ import annotations

from typing import Tuple

from stashdog_gateway.models.request import CollectionAction, ItemAction, TagAction


ADD_KEYWORDS: Tuple[str, ...] = ("add", "create", "new")
UPDATE_KEYWORDS: Tuple[str, ...] = ("update", "modify", "edit", "change")
DELETE_KEYWORDS: Tuple[str, ...] = ("delete", "remove", "discard")
FAVORITE_KEYWORDS: Tuple[str, ...] = ("favorite", "like")
UNFAVORITE_KEYWORDS: Tuple[str, ...] = ("unfavorite", "unlike")

COLLECTION_DELETE_KEYWORDS: Tuple[str, ...] = ("delete", "remove")

TAG_CREATE_KEYWORDS: Tuple[str, ...] = ("create", "add")
TAG_SEARCH_KEYWORDS: Tuple[str, ...] = ("search", "find")
TAG_DELETE_KEYWORDS: Tuple[str, ...] = ("delete", "remove")

# Item rules in precedence order. "unfavorite"/"unlike" contain
# "favorite"/"like", so the favorite rule shadows the unfavorite one.
_ITEM_RULES: Tuple[Tuple[Tuple[str, ...], ItemAction], ...] = (
    (ADD_KEYWORDS, ItemAction.ADD),
    (UPDATE_KEYWORDS, ItemAction.UPDATE),
    (DELETE_KEYWORDS, ItemAction.DELETE),
    (FAVORITE_KEYWORDS, ItemAction.FAVORITE),
    (UNFAVORITE_KEYWORDS, ItemAction.UNFAVORITE),
)


def _contains_any(text: str, keywords: Tuple[str, ...]) -> bool:
    return any(word in text for word in keywords)


def classify_item_action(text: str) -> ItemAction:
    """Classify an item instruction. Defaults to search."""
    lower = (text or "").lower()
    for keywords, action in _ITEM_RULES:
        if _contains_any(lower, keywords):
            return action
    return ItemAction.SEARCH


def classify_collection_action(text: str) -> CollectionAction:
    """Classify a collection instruction. Defaults to create.

    "remove" is ambiguous: it means delete unless the instruction mentions
    "item", in which case it means remove_items. Rule order matters.
    """
    lower = (text or "").lower()
    if _contains_any(lower, UPDATE_KEYWORDS):
        return CollectionAction.UPDATE
    if _contains_any(lower, COLLECTION_DELETE_KEYWORDS) and "item" not in lower:
        return CollectionAction.DELETE
    if "add" in lower and ("item" in lower or "to collection" in lower):
        return CollectionAction.ADD_ITEMS
    if "remove" in lower and "item" in lower:
        return CollectionAction.REMOVE_ITEMS
    return CollectionAction.CREATE


def classify_tag_action(text: str) -> TagAction:
    """Classify a tag instruction. Defaults to list."""
    lower = (text or "").lower()
    if _contains_any(lower, TAG_CREATE_KEYWORDS):
        return TagAction.CREATE
    if _contains_any(lower, TAG_SEARCH_KEYWORDS):
        return TagAction.SEARCH
    if "rename" in lower:
        return TagAction.RENAME
    if _contains_any(lower, TAG_DELETE_KEYWORDS):
        return TagAction.DELETE
    return TagAction.LIST
