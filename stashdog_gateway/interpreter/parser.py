"""Deterministic interpreter for free-text inventory instructions.

Converts an instruction into a structured request for the dispatcher. It must
be deterministic (same input -> same output) and it never raises: text that
matches nothing yields a sparse request with the domain's default action.
"""

from __future__ import annotations

from typing import Any, Dict

from stashdog_gateway.interpreter.classifier import (
    classify_collection_action,
    classify_item_action,
    classify_tag_action,
)
from stashdog_gateway.interpreter.entities import (
    detect_storage,
    detect_visibility,
    extract_collection_id,
    extract_collection_name,
    extract_container_id,
    extract_description,
    extract_item_id,
    extract_item_ids,
    extract_item_name,
    extract_notes,
    extract_search_filters,
    extract_search_query,
    extract_tag_delete_id,
    extract_tag_name,
    extract_tag_query,
    extract_tag_rename,
)
from stashdog_gateway.interpreter.fields import extract_custom_fields, extract_tags
from stashdog_gateway.models.request import (
    CollectionAction,
    ItemAction,
    ParsedCollectionRequest,
    ParsedItemRequest,
    ParsedTagRequest,
    TagAction,
)


_ITEM_ID_ACTIONS = (ItemAction.UPDATE, ItemAction.DELETE, ItemAction.FAVORITE, ItemAction.UNFAVORITE)
_MEMBERSHIP_ACTIONS = (CollectionAction.ADD_ITEMS, CollectionAction.REMOVE_ITEMS)


def _present(**fields: Any) -> Dict[str, Any]:
    """Drop fields that extraction left unset."""
    return {key: value for key, value in fields.items() if value is not None}


def parse_item_request(instruction: str) -> ParsedItemRequest:
    """Parse an item instruction.

    Supported patterns include:
    - "Add a new item called 'Toolbox' with notes 'Red metal' with tags tools, garage"
    - "Update item <id> notes: check warranty"
    - "Delete item <id>"
    - "Search for kitchen items limit 5 offset 10"
    """
    raw = instruction or ""
    lower = raw.lower()
    action = classify_item_action(raw)

    tags = extract_tags(raw)
    fields = _present(
        item_name=extract_item_name(lower) if action == ItemAction.ADD else None,
        item_id=extract_item_id(lower) if action in _ITEM_ID_ACTIONS else None,
        notes=extract_notes(lower),
        tags=tags,
        is_storage=detect_storage(lower),
        container_id=extract_container_id(lower),
        custom_fields=extract_custom_fields(raw),
    )

    if action == ItemAction.SEARCH:
        query = extract_search_query(raw)
        if query.strip():
            fields["search_query"] = query
        filters = extract_search_filters(lower, tags)
        if filters is not None:
            fields["filters"] = filters

    return ParsedItemRequest(action=action, **fields)


def parse_collection_request(instruction: str) -> ParsedCollectionRequest:
    """Parse a collection instruction.

    Supported patterns include:
    - "Create a new collection called 'Kitchen Appliances' description: 'Small stuff' shared"
    - "Add items to collection <collection id> with <item id> <item id>"
    - "Remove items <item id> from collection <collection id>"
    - "Delete collection <id>"
    """
    raw = instruction or ""
    lower = raw.lower()
    action = classify_collection_action(raw)

    collection_id = extract_collection_id(lower)
    fields = _present(
        collection_name=extract_collection_name(raw),
        collection_id=collection_id,
        description=extract_description(raw),
        visibility=detect_visibility(lower),
        item_ids=extract_item_ids(raw, collection_id) if action in _MEMBERSHIP_ACTIONS else None,
    )
    return ParsedCollectionRequest(action=action, **fields)


def parse_tag_request(instruction: str) -> ParsedTagRequest:
    """Parse a tag instruction ("Create tag electronics", "Rename tag <id> to gear", ...)."""
    raw = (instruction or "").strip()
    action = classify_tag_action(raw)

    if action == TagAction.CREATE:
        return ParsedTagRequest(action=action, **_present(tag_name=extract_tag_name(raw)))
    if action == TagAction.SEARCH:
        return ParsedTagRequest(action=action, query=extract_tag_query(raw))
    if action == TagAction.RENAME:
        tag_id, new_name = extract_tag_rename(raw)
        return ParsedTagRequest(action=action, **_present(tag_id=tag_id, new_name=new_name))
    if action == TagAction.DELETE:
        return ParsedTagRequest(action=action, **_present(tag_id=extract_tag_delete_id(raw)))
    return ParsedTagRequest(action=action)
