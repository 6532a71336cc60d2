"""Instruction interpreter for the StashDog gateway."""

from stashdog_gateway.interpreter.classifier import (
    classify_item_action,
    classify_collection_action,
    classify_tag_action,
)
from stashdog_gateway.interpreter.fields import extract_tags, extract_custom_fields, extract_urls
from stashdog_gateway.interpreter.parser import (
    parse_item_request,
    parse_collection_request,
    parse_tag_request,
)

__all__ = [
    "classify_item_action",
    "classify_collection_action",
    "classify_tag_action",
    "extract_tags",
    "extract_custom_fields",
    "extract_urls",
    "parse_item_request",
    "parse_collection_request",
    "parse_tag_request",
]
