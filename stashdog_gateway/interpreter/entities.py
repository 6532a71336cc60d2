"""Entity extraction for classified instructions.

Every field has an ordered list of candidate patterns; the first one that
captures non-blank text wins and unmatched fields stay unset. Functions that
take ``lower`` expect the lower-cased instruction, the others the raw one.
"""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

from stashdog_gateway.interpreter.patterns import IDENTIFIER, QUOTED, first_match, find_identifiers
from stashdog_gateway.models.request import SearchFilters, Visibility


_ITEM_NAME_PATTERNS: list[re.Pattern] = [
    re.compile(rf"(?:add|create|new)\s+(?:item\s+)?(?:called\s+|named\s+)?{QUOTED}"),
    re.compile(r"(?:add|create|new)\s+(?:item\s+)?(.+?)(?:\s+with|\s+that|\s+in|\s*$)"),
]

_ITEM_ID_PATTERNS: list[re.Pattern] = [
    re.compile(rf"(?:item\s+)?(?:id\s+)?({IDENTIFIER})"),
]

_COLLECTION_ID_PATTERNS: list[re.Pattern] = [
    re.compile(rf"(?:collection\s+)?(?:id\s+)?({IDENTIFIER})"),
]

_CONTAINER_ID_PATTERNS: list[re.Pattern] = [
    re.compile(rf"\b(?:in|inside|container)\s+({IDENTIFIER})"),
]

_NOTES_PATTERNS: list[re.Pattern] = [
    re.compile(rf"(?:notes?|description|details?)\s*[:\-]?\s*{QUOTED}"),
    re.compile(rf"(?:with notes?|with description|described as)\s+{QUOTED}"),
    re.compile(r"notes?\s*[:\-]\s*(.+?)(?:\s+tag|$)"),
]

# Quoted names keep their case; the unquoted fallback runs on lower-cased text.
_QUOTED_COLLECTION_NAME_PATTERNS: list[re.Pattern] = [
    re.compile(rf"(?:collection\s+)?(?:called\s+|named\s+)?{QUOTED}"),
]
_UNQUOTED_COLLECTION_NAME_PATTERNS: list[re.Pattern] = [
    re.compile(r"(?:create|new)\s+collection\s+(?:called\s+|named\s+)?(.+?)(?:\s+with|\s+that|\s*$)"),
]

_DESCRIPTION_PATTERNS: list[re.Pattern] = [
    re.compile(rf"(?:description|details?)\s*[:\-]?\s*{QUOTED}"),
]

_STORAGE_KEYWORDS: Tuple[str, ...] = ("storage", "container", "box", "shelf")

_SEARCH_PREFIX_RE = re.compile(r"^(?:search|find|show|get|list)\s+", re.I)
_LIMIT_RE = re.compile(r"(?:limit|max|first)\s+(\d+)")
_OFFSET_RE = re.compile(r"(?:offset|skip)\s+(\d+)")

_TAG_NAME_RE = re.compile(r"(?:create|add)\s+tag\s+(.+)$", re.I)
_TAG_QUERY_RE = re.compile(r"(?:search|find)\s+(.+)$", re.I)
_TAG_RENAME_RE = re.compile(r"rename\s+tag\s+([a-f0-9-]+)\s+to\s+(.+)$", re.I)
_TAG_DELETE_RE = re.compile(r"(?:delete|remove)\s+tag\s+([a-f0-9-]+)$", re.I)


# --- items ---------------------------------------------------------------

def extract_item_name(lower: str) -> Optional[str]:
    return first_match(lower, _ITEM_NAME_PATTERNS)


def extract_item_id(lower: str) -> Optional[str]:
    return first_match(lower, _ITEM_ID_PATTERNS)


def extract_notes(lower: str) -> Optional[str]:
    return first_match(lower, _NOTES_PATTERNS)


def detect_storage(lower: str) -> Optional[bool]:
    """True when a storage keyword is present, otherwise None (unset)."""
    if any(word in lower for word in _STORAGE_KEYWORDS):
        return True
    return None


def extract_container_id(lower: str) -> Optional[str]:
    return first_match(lower, _CONTAINER_ID_PATTERNS)


def extract_search_query(text: str) -> str:
    """Strip a leading search verb; the rest is kept verbatim."""
    return _SEARCH_PREFIX_RE.sub("", text, count=1)


def extract_search_filters(lower: str, tags: Optional[List[str]]) -> Optional[SearchFilters]:
    """Limit/offset/tags filters, or None when none of them is present."""
    limit_match = _LIMIT_RE.search(lower)
    offset_match = _OFFSET_RE.search(lower)
    limit = int(limit_match.group(1)) if limit_match else None
    offset = int(offset_match.group(1)) if offset_match else None

    if limit is None and offset is None and not tags:
        return None
    return SearchFilters(tags=tags or None, limit=limit, offset=offset)


# --- collections ---------------------------------------------------------

def extract_collection_id(lower: str) -> Optional[str]:
    """First identifier anywhere in the instruction."""
    return first_match(lower, _COLLECTION_ID_PATTERNS)


def extract_collection_name(text: str) -> Optional[str]:
    return first_match(text, _QUOTED_COLLECTION_NAME_PATTERNS) or first_match(
        text.lower(), _UNQUOTED_COLLECTION_NAME_PATTERNS
    )


def extract_description(text: str) -> Optional[str]:
    """Quoted description exactly as written (case and inner padding kept)."""
    for pattern in _DESCRIPTION_PATTERNS:
        m = pattern.search(text)
        if m and m.group(1).strip():
            return m.group(1)
    return None


def detect_visibility(lower: str) -> Optional[Visibility]:
    """Private wins over shared/public when both appear."""
    if "private" in lower:
        return Visibility.PRIVATE
    if "shared" in lower or "public" in lower:
        return Visibility.SHARED
    return None


def extract_item_ids(text: str, collection_id: Optional[str] = None) -> Optional[List[str]]:
    """Identifiers in order of appearance, minus the collection's own id.

    Duplicates are kept as written; only the single occurrence that was
    taken as the collection id is dropped.
    """
    ids = find_identifiers(text)
    if collection_id and collection_id in ids:
        ids.remove(collection_id)
    return ids or None


# --- tags ----------------------------------------------------------------

def extract_tag_name(text: str) -> Optional[str]:
    return first_match(text, [_TAG_NAME_RE])


def extract_tag_query(text: str) -> str:
    m = _TAG_QUERY_RE.search(text)
    return m.group(1) if m else ""


def extract_tag_rename(text: str) -> Tuple[Optional[str], Optional[str]]:
    """(tag_id, new_name) from ``rename tag <id> to <name>``."""
    m = _TAG_RENAME_RE.search(text)
    if not m:
        return None, None
    return m.group(1), m.group(2).strip() or None


def extract_tag_delete_id(text: str) -> Optional[str]:
    return first_match(text, [_TAG_DELETE_RE])
