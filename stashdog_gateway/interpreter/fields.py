"""Extraction of auxiliary fragments that do not depend on the intent.

Tags, hashtags, custom ``key: value`` fields and URLs are pulled out of the
instruction the same way regardless of which action was classified.
"""

from __future__ import annotations

import re
from typing import List, Optional

from stashdog_gateway.models.constants import CUSTOM_FIELD_TYPE, RESERVED_FIELD_NAMES
from stashdog_gateway.models.request import CustomFieldInput


_HASHTAG_RE = re.compile(r"#(\w+)")

# Tag-list forms, tried in order. The first runs to the end of the line or the
# next "key:" fragment, the second stops before "in"/"as".
_TAG_LIST_PATTERNS: list[re.Pattern] = [
    re.compile(r"\btags?\s*[:\-]\s*(.+?)(?=\s*,?\s*\b\w+\s*:|\n|$)", re.I),
    re.compile(r"\b(?:tagged(?:\s+with)?|with\s+tags?|tags?)\s+(.+?)(?=\s+in\b|\s+as\b|\s*$)", re.I),
]

_TAG_SPLIT_RE = re.compile(r"[,\s]+")

_CUSTOM_FIELD_RE = re.compile(r"\b(\w+)\s*:\s*([^,\n]+)")

_URL_RE = re.compile(r"(https?://[^\s<>\"]+)", re.I)


def extract_hashtags(text: str) -> List[str]:
    """All ``#word`` occurrences in order, case as written."""
    return _HASHTAG_RE.findall(text or "")


def extract_tag_list(text: str) -> List[str]:
    """Tokens of the first tag-list phrase found (hashtag tokens skipped)."""
    for pattern in _TAG_LIST_PATTERNS:
        m = pattern.search(text or "")
        if m and m.group(1):
            return [
                token
                for token in _TAG_SPLIT_RE.split(m.group(1))
                if token.strip() and not token.startswith("#")
            ]
    return []


def extract_tags(text: str) -> Optional[List[str]]:
    """Union of hashtags and the tag list, deduplicated in first-seen order.

    Returns None when no tag was found.
    """
    seen = set()
    tags: List[str] = []
    for tag in extract_hashtags(text) + extract_tag_list(text):
        if tag not in seen:
            seen.add(tag)
            tags.append(tag)
    return tags or None


def extract_custom_fields(text: str) -> Optional[List[CustomFieldInput]]:
    """Collect ``name: value`` pairs from the raw instruction.

    Built-in names (notes, tags, tag, description) are skipped. Returns None
    when nothing was found.
    """
    fields: List[CustomFieldInput] = []
    for m in _CUSTOM_FIELD_RE.finditer(text or ""):
        name = m.group(1).strip()
        value = m.group(2).strip()
        if name.lower() in RESERVED_FIELD_NAMES:
            continue
        fields.append(CustomFieldInput(name=name, type=CUSTOM_FIELD_TYPE, value=value))
    return fields or None


def extract_urls(text: str) -> List[str]:
    """Every http(s) URL in order of appearance."""
    return _URL_RE.findall(text or "")
