"""Shared regular expressions and the ordered first-match helper."""

from __future__ import annotations

import re
from typing import Iterable, Optional


# Identifier-shaped tokens: hyphenated UUID or 32 contiguous hex characters.
# Shape only, version/variant bits are not checked.
_UUID = r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}"
_HEX32 = r"[0-9a-f]{32}"
IDENTIFIER = rf"(?<![0-9a-f])(?:{_UUID}|{_HEX32})(?![0-9a-f])"

IDENTIFIER_RE = re.compile(IDENTIFIER)

# Straight and typographic quotes
QUOTE = "'\"‘’“”"
QUOTED = rf"[{QUOTE}]([^{QUOTE}]+)[{QUOTE}]"


def first_match(text: str, patterns: Iterable[re.Pattern]) -> Optional[str]:
    """Return the trimmed first group of the first pattern that matches.

    Patterns are tried in order; a match whose group is blank does not count
    and the next pattern is tried.
    """
    for pattern in patterns:
        m = pattern.search(text)
        if m and m.group(1) and m.group(1).strip():
            return m.group(1).strip()
    return None


def find_identifiers(text: str) -> list[str]:
    """All identifier-shaped tokens in order of appearance (duplicates kept)."""
    return IDENTIFIER_RE.findall(text.lower())
