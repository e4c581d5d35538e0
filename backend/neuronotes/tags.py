"""
Tag normalization shared by the notes service, the suggest-tags function
and the client tag manager.

Stored tags are trimmed, lowercased and unique by value; order is the order
of first appearance.
"""

from typing import Iterable, List


def normalize_tag(raw: str) -> str:
    """Trim and lowercase a single tag. May return an empty string."""
    return raw.strip().lower()


def normalize_tags(raw_tags: Iterable[str]) -> List[str]:
    """Normalize every tag, dropping empties and later duplicates."""
    seen = set()
    result: List[str] = []
    for raw in raw_tags:
        tag = normalize_tag(raw)
        if not tag or tag in seen:
            continue
        seen.add(tag)
        result.append(tag)
    return result
