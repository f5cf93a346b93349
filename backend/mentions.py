"""
Helios Intel - Mention Resolver

Finds @mentions in comment text and resolves them against a user roster.
Excluding the author from notification side effects is the caller's job.
"""

import re
from typing import Any, List

# "@" followed by one or more whitespace-separated words. Greedy, so it stops
# only at the next "@" or punctuation.
MENTION_PATTERN = re.compile(r"@(\w+(?:[ \t]+\w+)*)")


def find_mentions(text: str) -> List[str]:
    """Return the lower-cased word runs that follow each @ in text."""
    if not text or "@" not in text:
        return []
    return [m.group(1).lower() for m in MENTION_PATTERN.finditer(text)]


def _roster_name(entry: Any) -> str:
    if isinstance(entry, dict):
        return entry.get("name", "")
    return getattr(entry, "name", "")


def _candidates(mention: str) -> List[str]:
    # A greedy mention like "david evans and" should still match "David Evans"
    words = mention.split()
    return [" ".join(words[:n]) for n in range(len(words), 0, -1)]


def resolve_mentions(text: str, roster: List[Any]) -> List[Any]:
    """
    Resolve @mentions in text to roster entries.

    An entry matches when its lower-cased name equals a mention or a
    leading run of a mention's words. Results follow roster order, each
    entry at most once.
    """
    mentions = find_mentions(text)
    if not mentions or not roster:
        return []

    wanted = set()
    for mention in mentions:
        wanted.update(_candidates(mention))

    resolved = []
    for entry in roster:
        name = _roster_name(entry).strip().lower()
        if name and name in wanted and entry not in resolved:
            resolved.append(entry)
    return resolved
