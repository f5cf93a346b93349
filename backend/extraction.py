"""
Helios Intel - Extraction Engine

Pulls structured data out of free-text AI responses.

Key Features:
- Delimiter-based block extraction with an atomic body/payload split
- Fence-stripping JSON normalization (first-open / last-close heuristic)
- Optional bracket-depth scanner for blobs holding several JSON fragments
- Caller-side JSON parsing that degrades to None instead of raising

Nothing in this module raises on malformed AI output. Callers treat a None
result as "structured data absent" and keep the raw text.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

from constants import JSON_START_MARKER, JSON_END_MARKER

logger = logging.getLogger(__name__)


_OPENERS = "{["
_CLOSERS = {"{": "}", "[": "]"}


@dataclass
class BlockSplit:
    """Result of splitting a delimited block out of a larger text."""
    block: str
    remainder: str
    start: int  # index in remainder where the markers + block were removed
    start_marker: str
    end_marker: str

    def restore(self) -> str:
        """Rebuild the original text from the remainder and the block."""
        return (
            self.remainder[:self.start]
            + self.start_marker + self.block + self.end_marker
            + self.remainder[self.start:]
        )


def _locate_block(text: str, start_marker: str, end_marker: str) -> Optional[tuple]:
    if not text or not start_marker or not end_marker:
        return None
    start = text.find(start_marker)
    end = text.find(end_marker)
    if start == -1 or end == -1:
        return None
    block_start = start + len(start_marker)
    if end < block_start:
        # End marker appears before (or inside) the start marker
        return None
    return start, block_start, end


def extract_delimited_block(
    text: str,
    start_marker: str = JSON_START_MARKER,
    end_marker: str = JSON_END_MARKER
) -> Optional[str]:
    """
    Return the substring strictly between the first start and end markers.

    Returns None when either marker is missing or the end marker occurs
    before the start marker.
    """
    located = _locate_block(text, start_marker, end_marker)
    if located is None:
        return None
    _, block_start, end = located
    return text[block_start:end]


def split_delimited_block(
    text: str,
    start_marker: str = JSON_START_MARKER,
    end_marker: str = JSON_END_MARKER
) -> Optional[BlockSplit]:
    """
    Split text into the delimited block and the remainder without it.

    Both parts are produced together or not at all: a None return means
    the caller should treat the whole text as unstructured body.
    """
    located = _locate_block(text, start_marker, end_marker)
    if located is None:
        return None
    start, block_start, end = located
    remainder = text[:start] + text[end + len(end_marker):]
    return BlockSplit(
        block=text[block_start:end],
        remainder=remainder,
        start=start,
        start_marker=start_marker,
        end_marker=end_marker,
    )


def _strip_fence(text: str) -> str:
    if not text.startswith("```"):
        return text
    if text[3:7].lower() == "json":
        text = text[7:]
    else:
        text = text[3:]
    text = text.rstrip()
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def normalize_json_text(text: str) -> str:
    """
    Produce a best-effort JSON-parseable substring from AI output.

    Trims, strips a leading ```/```json fence, then returns the span from
    the first '{' or '[' to the last '}' or ']' inclusive. Text without
    any opening delimiter is returned unchanged so the caller's parse fails
    and surfaces the problem. This is a heuristic: several JSON fragments
    in one blob are over-captured, not disambiguated.
    """
    if text is None:
        return text
    cleaned = _strip_fence(text.strip())

    first_brace = cleaned.find("{")
    first_bracket = cleaned.find("[")
    candidates = [i for i in (first_brace, first_bracket) if i != -1]
    if not candidates:
        return text
    first_open = min(candidates)

    last_close = max(cleaned.rfind("}"), cleaned.rfind("]"))
    if last_close < first_open:
        return cleaned[first_open:]
    return cleaned[first_open:last_close + 1]


def find_balanced_json(text: str) -> Optional[str]:
    """
    Return the first balanced JSON object or array in text.

    Depth-counting scan that ignores brackets inside string literals.
    Returns None when no opening delimiter exists or it is never closed.
    """
    if not text:
        return None
    cleaned = _strip_fence(text.strip())

    start = -1
    for i, ch in enumerate(cleaned):
        if ch in _OPENERS:
            start = i
            break
    if start == -1:
        return None

    stack = []
    in_string = False
    escaped = False
    for i in range(start, len(cleaned)):
        ch = cleaned[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in _OPENERS:
            stack.append(_CLOSERS[ch])
        elif ch in "}]":
            if not stack or stack[-1] != ch:
                return None
            stack.pop()
            if not stack:
                return cleaned[start:i + 1]
    return None


def parse_json_payload(text: Optional[str], strict: bool = False) -> Optional[Any]:
    """
    Parse JSON out of AI output.

    Uses normalize_json_text by default, or find_balanced_json when strict
    is set. Returns None (logged) when nothing parseable is found.
    """
    if not text or not text.strip():
        return None

    candidate = find_balanced_json(text) if strict else normalize_json_text(text)
    if candidate is None:
        logger.warning("JSON payload not found in AI output (%d chars)", len(text))
        return None

    try:
        return json.loads(candidate)
    except json.JSONDecodeError as e:
        logger.warning(f"JSON parse failed: {e}")
        return None


def extract_json_block(
    text: str,
    start_marker: str = JSON_START_MARKER,
    end_marker: str = JSON_END_MARKER
) -> tuple:
    """
    Split a report into (clean_body, payload).

    Returns (body_without_block, parsed_dict) when the delimited block is
    present and parses to a JSON object, otherwise (text, None) with the
    original text left verbatim.
    """
    split = split_delimited_block(text, start_marker, end_marker)
    if split is None:
        logger.info("No delimited JSON block found; keeping body verbatim")
        return text, None

    payload = parse_json_payload(split.block)
    if not isinstance(payload, dict):
        if payload is not None:
            logger.warning("Delimited JSON block is %s, expected object", type(payload).__name__)
        return text, None

    return split.remainder.strip(), payload
