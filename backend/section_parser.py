"""
Helios Intel - Markdown Section Splitter

Splits AI-generated markdown into classified sections.

Two forms:
- split_sections(): generic heading detection (bold or ### lines) plus
  keyword classification, used for domain intelligence briefings
- extract_bounded_sections(): named-section extraction where each section
  ends where the next named one begins, used for SWOT reports
"""

import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Optional

from constants import NOT_AVAILABLE_TEXT

logger = logging.getLogger(__name__)


_HEADING_MARKUP = re.compile(r"[*#]")

# Keyword groups for domain intelligence briefings. Order matters: the first
# group whose keyword appears in a heading claims it.
DOMAIN_KEYWORDS: Dict[str, List[str]] = {
    "overview": [
        "current performance",
        "risk program footprint",
        "key care delivery programs",
        "pharmacy strategy overview",
        "provider network overview",
        "commercial offerings",
    ],
    "pain": ["inferred pain points"],
    "opportunity": ["strategic opportunities"],
}

DEFAULT_BRIEFING_TITLE = "Intelligence Briefing"
PREAMBLE_TITLE = "Intelligence Overview"

SWOT_SECTIONS = ["Strengths", "Weaknesses", "Opportunities", "Threats"]


@dataclass
class Section:
    title: str
    content: str


def _is_heading(line: str) -> bool:
    stripped = line.strip()
    if stripped.startswith("###"):
        return True
    # Bold headings must be fully wrapped, so "**Note:** text" is not one
    return (
        stripped.startswith("**")
        and stripped.endswith("**")
        and len(stripped) > 4
        and "**" not in stripped[2:-2]
    )


def _classify(title: str, keyword_groups: Dict[str, List[str]]) -> Optional[str]:
    lowered = title.lower()
    for group, keywords in keyword_groups.items():
        if any(kw.lower() in lowered for kw in keywords):
            return group
    return None


def split_sections(
    text: str,
    keyword_groups: Dict[str, List[str]] = None,
    default_group: str = "overview",
    default_title: str = DEFAULT_BRIEFING_TITLE
) -> Dict[str, Optional[Section]]:
    """
    Split markdown on heading lines and classify each section.

    Args:
        text: Markdown text from the AI
        keyword_groups: group name -> heading keywords (case-insensitive
            substring match). Defaults to DOMAIN_KEYWORDS.
        default_group: group that receives unstructured text
        default_title: title used when the text has no headings at all

    Returns:
        Mapping of every group name to a Section or None. When several
        headings match one group the last one wins. Headings matching no
        group are dropped. Text with no headings is attributed whole to
        default_group.
    """
    keyword_groups = keyword_groups or DOMAIN_KEYWORDS
    result: Dict[str, Optional[Section]] = {group: None for group in keyword_groups}
    result.setdefault(default_group, None)

    if not text or not text.strip():
        return result

    lines = text.splitlines()
    heading_indexes = [i for i, line in enumerate(lines) if _is_heading(line)]

    if not heading_indexes:
        result[default_group] = Section(title=default_title, content=text.strip())
        return result

    preamble = "\n".join(lines[:heading_indexes[0]]).strip()
    bounds = heading_indexes + [len(lines)]

    for idx, start in enumerate(heading_indexes):
        title = _HEADING_MARKUP.sub("", lines[start]).strip()
        content = "\n".join(lines[start + 1:bounds[idx + 1]]).strip()
        group = _classify(title, keyword_groups)
        if group is None:
            logger.debug(f"Unclassified section heading dropped: {title!r}")
            continue
        # Later sections replace earlier ones in the same group
        result[group] = Section(title=title, content=content)

    if result.get(default_group) is None and preamble:
        result[default_group] = Section(title=PREAMBLE_TITLE, content=preamble)

    return result


def extract_bounded_sections(text: str, names: List[str]) -> Dict[str, Optional[str]]:
    """
    Extract **Name** sections where each ends at the next named section.

    The last section found runs to the end of the text. Matching is
    case-insensitive. Names that do not appear map to None.
    """
    result: Dict[str, Optional[str]] = {name: None for name in names}
    if not text:
        return result

    positions = []
    for name in names:
        match = re.search(r"\*\*\s*" + re.escape(name) + r"\s*\*\*", text, re.IGNORECASE)
        if match:
            positions.append((match.start(), match.end(), name))
    positions.sort()

    for i, (_, body_start, name) in enumerate(positions):
        body_end = positions[i + 1][0] if i + 1 < len(positions) else len(text)
        result[name] = text[body_start:body_end].strip()

    return result


def parse_swot(text: str) -> Dict[str, str]:
    """
    Parse a SWOT report into strengths/weaknesses/opportunities/threats.

    Missing sections read "Not available.".
    """
    sections = extract_bounded_sections(text, SWOT_SECTIONS)
    return {
        name.lower(): sections[name] or NOT_AVAILABLE_TEXT
        for name in SWOT_SECTIONS
    }
