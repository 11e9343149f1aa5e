"""
Section Splitter
Splits the markdown reply of the analysis prompt into requirements, test
cases and summary blocks.

The reply is scanned once for the three numbered anchors. Found anchors are
ordered by position and each section body runs from the end of its anchor
line to the start of the next found anchor, or to the end of the reply. When
no anchor yields any content the whole reply becomes the requirements block.
"""
import re
from typing import List, Optional, Tuple
import logging

from .models import AnalysisSections

logger = logging.getLogger(__name__)

# (field name, anchor literal, heading used when rendering the block)
SECTION_ANCHORS: List[Tuple[str, str, str]] = [
    ('requirements', '### 1. REQUIREMENTS', '### Requirements'),
    ('test_cases', '### 2. TEST CASES', '### Test Cases'),
    ('summary', '### 3. SUMMARY', '### Summary'),
]


def _find_anchor(markdown: str, anchor: str) -> Optional[Tuple[int, int]]:
    """Return (anchor start, body start) for the first occurrence of an anchor"""
    start = markdown.find(anchor)
    if start == -1:
        return None
    line_end = markdown.find('\n', start + len(anchor))
    body_start = len(markdown) if line_end == -1 else line_end + 1
    return start, body_start


def split_sections(markdown: str) -> AnalysisSections:
    """Split an analysis reply into its three sections. Never raises."""
    found = []
    for field, anchor, heading in SECTION_ANCHORS:
        position = _find_anchor(markdown, anchor)
        if position is not None:
            found.append((position[0], position[1], field, heading))

    found.sort()
    values = {}
    for index, (_, body_start, field, heading) in enumerate(found):
        body_end = found[index + 1][0] if index + 1 < len(found) else len(markdown)
        body = markdown[body_start:max(body_start, body_end)].strip()
        if body:
            values[field] = f"{heading}\n{body}"

    if not values:
        logger.warning("No sections found in response")
        return AnalysisSections(requirements=markdown.strip())

    return AnalysisSections(**values)
