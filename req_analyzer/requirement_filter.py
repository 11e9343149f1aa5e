"""
Requirement Filter
Keeps the lines of a normalized page that read like requirement statements
or headings, and collects heading captions as module names.
"""
import re
from typing import List
import logging

from .models import RequirementSet

logger = logging.getLogger(__name__)

MIN_LINE_LENGTH = 5

REQUIREMENT_KEYWORDS = [
    'requirement', 'req', 'must', 'should', 'shall', 'will',
    'needs to', 'user can', 'system should', 'application must',
]

# Requirement statements often open with their subject ("The system must ...")
REQUIREMENT_SUBJECTS = ['the system', 'the user', 'the application']

_KEYWORD_PATTERN = re.compile(
    r'^(?:(?:' + '|'.join(re.escape(s) for s in REQUIREMENT_SUBJECTS) + r')\s+)?'
    r'(' + '|'.join(re.escape(k) for k in REQUIREMENT_KEYWORDS) + r')',
    re.IGNORECASE
)
_ENUMERATOR_PATTERN = re.compile(r'^(\d+\.|\*|-|•)')
_MODULE_PATTERN = re.compile(r'^#+\s*(.+)$', re.MULTILINE)


def is_requirement_line(line: str) -> bool:
    """Check whether a trimmed line looks like a requirement or a header"""
    if len(line) < MIN_LINE_LENGTH:
        return False
    return bool(
        _KEYWORD_PATTERN.match(line)
        or _ENUMERATOR_PATTERN.match(line)
        or line.startswith('#')
    )


def identify_modules(text: str) -> List[str]:
    """Collect heading captions (``# Caption``) in order of appearance"""
    return [match.group(1).strip() for match in _MODULE_PATTERN.finditer(text)]


def filter_requirements(text: str) -> RequirementSet:
    """Filter normalized page text down to requirement lines.

    Retained lines keep their source order and are separated by a blank
    line. An empty result is not an error here; callers decide.
    """
    requirements = []
    for line in text.split('\n'):
        trimmed = line.strip()
        if is_requirement_line(trimmed):
            requirements.append(trimmed)

    formatted = '\n\n'.join(requirements)

    logger.info(f"Extracted requirements count: {len(requirements)}")
    if requirements:
        logger.debug(f"Sample requirements: {requirements[:3]}")

    return RequirementSet(text=formatted, modules=identify_modules(formatted))
