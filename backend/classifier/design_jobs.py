"""
Rule-based design-job classifier.

is_design_job() is deterministic and side-effect free, so adapters can call
it twice: once on the search-result title to decide whether a detail fetch
is worth spending, and again once the detail payload is in hand.

Tiers are evaluated strictly in order and the first decisive one wins:

1. Hard exclusion    - engineering / sales / leadership terms in the title -> False
2. Required keyword  - title must mention some design vocabulary, else False
3. Strong pattern    - anchored design-role regexes -> True
4. Core title        - whitelisted title fragments -> True
5. Tag fallback      - a design tag AND a design-tool tag -> True, else False

An exclusion always beats a design signal: "UX Designer / Software
Engineer" is rejected.
"""

import re
from typing import Iterable, Optional

from classifier.keywords import (
    CORE_DESIGN_TITLES,
    DESIGN_KEYWORDS,
    DESIGN_TAGS,
    DESIGN_TITLE_PATTERNS,
    DESIGN_TOOL_TAGS,
    EXCLUDE_KEYWORDS,
    EXCLUDE_WHOLE_WORDS,
)


def _alternation(terms: Iterable[str]) -> str:
    # Longest first keeps the alternation readable when debugging matches
    return '|'.join(re.escape(term) for term in sorted(set(terms), key=len, reverse=True))


# Word start: 'software engineer' also rejects "Software Engineers" and "Software Engineering"
_EXCLUDE_RE = re.compile(
    rf'(?<![a-z0-9])(?:{_alternation(set(EXCLUDE_KEYWORDS) - set(EXCLUDE_WHOLE_WORDS))})'
)

# Whole word plus optional plural: 'cto' does not fire inside "Director"
_EXCLUDE_WORD_RE = re.compile(
    rf'(?<![a-z0-9])(?:{_alternation(EXCLUDE_WHOLE_WORDS)})s?(?![a-z0-9])'
)

# Word start only: 'design' matches "designer", 'ui' does not match "build"
_REQUIRED_RE = re.compile(
    rf'(?<![a-z0-9])(?:{_alternation(DESIGN_KEYWORDS)})'
)


def has_excluded_keyword(title: str) -> bool:
    lower = title.lower()
    return _EXCLUDE_RE.search(lower) is not None or _EXCLUDE_WORD_RE.search(lower) is not None


def has_required_keyword(title: str) -> bool:
    return _REQUIRED_RE.search(title.lower()) is not None


def matches_design_pattern(title: str) -> bool:
    return any(pattern.search(title) for pattern in DESIGN_TITLE_PATTERNS)


def has_core_design_title(title: str) -> bool:
    lower = title.lower()
    return any(core in lower for core in CORE_DESIGN_TITLES)


def has_design_tag_evidence(tags: Optional[Iterable[str]]) -> bool:
    """A tag naming design/designer AND a tag naming a design tool"""
    if not tags:
        return False
    lower_tags = [tag.strip().lower() for tag in tags if isinstance(tag, str)]
    has_design_tag = any(
        tag in DESIGN_TAGS or 'designer' in tag for tag in lower_tags
    )
    has_tool_tag = any(tag in DESIGN_TOOL_TAGS for tag in lower_tags)
    return has_design_tag and has_tool_tag


def is_design_job(
    title: Optional[str],
    tags: Optional[Iterable[str]] = None,
    description: Optional[str] = None,
) -> bool:
    """
    Decide whether a posting is a design role.

    Args:
        title: Posting title (empty or missing -> False)
        tags: Upstream tags/categories, used only by the tag fallback
        description: Accepted so callers can pass full detail data; the
                     decision itself is made from title and tags

    Returns:
        True if the posting should be kept
    """
    if not title or not title.strip():
        return False

    if has_excluded_keyword(title):
        return False

    if not has_required_keyword(title):
        return False

    if matches_design_pattern(title):
        return True

    if has_core_design_title(title):
        return True

    return has_design_tag_evidence(tags)
