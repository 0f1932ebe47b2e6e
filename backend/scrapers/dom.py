"""
DOM queries used by the browser scrapers.

Every function takes the page HTML as a string (page.content()) and
works on it with BeautifulSoup, so the extraction rules can be tested
against fixture HTML without a browser.
"""

import re
from typing import Iterable, List, Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup, Tag

DESCRIPTION_MIN_CHARS = 200
DESCRIPTION_MAX_CHARS = 15_000

# Paragraphs/list items shorter than this are navigation, buttons, labels
FALLBACK_MIN_CHARS = 20

APPLY_LINK_MARKERS = ('apply', 'view job', 'view listing')

_WHITESPACE_RE = re.compile(r'[ \t\r\f\v]+')
_BLANK_LINES_RE = re.compile(r'\n\s*\n+')


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or '', 'html.parser')


def node_text(node: Optional[Tag]) -> str:
    """Visible text of a node with runs of whitespace collapsed"""
    if node is None:
        return ''
    text = node.get_text(separator='\n')
    text = _WHITESPACE_RE.sub(' ', text)
    text = '\n'.join(line.strip() for line in text.split('\n'))
    return _BLANK_LINES_RE.sub('\n\n', text).strip()


def extract_description(
    html: str,
    selectors: Iterable[str],
    min_length: int = DESCRIPTION_MIN_CHARS,
    max_length: int = DESCRIPTION_MAX_CHARS,
) -> str:
    """
    Pull the job description out of a detail page.

    Selectors are tried in order; the first element whose text is longer
    than min_length wins. When none qualifies, every <p> and <li> with more
    than FALLBACK_MIN_CHARS characters is collected instead.

    Args:
        html: Detail page HTML
        selectors: CSS selectors, most specific first
        min_length: Minimum text length for a selector match to count
        max_length: Result is cut to this many characters

    Returns:
        Description text, possibly empty
    """
    soup = parse_html(html)

    for selector in selectors:
        text = node_text(soup.select_one(selector))
        if len(text) > min_length:
            return text[:max_length]

    lines: List[str] = []
    for node in soup.find_all(['p', 'li']):
        text = node_text(node)
        if len(text) > FALLBACK_MIN_CHARS:
            lines.append(text)
    return '\n'.join(lines)[:max_length]


def _is_own_domain(href: str, own_domain: str) -> bool:
    host = (urlparse(href).hostname or '').lower()
    own_domain = own_domain.lower()
    return host == own_domain or host.endswith('.' + own_domain)


def find_external_apply_link(html: str, own_domain: str) -> Optional[str]:
    """
    First outbound apply link on an intermediate listing page.

    A link qualifies when its text mentions apply / view job / view listing,
    its href is absolute (http(s) or protocol-relative) and it does not point
    back at own_domain.

    Returns:
        Absolute https URL, or None when the page has no outbound link
    """
    soup = parse_html(html)

    for link in soup.find_all('a', href=True):
        text = link.get_text(' ', strip=True).lower()
        if not any(marker in text for marker in APPLY_LINK_MARKERS):
            continue

        href = link['href'].strip()
        if href.startswith('//'):
            href = 'https:' + href
        if not href.startswith(('http://', 'https://')):
            continue
        if _is_own_domain(href, own_domain):
            continue
        return href

    return None
