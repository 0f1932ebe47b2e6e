"""
Pure text helpers shared by every source adapter.

No I/O here: HTML-to-text conversion, job type / experience level
inference, timestamp parsing and company logo URLs.
"""

import html
import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Optional

JOB_TYPES = ('full-time', 'part-time', 'contract', 'freelance', 'internship')
EXPERIENCE_LEVELS = ('entry', 'mid', 'senior', 'lead')

DEFAULT_JOB_TYPE = 'full-time'
DEFAULT_EXPERIENCE_LEVEL = 'mid'


def strip_html(raw: str) -> str:
    """Strip HTML tags, decode entities and collapse whitespace to single spaces"""
    if not raw:
        return ''
    text = re.sub(r'<[^>]*>', ' ', raw)
    text = html.unescape(text)
    text = re.sub(r'\s+', ' ', text)
    return text.strip()


def html_to_structured_text(raw: str) -> str:
    """
    Convert description HTML to plain text that keeps its layout.

    Headings become "## Heading", list items become "• item", paragraphs,
    divs and <br> become line breaks. Handles feeds that ship entity-encoded
    HTML (Greenhouse sends "&lt;p&gt;...").

    Args:
        raw: HTML string, possibly entity-encoded

    Returns:
        Plain text with at most one blank line between blocks
    """
    if not raw:
        return ''
    text = raw
    if '&lt;' in text and '<' not in text:
        text = html.unescape(text)
    text = (
        text.replace('\\u003c', '<')
        .replace('\\u003e', '>')
        .replace('\\u0026', '&')
    )
    text = re.sub(r'<h[1-6][^>]*>(.*?)</h[1-6]>', r'\n\n## \1\n', text, flags=re.IGNORECASE | re.DOTALL)
    text = re.sub(r'<li[^>]*>', '\n• ', text, flags=re.IGNORECASE)
    text = re.sub(r'</li>', '', text, flags=re.IGNORECASE)
    text = re.sub(r'</?p[^>]*>', '\n', text, flags=re.IGNORECASE)
    text = re.sub(r'<br\s*/?>', '\n', text, flags=re.IGNORECASE)
    text = re.sub(r'</div>', '\n', text, flags=re.IGNORECASE)
    text = re.sub(r'<[^>]*>', '', text)
    text = html.unescape(text).replace('\xa0', ' ')
    text = re.sub(r'[ \t]+', ' ', text)
    text = re.sub(r'\n +', '\n', text)
    text = re.sub(r'\n{3,}', '\n\n', text)
    return text.strip()


def truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[:limit]


def parse_job_type(text: str) -> str:
    """
    Infer job type from free text (usually the title).

    Ordered checks, first hit wins: contract, part-time, freelance,
    internship, temporary (mapped to contract). Default full-time.
    """
    lower = (text or '').lower()
    if 'contract' in lower:
        return 'contract'
    if 'part-time' in lower or 'part time' in lower:
        return 'part-time'
    if 'freelance' in lower:
        return 'freelance'
    if 'internship' in lower or 'intern ' in lower:
        return 'internship'
    if 'temporary' in lower or 'temp ' in lower:
        return 'contract'
    return DEFAULT_JOB_TYPE


def normalize_job_type(value: Optional[str], fallback_text: str = '') -> str:
    """
    Map an upstream-supplied employment type into the closed set.

    Upstreams send "FULLTIME", "Full-Time", "full_time", "Contractor" and
    so on. Unrecognized values fall back to inference from fallback_text.
    """
    if value:
        key = re.sub(r'[\s_-]+', '', value.strip().lower())
        mapping = {
            'fulltime': 'full-time',
            'permanent': 'full-time',
            'parttime': 'part-time',
            'contract': 'contract',
            'contractor': 'contract',
            'temporary': 'contract',
            'temp': 'contract',
            'freelance': 'freelance',
            'internship': 'internship',
            'intern': 'internship',
        }
        if key in mapping:
            return mapping[key]
    return parse_job_type(fallback_text)


def parse_experience_level(text: str) -> str:
    """Infer experience level: senior/sr./lead, then junior/jr./entry, then principal/staff/director"""
    lower = (text or '').lower()
    if 'senior' in lower or 'sr.' in lower or 'lead' in lower:
        return 'senior'
    if 'junior' in lower or 'jr.' in lower or 'entry' in lower:
        return 'entry'
    if 'principal' in lower or 'staff' in lower or 'director' in lower:
        return 'lead'
    return DEFAULT_EXPERIENCE_LEVEL


def normalize_experience_level(value: Optional[str], fallback_text: str = '') -> str:
    """Map an upstream seniority label into entry/mid/senior/lead, else infer from fallback_text"""
    if value:
        lower = value.strip().lower()
        if lower in EXPERIENCE_LEVELS:
            return lower
        if lower in ('junior', 'entry-level', 'entry level', 'intern', 'graduate'):
            return 'entry'
        if lower in ('mid-level', 'mid level', 'midlevel', 'intermediate', 'any'):
            return 'mid'
        if lower in ('senior', 'senior-level', 'senior level', 'expert'):
            return 'senior'
        if lower in ('lead', 'principal', 'staff', 'manager', 'director', 'executive'):
            return 'lead'
    return parse_experience_level(fallback_text)


def company_logo_url(company_name: Optional[str]) -> Optional[str]:
    """Clearbit logo URL guessed from the company name ("Acme Inc" -> acmeinc.com)"""
    if not company_name or company_name.strip().lower() in ('unknown', 'unknown company'):
        return None
    domain = re.sub(r'[^a-z0-9]', '', company_name.lower())
    if not domain:
        return None
    return f"https://logo.clearbit.com/{domain}.com"


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse an upstream timestamp into a UTC-aware datetime.

    Accepts ISO-8601 strings ("2024-01-01T10:00:00Z", "2024-01-01"),
    epoch seconds or milliseconds (int/float or digit strings) and
    RFC-2822 dates ("Mon, 01 Jan 2024 10:00:00 GMT").

    Returns:
        datetime with tzinfo, or None when value is empty or unparseable
    """
    if value is None or value == '' or isinstance(value, bool):
        return None

    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())

    if isinstance(value, (int, float)):
        seconds = value / 1000 if value > 10_000_000_000 else value
        try:
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    if not isinstance(value, str):
        return None

    raw = value.strip()
    try:
        parsed = datetime.fromisoformat(raw.replace('Z', '+00:00'))
    except ValueError:
        try:
            parsed = parsedate_to_datetime(raw)
        except (TypeError, ValueError):
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
