"""
Salary normalization.

Everything stored is an annual figure in the posting's currency (USD for
almost every source). Hourly, daily, weekly and monthly amounts are
annualized with fixed multipliers; values that are missing, zero or
negative become None, and an inverted range is swapped.
"""

import re
from dataclasses import dataclass
from typing import Optional

# Full-time year: 40h * 52w, 5d * 52w
PERIOD_MULTIPLIERS = {
    'hour': 2080,
    'day': 260,
    'week': 52,
    'month': 12,
    'year': 1,
}

_PERIOD_ALIASES = {
    'hourly': 'hour', 'hour': 'hour', 'hr': 'hour', 'h': 'hour', 'per_hour': 'hour',
    'daily': 'day', 'day': 'day', 'per_day': 'day',
    'weekly': 'week', 'week': 'week', 'wk': 'week', 'per_week': 'week',
    'monthly': 'month', 'month': 'month', 'mo': 'month', 'per_month': 'month',
    'yearly': 'year', 'year': 'year', 'yr': 'year', 'annual': 'year',
    'annually': 'year', 'per_year': 'year', 'annum': 'year',
}

_AMOUNT = r'\$\s?([\d][\d,]*(?:\.\d+)?)\s*([kK])?'
_RANGE_RE = re.compile(_AMOUNT + r'(?:\s*(?:-|–|—|to)\s*' + _AMOUNT + r')?')
_PERIOD_RE = re.compile(
    r'(hourly|/\s*h(?:ou)?r|per\s+hour|an\s+hour|'
    r'daily|/\s*day|per\s+day|'
    r'weekly|/\s*w(?:ee)?k|per\s+week|'
    r'monthly|/\s*mo(?:nth)?|per\s+month|'
    r'annually|yearly|/\s*y(?:ea)?r|per\s+year|per\s+annum|annual)',
    re.IGNORECASE,
)


@dataclass
class SalaryRange:
    """Annualized salary bounds plus the human-readable text they came from"""
    min: Optional[int] = None
    max: Optional[int] = None
    text: Optional[str] = None


def normalize_period(period: Optional[str]) -> str:
    """Map a period label ("HOURLY", "per_month", "yr") to hour/day/week/month/year; default year"""
    if not period:
        return 'year'
    key = period.strip().lower().replace(' ', '_')
    return _PERIOD_ALIASES.get(key, 'year')


def annualize(amount, period: Optional[str] = 'year') -> Optional[int]:
    """
    Convert an amount for the given period to an annual integer.

    Examples:
        annualize(50, 'hour')   -> 104000
        annualize(6000, 'month') -> 72000
        annualize(0, 'year')    -> None
    """
    if amount is None or isinstance(amount, bool):
        return None
    try:
        value = float(amount)
    except (TypeError, ValueError):
        return None
    if value <= 0:
        return None
    return int(round(value * PERIOD_MULTIPLIERS[normalize_period(period)]))


def salary_range(
    minimum,
    maximum,
    period: Optional[str] = 'year',
    text: Optional[str] = None,
) -> SalaryRange:
    """
    Build an annualized SalaryRange from raw upstream bounds.

    Non-positive bounds are dropped, and min > max is swapped so the stored
    range always satisfies min <= max.
    """
    low = annualize(minimum, period)
    high = annualize(maximum, period)
    if low is not None and high is not None and low > high:
        low, high = high, low
    return SalaryRange(min=low, max=high, text=text or None)


def _to_number(digits: str, thousands: Optional[str]) -> float:
    value = float(digits.replace(',', ''))
    if thousands:
        value *= 1000
    return value


def parse_salary_text(text: Optional[str]) -> SalaryRange:
    """
    Parse a display salary string into an annualized range.

    Understands:
        "$105,393 - $126,512 Annually"
        "$50 - $75 Hourly"        -> 104000 / 156000
        "$30 Hourly"              -> 62400 / 62400
        "$100K – $150K"           -> 100000 / 150000 (no period means annual)
        "$6,000/month"

    Text that contains no dollar amount is kept as text only.
    """
    if not text or not text.strip():
        return SalaryRange()
    cleaned = text.strip()

    match = _RANGE_RE.search(cleaned)
    if not match:
        return SalaryRange(text=cleaned)

    low_digits, low_k, high_digits, high_k = match.groups()
    low = _to_number(low_digits, low_k)
    high = _to_number(high_digits, high_k) if high_digits else low

    period_match = _PERIOD_RE.search(cleaned)
    period = 'year'
    if period_match:
        label = period_match.group(1).lower()
        if 'hour' in label or 'hr' in label:
            period = 'hour'
        elif 'da' in label:
            period = 'day'
        elif 'w' in label:
            period = 'week'
        elif 'mo' in label:
            period = 'month'

    return salary_range(low, high, period, text=cleaned)
