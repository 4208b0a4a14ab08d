# ============================================================================
# src/transcript_analyzer/core/date_normalizer.py
# ============================================================================
"""
Date normalization to YYYY/MM/DD.

Rules are tried in order and the first match wins:
1. Full date with a 4-digit year: 2025-03-07, 2025/3/7, 2025_03_07,
   2025年3月7日 (separators are optional, so 20250307 also matches)
2. Month and day in Japanese notation: 3月7日 (year taken from default_year)
3. A bare MM-DD or MM/DD making up the whole string: 3-7, 03/07

Dates are not checked for validity: "2025-13-40" gives "2025/13/40".
"""

import re
from typing import Optional

from ..config import reconciliation_settings

# \d is restricted to ASCII digits so full-width numerals are not read as dates
FULL_DATE_PATTERN = re.compile(r"(\d{4})[-/_年]?(\d{1,2})[-/_月]?(\d{1,2})日?", re.ASCII)
MONTH_DAY_KANJI_PATTERN = re.compile(r"(\d{1,2})月(\d{1,2})日", re.ASCII)
BARE_MONTH_DAY_PATTERN = re.compile(r"^(\d{1,2})[-/](\d{1,2})$", re.ASCII)


def _format(year: str, month: str, day: str) -> str:
    return f"{year}/{month.zfill(2)}/{day.zfill(2)}"


def normalize_date(text: Optional[str], default_year: Optional[str] = None) -> str:
    """
    Normalize a free-form date fragment.

    Args:
        text: Any text; it does not need to contain a date
        default_year: Year used when the fragment has no year
            (default: reconciliation_settings.DEFAULT_YEAR)

    Returns:
        "YYYY/MM/DD", or "" when no rule matches
    """
    if not text:
        return ""

    year = default_year or reconciliation_settings.DEFAULT_YEAR

    match = FULL_DATE_PATTERN.search(text)
    if match:
        return _format(match.group(1), match.group(2), match.group(3))

    match = MONTH_DAY_KANJI_PATTERN.search(text)
    if match:
        return _format(year, match.group(1), match.group(2))

    # fullmatch: "3-7" is a date, "foo 3-7 bar" is not
    match = BARE_MONTH_DAY_PATTERN.fullmatch(text)
    if match:
        return _format(year, match.group(1), match.group(2))

    return ""
