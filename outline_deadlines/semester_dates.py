"""
Semester calendar and date string helpers.

Converts teaching week numbers into calendar dates and parses the loose
day strings found in unit outlines ("3rd May", "#rd May", "29 May 2026").
"""

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Dict, Optional, Tuple

import dateparser

log = logging.getLogger(__name__)


@dataclass
class SemesterPeriod:
    """Start/end dates and length of one semester."""
    start: date                 # Monday of teaching week 1
    end: date                   # Last day of the semester
    weeks: int                  # Calendar weeks including any mid-semester break


# Semester dates confirmed against the published academic calendar.
# (start month, start day, end month, end day, weeks) per semester.
KNOWN_YEAR_OVERRIDES = {
    2026: {1: (2, 16, 5, 22, 14), 2: (7, 20, 10, 23, 14)},
    2027: {1: (2, 15, 5, 21, 14), 2: (7, 19, 10, 22, 14)},
    2028: {1: (2, 14, 5, 19, 14), 2: (7, 17, 10, 20, 14)},
}

MONTH_NAMES = {
    'january': 1, 'jan': 1,
    'february': 2, 'feb': 2,
    'march': 3, 'mar': 3,
    'april': 4, 'apr': 4,
    'may': 5,
    'june': 6, 'jun': 6,
    'july': 7, 'jul': 7,
    'august': 8, 'aug': 8,
    'september': 9, 'sep': 9, 'sept': 9,
    'october': 10, 'oct': 10,
    'november': 11, 'nov': 11,
    'december': 12, 'dec': 12,
}

STANDARD_DATE_RE = re.compile(
    r'(\d{1,2})\s*(st|nd|rd|th)?\s+([A-Za-z]+)(?:,?\s+(\d{4})\b)?', re.IGNORECASE
)
# "# #rd May": two-digit day whose glyphs were lost, with a space between them
SPACED_PLACEHOLDER_RE = re.compile(r'#\s+#\s*(st|nd|rd)\s+([A-Za-z]+)', re.IGNORECASE)
PLACEHOLDER_RE = re.compile(r'(#+)\s*(st|nd|rd)\s+([A-Za-z]+)', re.IGNORECASE)
YEAR_RE = re.compile(r'\b(\d{4})\b')
MONTH_WORD_RE = re.compile(r'[A-Za-z]+')

CLOCK_RE = re.compile(r'(\d{1,2})[:.]\s*(\d{2})\s*(AM|PM)?', re.IGNORECASE)
CLOCK_HOUR_ONLY_RE = re.compile(r'\b(\d{1,2})\s*(AM|PM)\b', re.IGNORECASE)


def _nth_monday(start: date, n: int) -> date:
    """Return the nth Monday on or after start."""
    offset = (0 - start.weekday()) % 7
    return start + timedelta(days=offset + 7 * (n - 1))


def _calculate_dates_pre_2026(year: int) -> Dict[int, SemesterPeriod]:
    # S1 starts on the 4th Monday of February, 13 weeks, then an 8 week break
    start_s1 = _nth_monday(date(year, 2, 1), 4)
    end_s1 = start_s1 + timedelta(weeks=13)
    start_s2 = end_s1 + timedelta(weeks=8)
    end_s2 = start_s2 + timedelta(weeks=13)
    return {
        1: SemesterPeriod(start_s1, end_s1 - timedelta(days=1), 13),
        2: SemesterPeriod(start_s2, end_s2 - timedelta(days=1), 13),
    }


def _calculate_dates_2026_plus(year: int) -> Dict[int, SemesterPeriod]:
    start_s1 = _nth_monday(date(year, 2, 14), 1)
    start_s2 = _nth_monday(date(year, 7, 1), 3)
    return {
        1: SemesterPeriod(start_s1, start_s1 + timedelta(weeks=14, days=-1), 14),
        2: SemesterPeriod(start_s2, start_s2 + timedelta(weeks=14, days=-1), 14),
    }


def get_dates(year: int) -> Dict[int, SemesterPeriod]:
    """Return semester periods for a year, keyed by semester number.

    Uses the verified override table where available, otherwise the
    formula for the year's calendar pattern.
    """
    override = KNOWN_YEAR_OVERRIDES.get(year)
    if override:
        return {
            sem: SemesterPeriod(
                start=date(year, sm, sd),
                end=date(year, em, ed),
                weeks=weeks,
            )
            for sem, (sm, sd, em, ed, weeks) in override.items()
        }
    if year >= 2026:
        return _calculate_dates_2026_plus(year)
    return _calculate_dates_pre_2026(year)


def get_semester_weeks(year: int, semester: int) -> int:
    """Return the number of calendar weeks in a semester."""
    return get_dates(year)[semester].weeks


def week_to_date(semester: int, year: int, week: int, day_offset: int = 0) -> datetime:
    """Convert a semester week number to a calendar date.

    Args:
        semester: 1 or 2
        year: Academic year, e.g. 2026
        week: Week number (1-based)
        day_offset: Day within the week, 0=Monday ... 5=Saturday

    Returns:
        Midnight datetime of that day, e.g. week 5 of S1 2026 -> Mon 16 Mar 2026
    """
    start = get_dates(year)[semester].start
    day = start + timedelta(days=(week - 1) * 7 + day_offset)
    return datetime(day.year, day.month, day.day)


def _month_number(word: str) -> Optional[int]:
    return MONTH_NAMES.get(word[:3].lower())


def _safe_date(year: int, month: int, day: int) -> Optional[datetime]:
    try:
        return datetime(year, month, day)
    except ValueError:
        return None


def parse_ordinal_date(text: str, year: int) -> Optional[datetime]:
    """Parse a day string such as "3rd May" into a datetime in the given year.

    Null-byte placeholder days ('#' in place of digit glyphs) are resolved
    only where the ordinal suffix makes the day unambiguous:
    "#st/#nd/#rd" -> 1/2/3 and "##nd/##rd" (or "# #nd/# #rd") -> 22/23.
    "##st", "#th" and "##th" could be several days and give None.

    An explicit four-digit year after the month overrides the year argument.
    Returns None when no date can be determined; never raises.
    """
    if not text:
        return None
    s = text.strip()

    standard = STANDARD_DATE_RE.search(s)
    if standard:
        day = int(standard.group(1))
        month = _month_number(standard.group(3))
        if month is not None and 1 <= day <= 31:
            explicit_year = int(standard.group(4)) if standard.group(4) else year
            return _safe_date(explicit_year, month, day)

    # Must run before the consecutive-hash pattern, which would otherwise
    # match the second '#' of "# #nd May" on its own.
    spaced = SPACED_PLACEHOLDER_RE.search(s)
    if spaced:
        suffix = spaced.group(1).lower()
        month = _month_number(spaced.group(2))
        if month is not None:
            if suffix == 'nd':
                return datetime(year, month, 22)
            if suffix == 'rd':
                return datetime(year, month, 23)
            return None

    placeholder = PLACEHOLDER_RE.search(s)
    if placeholder:
        count = len(placeholder.group(1))
        suffix = placeholder.group(2).lower()
        month = _month_number(placeholder.group(3))
        if month is not None:
            day = None
            if count == 1:
                day = {'st': 1, 'nd': 2, 'rd': 3}[suffix]
            elif count == 2:
                day = {'nd': 22, 'rd': 23}.get(suffix)
            if day is not None:
                return datetime(year, month, day)

    return _parse_with_dateparser(s, year)


def _parse_with_dateparser(s: str, year: int) -> Optional[datetime]:
    """Last-resort parse for month-first phrasing like "May 3rd"."""
    if '#' in s or not re.search(r'\d', s):
        return None
    if not any(w.lower() in MONTH_NAMES for w in MONTH_WORD_RE.findall(s)):
        return None

    parsed = dateparser.parse(
        s,
        languages=['en'],
        settings={
            'DATE_ORDER': 'DMY',
            'REQUIRE_PARTS': ['day', 'month'],
            'RELATIVE_BASE': datetime(year, 1, 1),
        },
    )
    if parsed is None:
        return None
    target_year = parsed.year if YEAR_RE.search(s) else year
    log.debug("dateparser resolved %r to %s-%02d-%02d", s, target_year, parsed.month, parsed.day)
    return _safe_date(target_year, parsed.month, parsed.day)


def parse_clock_time(text: str) -> Optional[Tuple[int, int]]:
    """Parse "23:59", "5.00 PM" or "1 pm" into (hour, minute).

    PM adds 12 to hours below 12; 12 AM becomes hour 0.
    """
    if not text:
        return None
    match = CLOCK_RE.search(text)
    if match:
        hour, minute = int(match.group(1)), int(match.group(2))
        meridiem = match.group(3)
    else:
        match = CLOCK_HOUR_ONLY_RE.search(text)
        if not match:
            return None
        hour, minute = int(match.group(1)), 0
        meridiem = match.group(2)

    if meridiem:
        meridiem = meridiem.upper()
        if meridiem == 'PM' and hour < 12:
            hour += 12
        elif meridiem == 'AM' and hour == 12:
            hour = 0

    if hour > 23 or minute > 59:
        return None
    return hour, minute
