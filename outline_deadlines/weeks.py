"""Week number extraction and week label formatting."""

import re
from typing import List, Optional

MIN_WEEK = 1
MAX_WEEK = 20

WEEK_RANGE_RE = re.compile(r'\b(\d{1,2})\s*[-–]\s*(\d{1,2})\b')
WEEK_NUMBER_RE = re.compile(r'\b(\d{1,2})\b')
LABEL_RANGE_RE = re.compile(r'^(\d{1,2})\s*[-–]\s*(\d{1,2})$')


def _valid_week(n: int) -> bool:
    return MIN_WEEK <= n <= MAX_WEEK


def extract_all_weeks(s: str) -> List[int]:
    """Extract every week number from strings like "Weeks 1-13" or "2,4,6".

    A range expands inclusively; otherwise all one or two digit numbers are
    collected. Values outside 1-20 are dropped. Result is sorted and unique.
    """
    if not s:
        return []
    range_match = WEEK_RANGE_RE.search(s)
    if range_match:
        start, end = int(range_match.group(1)), int(range_match.group(2))
        return [w for w in range(min(start, end), max(start, end) + 1) if _valid_week(w)]
    return sorted({int(n) for n in WEEK_NUMBER_RE.findall(s) if _valid_week(int(n))})


def normalize_week_label(raw: Optional[str]) -> Optional[str]:
    """Turn a raw week string into "Week N" / "Weeks N–M" / "Exam week".

    Returns None when nothing is left after stripping placeholders.
    """
    if raw is None:
        return None
    s = re.sub(r'\s{2,}', ' ', raw.replace('#', '')).strip()
    if not s:
        return None
    if re.search(r'\bweek\b', s, re.IGNORECASE):
        return s
    if re.search(r'\bexam(ination)?\b', s, re.IGNORECASE):
        return "Exam week"
    range_match = LABEL_RANGE_RE.match(s)
    if range_match:
        return f"Weeks {range_match.group(1)}–{range_match.group(2)}"
    if re.match(r'^\d{1,2}$', s):
        return f"Week {s}"
    return s
