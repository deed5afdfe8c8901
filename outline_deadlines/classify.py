"""
Line classifiers for linearized PDF text.

Each classifier is a module-level pattern and a predicate over one line.
'#' characters are digit glyphs the PDF text layer failed to decode, so the
numeric classes accept them wherever a digit may appear.
"""

import re
from typing import Optional

PERCENT_LINE_RE = re.compile(r'^\s*[\d#\s]*%\s*$')
ENDS_WITH_PERCENT_RE = re.compile(r'\S.*\s*[\d#\s]*%\s*$')
TRAILING_PERCENT_RE = re.compile(r'\s*[\d#\s]*%\s*$')
PERCENT_VALUE_RE = re.compile(r'(\d+)\s*%')

NOISE_SIGNIFICANT_RE = re.compile(r'[\s,#]')
NOISE_PATTERNS = [
    re.compile(r'^(Week:|Day:|Time:)', re.IGNORECASE),
    # Table header cells
    re.compile(
        r'^(Task\s*$|Value\s*$|Date Due|Unit\s*$|Outcome|Late\s*$|Extension|Accepted|Considered)',
        re.IGNORECASE,
    ),
    # Section titles, page furniture and footers
    re.compile(
        r'^(Assessment Schedule|Assessment$|Faculty of|WASM:|CRICOS|Page\s+\d|The only auth)',
        re.IGNORECASE,
    ),
    re.compile(r'\b(No\s+No|Yes\s+Yes|Yes\s+No|No\s+Yes)\b', re.IGNORECASE),
    re.compile(r'^\*'),
    re.compile(r'^[*\s]+$'),
]

TBA_VALUE_RE = re.compile(
    r'\b(TBA|TBC|exam(ination)? (week|period)|teaching week|study week|flexible|as per'
    r'|schedule|after your|hours after|centrally|one week after|during|fortnightly'
    r'|weekly|bi-?weekly)\b',
    re.IGNORECASE,
)

OUTCOMES_LINE_RE = re.compile(r'^[\d][\d,\s]*$')
YES_NO_RE = re.compile(r'^(yes|no)$', re.IGNORECASE)
COMBINED_YES_NO_RE = re.compile(r'^(yes|no)\s+(yes|no)\s*$', re.IGNORECASE)


def is_percent_line(line: str) -> bool:
    """True when a line holds only a percentage, e.g. "40 %" or "# #%"."""
    return bool(PERCENT_LINE_RE.match(line))


def ends_with_percent(line: str) -> bool:
    """True when title text is followed by a percentage on the same line."""
    return bool(ENDS_WITH_PERCENT_RE.search(line))


def extract_title_from_percent_line(line: str) -> str:
    return TRAILING_PERCENT_RE.sub('', line).strip()


def percent_value(line: str) -> Optional[int]:
    """Return the weight in a percent token when it is a readable 1-100."""
    match = PERCENT_VALUE_RE.search(line)
    if not match:
        return None
    value = int(match.group(1))
    if 1 <= value <= 100:
        return value
    return None


def is_noise_line(line: str) -> bool:
    """True for headers, footers, field labels and garbled placeholder runs."""
    significant = NOISE_SIGNIFICANT_RE.sub('', line)
    if len(significant) <= 1 and len(line) > 3:
        return True
    return any(p.search(line) for p in NOISE_PATTERNS)


def is_tba_value(value: str) -> bool:
    """True when a week or day value describes a period instead of a date."""
    return bool(TBA_VALUE_RE.search(value))


def is_outcomes_line(line: str) -> bool:
    """True for learning-outcome data such as "1,2,4"."""
    return bool(OUTCOMES_LINE_RE.match(line)) and len(line) < 20


def is_yes_no_line(line: str) -> bool:
    return bool(YES_NO_RE.match(line))


def is_combined_yes_no(line: str) -> bool:
    return bool(COMBINED_YES_NO_RE.match(line))


def is_meta_value(line: str) -> bool:
    """True for any line belonging to the outcomes/late/extension columns."""
    return is_outcomes_line(line) or is_yes_no_line(line) or is_combined_yes_no(line)
