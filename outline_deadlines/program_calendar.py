"""
Program Calendar parser for unit outline PDF text.

The Program Calendar is a per-week table listing each week's start date and
the activities in it. Rows come out of the text layer in three shapes:

    "5 . 2 Mar Worksheet 3"     dotted row with an inline date
    "5 ."                       short row, content on the following lines
    "#  April Tuition Free Week" dot-free non-teaching row

Weeks are numbered by counting rows, not by the printed label, so that
teaching weeks after a break keep the right date.
"""

import logging
import re
from datetime import datetime, timedelta
from typing import List, Optional

from .models import PendingDeadline
from .semester_dates import week_to_date
from .weeks import MAX_WEEK

log = logging.getLogger(__name__)

# One or two digit number, or its undecoded form "#" / "# #"
NUM = r'(?:\d{1,2}|#(?:\s#)?)'
MONTHS = r'(jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)'

WEEK_ROW_FULL_RE = re.compile(rf'^{NUM}\s*\.\s+{NUM}\s+{MONTHS}', re.IGNORECASE)
WEEK_ROW_SHORT_RE = re.compile(rf'^{NUM}\s*\.\s*$')
NO_DOT_WEEK_ROW_RE = re.compile(rf'^{NUM}\s{{2,}}{MONTHS}', re.IGNORECASE)
ROW_PREFIX_RE = re.compile(rf'^{NUM}\s*\.\s+{NUM}\s+[A-Za-z]{{3,9}}\s*')
NO_DOT_PREFIX_RE = re.compile(r'^[#\d](?:\s[#\d])?\s{2,}[A-Za-z]+\s*', re.IGNORECASE)

HEADER_RE = re.compile(r'\bprogram\s+calendar\b', re.IGNORECASE)
NON_TEACHING_RE = re.compile(
    r'tuition[\s-]*free|study\s*week|orientation\s*week|examinations?\b', re.IGNORECASE
)
NON_TEACHING_PHRASES = [
    re.compile(r'tuition[\s-]*free[\s-]*week\s*', re.IGNORECASE),
    re.compile(r'study\s*week\s*', re.IGNORECASE),
    re.compile(r'orientation\s*week\s*', re.IGNORECASE),
    re.compile(r'examination[s]?\s*', re.IGNORECASE),
]
SKIP_LINE_RE = re.compile(
    r'program\s+calendar|CRICOS|The only authoritative|Faculty of|School of|WASM:'
    r'|Bentley Perth|^Page\s*\d|^Week\s*$|^Begin\s*$|^Assessment\s*$'
    r'|^Teaching\s*Week\s*$|^Semester\s*\d',
    re.IGNORECASE,
)

# Most specific first; a title is None when the match text itself is the title
ASSESSMENT_DEFS = [
    (re.compile(r'Mid[\s-]+[Ss]em(ester)?\s*[\s-]*Test', re.IGNORECASE), "Mid-Semester Test"),
    (re.compile(r'Workshop[\s-]*Quiz', re.IGNORECASE), "Workshop Quiz"),
    (re.compile(r'eTest\b', re.IGNORECASE), "eTest"),
    (re.compile(r'Practical\s+Test|Prac\s*Test', re.IGNORECASE), "Practical Test"),
    (re.compile(r'Assignment\b', re.IGNORECASE), "Assignment"),
    (re.compile(r'Lab\s+[A-Z]\s*Report', re.IGNORECASE), None),
    (re.compile(r'Lab\s+Report', re.IGNORECASE), "Lab Report"),
    (re.compile(r'Worksheet\b', re.IGNORECASE), "Worksheet"),
    (re.compile(r'\bQuiz\b', re.IGNORECASE), "Quiz"),
    (re.compile(r'\bExam\b', re.IGNORECASE), "Exam"),
]

HEADER_MAX_LENGTH = 60


class _CalendarCollector:
    """Accumulates records for one parse call, deduplicated by (unit, title, week date).

    Rows past week 20 still give dated records, but without a week number.
    """

    def __init__(self, unit: str, semester: int, year: int):
        self.unit = unit
        self.semester = semester
        self.year = year
        self.results: List[PendingDeadline] = []

    def extract(self, raw_content: str, week: int, week_date: datetime, labelled: bool = True):
        content = re.sub(r'\s{2,}', ' ', raw_content.replace('#', '')).strip()
        if len(content) < 3:
            return

        matched_titles = []
        for pattern, fixed_title in ASSESSMENT_DEFS:
            match = pattern.search(content)
            if not match:
                continue
            title = fixed_title or re.sub(r'\s+', ' ', match.group(0)).strip()

            # A longer title already matched in this row covers this one
            if any(title in t for t in matched_titles):
                continue
            matched_titles.append(title)

            if any(r.unit == self.unit and r.title == title and r.resolved_date == week_date
                   for r in self.results):
                continue

            label = f"Week {week}" if labelled else None
            self.results.append(PendingDeadline(
                title=title,
                unit=self.unit,
                semester=self.semester,
                year=self.year,
                is_tba=False,
                week_label=label,
                week=week if week <= MAX_WEEK else None,
                resolved_date=week_date,
                cal_source=True,
            ))


def _find_header(lines: List[str]) -> Optional[int]:
    return next(
        (i for i, line in enumerate(lines)
         if HEADER_RE.search(line) and len(line) < HEADER_MAX_LENGTH),
        None,
    )


def parse_program_calendar(text: str, unit: str, year: int, semester: int) -> List[PendingDeadline]:
    """Parse the Program Calendar section of extracted PDF text.

    Args:
        text: Full normalized text of the PDF
        unit: Unit code applied to every record
        year: Academic year
        semester: 1 or 2

    Returns:
        Dated calendar records (cal_source True); empty when the section
        header is missing.
    """
    lines = [line.strip() for line in text.split("\n")]
    lines = [line for line in lines if line]

    header = _find_header(lines)
    if header is None:
        return []

    collector = _CalendarCollector(unit, semester, year)
    sem_start = week_to_date(semester, year, 1)
    calendar_week_count = 0

    def week_date(count: int) -> datetime:
        return sem_start + timedelta(weeks=count - 1)

    def collect_continuation(start: int):
        """Gather content lines after a week row up to the next boundary."""
        parts = []
        non_teaching = False
        j = start
        while j < len(lines):
            nxt = lines[j]
            if WEEK_ROW_FULL_RE.search(nxt) or WEEK_ROW_SHORT_RE.search(nxt):
                break
            if SKIP_LINE_RE.search(nxt):
                j += 1
                break
            if NO_DOT_WEEK_ROW_RE.search(nxt) and NON_TEACHING_RE.search(nxt):
                break
            if NON_TEACHING_RE.search(nxt):
                non_teaching = True
                j += 1
                break
            parts.append(nxt)
            j += 1
        return parts, non_teaching, j

    # Week row checks run before the plain non-teaching check so that break
    # weeks still advance the counter.
    i = header + 1
    while i < len(lines):
        line = lines[i]

        if SKIP_LINE_RE.search(line):
            i += 1
            continue

        if WEEK_ROW_FULL_RE.search(line):
            calendar_week_count += 1
            inline = ROW_PREFIX_RE.sub('', line, count=1)
            parts, _, i = collect_continuation(i + 1)
            if NON_TEACHING_RE.search(line):
                continue
            collector.extract(" ".join([inline] + parts), calendar_week_count,
                              week_date(calendar_week_count))
            continue

        if WEEK_ROW_SHORT_RE.search(line):
            calendar_week_count += 1
            parts, non_teaching, i = collect_continuation(i + 1)
            joined = " ".join(parts)
            if non_teaching or NON_TEACHING_RE.search(joined):
                continue
            collector.extract(joined, calendar_week_count, week_date(calendar_week_count))
            continue

        if NO_DOT_WEEK_ROW_RE.search(line) and NON_TEACHING_RE.search(line):
            calendar_week_count += 1
            trailing = NO_DOT_PREFIX_RE.sub('', line, count=1)
            for phrase in NON_TEACHING_PHRASES:
                trailing = phrase.sub('', trailing, count=1)
            trailing = trailing.strip()
            if len(trailing) > 2:
                collector.extract(trailing, calendar_week_count,
                                  week_date(calendar_week_count), labelled=False)
            i += 1
            continue

        i += 1

    log.debug("Program calendar %s: %d week rows, %d items",
              unit, calendar_week_count, len(collector.results))
    return collector.results
