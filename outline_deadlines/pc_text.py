"""
Parser for the PC_TEXT program calendar HTML table.

Column roles come from the header row. Two layouts are handled:

- a dedicated "Begin Date" column giving each teaching week's start date;
- week-embedded dates, where the week cell itself reads "1\\n16 Feb" and
  sub-rows that continue a week's content have no week number of their own.

Each non-empty assessment cell becomes one dated PendingDeadline. A second
routine, build_week_hints, scans every column so that assessments mentioned
outside the assessment columns can still be placed in a teaching week.
"""

import logging
import re
from datetime import datetime
from typing import Dict, List, Optional

from bs4 import BeautifulSoup

from .models import PendingDeadline, WeekHints
from .semester_dates import MONTH_NAMES, parse_clock_time, parse_ordinal_date

log = logging.getLogger(__name__)

# "(23:59 3rd May)" -> ("23:59", "3rd May")
EXACT_TIME_RE = re.compile(r'\((\d{1,2}:\d{2})\s+(\d+\w*\s+\w+)\)')
# "(40%)" -> "40"
WEIGHT_PCT_RE = re.compile(r'\((\d+)%\)')
BRACKET_NOTE_RE = re.compile(r'\[[^\]]*\]')
WEIGHT_TAIL_RE = re.compile(r'\(\d+%\)[^(]*')
TIME_NOTE_RE = re.compile(r'\(\d{1,2}:\d{2}[^)]*\)')
TRAILING_PUNCT_RE = re.compile(r'[,;:]+$')

NON_TEACHING_RE = re.compile(
    r'tuition\s+free|study\s+week|examination|mid[- ]semester\s+break', re.IGNORECASE
)
EMBEDDED_DATE_RE = re.compile(r'\d+\s+(\d{1,2})\s+([A-Za-z]+)')
BEGIN_DATE_RE = re.compile(r'^(\d{1,2})\s+(\w+)')
FIRST_NUMBER_RE = re.compile(r'\d+')
BARE_DATE_RE = re.compile(r'^\d{1,2}\s+\w+$')

EMPTY_CELLS = ('-', '–', '—')


def _table_rows(html: str) -> List[List[str]]:
    """Return the text of every cell, row by row."""
    soup = BeautifulSoup(html, "lxml")
    for br in soup.find_all("br"):
        br.replace_with("\n")
    rows = []
    for tr in soup.find_all("tr"):
        rows.append([_cell_text(cell.get_text()) for cell in tr.find_all(["td", "th"])])
    return rows


def _cell_text(raw: str) -> str:
    # &nbsp; must trim away so visually blank cells read as empty
    return raw.replace('\u00a0', ' ').strip()


def _month_date(day: str, month_word: str, year: int) -> Optional[datetime]:
    month = MONTH_NAMES.get(month_word.lower())
    if month is None:
        return None
    try:
        return datetime(year, month, int(day))
    except ValueError:
        return None


def _find_columns(header: List[str]) -> Dict[str, object]:
    begin_date_col = -1
    week_col = -1
    assessment_cols = []
    for i, cell in enumerate(header):
        text = cell.lower()
        if 'begin' in text and 'date' in text:
            begin_date_col = i
        if week_col == -1 and ('week' in text or text.strip() == 'tw'):
            week_col = i
        if 'assessment' in text:
            assessment_cols.append(i)
        elif 'workshop' in text and 'lecture' not in text and 'tut' not in text:
            # "Workshop" alone, not "Lecture/Workshop" (a content column)
            assessment_cols.append(i)
        elif 'lab' in text and 'lecture' not in text:
            assessment_cols.append(i)
        elif 'quiz' in text:
            assessment_cols.append(i)
    return {
        'begin_date': begin_date_col,
        'week': week_col,
        'assessment': assessment_cols,
    }


def _column_prefix(header_text: str) -> str:
    text = header_text.lower()
    if 'lab' in text:
        return "Lab"
    if 'quiz' in text or 'tut' in text:
        return "Quiz"
    return header_text.strip().split()[0]


def _clean_title(raw: str) -> str:
    title = BRACKET_NOTE_RE.sub('', raw)
    title = EXACT_TIME_RE.sub('', title, count=1)
    title = WEIGHT_TAIL_RE.sub('', title).strip()
    return TRAILING_PUNCT_RE.sub('', title).strip()


def parse_pc_text(html: str, unit_code: str, semester: int, year: int) -> List[PendingDeadline]:
    """Parse a PC_TEXT table into dated calendar records.

    Args:
        html: HTML fragment holding the program calendar table
        unit_code: Unit code applied to every record
        semester: 1 or 2
        year: Year used for every date in the table

    Returns:
        One record per non-empty assessment cell, all with is_tba False and
        cal_source True. Empty when the table has no usable date source or
        no assessment column.
    """
    if not html:
        return []
    rows = _table_rows(html)
    if not rows:
        return []

    header = rows[0]
    columns = _find_columns(header)
    begin_date_col = columns['begin_date']
    week_col = columns['week']
    assessment_cols = columns['assessment']

    week_embedded = False
    if begin_date_col == -1 and week_col >= 0 and len(rows) > 1:
        first = rows[1]
        week_text = first[week_col] if week_col < len(first) else ''
        week_embedded = bool(re.search(r'\d+\s+\d{1,2}\s+[A-Za-z]+', week_text))

    if (begin_date_col == -1 and not week_embedded) or not assessment_cols:
        log.debug("PC_TEXT %s: no date source or assessment column", unit_code)
        return []

    prefixes = {}
    if week_embedded:
        prefixes = {i: _column_prefix(header[i]) for i in assessment_cols}

    results = []
    current_date = None
    current_week = None

    for cells in rows[1:]:
        if not cells:
            continue

        if week_embedded:
            week_raw = cells[week_col] if week_col < len(cells) else ''
            if not week_raw or not week_raw[0].isdigit():
                continue  # continuation row

            date_match = EMBEDDED_DATE_RE.search(week_raw)
            if date_match:
                current_date = _month_date(date_match.group(1), date_match.group(2), year) or current_date
            current_week = int(FIRST_NUMBER_RE.search(week_raw).group(0))

            if NON_TEACHING_RE.search(week_raw) or current_date is None:
                continue
            base_date = current_date
            week_num = current_week
        else:
            begin_text = cells[begin_date_col] if begin_date_col < len(cells) else ''
            if not begin_text or NON_TEACHING_RE.search(begin_text):
                continue
            date_parts = BEGIN_DATE_RE.match(begin_text)
            if not date_parts:
                continue
            base_date = _month_date(date_parts.group(1), date_parts.group(2), year)
            if base_date is None:
                continue

            week_raw = cells[week_col] if 0 <= week_col < len(cells) else ''
            number = FIRST_NUMBER_RE.search(week_raw)
            week_num = int(number.group(0)) if number else None

        week_label = f"Week {week_num}" if week_num is not None else None

        for col in assessment_cols:
            # Ragged rows shift cells left; later columns are only trusted on full rows
            if week_embedded and col >= 3 and len(cells) < len(header):
                continue
            if col >= len(cells):
                continue

            raw = cells[col]
            if not raw or raw in EMPTY_CELLS:
                continue

            time_match = EXACT_TIME_RE.search(raw)
            exact_time = time_match.group(1) if time_match else None
            exact_date_str = time_match.group(2) if time_match else None

            pct_match = WEIGHT_PCT_RE.search(raw)
            weight = float(pct_match.group(1)) if pct_match else None

            title = _clean_title(raw)
            if not title:
                continue
            prefix = prefixes.get(col)
            if prefix:
                title = f"{prefix} {title}"

            resolved = base_date
            if exact_date_str:
                resolved = parse_ordinal_date(exact_date_str, year) or resolved
            # An impossible clock such as "24:00" leaves the date without a time
            clock = parse_clock_time(exact_time) if exact_time else None
            if clock is not None:
                resolved = resolved.replace(hour=clock[0], minute=clock[1])

            results.append(PendingDeadline(
                title=title,
                unit=unit_code,
                semester=semester,
                year=year,
                is_tba=False,
                week_label=week_label,
                week=week_num if week_num is not None and 1 <= week_num <= 20 else None,
                exact_time=exact_time,
                resolved_date=resolved,
                cal_source=True,
                weight=weight,
            ))

    log.debug("PC_TEXT %s: %d calendar items", unit_code, len(results))
    return results


def build_week_hints(html: str, year: int) -> WeekHints:
    """Map every calendar cell's text to the teaching week it sits in.

    Scans all columns, not only assessment columns. Also records the week's
    date when the week cell embeds one ("1 16 Feb").
    """
    hints = WeekHints()
    if not html:
        return hints
    rows = _table_rows(html)
    if len(rows) < 2:
        return hints

    columns = _find_columns(rows[0])
    week_col = columns['week']
    begin_date_col = columns['begin_date']
    if week_col == -1:
        return hints

    for cells in rows[1:]:
        if week_col >= len(cells):
            continue
        week_text = cells[week_col]
        if not week_text or NON_TEACHING_RE.search(week_text):
            continue
        number = FIRST_NUMBER_RE.search(week_text)
        if not number:
            continue
        week_num = int(number.group(0))
        if week_num < 1 or week_num > 20:
            continue

        if week_num not in hints.week_dates:
            date_match = EMBEDDED_DATE_RE.search(week_text)
            if date_match:
                week_date = _month_date(date_match.group(1), date_match.group(2), year)
                if week_date is not None:
                    hints.week_dates[week_num] = week_date

        for c, raw in enumerate(cells):
            if c in (week_col, begin_date_col):
                continue
            if not raw or raw in EMPTY_CELLS:
                continue
            normalized = BRACKET_NOTE_RE.sub('', raw)
            normalized = WEIGHT_TAIL_RE.sub('', normalized)
            normalized = TIME_NOTE_RE.sub('', normalized)
            normalized = TRAILING_PUNCT_RE.sub('', normalized).strip()
            if len(normalized) < 4 or BARE_DATE_RE.match(normalized):
                continue
            hints.hints[normalized.lower()] = week_num

    return hints
