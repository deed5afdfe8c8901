"""
Assessment Schedule Extraction Module

Parses the "Assessment Schedule" section of a unit outline PDF's text.
Each row carries labeled fields:

    Week: Teaching weeks 1, 2, 3...   (or "Week: Week 5", "Week: Exam week")
    Day:  24 hours after workshop      (or "Day: 3rd May", "Day: TBA")
    Time: 23:59                        (or "Time: 5.00 PM", "Time: TBA")

The pipeline runs in two passes:
1. Meta side-channel: the renderer groups every row's outcomes / late /
   extension values into one block between the first Day: and the first
   Time: of the section. That block is decoded into RowMeta triplets.
2. Row scan: each Week: line anchors one row. The title and weight sit
   above the anchor, Day: and Time: below it. The Nth anchor takes the
   Nth RowMeta.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from .classify import (
    ends_with_percent, extract_title_from_percent_line, is_combined_yes_no,
    is_meta_value, is_noise_line, is_outcomes_line, is_percent_line,
    is_tba_value, is_yes_no_line, percent_value,
)
from .models import PendingDeadline, RowMeta
from .semester_dates import parse_clock_time, parse_ordinal_date, week_to_date
from .weeks import extract_all_weeks, normalize_week_label

log = logging.getLogger(__name__)

SECTION_START_RE = re.compile(r'^Assessment\s+Schedule\b', re.IGNORECASE)
SECTION_END_RES = [
    re.compile(r'^Detailed\s+Information', re.IGNORECASE),
    re.compile(r'\bprogram\s+calendar\b', re.IGNORECASE),
]

WEEK_LINE_RE = re.compile(r'^Week:\s*(.*)$', re.IGNORECASE)
DAY_LINE_RE = re.compile(r'^Day:\s*(.+)$', re.IGNORECASE)
TIME_LINE_RE = re.compile(r'^Time:\s*(.+)$', re.IGNORECASE)
DAY_OR_TIME_RE = re.compile(r'^(Day:|Time:)', re.IGNORECASE)
TITLE_BOUNDARY_RE = re.compile(r'^(Assessment Schedule|Learning Activities)', re.IGNORECASE)
YES_NO_PAIR_RE = re.compile(r'^(yes|no)\s+(yes|no)', re.IGNORECASE)

TITLE_LOOKBACK = 12
FALLBACK_LOOKBACK = 5
FALLBACK_MAX_LINES = 3
DAY_CONTINUATION_LINES = 5


@dataclass
class ScheduleRow:
    """Raw fields of one assessment schedule row before date resolution."""
    title: str
    week_str: str
    weight: Optional[int] = None
    exact_day: str = ""
    exact_time: str = ""
    meta: RowMeta = field(default_factory=RowMeta)


def _is_yes(value: str) -> bool:
    return value.strip().lower() == 'yes'


def parse_triplets(candidates: List[str]) -> List[RowMeta]:
    """Decode a flat run of meta lines into per-row RowMeta triplets.

    An outcomes line may be followed by a combined "Yes No" line or by one or
    two standalone yes/no lines; rows without outcomes start at the flags.
    """
    result = []
    i = 0
    while i < len(candidates):
        line = candidates[i]

        if is_outcomes_line(line):
            outcomes = re.sub(r'\s', '', line)
            i += 1
            nxt = candidates[i] if i < len(candidates) else None
            if nxt is not None and is_combined_yes_no(nxt):
                pair = YES_NO_PAIR_RE.match(nxt)
                result.append(RowMeta(outcomes, _is_yes(pair.group(1)), _is_yes(pair.group(2))))
                i += 1
            elif nxt is not None and is_yes_no_line(nxt):
                late = _is_yes(nxt)
                i += 1
                ext = candidates[i] if i < len(candidates) else None
                if ext is not None and is_yes_no_line(ext):
                    result.append(RowMeta(outcomes, late, _is_yes(ext)))
                    i += 1
                else:
                    result.append(RowMeta(outcomes, late))
            else:
                result.append(RowMeta(outcomes))
            continue

        if is_combined_yes_no(line):
            pair = YES_NO_PAIR_RE.match(line)
            result.append(RowMeta(None, _is_yes(pair.group(1)), _is_yes(pair.group(2))))
            i += 1
            continue

        if is_yes_no_line(line):
            late = _is_yes(line)
            i += 1
            ext = candidates[i] if i < len(candidates) else None
            if ext is not None and is_yes_no_line(ext):
                result.append(RowMeta(None, late, _is_yes(ext)))
                i += 1
            else:
                result.append(RowMeta(None, late))
            continue

        i += 1

    return result


def extract_meta_triplets(section_lines: List[str]) -> List[RowMeta]:
    """Pass 1: decode the meta block between the first Day: and next Time:."""
    first_day = None
    first_time = None
    for i, line in enumerate(section_lines):
        if first_day is None and re.match(r'^Day:\s*', line, re.IGNORECASE):
            first_day = i
        elif first_day is not None and re.match(r'^Time:\s*', line, re.IGNORECASE):
            first_time = i
            break

    if first_day is None or first_time is None:
        return []
    block = [line for line in section_lines[first_day + 1:first_time] if is_meta_value(line)]
    return parse_triplets(block)


def _collect_title(section_lines: List[str], anchor: int):
    """Scan upward from a Week: anchor for the title lines and weight."""
    parts = []
    found_percent = False
    weight = None

    for back in range(1, TITLE_LOOKBACK + 1):
        if anchor - back < 0:
            break
        prev = section_lines[anchor - back]
        if WEEK_LINE_RE.match(prev) or TITLE_BOUNDARY_RE.match(prev):
            break
        if DAY_OR_TIME_RE.match(prev):
            break

        if is_percent_line(prev):
            found_percent = True
            weight = percent_value(prev) or weight
            continue
        if not found_percent and ends_with_percent(prev):
            found_percent = True
            weight = percent_value(prev) or weight
            title_part = extract_title_from_percent_line(prev)
            if title_part and not is_noise_line(title_part):
                parts.insert(0, title_part)
            continue
        if found_percent:
            if not is_noise_line(prev) and len(prev) > 1:
                parts.insert(0, prev)
            elif is_noise_line(prev) and parts:
                break

    if not parts:
        for back in range(1, FALLBACK_LOOKBACK + 1):
            if anchor - back < 0:
                break
            prev = section_lines[anchor - back]
            if WEEK_LINE_RE.match(prev) or re.match(r'^Assessment Schedule', prev, re.IGNORECASE):
                break
            if not is_noise_line(prev) and not is_percent_line(prev) and len(prev) > 2:
                parts.insert(0, prev)
                if len(parts) >= FALLBACK_MAX_LINES:
                    break

    return clean_title(" ".join(parts)), weight


def clean_title(raw: str) -> str:
    """Tidy an assembled multi-line title; empty results become "Unknown task"."""
    title = re.sub(r'\s+', ' ', raw).strip()
    title = re.sub(r'\[[^\]]*\]', '', title)
    title = re.sub(r'^[,*#\s]+|[,*#\s]+$', '', title)
    # Leading item number: "1 Assignment"
    title = re.sub(r'^\d{1,2}\s+', '', title)
    # Repeat count: "(x 5)", "(x #)"
    title = re.sub(r'\s*\([x×][\s\d#]*\)\s*', '', title, flags=re.IGNORECASE)
    title = re.sub(r'\s+-\s+.+$', '', title)
    title = re.sub(r'\s{2,}', ' ', title.replace('#', '')).strip()
    return title or "Unknown task"


def _collect_day_and_time(section_lines: List[str], anchor: int):
    """Scan downward from a Week: anchor to the next one for Day: and Time:."""
    exact_day = ""
    exact_time = ""

    for pos in range(anchor + 1, len(section_lines)):
        ahead = section_lines[pos]
        if WEEK_LINE_RE.match(ahead):
            break

        if not exact_day:
            day_match = DAY_LINE_RE.match(ahead)
            if day_match:
                exact_day = day_match.group(1).strip()
                # The Day: value may wrap onto following lines
                for cont in section_lines[pos + 1:pos + 1 + DAY_CONTINUATION_LINES]:
                    if TIME_LINE_RE.match(cont) or WEEK_LINE_RE.match(cont) or is_noise_line(cont):
                        break
                    if is_meta_value(cont):
                        break
                    exact_day += " " + cont.strip()
                continue

        if not exact_time:
            time_match = TIME_LINE_RE.match(ahead)
            if time_match:
                exact_time = time_match.group(1).strip()
                break

    return exact_day, exact_time


def _section_lines(text: str) -> List[str]:
    lines = [line.strip() for line in text.split("\n")]
    lines = [line for line in lines if line]

    start = next((i for i, line in enumerate(lines) if SECTION_START_RE.match(line)), None)
    if start is None:
        return []
    end = len(lines)
    for j in range(start + 1, len(lines)):
        if any(p.search(lines[j]) for p in SECTION_END_RES):
            end = j
            break
    return lines[start:end]


def scan_schedule_rows(text: str) -> List[ScheduleRow]:
    """Pass 2: one ScheduleRow per Week: anchor, with its positional RowMeta."""
    section_lines = _section_lines(text)
    if not section_lines:
        return []

    meta_block = extract_meta_triplets(section_lines)
    rows = []
    # Line 0 is the section header
    for i in range(1, len(section_lines)):
        week_match = WEEK_LINE_RE.match(section_lines[i])
        if not week_match:
            continue
        title, weight = _collect_title(section_lines, i)
        exact_day, exact_time = _collect_day_and_time(section_lines, i)
        meta = meta_block[len(rows)] if len(rows) < len(meta_block) else RowMeta()
        rows.append(ScheduleRow(
            title=title,
            week_str=(week_match.group(1) or "").strip(),
            weight=weight,
            exact_day=exact_day,
            exact_time=exact_time,
            meta=meta,
        ))

    log.debug("Assessment schedule: %d rows, %d meta triplets", len(rows), len(meta_block))
    return rows


def _apply_time(resolved: datetime, exact_time: str) -> datetime:
    clock = parse_clock_time(exact_time) if exact_time else None
    if clock is None:
        return resolved
    return resolved.replace(hour=clock[0], minute=clock[1])


def row_is_tba(row: ScheduleRow, weeks: List[int], exact_date: Optional[datetime]) -> bool:
    """Decide whether a schedule row has no resolvable date.

    An exact Day: date outranks a descriptive Week: value such as
    "Study week". A Day: value that is itself a period phrase ("TBA",
    "24 hours after workshop") makes the row TBA.
    """
    if not weeks and exact_date is None:
        return True
    if is_tba_value(row.week_str) and not weeks and exact_date is None:
        return True
    if row.week_str == "" and exact_date is None:
        return True
    if row.exact_day == "" and not weeks:
        return True
    return is_tba_value(row.exact_day)


def parse_assessments(text: str, unit: str, year: int, semester: int) -> List[PendingDeadline]:
    """Parse the Assessment Schedule section of extracted PDF text.

    Args:
        text: Full normalized text of the PDF
        unit: Unit code applied to every record
        year: Year used for date resolution
        semester: 1 or 2

    Returns:
        PendingDeadline records in row order; a row listing several weeks
        gives one record per week. Empty when the section is missing.
    """
    results = []

    for row in scan_schedule_rows(text):
        exact_date = parse_ordinal_date(row.exact_day, year) if row.exact_day else None
        weeks = extract_all_weeks(row.week_str)
        is_tba = row_is_tba(row, weeks, exact_date)
        weight = float(row.weight) if row.weight is not None else None

        common = dict(
            title=row.title,
            unit=unit,
            semester=semester,
            year=year,
            exact_day=row.exact_day or None,
            exact_time=row.exact_time or None,
            weight=weight,
            outcomes=row.meta.outcomes,
            late_accepted=row.meta.late_accepted,
            extension_considered=row.meta.extension_considered,
        )

        if not is_tba and len(weeks) > 1:
            for wk in weeks:
                results.append(PendingDeadline(
                    is_tba=False,
                    week_label=f"Week {wk}",
                    week=wk,
                    resolved_date=week_to_date(semester, year, wk),
                    **common,
                ))
            continue

        resolved = None
        if not is_tba:
            if exact_date is not None:
                resolved = _apply_time(exact_date, row.exact_time)
            elif weeks:
                resolved = week_to_date(semester, year, weeks[-1])

        results.append(PendingDeadline(
            is_tba=is_tba,
            week_label=normalize_week_label(row.week_str),
            week=weeks[-1] if weeks else None,
            resolved_date=resolved,
            **common,
        ))

    return results
