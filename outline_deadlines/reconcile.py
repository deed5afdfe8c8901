"""
Reconciliation of schedule and calendar records.

merge_with_calendar folds calendar-sourced records into the assessment
schedule list; add_sequence_numbers numbers recurring titles. Neither
function modifies the records or lists it is given.
"""

import logging
import re
from dataclasses import replace
from datetime import timedelta
from typing import List

from .models import PendingDeadline
from .title_match import shared_keyword, titles_match

log = logging.getLogger(__name__)

# A schedule's exact due date can fall at the end of one week while the
# calendar lists the same task at the start of the next.
DUPLICATE_DATE_TOLERANCE = timedelta(days=3)

DESCRIPTION_SUFFIX_RE = re.compile(r'\s*[-–—]\s+\S.*$')
PAREN_SUFFIX_RE = re.compile(r'\s*\([^)]*\)\s*$')


def _is_resolved_duplicate(item: PendingDeadline, cal_item: PendingDeadline) -> bool:
    if item.is_tba or not titles_match(item.title, cal_item.title):
        return False
    if not item.week or item.week == cal_item.week:
        return True
    if item.resolved_date and cal_item.resolved_date:
        return abs(item.resolved_date - cal_item.resolved_date) <= DUPLICATE_DATE_TOLERANCE
    return False


def merge_with_calendar(schedule_items: List[PendingDeadline],
                        calendar_items: List[PendingDeadline]) -> List[PendingDeadline]:
    """Merge program calendar records into the assessment schedule records.

    For each calendar record:
    1. A TBA schedule record with a matching title is replaced by a dated
       copy carrying the calendar's title, week and date.
    2. Otherwise it is dropped if a resolved schedule record with a matching
       title already covers it (same week, no week, or within 3 days).
    3. Otherwise it is appended, inheriting weight and row metadata from the
       first weighted record whose title matches or shares a keyword.

    Args:
        schedule_items: Records from the assessment schedule
        calendar_items: Records from the program calendar

    Returns:
        A new list; the inputs are left unchanged.
    """
    merged = list(schedule_items)

    for cal_item in calendar_items:
        tba_idx = next(
            (i for i, s in enumerate(merged) if s.is_tba and titles_match(s.title, cal_item.title)),
            None,
        )
        if tba_idx is not None:
            merged[tba_idx] = replace(
                merged[tba_idx],
                title=cal_item.title,
                week=cal_item.week,
                week_label=cal_item.week_label,
                resolved_date=cal_item.resolved_date,
                is_tba=False,
                cal_source=True,
            )
            log.debug("Calendar resolved TBA item %r", cal_item.title)
            continue

        if any(_is_resolved_duplicate(s, cal_item) for s in merged):
            log.debug("Dropped duplicate calendar item %r (week %s)", cal_item.title, cal_item.week)
            continue

        proto = next(
            (s for s in merged
             if s.weight is not None
             and (titles_match(s.title, cal_item.title) or shared_keyword(s.title, cal_item.title))),
            None,
        )
        if proto is not None:
            merged.append(replace(
                cal_item,
                weight=proto.weight,
                outcomes=proto.outcomes,
                late_accepted=proto.late_accepted,
                extension_considered=proto.extension_considered,
            ))
        else:
            merged.append(cal_item)

    return merged


def _base_title(title: str) -> str:
    base = DESCRIPTION_SUFFIX_RE.sub('', title)
    base = PAREN_SUFFIX_RE.sub('', base)
    return re.sub(r'\s+', ' ', base).strip()


def add_sequence_numbers(items: List[PendingDeadline]) -> List[PendingDeadline]:
    """Number recurring assessments: 3x "Practical Test" -> "Practical Test 1".. "3".

    Titles are grouped per unit after dropping a " - description" or
    trailing "(...)" suffix. Titles that occur once are left as they are.
    """
    def key(item: PendingDeadline) -> str:
        return f"{item.unit}|{_base_title(item.title).lower()}"

    counts = {}
    for item in items:
        counts[key(item)] = counts.get(key(item), 0) + 1

    seen = {}
    numbered = []
    for item in items:
        k = key(item)
        if counts[k] <= 1:
            numbered.append(item)
            continue
        seen[k] = seen.get(k, 0) + 1
        numbered.append(replace(item, title=f"{_base_title(item.title)} {seen[k]}"))
    return numbered
