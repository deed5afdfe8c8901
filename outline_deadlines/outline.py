"""
Conversion of a unit outline record (AS_TASK + PC_TEXT) into deadlines.

PC_TEXT supplies dates; AS_TASK is the authoritative list of which
assessments exist. Every AS_TASK entry ends up represented either by the
calendar records it matches or by one record of its own, dated from a week
hint when the calendar mentions it outside an assessment column and TBA
otherwise.
"""

import logging
from dataclasses import replace
from typing import List

from .as_task import parse_as_task
from .models import PendingDeadline, UnitOutline
from .pc_text import build_week_hints, parse_pc_text
from .semester_dates import week_to_date
from .title_match import titles_overlap

log = logging.getLogger(__name__)


def outline_to_deadlines(outline: UnitOutline, unit_code: str, semester: int,
                         year: int) -> List[PendingDeadline]:
    """Build the deadline list for one unit outline.

    A weight from an AS_TASK entry that matches several calendar records is
    divided evenly between those lacking a weight (rounded to one decimal),
    so the total never exceeds the authoritative weight. Outcomes are copied
    to every match lacking them.
    """
    unit_name = outline.title or None

    items = [replace(item, unit_name=unit_name)
             for item in parse_pc_text(outline.pc_text, unit_code, semester, year)]
    calendar_count = len(items)
    entries = parse_as_task(outline.as_task)
    week_hints = build_week_hints(outline.pc_text, year)

    log.debug("%s S%s %s %r: AS_TASK %s", unit_code, semester, year, unit_name,
              [f"{e.title} ({e.weight}%)" if e.weight is not None else e.title for e in entries])
    log.debug("%s PC_TEXT calendar items: %s", unit_code,
              [f"{i.title} {i.resolved_date:%Y-%m-%d}" for i in items])

    fallback = []
    for entry in entries:
        matched = [idx for idx in range(calendar_count)
                   if titles_overlap(items[idx].title, entry.title)]

        if matched:
            share = round(entry.weight / len(matched), 1) if entry.weight is not None else None
            for idx in matched:
                item = items[idx]
                if item.weight is None and share is not None:
                    item = replace(item, weight=share)
                if item.outcomes is None and entry.outcomes:
                    item = replace(item, outcomes=entry.outcomes)
                items[idx] = item
            continue

        hint_week = next(
            (week for hint_title, week in week_hints.hints.items()
             if titles_overlap(hint_title, entry.title)),
            None,
        )
        weight = float(entry.weight) if entry.weight is not None else None

        if hint_week is not None:
            resolved = week_hints.week_dates.get(hint_week) or week_to_date(semester, year, hint_week)
            items.append(PendingDeadline(
                title=entry.title,
                unit=unit_code,
                semester=semester,
                year=year,
                is_tba=False,
                unit_name=unit_name,
                week_label=f"Week {hint_week}",
                week=hint_week,
                resolved_date=resolved,
                weight=weight,
                outcomes=entry.outcomes,
            ))
            fallback.append(f"{entry.title} [hint: Week {hint_week}]")
        else:
            items.append(PendingDeadline(
                title=entry.title,
                unit=unit_code,
                semester=semester,
                year=year,
                is_tba=True,
                unit_name=unit_name,
                weight=weight,
                outcomes=entry.outcomes,
            ))
            fallback.append(entry.title)

    log.debug("%s items not in calendar: %s", unit_code, fallback or "none")
    log.debug("%s total items: %d", unit_code, len(items))
    return items
