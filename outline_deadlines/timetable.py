"""
Class timetable (.ics) reading.

A student's exported class timetable tells us which units they take, the
teaching period, and on which weekday each recurring session runs.
"""

import logging
import re
from collections import Counter
from datetime import date, datetime, time, timedelta
from typing import Dict, List, Optional, Tuple

from icalendar import Calendar
from pytz import timezone

from .models import IcsEvent, TimetableInfo, TimetableSession

log = logging.getLogger(__name__)

LOCAL_TZ = timezone("Australia/Perth")

UNIT_CODE_RE = re.compile(r'\b([A-Z]{4}\d{4})\b')

# Checked in order; the first keyword found in the summary wins
SESSION_TYPE_KEYWORDS = [
    "lab",
    "laboratory",
    "tutorial",
    "workshop",
    "lecture",
    "practical",
    "seminar",
]

MAX_TEACHING_WEEK = 20


def _to_local_datetime(value) -> Optional[datetime]:
    """Convert an icalendar date/datetime value to a naive local datetime."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(LOCAL_TZ).replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    return None


def read_ics_events(text: str) -> List[IcsEvent]:
    """Read the VEVENTs of an iCalendar document.

    Args:
        text: Raw .ics content

    Returns:
        One IcsEvent per VEVENT with both a summary and a start; empty
        when the text is not valid iCalendar.
    """
    try:
        calendar = Calendar.from_ical(text)
    except ValueError as exc:
        log.warning("Could not parse timetable: %s", exc)
        return []

    events = []
    for component in calendar.walk('VEVENT'):
        summary = str(component.get('summary', '')).strip()
        dtstart_prop = component.get('dtstart')
        if not summary or dtstart_prop is None:
            continue
        dtstart = _to_local_datetime(dtstart_prop.dt)
        if dtstart is None:
            continue

        dtend_prop = component.get('dtend')
        dtend = _to_local_datetime(dtend_prop.dt) if dtend_prop is not None else None

        unit_match = UNIT_CODE_RE.search(summary)
        events.append(IcsEvent(
            summary=summary,
            dtstart=dtstart,
            dtend=dtend,
            unit_code=unit_match.group(1) if unit_match else None,
        ))

    log.debug("Read %d timetable events", len(events))
    return events


def detect_timetable_units(events: List[IcsEvent]) -> TimetableInfo:
    """Detect the unit codes and teaching period of a timetable.

    Semester comes from the month of the earliest event: February to June
    is semester 1, anything else semester 2. With no events the current
    date stands in for the earliest one.
    """
    units = sorted({e.unit_code for e in events if e.unit_code})
    earliest = min((e.dtstart for e in events), default=datetime.now())
    semester = 1 if 2 <= earliest.month <= 6 else 2
    return TimetableInfo(units=units, semester=semester, year=earliest.year)


def _session_type(summary: str) -> Optional[str]:
    lowered = summary.lower()
    return next((k for k in SESSION_TYPE_KEYWORDS if k in lowered), None)


def extract_timetable_sessions(events: List[IcsEvent]) -> List[TimetableSession]:
    """Group recurring class sessions by unit and session type.

    Week 1 is the week holding the earliest event (weeks start on Monday).
    Occurrences outside weeks 1-20 are ignored. Each session reports the
    weekday it most often falls on and the sorted weeks it runs in.
    """
    if not events:
        return []

    earliest = min(e.dtstart for e in events)
    week_one = datetime.combine(earliest.date() - timedelta(days=earliest.weekday()), time())

    grouped: Dict[Tuple[str, str], List[IcsEvent]] = {}
    for event in events:
        if not event.unit_code:
            continue
        session_type = _session_type(event.summary)
        if session_type is None:
            continue
        week = (event.dtstart - week_one).days // 7 + 1
        if not 1 <= week <= MAX_TEACHING_WEEK:
            continue
        grouped.setdefault((event.unit_code, session_type), []).append(event)

    sessions = []
    for (unit, session_type), occurrences in grouped.items():
        weekday = Counter(e.dtstart.weekday() for e in occurrences).most_common(1)[0][0]
        weeks = sorted({(e.dtstart - week_one).days // 7 + 1 for e in occurrences})
        sessions.append(TimetableSession(
            unit=unit,
            session_type=session_type,
            weekday=weekday,
            weeks=weeks,
            start=min(e.dtstart for e in occurrences),
        ))
    return sessions
