"""
Data models for the unit outline deadline extractor.

This module defines the data structures passed between the parsers.
All models use Python dataclasses. Parsers always build fresh instances;
when a record needs to change (for example a TBA item that a calendar row
resolves), a copy is made with dataclasses.replace instead of editing the
caller's object.

These models represent:
- Candidate deadlines produced by every parser
- Per-row metadata decoded from the PDF assessment schedule
- Entries of the pipe-delimited authoritative task list
- Week hints built from the HTML program calendar
- Unit outline records and timetable (.ics) events
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional


@dataclass
class PendingDeadline:
    """A candidate deadline extracted from one of the outline sources.

    When is_tba is False, resolved_date is always set. resolved_date is a
    naive local datetime; midnight means "no specific time".
    """
    title: str                  # Task name, e.g. "Assignment 1" (never empty)
    unit: str                   # Unit code, e.g. "COMP1005"
    semester: int               # 1 or 2
    year: int                   # Calendar year used to resolve dates
    is_tba: bool = False        # True when no date could be resolved
    unit_name: Optional[str] = None     # Full unit name, e.g. "Fundamentals of Programming"
    week_label: Optional[str] = None    # e.g. "Week 5", "Weeks 5–7", "Exam week"
    week: Optional[int] = None          # Last teaching week (1-20)
    exact_day: Optional[str] = None     # Raw "Day:" value, e.g. "3rd May"
    exact_time: Optional[str] = None    # Raw "Time:" value, e.g. "23:59"
    resolved_date: Optional[datetime] = None
    cal_source: Optional[bool] = None   # Sourced from a program calendar table
    weight: Optional[float] = None      # Percentage of the final mark (0-100)
    outcomes: Optional[str] = None      # Learning outcomes assessed, e.g. "1,2,4"
    late_accepted: Optional[bool] = None
    extension_considered: Optional[bool] = None


@dataclass
class RowMeta:
    """Outcomes / late / extension values for one assessment schedule row."""
    outcomes: Optional[str] = None
    late_accepted: Optional[bool] = None
    extension_considered: Optional[bool] = None


@dataclass
class AsTaskEntry:
    """One row of the pipe-delimited authoritative assessment list."""
    title: str
    weight: Optional[int] = None
    outcomes: Optional[str] = None


@dataclass
class WeekHints:
    """Calendar cell text mapped to teaching weeks, plus week start dates."""
    hints: Dict[str, int] = field(default_factory=dict)         # lowercased cell text -> week
    week_dates: Dict[int, datetime] = field(default_factory=dict)  # week -> date from the table


@dataclass
class UnitOutline:
    """Key fields of a unit outline record as served by the outline API."""
    unit_number: str            # e.g. "COMP1005"
    title: str                  # e.g. "Fundamentals of Programming"
    study_period: str = ""      # e.g. "Semester 1"
    year: str = ""              # e.g. "2026"
    as_task: str = ""           # Pipe-delimited assessment list
    pc_text: str = ""           # HTML program calendar table


@dataclass
class IcsEvent:
    """A single VEVENT read from an .ics timetable."""
    summary: str
    dtstart: datetime
    dtend: Optional[datetime] = None
    unit_code: Optional[str] = None


@dataclass
class TimetableInfo:
    """Units and teaching period detected from a class timetable."""
    units: List[str]
    semester: int
    year: int


@dataclass
class TimetableSession:
    """A recurring class session (lab, tutorial, ...) for one unit."""
    unit: str
    session_type: str           # e.g. "lab", "tutorial", "workshop"
    weekday: int                # 0=Monday, 6=Sunday
    weeks: List[int]            # Teaching weeks the session runs in
    start: Optional[datetime] = None    # First occurrence


# Serialization helpers for JSON conversion

def serialize_datetime(dt: datetime) -> str:
    """Convert datetime to ISO format string."""
    return dt.isoformat()


def deadline_to_dict(item: PendingDeadline) -> dict:
    """Convert a PendingDeadline to a JSON-serializable dict."""
    return {
        "title": item.title,
        "unit": item.unit,
        "unit_name": item.unit_name,
        "semester": item.semester,
        "year": item.year,
        "week_label": item.week_label,
        "week": item.week,
        "exact_day": item.exact_day,
        "exact_time": item.exact_time,
        "resolved_date": serialize_datetime(item.resolved_date) if item.resolved_date else None,
        "is_tba": item.is_tba,
        "cal_source": item.cal_source,
        "weight": item.weight,
        "outcomes": item.outcomes,
        "late_accepted": item.late_accepted,
        "extension_considered": item.extension_considered,
    }
