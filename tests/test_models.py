"""Unit tests for data models."""

import json

import pytest
from datetime import datetime
from outline_deadlines.models import (
    PendingDeadline, RowMeta, AsTaskEntry, WeekHints, UnitOutline,
    TimetableSession, serialize_datetime, deadline_to_dict
)


def test_pending_deadline_defaults():
    """Test PendingDeadline optional fields default to unknown."""
    item = PendingDeadline(title="Final Exam", unit="COMP1005", semester=1, year=2026)
    assert item.is_tba is False
    assert item.resolved_date is None
    assert item.weight is None
    assert item.outcomes is None
    assert item.late_accepted is None
    assert item.extension_considered is None
    assert item.cal_source is None


def test_pending_deadline():
    """Test PendingDeadline model."""
    item = PendingDeadline(
        title="Assignment 1",
        unit="COMP1005",
        semester=1,
        year=2026,
        week_label="Week 11",
        week=11,
        exact_day="3rd May",
        exact_time="23:59",
        resolved_date=datetime(2026, 5, 3, 23, 59),
        weight=40.0,
        outcomes="1,2,4",
        late_accepted=True,
        extension_considered=True,
    )
    assert item.title == "Assignment 1"
    assert item.week == 11
    assert item.resolved_date == datetime(2026, 5, 3, 23, 59)
    assert item.weight == 40.0


def test_row_meta_and_as_task_entry():
    """Test RowMeta and AsTaskEntry models."""
    meta = RowMeta(outcomes="1,2", late_accepted=False)
    assert meta.extension_considered is None

    entry = AsTaskEntry(title="Practical Test", weight=20, outcomes="2,3")
    assert entry.weight == 20


def test_week_hints_are_independent():
    """Test WeekHints instances do not share their dicts."""
    a = WeekHints()
    b = WeekHints()
    a.hints["mid-semester test"] = 5
    assert b.hints == {}


def test_unit_outline():
    """Test UnitOutline model."""
    outline = UnitOutline(unit_number="COMP1005", title="Fundamentals of Programming")
    assert outline.as_task == ""
    assert outline.pc_text == ""


def test_timetable_session():
    """Test TimetableSession model."""
    session = TimetableSession(unit="COMP1005", session_type="lab", weekday=2, weeks=[1, 2, 3])
    assert session.start is None
    assert session.weeks == [1, 2, 3]


def test_serialize_datetime():
    """Test datetimes serialize to ISO strings."""
    assert serialize_datetime(datetime(2026, 10, 15, 23, 59)) == "2026-10-15T23:59:00"


def test_deadline_dict_is_json_serializable():
    """Test deadline_to_dict output survives a JSON dump."""
    item = PendingDeadline(
        title="Practical Test 1",
        unit="COMP1005",
        semester=1,
        year=2026,
        week_label="Week 5",
        week=5,
        resolved_date=datetime(2026, 3, 16),
        cal_source=True,
        weight=20.0,
    )
    data = json.loads(json.dumps(deadline_to_dict(item)))
    assert data["resolved_date"] == "2026-03-16T00:00:00"
    assert data["title"] == "Practical Test 1"
    assert data["week"] == 5
    assert data["weight"] == 20.0
    assert data["cal_source"] is True


def test_deadline_dict_tba():
    """Test a TBA deadline serializes without a date."""
    item = PendingDeadline(title="Final Exam", unit="COMP1005", semester=1, year=2026, is_tba=True)
    data = deadline_to_dict(item)
    assert data["resolved_date"] is None
    assert data["is_tba"] is True
