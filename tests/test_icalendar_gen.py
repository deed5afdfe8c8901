"""Unit tests for iCalendar generation."""

import pytest
from datetime import date, datetime
from icalendar import Calendar
from outline_deadlines.icalendar_gen import ICalendarGenerator
from outline_deadlines.models import PendingDeadline


def deadline(title: str, resolved_date=None, **kwargs) -> PendingDeadline:
    return PendingDeadline(title=title, unit="COMP1005", semester=1, year=2026,
                           resolved_date=resolved_date, **kwargs)


@pytest.fixture
def generator():
    return ICalendarGenerator()


def test_generate_calendar_headers(generator):
    """Test calendar level properties."""
    cal = generator.generate_calendar([])
    assert str(cal['prodid']) == '-//Unit Outline Deadlines//EN'
    assert str(cal['version']) == '2.0'
    assert cal.walk('VEVENT') == []


def test_tba_and_undated_items_skipped(generator):
    """Test only dated deadlines become events."""
    cal = generator.generate_calendar([
        deadline("Final Exam", is_tba=True),
        deadline("Quiz"),
        deadline("Assignment", datetime(2026, 5, 3, 23, 59)),
    ])
    events = cal.walk('VEVENT')
    assert len(events) == 1
    assert str(events[0]['summary']) == "COMP1005 — Assignment"


def test_timed_event(generator):
    """Test a deadline with a due time is a one hour event with three reminders."""
    cal = generator.generate_calendar([
        deadline("Assignment", datetime(2026, 5, 3, 23, 59), week_label="Week 11", weight=40.0)
    ])
    event = cal.walk('VEVENT')[0]
    start = event['dtstart'].dt
    end = event['dtend'].dt
    assert start.replace(tzinfo=None) == datetime(2026, 5, 3, 23, 59)
    assert start.tzinfo is not None
    assert (end - start).total_seconds() == 3600
    assert str(event['transp']) == 'OPAQUE'
    assert len(event.walk('VALARM')) == 3

    description = str(event['description'])
    assert "Week 11" in description
    assert "Weight: 40%" in description


def test_all_day_event(generator):
    """Test a midnight deadline is an all-day event with two reminders."""
    cal = generator.generate_calendar([deadline("Quiz", datetime(2026, 3, 2))])
    event = cal.walk('VEVENT')[0]
    assert event['dtstart'].dt == date(2026, 3, 2)
    assert event['dtend'].dt == date(2026, 3, 3)
    assert str(event['transp']) == 'TRANSPARENT'
    assert len(event.walk('VALARM')) == 2


def test_alarm_triggers(generator):
    """Test reminders fire before the event."""
    cal = generator.generate_calendar([deadline("Quiz", datetime(2026, 3, 2, 9, 0))])
    triggers = sorted(alarm['trigger'].dt.total_seconds() for alarm in cal.walk('VALARM'))
    assert triggers == [-3 * 86400, -86400, -3600]


def test_unique_uids(generator):
    """Test every event gets its own uid."""
    cal = generator.generate_calendar([
        deadline("Quiz 1", datetime(2026, 3, 2)),
        deadline("Quiz 2", datetime(2026, 3, 9)),
    ])
    uids = [str(e['uid']) for e in cal.walk('VEVENT')]
    assert len(set(uids)) == 2
    assert all(uid.endswith("@outline-deadlines") for uid in uids)


def test_export_to_file(generator, tmp_path):
    """Test the exported file parses back as a calendar."""
    cal = generator.generate_calendar([deadline("Quiz", datetime(2026, 3, 2))])
    ics_path = tmp_path / "COMP1005.ics"
    generator.export_to_file(cal, str(ics_path))

    parsed = Calendar.from_ical(ics_path.read_bytes())
    events = parsed.walk('VEVENT')
    assert len(events) == 1
    assert str(events[0]['summary']) == "COMP1005 — Quiz"
