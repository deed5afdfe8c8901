"""Unit tests for the PC_TEXT program calendar parser."""

import pytest
from datetime import datetime
from outline_deadlines.pc_text import parse_pc_text, build_week_hints


def test_begin_date_table(sample_pc_text):
    """Test one dated record per non-empty assessment cell."""
    items = parse_pc_text(sample_pc_text, "COMP1005", 1, 2026)
    assert len(items) == 2
    assert all(i.unit == "COMP1005" and i.semester == 1 for i in items)
    assert all(i.is_tba is False and i.cal_source is True for i in items)
    assert [i.title for i in items] == ["Prac Test 1", "Assignment"]
    assert [i.weight for i in items] == [20, 40]
    assert [i.week_label for i in items] == ["Week 5", "Week 10"]
    assert [i.week for i in items] == [5, 10]


def test_begin_date_is_default_date(sample_pc_text):
    """Test the Begin Date column dates the record."""
    items = parse_pc_text(sample_pc_text, "COMP1005", 1, 2026)
    assert items[0].resolved_date == datetime(2026, 3, 2)
    assert items[0].exact_time is None


def test_exact_time_annotation(sample_pc_text):
    """Test "(HH:MM day)" overrides the date and sets the time."""
    items = parse_pc_text(sample_pc_text, "COMP1005", 1, 2026)
    assert items[1].exact_time == "23:59"
    assert items[1].resolved_date == datetime(2026, 5, 3, 23, 59)


def test_empty_input():
    """Test empty HTML."""
    assert parse_pc_text("", "COMP1005", 1, 2026) == []


def test_no_date_source():
    """Test a table without Begin Date or week-embedded dates."""
    html = "<table><tr><th>Week</th><th>Assessment</th></tr><tr><td>5</td><td>Quiz</td></tr></table>"
    assert parse_pc_text(html, "COMP1005", 1, 2026) == []


def test_non_teaching_and_nbsp_rows():
    """Test break weeks and visually blank cells produce nothing."""
    html = """<table>
      <tr><th>Week</th><th>Begin Date</th><th>Assessment</th></tr>
      <tr><td>7</td><td>Tuition Free Week</td><td>Quiz</td></tr>
      <tr><td>8</td><td>13 April</td><td>&nbsp;</td></tr>
      <tr><td>9</td><td>20 April</td><td>&ndash;</td></tr>
    </table>"""
    assert parse_pc_text(html, "COMP1005", 1, 2026) == []


def test_week_embedded_dates(tw_embedded_pc_text):
    """Test TW cells with embedded dates and continuation rows."""
    items = parse_pc_text(tw_embedded_pc_text, "ELEN1000", 1, 2026)
    week1_lab = next(i for i in items if i.week_label == "Week 1" and i.title.startswith("Lab "))
    assert week1_lab.resolved_date == datetime(2026, 2, 16)
    week3_lab = next(i for i in items if i.week_label == "Week 3" and i.title.startswith("Lab "))
    assert week3_lab.resolved_date == datetime(2026, 3, 2)
    assert week3_lab.title == "Lab The Piano Project Part 1"


def test_week_embedded_quiz_alignment(tw_embedded_pc_text):
    """Test short continuation rows never add Quiz records."""
    items = parse_pc_text(tw_embedded_pc_text, "ELEN1000", 1, 2026)
    quizzes = [i for i in items if i.title.startswith("Quiz ")]
    assert len(quizzes) == 3
    assert [q.week for q in quizzes] == [1, 3, 5]


def test_build_week_hints():
    """Test hints map cell text in any column to its week."""
    html = """<table>
      <tr><th>Week</th><th>Begin Date</th><th>Lecture/Workshop</th><th>Assessment Due</th></tr>
      <tr><td>5.</td><td>16 March</td><td>Mid-Semester Test</td><td></td></tr>
    </table>"""
    hints = build_week_hints(html, 2026)
    assert hints.hints == {"mid-semester test": 5}
    assert hints.week_dates == {}


def test_build_week_hints_embedded_dates(tw_embedded_pc_text):
    """Test week dates are recorded from embedded week cells."""
    hints = build_week_hints(tw_embedded_pc_text, 2026)
    assert hints.week_dates[1] == datetime(2026, 2, 16)
    assert hints.week_dates[5] == datetime(2026, 3, 16)
    assert hints.hints["semiconductors"] == 5


def test_build_week_hints_strips_annotations(sample_pc_text):
    """Test weights and time notes are removed from hint keys."""
    hints = build_week_hints(sample_pc_text, 2026)
    assert hints.hints["prac test 1"] == 5
    assert hints.hints["assignment"] == 10


def test_impossible_exact_time_keeps_date():
    """Test a "24:00" annotation dates the record without a time."""
    html = """<table>
      <tr><th>Week</th><th>Begin Date</th><th>Assessment</th></tr>
      <tr><td>10</td><td>4 May</td><td>Assignment (24:00 3rd May)</td></tr>
    </table>"""
    items = parse_pc_text(html, "COMP1005", 1, 2026)
    assert len(items) == 1
    assert items[0].title == "Assignment"
    assert items[0].resolved_date == datetime(2026, 5, 3)


def test_week_embedded_ragged_row_skips_later_columns():
    """Test a short row does not trust cells from column 3 onwards."""
    html = """<table>
      <tr><th>TW</th><th>Topic</th><th>Lab</th><th>Workshop</th><th>Quiz</th></tr>
      <tr><td>1<br>16 Feb</td><td>Introduction</td><td>-</td><td>-</td><td>-</td></tr>
      <tr><td>2<br>23 Feb</td><td>Lecture</td><td>-</td><td>Worksheet 1</td></tr>
      <tr><td>3<br>2 Mar</td><td>Lecture</td><td>-</td><td>Worksheet 2</td><td>-</td></tr>
    </table>"""
    items = parse_pc_text(html, "ELEN1000", 1, 2026)
    assert [i.title for i in items] == ["Workshop Worksheet 2"]
    assert items[0].week == 3
    assert items[0].resolved_date == datetime(2026, 3, 2)
