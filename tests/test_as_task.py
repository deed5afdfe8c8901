"""Unit tests for the AS_TASK list parser."""

import pytest
from outline_deadlines.as_task import parse_as_task

SAMPLE_AS_TASK = (
    "1| Assignment| 40 percent| ULOs assessed 1|2|4;\n"
    "2| Practical Test| 20 percent| ULOs assessed 2|3;\n"
    "3| Final Examination| 40 percent| ULOs assessed 1|2|3|4|"
)


def test_parse_as_task():
    """Test titles, weights and outcomes of a full list."""
    entries = parse_as_task(SAMPLE_AS_TASK)
    assert [e.title for e in entries] == ["Assignment", "Practical Test", "Final Examination"]
    assert [e.weight for e in entries] == [40, 20, 40]
    assert [e.outcomes for e in entries] == ["1,2,4", "2,3", "1,2,3,4"]


def test_missing_weight_and_outcomes():
    """Test optional columns give None."""
    entry = parse_as_task("1| Assignment| no weight info|;\n")[0]
    assert entry.weight is None
    assert entry.outcomes is None

    entry = parse_as_task("1| Assignment| 40 percent|;")[0]
    assert entry.weight == 40
    assert entry.outcomes is None


def test_trailing_semicolon():
    """Test a single semicolon-terminated row."""
    entries = parse_as_task("1| Lab Report| 10 percent|;")
    assert len(entries) == 1
    assert entries[0].title == "Lab Report"


def test_empty_and_malformed_input():
    """Test inputs without rows."""
    assert parse_as_task("") == []
    assert parse_as_task("   ") == []
    assert parse_as_task("just a sentence without pipes") == []
    assert parse_as_task("1| |20 percent|") == []
