"""Unit tests for fuzzy title comparison."""

import pytest
from outline_deadlines.title_match import (
    titles_overlap, titles_match, ligature_match, shared_keyword
)


@pytest.mark.parametrize("a,b", [
    ("Prac Test", "Prac Test 1"),
    ("Lab", "Laboratory Report"),
    ("eTest", "E-Test"),
    ("Quiz", "Workshop Quiz"),
    ("Worksheets", "Worksheet R1"),
    ("Mid-Sem Test", "mid-semester test"),
])
def test_titles_overlap(a, b):
    """Test titles that name the same assessment."""
    assert titles_overlap(a, b)
    assert titles_overlap(b, a)


@pytest.mark.parametrize("a,b", [
    ("E-Test", "Mid-Semester Test"),
    ("Final Examination", "Prac Test 1"),
    ("Assignment", "Prac Test"),
    ("", "Quiz"),
])
def test_titles_do_not_overlap(a, b):
    """Test unrelated titles."""
    assert not titles_overlap(a, b)


def test_titles_match():
    """Test merge-time title comparison."""
    assert titles_match("Quiz", "Quiz")
    assert titles_match("Sem Test", "Semester Test")
    assert titles_match("Lab Report", "Lab Report Week 3")
    assert titles_match("Reection Task", "Reflection Task")
    assert not titles_match("Test Quiz", "Test And Quiz")
    assert not titles_match("Assignment", "Quiz")


def test_titles_match_empty():
    """Test titles that normalize to nothing only match each other."""
    assert titles_match("---", "***")
    assert not titles_match("---", "Quiz")


def test_ligature_match():
    """Test the dropped-ligature gap rule."""
    assert ligature_match("reectiontask", "reflectiontask")
    assert ligature_match("rst", "first")
    assert not ligature_match("testquiz", "testandquiz")
    assert not ligature_match("abc", "abc")


def test_shared_keyword():
    """Test shared words of five or more letters."""
    assert shared_keyword("Practical Test", "Practical Report")
    assert not shared_keyword("Lab Test", "Lab Quiz")
