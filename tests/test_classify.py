"""Unit tests for line classifiers and week helpers."""

import pytest
from outline_deadlines.classify import (
    is_percent_line, ends_with_percent, extract_title_from_percent_line,
    percent_value, is_noise_line, is_tba_value, is_outcomes_line,
    is_yes_no_line, is_combined_yes_no, is_meta_value
)
from outline_deadlines.weeks import extract_all_weeks, normalize_week_label


def test_percent_lines():
    """Test percent-only and trailing-percent lines."""
    assert is_percent_line("40 %")
    assert is_percent_line("# #%")
    assert not is_percent_line("Assignment 40 %")
    assert ends_with_percent("Assignment 40 %")
    assert extract_title_from_percent_line("Assignment 40 %") == "Assignment"


def test_percent_value():
    """Test weights are read only when in 1-100."""
    assert percent_value("40 %") == 40
    assert percent_value("100%") == 100
    assert percent_value("0 %") is None
    assert percent_value("# #%") is None


@pytest.mark.parametrize("line", [
    "Week: Week 5",
    "Day: TBA",
    "Task",
    "Value",
    "Date Due",
    "Assessment Schedule",
    "Faculty of Science and Engineering",
    "CRICOS Provider Code 00301J",
    "Page 4 of 10",
    "Yes Yes",
    "*",
    "# # # # #",
])
def test_noise_lines(line):
    """Test headers, labels, footers and placeholder runs count as noise."""
    assert is_noise_line(line)


def test_titles_are_not_noise():
    """Test ordinary titles are not noise."""
    assert not is_noise_line("Practical Test")
    assert not is_noise_line("3 Final Exam")


@pytest.mark.parametrize("value", [
    "TBA", "TBC", "Exam week", "Examination period", "Flexible submission",
    "As per schedule", "Fortnightly", "Weekly submission", "24 hours after workshop",
    "During the workshop",
])
def test_tba_values(value):
    """Test period phrases are treated as no date."""
    assert is_tba_value(value)


def test_non_tba_values():
    """Test concrete values are not TBA."""
    assert not is_tba_value("3rd May")
    assert not is_tba_value("Week 5")
    assert not is_tba_value("Teaching weeks 3,5,7")


def test_meta_lines():
    """Test outcomes and yes/no column values."""
    assert is_outcomes_line("1,2,4")
    assert is_outcomes_line("3")
    assert not is_outcomes_line("1,2,3,4,5,6,7,8,9,10,11")
    assert is_yes_no_line("Yes")
    assert is_yes_no_line("no")
    assert is_combined_yes_no("No Yes")
    assert not is_combined_yes_no("Yes")
    assert is_meta_value("Yes No")
    assert not is_meta_value("Assignment")


def test_extract_all_weeks():
    """Test week number extraction."""
    assert extract_all_weeks("Teaching weeks 3,5,7") == [3, 5, 7]
    assert extract_all_weeks("Weeks 2-4") == [2, 3, 4]
    assert extract_all_weeks("Weeks 2–4") == [2, 3, 4]
    assert extract_all_weeks("Week 5") == [5]
    assert extract_all_weeks("Week 25") == []
    assert extract_all_weeks("TBA") == []
    assert extract_all_weeks("") == []


def test_normalize_week_label():
    """Test week labels."""
    assert normalize_week_label("5") == "Week 5"
    assert normalize_week_label("5-7") == "Weeks 5–7"
    assert normalize_week_label("Week 5") == "Week 5"
    assert normalize_week_label("Examination Period") == "Exam week"
    assert normalize_week_label("Study week") == "Study week"
    assert normalize_week_label("# #") is None
    assert normalize_week_label(None) is None
