"""Shared fixtures for the test suite."""

import pytest

SAMPLE_PC_TEXT = """
<table>
  <tr>
    <th>Teaching Week</th>
    <th>Begin Date</th>
    <th>Assessment</th>
  </tr>
  <tr>
    <td>1</td>
    <td>2 February</td>
    <td>-</td>
  </tr>
  <tr>
    <td>5</td>
    <td>2 March</td>
    <td>Prac Test 1 (20%)</td>
  </tr>
  <tr>
    <td>10</td>
    <td>4 May</td>
    <td>Assignment (23:59 3rd May) (40%)</td>
  </tr>
</table>"""

# Week cells carry their own date; the second row continues week 1
TW_EMBEDDED_PC_TEXT = """
<table>
  <tr><th>TW</th><th>Topic</th><th>Lab</th><th>Tut. and Quiz</th></tr>
  <tr><td>1<br>16 Feb</td><td>DC Circuits</td><td>0 Learning the ropes</td><td>0 About thinking</td></tr>
  <tr><td>Kirchoff laws</td><td>1.2, 2.1</td><td></td></tr>
  <tr><td>3<br>2 Mar</td><td>AC Circuits</td><td>The Piano Project Part 1</td><td>2 DC analysis</td></tr>
  <tr><td>5<br>16 Mar</td><td>Semiconductors</td><td>The Piano Project Part 2</td><td>4 AC analysis</td></tr>
</table>"""


@pytest.fixture
def sample_pc_text():
    """Begin Date layout: weeks 5 and 10 hold assessments."""
    return SAMPLE_PC_TEXT


@pytest.fixture
def tw_embedded_pc_text():
    """Week-embedded layout with a continuation sub-row."""
    return TW_EMBEDDED_PC_TEXT
