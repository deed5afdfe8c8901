"""
PDF extraction module for unit outlines.

Extracts the text layer with pdfplumber, repairs the glyph artifacts left
by the outline renderer, and runs the schedule and calendar parsers over it.
"""

import logging
import re
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import List, Optional, Tuple, Union

import pdfplumber
from pdfplumber.utils.exceptions import MalformedPDFException, PdfminerException

from .assessment_extractor import parse_assessments
from .models import PendingDeadline
from .program_calendar import parse_program_calendar
from .reconcile import add_sequence_numbers, merge_with_calendar

log = logging.getLogger(__name__)

PathLike = Union[str, Path]

# A baseline shift larger than this (in points) starts a new line
LINE_BREAK_TOLERANCE = 3
# Fewer non-whitespace characters than this means a scanned, image-only PDF
MIN_TEXT_CHARS = 50

UNIT_CODE_RE = re.compile(r'([A-Z]{2,4}\d{4})')
SEMESTER_RE = re.compile(r'[Ss]emester\s*([12])')
YEAR_RE = re.compile(r'\b(20\d{2})\b')
# Header line: "COMP1005 (V. 2) Fundamentals of Programming"
VERSION_DELIM_RE = re.compile(r'\(V\.\s*[#\d][^)]*\)\s*(.+)$', re.IGNORECASE)

LIGATURE_CHARS = {
    '\ufb00': 'ff',
    '\ufb01': 'fi',
    '\ufb02': 'fl',
    '\ufb03': 'ffi',
    '\ufb04': 'ffl',
}


class PDFTextError(Exception):
    """Raised when a PDF cannot be opened or its text layer read."""

    def __init__(self, message: str, pdf_path: Optional[PathLike] = None):
        super().__init__(message)
        self.pdf_path = pdf_path


def normalize_extracted_text(text: str) -> str:
    """Repair the residual artifacts of PDF text extraction.

    1. Undecodable glyphs (NUL or "(cid:N)") become '#' placeholders.
    2. Space-separated single digits collapse: "2 9 May 2 0 2 6" -> "29 May 2026".
    3. Lone ligature tokens rejoin their word: "Re fl ection" -> "Reflection".
    4. Unicode ligature code points become plain letters.
    5. '#' between letters is dropped: "Re # ection" -> "Reection".
    """
    text = text.replace('\x00', '#')
    text = re.sub(r'\(cid:\d+\)', '#', text)
    text = re.sub(r'\b(\d)( \d)+\b', lambda m: m.group(0).replace(' ', ''), text)
    text = re.sub(r'([a-zA-Z]) (ff|fi|fl|ffi|ffl) ([a-zA-Z])', r'\1\2\3', text)
    for char, letters in LIGATURE_CHARS.items():
        text = text.replace(char, letters)
    return re.sub(r'([a-zA-Z]) # ([a-zA-Z])', r'\1\2', text)


def parse_unit_name(text: str, unit_code: str) -> Optional[str]:
    """Find the full unit name in the PDF header.

    The header line reads "COMP 1 0 0 5 (V. 2) Fundamentals of Programming";
    the name is whatever follows the version marker. Only the first 20
    non-empty lines are searched.
    """
    if not unit_code:
        return None
    lines = [line.strip() for line in text.split("\n") if line.strip()]
    for line in lines[:20]:
        match = VERSION_DELIM_RE.search(line)
        if not match:
            continue
        candidate = re.sub(r'\s{2,}', ' ', match.group(1).replace('#', '')).strip()
        if len(candidate) >= 5 and ' ' in candidate and candidate[0].isupper():
            return candidate
    return None


def unit_context_from_filename(filename: str,
                               default_year: Optional[int] = None) -> Tuple[str, int, int]:
    """Infer (unit code, semester, year) from an outline's file name.

    Semester defaults to 1, year to default_year or the current year.
    """
    unit_match = UNIT_CODE_RE.search(filename)
    semester_match = SEMESTER_RE.search(filename)
    year_match = YEAR_RE.search(filename)
    unit = unit_match.group(1) if unit_match else ""
    semester = int(semester_match.group(1)) if semester_match else 1
    if year_match:
        year = int(year_match.group(1))
    else:
        year = default_year or date.today().year
    return unit, semester, year


def has_text_layer(text: str) -> bool:
    return len(re.sub(r'\s+', '', text)) >= MIN_TEXT_CHARS


def extract_deadlines_from_text(text: str, unit: str, semester: int,
                                year: int) -> List[PendingDeadline]:
    """Run the full PDF pipeline over already-extracted text.

    Schedule rows and calendar rows are merged, recurring titles are
    numbered, and the unit name from the header is attached to every item.
    """
    schedule_items = parse_assessments(text, unit, year, semester)
    calendar_items = parse_program_calendar(text, unit, year, semester)
    items = add_sequence_numbers(merge_with_calendar(schedule_items, calendar_items))
    log.debug("%s: %d schedule rows, %d calendar rows, %d merged",
              unit, len(schedule_items), len(calendar_items), len(items))

    unit_name = parse_unit_name(text, unit)
    if unit_name:
        items = [replace(item, unit_name=unit_name) for item in items]
    return items


class PDFExtractor:
    """Extracts deadline data from a unit outline PDF."""

    def __init__(self, pdf_path: PathLike):
        """Initialize extractor with PDF path.

        Args:
            pdf_path: Path to PDF file

        Raises:
            PDFTextError: if the file cannot be read as a PDF
        """
        self.pdf_path = Path(pdf_path)
        self.pages_text: List[Tuple[int, str]] = []
        self._text: Optional[str] = None
        self._load_pdf()

    def _load_pdf(self):
        """Load PDF and rebuild the text of each page line by line."""
        try:
            with pdfplumber.open(self.pdf_path) as pdf:
                for page_num, page in enumerate(pdf.pages, start=1):
                    self.pages_text.append((page_num, self._page_text(page)))
        except (PdfminerException, MalformedPDFException, OSError) as exc:
            raise PDFTextError(f"Could not read {self.pdf_path.name}: {exc}", self.pdf_path) from exc
        log.debug("Loaded %d pages from %s", len(self.pages_text), self.pdf_path.name)

    @staticmethod
    def _page_text(page) -> str:
        """Join the page's words, starting a new line when the baseline moves."""
        words = page.extract_words(use_text_flow=True, keep_blank_chars=False)
        pieces = []
        last_top = None
        for word in words:
            if last_top is not None and abs(word['top'] - last_top) > LINE_BREAK_TOLERANCE:
                pieces.append("\n")
            pieces.append(word['text'] + " ")
            last_top = word['top']
        return "".join(pieces)

    @property
    def text(self) -> str:
        """Normalized text of the whole document, pages separated by blank lines."""
        if self._text is None:
            raw = "".join(page_text + "\n\n" for _, page_text in self.pages_text)
            self._text = normalize_extracted_text(raw)
        return self._text

    def extract_deadlines(self, unit: str, semester: int, year: int) -> List[PendingDeadline]:
        """Extract merged, numbered deadlines for this outline.

        Returns an empty list for an image-only PDF.
        """
        text = self.text
        if not has_text_layer(text):
            log.warning("%s has no text layer (may be a scanned image)", self.pdf_path.name)
            return []
        return extract_deadlines_from_text(text, unit, semester, year)
