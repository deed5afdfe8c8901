"""
Fuzzy assessment title comparison.

Two predicates are used at different stages:

- titles_overlap links an authoritative AS_TASK entry to calendar cells
  ("Prac Test" -> "Prac Test 1", "Quiz" -> "Workshop Quiz").
- titles_match merges PDF schedule rows with PDF calendar rows, and
  tolerates ligature glyphs lost during text extraction
  ("Reection Task" -> "Reflection Task").
"""

import re
from typing import List

SEM_ABBREVIATION_RE = re.compile(r'\bSem\b', re.IGNORECASE)


def _significant_words(title: str) -> List[str]:
    return [w for w in re.sub(r'[^a-z]', ' ', title.lower()).split() if len(w) >= 3]


def titles_overlap(a: str, b: str) -> bool:
    """True if two titles likely name the same assessment.

    Strategies, in order:
    1. First significant words are prefixes of each other ("Lab" / "Laboratory").
    2. Letter-only forms are identical ("eTest" / "E-Test").
    3. The shorter title is a single word of 4+ letters found in a longer title
       of at most two significant words ("Quiz" / "Workshop Quiz", but not
       "Test" / "Mid-Semester Test").
    """
    wa = _significant_words(a)
    wb = _significant_words(b)
    if not wa or not wb:
        return False

    first_a, first_b = wa[0], wb[0]
    if first_a.startswith(first_b) or first_b.startswith(first_a):
        return True

    def letters(s: str) -> str:
        return re.sub(r'[^a-z]', '', s.lower())

    if letters(a) == letters(b):
        return True

    short_words, long_words = (wa, wb) if len(wa) <= len(wb) else (wb, wa)
    if len(short_words) == 1 and len(short_words[0]) >= 4 and len(long_words) <= 2:
        key = short_words[0]
        return any(w.startswith(key) or key.startswith(w) for w in long_words)

    return False


def _normalize(title: str) -> str:
    expanded = SEM_ABBREVIATION_RE.sub('Semester', title)
    return re.sub(r'[^a-z0-9]', '', expanded.lower())


def ligature_match(shorter: str, longer: str) -> bool:
    """True if longer equals shorter plus one 1-3 character gap starting with f or s.

    The gap stands for an undecoded ligature glyph (ff, fi, fl, ffi, ffl, st).
    """
    gap = len(longer) - len(shorter)
    if gap < 1 or gap > 3:
        return False
    for pos in range(len(shorter) + 1):
        if longer[pos] not in 'fs':
            continue
        if longer[:pos] == shorter[:pos] and longer[pos + gap:] == shorter[pos:]:
            return True
    return False


def titles_match(a: str, b: str) -> bool:
    """Merge test between a PDF schedule title and a PDF calendar title."""
    na, nb = _normalize(a), _normalize(b)
    if not na or not nb:
        return na == nb
    if na == nb or na.startswith(nb) or nb.startswith(na) or na in nb or nb in na:
        return True
    shorter, longer = (na, nb) if len(na) <= len(nb) else (nb, na)
    return ligature_match(shorter, longer)


def shared_keyword(a: str, b: str) -> bool:
    """True if both titles share a word of 5 or more letters."""
    def words(s: str) -> List[str]:
        return [w for w in re.sub(r'[^a-z ]', '', s.lower()).split() if len(w) >= 5]

    wb = words(b)
    return any(w in wb for w in words(a))
