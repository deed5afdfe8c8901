"""
Parser for the pipe-delimited AS_TASK assessment list.

Format (one row per line, semicolon-terminated):
    "1| Assignment| 40 percent| ULOs assessed 1|2|4;"
    "2| Practical Test| 20 percent| ULOs assessed 2|3;"
    "3| Final Examination| 40 percent| ULOs assessed 1|2|3|4|"

This list says which assessments exist, not when they are due.
"""

import logging
import re
from typing import List

from .models import AsTaskEntry

log = logging.getLogger(__name__)

ROW_SPLIT_RE = re.compile(r';\s*\n|;\s*$')
COLUMN_SPLIT_RE = re.compile(r'\|\s*')
WEIGHT_RE = re.compile(r'(\d+)\s*percent', re.IGNORECASE)
ULO_LABEL_RE = re.compile(r'^ULOs?\s+assessed\s*', re.IGNORECASE)


def parse_as_task(text: str) -> List[AsTaskEntry]:
    """Parse AS_TASK into AsTaskEntry records, in source order.

    Rows with fewer than two columns or an empty title are skipped.
    Empty input gives an empty list.
    """
    if not text or not text.strip():
        return []

    results = []
    for row in ROW_SPLIT_RE.split(text):
        if not row.strip():
            continue

        # Columns: [num, title, weight description, ULO refs...]
        cols = COLUMN_SPLIT_RE.split(row)
        if len(cols) < 2:
            continue
        title = cols[1].strip()
        if not title:
            continue

        weight_match = WEIGHT_RE.search(cols[2]) if len(cols) > 2 else None
        weight = int(weight_match.group(1)) if weight_match else None

        outcome_ids = []
        for col in cols[3:]:
            value = ULO_LABEL_RE.sub('', col.strip())
            value = re.sub(r'[;|]+$', '', value).strip()
            if re.match(r'^\d+$', value):
                outcome_ids.append(value)

        results.append(AsTaskEntry(
            title=title,
            weight=weight,
            outcomes=",".join(outcome_ids) if outcome_ids else None,
        ))

    log.debug("AS_TASK: %d entries", len(results))
    return results
