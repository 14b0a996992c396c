"""Duplicate detection for job records.

This module provides functions for:
- String normalization (case, surrounding and repeated whitespace)
- Levenshtein edit distance
- Fuzzy similarity between normalized names
- Finding probable re-entries of an existing application
"""

import re
from collections.abc import Iterable

from job_tracker.records.models import JobRecord

WHITESPACE_PATTERN = re.compile(r"\s+")

# Fuzzy matching only applies to strings longer than this
MIN_FUZZY_LENGTH = 5
MAX_EDIT_DISTANCE = 3


def normalize(value: str | None) -> str:
    """Lowercase, trim and collapse internal whitespace runs to one space."""
    if not value:
        return ""
    return WHITESPACE_PATTERN.sub(" ", value.strip().lower())


def levenshtein(a: str, b: str) -> int:
    """Return the edit distance between two strings.

    Insertions, deletions and substitutions each cost 1. Uses a single
    row of the dynamic-programming table.
    """
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    row = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        diagonal = row[0]
        row[0] = i
        for j, char_b in enumerate(b, start=1):
            above = row[j]
            cost = 0 if char_a == char_b else 1
            row[j] = min(
                row[j] + 1,  # deletion
                row[j - 1] + 1,  # insertion
                diagonal + cost,  # substitution
            )
            diagonal = above
    return row[len(b)]


def is_similar(a: str, b: str) -> bool:
    """Check whether two normalized strings are probably the same thing.

    Similar means equal, one contains the other, or both are longer than
    five characters and at most three edits apart.
    """
    if a == b:
        return True
    if a in b or b in a:
        return True
    if len(a) > MIN_FUZZY_LENGTH and len(b) > MIN_FUZZY_LENGTH:
        return levenshtein(a, b) <= MAX_EDIT_DISTANCE
    return False


def find_duplicates(
    records: Iterable[JobRecord],
    job_name: str,
    company_name: str | None = None,
    exclude_id: str | None = None,
) -> list[JobRecord]:
    """Find records that look like the application being entered.

    With a company on both sides, a candidate matches when both its job
    name and company are similar. Without one, only an exact normalized
    job name matches.

    Args:
        records: Records to scan.
        job_name: Job name being entered.
        company_name: Company being entered (optional).
        exclude_id: Id of the record being edited, never reported.

    Returns:
        Matching records in scan order; empty when ``job_name`` is blank.
    """
    name = normalize(job_name)
    if not name:
        return []
    company = normalize(company_name)

    duplicates: list[JobRecord] = []
    for record in records:
        if exclude_id is not None and record.id == exclude_id:
            continue

        candidate_name = normalize(record.job_name)
        candidate_company = normalize(record.company_name)

        if company and candidate_company:
            if is_similar(name, candidate_name) and is_similar(
                company, candidate_company
            ):
                duplicates.append(record)
        elif name == candidate_name:
            duplicates.append(record)

    return duplicates
