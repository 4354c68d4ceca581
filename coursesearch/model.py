"""
Central data model definitions used across the project.

This module defines the canonical structure of SubjectOption and
CourseMeetingRecord objects so that:
- parsing, scraping and export share the same field names
- the CSV column order is declared once and passed around explicitly
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Sequence, Tuple


@dataclass(frozen=True)
class SubjectOption:
    """
    One entry of the portal's subject selector (e.g. ART / Art).
    """

    code: str
    description: str


@dataclass(frozen=True)
class CourseMeetingRecord:
    """
    Represents one meeting pattern of one course section.

    A section meeting on two different day/time patterns yields two records
    that share every field except days, start_time, end_time and location.
    All values are kept as displayed text (CRN may have leading zeros,
    hours may be a range).
    """

    crn: str
    subject: str
    title: str
    hours: str
    instructor: str
    days: str
    start_time: str
    end_time: str
    location: str
    seats_available: str

    def as_row(self, columns: Sequence[Tuple[str, str]]) -> List[str]:
        """
        Return the record values in the order given by (field, header) pairs.
        """
        return [getattr(self, name) for name, _header in columns]


# (field, header) pairs; the header order is what downstream sheets rely on
EXPORT_COLUMNS: Tuple[Tuple[str, str], ...] = (
    ("crn", "CRN"),
    ("subject", "Subject"),
    ("title", "Title"),
    ("hours", "Hours"),
    ("instructor", "Instructor"),
    ("days", "Days"),
    ("start_time", "Start Time"),
    ("end_time", "End Time"),
    ("location", "Location"),
    ("seats_available", "Seats Available"),
)
