"""
CSV export.

We write all collected course-meeting records once, at the end of a run,
into a spreadsheet-friendly file with a fixed header.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable, Sequence, Tuple

from coursesearch.model import EXPORT_COLUMNS, CourseMeetingRecord


def export_records_to_csv(
    records: Iterable[CourseMeetingRecord],
    out_path: str | Path,
    columns: Sequence[Tuple[str, str]] = EXPORT_COLUMNS,
) -> int:
    """
    Export records to a .csv file. Returns number of exported records.
    """
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)

    count = 0
    # newline="" lets the csv module control line endings
    with out.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow([header for _name, header in columns])
        for record in records:
            writer.writerow(record.as_row(columns))
            count += 1

    return count
