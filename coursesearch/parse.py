"""
Parsing (HTML -> structured records).

- Reads the subject selector of the search landing page
- Reads the results table of a search response page
- Extracts EACH meeting-pattern sub-table of a section as exactly ONE record

Important rules (DO NOT CHANGE):
- 1 meeting sub-table = 1 record
- A section without any meeting sub-table produces no record
- Parsing never raises on unexpected markup; missing parts become ""
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from coursesearch.document import Node, load_document
from coursesearch.model import CourseMeetingRecord, SubjectOption


# ---------------------------------------------------------------------------
# Page structure
# ---------------------------------------------------------------------------

SUBJECT_SELECT = "#form-search-subject"
RESULTS_TABLE = "#results-table"
MEETING_TABLE = "table.table-course-days"
DAY_CELL = "td.day"
TIME_FRAGMENT = "span.break"

# Column positions inside one results row (direct <td> children)
COL_CRN = 0
COL_SUBJECT = 1
COL_TITLE = 2
COL_HOURS = 3
COL_INSTRUCTOR = 4
COL_MEETINGS = 9
COL_LOCATION = 12
COL_SEATS = 15

# "(enrolled / capacity)"
_SEATS_RE = re.compile(r"\((\d+)\s*/\s*(\d+)\)")
_WS_RE = re.compile(r"\s+")


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------


def normalize_whitespace(text: Optional[str]) -> str:
    """
    Collapse runs of whitespace (incl. newlines) to single spaces and trim.
    """
    return _WS_RE.sub(" ", text or "").strip()


def parse_seats_available(text: Optional[str]) -> str:
    """
    Compute remaining seats from a cell like "Open (12 / 30)".

    Returns "" if no "(x / y)" pair is present. Over-enrolled sections
    report "0".
    """
    match = _SEATS_RE.search(text or "")
    if not match:
        return ""
    enrolled = int(match.group(1))
    capacity = int(match.group(2))
    return str(max(capacity - enrolled, 0))


def parse_time_range(text: Optional[str]) -> Tuple[str, str]:
    """
    Split "9:30 am - 10:45 am" into ("9:30 am", "10:45 am").

    Without a hyphen both parts are empty.
    """
    raw = (text or "").strip()
    if "-" not in raw:
        return "", ""
    start, end = [t.strip() for t in raw.split("-", 1)]
    return start, end


def parse_days(day_cells: Sequence[Node]) -> str:
    """
    Concatenate the day letters of all cells flagged "active".

    Cells are expected in weekly order, as rendered by the portal.
    """
    return "".join(cell.text().strip() for cell in day_cells if cell.has_class("active"))


def _cell_text(cells: Sequence[Node], index: int) -> str:
    if index >= len(cells):
        return ""
    return cells[index].text().strip()


def _location(cells: Sequence[Node]) -> str:
    if COL_LOCATION >= len(cells):
        return ""
    cell = cells[COL_LOCATION]
    strong = cell.select_one("strong")
    if strong is not None:
        text = strong.text().strip()
        if text:
            return text
    return cell.text().strip()


def _meeting_time_text(meeting_table: Node) -> str:
    """
    Find the time fragment rendered right after a meeting sub-table.

    Only siblings up to the next meeting sub-table belong to this pattern.
    """
    for sibling in meeting_table.following_siblings():
        if sibling.matches(MEETING_TABLE):
            break
        if sibling.matches(TIME_FRAGMENT):
            return sibling.text()
        nested = sibling.select_one(TIME_FRAGMENT)
        if nested is not None:
            return nested.text()
    return ""


def _section_rows(root: Node) -> List[Node]:
    table = root.select_one(RESULTS_TABLE)
    if table is None:
        return []
    rows = table.select(":scope > tbody > tr")
    if not rows:
        rows = table.select(":scope > tr")
    return rows


# ---------------------------------------------------------------------------
# Subject discovery
# ---------------------------------------------------------------------------


def discover_subjects_from_document(root: Node) -> List[SubjectOption]:
    """
    Read every option of the subject selector, in document order.

    Options without a value (the "choose one" placeholder) are skipped.
    """
    subjects: List[SubjectOption] = []
    for option in root.select(f"{SUBJECT_SELECT} option"):
        code = (option.attr("value") or "").strip()
        if not code:
            continue
        subjects.append(SubjectOption(code=code, description=option.text().strip()))
    return subjects


def discover_subjects(html: str) -> List[SubjectOption]:
    return discover_subjects_from_document(load_document(html))


# ---------------------------------------------------------------------------
# Results page parsing (CORE LOGIC)
# ---------------------------------------------------------------------------


def extract_courses_from_document(
    root: Node,
    subject_code: Optional[str] = None,
) -> List[CourseMeetingRecord]:
    """
    Turn a parsed results page into course-meeting records.

    If subject_code is given it is used for every record, otherwise the
    subject is read from its own column (multi-subject searches).
    """
    records: List[CourseMeetingRecord] = []

    for row in _section_rows(root):
        cells = row.select(":scope > td")

        # header / footer / "no results" rows
        if not cells:
            continue

        crn = _cell_text(cells, COL_CRN)
        subject = subject_code if subject_code is not None else _cell_text(cells, COL_SUBJECT)
        title = _cell_text(cells, COL_TITLE)
        hours = _cell_text(cells, COL_HOURS)
        instructor = normalize_whitespace(cells[COL_INSTRUCTOR].text()) if COL_INSTRUCTOR < len(cells) else ""
        seats_available = parse_seats_available(cells[COL_SEATS].text()) if COL_SEATS < len(cells) else ""
        location = _location(cells)

        if COL_MEETINGS >= len(cells):
            continue

        for meeting_table in cells[COL_MEETINGS].select(MEETING_TABLE):
            days = parse_days(meeting_table.select(DAY_CELL))
            start_time, end_time = parse_time_range(_meeting_time_text(meeting_table))

            records.append(
                CourseMeetingRecord(
                    crn=crn,
                    subject=subject,
                    title=title,
                    hours=hours,
                    instructor=instructor,
                    days=days,
                    start_time=start_time,
                    end_time=end_time,
                    location=location,
                    seats_available=seats_available,
                )
            )

    return records


def extract_courses(html: str, subject_code: Optional[str] = None) -> List[CourseMeetingRecord]:
    """
    Parse raw results-page HTML. Malformed pages yield an empty list.
    """
    return extract_courses_from_document(load_document(html), subject_code)


# ---------------------------------------------------------------------------
# Cached pages
# ---------------------------------------------------------------------------


def parse_html_file(path: Path, subject_code: Optional[str] = None) -> List[CourseMeetingRecord]:
    """
    Parse one saved results page.
    """
    html = Path(path).read_text(encoding="utf-8")
    return extract_courses(html, subject_code)


def raw_page_name(term: str, subject_code: str) -> str:
    """
    File name used when caching a results page: <term>_<subject>.html
    """
    return f"{term}_{subject_code}.html"


def parse_raw_dir(raw_dir: Path) -> List[CourseMeetingRecord]:
    """
    Parse all cached results pages of a directory (sorted by file name).

    The subject is taken from the file name; files without one fall back
    to the subject column of the page.
    """
    records: List[CourseMeetingRecord] = []
    for html_file in sorted(Path(raw_dir).glob("*.html")):
        _term, sep, subject = html_file.stem.partition("_")
        records.extend(parse_html_file(html_file, subject if sep and subject else None))
    return records
