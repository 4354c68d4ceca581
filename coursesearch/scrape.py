from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

import requests
from rich.console import Console
from rich.markup import escape

from coursesearch import config
from coursesearch.model import CourseMeetingRecord, SubjectOption
from coursesearch.parse import discover_subjects, extract_courses, raw_page_name


console = Console()

FormValue = Union[str, List[str]]

# Field names of the search form; sent as "form-search-<name>"
FORM_FIELDS: Tuple[str, ...] = (
    "semester",
    "subject",
    "course",
    "campus",
    "crn",
    "instructor",
    "level",
    "department",
    "status",
    "schedule-type",
    "instruction-method",
    "begin-time",
    "end-time",
    "mat-cost",
    "keyword",
)


class TransportError(Exception):
    """
    A page could not be retrieved (network failure, timeout or HTTP error).
    """


# ---------------------------------------------------------------------------
# HTTP client
# ---------------------------------------------------------------------------


def build_search_form(**fields: Optional[FormValue]) -> Dict[str, FormValue]:
    """
    Build the complete search form. Unset fields are sent as "".

    Keyword names use underscores (schedule_type=...). List values are
    encoded as repeated keys by requests (multi-subject searches).
    """
    form: Dict[str, FormValue] = {f"form-search-{name}": "" for name in FORM_FIELDS}
    form["form-search-status"] = "all"

    for key, value in fields.items():
        name = key.replace("_", "-")
        if name not in FORM_FIELDS:
            raise ValueError(f"Unknown search form field: {key!r}")
        form[f"form-search-{name}"] = "" if value is None else value

    return form


class CourseSearchClient:
    """
    Thin wrapper around a requests.Session for the course search portal.
    """

    def __init__(
        self,
        base_url: str = config.BASE_URL,
        timeout: float = config.TIMEOUT,
        verify: bool = True,
        user_agent: str = config.USER_AGENT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.search_url = self.base_url + "search/"
        self.timeout = timeout
        self.verify = verify
        self.session = session if session is not None else requests.Session()
        self.session.headers.update(
            {
                "User-Agent": user_agent,
                "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            }
        )

    def _request(self, method: str, url: str, **kwargs) -> str:
        try:
            resp = self.session.request(method, url, timeout=self.timeout, verify=self.verify, **kwargs)
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise TransportError(f"{method} {url} failed: {exc}") from exc
        return resp.text

    def fetch_subject_page(self, term: str) -> str:
        """
        Load the search landing page of a term (contains the subject selector).
        """
        return self._request("GET", self.base_url, params={"term_code": term})

    def submit_search(self, form: Dict[str, FormValue]) -> str:
        """
        POST a search form (see build_search_form) and return the results page.
        """
        return self._request("POST", self.search_url, data=form)

    def discover_subjects(self, term: str) -> List[SubjectOption]:
        return discover_subjects(self.fetch_subject_page(term))

    def fetch_courses(self, term: str, subject: FormValue, campus: str) -> str:
        return self.submit_search(build_search_form(semester=term, subject=subject, campus=campus))


# ---------------------------------------------------------------------------
# Core logic
# ---------------------------------------------------------------------------


def _cache_page(raw_dir: Path, name: str, html: str, log: Console) -> Optional[str]:
    """
    Save a results page; returns the error message instead of raising.
    """
    try:
        raw_dir.mkdir(parents=True, exist_ok=True)
        (raw_dir / name).write_text(html, encoding="utf-8")
    except OSError as exc:
        log.print(f"[yellow]Could not cache {escape(name)}:[/yellow] {escape(str(exc))}")
        return str(exc)
    return None


@dataclass
class ScrapeResult:
    records: List[CourseMeetingRecord] = field(default_factory=list)
    # (subject code, error message); "*" marks subject discovery
    errors: List[Tuple[str, str]] = field(default_factory=list)
    subjects: int = 0


def scrape_term(
    client: CourseSearchClient,
    term: str,
    campus: str = config.DEFAULT_CAMPUS,
    subjects: Optional[Sequence[SubjectOption]] = None,
    batch_size: int = config.BATCH_SIZE,
    delay_seconds: float = config.BATCH_DELAY_SECONDS,
    raw_dir: Optional[Path] = None,
    sleep: Callable[[float], None] = time.sleep,
    out: Optional[Console] = None,
) -> ScrapeResult:
    """
    Fetch and parse the results page of every subject of a term.

    Subjects are processed one at a time; after every full batch (except the
    last) the loop pauses for delay_seconds. A failing subject is logged and
    skipped, it never aborts the run.
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be >= 1, got {batch_size}")

    log = out if out is not None else console
    result = ScrapeResult()

    if subjects is None:
        log.print(f"Discovering subjects for term {escape(term)}")
        try:
            subjects = client.discover_subjects(term)
        except TransportError as exc:
            log.print(f"[red]Error fetching subjects for term {escape(term)}:[/red] {escape(str(exc))}")
            result.errors.append(("*", str(exc)))
            return result

    result.subjects = len(subjects)
    log.print(f"Found {len(subjects)} subjects")

    for start in range(0, len(subjects), batch_size):
        for subject in subjects[start : start + batch_size]:
            try:
                html = client.fetch_courses(term, subject.code, campus)
            except TransportError as exc:
                log.print(f"[red]Error fetching courses for subject {escape(subject.code)}:[/red] {escape(str(exc))}")
                result.errors.append((subject.code, str(exc)))
                continue

            if raw_dir is not None:
                error = _cache_page(raw_dir, raw_page_name(term, subject.code), html, log)
                if error is not None:
                    result.errors.append((subject.code, error))

            records = extract_courses(html, subject.code)
            result.records.extend(records)
            log.print(f"Fetched {len(records)} records for subject {escape(subject.code)}")

        if start + batch_size < len(subjects):
            log.print(f"Waiting {delay_seconds:g} seconds before next batch...")
            sleep(delay_seconds)

    return result


def scrape_combined(
    client: CourseSearchClient,
    term: str,
    subject_codes: Sequence[str],
    campus: str = config.DEFAULT_CAMPUS,
    raw_dir: Optional[Path] = None,
    out: Optional[Console] = None,
) -> ScrapeResult:
    """
    Run ONE search for several subjects and read each row's subject from
    the results table itself.
    """
    log = out if out is not None else console
    codes = [c.strip() for c in subject_codes if c.strip()]
    result = ScrapeResult(subjects=len(codes))
    label = ",".join(codes)

    try:
        html = client.fetch_courses(term, codes, campus)
    except TransportError as exc:
        log.print(f"[red]Error fetching courses for subjects {escape(label)}:[/red] {escape(str(exc))}")
        result.errors.append((label, str(exc)))
        return result

    if raw_dir is not None:
        error = _cache_page(raw_dir, f"{term}.html", html, log)
        if error is not None:
            result.errors.append((label, error))

    result.records.extend(extract_courses(html))
    log.print(f"Fetched {len(result.records)} records for subjects {escape(label)}")
    return result
