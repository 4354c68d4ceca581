"""
Configuration for scraping runs.

Update DEFAULT_TERM as new term codes become available. Term codes are the
ones used by the course search site (e.g. "202601" = Spring 2026).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from coursesearch import __version__

BASE_URL = "https://coursesearch.georgiasouthern.edu/"
SEARCH_URL = BASE_URL + "search/"
USER_AGENT = f"Mozilla/5.0 (compatible; coursesearch/{__version__})"

DEFAULT_TERM = "202601"

# Campus code to use in the form POST ("10" = Statesboro).
DEFAULT_CAMPUS = "10"

# Subjects per batch and the pause after each full batch.
BATCH_SIZE = 10
BATCH_DELAY_SECONDS = 5.0

TIMEOUT = 30  # seconds

DEFAULT_OUT = Path("courses.csv")


@dataclass
class ExportConfig:
    """
    Settings of one export run (built by the CLI from its arguments).
    """

    term: str = DEFAULT_TERM
    campus: str = DEFAULT_CAMPUS
    out: Path = DEFAULT_OUT
    batch_size: int = BATCH_SIZE
    delay_seconds: float = BATCH_DELAY_SECONDS
    timeout: float = TIMEOUT
    verify: bool = True
    subjects: List[str] = field(default_factory=list)
    raw_dir: Optional[Path] = None
    combined: bool = False

    def validate(self) -> None:
        if not self.term.strip():
            raise ValueError("term must not be empty")
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {self.batch_size}")
        if self.delay_seconds < 0:
            raise ValueError(f"delay_seconds must be >= 0, got {self.delay_seconds}")
        if self.combined and not self.subjects:
            raise ValueError("combined search needs at least one --subject")
