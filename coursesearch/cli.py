"""
CLI (Command Line Interface).

This module provides the terminal commands of the exporter, e.g.:

    coursesearch subjects --term 202601
    coursesearch export --term 202601 --campus 10 --out courses.csv
    coursesearch parse data/raw --out courses.csv

Note:
- `export` always writes whatever it collected; failing subjects are
  reported but do not change the exit code
- `parse` works offline on pages cached with `export --raw-dir`
"""

from __future__ import annotations

import argparse
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from coursesearch import config
from coursesearch.export_csv import export_records_to_csv
from coursesearch.model import SubjectOption
from coursesearch.parse import parse_html_file, parse_raw_dir
from coursesearch.scrape import CourseSearchClient, TransportError, scrape_combined, scrape_term

console = Console()


def _client(args: argparse.Namespace) -> CourseSearchClient:
    return CourseSearchClient(timeout=args.timeout, verify=not args.insecure)


def _cmd_subjects(args: argparse.Namespace) -> int:
    """
    Print the subject selector of a term.
    """
    term = (args.term or "").strip()
    if not term:
        console.print("Please provide a term code.")
        return 1

    try:
        subjects = _client(args).discover_subjects(term)
    except TransportError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        return 1

    if not subjects:
        console.print(f"No subjects for term {escape(term)}.")
        return 0

    for s in subjects:
        console.print(f"{s.code} | {s.description}", markup=False)
    return 0


def _cmd_export(args: argparse.Namespace) -> int:
    """
    Scrape all (or the given) subjects of a term and write the CSV file.
    """
    cfg = config.ExportConfig(
        term=(args.term or "").strip(),
        campus=(args.campus or "").strip(),
        out=args.out,
        batch_size=args.batch_size,
        delay_seconds=args.delay,
        timeout=args.timeout,
        verify=not args.insecure,
        subjects=[s.strip().upper() for s in args.subject if s.strip()],
        raw_dir=args.raw_dir,
        combined=args.combined,
    )
    try:
        cfg.validate()
    except ValueError as exc:
        console.print(f"Invalid arguments: {escape(str(exc))}")
        return 1

    client = CourseSearchClient(timeout=cfg.timeout, verify=cfg.verify)

    if cfg.combined:
        result = scrape_combined(client, cfg.term, cfg.subjects, campus=cfg.campus, raw_dir=cfg.raw_dir)
    else:
        # explicit subjects skip discovery
        subjects = [SubjectOption(code=c, description="") for c in cfg.subjects] or None
        result = scrape_term(
            client,
            cfg.term,
            campus=cfg.campus,
            subjects=subjects,
            batch_size=cfg.batch_size,
            delay_seconds=cfg.delay_seconds,
            raw_dir=cfg.raw_dir,
        )

    try:
        n = export_records_to_csv(result.records, cfg.out)
    except OSError as exc:
        console.print(f"[red]Could not write {escape(str(cfg.out))}:[/red] {escape(str(exc))}")
        return 1
    console.print(f"Done. Wrote {n} records to {escape(str(cfg.out))}")
    if result.errors:
        console.print(f"{len(result.errors)} request(s) failed:")
        for code, message in result.errors:
            console.print(f"- {code}: {message}", markup=False)
    return 0


def _cmd_parse(args: argparse.Namespace) -> int:
    """
    Parse a cached results page (or a directory of them) into CSV.
    """
    path = Path(args.path)
    if path.is_dir():
        records = parse_raw_dir(path)
    elif path.is_file():
        subject = (args.subject or "").strip() or None
        records = parse_html_file(path, subject)
    else:
        console.print(f"Not found: {escape(str(path))}")
        return 1

    try:
        n = export_records_to_csv(records, args.out)
    except OSError as exc:
        console.print(f"[red]Could not write {escape(str(args.out))}:[/red] {escape(str(exc))}")
        return 1
    console.print(f"Parsed {n} records into {escape(str(args.out))}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="coursesearch", description="Course search scraper + CSV export")
    sub = parser.add_subparsers(dest="command", required=True)

    def add_http_options(p: argparse.ArgumentParser) -> None:
        p.add_argument("--timeout", type=float, default=config.TIMEOUT, help="HTTP timeout in seconds")
        p.add_argument("--insecure", action="store_true", help="Do not verify the server's TLS certificate")

    p_subjects = sub.add_parser("subjects", help="List the subjects of a term")
    p_subjects.add_argument("--term", "-t", type=str, default=config.DEFAULT_TERM, help="Term code (e.g. 202601)")
    add_http_options(p_subjects)

    p_export = sub.add_parser("export", help="Scrape a term and export courses to .csv")
    p_export.add_argument("--term", "-t", type=str, default=config.DEFAULT_TERM, help="Term code (e.g. 202601)")
    p_export.add_argument("--campus", "-c", type=str, default=config.DEFAULT_CAMPUS, help="Campus code")
    p_export.add_argument("--out", "-o", type=Path, default=config.DEFAULT_OUT, help="Output .csv path")
    p_export.add_argument("--batch-size", type=int, default=config.BATCH_SIZE, help="Subjects per batch")
    p_export.add_argument(
        "--delay", type=float, default=config.BATCH_DELAY_SECONDS, help="Sleep seconds between batches"
    )
    p_export.add_argument(
        "--subject", "-s", action="append", default=[], help="Only this subject code (repeatable)"
    )
    p_export.add_argument("--raw-dir", type=Path, default=None, help="Also cache result pages as HTML here")
    p_export.add_argument(
        "--combined", action="store_true", help="Query all --subject codes with one search request"
    )
    add_http_options(p_export)

    p_parse = sub.add_parser("parse", help="Parse cached result pages into .csv")
    p_parse.add_argument("path", type=str, help="Results page .html or directory of cached pages")
    p_parse.add_argument("--subject", "-s", type=str, default=None, help="Subject code of a single page")
    p_parse.add_argument("--out", "-o", type=Path, default=config.DEFAULT_OUT, help="Output .csv path")

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "subjects":
        raise SystemExit(_cmd_subjects(args))
    if args.command == "export":
        raise SystemExit(_cmd_export(args))
    if args.command == "parse":
        raise SystemExit(_cmd_parse(args))

    raise SystemExit(2)
