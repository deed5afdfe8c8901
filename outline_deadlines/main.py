"""
Main CLI entry point for the unit outline to deadline list converter.
"""

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

from .icalendar_gen import ICalendarGenerator
from .models import PendingDeadline, TimetableInfo, UnitOutline, deadline_to_dict
from .outline import outline_to_deadlines
from .pdf_extractor import (
    SEMESTER_RE, PDFExtractor, PDFTextError, has_text_layer, unit_context_from_filename
)
from .timetable import detect_timetable_units, extract_timetable_sessions, read_ics_events

MAX_FILES = 4
WEEKDAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def format_deadline(item: PendingDeadline) -> str:
    """One-line summary of a deadline for console output."""
    if item.is_tba or item.resolved_date is None:
        when = "TBA"
    elif item.resolved_date.hour or item.resolved_date.minute:
        when = item.resolved_date.strftime('%a %d %b %Y %H:%M')
    else:
        when = item.resolved_date.strftime('%a %d %b %Y')
    week = item.week_label or ""
    weight = f" ({item.weight:g}%)" if item.weight is not None else ""
    return f"  {week:<12} {when:<22} {item.title}{weight}"


def print_deadlines(items: List[PendingDeadline]):
    if not items:
        print("  No deadlines found.")
        return
    for item in items:
        print(format_deadline(item))


def write_outputs(items: List[PendingDeadline], base_name: str, output_dir: Path,
                  write_ics: bool = True):
    """Write the JSON list and, unless disabled, the .ics calendar.

    Args:
        items: Deadlines to save
        base_name: File name stem shared by both outputs
        output_dir: Existing output directory
        write_ics: Whether to export a calendar as well
    """
    json_path = output_dir / f"{base_name}_deadlines.json"
    with open(json_path, 'w') as f:
        json.dump([deadline_to_dict(item) for item in items], f, indent=2)
    print(f"Saved deadlines to: {json_path}")

    if write_ics:
        ics_path = output_dir / f"{base_name}.ics"
        cal_gen = ICalendarGenerator()
        cal_gen.export_to_file(cal_gen.generate_calendar(items), str(ics_path))
        print(f"Saved calendar to: {ics_path}")


def load_timetable(ics_path: Path) -> TimetableInfo:
    """Read a class timetable and print what it tells us."""
    events = read_ics_events(ics_path.read_text(encoding='utf-8'))
    info = detect_timetable_units(events)
    print(f"Timetable: {len(events)} events")
    print(f"  Units: {', '.join(info.units) or 'none found'}")
    print(f"  Semester {info.semester}, {info.year}")
    for session in extract_timetable_sessions(events):
        weeks = ", ".join(str(w) for w in session.weeks)
        print(f"  {session.unit} {session.session_type}: "
              f"{WEEKDAY_NAMES[session.weekday]}, weeks {weeks}")
    return info


def resolve_pdf_context(pdf_path: Path, args: argparse.Namespace,
                        timetable: Optional[TimetableInfo]):
    """Pick unit, semester and year for a PDF.

    Command line values win, then the file name, then the timetable.
    """
    default_year = timetable.year if timetable else None
    unit, semester, year = unit_context_from_filename(pdf_path.name, default_year)
    if timetable and not SEMESTER_RE.search(pdf_path.name):
        semester = timetable.semester
    return (args.unit or unit,
            args.semester or semester,
            args.year or year)


def process_pdfs(pdf_paths: List[Path], args: argparse.Namespace, output_dir: Path,
                 timetable: Optional[TimetableInfo] = None) -> List[str]:
    """Process outline PDFs one at a time.

    A file that cannot be read is reported and skipped; the rest are still
    processed.

    Returns:
        Names of the files that failed
    """
    failed = []
    total = len(pdf_paths)
    for index, pdf_path in enumerate(pdf_paths, start=1):
        unit, semester, year = resolve_pdf_context(pdf_path, args, timetable)
        print(f"\n[{index}/{total}] Reading {pdf_path.name} "
              f"({unit or 'unknown unit'}, Semester {semester}, {year})")
        try:
            extractor = PDFExtractor(pdf_path)
        except PDFTextError as exc:
            print(f"  Failed: {exc}")
            failed.append(pdf_path.name)
            continue

        if not has_text_layer(extractor.text):
            print("  Skipped: no text layer (may be a scanned image)")
            failed.append(pdf_path.name)
            continue

        items = extractor.extract_deadlines(unit, semester, year)
        print_deadlines(items)
        write_outputs(items, pdf_path.stem, output_dir, write_ics=not args.no_ics)
    return failed


def process_outline(args: argparse.Namespace, output_dir: Path,
                    timetable: Optional[TimetableInfo] = None):
    """Build deadlines from an AS_TASK list and/or a PC_TEXT calendar table."""
    as_task = Path(args.as_task).read_text(encoding='utf-8') if args.as_task else ""
    pc_text = Path(args.pc_text).read_text(encoding='utf-8') if args.pc_text else ""

    semester = args.semester or (timetable.semester if timetable else 1)
    year = args.year or (timetable.year if timetable else date.today().year)
    outline = UnitOutline(
        unit_number=args.unit,
        title=args.unit_name or "",
        study_period=f"Semester {semester}",
        year=str(year),
        as_task=as_task,
        pc_text=pc_text,
    )

    print(f"\nBuilding deadlines for {args.unit} (Semester {semester}, {year})")
    items = outline_to_deadlines(outline, args.unit, semester, year)
    print_deadlines(items)
    write_outputs(items, args.unit, output_dir, write_ics=not args.no_ics)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Extract assessment deadlines from unit outlines into JSON and iCalendar files"
    )
    parser.add_argument(
        "pdf_paths",
        nargs="*",
        type=str,
        help="Paths to unit outline PDF files"
    )
    parser.add_argument(
        "--as-task",
        type=str,
        help="File holding the pipe-delimited assessment list (AS_TASK)"
    )
    parser.add_argument(
        "--pc-text",
        type=str,
        help="File holding the HTML program calendar table (PC_TEXT)"
    )
    parser.add_argument(
        "--unit-name",
        type=str,
        help="Full unit name for the outline records"
    )
    parser.add_argument(
        "--unit",
        type=str,
        help="Unit code, e.g. COMP1005 (default: inferred from the file name)"
    )
    parser.add_argument(
        "--semester",
        type=int,
        choices=[1, 2],
        help="Semester (default: inferred from the file name or timetable)"
    )
    parser.add_argument(
        "--year",
        type=int,
        help="Academic year (default: inferred from the file name or timetable)"
    )
    parser.add_argument(
        "--timetable",
        type=str,
        help="Class timetable .ics file used to detect units, semester and year"
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=".",
        help="Output directory for JSON and .ics files (default: current directory)"
    )
    parser.add_argument(
        "--no-ics",
        action="store_true",
        help="Only write the JSON deadline list"
    )
    parser.add_argument(
        "--max-files",
        type=int,
        default=MAX_FILES,
        help=f"Maximum number of PDFs processed per run (default: {MAX_FILES})"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show debug logging"
    )
    return parser


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='[%(asctime)s] %(levelname)s - %(name)s - %(message)s',
    )

    outline_mode = bool(args.as_task or args.pc_text)
    if not args.pdf_paths and not outline_mode:
        parser.error("give at least one PDF, or --as-task / --pc-text")
    if outline_mode and not args.unit:
        parser.error("--unit is required with --as-task / --pc-text")

    for label, path in (("AS_TASK file", args.as_task), ("PC_TEXT file", args.pc_text),
                        ("Timetable file", args.timetable)):
        if path and not Path(path).exists():
            print(f"Error: {label} not found: {path}")
            sys.exit(1)

    pdf_paths = [Path(p) for p in args.pdf_paths]
    for pdf_path in pdf_paths:
        if not pdf_path.exists():
            print(f"Error: PDF file not found: {pdf_path}")
            sys.exit(1)

    if len(pdf_paths) > args.max_files:
        print(f"Warning: {len(pdf_paths)} PDFs given; only the first {args.max_files} will be processed")
        pdf_paths = pdf_paths[:args.max_files]

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    timetable = load_timetable(Path(args.timetable)) if args.timetable else None

    if outline_mode:
        process_outline(args, output_dir, timetable)

    failed = process_pdfs(pdf_paths, args, output_dir, timetable) if pdf_paths else []
    if failed:
        print(f"\nCould not extract: {', '.join(failed)}")

    print("\nDone!")


if __name__ == "__main__":
    main()
