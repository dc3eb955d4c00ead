"""
Command-line interface: fetch or load Banner course sessions and export to file.
"""
from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from pathlib import Path
from typing import List

from . import __version__
from .banner_csv import read_csv_sessions
from .banner_fetch import SEMESTER_CODE, PublicSchedule
from .banner_html import parse_banner_html
from .calendar_builder import DEFAULT_ACCEPT_RANGE, CalendarBuilder
from .errors import ScheduleParseError, SourceFetchFailed
from .export import export
from .groups import GroupedCalendars, grouped_courses, load_groups
from .session import CourseSession
from .times import parse_date


def _load_courses(args) -> list[str]:
    courses = [c.strip() for c in (args.course or []) if c.strip()]
    if args.course_file:
        p = Path(args.course_file)
        if not p.exists():
            print(f"Error: --course-file not found: {p}", file=sys.stderr)
            sys.exit(1)
        courses.extend(
            s
            for line in p.read_text(encoding="utf-8").splitlines()
            if (s := line.strip()) and not s.startswith("#")
        )
    return courses


def _accept_range(args) -> tuple[date, date]:
    start = parse_date(args.accept_start) if args.accept_start else DEFAULT_ACCEPT_RANGE[0]
    end = parse_date(args.accept_end) if args.accept_end else DEFAULT_ACCEPT_RANGE[1]
    return start, end


def _print_sessions(sessions: List[CourseSession]) -> None:
    print("CRN    | Course       | Sec  | Type         | Days    | Title")
    print("-" * 76)
    for s in sessions:
        crn = str(s.crn) if s.crn is not None else ""
        print(f"{crn:<6} | {s.number:<12} | {s.section:<4} | {s.type:<12} | {s.days:<7} | {s.name[:30]}")


def main() -> int:
    parser = argparse.ArgumentParser(
        description=(
            "Export Banner course schedules to ICS / CSV / JSON.\n"
            "- Fetch mode: query the public schedule of classes (no login needed).\n"
            "- Offline modes: parse a saved Banner page or a CSV export."
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-o",
        "--output",
        default="course_schedule",
        help="Output path (without extension). Default: course_schedule",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["ics", "csv", "json"],
        default="ics",
        help="Export format. Default: ics",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log skipped records and requests.")

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--course",
        action="append",
        metavar="COURSE",
        help="Course to fetch, e.g. 'EECE 251'. Repeat for several courses.",
    )
    mode.add_argument(
        "--course-file",
        metavar="PATH",
        help="File with one course per line (e.g. EECE 251); lines starting with # are ignored.",
    )
    mode.add_argument(
        "--banner-html",
        metavar="HTML_PATH",
        help="Parse a saved Banner section listing instead of fetching.",
    )
    mode.add_argument(
        "--csv",
        metavar="CSV_PATH",
        help="Parse a CSV export (CRN, Title Short Desc, Cr, Meet, ...). Sessions land in the current week.",
    )

    # Fetch mode options
    parser.add_argument("--year", type=int, default=date.today().year, help="(Fetch mode) Term year.")
    parser.add_argument(
        "--semester",
        choices=sorted(SEMESTER_CODE),
        default="fall",
        help="(Fetch mode) Term season. Default: fall",
    )
    parser.add_argument("--banner-uri", metavar="URI", help="(Fetch mode) Base URI of the Banner instance.")

    parser.add_argument("--accept-start", metavar="DATE", help="Drop occurrences before this date.")
    parser.add_argument("--accept-end", metavar="DATE", help="Drop occurrences after this date.")
    parser.add_argument(
        "--all-sessions",
        action="store_true",
        help="Keep every section separately instead of merging sections that meet at the same time.",
    )
    parser.add_argument(
        "--list-sessions",
        action="store_true",
        help="List parsed sessions (CRN, course, section, type, days, title) then exit.",
    )
    parser.add_argument(
        "--groups",
        metavar="PATH",
        help=(
            "Write one calendar per group into the --output directory. Each line reads "
            "'name: COURSE, COURSE'; unlisted courses go to 'other'. Without another mode, "
            "every listed course is fetched."
        ),
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        accept_range = _accept_range(args)
        builder = CalendarBuilder(accept_range=accept_range, unique=not args.all_sessions)
    except ScheduleParseError as e:
        print(f"Error: invalid accept range: {e}", file=sys.stderr)
        return 1

    groups = None
    target = builder
    if args.groups:
        try:
            groups = load_groups(args.groups)
        except (OSError, ValueError) as e:
            print(f"Error reading --groups file: {e}", file=sys.stderr)
            return 1
        target = GroupedCalendars(groups, accept_range=accept_range, unique=not args.all_sessions)

    fetch_groups = groups is not None and not (args.banner_html or args.csv)
    if args.course or args.course_file or fetch_groups:
        courses = _load_courses(args)
        if fetch_groups and not (args.course or args.course_file):
            courses = grouped_courses(groups)
        if not courses:
            if args.course_file:
                hint = f"No courses found in {args.course_file}. Add one course per line, e.g. EECE 251."
            elif fetch_groups and not args.course:
                hint = f"No courses listed in {args.groups}. Use lines like 'ece_junior: EECE 301'."
            else:
                hint = "No courses given. Pass --course 'EECE 251'."
            print(f"Error: {hint}", file=sys.stderr)
            return 1
        schedule = PublicSchedule(args.year, args.semester, base_uri=args.banner_uri)
        print("Fetching course sessions...")
        for course in courses:
            try:
                target.add_sessions(schedule.get_course_sessions(course))
            except (SourceFetchFailed, ValueError) as e:
                print(f"Error fetching {course}: {e}", file=sys.stderr)
                return 1

    elif args.banner_html:
        try:
            target.add_sessions(parse_banner_html(html_path=args.banner_html))
        except OSError as e:
            print(f"Error reading Banner HTML: {e}", file=sys.stderr)
            return 1

    elif args.csv:
        try:
            sessions = read_csv_sessions(args.csv)
        except OSError as e:
            print(f"Error reading CSV: {e}", file=sys.stderr)
            return 1
        # CSV rows are added unmerged
        for session in sessions:
            target.add_session(session)
    else:
        print(
            "No mode specified. Use --course / --course-file to fetch from Banner, "
            "--banner-html for a saved page, --csv for a CSV export, or --groups.",
            file=sys.stderr,
        )
        return 1

    if args.list_sessions:
        _print_sessions(target.sessions)
        return 0

    ext = {"ics": ".ics", "csv": ".csv", "json": ".json"}[args.format]

    if groups is not None:
        out_dir = Path(args.output)
        out_dir.mkdir(parents=True, exist_ok=True)
        for name in target.output_names():
            group_builder = target.builders[name]
            events = group_builder.build()
            out_path = out_dir / f"{name}{ext}"
            export(events, out_path, args.format)
            print(f"Exported {len(events)} event(s) from {len(group_builder.sessions)} session(s) to {out_path}")
        return 0

    events = builder.build()
    out_path = Path(args.output).with_suffix(ext) if Path(args.output).suffix else Path(args.output + ext)
    export(events, out_path, args.format)
    print(f"Exported {len(events)} event(s) from {len(builder.sessions)} session(s) to {out_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
