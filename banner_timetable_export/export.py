"""
Export calendar events to ICS, CSV, and JSON.
"""
from __future__ import annotations

import csv
import hashlib
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List

import icalendar

from .calendar_builder import CalendarEvent

PRODID = "-//Banner Timetable Export//EN"
UID_DOMAIN = "banner-timetable-export"

CSV_FIELDS = ["summary", "start", "end", "location", "description", "recurrence_dates"]


def build_ical(events: List[CalendarEvent], name: str = "Course Schedule") -> icalendar.Calendar:
    """
    Build an iCalendar object. Times are floating: no TZID and no
    VTIMEZONE, so calendars show them in the viewer's local zone.
    """
    cal = icalendar.Calendar()
    cal.add("prodid", PRODID)
    cal.add("version", "2.0")
    cal.add("calscale", "GREGORIAN")
    cal.add("x-wr-calname", name)

    for ev in events:
        event = icalendar.Event()

        # Deterministic UID so re-exports update rather than duplicate events
        uid_string = f"{ev.summary}-{ev.start.isoformat()}-{ev.location or ''}"
        uid_hash = hashlib.md5(uid_string.encode("utf-8")).hexdigest()
        event.add("uid", f"{uid_hash}@{UID_DOMAIN}")

        event.add("summary", ev.summary)
        event.add("description", ev.description)
        if ev.location:
            event.add("location", ev.location)
        event.add("dtstart", ev.start)
        event.add("dtend", ev.end)
        event.add("dtstamp", datetime.now(timezone.utc))
        if ev.recurrence_dates:
            event.add("rdate", list(ev.recurrence_dates))

        cal.add_component(event)
    return cal


def export_ics(events: List[CalendarEvent], out_path: str | Path) -> None:
    """Export events to iCalendar (.ics) for Apple/Google calendar."""
    cal = build_ical(events)
    Path(out_path).write_text(cal.to_ical().decode("utf-8"), encoding="utf-8")


def _event_record(ev: CalendarEvent) -> Dict:
    return {
        "summary": ev.summary,
        "start": ev.start.isoformat(),
        "end": ev.end.isoformat(),
        "location": ev.location or "",
        "description": ev.description,
        "recurrence_dates": [d.isoformat() for d in ev.recurrence_dates],
    }


def export_csv(events: List[CalendarEvent], out_path: str | Path) -> None:
    """Export events to CSV; recurrence dates are joined with spaces."""
    with open(out_path, "w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=CSV_FIELDS)
        w.writeheader()
        for ev in events:
            record = _event_record(ev)
            record["recurrence_dates"] = " ".join(record["recurrence_dates"])
            w.writerow(record)


def export_json(events: List[CalendarEvent], out_path: str | Path) -> None:
    """Export events to JSON."""
    Path(out_path).write_text(
        json.dumps([_event_record(ev) for ev in events], indent=2, ensure_ascii=False),
        encoding="utf-8",
    )


def export(events: List[CalendarEvent], out_path: str | Path, fmt: str) -> None:
    """Export to the given format: ics, csv, or json."""
    fmt = fmt.lower()
    if fmt == "ics":
        export_ics(events, out_path)
    elif fmt == "csv":
        export_csv(events, out_path)
    elif fmt == "json":
        export_json(events, out_path)
    else:
        raise ValueError(f"Unsupported format: {fmt}. Use ics, csv, or json.")
