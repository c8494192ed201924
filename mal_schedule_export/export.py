"""
Export the anime schedule to ICS, CSV, and JSON.
"""
from __future__ import annotations

import csv
import hashlib
import json
import re
import time
from datetime import date, datetime
from pathlib import Path

import icalendar
import pytz

from .models import Record, Schedule

# Broadcast dates on the schedule page are Japan dates
TZ_JP = "Asia/Tokyo"

CSV_FIELDS = [
    "day", "id", "title", "score", "members", "imageUrl",
    "aired", "episodes", "duration",
]

_AIR_DATE_RE = re.compile(r"^([A-Za-z]{3})\s+(\d{1,2}),\s+(\d{4})")


def _parse_air_date(text: str | None) -> date | None:
    """Parse the leading 'Oct 6, 2025' of an air date line."""
    if not text:
        return None
    m = _AIR_DATE_RE.match(text.strip())
    if not m:
        return None
    try:
        return datetime.strptime(" ".join(m.groups()), "%b %d %Y").date()
    except ValueError:
        return None


def _records(schedule: Schedule) -> list[Record]:
    return [r for g in schedule.groups for r in g.records]


def export_ics(schedule: Schedule, out_path: str | Path) -> None:
    """
    Export premieres to iCalendar (.ics).

    Each show becomes an all-day event on its air date, repeating weekly for
    its episode count when that is known. Shows without a parseable air date
    are left out.
    """
    cal = icalendar.Calendar()
    cal.add("prodid", "-//MAL Schedule Export//EN")
    cal.add("version", "2.0")
    cal.add("calscale", "GREGORIAN")
    cal.add("x-wr-calname", "Anime Schedule")
    cal.add("x-wr-timezone", TZ_JP)

    stamp = datetime.now(pytz.utc)

    for r in _records(schedule):
        aired = _parse_air_date(r.air_date)
        if aired is None:
            continue

        event = icalendar.Event()

        # Deterministic UID: same show and premiere → same event on re-import
        uid_string = f"{r.id or r.title}-{aired.isoformat()}"
        uid_hash = hashlib.md5(uid_string.encode("utf-8")).hexdigest()
        event.add("uid", f"{uid_hash}@mal-schedule-export")

        event.add("summary", r.title)
        lines = [f"Day: {r.group}"]
        if r.score is not None:
            lines.append(f"Score: {r.score}")
        if r.audience is not None:
            lines.append(f"Members: {r.audience:,}")
        if r.episode_duration:
            lines.append(f"Duration: {r.episode_duration}")
        event.add("description", "\n".join(lines))
        if r.id:
            event.add("url", f"https://myanimelist.net/anime/{r.id}/")

        event.add("dtstart", aired)
        event.add("dtstamp", stamp)

        if r.episode_count and r.episode_count.isdigit() and int(r.episode_count) > 1:
            event.add("rrule", {"freq": "weekly", "count": int(r.episode_count)})

        cal.add_component(event)

    Path(out_path).write_text(cal.to_ical().decode("utf-8"), encoding="utf-8")


def export_csv(schedule: Schedule, out_path: str | Path) -> None:
    """Export the schedule to CSV, one row per show."""
    rows = [r.model_dump(by_alias=True) for r in _records(schedule)]
    with open(out_path, "w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=CSV_FIELDS, extrasaction="ignore")
        w.writeheader()
        w.writerows(rows)


def export_json(schedule: Schedule, out_path: str | Path) -> None:
    """Export the schedule to JSON in the same shape the API serves."""
    payload = schedule.to_payload(int(time.time()))
    Path(out_path).write_text(
        json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8"
    )


def export(schedule: Schedule, out_path: str | Path, fmt: str) -> None:
    """Export to the given format: ics, csv, or json."""
    fmt = fmt.lower()
    if fmt == "ics":
        export_ics(schedule, out_path)
    elif fmt == "csv":
        export_csv(schedule, out_path)
    elif fmt == "json":
        export_json(schedule, out_path)
    else:
        raise ValueError(f"Unsupported format: {fmt}. Use ics, csv, or json.")
