#!/usr/bin/env python3
"""
Print a linked user's cached calendar in the terminal.

Reads the last synced snapshot from the local database (no Graph calls) and
renders the month, week or day view as text.

Usage:
    uv run python src/scripts/show_calendar.py <user-id> --view week --date 2024-06-10 --tz Europe/Berlin
"""

import argparse
import sys
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import VIEWER_TIMEZONE
from core.database import SqliteStorage
from services.dates import WEEKDAY_NAMES, format_time, start_instant
from services.event_store import EventStore
from services.navigation import NavigationState, ViewMode
from services.shell import CalendarRender, CalendarShell

CELL_WIDTH = 14


def _clip(text: str, width: int = CELL_WIDTH) -> str:
    return text if len(text) <= width else text[: width - 1] + "~"


# =============================================================================
# TEXT RENDERERS
# =============================================================================


def print_month(render: CalendarRender):
    headers = [name[:3] for name in WEEKDAY_NAMES[6:] + WEEKDAY_NAMES[:6]]
    print(" ".join(h.ljust(CELL_WIDTH) for h in headers))
    for week in render.month.weeks:
        days = []
        lines = []
        for cell in week:
            if not cell.in_month:
                days.append("".ljust(CELL_WIDTH))
                lines.append("".ljust(CELL_WIDTH))
                continue
            marker = "*" if cell.is_today else ""
            days.append(f"{cell.date.day}{marker}".ljust(CELL_WIDTH))
            summary = f"{cell.total_events} ev" if cell.total_events else ""
            if cell.overflow:
                summary += f" (+{cell.overflow} more)"
            lines.append(_clip(summary).ljust(CELL_WIDTH))
        print(" ".join(days))
        print(" ".join(lines))


def print_week(render: CalendarRender, tz):
    print("      " + " ".join(day.label.ljust(CELL_WIDTH) for day in render.week.days))
    for row in render.week.rows:
        cells = []
        for events in row.cells:
            text = ", ".join(
                f"{format_time(start_instant(e, tz))} {e.subject}" for e in events
            )
            cells.append(_clip(text).ljust(CELL_WIDTH))
        print(row.label.rjust(5) + " " + " ".join(cells))


def print_day(render: CalendarRender, tz):
    print(f"{render.day.event_count} events")
    for slot in render.day.slots:
        print(f"{slot.label.rjust(5)} |")
        for event in slot.events:
            teams = " [Teams]" if event.is_online_meeting else ""
            print(f"      | {format_time(start_instant(event, tz))} {event.subject}{teams}")


def main(user_id: str, view: str, date_str: str | None, tz_name: str):
    tz = ZoneInfo(tz_name)
    store = EventStore(SqliteStorage(user_id))
    store.load_cached()
    if not len(store):
        print(f"No cached events for {user_id}. Sync the calendar first.")
        return

    shell = CalendarShell(store, tz)
    anchor = datetime.strptime(date_str, "%Y-%m-%d").date() if date_str else shell.today()
    shell.state = NavigationState(anchor_date=anchor, view_mode=ViewMode(view))
    render = shell.render()

    print(f"\n{render.title}")
    print("=" * 80)
    if render.view_mode == ViewMode.MONTH:
        print_month(render)
    elif render.view_mode == ViewMode.WEEK:
        print_week(render, tz)
    else:
        print_day(render, tz)

    print("=" * 80)
    print(f"{render.total_events} events, {len(render.teams_meetings)} Teams meetings")
    if render.last_sync_text:
        print(f"Last synced: {render.last_sync_text}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Show the cached calendar of a linked user")
    parser.add_argument("user_id", help="Linked user id (cache namespace)")
    parser.add_argument(
        "--view",
        choices=[mode.value for mode in ViewMode],
        default=ViewMode.MONTH.value,
        help="Calendar view. Defaults to month.",
    )
    parser.add_argument("--date", help="Date to show (YYYY-MM-DD). Defaults to today.")
    parser.add_argument("--tz", default=VIEWER_TIMEZONE, help="Viewer IANA time zone")
    args = parser.parse_args()

    main(args.user_id, args.view, args.date, args.tz)
