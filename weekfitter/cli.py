"""WeekFitter command line interface.

Thin wrapper over EventStore / SyncEngine / dashboard for use without the
web front end.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import datetime

from weekfitter.adapters.http_backend import HttpEventBackend
from weekfitter.config import settings
from weekfitter.core.dashboard import ALL_SPORTS, Dashboard, build_dashboard
from weekfitter.core.event_store import EventStore
from weekfitter.core.period_resolver import Period
from weekfitter.core.summary_aggregator import format_minutes, weekly_summaries
from weekfitter.core.sync_engine import SyncEngine
from weekfitter.data.models import SPORT_ORDER, EventRecord, SportDetail, SportType
from weekfitter.data.session import Session

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="WeekFitter command line interface.")
    parser.add_argument("--email", default=None, help="Owner e-mail (defaults to OWNER_EMAIL).")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("events", help="List all events of the owner.")

    dash = subparsers.add_parser("dashboard", help="Print sport statistics.")
    dash.add_argument("--period", choices=[p.value for p in Period], default=Period.WEEK.value)
    dash.add_argument("--sport", choices=[ALL_SPORTS, *(s.value for s in SportType)], default=ALL_SPORTS)

    weekly = subparsers.add_parser("weekly", help="Print weekly sport minutes for a month.")
    weekly.add_argument("--month", default=None, help="YYYY-MM (defaults to the current month).")

    move = subparsers.add_parser("move", help="Move or resize an event.")
    move.add_argument("--id", required=True)
    move.add_argument("--start", required=True, type=datetime.fromisoformat)
    move.add_argument("--end", required=True, type=datetime.fromisoformat)

    return parser


def _describe(event: EventRecord) -> str:
    when = f"{event.start:%Y-%m-%d %H:%M} – {event.end:%H:%M}"
    line = f"[{event.id}] {when}  {event.category.value:<6} {event.title}"
    if isinstance(event.detail, SportDetail):
        detail = event.detail
        line += f"  ({detail.sport_type.value}, {detail.duration or 0:g} min, {detail.distance or 0:g} km)"
    return line


def _print_dashboard(dash: Dashboard) -> None:
    print(f"Period: {dash.period.value}  Sport: {dash.sport_filter}")
    print(
        f"Distance: {dash.totals.distance_km:.2f} km  "
        f"Time: {format_minutes(dash.totals.duration_min)}  "
        f"Activities: {dash.totals.activities}"
    )
    print("Trend:")
    for bucket in dash.trend:
        print(f"  {bucket.label:>10}  {bucket.value:.2f} km")
    print("Time by sport:")
    for summary in dash.duration_by_sport:
        print(f"  {summary.sport_type.value:<9} {summary.total_minutes} min")
    print("Distribution:")
    for share in dash.distribution:
        print(f"  {share.sport_type.value:<9} {share.percent}%")


async def _run(args: argparse.Namespace, session: Session) -> int:
    backend = HttpEventBackend()
    store = EventStore(backend, session)
    engine = SyncEngine(store, backend)
    await engine.load()

    if args.command == "events":
        for event in sorted(store.snapshot(), key=lambda ev: ev.start):
            print(_describe(event))
        return 0

    if args.command == "dashboard":
        _print_dashboard(build_dashboard(store.sport_events(), args.period, args.sport))
        return 0

    if args.command == "weekly":
        anchor = datetime.strptime(args.month, "%Y-%m") if args.month else datetime.now()
        for week in weekly_summaries(store.snapshot(), anchor):
            parts = ", ".join(
                f"{sport.value} {format_minutes(week.minutes_by_sport[sport])}" for sport in SPORT_ORDER
            )
            print(f"{week.week_start:%d.%m.} – {week.week_end:%d.%m.}: {parts}")
        return 0

    if args.command == "move":
        event = store.get(args.id)
        if event is None:
            print(f"No event with id {args.id}", file=sys.stderr)
            return 1
        result = await engine.move_or_resize(event, args.start, args.end)
        print(result.message)
        if result.event is not None:
            print(_describe(result.event))
        return 0 if result.ok else 1

    return 2  # pragma: no cover - argparse enforces choices


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    email = args.email or settings.OWNER_EMAIL
    if not email:
        print("ERROR: no owner e-mail; pass --email or set OWNER_EMAIL in .env", file=sys.stderr)
        return 1

    session = Session.sign_in(email)
    try:
        return asyncio.run(_run(args, session))
    finally:
        session.close()
