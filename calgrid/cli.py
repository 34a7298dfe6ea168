from __future__ import annotations

import argparse
import datetime as dt
import os
import sys
from pathlib import Path

from .config import ConfigError, load_cfg
from .model import VIEWS, ViewState
from .palette import DEFAULT_PALETTE, ColorVisibility
from .payload import build_view_payload, dumps_payload, load_events_from_json
from .util.console import eprint
from .util.timeparse import parse_date_yyyy_mm_dd
from .validate import EventValidationError


def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser(
        description="Resolve a calendar view (day/week/month/agenda) from an events JSON file and print its render model."
    )
    ap.add_argument("events", help="Events JSON file (list of events, or {\"events\": [...]})")
    ap.add_argument(
        "--view",
        default=os.getenv("CALGRID_VIEW", "week"),
        choices=list(VIEWS),
        help="View mode (default: env CALGRID_VIEW or 'week')",
    )
    ap.add_argument("--date", default=None, help="Anchor date YYYY-MM-DD (default: today)")
    ap.add_argument("--week-start", type=int, default=None, help="First weekday, 0=Sunday .. 6=Saturday")
    ap.add_argument("--agenda-days", type=int, default=None, help="Agenda window length in days (default: 30)")
    ap.add_argument(
        "--hide",
        action="append",
        default=[],
        metavar="COLOR",
        help="Hide a palette color tag (repeatable), e.g. --hide rose",
    )
    ap.add_argument("--strict", action="store_true", help="Fail on the first malformed event instead of skipping it")
    ap.add_argument("--indent", action="store_true", help="Pretty-print JSON output")
    ap.add_argument("--out", default=None, help="Write JSON to this path instead of stdout")

    args = ap.parse_args(argv)

    if args.date:
        try:
            anchor = parse_date_yyyy_mm_dd(args.date)
        except ValueError:
            raise SystemExit(f"Invalid --date value: {args.date!r} (expected YYYY-MM-DD)")
    else:
        anchor = dt.date.today()

    try:
        cfg = load_cfg({"week_starts_on": args.week_start, "agenda_days": args.agenda_days})
    except ConfigError as e:
        raise SystemExit(f"Invalid configuration: {e}")

    known = {p.name for p in DEFAULT_PALETTE}
    for color in args.hide:
        if color not in known:
            raise SystemExit(f"Unknown palette color for --hide: {color!r} (known: {', '.join(sorted(known))})")
    visibility = ColorVisibility.from_palette()
    for color in args.hide:
        if color in visibility.active:
            visibility = visibility.toggle(color)

    try:
        events = load_events_from_json(Path(args.events), strict=bool(args.strict))
    except FileNotFoundError:
        raise SystemExit(f"Events file not found: {args.events}")
    except EventValidationError as e:
        raise SystemExit(f"Failed to load events: {e}")

    payload = build_view_payload(events, ViewState(current_date=anchor, view=args.view), cfg, visibility)
    text = dumps_payload(payload, indent=bool(args.indent))

    if args.out:
        out_path = Path(args.out)
        try:
            out_path.parent.mkdir(parents=True, exist_ok=True)
        except PermissionError as e:
            raise SystemExit(f"Cannot create output directory '{out_path.parent}': {e}")
        out_path.write_text(text + "\n", encoding="utf-8")
        eprint(f"[calgrid] wrote {out_path}")
    else:
        sys.stdout.write(text + "\n")


if __name__ == "__main__":
    main()
