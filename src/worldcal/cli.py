from __future__ import annotations

import argparse
import importlib
import inspect
import json
import logging
import re
import sys

_INT_RE = re.compile(r"^-?\d+$")
_DATE_RE = re.compile(r"^(-?\d+)-(\d+)-(\d+)(?:[ T](\d+):(\d+)(?::(\d+))?)?$")


def _parse_date(s: str):
    """'Y-M-D' or 'Y-M-D hh:mm[:ss]'; Y may be negative."""
    from worldcal.core.types import StructuredDate

    m = _DATE_RE.match(s.strip())
    if m is None:
        raise SystemExit(f"Bad date '{s}', expected Y-M-D[ hh:mm[:ss]]")
    y, mo, d, hh, mm, ss = m.groups()
    return StructuredDate(int(y), int(mo), int(d), None, int(hh or 0), int(mm or 0), int(ss or 0))


def _run_module_main(modpath: str, argv: list[str]) -> int:
    """
    Import module and run its main().

    Supports:
      - main(argv: list[str] | None = None) -> int|None
      - main() -> int|None
    """
    mod = importlib.import_module(modpath)
    if not hasattr(mod, "main"):
        raise SystemExit(f"Module {modpath} has no main()")
    fn = getattr(mod, "main")

    sig = inspect.signature(fn)
    if len(sig.parameters) == 0:
        rv = fn()
    else:
        rv = fn(argv)
    return int(rv or 0)


def cmd_date(argv: list[str]) -> int:
    import worldcal

    p = argparse.ArgumentParser(prog="worldcal date", description="World time -> calendar date")
    p.add_argument("world_time", type=int, help="signed seconds since the calendar epoch")
    p.add_argument("--calendar", default="gregorian")
    p.add_argument("--debug", action="store_true")
    p.add_argument("--attr", action="append", default=[], help="attribute name (repeatable)")
    p.add_argument("--json", action="store_true", help="print JSON instead of a summary line")
    args = p.parse_args(argv)

    info = worldcal.day_info(
        args.world_time, calendar=args.calendar, attributes=tuple(args.attr), debug=args.debug
    )
    if args.json:
        print(json.dumps(
            {
                "calendar": info.calendar_id,
                "world_time": info.world_time,
                "date": info.date.to_dict(),
                "attributes": info.attributes,
                "debug": info.debug,
            },
            indent=2,
        ))
    else:
        print(f"{info.calendar_id}: {info.date}")
        for k, v in (info.attributes or {}).items():
            print(f"  {k}: {v}")
        if info.debug:
            print(f"  debug: {info.debug}")
    return 0


def cmd_time(argv: list[str]) -> int:
    import worldcal

    p = argparse.ArgumentParser(prog="worldcal time", description="Calendar date -> world time")
    p.add_argument("date", help="Y-M-D[ hh:mm[:ss]]")
    p.add_argument("--calendar", default="gregorian")
    p.add_argument("--intercalary", default=None, help="intercalary day name (date month is its anchor month)")
    args = p.parse_args(argv)

    d = _parse_date(args.date)
    if args.intercalary:
        from dataclasses import replace
        d = replace(d, intercalary=args.intercalary)
    print(worldcal.to_world_time(d, calendar=args.calendar))
    return 0


def cmd_list(argv: list[str]) -> int:
    import worldcal

    p = argparse.ArgumentParser(prog="worldcal list", description="List registered calendars")
    p.add_argument("--info", action="store_true", help="include structural summary")
    args = p.parse_args(argv)

    for cid in worldcal.list_calendars():
        if args.info:
            print(cid, worldcal.calendar_info(cid))
        else:
            print(cid)
    return 0


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    # Shortcut: `worldcal 1700000000 ...`
    if argv and _INT_RE.match(argv[0]):
        return cmd_date(argv)

    p = argparse.ArgumentParser(prog="worldcal", description="World-time calendar toolkit CLI.")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("date", help="World time -> calendar date")
    sub.add_parser("time", help="Calendar date -> world time")
    sub.add_parser("list", help="List registered calendars")

    # diagnostics
    sub.add_parser("pretty-month", help="Print a month grid (diagnostics)")
    sub.add_parser("year-table", help="Print a table of years (diagnostics)")

    p_diag = sub.add_parser("diag", help="Diagnostics tools")
    p_diag.add_argument(
        "tool",
        choices=["round-trip", "moon-chart"],
        help="Which diagnostic to run",
    )

    args, rest = p.parse_known_args(argv)
    if args.verbose:
        logging.getLogger("worldcal").setLevel(logging.DEBUG)

    if args.cmd == "date":
        return cmd_date(rest)

    if args.cmd == "time":
        return cmd_time(rest)

    if args.cmd == "list":
        return cmd_list(rest)

    if args.cmd == "pretty-month":
        return _run_module_main("worldcal.diagnostics.pretty_month", rest)

    if args.cmd == "year-table":
        return _run_module_main("worldcal.diagnostics.year_table", rest)

    if args.cmd == "diag":
        tool_map = {
            "round-trip": "worldcal.diagnostics.round_trip",
            "moon-chart": "worldcal.diagnostics.moon_chart",
        }
        return _run_module_main(tool_map[args.tool], rest)

    raise RuntimeError("unreachable")


if __name__ == "__main__":
    raise SystemExit(main())
