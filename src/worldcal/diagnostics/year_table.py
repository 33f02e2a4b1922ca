from __future__ import annotations

import argparse

import worldcal


def year_rows(calendar: str, start: int, count: int) -> list[dict]:
    return [worldcal.year_info(y, calendar=calendar) for y in range(start, start + count)]


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Table of year lengths, leap status and first weekday.")
    p.add_argument("--calendar", default="gregorian")
    p.add_argument("--start", type=int, default=None, help="First year (default: current year of the calendar)")
    p.add_argument("--count", type=int, default=12)
    args = p.parse_args(argv)

    eng = worldcal.get_engine(args.calendar)
    start = args.start if args.start is not None else eng.definition.year.current_year
    weekdays = eng.definition.weekdays

    print(f"{'year':>8}  {'leap':>4}  {'days':>4}  first weekday   intercalary")
    for row in year_rows(args.calendar, start, args.count):
        wd = row["first_weekday"]
        wd_name = weekdays[wd].name if wd is not None else "-"
        print(
            f"{row['year']:>8}  {'L' if row['is_leap'] else '':>4}  {row['days']:>4}  "
            f"{wd_name:<14}  {', '.join(row['intercalary'])}"
        )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
