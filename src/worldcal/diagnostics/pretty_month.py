from __future__ import annotations

import argparse

import worldcal


def cell(top: str, bot: str, w: int = 6) -> tuple[str, str]:
    return (top[:w].ljust(w), bot[:w].ljust(w))


def dow_header(names: list[str], w: int = 6) -> str:
    return " ".join(n[:w].ljust(w) for n in names)


def month_grid(calendar: str, year: int, month: int) -> list[str]:
    """Rows of a month grid: day number on top, moon phase initials below."""
    eng = worldcal.get_engine(calendar)
    defn = eng.definition
    names = [w.abbreviation or w.name for w in defn.weekdays]
    n = max(len(names), 1)

    lines = [f"{eng.id}  {defn.months[month - 1].name} {year}{defn.year.suffix}"]
    if names:
        lines.append(dow_header(names))
        lines.append("-" * len(dow_header(names)))

    for ic in eng.intercalary_before_month(year, month):
        lines.append(f"  [{ic.name}] ({ic.days} day{'s' if ic.days != 1 else ''})")

    wk: list[tuple[str, str]] = []
    first = eng.weekday_for(year, month, 1)
    for _ in range(first or 0):
        wk.append(cell("", ""))
    for day in range(1, eng.month_length(month, year) + 1):
        phases = eng.moon_phases(eng.date(year, month, day))
        bot = "".join(p.phase.name[:1] for p in phases)
        wk.append(cell(f"{day:2d}", bot))
        if len(wk) == n:
            lines.append(" ".join(c[0] for c in wk))
            lines.append(" ".join(c[1] for c in wk))
            wk = []
    if wk:
        lines.append(" ".join(c[0] for c in wk))
        lines.append(" ".join(c[1] for c in wk))

    for ic in eng.intercalary_after_month(year, month):
        lines.append(f"  [{ic.name}] ({ic.days} day{'s' if ic.days != 1 else ''})")
    return lines


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Print a month grid with weekdays, moon phases and intercalary days.")
    p.add_argument("--calendar", default="gregorian")
    p.add_argument("year", type=int, nargs="?", default=None)
    p.add_argument("month", type=int, nargs="?", default=1)
    args = p.parse_args(argv)

    eng = worldcal.get_engine(args.calendar)
    year = args.year if args.year is not None else eng.definition.year.current_year
    for line in month_grid(args.calendar, year, args.month):
        print(line)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
