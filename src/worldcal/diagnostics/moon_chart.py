#!/usr/bin/env python3
from __future__ import annotations

import argparse
from typing import List, Optional

import worldcal


def _need_numpy():
    try:
        import numpy as np
        return np
    except ImportError as e:
        raise RuntimeError('Need numpy. Install: pip install "worldcal[diagnostics]"') from e


def _need_matplotlib():
    try:
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
        return plt
    except ImportError as e:
        raise RuntimeError('Need matplotlib. Install: pip install "worldcal[diagnostics]"') from e


def build_series(np, calendar: str, year: int, moon: str):
    """(day-of-year, cycle fraction) for every day of `year`."""
    eng = worldcal.get_engine(calendar)
    total = eng.year_length(year)
    first = eng.days_before_year(year)
    x = np.arange(1, total + 1, dtype=int)
    y = np.full(total, np.nan, dtype=float)
    for i in range(total):
        d = eng.days_to_date(first + i)
        for info in eng.moon_phases(d, moon):
            start = sum(p.length for p in info.moon.phases[: info.phase_index])
            y[i] = (start + info.day_in_phase_exact) / info.moon.cycle_length
    return x, y


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(description="Plot moon cycle position across one calendar year.")
    p.add_argument("--calendar", default="gregorian")
    p.add_argument("--year", type=int, default=None)
    p.add_argument("--outbase", default="moon_chart", help="Output base name (writes .png)")
    args = p.parse_args(argv)

    np = _need_numpy()
    plt = _need_matplotlib()

    eng = worldcal.get_engine(args.calendar)
    year = args.year if args.year is not None else eng.definition.year.current_year
    moons = eng.definition.moons
    if not moons:
        print(f"{eng.id} defines no moons")
        return 1

    fig, ax = plt.subplots(figsize=(9.2, 4.0), constrained_layout=True)
    ax.set_axisbelow(True)
    ax.grid(True, which="major", color="0.88", linewidth=0.7)
    ax.set_xlabel("Day of year")
    ax.set_ylabel("Cycle position (0 = new)")
    ax.set_ylim(0, 1)
    ax.set_title(f"{eng.definition.label} moons, year {year}")

    for moon in moons:
        x, y = build_series(np, args.calendar, year, moon.name)
        ax.plot(x, y, linewidth=1.2, color=moon.color, label=moon.name)

    ax.legend(loc="upper right", frameon=False)
    fig.savefig(args.outbase + ".png", dpi=200)
    print(f"Saved: {args.outbase}.png")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
