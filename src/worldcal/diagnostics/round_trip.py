from __future__ import annotations

import argparse
import random
from typing import List

import worldcal


def parse_calendars(s: str) -> List[str]:
    # "gregorian,harptos" -> ["gregorian", "harptos"]
    return [x.strip() for x in s.split(",") if x.strip()]


def roundtrip_test(
    calendar: str,
    N: int,
    span: int,
    seed: int,
    *,
    max_failures: int,
) -> int:
    """
    t -> date -> t for random world times in [-span, span], then
    date -> t -> date for every date produced along the way.
    """
    random.seed(seed)
    eng = worldcal.get_engine(calendar)
    failures = 0

    for _ in range(N):
        t0 = random.randint(-span, span)
        d = eng.world_time_to_date(t0)
        t1 = eng.date_to_world_time(d)
        d1 = eng.world_time_to_date(t1)

        if t1 != t0 or d1 != d:
            failures += 1
            print("\nFAIL")
            print("calendar:", calendar)
            print("t0:", t0, " t1:", t1)
            print("date:", d, " again:", d1)
            print("explain:", eng.explain(t0))
            if failures >= max_failures:
                return failures

        if d.weekday is not None and d.intercalary is None:
            wd = eng.weekday_for(d.year, d.month, d.day)
            if wd != d.weekday:
                failures += 1
                print("\nFAIL (weekday)")
                print("calendar:", calendar, " date:", d, " weekday_for:", wd)
                if failures >= max_failures:
                    return failures

    return failures


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Random round-trip tests: world time -> date -> world time.")
    p.add_argument("--calendars", type=str, default="gregorian,harptos,golarion",
                   help="Comma-separated calendar list.")
    p.add_argument("--N", type=int, default=2000, help="Trials per calendar.")
    p.add_argument("--span-years", type=int, default=3000, help="Sample world times within +/- this many years.")
    p.add_argument("--seed", type=int, default=123, help="RNG seed.")
    p.add_argument("--max-failures", type=int, default=5, help="Stop after this many failures per calendar.")
    args = p.parse_args(argv)

    total = 0
    for cal in parse_calendars(args.calendars):
        eng = worldcal.get_engine(cal)
        span = args.span_years * 366 * eng.definition.time.seconds_per_day
        f = roundtrip_test(cal, args.N, span, args.seed, max_failures=args.max_failures)
        print(f"{eng.id:32s} trials={args.N:6d} failures={f}")
        total += f

    return 1 if total else 0


if __name__ == "__main__":
    raise SystemExit(main())
