from __future__ import annotations

import argparse
import sys
from datetime import date
from typing import List

from photocal.pipeline.holidays import HK_HOLIDAYS
from photocal.pipeline.lunar import LUNAR_NEW_YEAR, MONTH_STARTS, SUPPORTED_YEARS


def check_holidays() -> List[str]:
    """
    Holiday keys must be real dates written as zero-padded YYYY-MM-DD.
    """
    problems: List[str] = []
    for key, name in HK_HOLIDAYS.items():
        try:
            parsed = date.fromisoformat(key)
        except ValueError:
            problems.append(f"holiday {key!r} is not a valid date")
            continue
        if parsed.isoformat() != key:
            problems.append(f"holiday {key!r} is not zero-padded")
        if not name.strip():
            problems.append(f"holiday {key} has an empty name")
    return problems


def check_lunar() -> List[str]:
    """
    - every supported year has a Lunar New Year anchor
    - month-start tables have 12 increasing entries, 29 or 30 days apart
    - the first month start equals the Lunar New Year
    """
    problems: List[str] = []
    for year in SUPPORTED_YEARS:
        if year not in LUNAR_NEW_YEAR:
            problems.append(f"{year}: missing Lunar New Year anchor")

    for year, starts in MONTH_STARTS.items():
        if year not in SUPPORTED_YEARS:
            problems.append(f"{year}: month starts for an unsupported year")
        if len(starts) != 12:
            problems.append(f"{year}: expected 12 month starts, found {len(starts)}")
        if starts and LUNAR_NEW_YEAR.get(year) != starts[0]:
            problems.append(f"{year}: first month start {starts[0]} differs from Lunar New Year")
        for prev, cur in zip(starts, starts[1:]):
            gap = (cur - prev).days
            if gap not in (29, 30):
                problems.append(f"{year}: {prev} -> {cur} spans {gap} days")
    return problems


def main() -> None:
    parser = argparse.ArgumentParser(description="Check holiday and lunar anchor tables")
    parser.add_argument("--quiet", action="store_true", help="Only print problems")
    args = parser.parse_args()

    problems = check_holidays() + check_lunar()
    for line in problems:
        print(f"[FAIL] {line}")
    if not args.quiet:
        print(f"holidays: {len(HK_HOLIDAYS)} entries")
        print(f"lunar: {len(LUNAR_NEW_YEAR)} New Year anchors, {len(MONTH_STARTS)} full years")
    sys.exit(1 if problems else 0)


if __name__ == "__main__":
    main()
