"""
Approximate lunar-date labels for calendar cells.

Labels come from hand-curated anchor tables, not from astronomical
computation. Only 2023-2028 are supported; 2024 and 2025 have full
month-start tables, the other years only know their Lunar New Year.
Dates before the first anchor of a year (roughly the first weeks of
January) get no label.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Tuple


SUPPORTED_YEARS = range(2023, 2029)

LUNAR_NEW_YEAR: Mapping[int, date] = MappingProxyType(
    {
        2023: date(2023, 1, 22),
        2024: date(2024, 2, 10),
        2025: date(2025, 1, 29),
        2026: date(2026, 2, 17),
        2027: date(2027, 2, 6),
        2028: date(2028, 1, 26),
    }
)

# First day of lunar months 1..12 falling in the given solar year.
MONTH_STARTS: Mapping[int, Tuple[date, ...]] = MappingProxyType(
    {
        2024: (
            date(2024, 2, 10), date(2024, 3, 10), date(2024, 4, 9), date(2024, 5, 8),
            date(2024, 6, 6), date(2024, 7, 6), date(2024, 8, 4), date(2024, 9, 3),
            date(2024, 10, 3), date(2024, 11, 1), date(2024, 12, 1), date(2024, 12, 31),
        ),
        2025: (
            date(2025, 1, 29), date(2025, 2, 28), date(2025, 3, 29), date(2025, 4, 28),
            date(2025, 5, 27), date(2025, 6, 25), date(2025, 7, 25), date(2025, 8, 23),
            date(2025, 9, 22), date(2025, 10, 21), date(2025, 11, 20), date(2025, 12, 20),
        ),
    }
)

NEW_YEAR_LABELS: Tuple[str, ...] = ("農曆新年", "初二", "初三")

MONTH_NAMES: Tuple[str, ...] = (
    "正月", "二月", "三月", "四月", "五月", "六月",
    "七月", "八月", "九月", "十月", "冬月", "腊月",
)
DIGITS: Tuple[str, ...] = ("日", "一", "二", "三", "四", "五", "六", "七", "八", "九", "十")

MAX_MONTH_DAYS = 30


class LunarStatus(str, Enum):
    LABELLED = "LABELLED"
    NO_LABEL = "NO_LABEL"
    UNSUPPORTED_YEAR = "UNSUPPORTED_YEAR"


@dataclass(frozen=True)
class LunarResult:
    status: LunarStatus
    text: str = ""

    def __bool__(self) -> bool:
        return self.status == LunarStatus.LABELLED


def day_name(day: int) -> str:
    if day < 1 or day > MAX_MONTH_DAYS:
        return ""
    if day == 10:
        return "初十"
    if day == 20:
        return "二十"
    if day == 30:
        return "三十"
    digit = DIGITS[day % 10]
    if day < 10:
        return "初" + digit
    if day < 20:
        return "十" + digit
    return "廿" + digit


def month_name(month: int, is_leap: bool = False) -> str:
    return ("閏" if is_leap else "") + MONTH_NAMES[month - 1]


def resolve_lunar(day: date) -> LunarResult:
    if day.year not in SUPPORTED_YEARS:
        return LunarResult(LunarStatus.UNSUPPORTED_YEAR)

    new_year = LUNAR_NEW_YEAR.get(day.year)
    if new_year is None:
        return LunarResult(LunarStatus.NO_LABEL)

    offset = (day - new_year).days
    if 0 <= offset < len(NEW_YEAR_LABELS):
        return LunarResult(LunarStatus.LABELLED, NEW_YEAR_LABELS[offset])

    starts = MONTH_STARTS.get(day.year, ())
    for index in range(len(starts) - 1, -1, -1):
        offset = (day - starts[index]).days
        if 0 <= offset < MAX_MONTH_DAYS:
            lunar_day = offset + 1
            if lunar_day == 1:
                return LunarResult(LunarStatus.LABELLED, month_name(index + 1))
            return LunarResult(LunarStatus.LABELLED, day_name(lunar_day))

    return LunarResult(LunarStatus.NO_LABEL)


def lunar_label(day: date) -> str:
    return resolve_lunar(day).text
