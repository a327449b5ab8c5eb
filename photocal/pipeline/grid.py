from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import MAXYEAR, MINYEAR, date, timedelta
from typing import List, Optional

from .holidays import HolidayLabel, resolve_holiday
from .lunar import lunar_label


GRID_CELLS = 42  # 6 weeks x 7 days, Sunday first
WEEKDAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


@dataclass(frozen=True)
class DayCell:
    date: date
    is_current_month: bool
    is_today: bool
    holiday: Optional[HolidayLabel] = None
    lunar_label: Optional[str] = None

    @property
    def is_sunday(self) -> bool:
        return self.date.isoweekday() == 7


def check_year_month(year: int, month: int) -> None:
    if not 1 <= month <= 12:
        raise ValueError(f"month must be between 1 and 12, got {month}")
    # padding days must stay inside the date range
    if not MINYEAR < year < MAXYEAR:
        raise ValueError(f"year must be between {MINYEAR + 1} and {MAXYEAR - 1}, got {year}")


def leading_days(year: int, month: int) -> int:
    """Number of cells before day 1 when weeks start on Sunday."""
    return date(year, month, 1).isoweekday() % 7


def _cell(day: date, current: bool, today: date, show_lunar: bool) -> DayCell:
    label = lunar_label(day) if show_lunar else ""
    return DayCell(
        date=day,
        is_current_month=current,
        is_today=current and day == today,
        holiday=resolve_holiday(day),
        lunar_label=label or None,
    )


def build_month_grid(
    year: int,
    month: int,
    show_lunar: bool = True,
    today: Optional[date] = None,
) -> List[DayCell]:
    check_year_month(year, month)
    today = today or date.today()

    first = date(year, month, 1)
    days_in_month = calendar.monthrange(year, month)[1]
    lead = leading_days(year, month)

    cells: List[DayCell] = []
    for i in range(lead, 0, -1):
        cells.append(_cell(first - timedelta(days=i), False, today, show_lunar))
    for i in range(days_in_month):
        cells.append(_cell(first + timedelta(days=i), True, today, show_lunar))

    last = cells[-1].date
    for i in range(1, GRID_CELLS - len(cells) + 1):
        cells.append(_cell(last + timedelta(days=i), False, today, show_lunar))
    return cells
