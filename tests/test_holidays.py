from __future__ import annotations

from datetime import date

from photocal.pipeline.holidays import HK_HOLIDAYS, HolidayLabel, holidays_in_month, resolve_holiday


def test_establishment_day() -> None:
    label = resolve_holiday(date(2025, 7, 1))
    assert label == HolidayLabel(iso_date="2025-07-01", name="HKSAR Establishment Day", is_statutory=True)


def test_miss_is_none() -> None:
    assert resolve_holiday(date(2025, 7, 2)) is None
    assert resolve_holiday(date(2019, 1, 1)) is None


def test_lookup_is_repeatable() -> None:
    day = date(2024, 12, 25)
    assert resolve_holiday(day) == resolve_holiday(day)
    assert resolve_holiday(day).name == "Christmas Day"


def test_keys_are_zero_padded() -> None:
    label = resolve_holiday(date(2026, 1, 1))
    assert label is not None
    assert label.iso_date == "2026-01-01"


def test_table_is_read_only() -> None:
    try:
        HK_HOLIDAYS["2025-07-02"] = "Not a holiday"  # type: ignore[index]
    except TypeError:
        pass
    else:
        raise AssertionError("holiday table accepted a write")
    assert resolve_holiday(date(2025, 7, 2)) is None


def test_holidays_in_month_sorted() -> None:
    labels = holidays_in_month(2025, 1)
    assert [label.iso_date for label in labels] == ["2025-01-01", "2025-01-29", "2025-01-30", "2025-01-31"]
    assert holidays_in_month(2025, 8) == []
