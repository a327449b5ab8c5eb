from __future__ import annotations

from datetime import date, timedelta
import unittest

from photocal.pipeline.grid import GRID_CELLS, build_month_grid, leading_days


class MonthGridTests(unittest.TestCase):
    def test_always_42_ordered_cells(self) -> None:
        for year in (2023, 2024, 2025, 2026, 2030):
            for month in range(1, 13):
                cells = build_month_grid(year, month, today=date(2000, 1, 1))
                self.assertEqual(len(cells), GRID_CELLS)
                for prev, cur in zip(cells, cells[1:]):
                    self.assertEqual(cur.date - prev.date, timedelta(days=1))
                self.assertEqual(cells[0].date.isoweekday(), 7)

    def test_current_month_flags(self) -> None:
        for month in range(1, 13):
            cells = build_month_grid(2024, month, today=date(2000, 1, 1))
            for cell in cells:
                expected = cell.date.year == 2024 and cell.date.month == month
                self.assertEqual(cell.is_current_month, expected)

    def test_january_2025(self) -> None:
        cells = build_month_grid(2025, 1, today=date(2000, 1, 1))
        self.assertEqual(cells[0].date, date(2024, 12, 29))
        self.assertFalse(cells[0].is_current_month)
        self.assertEqual(cells[3].date, date(2025, 1, 1))
        self.assertTrue(cells[3].is_current_month)
        self.assertFalse(cells[3].is_today)
        self.assertEqual(cells[-1].date, date(2025, 2, 8))
        self.assertEqual(leading_days(2025, 1), 3)

    def test_today_flag(self) -> None:
        cells = build_month_grid(2025, 1, today=date(2025, 1, 15))
        flagged = [cell for cell in cells if cell.is_today]
        self.assertEqual(len(flagged), 1)
        self.assertEqual(flagged[0].date, date(2025, 1, 15))

    def test_today_in_padding_is_not_flagged(self) -> None:
        cells = build_month_grid(2025, 1, today=date(2025, 2, 1))
        self.assertEqual(sum(cell.is_today for cell in cells), 0)

    def test_december_rolls_into_january(self) -> None:
        cells = build_month_grid(2025, 12, today=date(2000, 1, 1))
        self.assertEqual(cells[0].date, date(2025, 11, 30))
        self.assertEqual(cells[-1].date, date(2026, 1, 10))
        self.assertEqual(cells[-1].holiday, None)
        self.assertEqual(cells[32].date, date(2026, 1, 1))
        self.assertEqual(cells[32].holiday.name, "New Year's Day")

    def test_sunday_start_month_has_no_leading_days(self) -> None:
        cells = build_month_grid(2026, 2, today=date(2000, 1, 1))
        self.assertEqual(cells[0].date, date(2026, 2, 1))
        self.assertTrue(cells[0].is_current_month)

    def test_holiday_and_lunar_enrichment(self) -> None:
        cells = build_month_grid(2025, 1, today=date(2000, 1, 1))
        new_year = next(cell for cell in cells if cell.date == date(2025, 1, 29))
        self.assertEqual(new_year.holiday.name, "Lunar New Year (Day 1)")
        self.assertEqual(new_year.lunar_label, "農曆新年")
        plain = next(cell for cell in cells if cell.date == date(2025, 1, 10))
        self.assertIsNone(plain.holiday)
        self.assertIsNone(plain.lunar_label)

    def test_lunar_can_be_hidden(self) -> None:
        cells = build_month_grid(2025, 2, show_lunar=False, today=date(2000, 1, 1))
        self.assertTrue(all(cell.lunar_label is None for cell in cells))

    def test_rejects_out_of_range_input(self) -> None:
        for year, month in ((2025, 0), (2025, 13), (1, 1), (9999, 12)):
            with self.assertRaises(ValueError):
                build_month_grid(year, month)


if __name__ == "__main__":
    unittest.main()
