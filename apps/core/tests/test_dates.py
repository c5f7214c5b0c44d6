from datetime import date

from django.test import SimpleTestCase

from apps.core.dates import add_months, clamp_day


class AddMonthsTests(SimpleTestCase):
    def test_simple(self):
        self.assertEqual(add_months(date(2025, 3, 15), 2), date(2025, 5, 15))

    def test_clamps_to_month_end(self):
        self.assertEqual(add_months(date(2025, 12, 31), 2), date(2026, 2, 28))
        self.assertEqual(add_months(date(2023, 12, 31), 2), date(2024, 2, 29))
        self.assertEqual(add_months(date(2025, 8, 31), 1), date(2025, 9, 30))

    def test_crosses_year(self):
        self.assertEqual(add_months(date(2025, 11, 1), 12), date(2026, 11, 1))


class ClampDayTests(SimpleTestCase):
    def test_clamp(self):
        self.assertEqual(clamp_day(2025, 4, 31), date(2025, 4, 30))
        self.assertEqual(clamp_day(2025, 4, 5), date(2025, 4, 5))
