from datetime import date, datetime, timedelta

import pytest

from fiscal_periods import (
    FiscalYearStart,
    InvalidFiscalYearStart,
    resolve_fiscal_year,
)
from fiscal_periods.utils.calendar import add_years

STARTS = [
    FiscalYearStart(),
    FiscalYearStart(4, 6),
    FiscalYearStart(7, 1),
    FiscalYearStart(10, 31),
    FiscalYearStart(2, 28),
    FiscalYearStart(12, 31),
]


def _dates(start: date, end: date, step: int = 5):
    d = start
    while d <= end:
        yield d
        d += timedelta(days=step)


def test_calendar_year_default():
    fy = resolve_fiscal_year(date(2024, 6, 15), None)
    assert fy.label == "FY 2024"
    assert fy.start_date == date(2024, 1, 1)
    assert fy.end_date == date(2024, 12, 31)


def test_april_sixth_start_before_boundary():
    fy = resolve_fiscal_year(date(2025, 2, 1), FiscalYearStart(4, 6))
    assert fy.start_date == date(2024, 4, 6)
    assert fy.label == "FY 24/25"
    assert fy.end_date == date(2025, 4, 5)


def test_boundary_date_equal_to_start_is_not_shifted():
    fy = resolve_fiscal_year(date(2024, 4, 6), FiscalYearStart(4, 6))
    assert fy.start_date == date(2024, 4, 6)
    assert fy.label == "FY 24/25"

    prev = resolve_fiscal_year(date(2024, 4, 5), FiscalYearStart(4, 6))
    assert prev.start_date == date(2023, 4, 6)
    assert prev.label == "FY 23/24"


def test_accepts_stored_date_and_datetime():
    fy = resolve_fiscal_year(datetime(2024, 7, 15, 23, 59), date(2019, 4, 1))
    assert fy.start_date == date(2024, 4, 1)
    assert fy.label == "FY 24/25"


def test_label_pads_two_digit_years():
    fy = resolve_fiscal_year(date(2005, 3, 1), FiscalYearStart(7, 1))
    assert fy.label == "FY 04/05"


@pytest.mark.parametrize("fys", STARTS, ids=lambda s: f"{s.month:02d}-{s.day:02d}")
def test_fiscal_year_contains_target(fys):
    for d in _dates(date(2023, 1, 1), date(2025, 12, 31)):
        fy = resolve_fiscal_year(d, fys)
        assert fy.start_date <= d < add_years(fy.start_date, 1)
        assert fy.contains(d)
        assert (fy.start_date.month, fy.start_date.day) == (fys.month, fys.day)


def test_leap_day_targets():
    for fys in STARTS:
        fy = resolve_fiscal_year(date(2024, 2, 29), fys)
        assert fy.start_date <= date(2024, 2, 29) < add_years(fy.start_date, 1)


def test_resolution_is_idempotent():
    fys = FiscalYearStart(10, 31)
    assert resolve_fiscal_year(date(2024, 11, 2), fys) == resolve_fiscal_year(date(2024, 11, 2), fys)


@pytest.mark.parametrize(
    "month, day",
    [(0, 1), (13, 1), (2, 29), (2, 30), (4, 31), (1, 0), (1, 32)],
)
def test_invalid_fiscal_year_start_rejected(month, day):
    with pytest.raises(InvalidFiscalYearStart):
        FiscalYearStart(month, day)


def test_fiscal_year_start_from_date():
    assert FiscalYearStart.from_date(date(2024, 4, 6)) == FiscalYearStart(4, 6)
    with pytest.raises(ValueError):
        FiscalYearStart.from_date(date(2024, 2, 29))
