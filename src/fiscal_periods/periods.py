# fiscal_periods/periods.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, Iterable, Iterator, List, Literal, Optional, Sequence, Union

from .errors import InvalidFiscalYearStart, InvalidPeriodWindow
from .logging import logger
from .utils.calendar import (
    DateLike,
    add_months,
    add_years,
    as_date,
    day_month,
    day_month_year,
    months_between,
    short_year,
)

Granularity = Literal["quarter", "year"]
GRANULARITIES = ("quarter", "year")

# February is capped at 28 so the start exists in every year.
_MAX_START_DAY = {1: 31, 2: 28, 3: 31, 4: 30, 5: 31, 6: 30, 7: 31, 8: 31, 9: 30, 10: 31, 11: 30, 12: 31}


@dataclass(frozen=True)
class FiscalYearStart:
    """
    Organisation-wide fiscal year start (month 1..12, day of month).

    The default, FiscalYearStart(), is the calendar year (1 January).
    """

    month: int = 1
    day: int = 1

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise InvalidFiscalYearStart(self.month, self.day, "month must be 1..12")
        max_day = _MAX_START_DAY[self.month]
        if not 1 <= self.day <= max_day:
            raise InvalidFiscalYearStart(self.month, self.day, f"day must be 1..{max_day}")

    @classmethod
    def from_date(cls, value: DateLike) -> "FiscalYearStart":
        d = as_date(value)
        return cls(d.month, d.day)

    def in_year(self, year: int) -> date:
        return date(year, self.month, self.day)


CALENDAR_YEAR = FiscalYearStart()

FiscalYearStartLike = Union[FiscalYearStart, date, None]


def _coerce_start(value: FiscalYearStartLike) -> FiscalYearStart:
    if value is None:
        return CALENDAR_YEAR
    if isinstance(value, FiscalYearStart):
        return value
    return FiscalYearStart.from_date(value)


@dataclass(frozen=True)
class FiscalYearResult:
    label: str        # "FY 2024" or "FY 24/25"
    start_date: date

    @property
    def end_date(self) -> date:
        return add_years(self.start_date, 1) - timedelta(days=1)

    def contains(self, d: DateLike) -> bool:
        return self.start_date <= as_date(d) <= self.end_date


@dataclass(frozen=True)
class FinancialPeriodOption:
    value: str         # ISO yyyy-mm-dd of the period start, unique within a list
    label: str         # "Q2 FY 24/25 (Jul 1 - Sep 30, 2024)" or "FY 24/25"
    short_label: str   # "Q2 FY 24/25" or "FY 24/25"
    is_past: bool

    @property
    def start_date(self) -> date:
        return date.fromisoformat(self.value)

    def to_dict(self) -> Dict[str, object]:
        return {
            "value": self.value,
            "label": self.label,
            "shortLabel": self.short_label,
            "isPast": self.is_past,
        }


# --- Fiscal year resolution ------------------------------------------------------

def _fiscal_year_label(start: date, end: date) -> str:
    if start.year == end.year:
        return f"FY {start.year}"
    return f"FY {short_year(start.year)}/{short_year(end.year)}"


def resolve_fiscal_year(
    target_date: DateLike,
    fiscal_year_start: FiscalYearStartLike = None,
) -> FiscalYearResult:
    """
    Return the fiscal year containing `target_date`.

    The candidate start is the configured month/day in the target's calendar year;
    when the target falls before it, the fiscal year began a year earlier.

      resolve_fiscal_year(date(2024, 6, 15))                          -> FY 2024, 2024-01-01
      resolve_fiscal_year(date(2025, 2, 1), FiscalYearStart(4, 6))    -> FY 24/25, 2024-04-06
    """
    target = as_date(target_date)
    fys = _coerce_start(fiscal_year_start)

    start = fys.in_year(target.year)
    if target < start:
        start = add_years(start, -1)
    end = add_years(start, 1) - timedelta(days=1)
    return FiscalYearResult(label=_fiscal_year_label(start, end), start_date=start)


# --- Period options ----------------------------------------------------------------

def _check_count(name: str, value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidPeriodWindow(name, value)
    return value


def _year_options(
    fys: FiscalYearStart, today: date, future_count: int, past_count: int
) -> Iterator[FinancialPeriodOption]:
    for offset in range(-past_count, future_count):
        fy = resolve_fiscal_year(add_years(today, offset), fys)
        yield FinancialPeriodOption(
            value=fy.start_date.isoformat(),
            label=fy.label,
            short_label=fy.label,
            is_past=add_years(fy.start_date, 1) < today,
        )


def _quarter_options(
    fys: FiscalYearStart, today: date, future_count: int, past_count: int
) -> Iterator[FinancialPeriodOption]:
    current_fy_start = resolve_fiscal_year(today, fys).start_date
    current_quarter = months_between(today, current_fy_start) // 3
    first_offset = current_quarter - past_count

    for i in range(future_count + past_count):
        q_start = add_months(current_fy_start, (first_offset + i) * 3)
        fy = resolve_fiscal_year(q_start, fys)
        # wraps across December/January whatever month the fiscal year starts in
        months_into_fy = (q_start.month - fy.start_date.month + 12) % 12
        quarter = months_into_fy // 3 + 1
        q_next = add_months(q_start, 3)
        q_end = q_next - timedelta(days=1)

        short = f"Q{quarter} {fy.label}"
        yield FinancialPeriodOption(
            value=q_start.isoformat(),
            label=f"{short} ({day_month(q_start)} - {day_month_year(q_end)})",
            short_label=short,
            is_past=q_next < today,
        )


def _dedupe_and_sort(options: Iterable[FinancialPeriodOption]) -> List[FinancialPeriodOption]:
    """Keep one option per `value` (the last one seen wins), ordered by start date."""
    unique: Dict[str, FinancialPeriodOption] = {}
    for opt in options:
        if opt.value in unique:
            logger.debug("Duplicate period %s: replacing %r with %r", opt.value, unique[opt.value].short_label, opt.short_label)
        unique[opt.value] = opt
    return sorted(unique.values(), key=lambda o: o.start_date)


def generate_period_options(
    fiscal_year_start: FiscalYearStartLike = None,
    current_date: Optional[DateLike] = None,
    future_count: int = 4,
    past_count: int = 0,
    granularity: Granularity = "quarter",
) -> List[FinancialPeriodOption]:
    """
    Build selectable fiscal quarters or fiscal years around `current_date`.

    - granularity="year": one option per fiscal year containing current_date + i years,
      for i in [-past_count, future_count).
    - granularity="quarter": future_count + past_count consecutive quarters, the first
      one `past_count` quarters before the quarter containing current_date.

    The result has unique `value`s and is sorted ascending. Negative or non-integer
    counts raise InvalidPeriodWindow; an unknown granularity raises ValueError.
    """
    future_count = _check_count("future_count", future_count)
    past_count = _check_count("past_count", past_count)
    if granularity not in GRANULARITIES:
        raise ValueError(f"Unsupported granularity: {granularity!r}")

    today = as_date(current_date) if current_date is not None else date.today()
    fys = _coerce_start(fiscal_year_start)

    if granularity == "year":
        raw = _year_options(fys, today, future_count, past_count)
    else:
        raw = _quarter_options(fys, today, future_count, past_count)

    options = _dedupe_and_sort(raw)
    logger.debug(
        "Generated %s %s options around %s (fy start %02d-%02d, past=%s, future=%s)",
        len(options),
        granularity,
        today.isoformat(),
        fys.month,
        fys.day,
        past_count,
        future_count,
    )
    return options


# --- Helpers for consumers of option lists -----------------------------------------

def period_end(option: Union[FinancialPeriodOption, str], granularity: Granularity = "quarter") -> date:
    """Last day of the period an option (or its ISO `value`) starts."""
    value = option.value if isinstance(option, FinancialPeriodOption) else option
    start = date.fromisoformat(value)
    if granularity == "year":
        return add_years(start, 1) - timedelta(days=1)
    if granularity == "quarter":
        return add_months(start, 3) - timedelta(days=1)
    raise ValueError(f"Unsupported granularity: {granularity!r}")


def current_period_option(
    options: Sequence[FinancialPeriodOption],
    today: Optional[DateLike] = None,
    granularity: Granularity = "quarter",
) -> Optional[FinancialPeriodOption]:
    """
    The option whose period contains `today`; otherwise the latest option that is
    not yet past; otherwise None.
    """
    ref = as_date(today) if today is not None else date.today()
    for opt in options:
        if opt.start_date <= ref <= period_end(opt, granularity):
            return opt
    for opt in reversed(options):
        if not opt.is_past:
            return opt
    return None
