from .client import FinanceClient
from .errors import (
    FiscalPeriodError,
    InvalidFiscalYearStart,
    InvalidPeriodWindow,
    SettingsHTTPError,
)
from .logging import configure_logging
from .periods import (
    CALENDAR_YEAR,
    FinancialPeriodOption,
    FiscalYearResult,
    FiscalYearStart,
    current_period_option,
    generate_period_options,
    period_end,
    resolve_fiscal_year,
)
from .resources import FinancialSettings
from .settings import ClientSettings

__all__ = [
    "FinanceClient",
    "ClientSettings",
    "FinancialSettings",
    "FiscalYearStart",
    "CALENDAR_YEAR",
    "FiscalYearResult",
    "FinancialPeriodOption",
    "resolve_fiscal_year",
    "generate_period_options",
    "period_end",
    "current_period_option",
    "configure_logging",
    "FiscalPeriodError",
    "InvalidFiscalYearStart",
    "InvalidPeriodWindow",
    "SettingsHTTPError",
]
