import os
from datetime import date

import pytest

from fiscal_periods import FinanceClient, FinancialSettings
from fiscal_periods.settings import ClientSettings

pytestmark = pytest.mark.integration

PROJECT_ID = os.environ.get("FISCAL_PERIODS_PROJECT_ID")
TOKEN = os.environ.get("FISCAL_PERIODS_TOKEN")
API_KEY = os.environ.get("FISCAL_PERIODS_API_KEY")
TIMEZONE = os.environ.get("FISCAL_PERIODS_TIMEZONE", "UTC")
BUILDING_ID = os.environ.get("TEST_BUILDING_ID", "test-building")
ALLOW_MUTATIONS = os.environ.get("FISCAL_PERIODS_ALLOW_MUTATIONS", "").strip().lower() in {"1", "true", "yes"}


def _client() -> FinanceClient:
    cfg = ClientSettings(
        project_id=PROJECT_ID,
        token=TOKEN,
        api_key=API_KEY,
        timezone=TIMEZONE,
        log_level="INFO",
        log_destination="stdout",
    )
    return FinanceClient(settings=cfg)


@pytest.mark.skipif(not PROJECT_ID, reason="FISCAL_PERIODS_PROJECT_ID not set")
def test_read_settings_and_options():
    c = _client()

    s = c.get_financial_settings(BUILDING_ID)
    assert isinstance(s, FinancialSettings)

    opts = c.get_period_options(BUILDING_ID, future_count=4, past_count=1)
    assert 0 < len(opts) <= 5
    assert len({o.value for o in opts}) == len(opts)


@pytest.mark.skipif(not (PROJECT_ID and ALLOW_MUTATIONS), reason="mutations not enabled")
def test_save_then_read_back():
    c = _client()
    original = c.get_financial_settings(BUILDING_ID)

    updated = FinancialSettings(
        service_charge_rate_per_sq_ft=original.service_charge_rate_per_sq_ft,
        payment_due_lead_days=original.payment_due_lead_days,
        financial_year_start_date=date(2024, 4, 6),
        reserve_fund_contribution_percentage=original.reserve_fund_contribution_percentage,
        is_budget_locked=original.is_budget_locked,
        reminder_priority_settings=original.reminder_priority_settings,
    )
    try:
        c.save_financial_settings(BUILDING_ID, updated, "integration-test")
        assert c.get_financial_settings(BUILDING_ID).financial_year_start_date == date(2024, 4, 6)
    finally:
        c.save_financial_settings(BUILDING_ID, original, "integration-test")
