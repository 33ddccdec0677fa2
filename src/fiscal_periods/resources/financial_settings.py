from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional

from ..errors import SettingsHTTPError
from ..firestore import decode_fields, encode_value
from ..logging import logger
from ..periods import FiscalYearStart
from .base import Resource

APPLICATION_CONFIGURATION = "applicationConfiguration"
SETTINGS_FIELD = "globalFinancialSettings"


@dataclass
class FinancialSettings:
    """Per-building financial policy stored under applicationConfiguration/{building}."""

    service_charge_rate_per_sq_ft: Optional[float] = None
    payment_due_lead_days: Optional[int] = None
    financial_year_start_date: Optional[date] = None
    reserve_fund_contribution_percentage: Optional[float] = None
    is_budget_locked: bool = False
    reminder_priority_settings: Dict[str, str] = field(default_factory=dict)

    @property
    def fiscal_year_start(self) -> Optional[FiscalYearStart]:
        if self.financial_year_start_date is None:
            return None
        return FiscalYearStart.from_date(self.financial_year_start_date)

    @classmethod
    def defaults(cls, today: Optional[date] = None) -> "FinancialSettings":
        """Settings used for a building that has none stored: fiscal year from 1 April."""
        today = today or date.today()
        return cls(financial_year_start_date=date(today.year, 4, 1))

    @classmethod
    def from_document(cls, data: Dict[str, Any], *, tz=timezone.utc) -> "FinancialSettings":
        """Build from the decoded `globalFinancialSettings` map."""
        start = data.get("financialYearStartDate")
        if isinstance(start, datetime):
            start = start.astimezone(tz).date()
        rate = data.get("serviceChargeRatePerSqFt")
        reserve = data.get("reserveFundContributionPercentage")
        return cls(
            service_charge_rate_per_sq_ft=float(rate) if rate is not None else None,
            payment_due_lead_days=data.get("paymentDueLeadDays"),
            financial_year_start_date=start,
            reserve_fund_contribution_percentage=float(reserve) if reserve is not None else None,
            is_budget_locked=bool(data.get("isBudgetLocked") or False),
            reminder_priority_settings=dict(data.get("reminderPrioritySettings") or {}),
        )

    def to_document(self) -> Dict[str, Any]:
        return {
            "serviceChargeRatePerSqFt": self.service_charge_rate_per_sq_ft,
            "paymentDueLeadDays": self.payment_due_lead_days,
            "financialYearStartDate": self.financial_year_start_date,
            "reserveFundContributionPercentage": self.reserve_fund_contribution_percentage,
            "isBudgetLocked": self.is_budget_locked,
            "reminderPrioritySettings": dict(self.reminder_priority_settings),
        }


class FinancialSettingsResource(Resource):
    """
    Read/write the `globalFinancialSettings` block of a building's configuration
    document. Only that field is touched on save (update mask), so other blocks
    in the same document survive.
    """

    def get(self, building_id: str, *, today: Optional[date] = None) -> FinancialSettings:
        path = self._document(APPLICATION_CONFIGURATION, building_id)
        try:
            doc = self._get(path)
        except SettingsHTTPError as e:
            if e.status_code != 404:
                raise
            logger.info("No configuration document for building %s; using defaults", building_id)
            return FinancialSettings.defaults(today)

        fields = decode_fields(doc.get("fields") or {})
        block = fields.get(SETTINGS_FIELD)
        if not block:
            logger.info("Building %s has no %s; using defaults", building_id, SETTINGS_FIELD)
            return FinancialSettings.defaults(today)
        return FinancialSettings.from_document(block, tz=self._c.tz)

    def save(self, building_id: str, settings: FinancialSettings, user_id: str) -> Dict[str, Any]:
        """
        PATCH applicationConfiguration/{building}?updateMask.fieldPaths=globalFinancialSettings
        """
        data = settings.to_document()
        data["updatedAt"] = datetime.now(timezone.utc)
        data["updatedByUid"] = user_id
        body = {"fields": {SETTINGS_FIELD: encode_value(data, tz=self._c.tz)}}
        path = self._document(APPLICATION_CONFIGURATION, building_id)
        return self._patch(path, params={"updateMask.fieldPaths": SETTINGS_FIELD}, json=body)
