from .financial_settings import FinancialSettings, FinancialSettingsResource

__all__ = [
    "FinancialSettings",
    "FinancialSettingsResource",
]
