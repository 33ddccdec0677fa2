from datetime import date
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo

import atexit
import httpx

from .errors import SettingsHTTPError
from .logging import configure_logging, logger
from .periods import (
    FinancialPeriodOption,
    FiscalYearResult,
    FiscalYearStart,
    Granularity,
    generate_period_options,
    resolve_fiscal_year,
)
from .resources import FinancialSettings, FinancialSettingsResource
from .settings import FIRESTORE_BASE_URL, ClientSettings
from .utils.calendar import DateLike
from .utils.utils import build_url


class FinanceClient:
    """
    Thin, synchronous client for per-building financial settings held in the
    hosted document database (Firestore REST API).

    - Dict/JSON on the wire, FinancialSettings dataclass at the surface.
    - Stdlib logging (default JSON output when configured).
    - Bearer token auth, optional web API key.
    - Convenience methods feed stored settings to the period calculator.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        project_id: str | None = None,
        database: str | None = None,
        token: str | None = None,
        api_key: str | None = None,
        timezone: str | None = None,
        timeout: float = 30.0,
        retries: int = 3,
        verify_ssl: bool = True,
        settings: ClientSettings | None = None,
        log_level: str | None = None,
        log_format: str | None = None,  # "json" (default) or "text"
        log_destination: str | None = None,
    ) -> None:
        if settings:
            configure_logging(
                level=log_level or settings.log_level,
                fmt=(log_format or settings.log_format),
                destination=(log_destination or settings.log_destination),
            )
            base_url = base_url or settings.base_url
            project_id = project_id or settings.project_id
            database = database or settings.database
            token = token or settings.token
            api_key = api_key or settings.api_key
            timezone = timezone or settings.timezone
            timeout = timeout if timeout != 30.0 else settings.timeout
            retries = retries if retries != 3 else settings.retries
            verify_ssl = verify_ssl if verify_ssl is not True else settings.verify_ssl
        elif log_level or log_format or log_destination:
            configure_logging(
                level=log_level or "WARNING",
                fmt=(log_format or "json"),
                destination=log_destination,
            )

        if not project_id:
            raise ValueError("project_id is required")

        self.base_url = (base_url or FIRESTORE_BASE_URL).rstrip("/")
        self.project_id = project_id
        self.database = database or "(default)"
        self.tz = ZoneInfo(timezone or "UTC")
        self.timeout = float(timeout)
        self.retries = int(retries)
        self.verify_ssl = bool(verify_ssl)

        self._token_header = (
            (token if token.startswith("Bearer ") else f"Bearer {token}") if token else None
        )
        self._api_key = api_key

        self._client: Optional[httpx.Client] = self._build_client()

        # Best-effort cleanup at interpreter exit; safe to call multiple times.
        atexit.register(self.close)

        self._financial_settings = FinancialSettingsResource(self)

    # ---------- lifecycle ----------

    def _build_client(self) -> httpx.Client:
        headers: Dict[str, str] = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if self._token_header:
            headers["Authorization"] = self._token_header
        return httpx.Client(headers=headers, timeout=self.timeout, verify=self.verify_ssl)

    def _ensure_client(self) -> httpx.Client:
        """Recreate the httpx.Client if it was closed."""
        if self._client is None:
            logger.debug("Recreating HTTP client")
            self._client = self._build_client()
        return self._client

    def close(self) -> None:
        """Idempotent close of the underlying HTTP client."""
        client, self._client = self._client, None
        if client is not None:
            try:
                client.close()
            except Exception as e:
                logger.warning("Error during client.close(): %s", e)

    def __enter__(self) -> "FinanceClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    # -------------------------
    # Core HTTP (pass-throughs)
    # -------------------------

    def document_path(self, collection: str, doc_id: str) -> str:
        return (
            f"/v1/projects/{self.project_id}/databases/{self.database}"
            f"/documents/{collection}/{doc_id}"
        )

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        url = build_url(self.base_url, path)
        logger.info("Request %s %s params=%s", method, path, params)
        if self._api_key:
            params = {**(params or {}), "key": self._api_key}

        resp: httpx.Response | None = None
        for attempt in range(self.retries + 1):
            client = self._ensure_client()
            resp = client.request(method, url, params=params, json=json)
            if resp.status_code >= 500 and method.upper() == "GET" and attempt < self.retries:
                logger.warning(
                    "Retrying %s %s after server error %s (attempt %s)",
                    method,
                    path,
                    resp.status_code,
                    attempt + 1,
                )
                continue
            break

        assert resp is not None
        if resp.status_code // 100 != 2:
            try:
                payload = resp.json()
            except ValueError:
                payload = {"message": resp.text}
            logger.error("HTTP %s on %s: %s", resp.status_code, path, payload)
            raise SettingsHTTPError(resp.status_code, path, payload)

        return resp.json() if resp.content else {}

    def get(self, path: str, *, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self._request("GET", path, params=params)

    def patch(
        self, path: str, *, params: Dict[str, Any] | None = None, json: Dict[str, Any] | None = None
    ) -> Dict[str, Any]:
        return self._request("PATCH", path, params=params, json=json)

    # --------------------------------
    # Public convenience (delegations)
    # --------------------------------

    def get_financial_settings(self, building_id: str, *, today: Optional[date] = None) -> FinancialSettings:
        return self._financial_settings.get(building_id, today=today)

    def save_financial_settings(
        self, building_id: str, settings: FinancialSettings, user_id: str
    ) -> Dict[str, Any]:
        return self._financial_settings.save(building_id, settings, user_id)

    def get_fiscal_year_start(self, building_id: str, *, today: Optional[date] = None) -> Optional[FiscalYearStart]:
        return self.get_financial_settings(building_id, today=today).fiscal_year_start

    def resolve_fiscal_year(self, building_id: str, target_date: DateLike) -> FiscalYearResult:
        return resolve_fiscal_year(target_date, self.get_fiscal_year_start(building_id))

    def get_period_options(
        self,
        building_id: str,
        *,
        today: Optional[date] = None,
        future_count: int = 4,
        past_count: int = 0,
        granularity: Granularity = "quarter",
    ) -> List[FinancialPeriodOption]:
        """Period selector options for a building, driven by its stored fiscal year start."""
        today = today or date.today()
        fys = self.get_fiscal_year_start(building_id, today=today)
        return generate_period_options(fys, today, future_count, past_count, granularity)
