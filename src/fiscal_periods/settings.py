from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

LogFormat = Literal["json", "text"]

FIRESTORE_BASE_URL = "https://firestore.googleapis.com"


@dataclass
class ClientSettings:
    """
    Centralized configuration for FinanceClient.

    Pass an instance of this to FinanceClient(settings=...) to apply defaults.
    Any explicit keyword args to FinanceClient(...) will override these.
    """

    # --- Document database ---
    base_url: str = FIRESTORE_BASE_URL
    project_id: str = ""
    database: str = "(default)"
    token: Optional[str] = None    # Firebase ID token or OAuth access token, sent as Bearer
    api_key: Optional[str] = None  # Web API key, sent as ?key=

    # --- Dates ---
    timezone: str = "UTC"  # IANA zone used to turn stored timestamps into calendar dates

    # --- HTTP behavior ---
    timeout: float = 30.0
    retries: int = 3
    verify_ssl: bool = True

    # --- Logging ---
    log_level: str = "WARNING"  # "DEBUG" | "INFO" | "WARNING" | "ERROR" | "CRITICAL"
    log_format: LogFormat = "json"
    log_destination: str | None = None
    # None or "stderr" -> stderr, "stdout" -> stdout, any other string -> treated as a file path.
