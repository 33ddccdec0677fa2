class FiscalPeriodError(ValueError):
    """Invalid input to the financial period calculator."""


class InvalidFiscalYearStart(FiscalPeriodError):
    def __init__(self, month: int, day: int, reason: str):
        self.month = month
        self.day = day
        super().__init__(f"Invalid fiscal year start month={month} day={day}: {reason}")


class InvalidPeriodWindow(FiscalPeriodError):
    def __init__(self, name: str, value: object):
        self.name = name
        self.value = value
        super().__init__(f"{name} must be a non-negative integer, got {value!r}")


class SettingsHTTPError(RuntimeError):
    def __init__(self, status_code: int, path: str, payload: dict | None):
        self.status_code = status_code
        self.path = path
        self.payload = payload or {}
        msg = _format_error(self.payload) or f"HTTP {status_code} on {path}"
        super().__init__(msg)


def _format_error(payload: dict) -> str:
    # Google APIs wrap failures as {"error": {"code", "status", "message", "details"}};
    # some proxies return a bare list of such envelopes.
    if isinstance(payload, list):
        payload = payload[0] if payload else {}
    err = payload.get("error") if isinstance(payload.get("error"), dict) else payload
    status = err.get("status") or err.get("code") or "UNKNOWN"
    message = err.get("message")
    violations = [
        f"{v.get('field', '?')}: {v.get('description') or '?'}"
        for d in err.get("details") or []
        for v in d.get("fieldViolations") or []
    ]
    if violations:
        return f"{status}: {'; '.join(violations)}"
    if message:
        return f"{status}: {message}"
    return "" if status == "UNKNOWN" else str(status)
