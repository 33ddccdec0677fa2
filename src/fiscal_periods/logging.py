from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime
from typing import Optional

TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created).astimezone().isoformat(timespec="seconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.levelno <= logging.DEBUG:
            payload["file"] = f"{os.path.basename(record.pathname)}:{record.lineno}"
            payload["func"] = record.funcName
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


logger = logging.getLogger("fiscal_periods")
# Handlers are attached only by configure_logging.
logger.propagate = False


def _dest_to_handler(destination: Optional[str]) -> logging.Handler:
    """
    - None or "stderr" -> StreamHandler(sys.stderr)
    - "stdout" -> StreamHandler(sys.stdout)
    - anything else -> FileHandler(path)
    """
    if destination in (None, "stderr"):
        return logging.StreamHandler(stream=sys.stderr)
    if destination == "stdout":
        return logging.StreamHandler(stream=sys.stdout)
    return logging.FileHandler(destination, encoding="utf-8")


def _formatter_for(fmt: str) -> logging.Formatter:
    if fmt == "text":
        return logging.Formatter(TEXT_FORMAT)
    return JsonFormatter()


def configure_logging(
    *,
    level: str = "WARNING",
    fmt: str = "json",
    destination: Optional[str] = None,
) -> None:
    """
    Configure the `fiscal_periods` logger. Each call replaces the previous handler,
    so it is safe to call repeatedly (e.g. once per client).
    """
    logger.setLevel(getattr(logging, str(level).upper(), logging.WARNING))

    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    handler = _dest_to_handler(destination)
    handler.setFormatter(_formatter_for(fmt))
    logger.addHandler(handler)
