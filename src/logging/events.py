"""Deployment event logging.

Each record carries the run id and the pipeline step it was emitted from.
Output is human-readable text by default; LOG_FORMAT=json switches to
single-line JSON objects for log collectors. Optional file output via
LOG_FILE.
"""

import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone

from src.config.settings import get_settings

LOGGER_NAME = "deploy"

# Run-scoped context for correlating log entries
run_id_var: ContextVar[str] = ContextVar("run_id", default="")
step_var: ContextVar[str] = ContextVar("step", default="")


class JSONFormatter(logging.Formatter):
    """One JSON object per record, tagged with the run id and pipeline step.

    Fields passed as `extra={"audit_data": {...}}` become top-level keys.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "run_id": run_id_var.get(""),
            "step": step_var.get(""),
            "message": record.getMessage(),
        }
        entry.update(getattr(record, "audit_data", {}))
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """`[LEVEL] step: message key=value ...` lines for a terminal."""

    def format(self, record: logging.LogRecord) -> str:
        step = step_var.get("")
        prefix = f"[{record.levelname}]"
        if step:
            prefix = f"{prefix} {step}:"
        line = f"{prefix} {record.getMessage()}"
        audit_data = getattr(record, "audit_data", None)
        if audit_data:
            fields = " ".join(f"{key}={value}" for key, value in audit_data.items())
            line = f"{line} {fields}"
        return line


def _console_formatter(log_format: str) -> logging.Formatter:
    if log_format.lower() == "json":
        return JSONFormatter()
    return TextFormatter()


def setup_logging() -> None:
    """Attach the console and run-log handlers to the deploy logger.

    The console follows LOG_FORMAT for whoever is watching the run. LOG_FILE
    keeps a JSON-lines record of the whole run, one object per step event,
    so it ignores LOG_FORMAT and can be searched by run_id afterwards.
    Calling this again replaces the previous handlers.
    """
    settings = get_settings()
    logger = get_logger()
    logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(_console_formatter(settings.log_format))
    logger.addHandler(console)

    if settings.log_file:
        run_log = logging.FileHandler(settings.log_file, encoding="utf-8")
        run_log.setFormatter(JSONFormatter())
        logger.addHandler(run_log)

    # Step output goes only to the handlers above
    logger.propagate = False


def get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


def generate_run_id() -> str:
    return uuid.uuid4().hex[:12]


class StepTimer:
    """Context manager that marks the current pipeline step and times it."""

    def __init__(self, step: str):
        self.step = step
        self.start_time: float = 0
        self.elapsed_s: float = 0
        self._token = None

    def __enter__(self):
        self._token = step_var.set(self.step)
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, *args):
        self.elapsed_s = round(time.perf_counter() - self.start_time, 2)
        step_var.reset(self._token)
