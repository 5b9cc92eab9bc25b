"""Logging configuration for the harness entrypoints.

The report contract (header, diff lines, sample table, DETECTED line) is
printed, never logged. Logging is for progress/diagnostics only and goes to
stderr, off by default (WARNING) so the console contract stays byte-stable.

Public API:
    setup_logging(log_level="INFO", json=False)
    get_logger(name)

Format examples:
    Human: 2026-10-19T13:45:12.345Z | INFO     | pipeline.run | scenario=random n=8
    JSON: {"t":"2026-10-19T13:45:12.345+00:00","lvl":"INFO","name":"pipeline.run","msg":"..."}

Idempotent: repeated setup_logging() calls replace the handler installed by
the previous call instead of stacking a new one.
"""

from __future__ import annotations

import json as _json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Optional


_installed: Optional[logging.Handler] = None


class HarnessFormatter(logging.Formatter):
    """Human-readable or JSON-lines formatter with UTC timestamps."""

    def __init__(self, fmt_mode: str = "human") -> None:
        super().__init__()
        if fmt_mode not in ("human", "json"):
            raise ValueError(f"unknown log format: {fmt_mode!r} (use 'human' or 'json')")
        self.fmt_mode = fmt_mode

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc)
        if self.fmt_mode == "json":
            payload = {
                "t": ts.isoformat(),
                "lvl": record.levelname,
                "name": record.name,
                "pid": os.getpid(),
                "msg": record.getMessage(),
            }
            if record.exc_info:
                payload["exc"] = self.formatException(record.exc_info)
            return _json.dumps(payload)

        ts_str = ts.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"
        line = f"{ts_str} | {record.levelname:8s} | {record.name} | {record.getMessage()}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(log_level: str = "INFO", *, json: bool = False, stream=None) -> logging.Handler:
    """Install one stderr handler on the root logger and set its level.

    Parameters
    ----------
    log_level : str
        "DEBUG", "INFO", "WARNING", "ERROR" or "CRITICAL"
    json : bool
        Emit JSON lines instead of the human format
    stream : file-like, optional
        Defaults to the current ``sys.stderr``

    Returns
    -------
    logging.Handler
        The handler that was installed
    """
    global _installed

    level = getattr(logging, str(log_level).upper(), None)
    if not isinstance(level, int):
        raise ValueError(f"unknown log level: {log_level!r}")

    root = logging.getLogger()
    if _installed is not None:
        root.removeHandler(_installed)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(HarnessFormatter("json" if json else "human"))
    root.addHandler(handler)
    root.setLevel(level)
    logging.captureWarnings(True)

    _installed = handler
    return handler


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


__all__ = ["HarnessFormatter", "setup_logging", "get_logger"]
