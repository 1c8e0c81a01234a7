from __future__ import annotations

import logging
import sys


class _ThirdPartyNoiseFilter(logging.Filter):
    """
    Keep taskboard logs at the configured level, but only let other
    libraries (pymongo heartbeats, uvicorn access lines) through at WARNING+.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith("taskboard"):
            return True
        if record.name.startswith("uvicorn.error"):
            return record.levelno >= logging.INFO
        return record.levelno >= logging.WARNING


def setup_logging(level: int = logging.INFO) -> None:
    """
    Configure the root logger with one stderr handler.

    Call this once, before the first log line. Calling it again replaces the
    handler instead of duplicating it.
    """
    root = logging.getLogger()
    root.setLevel(level)

    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(fmt)
    handler.addFilter(_ThirdPartyNoiseFilter())
    root.addHandler(handler)

    logging.captureWarnings(True)
