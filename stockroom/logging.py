"""
Lightweight logging setup for the inventory service.

Configures stdlib logging with timestamps and service name.
Safe for containers (logs to stdout).
"""

from __future__ import annotations

import logging
import sys

from stockroom.config import LOG_LEVEL


class _ServiceFormatter(logging.Formatter):
    """Formatter that stamps service_name onto each record."""

    def __init__(self, service_name: str, **kwargs: object) -> None:
        super().__init__(**kwargs)
        self._service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        record.service_name = getattr(record, "service_name", self._service_name)
        return super().format(record)


def setup_logging(service_name: str, level: str = LOG_LEVEL) -> None:
    """
    Configure the root logger: timestamp + service name, stdout.

    Calling it again swaps the formatter and level on the existing handlers
    instead of stacking new ones.
    """
    root = logging.getLogger()
    root.setLevel(level)
    formatter = _ServiceFormatter(
        service_name,
        fmt="%(asctime)s [%(levelname)s] %(service_name)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)
        root.addHandler(handler)
    else:
        for h in root.handlers:
            h.setFormatter(formatter)
