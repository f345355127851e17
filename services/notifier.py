"""
services.notifier - Collects user-facing messages produced by an import.

The API returns the collected messages in its JSON response; every
message is also written to the log.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class Notifier:

    def __init__(self):
        self.messages: list[dict] = []

    def _add(self, level: str, message: str, log_level: int):
        self.messages.append({"level": level, "message": message})
        logger.log(log_level, message)

    def success(self, message: str):
        self._add("success", message, logging.INFO)

    def info(self, message: str):
        self._add("info", message, logging.INFO)

    def warning(self, message: str):
        self._add("warning", message, logging.WARNING)
