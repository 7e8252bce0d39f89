"""Transient user notifications (toasts)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List

logger = logging.getLogger(__name__)

SUCCESS = "success"
ERROR = "error"
INFO = "info"


@dataclass(frozen=True)
class Notification:
    level: str
    message: str


class Notifier:
    """Collects notifications and forwards them to any registered listener."""

    def __init__(self) -> None:
        self.history: List[Notification] = []
        self._listeners: List[Callable[[Notification], None]] = []

    def subscribe(self, listener: Callable[[Notification], None]) -> None:
        self._listeners.append(listener)

    def notify(self, level: str, message: str) -> Notification:
        note = Notification(level, message)
        self.history.append(note)
        if level == ERROR:
            logger.info("notify error: %s", message)
        for listener in self._listeners:
            listener(note)
        return note

    def success(self, message: str) -> Notification:
        return self.notify(SUCCESS, message)

    def error(self, message: str) -> Notification:
        return self.notify(ERROR, message)

    def info(self, message: str) -> Notification:
        return self.notify(INFO, message)

    @property
    def last(self) -> Notification | None:
        return self.history[-1] if self.history else None

    def messages(self, level: str | None = None) -> list[str]:
        return [n.message for n in self.history if level is None or n.level == level]

    def clear(self) -> None:
        self.history.clear()
