# src/taskflow/core/notices.py

from __future__ import annotations

import itertools
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

logger = logging.getLogger(__name__)


class NoticeLevel(StrEnum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(slots=True, frozen=True)
class Notice:
    id: int
    level: NoticeLevel
    text: str
    created_at: float
    expires_at: float | None  # None: stays until dismissed


NoticeListener = Callable[[Notice], None]


class NoticeBoard:
    """
    Transient user-facing notices (toasts).

    - each notice auto-dismisses ttl_seconds after it was posted (ttl 0 = sticky)
    - any notice can be dismissed early by id
    - active() lists newest first, at most max_items
    - listeners are called on every post (the console prints them right away)
    """

    def __init__(
        self,
        *,
        ttl_seconds: float = 3.0,
        max_items: int = 5,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = max(0.0, float(ttl_seconds))
        self._max = max(1, int(max_items))
        self._clock = clock
        self._ids = itertools.count(1)
        self._notices: list[Notice] = []
        self._listeners: list[NoticeListener] = []

    def add_listener(self, listener: NoticeListener) -> None:
        self._listeners.append(listener)

    def post(self, level: NoticeLevel, text: str) -> Notice:
        now = self._clock()
        notice = Notice(
            id=next(self._ids),
            level=level,
            text=text,
            created_at=now,
            expires_at=(now + self._ttl) if self._ttl > 0 else None,
        )
        self._notices.insert(0, notice)
        del self._notices[self._max :]
        logger.debug("Notice posted id=%s level=%s text=%r", notice.id, level.value, text)

        for listener in list(self._listeners):
            try:
                listener(notice)
            except Exception:
                logger.exception("Notice listener failed")
        return notice

    def success(self, text: str) -> Notice:
        return self.post(NoticeLevel.SUCCESS, text)

    def info(self, text: str) -> Notice:
        return self.post(NoticeLevel.INFO, text)

    def warning(self, text: str) -> Notice:
        return self.post(NoticeLevel.WARNING, text)

    def error(self, text: str) -> Notice:
        return self.post(NoticeLevel.ERROR, text)

    def active(self) -> list[Notice]:
        """Notices that have not expired or been dismissed, newest first."""
        now = self._clock()
        self._notices = [n for n in self._notices if n.expires_at is None or n.expires_at > now]
        return list(self._notices)

    def dismiss(self, notice_id: int) -> bool:
        for i, n in enumerate(self._notices):
            if n.id == notice_id:
                del self._notices[i]
                return True
        return False

    def clear(self) -> None:
        self._notices.clear()
