from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_MAX_AGE_SECONDS = 300


@dataclass(frozen=True)
class SharedUrl:
    url: str
    timestamp: float


class SharedUrlMailbox:
    """One pending shared URL per user, read at most once.

    A deposit overwrites whatever was waiting. Entries older than
    ``max_age_seconds`` are discarded on read.
    """

    def __init__(
        self,
        max_age_seconds: float = DEFAULT_MAX_AGE_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.max_age_seconds = max_age_seconds
        self._clock = clock
        self._slots: Dict[str, SharedUrl] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._slots)

    def _prune(self, now: float) -> None:
        # caller holds the lock
        stale = [
            user_id
            for user_id, entry in self._slots.items()
            if now - entry.timestamp >= self.max_age_seconds
        ]
        for user_id in stale:
            del self._slots[user_id]

    def deposit(self, user_id: str, url: str) -> SharedUrl:
        entry = SharedUrl(url=url.strip(), timestamp=self._clock())
        with self._lock:
            self._prune(entry.timestamp)
            self._slots[user_id] = entry
        logger.info("share.deposit user=%s", user_id)
        return entry

    def consume(self, user_id: str) -> Optional[SharedUrl]:
        with self._lock:
            entry = self._slots.pop(user_id, None)
        if entry is None:
            return None

        age = self._clock() - entry.timestamp
        if age >= self.max_age_seconds:
            logger.info("share.expired user=%s age=%.0fs", user_id, age)
            return None
        return entry

    def clear(self, user_id: str) -> None:
        with self._lock:
            self._slots.pop(user_id, None)
