"""
Failed-Attempt Limiter
Counts failed authorization attempts per key inside a rolling window
"""

import threading
import time
from typing import Callable, Dict, List


class AttemptStore:
    """
    Interface for failed-attempt counters

    The in-memory store below serves a single process; a shared store
    (e.g. Redis) can implement the same three methods for several instances.
    """

    def is_limited(self, key: str) -> bool:
        raise NotImplementedError

    def record_failure(self, key: str) -> None:
        raise NotImplementedError

    def clear(self, key: str) -> None:
        raise NotImplementedError


class InMemoryAttemptStore(AttemptStore):
    """Process-wide map of key -> failure timestamps, pruned lazily"""

    def __init__(
        self,
        window_seconds: float,
        max_attempts: int,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.window_seconds = window_seconds
        self.max_attempts = max_attempts
        self._clock = clock
        self._attempts: Dict[str, List[float]] = {}
        self._lock = threading.Lock()

    def _recent(self, key: str) -> List[float]:
        now = self._clock()
        recent = [ts for ts in self._attempts.get(key, []) if now - ts < self.window_seconds]
        if recent:
            self._attempts[key] = recent
        else:
            self._attempts.pop(key, None)
        return recent

    def is_limited(self, key: str) -> bool:
        with self._lock:
            return len(self._recent(key)) >= self.max_attempts

    def record_failure(self, key: str) -> None:
        with self._lock:
            recent = self._recent(key)
            recent.append(self._clock())
            self._attempts[key] = recent

    def clear(self, key: str) -> None:
        with self._lock:
            self._attempts.pop(key, None)

    def attempts(self, key: str) -> int:
        with self._lock:
            return len(self._recent(key))


def limiter_key(bucket: str, client: str) -> str:
    return f"{bucket}:{client}"
