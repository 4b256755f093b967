"""ApiKeyRateLimiter — Fixed-window request limits per API key.

Counters live in an injectable ``RateLimitStore`` rather than process-wide
state, so callers can share a store across workers or give each test its
own.

Usage:
    limiter = ApiKeyRateLimiter(InMemoryRateLimitStore(), max_requests=100)

    result = limiter.check(api_key)
    if not result.allowed:
        return 429, {"reset_at": result.reset_at}
"""

from __future__ import annotations

import re
import threading
import time
from dataclasses import dataclass
from typing import Optional, Protocol

_API_KEY_RE = re.compile(r"^[a-zA-Z0-9]{32,}$")


def is_valid_api_key_format(key: str) -> bool:
    """API keys are 32+ alphanumeric characters."""
    return bool(key) and bool(_API_KEY_RE.match(key))


@dataclass
class WindowCounter:
    count: int
    reset_at: float


class RateLimitStore(Protocol):
    def get(self, key: str) -> Optional[WindowCounter]: ...

    def increment(self, key: str, window_seconds: float, now: float) -> WindowCounter: ...

    def reset(self, key: str) -> None: ...


class InMemoryRateLimitStore:
    """Thread-safe in-process store. One instance per limiter scope."""

    def __init__(self) -> None:
        self._counters: dict[str, WindowCounter] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[WindowCounter]:
        with self._lock:
            entry = self._counters.get(key)
            return WindowCounter(entry.count, entry.reset_at) if entry else None

    def increment(self, key: str, window_seconds: float, now: float) -> WindowCounter:
        """Count one request, opening a new window if the old one has lapsed.

        Lapsed windows for every key are dropped on the way.
        """
        with self._lock:
            for stale in [k for k, e in self._counters.items() if now > e.reset_at]:
                del self._counters[stale]
            entry = self._counters.get(key)
            if entry is None:
                entry = WindowCounter(count=0, reset_at=now + window_seconds)
                self._counters[key] = entry
            entry.count += 1
            return WindowCounter(entry.count, entry.reset_at)

    def reset(self, key: str) -> None:
        with self._lock:
            self._counters.pop(key, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._counters)


@dataclass
class RateCheckResult:
    """Result of a rate limit check."""
    allowed: bool
    remaining: int
    reset_at: float
    key: str = ""


class ApiKeyRateLimiter:
    def __init__(self, store: RateLimitStore, max_requests: int = 100,
                 window_seconds: float = 60.0):
        if max_requests <= 0:
            raise ValueError("max_requests must be positive")
        self.store = store
        self.max_requests = max_requests
        self.window_seconds = window_seconds

    def check(self, key: str, now: Optional[float] = None) -> RateCheckResult:
        if now is None:
            now = time.time()
        counter = self.store.increment(key, self.window_seconds, now)
        remaining = max(0, self.max_requests - counter.count)
        return RateCheckResult(
            allowed=counter.count <= self.max_requests,
            remaining=remaining,
            reset_at=counter.reset_at,
            key=key,
        )

    def reset(self, key: str) -> None:
        self.store.reset(key)
