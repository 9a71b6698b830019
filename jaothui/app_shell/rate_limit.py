"""
Per-client request throttling for the auth and upload endpoints.

Each key keeps a deque of attempt timestamps; timestamps older than the
window fall off the left before a new attempt is counted. Keys whose window
has emptied are deleted, and a periodic sweep drops keys that never came
back. State lives in the process, so a restart clears every window.
"""

from collections import deque
from datetime import datetime, timedelta
from threading import Lock
from typing import Protocol

from jaothui.adapters.clock import SystemClock
from jaothui.rules.models import RateLimitRules, RateLimitWindow


class TimePort(Protocol):
    def now_utc(self) -> datetime: ...


class RateLimiter:
    def __init__(self, rules: RateLimitRules, time_port: TimePort | None = None):
        self.rules = rules
        self._time = time_port if time_port is not None else SystemClock()
        self._attempts: dict[str, deque[datetime]] = {}
        self._windows: dict[str, int] = {}
        self._last_sweep: datetime | None = None
        self._lock = Lock()

    def __len__(self) -> int:
        """Number of keys currently holding attempts."""
        with self._lock:
            return len(self._attempts)

    def _trim(self, key: str, now: datetime) -> deque[datetime] | None:
        attempts = self._attempts.get(key)
        if attempts is None:
            return None
        cutoff = now - timedelta(seconds=self._windows[key])
        while attempts and attempts[0] <= cutoff:
            attempts.popleft()
        if not attempts:
            del self._attempts[key]
            del self._windows[key]
            return None
        return attempts

    def _sweep(self, now: datetime) -> None:
        interval = timedelta(seconds=self.rules.sweep_interval_seconds)
        if self._last_sweep is not None and now - self._last_sweep < interval:
            return
        self._last_sweep = now
        for key in list(self._attempts):
            self._trim(key, now)

    def allow_request(self, key: str, window: int, limit: int) -> bool:
        """Record an attempt for `key` and report whether it fits in the window."""
        if limit <= 0:
            return False

        now = self._time.now_utc()
        with self._lock:
            self._sweep(now)
            attempts = self._trim(key, now)
            if attempts is not None and len(attempts) >= limit:
                return False
            if attempts is None:
                attempts = self._attempts[key] = deque()
                self._windows[key] = window
            attempts.append(now)
            return True

    def _check(self, scope: str, subject: str, window: RateLimitWindow) -> bool:
        return self.allow_request(f"{scope}:{subject}", window.window_seconds, window.max_attempts)

    def check_auth(self, ip: str) -> bool:
        """Login and registration share one window per client IP."""
        return self._check("auth", ip, self.rules.auth)

    def check_upload(self, profile_id: str) -> bool:
        return self._check("upload", profile_id, self.rules.upload)

    def reset(self) -> None:
        with self._lock:
            self._attempts.clear()
            self._windows.clear()
            self._last_sweep = None
