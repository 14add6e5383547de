"""Deadline tokens that bound blocking driver calls."""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Iterator

import pymongo

from mongo_probe.errors import ProbeFailure


class Deadline:
    """Absolute expiry on the monotonic clock, released on context exit.

    Use it as a context manager so it is released on every exit path. After
    release, or once the expiry has passed, ``remaining()`` is zero and
    ``scope()`` refuses to start new work.
    """

    def __init__(self, timeout: float, *, clock=time.monotonic) -> None:
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        self.timeout = timeout
        self._clock = clock
        self._expires_at = clock() + timeout
        self._released = False

    def __enter__(self) -> Deadline:
        return self

    def __exit__(self, *exc_info) -> None:
        self.release()

    def release(self) -> None:
        self._released = True

    @property
    def released(self) -> bool:
        return self._released

    @property
    def expired(self) -> bool:
        return self.remaining() == 0

    def remaining(self) -> float:
        """Seconds left before expiry, or zero when released or past due."""
        if self._released:
            return 0.0
        return max(0.0, self._expires_at - self._clock())

    def remaining_ms(self) -> int:
        return max(1, int(self.remaining() * 1000))

    def reason(self) -> str:
        if self._released:
            return "deadline released"
        return f"deadline of {self.timeout:g}s exceeded"

    @contextmanager
    def scope(self, error: type[ProbeFailure]) -> Iterator[float]:
        """Run pymongo operations under the remaining budget.

        Raises ``error`` straight away when no time is left.
        """
        remaining = self.remaining()
        if remaining == 0:
            raise error(self.reason())
        with pymongo.timeout(remaining):
            yield remaining
