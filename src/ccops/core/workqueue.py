"""Rate-limited work queue with per-key mutual exclusion.

The queue hands out string keys to workers. A key is never processed by two
workers at the same time: adding a key that is currently being processed
marks it dirty, and it is queued again once the worker calls `done`. Keys
already waiting in the queue are deduplicated.

Delayed adds are kept in a heap and promoted by whichever worker is waiting
in `get`, so the queue needs no background thread of its own.
"""

from __future__ import annotations

import heapq
import threading
import time
from collections import deque
from typing import Callable

DEFAULT_BASE_DELAY = 0.005
DEFAULT_MAX_DELAY = 1000.0


class ExponentialBackoff:
    """Per-key exponential backoff: base * 2^failures, capped at max_delay."""

    def __init__(
        self,
        base_delay: float = DEFAULT_BASE_DELAY,
        max_delay: float = DEFAULT_MAX_DELAY,
    ) -> None:
        if base_delay <= 0 or max_delay < base_delay:
            raise ValueError("base_delay must be > 0 and <= max_delay")
        self.base_delay = base_delay
        self.max_delay = max_delay
        self._failures: dict[str, int] = {}
        self._lock = threading.Lock()

    def when(self, key: str) -> float:
        """Record a failure for `key` and return the delay before its retry."""
        with self._lock:
            failures = self._failures.get(key, 0)
            self._failures[key] = failures + 1
        # cap the exponent so huge failure counts cannot overflow the float
        return min(self.base_delay * (2 ** min(failures, 64)), self.max_delay)

    def forget(self, key: str) -> None:
        """Reset the failure count of `key`."""
        with self._lock:
            self._failures.pop(key, None)

    def num_requeues(self, key: str) -> int:
        """Return how many times `key` has failed since it was last forgotten."""
        with self._lock:
            return self._failures.get(key, 0)


class WorkQueue:
    """Thread-safe, deduplicating, delay-capable queue of keys."""

    def __init__(
        self,
        backoff: ExponentialBackoff | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.backoff = backoff or ExponentialBackoff()
        self._clock = clock
        self._queue: deque[str] = deque()
        self._dirty: set[str] = set()
        self._processing: set[str] = set()
        self._waiting: list[tuple[float, int, str]] = []
        self._waiting_seq = 0
        self._shutting_down = False
        self._cond = threading.Condition()

    def __len__(self) -> int:
        with self._cond:
            return len(self._queue)

    @property
    def shutting_down(self) -> bool:
        with self._cond:
            return self._shutting_down

    def add(self, key: str) -> None:
        """Queue `key` unless it is already queued."""
        with self._cond:
            self._add_locked(key)

    def _add_locked(self, key: str) -> None:
        if self._shutting_down or key in self._dirty:
            return
        self._dirty.add(key)
        if key in self._processing:
            return
        self._queue.append(key)
        self._cond.notify()

    def add_after(self, key: str, delay: float) -> None:
        """Queue `key` once `delay` seconds have passed."""
        if delay <= 0:
            self.add(key)
            return
        with self._cond:
            if self._shutting_down:
                return
            self._waiting_seq += 1
            heapq.heappush(self._waiting, (self._clock() + delay, self._waiting_seq, key))
            self._cond.notify()

    def add_rate_limited(self, key: str) -> None:
        """Queue `key` after its backoff delay."""
        self.add_after(key, self.backoff.when(key))

    def forget(self, key: str) -> None:
        """Stop tracking failures for `key`."""
        self.backoff.forget(key)

    def num_requeues(self, key: str) -> int:
        return self.backoff.num_requeues(key)

    def _promote_waiting_locked(self) -> float | None:
        """Move due delayed keys onto the queue; return seconds until the next one."""
        now = self._clock()
        while self._waiting and self._waiting[0][0] <= now:
            _, _, key = heapq.heappop(self._waiting)
            self._add_locked(key)
        if self._waiting:
            return self._waiting[0][0] - now
        return None

    def get(self, timeout: float | None = None) -> str | None:
        """
        Block until a key is available and mark it as being processed.

        Returns:
            The key, or None when the queue is shut down or `timeout` expires.
        """
        deadline = None if timeout is None else self._clock() + timeout
        with self._cond:
            while True:
                if self._shutting_down:
                    return None
                next_due = self._promote_waiting_locked()
                if self._queue:
                    key = self._queue.popleft()
                    self._processing.add(key)
                    self._dirty.discard(key)
                    return key

                wait_for = next_due
                if deadline is not None:
                    remaining = deadline - self._clock()
                    if remaining <= 0:
                        return None
                    wait_for = remaining if wait_for is None else min(wait_for, remaining)
                self._cond.wait(timeout=wait_for)

    def done(self, key: str) -> None:
        """Mark `key` as processed; requeue it if it was added meanwhile."""
        with self._cond:
            self._processing.discard(key)
            if key in self._dirty:
                self._queue.append(key)
                self._cond.notify()

    def shutdown(self) -> None:
        """Stop handing out keys and wake every waiting worker."""
        with self._cond:
            self._shutting_down = True
            self._waiting.clear()
            self._cond.notify_all()
