import threading

import pytest

from ccops.core.workqueue import ExponentialBackoff, WorkQueue


class _Clock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_add_deduplicates_queued_keys():
    q = WorkQueue()
    q.add("apps/a")
    q.add("apps/a")
    q.add("apps/b")

    assert len(q) == 2
    assert q.get(timeout=0) == "apps/a"
    assert q.get(timeout=0) == "apps/b"
    assert q.get(timeout=0) is None


def test_key_in_processing_is_not_handed_out_twice():
    q = WorkQueue()
    q.add("apps/a")
    key = q.get(timeout=0)

    q.add("apps/a")

    assert q.get(timeout=0) is None
    q.done(key)
    assert q.get(timeout=0) == "apps/a"


def test_done_without_readd_does_not_requeue():
    q = WorkQueue()
    q.add("apps/a")
    q.done(q.get(timeout=0))

    assert len(q) == 0


def test_add_after_waits_for_the_delay():
    clock = _Clock()
    q = WorkQueue(clock=clock)

    q.add_after("apps/a", 10)
    assert q.get(timeout=0) is None

    clock.now += 10
    assert q.get(timeout=0) == "apps/a"


def test_add_after_with_zero_delay_adds_immediately():
    q = WorkQueue()
    q.add_after("apps/a", 0)

    assert q.get(timeout=0) == "apps/a"


def test_rate_limited_adds_back_off_per_key():
    clock = _Clock()
    q = WorkQueue(backoff=ExponentialBackoff(base_delay=1, max_delay=4), clock=clock)

    q.add_rate_limited("apps/a")
    assert q.num_requeues("apps/a") == 1
    clock.now += 1
    assert q.get(timeout=0) == "apps/a"
    q.done("apps/a")

    q.add_rate_limited("apps/a")
    clock.now += 1
    assert q.get(timeout=0) is None
    clock.now += 1
    assert q.get(timeout=0) == "apps/a"

    q.forget("apps/a")
    assert q.num_requeues("apps/a") == 0


def test_backoff_is_capped():
    backoff = ExponentialBackoff(base_delay=1, max_delay=5)

    delays = [backoff.when("k") for _ in range(5)]

    assert delays == [1, 2, 4, 5, 5]
    assert backoff.when("other") == 1


def test_backoff_rejects_invalid_bounds():
    with pytest.raises(ValueError):
        ExponentialBackoff(base_delay=0)


def test_shutdown_wakes_blocked_getters():
    q = WorkQueue()
    results = []

    t = threading.Thread(target=lambda: results.append(q.get()))
    t.start()
    q.shutdown()
    t.join(timeout=2)

    assert not t.is_alive()
    assert results == [None]
    assert q.shutting_down is True


def test_add_after_shutdown_is_ignored():
    q = WorkQueue()
    q.shutdown()
    q.add("apps/a")

    assert len(q) == 0
