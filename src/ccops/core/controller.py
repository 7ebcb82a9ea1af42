"""Worker pool that drives a reconciler from a work queue.

Each worker takes one key at a time from the queue, calls the reconciler and
translates the outcome into a queue decision:

- no requeue: forget the key's failure history
- `requeue_after`: forget the failures and re-add after the delay
- `requeue`: re-add with per-key exponential backoff
- exception: log it and re-add with per-key exponential backoff

The queue guarantees that a key is never processed by two workers at once,
which is the only serialization the reconciler relies on.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor

from ccops.core.informer import ConfigClientInformer
from ccops.core.models import Request
from ccops.core.reconciler import Reconciler
from ccops.core.workqueue import WorkQueue

logger = logging.getLogger(__name__)


class Controller:
    """Runs `workers` reconcile loops against a shared queue."""

    def __init__(
        self,
        queue: WorkQueue,
        reconciler: Reconciler,
        workers: int = 2,
        name: str = "configClientController",
    ) -> None:
        if workers < 1:
            raise ValueError("workers must be >= 1")
        self.queue = queue
        self.reconciler = reconciler
        self.workers = workers
        self.name = name

    def process_next_item(self, timeout: float | None = None) -> bool:
        """
        Reconcile one key from the queue.

        Returns:
            False once the queue is shut down (or `timeout` expired without
            work), True otherwise.
        """
        key = self.queue.get(timeout=timeout)
        if key is None:
            return False

        try:
            result = self.reconciler.reconcile(Request.from_key(key))
        except Exception:  # noqa: BLE001
            logger.exception(
                "%s: reconcile of %s failed (attempt %d), requeueing",
                self.name,
                key,
                self.queue.num_requeues(key) + 1,
            )
            self.queue.add_rate_limited(key)
        else:
            if result.requeue_after and result.requeue_after > 0:
                self.queue.forget(key)
                self.queue.add_after(key, result.requeue_after)
            elif result.requeue:
                self.queue.add_rate_limited(key)
            else:
                self.queue.forget(key)
        finally:
            self.queue.done(key)
        return True

    def _worker(self) -> None:
        while self.process_next_item():
            pass

    def run(self, stop: threading.Event, informer: ConfigClientInformer | None = None) -> None:
        """
        Block until `stop` is set, running the informer and the workers.

        If the informer exits on its own (for example on access denied) the
        controller stops as well.
        """
        informer_thread = None
        if informer is not None:

            def _run_informer() -> None:
                try:
                    informer.run(stop)
                finally:
                    stop.set()

            informer_thread = threading.Thread(
                target=_run_informer, name=f"{self.name}-informer", daemon=True
            )
            informer_thread.start()

        logger.info("%s: starting %d worker(s)", self.name, self.workers)
        with ThreadPoolExecutor(
            max_workers=self.workers, thread_name_prefix=self.name
        ) as pool:
            futures = [pool.submit(self._worker) for _ in range(self.workers)]
            stop.wait()
            logger.info("%s: shutting down", self.name)
            if informer is not None:
                informer.request_stop()
            self.queue.shutdown()
            for f in futures:
                f.result()

        if informer_thread is not None:
            informer_thread.join(timeout=5)
