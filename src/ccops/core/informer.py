"""Watch-fed cache of ConfigClients.

`ConfigClientCache` is the parent accessor the reconciler reads from while the
controller runs. `ConfigClientInformer` keeps it current with a list-then-watch
loop and feeds the keys of changed ConfigClients into the work queue. Reads
from the cache are eventually consistent with the API server.
"""

from __future__ import annotations

import logging
import random
import threading
import time
from typing import Iterable, Protocol

from kubernetes import watch

from ccops.core.errors import AccessDeniedError, ExpiredError, TransportError
from ccops.core.models import ConfigClient, Request
from ccops.core.workqueue import WorkQueue

logger = logging.getLogger(__name__)

_MAX_BACKOFF_SECONDS = 30
_WATCH_TIMEOUT_SECONDS = 300


def _key_for(obj: ConfigClient) -> str:
    return Request(obj.metadata.namespace, obj.metadata.name).key


class ConfigClientCache:
    """Thread-safe in-memory store of ConfigClients keyed by `namespace/name`."""

    def __init__(self) -> None:
        self._items: dict[str, ConfigClient] = {}
        self._lock = threading.Lock()

    def get(self, namespace: str, name: str) -> ConfigClient | None:
        with self._lock:
            return self._items.get(Request(namespace, name).key)

    def upsert(self, obj: ConfigClient) -> None:
        with self._lock:
            self._items[_key_for(obj)] = obj

    def remove(self, obj: ConfigClient) -> None:
        with self._lock:
            self._items.pop(_key_for(obj), None)

    def replace(self, items: Iterable[ConfigClient]) -> set[str]:
        """Swap the whole contents; return every key seen before or after."""
        fresh = {_key_for(obj): obj for obj in items}
        with self._lock:
            touched = set(self._items) | set(fresh)
            self._items = fresh
        return touched

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._items)


class ConfigClientSource(Protocol):
    """Interface for listing and watching ConfigClients."""

    def list(self, namespace: str | None = None) -> tuple[list[ConfigClient], str | None]:
        ...

    def watch(self, watcher, namespace, resource_version, timeout_seconds):
        ...


class ConfigClientInformer:
    """List-then-watch loop that keeps a cache current and enqueues changes."""

    def __init__(
        self,
        source: ConfigClientSource,
        cache: ConfigClientCache,
        queue: WorkQueue,
        namespace: str | None = None,
        resync_seconds: int = 3600,
    ) -> None:
        self.source = source
        self.cache = cache
        self.queue = queue
        self.namespace = namespace
        self.resync_seconds = resync_seconds
        self.synced = threading.Event()
        self._resource_version: str | None = None
        self._last_list = 0.0
        self._active_watcher: watch.Watch | None = None
        self._watcher_lock = threading.Lock()

    def handle_event(self, event_type: str, obj: ConfigClient) -> None:
        """Apply one watch event to the cache and enqueue its key."""
        if obj.metadata.resource_version:
            self._resource_version = obj.metadata.resource_version

        if event_type in {"ADDED", "MODIFIED"}:
            self.cache.upsert(obj)
        elif event_type == "DELETED":
            self.cache.remove(obj)
        else:
            logger.debug("Ignoring %s event for %s", event_type, _key_for(obj))
            return

        key = _key_for(obj)
        logger.debug("ConfigClient %s %s", key, event_type.lower())
        self.queue.add(key)

    def relist(self) -> None:
        """Re-list all ConfigClients, replace the cache and enqueue every key."""
        items, resource_version = self.source.list(self.namespace)
        for key in sorted(self.cache.replace(items)):
            self.queue.add(key)
        self._resource_version = resource_version
        self._last_list = time.monotonic()
        self.synced.set()
        logger.info(
            "Listed %d ConfigClient(s) at resourceVersion %s", len(items), resource_version
        )

    def _watch_timeout(self) -> int:
        if self.resync_seconds <= 0:
            return _WATCH_TIMEOUT_SECONDS
        remaining = self.resync_seconds - (time.monotonic() - self._last_list)
        return max(1, min(_WATCH_TIMEOUT_SECONDS, int(remaining)))

    def _resync_due(self) -> bool:
        if self.resync_seconds <= 0:
            return False
        return time.monotonic() - self._last_list >= self.resync_seconds

    def request_stop(self) -> None:
        """Interrupt the open watch stream, if any."""
        with self._watcher_lock:
            watcher = self._active_watcher
        if watcher is not None:
            watcher.stop()

    def run(self, stop: threading.Event) -> None:
        """
        Run until `stop` is set.

        An expired resource version (410) triggers a re-list. Access denied
        (401/403) ends the loop, since retrying cannot fix RBAC. Other failures
        back off exponentially with jitter, capped at 30 seconds.
        """
        backoff_seconds = 1
        need_list = True

        while not stop.is_set():
            try:
                if need_list or self._resync_due():
                    self.relist()
                    need_list = False

                watcher = watch.Watch()
                with self._watcher_lock:
                    self._active_watcher = watcher
                try:
                    for event_type, obj in self.source.watch(
                        watcher,
                        self.namespace,
                        self._resource_version,
                        self._watch_timeout(),
                    ):
                        if stop.is_set():
                            break
                        self.handle_event(event_type, obj)
                finally:
                    watcher.stop()
                    with self._watcher_lock:
                        if self._active_watcher is watcher:
                            self._active_watcher = None
                backoff_seconds = 1
            except ExpiredError:
                logger.warning("Watch resource version expired, re-listing")
                need_list = True
            except AccessDeniedError:
                logger.error(
                    "Kubernetes API access denied for ConfigClients. "
                    "Check controller RBAC and service account permissions."
                )
                self.synced.clear()
                return
            except TransportError:
                logger.exception("ConfigClient list/watch failed")
                jittered = backoff_seconds * (0.5 + random.random())  # noqa: S311
                stop.wait(timeout=jittered)
                backoff_seconds = min(backoff_seconds * 2, _MAX_BACKOFF_SECONDS)
                need_list = True
