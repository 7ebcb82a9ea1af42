"""Reconciliation of ConfigClients against the ConfigMaps they own.

The reconciler is synchronous and keeps no state between invocations. It
depends on two injected accessors: a read-only (usually cache-backed) view of
ConfigClients and a namespaced ConfigMap collection. Serializing invocations
per key is the caller's job; see `ccops.core.workqueue`.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Mapping, Protocol

from ccops.core.desired import desired_config_map, owner_reference_for, with_owner
from ccops.core.errors import InvariantViolation, NotFoundError
from ccops.core.models import ConfigClient, ConfigMap, Request, Result, is_owned_by

logger = logging.getLogger(__name__)


class ParentAccessor(Protocol):
    """Interface for looking up ConfigClients."""

    def get(self, namespace: str, name: str) -> ConfigClient | None:
        """Return the ConfigClient, or None if it does not exist."""
        ...


class ChildAccessor(Protocol):
    """Interface for the namespaced ConfigMap collection."""

    def list(self, namespace: str) -> list[ConfigMap]:
        """Return all ConfigMaps in a namespace."""
        ...

    def create(self, obj: ConfigMap) -> ConfigMap:
        """Create a ConfigMap and return the stored object."""
        ...

    def update(self, obj: ConfigMap) -> ConfigMap:
        """Replace a ConfigMap and return the stored object."""
        ...

    def delete(self, namespace: str, name: str) -> None:
        """Delete a ConfigMap by namespace and name."""
        ...


class Reconciler(Protocol):
    """Anything the controller can dispatch requests to."""

    def reconcile(self, request: Request) -> Result:
        """Converge the object identified by `request`."""
        ...


def find_owned(configmaps: ChildAccessor, namespace: str, owner_uid: str) -> list[ConfigMap]:
    """Return the ConfigMaps in `namespace` owned by the object with `owner_uid`."""
    owned: list[ConfigMap] = []
    for item in configmaps.list(namespace):
        logger.debug("  configmap %s", item.metadata.name)
        if is_owned_by(item, owner_uid):
            logger.debug("    owned by %s", owner_uid)
            owned.append(item)
    return owned


def map_equals(a: Mapping[str, str] | None, b: Mapping[str, str] | None) -> bool:
    """Compare two mappings, treating None as an empty mapping."""
    return dict(a or {}) == dict(b or {})


def semantic_equals(desired: ConfigMap | None, actual: ConfigMap | None) -> bool:
    """
    Decide whether `actual` already matches `desired`.

    Only labels and data are compared; everything else on the actual object
    is owned by the server or by other writers.
    """
    if desired is None or actual is None:
        return desired is None and actual is None
    return map_equals(desired.metadata.labels, actual.metadata.labels) and map_equals(
        desired.data, actual.data
    )


def merge_before_update(actual: ConfigMap, desired: ConfigMap) -> ConfigMap:
    """Return `actual` with its labels and data taken from `desired`."""
    metadata = replace(actual.metadata, labels=desired.metadata.labels)
    return replace(actual, metadata=metadata, data=desired.data)


def harmonize_immutable_fields(actual: ConfigMap, desired: ConfigMap) -> ConfigMap:
    """
    Copy server-defaulted or immutable fields from `actual` onto `desired`.

    No such fields are compared today, so `desired` is returned unchanged.
    """
    return desired


class ConfigClientReconciler:
    """
    Keep exactly one ConfigMap per ConfigClient, owned via an owner reference.

    Every non-fatal path returns `Result()` (no requeue). Adapter failures
    (conflicts, transport errors) propagate to the caller, which is expected
    to requeue with backoff.
    """

    def __init__(
        self,
        parents: ParentAccessor,
        configmaps: ChildAccessor,
        builder: Callable[[ConfigClient], ConfigMap | None] = desired_config_map,
    ) -> None:
        self.parents = parents
        self.configmaps = configmaps
        self.builder = builder

    def reconcile(self, request: Request) -> Result:
        """
        Converge the ConfigMap owned by the ConfigClient in `request`.

        Args:
            request: Namespace and name of the ConfigClient.

        Returns:
            Result without requeue once the child matches the desired state.

        Raises:
            ConflictError, TransportError: When a ConfigMap call fails.
        """
        parent = self.parents.get(request.namespace, request.name)
        if parent is None:
            logger.debug("ConfigClient %s is gone, nothing to do", request.key)
            return Result()

        logger.info("reconciling %s", request.key)
        namespace = parent.metadata.namespace
        candidates = find_owned(self.configmaps, namespace, parent.metadata.uid or "")

        actual: ConfigMap | None = None
        if len(candidates) == 1:
            actual = candidates[0]
        elif len(candidates) > 1:
            logger.warning(
                "ConfigClient %s owns %d ConfigMaps, deleting all of them",
                request.key,
                len(candidates),
            )
            for item in candidates:
                self._delete(item)

        desired = self.builder(parent)
        if desired is None:
            if actual is not None:
                self._delete(actual)
            return Result()

        desired = with_owner(desired, owner_reference_for(parent))

        if actual is None:
            logger.info(
                "creating ConfigMap %s/%s",
                desired.metadata.namespace,
                desired.metadata.name,
            )
            actual = self.configmaps.create(desired)

        desired = harmonize_immutable_fields(actual, desired)
        if semantic_equals(desired, actual):
            return Result()

        logger.info(
            "updating ConfigMap %s/%s",
            actual.metadata.namespace,
            actual.metadata.name,
        )
        self.configmaps.update(merge_before_update(actual, desired))
        return Result()

    def _delete(self, obj: ConfigMap | None) -> None:
        """Delete a ConfigMap; an already-deleted object counts as success."""
        if obj is None:
            raise InvariantViolation("Refusing to delete an absent ConfigMap.")
        namespace, name = obj.metadata.namespace, obj.metadata.name
        logger.info("deleting ConfigMap %s/%s", namespace, name)
        try:
            self.configmaps.delete(namespace, name)
        except NotFoundError:
            logger.debug("ConfigMap %s/%s already deleted", namespace, name)
