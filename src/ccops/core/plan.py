"""Dry-run planning of a reconcile.

`RecordingConfigMaps` wraps a real ConfigMap accessor: reads go through, writes
are recorded instead of applied. Running the normal reconciler on top of it
yields the list of mutations a real run would perform.
"""

from __future__ import annotations

from dataclasses import dataclass

from ccops.core.models import ConfigMap, Request
from ccops.core.reconciler import ChildAccessor, ConfigClientReconciler, ParentAccessor


@dataclass(frozen=True)
class PlannedAction:
    """A single ConfigMap mutation a reconcile would perform."""

    verb: str
    namespace: str
    name: str


class RecordingConfigMaps:
    """ConfigMap accessor that records mutations without applying them."""

    def __init__(self, inner: ChildAccessor) -> None:
        self.inner = inner
        self.actions: list[PlannedAction] = []

    def list(self, namespace: str) -> list[ConfigMap]:
        return self.inner.list(namespace)

    def create(self, obj: ConfigMap) -> ConfigMap:
        self.actions.append(
            PlannedAction("create", obj.metadata.namespace, obj.metadata.name)
        )
        return obj

    def update(self, obj: ConfigMap) -> ConfigMap:
        self.actions.append(
            PlannedAction("update", obj.metadata.namespace, obj.metadata.name)
        )
        return obj

    def delete(self, namespace: str, name: str) -> None:
        self.actions.append(PlannedAction("delete", namespace, name))


def plan_reconcile(
    parents: ParentAccessor,
    configmaps: ChildAccessor,
    request: Request,
) -> list[PlannedAction]:
    """Return the mutations `reconcile(request)` would apply, without applying them."""
    recorder = RecordingConfigMaps(configmaps)
    ConfigClientReconciler(parents, recorder).reconcile(request)
    return recorder.actions
