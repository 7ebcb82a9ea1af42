"""Core domain models for ConfigClients and the ConfigMaps they own.

These models represent Kubernetes objects in a simple, immutable form.
They are intentionally free of Kubernetes SDK types and CLI concerns so the
reconcile logic can be exercised with plain in-memory fakes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

CONFIGCLIENT_GROUP = "spring.io"
CONFIGCLIENT_VERSION = "v1"
CONFIGCLIENT_PLURAL = "configclients"
CONFIGCLIENT_KIND = "ConfigClient"


@dataclass(frozen=True)
class Request:
    """
    Identity of a ConfigClient to reconcile.

    Attributes:
        namespace: Namespace of the ConfigClient (empty for cluster scope).
        name: Name of the ConfigClient.
    """

    namespace: str
    name: str

    @property
    def key(self) -> str:
        """Return the work-queue key `<namespace>/<name>`."""
        if not self.namespace:
            return self.name
        return f"{self.namespace}/{self.name}"

    @classmethod
    def from_key(cls, key: str) -> Request:
        """Parse a `<namespace>/<name>` (or bare `<name>`) key."""
        namespace, _, name = key.strip().rpartition("/")
        if not name:
            raise ValueError(f"Invalid key '{key}' (expected namespace/name).")
        return cls(namespace=namespace, name=name)


@dataclass(frozen=True)
class Result:
    """
    Outcome of a reconcile invocation, as seen by the scheduler.

    Attributes:
        requeue: Reconcile the same key again (with rate limiting).
        requeue_after: Reconcile the same key again after this many seconds.
    """

    requeue: bool = False
    requeue_after: float | None = None


@dataclass(frozen=True)
class OwnerReference:
    """Back-reference from a child object to the object that owns it."""

    api_version: str
    kind: str
    name: str
    uid: str
    controller: bool | None = None
    block_owner_deletion: bool | None = None


@dataclass(frozen=True)
class ObjectMeta:
    """The subset of Kubernetes object metadata the controller works with."""

    name: str
    namespace: str
    uid: str | None = None
    resource_version: str | None = None
    labels: Mapping[str, str] | None = None
    annotations: Mapping[str, str] | None = None
    owner_references: tuple[OwnerReference, ...] = ()
    finalizers: tuple[str, ...] = ()


@dataclass(frozen=True)
class ConfigClient:
    """
    A ConfigClient custom resource (the parent).

    Attributes:
        metadata: Object metadata; `uid` identifies the owner of children.
        api_version: `<group>/<version>` of the resource.
        kind: Resource kind, normally `ConfigClient`.
        spec: Raw spec mapping as stored in the cluster.
    """

    metadata: ObjectMeta
    api_version: str = f"{CONFIGCLIENT_GROUP}/{CONFIGCLIENT_VERSION}"
    kind: str = CONFIGCLIENT_KIND
    spec: Mapping[str, Any] | None = None


@dataclass(frozen=True)
class ConfigMap:
    """
    A Kubernetes ConfigMap (the child).

    `data` and `metadata.labels` may be None, which compares equal to an
    empty mapping during reconciliation.
    """

    metadata: ObjectMeta
    data: Mapping[str, str] | None = None
    binary_data: Mapping[str, str] | None = None
    immutable: bool | None = None
    api_version: str = "v1"
    kind: str = "ConfigMap"


def is_owned_by(obj: ConfigMap, owner_uid: str | None) -> bool:
    """Return True if any owner reference of `obj` points at `owner_uid`."""
    if not owner_uid:
        return False
    return any(ref.uid == owner_uid for ref in obj.metadata.owner_references)
