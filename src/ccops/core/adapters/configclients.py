from __future__ import annotations

from typing import Any, Iterator, Mapping

from kubernetes import client, watch

from ccops.core.adapters.apierrors import api_call
from ccops.core.errors import NotFoundError
from ccops.core.models import (
    CONFIGCLIENT_GROUP,
    CONFIGCLIENT_PLURAL,
    CONFIGCLIENT_VERSION,
    ConfigClient,
    ObjectMeta,
    OwnerReference,
)


def config_client_from_dict(obj: Mapping[str, Any]) -> ConfigClient:
    """Convert a ConfigClient custom object (plain dict) into the core model."""
    meta = obj.get("metadata") or {}
    return ConfigClient(
        metadata=ObjectMeta(
            name=meta.get("name", ""),
            namespace=meta.get("namespace") or "",
            uid=meta.get("uid"),
            resource_version=meta.get("resourceVersion"),
            labels=meta.get("labels"),
            annotations=meta.get("annotations"),
            owner_references=tuple(
                OwnerReference(
                    api_version=r.get("apiVersion", ""),
                    kind=r.get("kind", ""),
                    name=r.get("name", ""),
                    uid=r.get("uid", ""),
                    controller=r.get("controller"),
                    block_owner_deletion=r.get("blockOwnerDeletion"),
                )
                for r in meta.get("ownerReferences") or []
            ),
            finalizers=tuple(meta.get("finalizers") or []),
        ),
        api_version=obj.get("apiVersion") or f"{CONFIGCLIENT_GROUP}/{CONFIGCLIENT_VERSION}",
        kind=obj.get("kind") or "ConfigClient",
        spec=obj.get("spec"),
    )


class ConfigClientAdapter:
    """Adapter around the CustomObjects API for `configclients.spring.io`."""

    def __init__(self, custom_api: client.CustomObjectsApi, request_timeout: int = 30) -> None:
        self.custom_api = custom_api
        self.request_timeout = request_timeout

    def get(self, namespace: str, name: str) -> ConfigClient | None:
        """Read a ConfigClient directly from the API server (None if missing)."""
        try:
            with api_call(f"get configclient {namespace}/{name}"):
                obj = self.custom_api.get_namespaced_custom_object(
                    group=CONFIGCLIENT_GROUP,
                    version=CONFIGCLIENT_VERSION,
                    namespace=namespace,
                    plural=CONFIGCLIENT_PLURAL,
                    name=name,
                    _request_timeout=self.request_timeout,
                )
        except NotFoundError:
            return None
        return config_client_from_dict(obj)

    def list(self, namespace: str | None = None) -> tuple[list[ConfigClient], str | None]:
        """
        List ConfigClients in one namespace, or in all namespaces.

        Returns:
            The ConfigClients and the list's resource version, which is where
            a subsequent watch should start.
        """
        with api_call(f"list configclients in '{namespace or '*'}'"):
            if namespace:
                result = self.custom_api.list_namespaced_custom_object(
                    group=CONFIGCLIENT_GROUP,
                    version=CONFIGCLIENT_VERSION,
                    namespace=namespace,
                    plural=CONFIGCLIENT_PLURAL,
                    _request_timeout=self.request_timeout,
                )
            else:
                result = self.custom_api.list_cluster_custom_object(
                    group=CONFIGCLIENT_GROUP,
                    version=CONFIGCLIENT_VERSION,
                    plural=CONFIGCLIENT_PLURAL,
                    _request_timeout=self.request_timeout,
                )
        items = [config_client_from_dict(item) for item in result.get("items") or []]
        resource_version = (result.get("metadata") or {}).get("resourceVersion")
        return items, resource_version

    def watch(
        self,
        watcher: watch.Watch,
        namespace: str | None,
        resource_version: str | None,
        timeout_seconds: int,
    ) -> Iterator[tuple[str, ConfigClient]]:
        """Stream `(event_type, ConfigClient)` pairs until the server closes the watch."""
        if namespace:
            func = self.custom_api.list_namespaced_custom_object
            kwargs = {"namespace": namespace}
        else:
            func = self.custom_api.list_cluster_custom_object
            kwargs = {}

        with api_call(f"watch configclients in '{namespace or '*'}'"):
            for event in watcher.stream(
                func,
                group=CONFIGCLIENT_GROUP,
                version=CONFIGCLIENT_VERSION,
                plural=CONFIGCLIENT_PLURAL,
                resource_version=resource_version,
                timeout_seconds=timeout_seconds,
                **kwargs,
            ):
                obj = event.get("object")
                if not isinstance(obj, Mapping):
                    continue
                yield str(event.get("type", "")), config_client_from_dict(obj)
