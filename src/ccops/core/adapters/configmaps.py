from __future__ import annotations

from kubernetes import client

from ccops.core.adapters.apierrors import api_call
from ccops.core.models import ConfigMap, ObjectMeta, OwnerReference


def owner_reference_from_sdk(ref) -> OwnerReference:
    """Convert a V1OwnerReference into the core model."""
    return OwnerReference(
        api_version=ref.api_version,
        kind=ref.kind,
        name=ref.name,
        uid=ref.uid,
        controller=ref.controller,
        block_owner_deletion=ref.block_owner_deletion,
    )


def metadata_from_sdk(meta) -> ObjectMeta:
    """Convert a V1ObjectMeta into the core model."""
    return ObjectMeta(
        name=meta.name,
        namespace=meta.namespace or "",
        uid=meta.uid,
        resource_version=meta.resource_version,
        labels=meta.labels,
        annotations=meta.annotations,
        owner_references=tuple(
            owner_reference_from_sdk(r) for r in (meta.owner_references or [])
        ),
        finalizers=tuple(meta.finalizers or []),
    )


def metadata_to_sdk(meta: ObjectMeta) -> client.V1ObjectMeta:
    """Convert core metadata into a V1ObjectMeta request body."""
    return client.V1ObjectMeta(
        name=meta.name,
        namespace=meta.namespace or None,
        uid=meta.uid,
        resource_version=meta.resource_version,
        labels=dict(meta.labels) if meta.labels is not None else None,
        annotations=dict(meta.annotations) if meta.annotations is not None else None,
        owner_references=[
            client.V1OwnerReference(
                api_version=r.api_version,
                kind=r.kind,
                name=r.name,
                uid=r.uid,
                controller=r.controller,
                block_owner_deletion=r.block_owner_deletion,
            )
            for r in meta.owner_references
        ]
        or None,
        finalizers=list(meta.finalizers) or None,
    )


def config_map_from_sdk(obj: client.V1ConfigMap) -> ConfigMap:
    """Convert a V1ConfigMap into the core model."""
    return ConfigMap(
        metadata=metadata_from_sdk(obj.metadata),
        data=obj.data,
        binary_data=obj.binary_data,
        immutable=obj.immutable,
    )


def config_map_to_sdk(obj: ConfigMap) -> client.V1ConfigMap:
    """Convert a core ConfigMap into a V1ConfigMap request body."""
    return client.V1ConfigMap(
        api_version=obj.api_version,
        kind=obj.kind,
        metadata=metadata_to_sdk(obj.metadata),
        data=dict(obj.data) if obj.data is not None else None,
        binary_data=dict(obj.binary_data) if obj.binary_data is not None else None,
        immutable=obj.immutable,
    )


class KubernetesConfigMapAdapter:
    """Adapter around the CoreV1 ConfigMap APIs."""

    def __init__(self, core_api: client.CoreV1Api, request_timeout: int = 30) -> None:
        self.core_api = core_api
        self.request_timeout = request_timeout

    def list(self, namespace: str) -> list[ConfigMap]:
        """List all ConfigMaps in a namespace."""
        with api_call(f"list configmaps in '{namespace}'"):
            result = self.core_api.list_namespaced_config_map(
                namespace=namespace,
                _request_timeout=self.request_timeout,
            )
        return [config_map_from_sdk(item) for item in result.items or []]

    def create(self, obj: ConfigMap) -> ConfigMap:
        """Create a ConfigMap and return the stored object."""
        meta = obj.metadata
        with api_call(f"create configmap {meta.namespace}/{meta.name}"):
            created = self.core_api.create_namespaced_config_map(
                namespace=meta.namespace,
                body=config_map_to_sdk(obj),
                _request_timeout=self.request_timeout,
            )
        return config_map_from_sdk(created)

    def update(self, obj: ConfigMap) -> ConfigMap:
        """Replace a ConfigMap; the resource version guards concurrent writers."""
        meta = obj.metadata
        with api_call(f"update configmap {meta.namespace}/{meta.name}"):
            updated = self.core_api.replace_namespaced_config_map(
                name=meta.name,
                namespace=meta.namespace,
                body=config_map_to_sdk(obj),
                _request_timeout=self.request_timeout,
            )
        return config_map_from_sdk(updated)

    def delete(self, namespace: str, name: str) -> None:
        """Delete a ConfigMap."""
        with api_call(f"delete configmap {namespace}/{name}"):
            self.core_api.delete_namespaced_config_map(
                name=name,
                namespace=namespace,
                _request_timeout=self.request_timeout,
            )
