"""Desired-state construction for ConfigClient children.

Everything here is a pure function of its input: the same ConfigClient always
yields an equal ConfigMap, which is what makes the equality check in the
reconciler meaningful.
"""

from __future__ import annotations

from dataclasses import replace

from ccops.core.errors import InvariantViolation
from ccops.core.models import ConfigClient, ConfigMap, ObjectMeta, OwnerReference


def desired_config_map(parent: ConfigClient) -> ConfigMap | None:
    """
    Build the ConfigMap a ConfigClient should own.

    The ConfigMap mirrors the parent's namespace and name and carries an
    empty data map. A return value of None means the child should not exist;
    the current policy always wants one while the parent exists.

    Args:
        parent: ConfigClient snapshot to derive the child from.

    Returns:
        The desired ConfigMap (without owner references), or None.
    """
    return ConfigMap(
        metadata=ObjectMeta(
            name=parent.metadata.name,
            namespace=parent.metadata.namespace,
        ),
        data={},
    )


def owner_reference_for(parent: ConfigClient) -> OwnerReference:
    """Return a controller owner reference pointing at `parent`."""
    if not parent.metadata.uid:
        raise InvariantViolation(f"ConfigClient '{parent.metadata.name}' has no uid.")
    return OwnerReference(
        api_version=parent.api_version,
        kind=parent.kind,
        name=parent.metadata.name,
        uid=parent.metadata.uid,
        controller=True,
        block_owner_deletion=True,
    )


def with_owner(child: ConfigMap, ref: OwnerReference) -> ConfigMap:
    """Return a copy of `child` with `ref` appended to its owner references."""
    metadata = replace(
        child.metadata,
        owner_references=(*child.metadata.owner_references, ref),
    )
    return replace(child, metadata=metadata)
