import pytest

from ccops.core.desired import desired_config_map, owner_reference_for, with_owner
from ccops.core.errors import InvariantViolation
from ccops.core.models import ConfigClient, ObjectMeta


def _parent(**meta) -> ConfigClient:
    meta.setdefault("name", "demo")
    meta.setdefault("namespace", "apps")
    meta.setdefault("uid", "u-1")
    return ConfigClient(metadata=ObjectMeta(**meta), spec={"profile": "prod"})


def test_desired_mirrors_parent_identity_with_empty_data():
    desired = desired_config_map(_parent())

    assert desired is not None
    assert desired.metadata.name == "demo"
    assert desired.metadata.namespace == "apps"
    assert desired.data == {}
    assert desired.metadata.labels is None
    assert desired.metadata.owner_references == ()
    assert desired.metadata.resource_version is None


def test_desired_is_deterministic():
    assert desired_config_map(_parent()) == desired_config_map(_parent())


def test_desired_ignores_parent_metadata_beyond_identity():
    a = desired_config_map(_parent(labels={"x": "1"}, resource_version="5"))
    b = desired_config_map(_parent(resource_version="9"))

    assert a == b


def test_owner_reference_sets_controller_flags():
    ref = owner_reference_for(_parent())

    assert ref.uid == "u-1"
    assert ref.name == "demo"
    assert ref.kind == "ConfigClient"
    assert ref.api_version == "spring.io/v1"
    assert ref.controller is True
    assert ref.block_owner_deletion is True


def test_owner_reference_requires_uid():
    with pytest.raises(InvariantViolation, match="uid"):
        owner_reference_for(_parent(uid=None))


def test_with_owner_returns_new_object():
    desired = desired_config_map(_parent())
    ref = owner_reference_for(_parent())

    owned = with_owner(desired, ref)

    assert owned.metadata.owner_references == (ref,)
    assert desired.metadata.owner_references == ()
