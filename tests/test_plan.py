from ccops.core.models import ConfigClient, ConfigMap, ObjectMeta, OwnerReference, Request
from ccops.core.plan import PlannedAction, RecordingConfigMaps, plan_reconcile


class _Parents:
    def __init__(self, parent=None):
        self.parent = parent

    def get(self, namespace: str, name: str):
        return self.parent


class _ConfigMaps:
    def __init__(self, *items: ConfigMap):
        self.items = list(items)
        self.mutations: list[str] = []

    def list(self, namespace: str):
        return [c for c in self.items if c.metadata.namespace == namespace]

    def create(self, obj):
        self.mutations.append("create")
        return obj

    def update(self, obj):
        self.mutations.append("update")
        return obj

    def delete(self, namespace, name):
        self.mutations.append("delete")


PARENT = ConfigClient(metadata=ObjectMeta(name="demo", namespace="apps", uid="u-1"))
OWNER = OwnerReference("spring.io/v1", "ConfigClient", "demo", "u-1", True, True)


def _owned(name: str, **kwargs) -> ConfigMap:
    return ConfigMap(
        metadata=ObjectMeta(name=name, namespace="apps", owner_references=(OWNER,)),
        **kwargs,
    )


def test_plan_for_missing_child_is_a_create():
    inner = _ConfigMaps()

    actions = plan_reconcile(_Parents(PARENT), inner, Request("apps", "demo"))

    assert actions == [PlannedAction("create", "apps", "demo")]
    assert inner.mutations == []


def test_plan_for_duplicates_deletes_then_creates():
    inner = _ConfigMaps(_owned("a"), _owned("b"))

    actions = plan_reconcile(_Parents(PARENT), inner, Request("apps", "demo"))

    assert [a.verb for a in actions] == ["delete", "delete", "create"]
    assert inner.mutations == []


def test_plan_for_converged_child_is_empty():
    inner = _ConfigMaps(_owned("demo", data={}))

    assert plan_reconcile(_Parents(PARENT), inner, Request("apps", "demo")) == []


def test_plan_for_drifted_child_is_an_update():
    inner = _ConfigMaps(_owned("demo", data={"stale": "1"}))

    actions = plan_reconcile(_Parents(PARENT), inner, Request("apps", "demo"))

    assert actions == [PlannedAction("update", "apps", "demo")]


def test_plan_for_missing_parent_is_empty():
    assert plan_reconcile(_Parents(), _ConfigMaps(), Request("apps", "demo")) == []


def test_recording_configmaps_delegates_reads():
    inner = _ConfigMaps(_owned("demo"))
    recorder = RecordingConfigMaps(inner)

    assert [c.metadata.name for c in recorder.list("apps")] == ["demo"]
    recorder.delete("apps", "demo")
    assert recorder.actions == [PlannedAction("delete", "apps", "demo")]
    assert inner.mutations == []
