"""Unit tests for RestrictedOwnerPropagator."""

from unittest.mock import create_autospec

import pytest

from shared_kernel.object_meta import GroupKind, WorkItem
from watch.events import CreateEvent, DeleteEvent, GenericEvent, UpdateEvent
from watch.observability import OwnerPropagatorProbe
from watch.owner_propagator import PartialStatus, RestrictedOwnerPropagator
from watch.ports import NoUniqueKindError
from watch.scope import StaticScopeMapper

REPLICA_SET = GroupKind(group="apps", kind="ReplicaSet")
TENANT = GroupKind(group="operator.kyma-project.io", kind="Kyma")
CLUSTER_OWNER = GroupKind(group="operator.kyma-project.io", kind="Watcher")


class RecordingQueue:
    """Work queue that records every add, duplicates included."""

    def __init__(self):
        self.items: list[WorkItem] = []

    def add(self, item: WorkItem) -> None:
        self.items.append(item)


def owner_ref(
    name: str,
    kind: str = "ReplicaSet",
    api_version: str = "apps/v1",
    controller: bool | None = None,
) -> dict:
    ref = {"apiVersion": api_version, "kind": kind, "name": name, "uid": f"uid-{name}"}
    if controller is not None:
        ref["controller"] = controller
    return ref


def dependent(*refs: dict, state: str | None = None, namespace: str = "default") -> dict:
    obj: dict = {
        "apiVersion": "v1",
        "kind": "Pod",
        "metadata": {"name": "pod-1", "namespace": namespace, "ownerReferences": list(refs)},
    }
    if state is not None:
        obj["status"] = {"state": state}
    return obj


@pytest.fixture
def scope_mapper():
    return StaticScopeMapper(namespaced=[REPLICA_SET, TENANT], cluster_scoped=[CLUSTER_OWNER])


@pytest.fixture
def mock_probe():
    return create_autospec(OwnerPropagatorProbe, instance=True)


@pytest.fixture
def queue():
    return RecordingQueue()


@pytest.fixture
def propagator(scope_mapper, mock_probe):
    return RestrictedOwnerPropagator(REPLICA_SET, scope_mapper, probe=mock_probe)


class TestSetup:
    """Owner type must name exactly one kind."""

    def test_accepts_single_group_kind(self, scope_mapper):
        propagator = RestrictedOwnerPropagator(REPLICA_SET, scope_mapper)

        assert propagator.group_kind == REPLICA_SET

    def test_accepts_single_element_iterable(self, scope_mapper):
        propagator = RestrictedOwnerPropagator([TENANT], scope_mapper)

        assert propagator.group_kind == TENANT

    @pytest.mark.parametrize(
        "owner_type",
        [[], [REPLICA_SET, TENANT], GroupKind(group="apps", kind="")],
    )
    def test_rejects_ambiguous_owner_type(self, scope_mapper, owner_type):
        with pytest.raises(NoUniqueKindError):
            RestrictedOwnerPropagator(owner_type, scope_mapper)


class TestCreateDeleteGeneric:
    """Every matching owner reference yields a work item."""

    def test_create_enqueues_owner(self, propagator, queue):
        propagator.create(CreateEvent(dependent(owner_ref("rs-1"))), queue)

        assert queue.items == [WorkItem(name="rs-1", namespace="default")]

    def test_delete_enqueues_owner(self, propagator, queue):
        propagator.delete(DeleteEvent(dependent(owner_ref("rs-1"))), queue)

        assert queue.items == [WorkItem(name="rs-1", namespace="default")]

    def test_generic_enqueues_owner(self, propagator, queue):
        propagator.generic(GenericEvent(dependent(owner_ref("rs-1"))), queue)

        assert queue.items == [WorkItem(name="rs-1", namespace="default")]

    def test_duplicate_owner_references_enqueue_once(self, propagator, queue):
        obj = dependent(owner_ref("rs-1"), owner_ref("rs-1"))

        propagator.create(CreateEvent(obj), queue)

        assert queue.items == [WorkItem(name="rs-1", namespace="default")]

    def test_distinct_owners_each_enqueued(self, propagator, queue):
        obj = dependent(owner_ref("rs-1"), owner_ref("rs-2"))

        propagator.create(CreateEvent(obj), queue)

        assert sorted(item.name for item in queue.items) == ["rs-1", "rs-2"]

    def test_no_dedup_across_callbacks(self, propagator, queue):
        event = CreateEvent(dependent(owner_ref("rs-1")))

        propagator.create(event, queue)
        propagator.create(event, queue)

        assert len(queue.items) == 2

    def test_other_kinds_are_ignored(self, propagator, queue, mock_probe):
        obj = dependent(
            owner_ref("deploy-1", kind="Deployment"),
            owner_ref("rs-1", api_version="other.io/v1"),
        )

        propagator.create(CreateEvent(obj), queue)

        assert queue.items == []
        assert mock_probe.owner_kind_mismatch.call_count == 2

    def test_version_is_not_compared(self, propagator, queue):
        propagator.create(
            CreateEvent(dependent(owner_ref("rs-1", api_version="apps/v1beta2"))), queue
        )

        assert queue.items == [WorkItem(name="rs-1", namespace="default")]

    def test_object_without_owners_enqueues_nothing(self, propagator, queue):
        propagator.create(CreateEvent({"metadata": {"name": "orphan"}}), queue)

        assert queue.items == []

    def test_cluster_scoped_owner_has_no_namespace(self, scope_mapper, queue):
        propagator = RestrictedOwnerPropagator(CLUSTER_OWNER, scope_mapper)
        obj = dependent(
            owner_ref("w-1", kind="Watcher", api_version="operator.kyma-project.io/v1beta2")
        )

        propagator.create(CreateEvent(obj), queue)

        assert queue.items == [WorkItem(name="w-1")]

    def test_unknown_owner_scope_is_skipped(self, queue, mock_probe):
        propagator = RestrictedOwnerPropagator(
            REPLICA_SET, StaticScopeMapper(), probe=mock_probe
        )

        propagator.create(CreateEvent(dependent(owner_ref("rs-1"))), queue)

        assert queue.items == []
        mock_probe.scope_lookup_failed.assert_called_once()

    def test_invalid_api_version_aborts_event(self, propagator, queue, mock_probe):
        obj = dependent(
            owner_ref("rs-1"),
            owner_ref("rs-2", api_version="apps/v1/extra"),
        )

        propagator.create(CreateEvent(obj), queue)

        assert queue.items == []
        mock_probe.invalid_api_version.assert_called_once()


class TestControllerOnly:
    """With is_controller, only the controller reference is followed."""

    def test_follows_controller_reference_only(self, scope_mapper, queue):
        propagator = RestrictedOwnerPropagator(REPLICA_SET, scope_mapper, is_controller=True)
        obj = dependent(owner_ref("rs-1"), owner_ref("rs-2", controller=True))

        propagator.create(CreateEvent(obj), queue)

        assert queue.items == [WorkItem(name="rs-2", namespace="default")]

    def test_no_controller_reference_enqueues_nothing(self, scope_mapper, queue):
        propagator = RestrictedOwnerPropagator(REPLICA_SET, scope_mapper, is_controller=True)

        propagator.create(CreateEvent(dependent(owner_ref("rs-1"))), queue)

        assert queue.items == []


class TestUpdateStateFilter:
    """Updates only wake owners when the observed state changes."""

    def test_unchanged_state_is_suppressed(self, propagator, queue, mock_probe):
        old = dependent(owner_ref("rs-1"), state="Ready")
        new = dependent(owner_ref("rs-1"), state="Ready")

        propagator.update(UpdateEvent(old, new), queue)

        assert queue.items == []
        mock_probe.state_unchanged.assert_called_once_with(
            WorkItem(name="rs-1", namespace="default"), "Ready"
        )

    def test_changed_state_enqueues_once(self, propagator, queue):
        old = dependent(owner_ref("rs-1"), owner_ref("rs-1"), state="Processing")
        new = dependent(owner_ref("rs-1"), owner_ref("rs-1"), state="Ready")

        propagator.update(UpdateEvent(old, new), queue)

        assert queue.items == [WorkItem(name="rs-1", namespace="default")]

    def test_missing_state_fails_open(self, propagator, queue, mock_probe):
        old = dependent(owner_ref("rs-1"))
        new = dependent(owner_ref("rs-1"), state="Ready")

        propagator.update(UpdateEvent(old, new), queue)

        assert queue.items == [WorkItem(name="rs-1", namespace="default")]
        mock_probe.state_missing.assert_called_once_with(
            WorkItem(name="rs-1", namespace="default"), "old"
        )

    def test_missing_on_both_sides_fails_open(self, propagator, queue):
        old = dependent(owner_ref("rs-1"))
        new = dependent(owner_ref("rs-1"))

        propagator.update(UpdateEvent(old, new), queue)

        assert len(queue.items) == 1

    def test_owner_taken_from_new_object(self, propagator, queue):
        old = dependent(owner_ref("rs-old"), state="Processing")
        new = dependent(owner_ref("rs-new"), state="Ready")

        propagator.update(UpdateEvent(old, new), queue)

        assert queue.items == [WorkItem(name="rs-new", namespace="default")]

    def test_custom_state_path(self, scope_mapper, queue):
        propagator = RestrictedOwnerPropagator(
            REPLICA_SET, scope_mapper, state_path=("status", "phase")
        )
        old = dependent(owner_ref("rs-1"))
        new = dependent(owner_ref("rs-1"))
        old["status"] = {"phase": "Pending", "state": "Ready"}
        new["status"] = {"phase": "Pending", "state": "Error"}

        propagator.update(UpdateEvent(old, new), queue)

        assert queue.items == []


class TestPartialStatus:
    """Tests for reading the state field of dependents."""

    def test_reads_state(self):
        assert PartialStatus.read({"status": {"state": "Ready"}}).state == "Ready"

    @pytest.mark.parametrize(
        "obj",
        [
            None,
            {},
            {"status": None},
            {"status": "Ready"},
            {"status": {}},
            {"status": {"state": 3}},
            {"status": {"state": None}},
        ],
    )
    def test_unreadable_state_is_missing(self, obj):
        assert PartialStatus.read(obj).state is None


class TestMalformedObjects:
    """Unreadable dependent metadata is reported and the event skipped."""

    def test_owner_reference_without_api_version(self, propagator, queue, mock_probe):
        obj = {"metadata": {"ownerReferences": [{"kind": "ReplicaSet", "name": "rs"}]}}

        propagator.create(CreateEvent(obj), queue)

        assert queue.items == []
        mock_probe.malformed_object.assert_called_once()

    def test_non_mapping_metadata(self, propagator, queue, mock_probe):
        propagator.update(UpdateEvent({"metadata": "x"}, {"metadata": ["x"]}), queue)

        assert queue.items == []
        mock_probe.malformed_object.assert_called_once()
