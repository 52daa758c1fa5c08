"""Unit tests for shared object metadata primitives."""

import pytest

from shared_kernel.object_meta import (
    GroupKind,
    GroupVersion,
    InvalidGroupVersionError,
    ObjectMeta,
    WorkItem,
)


class TestGroupVersion:
    @pytest.mark.parametrize(
        ("raw", "group", "version"),
        [
            ("apps/v1", "apps", "v1"),
            ("v1", "", "v1"),
            ("", "", ""),
            ("operator.kyma-project.io/v1beta2", "operator.kyma-project.io", "v1beta2"),
        ],
    )
    def test_parse(self, raw, group, version):
        assert GroupVersion.parse(raw) == GroupVersion(group=group, version=version)

    def test_more_than_one_separator_is_invalid(self):
        with pytest.raises(InvalidGroupVersionError) as exc_info:
            GroupVersion.parse("a/b/c")

        assert exc_info.value.api_version == "a/b/c"


class TestGroupKind:
    def test_str(self):
        assert str(GroupKind(group="apps", kind="ReplicaSet")) == "ReplicaSet.apps"
        assert str(GroupKind(group="", kind="Pod")) == "Pod"


class TestObjectMeta:
    """Tests for reading metadata from serialized objects."""

    def test_reads_wire_aliases(self):
        meta = ObjectMeta.from_object(
            {
                "metadata": {
                    "name": "pod-1",
                    "namespace": "default",
                    "resourceVersion": "42",
                    "ownerReferences": [
                        {
                            "apiVersion": "apps/v1",
                            "kind": "ReplicaSet",
                            "name": "rs-1",
                            "blockOwnerDeletion": True,
                        }
                    ],
                }
            }
        )

        assert meta.resource_version == "42"
        assert meta.owner_references[0].api_version == "apps/v1"
        assert meta.owner_references[0].block_owner_deletion is True

    def test_missing_metadata_is_empty(self):
        assert ObjectMeta.from_object(None) == ObjectMeta()
        assert ObjectMeta.from_object({"kind": "Pod"}).owner_references == ()

    def test_controller_of(self):
        meta = ObjectMeta.model_validate(
            {
                "ownerReferences": [
                    {"apiVersion": "v1", "kind": "A", "name": "a"},
                    {"apiVersion": "v1", "kind": "B", "name": "b", "controller": True},
                ]
            }
        )

        assert meta.controller_of().name == "b"

    def test_no_controller(self):
        assert ObjectMeta().controller_of() is None


class TestWorkItem:
    def test_value_equality(self):
        assert WorkItem("a", "ns") == WorkItem(name="a", namespace="ns")
        assert len({WorkItem("a", "ns"), WorkItem("a", "ns")}) == 1

    def test_str(self):
        assert str(WorkItem("a", "ns")) == "ns/a"
        assert str(WorkItem("a")) == "a"
