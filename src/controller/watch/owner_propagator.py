"""Owner change propagation.

Enqueues work items for the owners of an object, e.g. the tenant that
created the manifest the event is about. Only owner references of the
configured group and kind are followed. On updates, an owner is only
woken up when the dependent's observed state actually changed, which
keeps status-only churn on dependents from flooding the reconciler.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from pydantic import BaseModel, ConfigDict, StrictStr, ValidationError

from shared_kernel.object_meta import (
    GroupKind,
    GroupVersion,
    InvalidGroupVersionError,
    ObjectMeta,
    OwnerReference,
    WorkItem,
)
from watch.events import (
    CreateEvent,
    DeleteEvent,
    GenericEvent,
    SerializedObject,
    UpdateEvent,
)
from watch.observability import DefaultOwnerPropagatorProbe, OwnerPropagatorProbe
from watch.ports import IScopeMapper, IWorkQueue, NoUniqueKindError, ScopeLookupError

DEFAULT_STATE_PATH = ("status", "state")


class PartialStatus(BaseModel):
    """The state field of a dependent object, if it has a readable one."""

    model_config = ConfigDict(frozen=True)

    state: StrictStr | None = None

    @classmethod
    def read(
        cls,
        obj: SerializedObject | None,
        path: Sequence[str] = DEFAULT_STATE_PATH,
    ) -> PartialStatus:
        """Project the state field out of a serialized object.

        Anything that is not a string at the end of ``path`` reads as missing.
        """
        node: object = obj
        for segment in path[:-1]:
            if not isinstance(node, Mapping) or segment not in node:
                return cls()
            node = node[segment]
        if not isinstance(node, Mapping):
            return cls()
        try:
            return cls.model_validate({"state": node.get(path[-1])})
        except ValidationError:
            return cls()


def _unique_kind(owner_type: GroupKind | Iterable[GroupKind]) -> GroupKind:
    kinds = [owner_type] if isinstance(owner_type, GroupKind) else list(owner_type)
    if len(kinds) != 1 or not kinds[0].kind:
        raise NoUniqueKindError(
            f"expected exactly 1 kind for owner type, but found {len(kinds)} kinds: "
            f"{[str(kind) for kind in kinds]}"
        )
    return kinds[0]


class RestrictedOwnerPropagator:
    """Event handler enqueuing work items for matching owners.

    Args:
        owner_type: The owner kind to follow. Anything other than exactly one
            kind with a non-empty name fails setup with NoUniqueKindError.
        scope_mapper: Decides whether the owner carries a namespace
        is_controller: Only follow the owner reference marked as controller
        state_path: Path of the observed state field on dependents
        probe: Optional domain probe for observability
    """

    def __init__(
        self,
        owner_type: GroupKind | Iterable[GroupKind],
        scope_mapper: IScopeMapper,
        is_controller: bool = False,
        state_path: Sequence[str] = DEFAULT_STATE_PATH,
        probe: OwnerPropagatorProbe | None = None,
    ) -> None:
        self._group_kind = _unique_kind(owner_type)
        self._scope_mapper = scope_mapper
        self._is_controller = is_controller
        self._state_path = tuple(state_path)
        self._probe = probe or DefaultOwnerPropagatorProbe(owner=self._group_kind)

    @property
    def group_kind(self) -> GroupKind:
        return self._group_kind

    def create(self, event: CreateEvent, queue: IWorkQueue) -> None:
        self._enqueue(self.owner_work_items(event.object), queue)

    def update(self, event: UpdateEvent, queue: IWorkQueue) -> None:
        self._enqueue(self.owner_work_items(event.object_new, event.object_old), queue)

    def delete(self, event: DeleteEvent, queue: IWorkQueue) -> None:
        self._enqueue(self.owner_work_items(event.object), queue)

    def generic(self, event: GenericEvent, queue: IWorkQueue) -> None:
        self._enqueue(self.owner_work_items(event.object), queue)

    def owner_work_items(
        self,
        obj: SerializedObject,
        old: SerializedObject | None = None,
    ) -> set[WorkItem]:
        """Compute the deduplicated work items an event produces.

        Args:
            obj: The object the event is about (the new form on updates)
            old: The previous form, only given on updates

        Returns:
            Work items for every matching owner. Empty when the metadata
            cannot be read or any owner reference has an unparsable
            apiVersion.
        """
        try:
            meta = ObjectMeta.from_object(obj)
        except ValidationError as e:
            self._probe.malformed_object(str(e))
            return set()
        items: set[WorkItem] = set()
        for ref in self._owner_references(meta):
            try:
                group_version = GroupVersion.parse(ref.api_version)
            except InvalidGroupVersionError as e:
                self._probe.invalid_api_version(ref.api_version, str(e))
                return set()
            item = self._work_item_for(ref, group_version, meta)
            if item is not None and self._state_allows(item, old, obj):
                items.add(item)
        return items

    def _owner_references(self, meta: ObjectMeta) -> tuple[OwnerReference, ...]:
        if not self._is_controller:
            return meta.owner_references
        controller = meta.controller_of()
        return (controller,) if controller is not None else ()

    def _work_item_for(
        self,
        ref: OwnerReference,
        group_version: GroupVersion,
        meta: ObjectMeta,
    ) -> WorkItem | None:
        ref_kind = GroupKind(group=group_version.group, kind=ref.kind)
        if ref_kind != self._group_kind:
            self._probe.owner_kind_mismatch(self._group_kind, ref_kind)
            return None
        try:
            namespaced = self._scope_mapper.is_namespaced(
                self._group_kind, group_version.version
            )
        except ScopeLookupError as e:
            self._probe.scope_lookup_failed(self._group_kind, str(e))
            return None
        return WorkItem(name=ref.name, namespace=meta.namespace if namespaced else "")

    def _state_allows(
        self,
        item: WorkItem,
        old: SerializedObject | None,
        new: SerializedObject,
    ) -> bool:
        if old is None:
            return True
        old_state = PartialStatus.read(old, self._state_path).state
        new_state = PartialStatus.read(new, self._state_path).state
        if old_state is None or new_state is None:
            self._probe.state_missing(item, "old" if old_state is None else "new")
            return True
        if old_state == new_state:
            self._probe.state_unchanged(item, new_state)
            return False
        return True

    def _enqueue(self, items: set[WorkItem], queue: IWorkQueue) -> None:
        for item in items:
            queue.add(item)
            self._probe.request_enqueued(item)
