"""Event shapes delivered to watch handlers.

Objects are carried in their serialized form, as the object store
delivers them. Handlers project the fields they need out of them.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, TypeAlias

SerializedObject: TypeAlias = Mapping[str, Any]


@dataclass(frozen=True)
class CreateEvent:
    """An object was created."""

    object: SerializedObject


@dataclass(frozen=True)
class UpdateEvent:
    """An object changed; both the previous and the current form are available."""

    object_old: SerializedObject
    object_new: SerializedObject


@dataclass(frozen=True)
class DeleteEvent:
    """An object was deleted; carries its final known form."""

    object: SerializedObject


@dataclass(frozen=True)
class GenericEvent:
    """An event from a source other than the object store, e.g. a remote notification."""

    object: SerializedObject


WatchEvent: TypeAlias = CreateEvent | UpdateEvent | DeleteEvent | GenericEvent
