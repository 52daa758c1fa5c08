"""Object metadata primitives shared across bounded contexts.

These value objects model the slice of declarative-object metadata that
both contexts read: names, labels, generations, and ownership references.
Objects arrive from the object store in their serialized (camelCase)
form, so models accept the wire aliases as well as field names.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field


class InvalidGroupVersionError(ValueError):
    """Raised when an ``apiVersion`` string cannot be split into group and version."""

    def __init__(self, api_version: str):
        super().__init__(f"unexpected GroupVersion string: {api_version!r}")
        self.api_version = api_version


@dataclass(frozen=True)
class GroupKind:
    """Group and kind of a resource type, without its version."""

    group: str
    kind: str

    def __str__(self) -> str:
        if not self.group:
            return self.kind
        return f"{self.kind}.{self.group}"


@dataclass(frozen=True)
class GroupVersion:
    """Group and version parsed from an ``apiVersion`` field."""

    group: str
    version: str

    @classmethod
    def parse(cls, api_version: str) -> GroupVersion:
        """Parse ``group/version`` or a bare core ``version``.

        Args:
            api_version: The raw ``apiVersion`` value (e.g., "apps/v1", "v1")

        Returns:
            The parsed GroupVersion. An empty string yields an empty GroupVersion.

        Raises:
            InvalidGroupVersionError: If the value contains more than one "/"
        """
        if not api_version:
            return cls(group="", version="")
        parts = api_version.split("/")
        if len(parts) == 1:
            return cls(group="", version=parts[0])
        if len(parts) == 2:
            return cls(group=parts[0], version=parts[1])
        raise InvalidGroupVersionError(api_version)


class OwnerReference(BaseModel):
    """Reference from a dependent object to its owner."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    api_version: str = Field(alias="apiVersion")
    kind: str
    name: str
    uid: str = ""
    controller: bool | None = None
    block_owner_deletion: bool | None = Field(default=None, alias="blockOwnerDeletion")


class ObjectMeta(BaseModel):
    """The metadata block of a declarative object."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    name: str = ""
    namespace: str = ""
    labels: dict[str, str] = Field(default_factory=dict)
    annotations: dict[str, str] = Field(default_factory=dict)
    generation: int = 0
    resource_version: str = Field(default="", alias="resourceVersion")
    owner_references: tuple[OwnerReference, ...] = Field(
        default=(), alias="ownerReferences"
    )

    @classmethod
    def from_object(cls, obj: Mapping[str, Any] | None) -> ObjectMeta:
        """Read the metadata block out of a serialized object."""
        if not obj:
            return cls()
        return cls.model_validate(obj.get("metadata") or {})

    def controller_of(self) -> OwnerReference | None:
        """Return the owner reference marked as controller, if any."""
        for ref in self.owner_references:
            if ref.controller:
                return ref
        return None


@dataclass(frozen=True)
class WorkItem:
    """Identity of a tenant resource that should be reconciled again.

    Equality is by value so work items can be collected in sets for
    per-callback deduplication. Cluster-scoped owners carry an empty
    namespace.
    """

    name: str
    namespace: str = ""

    def __str__(self) -> str:
        if not self.namespace:
            return self.name
        return f"{self.namespace}/{self.name}"
