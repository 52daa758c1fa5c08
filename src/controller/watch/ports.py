"""Protocols (ports) and errors for the watch context.

The work queue and the resource scope lookup are provided by the
surrounding controller runtime. Handlers only enqueue; retries, backoff
and cross-callback coalescing belong to the queue.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from shared_kernel.object_meta import GroupKind, WorkItem


class NoUniqueKindError(Exception):
    """Raised at setup when the owner type does not name exactly one kind.

    A handler that raises this must not be installed.
    """

    pass


class ScopeLookupError(Exception):
    """Raised when the scope of a kind cannot be determined."""

    def __init__(self, group_kind: GroupKind, version: str):
        super().__init__(f"no scope mapping for {group_kind} in version {version!r}")
        self.group_kind = group_kind
        self.version = version


@runtime_checkable
class IWorkQueue(Protocol):
    """Non-blocking queue of tenant work items.

    Delivery is at-least-once and the queue coalesces identical items.
    Adding never fails.
    """

    def add(self, item: WorkItem) -> None:
        """Enqueue a work item."""
        ...


@runtime_checkable
class IScopeMapper(Protocol):
    """Answers whether a kind is namespace-scoped or cluster-scoped."""

    def is_namespaced(self, group_kind: GroupKind, version: str) -> bool:
        """Check the scope of a kind.

        Raises:
            ScopeLookupError: If the kind is unknown
        """
        ...
