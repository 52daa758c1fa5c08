"""Observability probes for watch handlers.

Following Domain Oriented Observability, probes capture domain-significant
events without cluttering the handlers with logging concerns. Handlers
run on the event-delivery path, so every probe call is a plain log write.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.object_meta import GroupKind, WorkItem


logger = structlog.get_logger()


class OwnerPropagatorProbe(Protocol):
    """Protocol for owner change propagation observability."""

    def request_enqueued(self, item: WorkItem) -> None:
        """Called when a work item is enqueued for an owner."""
        ...

    def state_unchanged(self, item: WorkItem, state: str) -> None:
        """Called when an update is suppressed because the state did not change."""
        ...

    def state_missing(self, item: WorkItem, missing_in: str) -> None:
        """Called when the state field is absent on one side of an update."""
        ...

    def owner_kind_mismatch(self, expected: GroupKind, actual: GroupKind) -> None:
        """Called when an owner reference points at a different kind."""
        ...

    def invalid_api_version(self, api_version: str, error: str) -> None:
        """Called when an owner reference carries an unparsable apiVersion."""
        ...

    def scope_lookup_failed(self, group_kind: GroupKind, error: str) -> None:
        """Called when the owner's scope cannot be determined."""
        ...

    def malformed_object(self, error: str) -> None:
        """Called when an event object carries unreadable metadata."""
        ...


class DefaultOwnerPropagatorProbe:
    """Default implementation using structlog."""

    def __init__(self, owner: GroupKind | None = None) -> None:
        self._log = logger.bind(component="owner_propagator")
        if owner is not None:
            self._log = self._log.bind(owner_kind=str(owner))

    def request_enqueued(self, item: WorkItem) -> None:
        self._log.debug(
            "owner_request_enqueued",
            request=str(item),
        )

    def state_unchanged(self, item: WorkItem, state: str) -> None:
        self._log.debug(
            "owner_request_suppressed",
            request=str(item),
            state=state,
        )

    def state_missing(self, item: WorkItem, missing_in: str) -> None:
        self._log.warning(
            "dependent_state_missing",
            request=str(item),
            missing_in=missing_in,
        )

    def owner_kind_mismatch(self, expected: GroupKind, actual: GroupKind) -> None:
        self._log.debug(
            "owner_kind_mismatch",
            expected=str(expected),
            actual=str(actual),
        )

    def invalid_api_version(self, api_version: str, error: str) -> None:
        self._log.error(
            "owner_reference_api_version_invalid",
            api_version=api_version,
            error=error,
        )

    def scope_lookup_failed(self, group_kind: GroupKind, error: str) -> None:
        self._log.error(
            "owner_scope_lookup_failed",
            kind=str(group_kind),
            error=error,
        )

    def malformed_object(self, error: str) -> None:
        self._log.error(
            "dependent_metadata_malformed",
            error=error,
        )


class TemplateChangeProbe(Protocol):
    """Protocol for template change observability."""

    def tenants_enqueued(self, template: str, count: int) -> None:
        """Called after a template change was mapped to tenant work items."""
        ...

    def tenant_listing_failed(self, template: str, error: str) -> None:
        """Called when tenants could not be listed for a template change."""
        ...

    def malformed_template(self, error: str) -> None:
        """Called when a template event carries an unreadable template."""
        ...


class DefaultTemplateChangeProbe:
    """Default implementation using structlog."""

    def __init__(self) -> None:
        self._log = logger.bind(component="template_change_handler")

    def tenants_enqueued(self, template: str, count: int) -> None:
        if count > 0:
            self._log.info("template_change_enqueued", template=template, count=count)

    def tenant_listing_failed(self, template: str, error: str) -> None:
        self._log.error("template_change_tenant_listing_failed", template=template, error=error)

    def malformed_template(self, error: str) -> None:
        self._log.error("template_change_template_malformed", error=error)
