"""Protocol for version-skew observability.

Captures how a freshly resolved template compares to what a tenant last
applied: generation skews, channel skews, and blocked downgrades.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class VersionSkewProbe(Protocol):
    """Domain probe for the version-skew guard."""

    def generation_skew(
        self,
        module_name: str,
        template: str,
        new_generation: int,
        previous_generation: int,
    ) -> None:
        """Record that a template changed within the same channel."""
        ...

    def channel_skew(
        self,
        module_name: str,
        template: str,
        new_channel: str,
        previous_channel: str,
    ) -> None:
        """Record that the tenant moved a module to a different channel."""
        ...

    def downgrade_blocked(
        self,
        module_name: str,
        previous_channel: str,
        new_channel: str,
        previous_version: str,
        new_version: str,
    ) -> None:
        """Record that a channel change was rejected as a downgrade."""
        ...

    def version_unverifiable(
        self,
        module_name: str,
        template: str,
        error: str,
    ) -> None:
        """Record that a channel change could not be verified."""
        ...

    def with_context(self, context: ObservationContext) -> VersionSkewProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultVersionSkewProbe:
    """Default implementation of VersionSkewProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultVersionSkewProbe:
        """Create a new probe with observation context bound."""
        return DefaultVersionSkewProbe(logger=self._logger, context=context)

    def generation_skew(
        self,
        module_name: str,
        template: str,
        new_generation: int,
        previous_generation: int,
    ) -> None:
        self._logger.info(
            "module_template_generation_skew",
            module=module_name,
            template=template,
            new_generation=new_generation,
            previous_generation=previous_generation,
            **self._get_context_kwargs(),
        )

    def channel_skew(
        self,
        module_name: str,
        template: str,
        new_channel: str,
        previous_channel: str,
    ) -> None:
        self._logger.info(
            "module_template_channel_skew",
            module=module_name,
            template=template,
            new_channel=new_channel,
            previous_channel=previous_channel,
            **self._get_context_kwargs(),
        )

    def downgrade_blocked(
        self,
        module_name: str,
        previous_channel: str,
        new_channel: str,
        previous_version: str,
        new_version: str,
    ) -> None:
        self._logger.warning(
            "module_template_downgrade_blocked",
            module=module_name,
            previous_channel=previous_channel,
            new_channel=new_channel,
            previous_version=previous_version,
            new_version=new_version,
            **self._get_context_kwargs(),
        )

    def version_unverifiable(
        self,
        module_name: str,
        template: str,
        error: str,
    ) -> None:
        self._logger.error(
            "module_template_version_unverifiable",
            module=module_name,
            template=template,
            error=error,
            **self._get_context_kwargs(),
        )
