"""Protocol for template resolution observability.

Defines the interface for domain probes that capture resolution events:
which channel a module was resolved in, which template was picked, and
why a resolution failed or was rejected.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TemplateResolverProbe(Protocol):
    """Domain probe for module template resolution."""

    def channel_used(
        self,
        module_name: str,
        channel: str,
        default_channel: str,
    ) -> None:
        """Record which channel a module was resolved in."""
        ...

    def template_resolved(
        self,
        module_name: str,
        template: str,
        channel: str,
        generation: int,
    ) -> None:
        """Record that a unique template was found for a module."""
        ...

    def resolution_failed(
        self,
        module_name: str,
        channel: str,
        error: str,
    ) -> None:
        """Record that a module could not be resolved."""
        ...

    def visibility_rejected(
        self,
        module_name: str,
        template: str,
        visibility: str,
    ) -> None:
        """Record that a resolved template is hidden from the tenant."""
        ...

    def with_context(self, context: ObservationContext) -> TemplateResolverProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTemplateResolverProbe:
    """Default implementation of TemplateResolverProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultTemplateResolverProbe:
        """Create a new probe with observation context bound."""
        return DefaultTemplateResolverProbe(logger=self._logger, context=context)

    def channel_used(
        self,
        module_name: str,
        channel: str,
        default_channel: str,
    ) -> None:
        """Record which channel a module was resolved in.

        Resolving outside the tenant default is notable, the rest is debug noise.
        """
        if channel != default_channel:
            self._logger.info(
                "module_channel_overridden",
                module=module_name,
                channel=channel,
                default_channel=default_channel,
                **self._get_context_kwargs(),
            )
            return
        self._logger.debug(
            "module_channel_used",
            module=module_name,
            channel=channel,
            **self._get_context_kwargs(),
        )

    def template_resolved(
        self,
        module_name: str,
        template: str,
        channel: str,
        generation: int,
    ) -> None:
        """Record that a unique template was found for a module."""
        self._logger.debug(
            "module_template_resolved",
            module=module_name,
            template=template,
            channel=channel,
            generation=generation,
            **self._get_context_kwargs(),
        )

    def resolution_failed(
        self,
        module_name: str,
        channel: str,
        error: str,
    ) -> None:
        """Record that a module could not be resolved."""
        self._logger.warning(
            "module_template_resolution_failed",
            module=module_name,
            channel=channel,
            error=error,
            **self._get_context_kwargs(),
        )

    def visibility_rejected(
        self,
        module_name: str,
        template: str,
        visibility: str,
    ) -> None:
        """Record that a resolved template is hidden from the tenant."""
        self._logger.info(
            "module_template_not_visible",
            module=module_name,
            template=template,
            visibility=visibility,
            **self._get_context_kwargs(),
        )
