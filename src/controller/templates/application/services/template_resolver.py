"""Module template resolver.

Given a module identity and a release channel, picks exactly one
authorized template from the catalog or fails with a typed error. The
resolver is read-only: apart from memoizing decoded descriptors it has
no side effects, and re-running it on the same catalog yields the same
outcome.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import TYPE_CHECKING

from templates.application.observability import (
    DefaultTemplateResolverProbe,
    TemplateResolverProbe,
)
from templates.domain.value_objects import (
    DEFAULT_CHANNEL,
    ModuleTemplate,
    Tenant,
    desired_channel_for,
)
from templates.ports.exceptions import (
    NoTemplatesInListResultError,
    NotDefaultChannelAllowedError,
    TemplateListError,
    TemplateMarkedAsMandatoryError,
    TemplateNotAllowedError,
    TemplateNotIdentifiedError,
)
from templates.ports.repositories import IDescriptorProvider, ITemplateReader

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TemplateResolver:
    """Resolves a module reference to a single template in one cluster.

    A template matches a module when it is in the desired channel and
    its identity equals the module name. Identity is checked in order
    and the first predicate that holds wins:

    1. the module-name label
    2. the literal ``namespace/name`` or bare name of the template
    3. the component name in the decoded descriptor

    Predicates are not required to agree with each other. Every template
    not matched by label or name is decoded, in any channel, so one
    malformed descriptor in the listing fails the lookup.
    """

    def __init__(
        self,
        reader: ITemplateReader,
        descriptor_provider: IDescriptorProvider,
        module_name_label: str,
        internal_label: str,
        beta_label: str,
        catalog_selector: Mapping[str, str] | None = None,
        system_default_channel: str = DEFAULT_CHANNEL,
        probe: TemplateResolverProbe | None = None,
    ):
        """Initialize the resolver.

        Args:
            reader: Template reader for the cluster this resolver serves
            descriptor_provider: Shared descriptor cache
            module_name_label: Label carrying a template's module identity
            internal_label: Label marking templates and tenants as internal
            beta_label: Label marking templates and tenants as beta
            catalog_selector: Label selector scoping which templates are visible
            system_default_channel: Channel used when nothing else names one
            probe: Optional domain probe for observability
        """
        self._reader = reader
        self._descriptor_provider = descriptor_provider
        self._module_name_label = module_name_label
        self._internal_label = internal_label
        self._beta_label = beta_label
        self._catalog_selector = dict(catalog_selector or {})
        self._system_default_channel = system_default_channel
        self._probe = probe or DefaultTemplateResolverProbe()

    def with_context(self, context: ObservationContext) -> TemplateResolver:
        """Return a resolver whose probe events carry the given context."""
        bound = copy.copy(self)
        bound._probe = self._probe.with_context(context)
        return bound

    def desired_channel(self, explicit_channel: str, default_channel: str) -> str:
        """Channel precedence: module, then tenant default, then system default."""
        return desired_channel_for(
            explicit_channel, default_channel, self._system_default_channel
        )

    async def resolve(
        self,
        module_name: str,
        explicit_channel: str = "",
        default_channel: str = "",
    ) -> tuple[ModuleTemplate, str]:
        """Resolve a module to exactly one template.

        Args:
            module_name: Identity of the module to resolve
            explicit_channel: Channel set on the module reference, if any
            default_channel: The tenant's default channel, if any

        Returns:
            Tuple of (template, desired_channel).

        Raises:
            NoTemplatesInListResultError: No template matches
            TemplateNotIdentifiedError: More than one template matches
            NotDefaultChannelAllowedError: The match declares no channel
            TemplateMarkedAsMandatoryError: The match is mandatory
            DescriptorDecodeError: A candidate's descriptor is malformed
            TemplateListError: The catalog could not be listed
        """
        desired_channel = self.desired_channel(explicit_channel, default_channel)
        try:
            template = await self._find_unique(module_name, desired_channel)
        except Exception as e:
            self._probe.resolution_failed(
                module_name=module_name, channel=desired_channel, error=str(e)
            )
            raise

        self._probe.channel_used(
            module_name=module_name,
            channel=template.channel,
            default_channel=default_channel,
        )
        self._probe.template_resolved(
            module_name=module_name,
            template=template.namespaced_name,
            channel=template.channel,
            generation=template.generation,
        )
        return template, desired_channel

    def ensure_visible(self, template: ModuleTemplate, tenant: Tenant) -> None:
        """Reject internal or beta templates for tenants that are neither.

        Raises:
            TemplateNotAllowedError: The tenant may not use the template
        """
        if template.has_flag(self._internal_label) and not tenant.has_flag(
            self._internal_label
        ):
            self._reject(template, "internal")
        if template.has_flag(self._beta_label) and not tenant.has_flag(
            self._beta_label
        ):
            self._reject(template, "beta")

    def _reject(self, template: ModuleTemplate, visibility: str) -> None:
        module_name = template.labels.get(self._module_name_label, template.name)
        self._probe.visibility_rejected(
            module_name=module_name,
            template=template.namespaced_name,
            visibility=visibility,
        )
        raise TemplateNotAllowedError(f"{visibility} module")

    async def _find_unique(self, module_name: str, desired_channel: str) -> ModuleTemplate:
        try:
            templates = await self._reader.list_templates(self._catalog_selector or None)
        except Exception as e:
            raise TemplateListError(str(e)) from e

        matches = [
            template
            for template in templates
            if self._matches(template, module_name, desired_channel)
        ]

        if len(matches) > 1:
            raise TemplateNotIdentifiedError(
                module_name, (template.namespaced_name for template in matches)
            )
        if not matches:
            raise NoTemplatesInListResultError(module_name, desired_channel)

        template = matches[0]
        if not template.channel:
            raise NotDefaultChannelAllowedError(module_name)
        if template.mandatory:
            raise TemplateMarkedAsMandatoryError(module_name, desired_channel)
        return template

    def _matches(
        self, template: ModuleTemplate, module_name: str, desired_channel: str
    ) -> bool:
        in_channel = template.channel == desired_channel
        if in_channel and (
            template.labels.get(self._module_name_label) == module_name
            or module_name in (template.namespaced_name, template.name)
        ):
            return True
        # Every template not matched above is decoded, whatever its channel;
        # a decode error propagates and fails the whole lookup
        descriptor = self._descriptor_provider.get_descriptor(template)
        return in_channel and descriptor.name == module_name
