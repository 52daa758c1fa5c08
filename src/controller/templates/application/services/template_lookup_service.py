"""Template lookup service.

Runs one resolution pass for a tenant: every requested module is
resolved, gated for visibility, and compared against the tenant's
recorded status. Failures are attached to the module's result and never
abort resolution of the other modules.
"""

from __future__ import annotations

from dataclasses import dataclass

from shared_kernel.observability_context import (
    CONTROL_PLANE_CLUSTER,
    REMOTE_CLUSTER,
    ObservationContext,
)
from templates.application.services.template_resolver import TemplateResolver
from templates.application.services.version_skew_guard import VersionSkewGuard
from templates.domain.value_objects import (
    ModuleReference,
    ModuleTemplate,
    ResolutionResult,
    Tenant,
)
from templates.ports.exceptions import (
    InvalidRemoteModuleConfigurationError,
    TemplateLookupError,
    TemplateNotValidError,
)
from templates.ports.repositories import IDescriptorProvider


@dataclass(frozen=True)
class _BoundServices:
    """Resolvers and guard bound to one tenant's observation context."""

    resolver: TemplateResolver
    remote_resolver: TemplateResolver | None
    skew_guard: VersionSkewGuard


class TemplateLookupService:
    """Application service resolving all modules a tenant requests."""

    def __init__(
        self,
        resolver: TemplateResolver,
        skew_guard: VersionSkewGuard,
        descriptor_provider: IDescriptorProvider,
        remote_resolver: TemplateResolver | None = None,
    ):
        """Initialize the service.

        Args:
            resolver: Resolver over control-plane templates
            skew_guard: Guard comparing results with recorded status
            descriptor_provider: Shared descriptor cache
            remote_resolver: Resolver over the tenant's remote cluster, used
                for modules with a remote template reference
        """
        self._resolver = resolver
        self._skew_guard = skew_guard
        self._descriptor_provider = descriptor_provider
        self._remote_resolver = remote_resolver

    async def get_templates(
        self, tenant: Tenant, reconcile_id: str | None = None
    ) -> dict[str, ResolutionResult]:
        """Resolve every module the tenant requests.

        Args:
            tenant: Tenant whose modules are resolved
            reconcile_id: Identifier of the reconciliation pass, attached
                to every event emitted while resolving

        Returns:
            Mapping of module name to its resolution result. When a module
            name is requested twice, the first declaration wins.
        """
        services = self._bind(
            ObservationContext(
                reconcile_id=reconcile_id,
                tenant=f"{tenant.namespace}/{tenant.name}",
            )
        )
        results: dict[str, ResolutionResult] = {}
        for module in tenant.spec.modules:
            if module.name in results:
                continue
            results[module.name] = await self._resolve_module(services, tenant, module)
        return results

    def _bind(self, context: ObservationContext) -> _BoundServices:
        remote_resolver = None
        if self._remote_resolver is not None:
            remote_resolver = self._remote_resolver.with_context(
                context.for_cluster(REMOTE_CLUSTER)
            )
        return _BoundServices(
            resolver=self._resolver.with_context(
                context.for_cluster(CONTROL_PLANE_CLUSTER)
            ),
            remote_resolver=remote_resolver,
            skew_guard=self._skew_guard.with_context(context),
        )

    async def _resolve_module(
        self, services: _BoundServices, tenant: Tenant, module: ModuleReference
    ) -> ResolutionResult:
        desired_channel = services.resolver.desired_channel(
            module.channel, tenant.spec.channel
        )
        result = ResolutionResult(desired_channel=desired_channel)

        if not module.valid:
            return result.with_error(TemplateNotValidError("invalid module"))

        try:
            resolver, identity = self._resolver_for(services, tenant, module)
            template, desired_channel = await resolver.resolve(
                identity, module.channel, tenant.spec.channel
            )
        except TemplateLookupError as e:
            return result.with_error(e)

        result = ResolutionResult(desired_channel=desired_channel, template=template)
        try:
            self._descriptor_provider.add(template)
            resolver.ensure_visible(template, tenant)
        except TemplateLookupError as e:
            return result.with_error(e)

        return self._check_skew(services.skew_guard, tenant, module, template, result)

    def _resolver_for(
        self, services: _BoundServices, tenant: Tenant, module: ModuleReference
    ) -> tuple[TemplateResolver, str]:
        if not module.remote_template_ref:
            return services.resolver, module.name
        if not tenant.sync_enabled:
            raise InvalidRemoteModuleConfigurationError(
                f"enable sync to use a remote module template for {module.name}"
            )
        if services.remote_resolver is None:
            raise InvalidRemoteModuleConfigurationError(
                f"no remote cluster configured to resolve {module.name}"
            )
        return services.remote_resolver, module.remote_template_ref

    def _check_skew(
        self,
        skew_guard: VersionSkewGuard,
        tenant: Tenant,
        module: ModuleReference,
        template: ModuleTemplate,
        result: ResolutionResult,
    ) -> ResolutionResult:
        outdated = False
        for status in tenant.statuses_for(module.name):
            if status.template is None:
                continue
            try:
                outdated = (
                    skew_guard.check_update_allowed(template, result.desired_channel, status)
                    or outdated
                )
            except TemplateLookupError as e:
                return result.with_error(e)
        return result.with_outdated(outdated)
