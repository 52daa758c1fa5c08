"""Dependency wiring for the Templates bounded context.

Composes settings with the descriptor cache, the resolvers, the skew
guard and the lookup service. Template readers are supplied by the
caller, since listing templates needs a cluster client the controller
owns.
"""

from functools import lru_cache

from infrastructure.settings import get_controller_settings, get_label_settings
from templates.application.services import (
    TemplateLookupService,
    TemplateResolver,
    VersionSkewGuard,
)
from templates.infrastructure.descriptor_provider import CachedDescriptorProvider
from templates.ports.repositories import IDescriptorProvider, ITemplateReader


@lru_cache
def get_descriptor_provider() -> IDescriptorProvider:
    """Get the process-wide descriptor cache (singleton).

    Control-plane and remote resolvers share it so a descriptor is
    decoded at most once per template generation.

    Returns:
        CachedDescriptorProvider instance
    """
    return CachedDescriptorProvider()


def get_template_resolver(reader: ITemplateReader) -> TemplateResolver:
    """Get a resolver over one cluster's templates.

    Args:
        reader: Template reader for the cluster

    Returns:
        TemplateResolver configured from label and controller settings
    """
    labels = get_label_settings()
    return TemplateResolver(
        reader=reader,
        descriptor_provider=get_descriptor_provider(),
        module_name_label=labels.module_name,
        internal_label=labels.internal,
        beta_label=labels.beta,
        catalog_selector=labels.catalog_selector,
        system_default_channel=get_controller_settings().default_channel,
    )


def get_version_skew_guard() -> VersionSkewGuard:
    """Get a VersionSkewGuard over the shared descriptor cache."""
    return VersionSkewGuard(get_descriptor_provider())


def get_template_lookup_service(
    reader: ITemplateReader,
    remote_reader: ITemplateReader | None = None,
) -> TemplateLookupService:
    """Get a TemplateLookupService for one reconciliation.

    Args:
        reader: Template reader for the control plane
        remote_reader: Template reader for the tenant's remote cluster, if
            one is reachable

    Returns:
        TemplateLookupService instance
    """
    remote_resolver = None
    if remote_reader is not None:
        remote_resolver = get_template_resolver(remote_reader)
    return TemplateLookupService(
        resolver=get_template_resolver(reader),
        skew_guard=get_version_skew_guard(),
        descriptor_provider=get_descriptor_provider(),
        remote_resolver=remote_resolver,
    )
