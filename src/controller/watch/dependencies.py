"""Dependency wiring for the Watch bounded context.

Builds the event handlers from controller and label settings. The work
queue and the scope mapper come from the controller runtime.
"""

from collections.abc import Iterable

from infrastructure.settings import get_controller_settings, get_label_settings
from shared_kernel.object_meta import GroupKind
from templates.ports.repositories import ITenantReader
from watch.owner_propagator import RestrictedOwnerPropagator
from watch.ports import IScopeMapper
from watch.template_change_handler import TemplateChangeHandler


def get_owner_propagator(
    owner_type: GroupKind | Iterable[GroupKind],
    scope_mapper: IScopeMapper,
    is_controller: bool = False,
) -> RestrictedOwnerPropagator:
    """Get an owner propagator reading the configured status state path.

    Args:
        owner_type: The single owner kind whose references are followed
        scope_mapper: Resolves whether the owner kind is namespaced
        is_controller: Only follow references marked as controller

    Raises:
        NoUniqueKindError: owner_type does not name exactly one kind
    """
    return RestrictedOwnerPropagator(
        owner_type,
        scope_mapper,
        is_controller=is_controller,
        state_path=get_controller_settings().state_field_path,
    )


def get_template_change_handler(tenant_reader: ITenantReader) -> TemplateChangeHandler:
    """Get the handler mapping template changes to requesting tenants."""
    return TemplateChangeHandler(
        tenant_reader,
        get_label_settings().module_name,
        system_default_channel=get_controller_settings().default_channel,
    )
