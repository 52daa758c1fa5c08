"""Reader interfaces (ports) for the Templates bounded context.

The object store itself is an external collaborator. These protocols
describe the read-only slice of it the resolver needs: filtered list
calls over templates and tenants, and a descriptor provider that decodes
and memoizes embedded component descriptors.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol, runtime_checkable

from templates.domain.value_objects import Descriptor, ModuleTemplate, Tenant


@runtime_checkable
class ITemplateReader(Protocol):
    """Read-only access to module templates in one cluster.

    One reader exists per cluster context: the control plane for regular
    modules, and the remote cluster for modules that declare a remote
    template reference.
    """

    async def list_templates(
        self,
        label_selector: Mapping[str, str] | None = None,
    ) -> list[ModuleTemplate]:
        """List templates whose labels contain every selector pair.

        Args:
            label_selector: Exact-match label requirements (None lists all)

        Returns:
            Matching templates in no particular order.
        """
        ...


@runtime_checkable
class ITenantReader(Protocol):
    """Read-only access to tenant resources on the control plane."""

    async def list_tenants(self) -> list[Tenant]:
        """List all tenants.

        Returns:
            Tenants in no particular order.
        """
        ...


@runtime_checkable
class IDescriptorProvider(Protocol):
    """Decodes and memoizes the component descriptor of a template."""

    def get_descriptor(self, template: ModuleTemplate) -> Descriptor:
        """Return the decoded descriptor for a template.

        Raises:
            DescriptorDecodeError: If the embedded descriptor is malformed
        """
        ...

    def add(self, template: ModuleTemplate) -> None:
        """Decode and cache the descriptor of a template.

        Raises:
            DescriptorDecodeError: If the embedded descriptor is malformed
        """
        ...
