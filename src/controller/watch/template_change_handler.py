"""Template change propagation.

When a template is created, changed or deleted, every tenant that
requests the template's module in the template's channel has to be
reconciled again. An update wakes the tenants of both the old and the
new form, since a template can move to another channel or module.
Unlike owner propagation this needs the tenant list, so mapping an event
is an async read against the tenant reader.
"""

from __future__ import annotations

from pydantic import ValidationError

from shared_kernel.object_meta import WorkItem
from templates.domain.value_objects import (
    DEFAULT_CHANNEL,
    ModuleTemplate,
    Tenant,
    desired_channel_for,
)
from templates.ports.repositories import ITenantReader
from watch.events import (
    CreateEvent,
    DeleteEvent,
    GenericEvent,
    SerializedObject,
    UpdateEvent,
)
from watch.observability import DefaultTemplateChangeProbe, TemplateChangeProbe
from watch.ports import IWorkQueue


class TemplateChangeHandler:
    """Maps template events to work items for the tenants using them."""

    def __init__(
        self,
        tenant_reader: ITenantReader,
        module_name_label: str,
        system_default_channel: str = DEFAULT_CHANNEL,
        probe: TemplateChangeProbe | None = None,
    ) -> None:
        self._tenant_reader = tenant_reader
        self._module_name_label = module_name_label
        self._system_default_channel = system_default_channel
        self._probe = probe or DefaultTemplateChangeProbe()

    async def create(self, event: CreateEvent, queue: IWorkQueue) -> None:
        await self._enqueue(queue, event.object)

    async def update(self, event: UpdateEvent, queue: IWorkQueue) -> None:
        await self._enqueue(queue, event.object_old, event.object_new)

    async def delete(self, event: DeleteEvent, queue: IWorkQueue) -> None:
        await self._enqueue(queue, event.object)

    async def generic(self, event: GenericEvent, queue: IWorkQueue) -> None:
        await self._enqueue(queue, event.object)

    async def tenants_for(self, *templates: ModuleTemplate) -> set[WorkItem]:
        """Work items for every tenant requesting any of the templates' module and channel."""
        tenants = await self._tenant_reader.list_tenants()
        return {
            WorkItem(name=tenant.name, namespace=tenant.namespace)
            for tenant in tenants
            if any(self._requests(tenant, template) for template in templates)
        }

    def _requests(self, tenant: Tenant, template: ModuleTemplate) -> bool:
        identities = {template.name, template.namespaced_name}
        label_identity = template.labels.get(self._module_name_label)
        if label_identity:
            identities.add(label_identity)
        for module in tenant.spec.modules:
            if module.name not in identities:
                continue
            channel = desired_channel_for(
                module.channel, tenant.spec.channel, self._system_default_channel
            )
            if channel == template.channel:
                return True
        return False

    def _parse(self, objects: tuple[SerializedObject, ...]) -> list[ModuleTemplate]:
        templates = []
        for obj in objects:
            try:
                templates.append(ModuleTemplate.model_validate(obj))
            except ValidationError as e:
                self._probe.malformed_template(str(e))
        return templates

    async def _enqueue(self, queue: IWorkQueue, *objects: SerializedObject) -> None:
        templates = self._parse(objects)
        if not templates:
            return
        name = templates[-1].namespaced_name
        try:
            items = await self.tenants_for(*templates)
        except Exception as e:
            # Dropped; the next resync of the template re-triggers the mapping
            self._probe.tenant_listing_failed(name, str(e))
            return
        for item in items:
            queue.add(item)
        self._probe.tenants_enqueued(name, len(items))
