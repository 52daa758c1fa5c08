"""Unit test fixtures building templates and tenants in their serialized form."""

from typing import Any

import pytest

from templates.domain.value_objects import ModuleTemplate, Tenant

MODULE_LABEL = "operator.kyma-project.io/module-name"
INTERNAL_LABEL = "operator.kyma-project.io/internal"
BETA_LABEL = "operator.kyma-project.io/beta"


def _descriptor(name: str, version: str) -> dict[str, Any]:
    return {
        "meta": {"schemaVersion": "v2"},
        "component": {"name": name, "version": version, "provider": "internal"},
    }


@pytest.fixture
def template_factory():
    """Build a ModuleTemplate from the fields tests care about."""

    def build(
        name: str,
        channel: str = "regular",
        module: str | None = None,
        version: str = "1.0.0",
        generation: int = 1,
        namespace: str = "kcp-system",
        mandatory: bool = False,
        labels: dict[str, str] | None = None,
        descriptor: Any = None,
        component_name: str | None = None,
    ) -> ModuleTemplate:
        all_labels = dict(labels or {})
        if module is not None:
            all_labels[MODULE_LABEL] = module
        return ModuleTemplate.model_validate(
            {
                "apiVersion": "operator.kyma-project.io/v1beta2",
                "kind": "ModuleTemplate",
                "metadata": {
                    "name": name,
                    "namespace": namespace,
                    "generation": generation,
                    "labels": all_labels,
                },
                "spec": {
                    "channel": channel,
                    "mandatory": mandatory,
                    "descriptor": descriptor
                    if descriptor is not None
                    else _descriptor(component_name or f"kyma-project.io/module/{name}", version),
                },
            }
        )

    return build


@pytest.fixture
def tenant_factory():
    """Build a Tenant from module requests and recorded module status."""

    def build(
        modules: list[dict[str, Any]],
        channel: str = "",
        statuses: list[dict[str, Any]] | None = None,
        labels: dict[str, str] | None = None,
        sync: bool = True,
        name: str = "kyma-1",
        namespace: str = "kcp-system",
    ) -> Tenant:
        return Tenant.model_validate(
            {
                "metadata": {"name": name, "namespace": namespace, "labels": labels or {}},
                "spec": {"channel": channel, "modules": modules, "sync": sync},
                "status": {"modules": statuses or []},
            }
        )

    return build
