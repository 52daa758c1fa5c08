"""Domain value objects for the Templates bounded context.

These model the declarative resources the resolver reads: module templates
in the catalog, tenants with their requested modules, and the per-module
status a tenant records after an installation. Objects arrive in their
serialized (camelCase) form, so models accept wire aliases.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from shared_kernel.object_meta import ObjectMeta

# Fallback channel when neither the module nor the tenant names one
DEFAULT_CHANNEL = "regular"

# Label values are compared case-insensitively against this
FLAG_ENABLED = "true"


class Descriptor(BaseModel):
    """Identity decoded from a template's embedded component descriptor."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str


class ModuleTemplateSpec(BaseModel):
    """Spec block of a module template."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    channel: str = ""
    mandatory: bool = False
    # Raw component descriptor payload: a mapping, or JSON/YAML text or bytes
    descriptor: Any = None


class ModuleTemplate(BaseModel):
    """A versioned, channel-scoped catalog entry for one module."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    spec: ModuleTemplateSpec = Field(default_factory=ModuleTemplateSpec)

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def namespace(self) -> str:
        return self.metadata.namespace

    @property
    def namespaced_name(self) -> str:
        return f"{self.metadata.namespace}/{self.metadata.name}"

    @property
    def labels(self) -> dict[str, str]:
        return self.metadata.labels

    @property
    def generation(self) -> int:
        return self.metadata.generation

    @property
    def channel(self) -> str:
        return self.spec.channel

    @property
    def mandatory(self) -> bool:
        return self.spec.mandatory

    def has_flag(self, label: str) -> bool:
        """Check whether a boolean marker label is set to true."""
        return self.labels.get(label, "").lower() == FLAG_ENABLED


class ModuleReference(BaseModel):
    """A module requested by a tenant.

    Attributes:
        name: Identity of the module, unique within a tenant's request list
        channel: Optional channel overriding the tenant default
        valid: False when upstream validation rejected the reference
        remote_template_ref: Identity to resolve on the remote cluster instead
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    name: str
    channel: str = ""
    valid: bool = True
    remote_template_ref: str = Field(default="", alias="remoteModuleTemplateRef")


class TemplateTracking(BaseModel):
    """Reference to the template an installation was produced from."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    name: str = ""
    namespace: str = ""
    generation: int = 0


class ModuleStatus(BaseModel):
    """Last applied state of one module, recorded in the tenant status."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    name: str = ""
    fqdn: str = ""
    channel: str = ""
    version: str = ""
    state: str = ""
    template: TemplateTracking | None = None

    def matches(self, module_name: str) -> bool:
        """Check whether this status entry belongs to the named module."""
        return self.fqdn == module_name or self.name == module_name


class TenantSpec(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    channel: str = ""
    modules: tuple[ModuleReference, ...] = ()
    sync: bool = True


class TenantStatus(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    state: str = ""
    modules: tuple[ModuleStatus, ...] = ()


class Tenant(BaseModel):
    """The desired module set of one managed cluster."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    spec: TenantSpec = Field(default_factory=TenantSpec)
    status: TenantStatus = Field(default_factory=TenantStatus)

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def namespace(self) -> str:
        return self.metadata.namespace

    @property
    def sync_enabled(self) -> bool:
        return self.spec.sync

    def has_flag(self, label: str) -> bool:
        """Check whether a boolean marker label is set to true."""
        return self.metadata.labels.get(label, "").lower() == FLAG_ENABLED

    def statuses_for(self, module_name: str) -> list[ModuleStatus]:
        """Return every recorded status entry for the named module."""
        return [status for status in self.status.modules if status.matches(module_name)]


def desired_channel_for(module_channel: str, tenant_channel: str, fallback: str) -> str:
    """Pick the channel a module should be resolved in.

    The explicit module channel wins, then the tenant default, then the
    system-wide fallback.
    """
    if module_channel:
        return module_channel
    if tenant_channel:
        return tenant_channel
    return fallback


@dataclass(frozen=True)
class ResolutionResult:
    """Outcome of resolving one module in one reconciliation pass.

    Holds either a resolved template or an error. ``outdated`` is only
    meaningful for successful resolutions that were compared against a
    recorded status entry.
    """

    desired_channel: str
    template: ModuleTemplate | None = None
    error: Exception | None = None
    outdated: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None and self.template is not None

    def with_error(self, error: Exception) -> ResolutionResult:
        """Return a copy carrying the given error."""
        return replace(self, error=error)

    def with_outdated(self, outdated: bool) -> ResolutionResult:
        """Return a copy with the outdated flag set."""
        return replace(self, outdated=outdated)
