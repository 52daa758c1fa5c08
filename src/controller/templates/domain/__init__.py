"""Templates domain module.

Contains value objects for module templates, tenants, recorded module
status, and version comparison rules.
"""

from templates.domain.value_objects import (
    DEFAULT_CHANNEL,
    Descriptor,
    ModuleReference,
    ModuleStatus,
    ModuleTemplate,
    ResolutionResult,
    TemplateTracking,
    Tenant,
    desired_channel_for,
)
from templates.domain.versions import (
    VersionParseError,
    is_valid_version_change,
    parse_version,
)

__all__ = [
    "DEFAULT_CHANNEL",
    "Descriptor",
    "ModuleReference",
    "ModuleStatus",
    "ModuleTemplate",
    "ResolutionResult",
    "TemplateTracking",
    "Tenant",
    "VersionParseError",
    "desired_channel_for",
    "is_valid_version_change",
    "parse_version",
]
