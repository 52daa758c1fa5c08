"""Application services for the Templates bounded context.

Application services orchestrate the catalog readers, the descriptor
cache, and the domain rules to fulfill a tenant's resolution pass.
"""

from templates.application.services.template_lookup_service import (
    TemplateLookupService,
)
from templates.application.services.template_resolver import TemplateResolver
from templates.application.services.version_skew_guard import VersionSkewGuard

__all__ = ["TemplateLookupService", "TemplateResolver", "VersionSkewGuard"]
