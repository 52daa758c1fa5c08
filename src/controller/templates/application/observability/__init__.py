"""Domain-Oriented Observability for the Templates application layer.

Probes for resolution and version-skew checks following Domain-Oriented
Observability patterns.
"""

from templates.application.observability.template_resolver_probe import (
    DefaultTemplateResolverProbe,
    TemplateResolverProbe,
)
from templates.application.observability.version_skew_probe import (
    DefaultVersionSkewProbe,
    VersionSkewProbe,
)

__all__ = [
    "TemplateResolverProbe",
    "DefaultTemplateResolverProbe",
    "VersionSkewProbe",
    "DefaultVersionSkewProbe",
]
