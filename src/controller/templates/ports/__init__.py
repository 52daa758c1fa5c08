"""Templates ports (interfaces) module.

Ports define the contracts between the application layer and the
external object store. They allow for dependency inversion, keeping the
resolver independent of any specific client library.
"""

from templates.ports.repositories import (
    IDescriptorProvider,
    ITemplateReader,
    ITenantReader,
)

__all__ = ["IDescriptorProvider", "ITemplateReader", "ITenantReader"]
