"""Infrastructure adapters for the Templates bounded context."""

from templates.infrastructure.catalog_index import TemplateCatalogIndex
from templates.infrastructure.descriptor_provider import (
    CachedDescriptorProvider,
    decode_descriptor,
)

__all__ = ["CachedDescriptorProvider", "TemplateCatalogIndex", "decode_descriptor"]
