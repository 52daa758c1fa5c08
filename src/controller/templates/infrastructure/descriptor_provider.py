"""Component descriptor decoding and memoization.

Templates embed a component descriptor either as a structured mapping or
as serialized JSON/YAML. Decoding is a pure function of the template's
content, so results are cached per template identity and generation:
concurrent population races are benign and the last writer wins.
"""

from __future__ import annotations

import threading
from collections.abc import Mapping
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from templates.domain.value_objects import Descriptor, ModuleTemplate
from templates.ports.exceptions import DescriptorDecodeError


class _ComponentIdentity(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    version: str


class _SchemaV2(BaseModel):
    """``meta.schemaVersion: v2`` layout, identity under ``component``."""

    model_config = ConfigDict(extra="ignore")

    component: _ComponentIdentity


class _SchemaV3(BaseModel):
    """``ocm.software/v3alpha1`` layout, identity under ``metadata``."""

    model_config = ConfigDict(extra="ignore")

    metadata: _ComponentIdentity


def decode_descriptor(raw: Any) -> Descriptor:
    """Decode a raw descriptor payload into its component identity.

    Args:
        raw: A mapping, or JSON/YAML as str or bytes

    Returns:
        The decoded Descriptor.

    Raises:
        ValueError: If the payload is empty, not a mapping, or lacks a
            component name and version
    """
    if raw is None or raw == b"" or raw == "":
        raise ValueError("descriptor is empty")

    if isinstance(raw, (bytes, str)):
        try:
            data = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise ValueError(f"descriptor is not valid YAML/JSON: {e}") from e
    else:
        data = raw

    if not isinstance(data, Mapping):
        raise ValueError(f"descriptor must be a mapping, got {type(data).__name__}")

    try:
        if "component" in data:
            identity = _SchemaV2.model_validate(data).component
        elif "metadata" in data:
            identity = _SchemaV3.model_validate(data).metadata
        else:
            raise ValueError("descriptor has neither component nor metadata block")
    except ValidationError as e:
        raise ValueError(f"descriptor identity is incomplete: {e}") from e

    return Descriptor(name=identity.name, version=identity.version)


def cache_key(template: ModuleTemplate) -> str:
    """Stable cache identity for a template's descriptor.

    The generation is bumped on every spec change, so a key is never
    reused for different descriptor content.
    """
    return f"{template.channel}:{template.namespaced_name}:{template.generation}"


class CachedDescriptorProvider:
    """Decodes template descriptors and memoizes the results.

    Safe to share between concurrent reconciliations. Decoding happens
    outside the lock; only the dictionary access is serialized.
    """

    def __init__(self) -> None:
        self._cache: dict[str, Descriptor] = {}
        self._lock = threading.Lock()

    def get_descriptor(self, template: ModuleTemplate) -> Descriptor:
        """Return the cached descriptor, decoding it on first access."""
        key = cache_key(template)
        with self._lock:
            cached = self._cache.get(key)
        if cached is not None:
            return cached

        descriptor = self._decode(template)
        with self._lock:
            self._cache[key] = descriptor
        return descriptor

    def add(self, template: ModuleTemplate) -> None:
        """Decode and cache a template's descriptor."""
        self.get_descriptor(template)

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def _decode(self, template: ModuleTemplate) -> Descriptor:
        try:
            return decode_descriptor(template.spec.descriptor)
        except ValueError as e:
            raise DescriptorDecodeError(template.namespaced_name, str(e)) from e
