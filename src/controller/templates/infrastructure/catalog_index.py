"""In-memory template catalog with a label index.

Mirrors the informer cache the controller reads templates from: the
watch layer feeds it upserts and deletions. A selector-scoped listing is
answered from the label index; identity matching of the listed templates
is left to the resolver.
"""

from __future__ import annotations

import threading
from collections import defaultdict
from collections.abc import Mapping

from templates.domain.value_objects import ModuleTemplate


class TemplateCatalogIndex:
    """Thread-safe template store implementing ITemplateReader."""

    def __init__(self, templates: list[ModuleTemplate] | None = None) -> None:
        self._lock = threading.RLock()
        self._templates: dict[str, ModuleTemplate] = {}
        self._by_label: dict[tuple[str, str], set[str]] = defaultdict(set)
        for template in templates or []:
            self.upsert(template)

    def upsert(self, template: ModuleTemplate) -> None:
        """Insert or replace a template, keyed by ``namespace/name``."""
        key = template.namespaced_name
        with self._lock:
            self._unindex(key)
            self._templates[key] = template
            for label in template.labels.items():
                self._by_label[label].add(key)

    def delete(self, namespace: str, name: str) -> bool:
        """Remove a template. Returns False if it was not present."""
        key = f"{namespace}/{name}"
        with self._lock:
            if key not in self._templates:
                return False
            self._unindex(key)
            del self._templates[key]
            return True

    async def list_templates(
        self,
        label_selector: Mapping[str, str] | None = None,
    ) -> list[ModuleTemplate]:
        """List templates matching every label in the selector, sorted by key."""
        with self._lock:
            if not label_selector:
                return [self._templates[key] for key in sorted(self._templates)]
            keys: set[str] | None = None
            for label in label_selector.items():
                matched = self._by_label.get(label, set())
                keys = set(matched) if keys is None else keys & matched
                if not keys:
                    return []
            return [self._templates[key] for key in sorted(keys or ())]

    def __len__(self) -> int:
        with self._lock:
            return len(self._templates)

    def _unindex(self, key: str) -> None:
        previous = self._templates.get(key)
        if previous is None:
            return
        for label in previous.labels.items():
            bucket = self._by_label.get(label)
            if bucket is None:
                continue
            bucket.discard(key)
            if not bucket:
                del self._by_label[label]
