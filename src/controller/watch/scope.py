"""Static resource scope mapping.

Built once from the kinds the controller knows about. Versions are not
distinguished: a kind keeps its scope across API versions.
"""

from __future__ import annotations

from collections.abc import Iterable

from shared_kernel.object_meta import GroupKind
from watch.ports import ScopeLookupError


class StaticScopeMapper:
    """Scope lookup over a fixed set of namespaced and cluster-scoped kinds."""

    def __init__(
        self,
        namespaced: Iterable[GroupKind] = (),
        cluster_scoped: Iterable[GroupKind] = (),
    ) -> None:
        self._scopes: dict[GroupKind, bool] = {}
        for group_kind in namespaced:
            self._scopes[group_kind] = True
        for group_kind in cluster_scoped:
            if self._scopes.get(group_kind):
                raise ValueError(f"{group_kind} registered as both namespaced and cluster-scoped")
            self._scopes[group_kind] = False

    def is_namespaced(self, group_kind: GroupKind, version: str) -> bool:
        try:
            return self._scopes[group_kind]
        except KeyError:
            raise ScopeLookupError(group_kind, version) from None
