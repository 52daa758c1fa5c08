"""Reconcile-scoped metadata for probe events.

Tenants are reconciled concurrently, so every probe event emitted during
a lookup pass carries the tenant and the cluster the data came from.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace

CONTROL_PLANE_CLUSTER = "control-plane"
REMOTE_CLUSTER = "remote"


@dataclass(frozen=True)
class ObservationContext:
    """Immutable metadata merged into every event of a bound probe.

    Attributes:
        reconcile_id: Identifier of the reconciliation pass, if the caller has one
        tenant: ``namespace/name`` of the tenant being reconciled
        cluster: Which cluster templates are read from
    """

    reconcile_id: str | None = None
    tenant: str | None = None
    cluster: str | None = None

    def as_dict(self) -> dict[str, str]:
        """Log keyword arguments, without unset fields."""
        return {key: value for key, value in asdict(self).items() if value is not None}

    def for_cluster(self, cluster: str) -> ObservationContext:
        return replace(self, cluster=cluster)
