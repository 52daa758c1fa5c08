"""Version-skew guard.

Compares a freshly resolved template with the status a tenant recorded
after its last installation of the module. Two kinds of skew exist:

- Generation skew: same channel, new template content. Always allowed,
  the result is marked outdated so the installer re-applies it.
- Channel skew: the tenant moved the module to another release track.
  Versions across tracks are independent, so the move is only allowed
  when it does not lower the installed version. A blocked move leaves
  the installation untouched until the new channel catches up or the
  tenant reverts the change.
"""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, NoReturn

from templates.application.observability import (
    DefaultVersionSkewProbe,
    VersionSkewProbe,
)
from templates.domain.value_objects import ModuleStatus, ModuleTemplate
from templates.domain.versions import (
    VersionParseError,
    is_valid_version_change,
    parse_version,
)
from templates.ports.exceptions import (
    DescriptorDecodeError,
    TemplateUpdateNotAllowedError,
)
from templates.ports.repositories import IDescriptorProvider

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class VersionSkewGuard:
    """Decides whether a resolved template may replace the applied one."""

    def __init__(
        self,
        descriptor_provider: IDescriptorProvider,
        probe: VersionSkewProbe | None = None,
    ):
        self._descriptor_provider = descriptor_provider
        self._probe = probe or DefaultVersionSkewProbe()

    def with_context(self, context: ObservationContext) -> VersionSkewGuard:
        """Return a guard whose probe events carry the given context."""
        bound = copy.copy(self)
        bound._probe = self._probe.with_context(context)
        return bound

    def check_update_allowed(
        self,
        resolved: ModuleTemplate,
        desired_channel: str,
        status: ModuleStatus,
    ) -> bool:
        """Check a resolved template against the recorded module status.

        Only call this when a status entry exists for the module; first
        installs have nothing to compare against.

        Args:
            resolved: The template the resolver picked
            desired_channel: The channel the template was resolved in
            status: The last applied state of the module

        Returns:
            True if the installation is outdated and must be re-applied.

        Raises:
            TemplateUpdateNotAllowedError: The channel change is a downgrade
                or either version cannot be parsed
        """
        module_name = status.fqdn or status.name

        if resolved.channel != status.channel:
            self._probe.channel_skew(
                module_name=module_name,
                template=resolved.namespaced_name,
                new_channel=desired_channel,
                previous_channel=status.channel,
            )
            self._check_channel_change(resolved, status, module_name)
            return True

        previous_generation = status.template.generation if status.template else 0
        if resolved.generation != previous_generation:
            self._probe.generation_skew(
                module_name=module_name,
                template=resolved.namespaced_name,
                new_generation=resolved.generation,
                previous_generation=previous_generation,
            )
            return True

        return False

    def _check_channel_change(
        self,
        resolved: ModuleTemplate,
        status: ModuleStatus,
        module_name: str,
    ) -> None:
        try:
            descriptor = self._descriptor_provider.get_descriptor(resolved)
        except DescriptorDecodeError as e:
            self._unverifiable(
                resolved,
                module_name,
                "could not handle channel skew as descriptor from template cannot be fetched",
                e,
            )
        try:
            new_version = parse_version(descriptor.version)
        except VersionParseError as e:
            self._unverifiable(
                resolved,
                module_name,
                "could not handle channel skew as descriptor from template contains invalid version",
                e,
            )
        try:
            previous_version = parse_version(status.version)
        except VersionParseError as e:
            self._unverifiable(
                resolved,
                module_name,
                "could not handle channel skew as module status contains invalid version",
                e,
            )

        if not is_valid_version_change(new_version, previous_version):
            self._probe.downgrade_blocked(
                module_name=module_name,
                previous_channel=status.channel,
                new_channel=resolved.channel,
                previous_version=str(previous_version),
                new_version=str(new_version),
            )
            raise TemplateUpdateNotAllowedError(
                f"ignore channel skew (from {status.channel} to {resolved.channel}), "
                f"as a higher version ({previous_version}) of the module was previously installed"
            )

    def _unverifiable(
        self,
        resolved: ModuleTemplate,
        module_name: str,
        message: str,
        cause: Exception,
    ) -> NoReturn:
        self._probe.version_unverifiable(
            module_name=module_name,
            template=resolved.namespaced_name,
            error=str(cause),
        )
        raise TemplateUpdateNotAllowedError(message) from cause
