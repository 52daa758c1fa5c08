"""Exceptions for the Templates bounded context.

Every resolution outcome other than success is one of these. They are
attached to the per-module ResolutionResult by the lookup service, so a
failure for one module never aborts resolution of its siblings. Each
carries a ``reason`` that is safe to surface in the tenant's status.
"""

from __future__ import annotations

from collections.abc import Iterable


class TemplateLookupError(Exception):
    """Base class for all per-module resolution failures."""

    reason = "template lookup failed"

    def __init__(self, detail: str = ""):
        message = f"{self.reason}: {detail}" if detail else self.reason
        super().__init__(message)
        self.detail = detail


class NoTemplatesInListResultError(TemplateLookupError):
    """Raised when no template matches the module in the desired channel.

    Recoverable: the module has nothing to install yet.
    """

    reason = "no templates were found"

    def __init__(self, module_name: str, channel: str):
        super().__init__(f"in channel {channel} for module {module_name}")
        self.module_name = module_name
        self.channel = channel


class TemplateNotIdentifiedError(TemplateLookupError):
    """Raised when more than one template matches the module and channel.

    Never auto-resolved; the catalog authors must remove the ambiguity.
    """

    reason = "no unique template could be identified"

    def __init__(self, module_name: str, candidates: Iterable[str]):
        self.module_name = module_name
        self.candidates = sorted(candidates)
        super().__init__(
            f"more than one module template found for module: {module_name}, "
            f"candidates: {self.candidates}"
        )


class NotDefaultChannelAllowedError(TemplateLookupError):
    """Raised when the matching template declares no channel."""

    reason = "specifying no default channel is not allowed"

    def __init__(self, module_name: str):
        super().__init__(f"no channel found on template for module: {module_name}")
        self.module_name = module_name


class TemplateMarkedAsMandatoryError(TemplateLookupError):
    """Raised when the matching template is mandatory.

    Mandatory templates are not managed through channel resolution.
    """

    reason = "template marked as mandatory"

    def __init__(self, module_name: str, channel: str):
        super().__init__(f"in channel {channel} for module {module_name}")
        self.module_name = module_name
        self.channel = channel


class TemplateNotAllowedError(TemplateLookupError):
    """Raised when the tenant may not see the resolved template (internal/beta)."""

    reason = "module template not allowed"


class TemplateUpdateNotAllowedError(TemplateLookupError):
    """Raised when a channel change would downgrade or cannot be verified."""

    reason = "module template update not allowed"


class TemplateNotValidError(TemplateLookupError):
    """Raised when the tenant's module reference failed upstream validation."""

    reason = "given module template is not valid"


class InvalidRemoteModuleConfigurationError(TemplateLookupError):
    """Raised when a remote template reference cannot be looked up."""

    reason = "invalid remote module template configuration"


class DescriptorDecodeError(TemplateLookupError):
    """Raised when a template's embedded descriptor cannot be decoded.

    Decode failures during lookup fail the whole lookup closed.
    """

    reason = "invalid module template descriptor"

    def __init__(self, template_name: str, detail: str):
        super().__init__(f"{template_name}: {detail}")
        self.template_name = template_name


class TemplateListError(TemplateLookupError):
    """Raised when listing templates from the object store fails."""

    reason = "failed to list module templates on lookup"
