"""Controller settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Label keys and the catalog scope are passed explicitly
into the components that need them rather than read from module globals.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from templates.domain.value_objects import DEFAULT_CHANNEL


class LabelSettings(BaseSettings):
    """Label keys used to identify and classify modules and tenants.

    Environment variables:
        LIFECYCLE_LABEL_MODULE_NAME: Label carrying a template's module identity
        LIFECYCLE_LABEL_INTERNAL: Label marking templates/tenants as internal
        LIFECYCLE_LABEL_BETA: Label marking templates/tenants as beta
        LIFECYCLE_LABEL_MANAGED_BY: Label scoping the template catalog
        LIFECYCLE_LABEL_MANAGED_BY_VALUE: Required value of the managed-by label
    """

    model_config = SettingsConfigDict(
        env_prefix="LIFECYCLE_LABEL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    module_name: str = Field(
        default="operator.kyma-project.io/module-name",
        description="Label carrying the module identity of a template",
    )
    internal: str = Field(
        default="operator.kyma-project.io/internal",
        description="Label marking an object as internal",
    )
    beta: str = Field(
        default="operator.kyma-project.io/beta",
        description="Label marking an object as beta",
    )
    managed_by: str = Field(
        default="operator.kyma-project.io/managed-by",
        description="Label scoping which templates belong to the catalog",
    )
    managed_by_value: str = Field(
        default="lifecycle-manager",
        description="Required value of the managed-by label (empty disables scoping)",
    )

    @property
    def catalog_selector(self) -> dict[str, str]:
        """Label selector restricting catalog list calls."""
        if not self.managed_by_value:
            return {}
        return {self.managed_by: self.managed_by_value}


class ControllerSettings(BaseSettings):
    """Main controller settings.

    Environment variables:
        LIFECYCLE_DEFAULT_CHANNEL: Channel used when neither module nor tenant sets one
        LIFECYCLE_LOG_FORMAT: auto, console or json (default: auto, console on a TTY)
        LIFECYCLE_LOG_LEVEL: Minimum log level (default: 0, everything)
        LIFECYCLE_STATUS_STATE_PATH: Dotted path of the status state field on dependents
    """

    model_config = SettingsConfigDict(
        env_prefix="LIFECYCLE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(default="lifecycle-controller", description="Application name")
    default_channel: str = Field(
        default=DEFAULT_CHANNEL,
        description="System-wide fallback release channel",
    )
    log_level: int = Field(default=0, description="Minimum log level", ge=0, le=50)
    log_format: Literal["auto", "console", "json"] = Field(
        default="auto",
        description="Log renderer; auto picks console output on a TTY",
    )
    status_state_path: str = Field(
        default="status.state",
        description="Dotted path of the observed state field on dependent objects",
    )

    @field_validator("default_channel")
    @classmethod
    def validate_default_channel(cls, value: str) -> str:
        """The fallback channel can never be empty."""
        if not value.strip():
            raise ValueError("default_channel must not be empty")
        return value.strip()

    @model_validator(mode="after")
    def validate_status_state_path(self) -> "ControllerSettings":
        """Validate the state path has no empty segments."""
        if any(not part for part in self.status_state_path.split(".")):
            raise ValueError(
                f"status_state_path ({self.status_state_path}) must be a dotted path "
                "without empty segments"
            )
        return self

    @property
    def state_field_path(self) -> tuple[str, ...]:
        """The status state path split into segments."""
        return tuple(self.status_state_path.split("."))


@lru_cache
def get_controller_settings() -> ControllerSettings:
    """Get cached controller settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return ControllerSettings()


@lru_cache
def get_label_settings() -> LabelSettings:
    """Get cached label settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return LabelSettings()
