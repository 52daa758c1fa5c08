"""Shared infrastructure dependencies.

Provides ONLY process-wide setup (settings and logging).
Bounded-context components are composed in each context's own
dependencies module.
"""

from infrastructure.logging import configure_logging
from infrastructure.settings import ControllerSettings, get_controller_settings


def initialize_controller() -> ControllerSettings:
    """Load settings and configure logging before any component is built.

    Returns:
        The cached controller settings
    """
    settings = get_controller_settings()
    configure_logging(
        level=settings.log_level,
        log_format=settings.log_format,
        app_name=settings.app_name,
    )
    return settings
