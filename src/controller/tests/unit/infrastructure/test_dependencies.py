"""Unit tests for process-wide initialization."""

import json

import pytest
import structlog

from infrastructure.dependencies import initialize_controller
from infrastructure.settings import get_controller_settings


@pytest.fixture(autouse=True)
def fresh_settings():
    get_controller_settings.cache_clear()
    yield
    get_controller_settings.cache_clear()
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()


class TestInitializeController:
    def test_returns_cached_settings(self):
        assert initialize_controller() is get_controller_settings()

    def test_configures_logging_from_settings(self, monkeypatch, capsys):
        monkeypatch.setenv("LIFECYCLE_LOG_FORMAT", "json")
        monkeypatch.setenv("LIFECYCLE_LOG_LEVEL", "30")
        monkeypatch.setenv("LIFECYCLE_APP_NAME", "lcm-test")

        initialize_controller()
        structlog.get_logger().info("channel_used")
        structlog.get_logger().error("template_resolution_failed")

        lines = capsys.readouterr().out.strip().splitlines()
        assert len(lines) == 1
        event = json.loads(lines[0])
        assert event["event"] == "template_resolution_failed"
        assert event["app"] == "lcm-test"
