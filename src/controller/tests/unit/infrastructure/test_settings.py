"""Unit tests for infrastructure settings."""

import pytest
from pydantic import ValidationError

from infrastructure.settings import ControllerSettings, LabelSettings


class TestControllerSettings:
    """Tests for controller settings."""

    def test_defaults(self):
        """Should have sensible defaults."""
        settings = ControllerSettings()
        assert settings.default_channel == "regular"
        assert settings.log_format == "auto"
        assert settings.state_field_path == ("status", "state")

    def test_reads_environment(self, monkeypatch):
        """Should read LIFECYCLE_ prefixed variables."""
        monkeypatch.setenv("LIFECYCLE_DEFAULT_CHANNEL", "fast")
        monkeypatch.setenv("LIFECYCLE_STATUS_STATE_PATH", "status.phase")

        settings = ControllerSettings()

        assert settings.default_channel == "fast"
        assert settings.state_field_path == ("status", "phase")

    @pytest.mark.parametrize("channel", ["", "   "])
    def test_default_channel_must_not_be_empty(self, channel):
        with pytest.raises(ValidationError):
            ControllerSettings(default_channel=channel)

    @pytest.mark.parametrize("path", ["status..state", ".state", "status."])
    def test_state_path_rejects_empty_segments(self, path):
        with pytest.raises(ValidationError):
            ControllerSettings(status_state_path=path)

    def test_log_format_is_restricted(self):
        with pytest.raises(ValidationError):
            ControllerSettings(log_format="xml")


class TestLabelSettings:
    """Tests for label settings."""

    def test_catalog_selector(self):
        settings = LabelSettings()
        assert settings.catalog_selector == {
            "operator.kyma-project.io/managed-by": "lifecycle-manager"
        }

    def test_empty_managed_by_value_disables_scoping(self):
        assert LabelSettings(managed_by_value="").catalog_selector == {}

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("LIFECYCLE_LABEL_MODULE_NAME", "example.io/module")

        assert LabelSettings().module_name == "example.io/module"
