"""Unit tests for Settings and its nested configuration models."""

import pytest
import pytest_check
from pydantic import ValidationError

from opbind.core.config import (
    LogConfig,
    RepresenterConfig,
    Settings,
    detect_formatter,
    get_settings,
)


@pytest.mark.unit
class TestSettings:
    """Test cases for Settings class."""

    def test_default_application_settings(self) -> None:
        """Test default application settings."""
        settings = Settings()

        with pytest_check.check:
            assert settings.app_name == "opbind"
        with pytest_check.check:
            assert settings.app_version
        with pytest_check.check:
            assert settings.environment == "development"
        with pytest_check.check:
            assert settings.debug is True

    def test_default_log_config(self) -> None:
        """Test default logging configuration (with pytest-env overrides)."""
        settings = Settings()

        with pytest_check.check:
            assert isinstance(settings.log_config, LogConfig)
        with pytest_check.check:
            assert settings.log_config.log_level == "WARNING"
        with pytest_check.check:
            assert settings.log_config.log_formatter_type == "console"
        with pytest_check.check:
            assert "password" in settings.log_config.sensitive_fields

    def test_default_representer_config(self) -> None:
        """Test None values are skipped by default."""
        settings = Settings()

        assert isinstance(settings.representer_config, RepresenterConfig)
        assert settings.representer_config.render_none is False

    def test_nested_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test nested configuration is read with the __ delimiter."""
        monkeypatch.setenv("REPRESENTER_CONFIG__RENDER_NONE", "true")
        monkeypatch.setenv("LOG_CONFIG__LOG_LEVEL", "DEBUG")

        settings = Settings()

        assert settings.representer_config.render_none is True
        assert settings.log_config.log_level == "DEBUG"

    def test_invalid_log_level_rejected(self) -> None:
        """Test log level is restricted to known names."""
        with pytest.raises(ValidationError):
            LogConfig(log_level="VERBOSE")  # type: ignore[arg-type]

    @pytest.mark.parametrize(
        ("environment", "cloud_var", "expected"),
        [
            ("development", None, "console"),
            ("staging", None, "json"),
            ("production", None, "json"),
            ("development", "K_SERVICE", "json"),
            ("development", "AWS_EXECUTION_ENV", "json"),
        ],
    )
    def test_formatter_auto_detection(
        self,
        monkeypatch: pytest.MonkeyPatch,
        environment: str,
        cloud_var: str | None,
        expected: str,
    ) -> None:
        """Test formatter is detected from environment when not configured."""
        monkeypatch.setenv("ENVIRONMENT", environment)
        if cloud_var:
            monkeypatch.setenv(cloud_var, "1")

        settings = Settings()

        assert settings.log_config.log_formatter_type == expected

    def test_explicit_formatter_kept(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test an explicit formatter is not replaced by auto-detection."""
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("LOG_CONFIG__LOG_FORMATTER_TYPE", "console")

        assert Settings().log_config.log_formatter_type == "console"

    def test_detect_formatter_matches_settings(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test settings and the detection helper agree on the formatter."""
        assert detect_formatter("development") == "console"
        assert detect_formatter("production") == "json"

        monkeypatch.setenv("K_SERVICE", "albums")

        assert detect_formatter("development") == "json"
        assert Settings().log_config.log_formatter_type == "json"


@pytest.mark.unit
class TestGetSettings:
    """Test cases for the cached settings accessor."""

    def test_get_settings_is_cached(self) -> None:
        """Test repeated calls return the same instance."""
        assert get_settings() is get_settings()

    def test_cache_clear_reloads(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test clearing the cache picks up new environment values."""
        first = get_settings()
        monkeypatch.setenv("APP_NAME", "albums")
        get_settings.cache_clear()

        second = get_settings()

        assert first is not second
        assert second.app_name == "albums"
