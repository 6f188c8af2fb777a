"""Tests for configuration validation"""
import pytest

from active_break import config


class TestConfigValidation:
    """validate_config() against patched module settings"""

    def test_defaults_are_valid(self):
        config.validate_config()

    def test_default_threshold(self):
        assert 0 < config.NEAR_COMPLETION_THRESHOLD <= 1

    def test_missing_database_url(self, monkeypatch):
        monkeypatch.setattr(config, "DATABASE_URL", "")

        with pytest.raises(ValueError, match="DATABASE_URL"):
            config.validate_config()

    @pytest.mark.parametrize("threshold", [0.0, -0.1, 1.5])
    def test_threshold_out_of_range(self, monkeypatch, threshold):
        monkeypatch.setattr(config, "NEAR_COMPLETION_THRESHOLD", threshold)

        with pytest.raises(ValueError, match="NEAR_COMPLETION_THRESHOLD"):
            config.validate_config()

    def test_threshold_of_one_allowed(self, monkeypatch):
        monkeypatch.setattr(config, "NEAR_COMPLETION_THRESHOLD", 1.0)

        config.validate_config()

    def test_non_positive_reminder_interval(self, monkeypatch):
        monkeypatch.setattr(config, "REMINDER_CHECK_INTERVAL_MINUTES", 0)

        with pytest.raises(ValueError, match="REMINDER_CHECK_INTERVAL_MINUTES"):
            config.validate_config()

    def test_non_positive_tips_per_day(self, monkeypatch):
        monkeypatch.setattr(config, "TIPS_PER_DAY", 0)

        with pytest.raises(ValueError, match="TIPS_PER_DAY"):
            config.validate_config()

    def test_pool_min_above_max(self, monkeypatch):
        monkeypatch.setattr(config, "DB_POOL_MIN_SIZE", 10)
        monkeypatch.setattr(config, "DB_POOL_MAX_SIZE", 2)

        with pytest.raises(ValueError, match="DB_POOL_MIN_SIZE"):
            config.validate_config()

    def test_invalid_prometheus_port(self, monkeypatch):
        monkeypatch.setattr(config, "ENABLE_PROMETHEUS", True)
        monkeypatch.setattr(config, "PROMETHEUS_PORT", 70000)

        with pytest.raises(ValueError, match="PROMETHEUS_PORT"):
            config.validate_config()
