"""Tests for configuration loading and validation."""

import pytest

from booking.config import AppConfig, RulesConfig, StorageConfig, _safe_int, _validate_config, settings


class TestConfigValidation:
    """Tests for _validate_config."""

    def test_default_config_passes_validation(self):
        """Defaults are valid."""
        config = AppConfig()
        _validate_config(config)  # should not raise

    def test_defaults(self):
        """Defaults match the rental business rules."""
        rules = RulesConfig()
        assert rules.maintenance_buffer_hours == 12
        assert rules.min_rental_days == 2
        assert rules.pickup_lead_hours == 2
        assert rules.default_return_time == "17:00"
        assert StorageConfig().fetch_failure_policy == "closed"

    def test_settings_singleton(self):
        """The module exposes a loaded config."""
        assert isinstance(settings, AppConfig)

    def test_negative_buffer(self):
        """A negative maintenance buffer is rejected."""
        config = AppConfig(rules=RulesConfig(maintenance_buffer_hours=-1))
        with pytest.raises(ValueError, match="MAINTENANCE_BUFFER_HOURS"):
            _validate_config(config)

    def test_zero_min_stay(self):
        """A minimum stay below one day is rejected."""
        config = AppConfig(rules=RulesConfig(min_rental_days=0))
        with pytest.raises(ValueError, match="MIN_RENTAL_DAYS"):
            _validate_config(config)

    def test_lead_hours_out_of_range(self):
        """Lead time must fit in a day."""
        config = AppConfig(rules=RulesConfig(pickup_lead_hours=24))
        with pytest.raises(ValueError, match="PICKUP_LEAD_HOURS"):
            _validate_config(config)

    def test_negative_advance_cap(self):
        """A negative month advance cap is rejected."""
        config = AppConfig(rules=RulesConfig(month_advance_cap=-1))
        with pytest.raises(ValueError, match="MONTH_ADVANCE_CAP"):
            _validate_config(config)

    def test_bad_return_time(self):
        """The default return time must be HH:MM."""
        config = AppConfig(rules=RulesConfig(default_return_time="5pm"))
        with pytest.raises(ValueError, match="DEFAULT_RETURN_TIME"):
            _validate_config(config)

    def test_unknown_fetch_policy(self):
        """Only open and closed fetch policies exist."""
        config = AppConfig(storage=StorageConfig(fetch_failure_policy="retry"))
        with pytest.raises(ValueError, match="FETCH_FAILURE_POLICY"):
            _validate_config(config)


class TestSafeInt:
    """Tests for _safe_int."""

    def test_reads_env(self, monkeypatch):
        """Values come from the environment."""
        monkeypatch.setenv("MIN_RENTAL_DAYS", "3")
        assert _safe_int("MIN_RENTAL_DAYS", "2") == 3

    def test_default(self, monkeypatch):
        """The default applies when the variable is unset."""
        monkeypatch.delenv("MIN_RENTAL_DAYS", raising=False)
        assert _safe_int("MIN_RENTAL_DAYS", "2") == 2

    def test_bad_value(self, monkeypatch):
        """Non-integers name the offending variable."""
        monkeypatch.setenv("MIN_RENTAL_DAYS", "two")
        with pytest.raises(ValueError, match="MIN_RENTAL_DAYS"):
            _safe_int("MIN_RENTAL_DAYS", "2")
