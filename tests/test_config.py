"""Tests for configuration loading and validation."""

import pytest

from barbershop.config import (
    AppConfig,
    BusinessConfig,
    ModelConfig,
    NotificationConfig,
    _validate_config,
)


class TestConfigValidation:
    def test_default_config_passes_validation(self):
        config = AppConfig()
        _validate_config(config)  # should not raise

    def test_default_business_hours(self):
        business = BusinessConfig()
        assert business.opening_minute == 480
        assert business.closing_minute == 1200

    def test_invalid_temperature_too_high(self):
        config = AppConfig(model=ModelConfig(llm_temperature=3.0))
        with pytest.raises(ValueError, match="LLM_TEMPERATURE"):
            _validate_config(config)

    def test_invalid_temperature_negative(self):
        config = AppConfig(model=ModelConfig(llm_temperature=-0.5))
        with pytest.raises(ValueError, match="LLM_TEMPERATURE"):
            _validate_config(config)

    def test_opening_after_closing(self):
        config = AppConfig(business=BusinessConfig(opening_minute=1200, closing_minute=480))
        with pytest.raises(ValueError, match="BUSINESS_OPENING_MINUTE"):
            _validate_config(config)

    def test_closing_past_midnight(self):
        config = AppConfig(business=BusinessConfig(closing_minute=1440))
        with pytest.raises(ValueError, match="BUSINESS_CLOSING_MINUTE"):
            _validate_config(config)

    def test_invalid_slot_step(self):
        config = AppConfig(business=BusinessConfig(slot_step_minutes=0))
        with pytest.raises(ValueError, match="SLOT_STEP_MINUTES"):
            _validate_config(config)

    def test_invalid_notification_timeout(self):
        config = AppConfig(notifications=NotificationConfig(timeout_sec=0))
        with pytest.raises(ValueError, match="NOTIFICATION_TIMEOUT"):
            _validate_config(config)

    def test_safe_int_parsing(self):
        from barbershop.config import _safe_int

        assert _safe_int("NONEXISTENT_VAR_12345", "42") == 42

    def test_safe_int_rejects_garbage(self, monkeypatch):
        from barbershop.config import _safe_int

        monkeypatch.setenv("BARBERSHOP_TEST_INT", "eight")
        with pytest.raises(ValueError, match="BARBERSHOP_TEST_INT"):
            _safe_int("BARBERSHOP_TEST_INT", "0")

    def test_safe_float_parsing(self):
        from barbershop.config import _safe_float

        assert _safe_float("NONEXISTENT_VAR_12345", "3.14") == pytest.approx(3.14)

    def test_safe_bool_parsing(self, monkeypatch):
        from barbershop.config import _safe_bool

        monkeypatch.setenv("BARBERSHOP_TEST_FLAG", "yes")
        assert _safe_bool("BARBERSHOP_TEST_FLAG", "false") is True
        assert _safe_bool("NONEXISTENT_VAR_12345", "off") is False
        monkeypatch.setenv("BARBERSHOP_TEST_FLAG", "maybe")
        with pytest.raises(ValueError, match="BARBERSHOP_TEST_FLAG"):
            _safe_bool("BARBERSHOP_TEST_FLAG", "false")
