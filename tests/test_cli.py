"""
Tests for the command-line interface.
"""

import json

import pytest
from pydantic import ValidationError
from typer.testing import CliRunner

from quantum_calc.cli import app
from quantum_calc.config import Settings, configure_logging
from quantum_calc.models import FallbackPolicy, HistoryFormat

runner = CliRunner()


class TestCalcCommand:
    """Test running keypad sequences."""

    def test_chained_addition(self):
        result = runner.invoke(app, ["calc", "3", "+", "4", "+", "5", "="])
        assert result.exit_code == 0
        assert "12.0" in result.output

    def test_multi_digit_tokens(self):
        result = runner.invoke(app, ["calc", "12.5", "*", "2", "="])
        assert result.exit_code == 0
        assert "25.0" in result.output

    def test_history_flag(self):
        result = runner.invoke(app, ["calc", "--history", "2", "+", "2", "="])
        assert result.exit_code == 0
        assert "Calculation History" in result.output

    def test_unknown_key_fails(self):
        result = runner.invoke(app, ["calc", "2", "?"])
        assert result.exit_code == 1
        assert "Unknown key" in result.output


class TestSciCommand:
    """Test scientific functions from the command line."""

    def test_sqrt(self):
        result = runner.invoke(app, ["sci", "sqrt", "81"])
        assert result.exit_code == 0
        assert "sqrt(81.0) = 9.0" in result.output


class TestConvertCommand:
    """Test unit conversion from the command line."""

    def test_length(self):
        result = runner.invoke(app, ["convert", "length", "1", "Miles", "Kilometers"])
        assert result.exit_code == 0
        assert "1.60934" in result.output

    def test_invalid_value(self):
        result = runner.invoke(app, ["convert", "length", "abc", "Meters", "Feet"])
        assert result.exit_code == 0
        assert "Invalid input" in result.output

    def test_unknown_domain(self):
        result = runner.invoke(app, ["convert", "time", "1", "Hours", "Minutes"])
        assert result.exit_code == 1

    def test_currency_with_rate_file(self, tmp_path):
        path = tmp_path / "rates.json"
        path.write_text(json.dumps({"base": "USD", "rates": {"EUR": 0.5}}))
        result = runner.invoke(
            app, ["convert", "currency", "10", "USD", "EUR", "--rates", str(path)]
        )
        assert result.exit_code == 0
        assert "5.0" in result.output

    def test_currency_with_bad_rate_file(self, tmp_path):
        result = runner.invoke(
            app, ["convert", "currency", "10", "USD", "EUR", "--rates", str(tmp_path / "x.json")]
        )
        assert result.exit_code == 1


class TestUnitsCommand:
    """Test listing domains."""

    def test_single_domain(self):
        result = runner.invoke(app, ["units", "speed"])
        assert result.exit_code == 0
        assert "Speed" in result.output


class TestLogLevel:
    """Test log level validation."""

    def test_unknown_level_is_a_usage_error(self):
        result = runner.invoke(app, ["--log-level", "loud", "units"])
        assert result.exit_code == 2
        assert not isinstance(result.exception, KeyError)

    def test_known_level_accepted(self):
        result = runner.invoke(app, ["--log-level", "warning", "units", "speed"])
        assert result.exit_code == 0

    def test_configure_logging_rejects_unknown_level(self):
        with pytest.raises(ValueError):
            configure_logging("loud")

    def test_settings_reject_unknown_level(self, monkeypatch):
        monkeypatch.setenv("QCALC_LOG_LEVEL", "LOUD")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)


class TestSettings:
    """Test environment-driven configuration."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("QCALC_PARSE_POLICY", raising=False)
        config = Settings(_env_file=None)
        assert config.parse_policy == FallbackPolicy.LENIENT_ZERO
        assert config.history_format == HistoryFormat.COMPAT
        assert config.display_max_chars == 10

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("QCALC_PARSE_POLICY", "strict")
        monkeypatch.setenv("QCALC_HISTORY_FORMAT", "corrected")
        config = Settings(_env_file=None)
        assert config.policies().parse == FallbackPolicy.STRICT
        assert config.history_format == HistoryFormat.CORRECTED
