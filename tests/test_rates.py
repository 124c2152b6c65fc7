"""
Tests for rate providers and one-shot rate loading.
"""

import json

import pytest

from quantum_calc.conversion import CurrencyDomain
from quantum_calc.errors import RateFetchError
from quantum_calc.rates import JsonRateProvider, RateProvider, StaticRateProvider, load_rates


class FailingProvider(RateProvider):
    """Provider that always fails, counting attempts."""

    def __init__(self):
        self.calls = 0

    def fetch_rates(self, base: str = "USD"):
        self.calls += 1
        raise RateFetchError("network unreachable")


class TestStaticProvider:
    """Test the in-memory provider."""

    def test_load_populates_domain(self):
        domain = CurrencyDomain()
        table = load_rates(domain, StaticRateProvider({"EUR": 0.9, "JPY": 150.0}))
        assert table.base == "USD"
        assert domain.rates_loaded is True
        assert domain.convert(10, "USD", "EUR") == pytest.approx(9.0)

    def test_wrong_base_raises(self):
        with pytest.raises(RateFetchError):
            StaticRateProvider({"EUR": 0.9}).fetch_rates("EUR")


class TestJsonProvider:
    """Test reading a saved rate-API response."""

    def test_reads_api_response_shape(self, tmp_path):
        path = tmp_path / "rates.json"
        path.write_text(json.dumps({
            "base": "USD",
            "date": "2024-01-01",
            "rates": {"USD": 1, "EUR": 0.92, "GBP": 0.79},
        }))
        table = JsonRateProvider(path).fetch_rates()
        assert table.rates["EUR"] == 0.92
        assert table.rates["USD"] == 1.0

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(RateFetchError):
            JsonRateProvider(tmp_path / "absent.json").fetch_rates()

    def test_invalid_json_raises(self, tmp_path):
        path = tmp_path / "rates.json"
        path.write_text("{not json")
        with pytest.raises(RateFetchError):
            JsonRateProvider(path).fetch_rates()

    def test_non_numeric_rate_raises(self, tmp_path):
        path = tmp_path / "rates.json"
        path.write_text(json.dumps({"base": "USD", "rates": {"EUR": "lots"}}))
        with pytest.raises(RateFetchError):
            JsonRateProvider(path).fetch_rates()

    def test_non_utf8_file_raises(self, tmp_path):
        path = tmp_path / "rates.json"
        path.write_bytes(b'{"base":"USD","rates":{"EUR":0.9,"\xff":1}}')
        with pytest.raises(RateFetchError):
            JsonRateProvider(path).fetch_rates()

    def test_base_mismatch_raises(self, tmp_path):
        path = tmp_path / "rates.json"
        path.write_text(json.dumps({"base": "EUR", "rates": {"USD": 1.08}}))
        with pytest.raises(RateFetchError):
            JsonRateProvider(path).fetch_rates("USD")


class TestLoadRates:
    """Test failure handling of a single load attempt."""

    def test_failure_keeps_previous_table(self):
        domain = CurrencyDomain({"EUR": 0.5})
        with pytest.raises(RateFetchError):
            load_rates(domain, FailingProvider())
        assert domain.rates == {"EUR": 0.5}

    def test_single_attempt_no_retry(self):
        provider = FailingProvider()
        with pytest.raises(RateFetchError):
            load_rates(CurrencyDomain(), provider)
        assert provider.calls == 1

    def test_table_in_other_base_is_rejected(self):
        domain = CurrencyDomain({"EUR": 0.5})
        provider = EuroQuotedProvider()
        with pytest.raises(RateFetchError):
            load_rates(domain, provider)
        assert provider.requested == ["USD"]
        assert domain.rates == {"EUR": 0.5}


class EuroQuotedProvider(RateProvider):
    """Provider that ignores the requested base and answers in EUR."""

    def __init__(self):
        self.requested = []

    def fetch_rates(self, base: str = "USD"):
        self.requested.append(base)
        return StaticRateProvider({"EUR": 1.0, "USD": 1.1}, base="EUR").table
