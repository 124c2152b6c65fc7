"""
Exchange-rate providers for QuantumCalc.

The currency domain only depends on the resulting rate table, never on how
it was obtained. Providers make a single attempt; there is no retry,
timeout or backoff policy here.
"""

import json
from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path

import structlog
from pydantic import ValidationError

from quantum_calc.conversion import CurrencyDomain
from quantum_calc.errors import RateFetchError
from quantum_calc.models import RateTable

logger = structlog.get_logger()


class RateProvider(ABC):
    """Abstract base class for rate-table providers."""

    @abstractmethod
    def fetch_rates(self, base: str = "USD") -> RateTable:
        """
        Fetch rates relative to base.

        Raises:
            RateFetchError: If no table could be obtained
        """
        pass


class StaticRateProvider(RateProvider):
    """Serves a fixed mapping, for offline use and tests."""

    def __init__(self, rates: Mapping[str, float], base: str = "USD"):
        self.table = RateTable(base=base, rates=dict(rates))

    def fetch_rates(self, base: str = "USD") -> RateTable:
        if base != self.table.base:
            raise RateFetchError(
                f"Static rates are relative to {self.table.base}, not {base}"
            )
        return self.table


class JsonRateProvider(RateProvider):
    """Reads a saved exchange-rate API response: {"base": ..., "rates": {...}}."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def fetch_rates(self, base: str = "USD") -> RateTable:
        try:
            with open(self.path, encoding="utf-8") as f:
                table = RateTable.model_validate(json.load(f))
        # ValueError covers UnicodeDecodeError and JSONDecodeError
        except (OSError, ValueError, ValidationError) as e:
            raise RateFetchError(f"Could not read rates from {self.path}: {e}") from e

        if table.base != base:
            raise RateFetchError(
                f"Rates in {self.path} are relative to {table.base}, not {base}"
            )
        return table


def load_rates(domain: CurrencyDomain, provider: RateProvider) -> RateTable:
    """
    Populate a currency domain from a provider in one attempt.

    Rates are requested relative to the domain's base currency; a table
    quoted against any other base is rejected. On failure the domain keeps
    its previous table and the error propagates to the caller, which
    decides how to surface it.

    Returns:
        The table now held by the domain
    """
    base = domain.base_unit
    try:
        table = provider.fetch_rates(base)
        if table.base != base:
            raise RateFetchError(
                f"{type(provider).__name__} returned rates relative to {table.base}, not {base}"
            )
    except RateFetchError as e:
        logger.error("Rate fetch failed", provider=type(provider).__name__, error=str(e))
        raise

    domain.set_rates(table)
    return table
