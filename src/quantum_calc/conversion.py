"""
Unit conversion table for QuantumCalc.

Each domain converts through a base unit: ``convert`` maps the value to
the base unit and then from the base unit to the target. Length, weight,
area, volume and speed are purely multiplicative; temperature is affine;
currency divides and multiplies by an externally supplied rate table.

Unknown unit names pass through unchanged under the default
LENIENT_IDENTITY policy so that unit lists can grow ahead of the tables.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping

import structlog

from quantum_calc import numeric
from quantum_calc.config import settings
from quantum_calc.errors import MissingRateError, UnknownDomainError, UnknownUnitError
from quantum_calc.models import FallbackPolicies, FallbackPolicy, RateTable

logger = structlog.get_logger()

INVALID_INPUT = "Invalid input"


# =============================================================================
# Conversion Factors (value in unit * factor = value in base unit)
# =============================================================================

LENGTH_FACTORS: dict[str, float] = {
    "Meters": 1.0,
    "Feet": 0.3048,
    "Inches": 0.0254,
    "Centimeters": 0.01,
    "Yards": 0.9144,
    "Miles": 1609.34,
    "Kilometers": 1000.0,
}

WEIGHT_FACTORS: dict[str, float] = {
    "Kilograms": 1.0,
    "Pounds": 0.453592,
    "Ounces": 0.0283495,
    "Grams": 0.001,
    "Stones": 6.35029,
    "Tons": 1000.0,  # metric
}

AREA_FACTORS: dict[str, float] = {
    "Square Meters": 1.0,
    "Square Feet": 0.092903,
    "Acres": 4046.86,
    "Hectares": 10000.0,
    "Square Miles": 2589988.11,
}

VOLUME_FACTORS: dict[str, float] = {
    "Liters": 1.0,
    "Gallons": 3.78541,  # US
    "Cubic Meters": 1000.0,
    "Cubic Feet": 28.3168,
    "Milliliters": 0.001,
}

SPEED_FACTORS: dict[str, float] = {
    "km/h": 1.0,
    "mph": 1.60934,
    "m/s": 3.6,
    "knots": 1.852,
    "ft/s": 1.09728,
}

TEMPERATURE_UNITS = ("Celsius", "Fahrenheit", "Kelvin")

CURRENCY_UNITS = ("USD", "EUR", "GBP", "JPY", "CAD", "AUD", "CHF", "CNY", "INR")


# =============================================================================
# Domains
# =============================================================================

class ConversionDomain(ABC):
    """A named set of units that convert through a common base unit."""

    def __init__(
        self,
        name: str,
        base_unit: str,
        units: tuple[str, ...],
        policies: FallbackPolicies | None = None,
    ):
        self.name = name
        self.base_unit = base_unit
        self.units = units
        self.policies = policies or settings.policies()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, units={len(self.units)})"

    def _unknown_unit(self, unit: str, value: float) -> float:
        if self.policies.unknown_unit == FallbackPolicy.STRICT:
            raise UnknownUnitError(f"{self.name} has no unit named {unit!r}")
        logger.debug("Unknown unit passed through", domain=self.name, unit=unit)
        return value

    @abstractmethod
    def to_base(self, value: float, unit: str) -> float:
        """Express value, given in unit, in the base unit."""
        pass

    @abstractmethod
    def from_base(self, value: float, unit: str) -> float:
        """Express a base-unit value in unit."""
        pass

    def convert(self, value: float, from_unit: str, to_unit: str) -> float:
        """Convert value from one unit to another at full double precision."""
        return self.from_base(self.to_base(value, from_unit), to_unit)


class LinearDomain(ConversionDomain):
    """Domain whose units differ from the base unit by a constant factor."""

    def __init__(
        self,
        name: str,
        base_unit: str,
        factors: Mapping[str, float],
        policies: FallbackPolicies | None = None,
    ):
        super().__init__(name, base_unit, tuple(factors), policies)
        self.factors = dict(factors)

    def to_base(self, value: float, unit: str) -> float:
        factor = self.factors.get(unit)
        if factor is None:
            return self._unknown_unit(unit, value)
        return value * factor

    def from_base(self, value: float, unit: str) -> float:
        factor = self.factors.get(unit)
        if factor is None:
            return self._unknown_unit(unit, value)
        return value / factor


class TemperatureDomain(ConversionDomain):
    """Celsius-based temperature conversion (affine, not a scalar multiply)."""

    def __init__(self, policies: FallbackPolicies | None = None):
        super().__init__("Temperature", "Celsius", TEMPERATURE_UNITS, policies)

    def to_base(self, value: float, unit: str) -> float:
        if unit == "Celsius":
            return value
        if unit == "Fahrenheit":
            return (value - 32) * 5 / 9
        if unit == "Kelvin":
            return value - 273.15
        return self._unknown_unit(unit, value)

    def from_base(self, value: float, unit: str) -> float:
        if unit == "Celsius":
            return value
        if unit == "Fahrenheit":
            return (value * 9 / 5) + 32
        if unit == "Kelvin":
            return value + 273.15
        return self._unknown_unit(unit, value)


class CurrencyDomain(ConversionDomain):
    """
    Currency conversion through USD using an external rate table.

    Rates are relative to USD. The table starts empty and is replaced in a
    single assignment by ``set_rates``; a failed load leaves it untouched.
    """

    def __init__(
        self,
        rates: Mapping[str, float] | None = None,
        policies: FallbackPolicies | None = None,
    ):
        super().__init__("Currency", "USD", CURRENCY_UNITS, policies)
        self._rates: dict[str, float] = dict(rates or {})

    @property
    def rates(self) -> dict[str, float]:
        return dict(self._rates)

    @property
    def rates_loaded(self) -> bool:
        return bool(self._rates)

    def set_rates(self, table: RateTable | Mapping[str, float]) -> None:
        """Replace the whole rate table."""
        rates = table.rates if isinstance(table, RateTable) else table
        self._rates = dict(rates)
        logger.info("Currency rates updated", currencies=len(self._rates))

    def rate(self, code: str) -> float:
        """Rate for a currency code; missing codes fall back to 1.0."""
        rate = self._rates.get(code)
        if rate is None:
            if self.policies.missing_rate == FallbackPolicy.STRICT:
                raise MissingRateError(f"No exchange rate for {code!r}")
            return 1.0
        return rate

    def to_base(self, value: float, unit: str) -> float:
        if unit == self.base_unit:
            return value
        return numeric.ieee_divide(value, self.rate(unit))

    def from_base(self, value: float, unit: str) -> float:
        return value * self.rate(unit)


# =============================================================================
# Registry
# =============================================================================

def build_domains(
    rates: Mapping[str, float] | None = None,
    policies: FallbackPolicies | None = None,
) -> dict[str, ConversionDomain]:
    """Create all seven domains keyed by name, in converter tab order."""
    domains: list[ConversionDomain] = [
        LinearDomain("Length", "Meters", LENGTH_FACTORS, policies),
        LinearDomain("Weight", "Kilograms", WEIGHT_FACTORS, policies),
        TemperatureDomain(policies),
        CurrencyDomain(rates, policies),
        LinearDomain("Area", "Square Meters", AREA_FACTORS, policies),
        LinearDomain("Volume", "Liters", VOLUME_FACTORS, policies),
        LinearDomain("Speed", "km/h", SPEED_FACTORS, policies),
    ]
    return {domain.name: domain for domain in domains}


def get_domain(domains: Mapping[str, ConversionDomain], name: str) -> ConversionDomain:
    """
    Look up a domain by name, ignoring case.

    Raises:
        UnknownDomainError: If no domain has that name
    """
    for key, domain in domains.items():
        if key.lower() == name.lower():
            return domain
    raise UnknownDomainError(
        f"Unknown conversion domain: {name!r} (expected one of {', '.join(domains)})"
    )


# =============================================================================
# Display
# =============================================================================

def format_for_display(value: float, max_chars: int | None = None) -> str:
    """Render a converted value cut to the converter's output width."""
    if max_chars is None:
        max_chars = settings.display_max_chars
    return numeric.truncate_for_display(value, max_chars)


def convert_text(
    domain: ConversionDomain,
    text: str,
    from_unit: str,
    to_unit: str,
    max_chars: int | None = None,
) -> str:
    """
    Convert user-entered text for the converter output field.

    Returns:
        "" for empty input, "Invalid input" when the text is not a number,
        otherwise the truncated converted value
    """
    if not text:
        return ""
    value = numeric.try_parse_number(text)
    if value is None:
        return INVALID_INPUT
    return format_for_display(domain.convert(value, from_unit, to_unit), max_chars)
