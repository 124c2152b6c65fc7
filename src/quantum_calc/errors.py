"""
Exception hierarchy for QuantumCalc.

Lenient fallback policies never raise these; they surface only under the
STRICT policy, from rate providers, or from the keypad entry point.
"""


class CalculatorError(Exception):
    """Base exception for calculator errors."""
    pass


class InvalidNumberError(CalculatorError):
    """Raised when display text cannot be parsed as a number."""
    pass


class UnknownUnitError(CalculatorError):
    """Raised when a conversion names a unit the domain does not define."""
    pass


class UnknownDomainError(CalculatorError):
    """Raised when no conversion domain matches the requested name."""
    pass


class MissingRateError(CalculatorError):
    """Raised when the rate table has no entry for a currency."""
    pass


class RateFetchError(CalculatorError):
    """Raised when a rate provider fails to supply a rate table."""
    pass


class UnknownKeyError(CalculatorError):
    """Raised when a keypad label maps to no engine operation."""
    pass
