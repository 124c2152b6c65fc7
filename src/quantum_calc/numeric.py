"""
Numeric helpers shared by the engine and the converters.

Python raises where IEEE-754 arithmetic produces infinities or NaN
(``1.0 / 0.0``, ``math.log10(0)``, ``math.sqrt(-1)``). The calculator
displays those values instead, so every operation here returns the IEEE
result and never raises.
"""

import math

from quantum_calc.errors import InvalidNumberError
from quantum_calc.models import FallbackPolicy


# =============================================================================
# Parsing and Rendering
# =============================================================================

def parse_number(text: str, policy: FallbackPolicy = FallbackPolicy.LENIENT_ZERO) -> float:
    """
    Parse display text as a double.

    Args:
        text: Display text such as "12", "-3.5", "Infinity"
        policy: LENIENT_ZERO returns 0.0 on failure, STRICT raises

    Returns:
        The parsed value

    Raises:
        InvalidNumberError: If parsing fails under the STRICT policy
    """
    # float() also accepts surrounding whitespace and digit separators
    if text and text == text.strip() and "_" not in text:
        try:
            return float(text)
        except ValueError:
            pass
    if policy == FallbackPolicy.STRICT:
        raise InvalidNumberError(f"Not a number: {text!r}")
    return 0.0


def try_parse_number(text: str) -> float | None:
    """Parse display text, returning None instead of a fallback."""
    try:
        return parse_number(text, FallbackPolicy.STRICT)
    except InvalidNumberError:
        return None


def format_number(value: float) -> str:
    """Render a double the way the display shows it ("12.0", "Infinity", "NaN")."""
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    return repr(value)


def truncate_for_display(value: float, max_chars: int = 10) -> str:
    """Render a value and keep only its first max_chars characters."""
    return format_number(value)[:max_chars]


# =============================================================================
# IEEE-754 Arithmetic
# =============================================================================

def ieee_divide(a: float, b: float) -> float:
    """Divide with IEEE semantics: x/0 is ±inf, 0/0 is NaN."""
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def ieee_remainder(a: float, b: float) -> float:
    """Truncated remainder (sign of the dividend); x%0 and inf%y are NaN."""
    if b == 0 or math.isinf(a) or math.isnan(a) or math.isnan(b):
        return math.nan
    return math.fmod(a, b)


# =============================================================================
# Scientific Functions
# =============================================================================

def sin_degrees(value: float) -> float:
    """Sine of an angle in degrees."""
    if not math.isfinite(value):
        return math.nan
    return math.sin(value * (math.pi / 180))


def cos_degrees(value: float) -> float:
    """Cosine of an angle in degrees."""
    if not math.isfinite(value):
        return math.nan
    return math.cos(value * (math.pi / 180))


def tan_degrees(value: float) -> float:
    """Tangent of an angle in degrees."""
    if not math.isfinite(value):
        return math.nan
    return math.tan(value * (math.pi / 180))


def log10(value: float) -> float:
    """Base-10 logarithm; log10(0) is -inf, negatives give NaN."""
    if math.isnan(value) or value < 0:
        return math.nan
    if value == 0:
        return -math.inf
    return math.log10(value)


def ln(value: float) -> float:
    """Natural logarithm; ln(0) is -inf, negatives give NaN."""
    if math.isnan(value) or value < 0:
        return math.nan
    if value == 0:
        return -math.inf
    return math.log(value)


def sqrt(value: float) -> float:
    """Square root; negatives give NaN."""
    if math.isnan(value) or value < 0:
        return math.nan
    return math.sqrt(value)


def square(value: float) -> float:
    return value * value
