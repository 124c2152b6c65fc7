"""
Core data models for QuantumCalc.

Defines the closed enumerations for operators and scientific functions,
the named fallback policies, the calculator state record and the rate
table schema returned by rate providers.
"""

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class Operator(str, Enum):
    """Binary operators, valued by their display symbol."""
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    MODULO = "%"


class ScientificFunction(str, Enum):
    """Unary scientific functions (trigonometry takes degrees)."""
    SIN = "sin"
    COS = "cos"
    TAN = "tan"
    LOG = "log"
    LN = "ln"
    SQRT = "sqrt"
    SQUARE = "square"
    PI = "pi"
    E = "e"

    @classmethod
    def parse(cls, name: str) -> "ScientificFunction | None":
        """Look up a function by name; unsupported names return None."""
        name = _SCIENTIFIC_ALIASES.get(name, name)
        try:
            return cls(name)
        except ValueError:
            return None


_SCIENTIFIC_ALIASES = {
    "pow": "square",
    "x²": "square",
    "√": "sqrt",
    "π": "pi",
}


class FallbackPolicy(str, Enum):
    """How the core reacts to input it cannot interpret."""
    STRICT = "strict"  # Raise a CalculatorError subclass
    LENIENT_ZERO = "lenient_zero"  # Substitute 0.0
    LENIENT_IDENTITY = "lenient_identity"  # Pass the value through unchanged


class HistoryFormat(str, Enum):
    """Layout of the history entry written by compute_result."""
    COMPAT = "compat"  # "<stored> <op> <display> = <display>"
    CORRECTED = "corrected"  # "<stored> <op> <operand> = <result>"


# =============================================================================
# Policies
# =============================================================================

@dataclass(frozen=True)
class FallbackPolicies:
    """Fallback policy for each kind of uninterpretable input."""
    parse: FallbackPolicy = FallbackPolicy.LENIENT_ZERO
    unknown_unit: FallbackPolicy = FallbackPolicy.LENIENT_IDENTITY
    missing_rate: FallbackPolicy = FallbackPolicy.LENIENT_IDENTITY


# =============================================================================
# Calculator State
# =============================================================================

@dataclass
class CalculatorState:
    """Mutable state owned by a single AccumulatorEngine."""
    display: str = "0"
    stored: float = 0.0
    pending_operator: Operator | None = None
    awaiting_fresh_entry: bool = False
    scientific_mode: bool = False
    history: list[str] = field(default_factory=list)

    def snapshot(self) -> "CalculatorState":
        """Return a copy that later mutations will not affect."""
        return CalculatorState(
            display=self.display,
            stored=self.stored,
            pending_operator=self.pending_operator,
            awaiting_fresh_entry=self.awaiting_fresh_entry,
            scientific_mode=self.scientific_mode,
            history=list(self.history),
        )


# =============================================================================
# Rate Table
# =============================================================================

class RateTable(BaseModel):
    """Exchange rates relative to a base currency.

    Mirrors the body returned by exchange-rate APIs:
    ``{"base": "USD", "rates": {"EUR": 0.92, ...}}``
    """
    base: str = Field("USD", min_length=1)
    rates: dict[str, float] = Field(default_factory=dict)
