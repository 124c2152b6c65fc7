"""
Accumulator engine for QuantumCalc.

Implements running two-operand arithmetic without operator precedence:
digits build the display, choosing an operator folds the display into the
stored operand, and equals applies the pending operator. ``3 + 4 + 5 =``
evaluates as ``(3 + 4) + 5``.

State lives in a plain CalculatorState owned by the engine. Callers that
need to react to changes register a listener with ``subscribe``.
"""

import math
from typing import Callable

import structlog

from quantum_calc import numeric
from quantum_calc.config import settings
from quantum_calc.errors import InvalidNumberError, UnknownKeyError
from quantum_calc.models import (
    CalculatorState,
    FallbackPolicies,
    FallbackPolicy,
    HistoryFormat,
    Operator,
    ScientificFunction,
)

logger = structlog.get_logger()

StateListener = Callable[[CalculatorState], None]


# =============================================================================
# Pure Operations
# =============================================================================

_OPERATORS: dict[Operator, Callable[[float, float], float]] = {
    Operator.ADD: lambda a, b: a + b,
    Operator.SUBTRACT: lambda a, b: a - b,
    Operator.MULTIPLY: lambda a, b: a * b,
    Operator.DIVIDE: numeric.ieee_divide,
    Operator.MODULO: numeric.ieee_remainder,
}

_SCIENTIFIC: dict[ScientificFunction, Callable[[float], float]] = {
    ScientificFunction.SIN: numeric.sin_degrees,
    ScientificFunction.COS: numeric.cos_degrees,
    ScientificFunction.TAN: numeric.tan_degrees,
    ScientificFunction.LOG: numeric.log10,
    ScientificFunction.LN: numeric.ln,
    ScientificFunction.SQRT: numeric.sqrt,
    ScientificFunction.SQUARE: numeric.square,
    ScientificFunction.PI: lambda _: math.pi,
    ScientificFunction.E: lambda _: math.e,
}


def apply_operator(stored: float, value: float, op: Operator) -> float:
    """Apply a binary operator to doubles; division by zero yields inf/NaN."""
    return _OPERATORS[op](stored, value)


def evaluate_scientific(function: ScientificFunction, value: float) -> float:
    """Evaluate a scientific function; pi and e ignore the value."""
    return _SCIENTIFIC[function](value)


# =============================================================================
# Keypad
# =============================================================================

_OPERATOR_KEYS = {
    "+": Operator.ADD,
    "-": Operator.SUBTRACT,
    "*": Operator.MULTIPLY,
    "×": Operator.MULTIPLY,
    "x": Operator.MULTIPLY,
    "/": Operator.DIVIDE,
    "÷": Operator.DIVIDE,
    "%": Operator.MODULO,
}

_DIGIT_KEYS = set("0123456789()")


# =============================================================================
# Engine
# =============================================================================

class AccumulatorEngine:
    """
    Stateful calculator engine.

    Every operation produces a defined display value: parse failures fall
    back according to the parse policy, and arithmetic on IEEE doubles is
    never trapped.
    """

    def __init__(
        self,
        policies: FallbackPolicies | None = None,
        history_format: HistoryFormat | None = None,
    ):
        """
        Args:
            policies: fallback policies (default from settings)
            history_format: layout of computed-result history entries
        """
        self.policies = policies or settings.policies()
        self.history_format = history_format or settings.history_format
        self.state = CalculatorState()
        self._listeners: list[StateListener] = []

    # -------------------------------------------------------------------------
    # Observation
    # -------------------------------------------------------------------------

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a listener; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self.state.snapshot())

    @property
    def display(self) -> str:
        return self.state.display

    @property
    def history(self) -> list[str]:
        """Return a copy of the calculation history, oldest first."""
        return list(self.state.history)

    def _parse_display(self) -> float:
        return numeric.parse_number(self.state.display, self.policies.parse)

    # -------------------------------------------------------------------------
    # Entry
    # -------------------------------------------------------------------------

    def append_digit(self, digit: str) -> None:
        """Append a digit, replacing a lone "0" or a finished operand."""
        state = self.state
        if state.awaiting_fresh_entry:
            state.display = "0"
            state.awaiting_fresh_entry = False
        state.display = digit if state.display == "0" else state.display + digit
        self._notify()

    def append_decimal_point(self) -> None:
        """Append "." unless the display already holds one."""
        if "." not in self.state.display:
            self.append_digit(".")

    def backspace(self) -> None:
        """Drop the last display character; never leaves the display empty."""
        state = self.state
        if len(state.display) > 1:
            state.display = state.display[:-1]
        else:
            state.display = "0"
        self._notify()

    def negate(self) -> None:
        """Flip the sign of the displayed value."""
        value = numeric.try_parse_number(self.state.display)
        if value is None:
            if self.policies.parse == FallbackPolicy.STRICT:
                raise InvalidNumberError(f"Not a number: {self.state.display!r}")
            self.state.display = "0"
        else:
            self.state.display = numeric.format_number(value * -1)
        self._notify()

    def clear(self) -> None:
        """Reset everything except history."""
        state = self.state
        state.display = "0"
        state.stored = 0.0
        state.pending_operator = None
        state.awaiting_fresh_entry = False
        self._notify()

    def toggle_scientific_mode(self) -> bool:
        """Flip scientific mode and return the new value."""
        self.state.scientific_mode = not self.state.scientific_mode
        self._notify()
        return self.state.scientific_mode

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def choose_operator(self, op: Operator) -> None:
        """Fold the display into the stored operand and remember op."""
        state = self.state
        value = self._parse_display()
        if state.pending_operator is None:
            state.stored = value
        else:
            state.stored = apply_operator(state.stored, value, state.pending_operator)
        state.pending_operator = op
        state.awaiting_fresh_entry = True
        logger.debug("Operator chosen", operator=op.value, stored=state.stored)
        self._notify()

    def compute_result(self) -> None:
        """Apply the pending operator, if any, and record it in history."""
        state = self.state
        op = state.pending_operator
        if op is None:
            return

        left = state.stored
        operand = self._parse_display()
        state.stored = apply_operator(left, operand, op)
        state.display = numeric.format_number(state.stored)

        if self.history_format == HistoryFormat.CORRECTED:
            entry = (
                f"{numeric.format_number(left)} {op.value} "
                f"{numeric.format_number(operand)} = {state.display}"
            )
        else:
            entry = f"{numeric.format_number(left)} {op.value} {state.display} = {state.display}"
        state.history.append(entry)
        state.pending_operator = None

        logger.debug("Result computed", operator=op.value, result=state.display)
        self._notify()

    def scientific_op(self, name: str | ScientificFunction) -> None:
        """
        Apply a scientific function to the displayed value.

        Unsupported names pass the value through unchanged; the entry is
        still rendered and recorded.
        """
        function = name if isinstance(name, ScientificFunction) else ScientificFunction.parse(name)
        label = function.value if function is not None else str(name)

        value = self._parse_display()
        result = evaluate_scientific(function, value) if function is not None else value

        self.state.display = numeric.format_number(result)
        self.state.history.append(
            f"{label}({numeric.format_number(value)}) = {self.state.display}"
        )
        logger.debug("Scientific function applied", function=label, result=self.state.display)
        self._notify()

    # -------------------------------------------------------------------------
    # Keypad dispatch
    # -------------------------------------------------------------------------

    def press(self, key: str) -> None:
        """
        Dispatch a keypad label to the matching operation.

        Raises:
            UnknownKeyError: If the label maps to no operation
        """
        function = ScientificFunction.parse(key)
        if key in _DIGIT_KEYS:
            self.append_digit(key)
        elif key == ".":
            self.append_decimal_point()
        elif key in _OPERATOR_KEYS:
            self.choose_operator(_OPERATOR_KEYS[key])
        elif key == "=":
            self.compute_result()
        elif key in ("C", "AC"):
            self.clear()
        elif key in ("⌫", "DEL"):
            self.backspace()
        elif key in ("±", "+/-"):
            self.negate()
        elif function is not None:
            self.scientific_op(function)
        else:
            raise UnknownKeyError(f"Unknown key: {key!r}")
