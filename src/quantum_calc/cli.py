"""
Command-line interface for QuantumCalc.

Provides commands for:
- Running keypad sequences through the accumulator engine
- Applying scientific functions
- Converting values between units
- Listing conversion domains and their units
"""

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from quantum_calc.config import configure_logging, settings
from quantum_calc.conversion import CurrencyDomain, build_domains, convert_text, get_domain
from quantum_calc.engine import AccumulatorEngine
from quantum_calc.errors import CalculatorError
from quantum_calc.rates import JsonRateProvider, load_rates

app = typer.Typer(
    name="qcalc",
    help="Quantum Calc - calculator, scientific functions and unit conversion",
    add_completion=False,
)

console = Console()


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Log level override"),
):
    """Configure logging before any command runs."""
    try:
        configure_logging(log_level)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--log-level")


# =============================================================================
# Calculator Commands
# =============================================================================

@app.command()
def calc(
    keys: List[str] = typer.Argument(..., help="Keypad labels, e.g. 3 + 4 ="),
    history: bool = typer.Option(False, "--history", "-H", help="Show history"),
):
    """Press a sequence of calculator keys and print the display."""
    engine = AccumulatorEngine()
    try:
        for key in keys:
            for label in _split_key(key):
                engine.press(label)
    except CalculatorError as e:
        console.print(f"[red]{escape(str(e))}[/]")
        raise typer.Exit(1)

    console.print(f"[bold cyan]{engine.display}[/]")
    if history:
        _print_history(engine.history)


@app.command()
def sci(
    function: str = typer.Argument(..., help="sin, cos, tan, log, ln, sqrt, square, pi, e"),
    value: str = typer.Argument("0", help="Input value (degrees for trigonometry)"),
):
    """Apply a scientific function to a value."""
    engine = AccumulatorEngine()
    try:
        for label in _split_key(value):
            engine.press(label)
        engine.scientific_op(function)
    except CalculatorError as e:
        console.print(f"[red]{escape(str(e))}[/]")
        raise typer.Exit(1)

    console.print(engine.history[-1])


# =============================================================================
# Conversion Commands
# =============================================================================

@app.command()
def convert(
    domain: str = typer.Argument(..., help="Conversion domain, e.g. length"),
    value: str = typer.Argument(..., help="Value to convert"),
    from_unit: str = typer.Argument(..., help="Source unit"),
    to_unit: str = typer.Argument(..., help="Target unit"),
    rates: Optional[Path] = typer.Option(None, "--rates", "-r", help="JSON rate table for currency"),
    full: bool = typer.Option(False, "--full", "-f", help="Print full precision"),
):
    """Convert a value between two units of a domain."""
    try:
        target = get_domain(build_domains(), domain)
        if isinstance(target, CurrencyDomain):
            rates_path = rates or settings.rates_file
            if rates_path is not None:
                load_rates(target, JsonRateProvider(rates_path))
            else:
                console.print("[yellow]No rate table loaded; currencies pass through at 1.0[/]")

        if full:
            result = str(target.convert(float(value), from_unit, to_unit))
        else:
            result = convert_text(target, value, from_unit, to_unit)
    except (CalculatorError, ValueError) as e:
        console.print(f"[red]{escape(str(e))}[/]")
        raise typer.Exit(1)

    console.print(f"{value} {from_unit} = [bold cyan]{result}[/] {to_unit}")


@app.command()
def units(
    domain: Optional[str] = typer.Argument(None, help="Only list this domain"),
):
    """List conversion domains and their units."""
    domains = build_domains()
    try:
        selected = [get_domain(domains, domain)] if domain else list(domains.values())
    except CalculatorError as e:
        console.print(f"[red]{escape(str(e))}[/]")
        raise typer.Exit(1)

    table = Table(title="Conversion Domains")
    table.add_column("Domain", style="cyan")
    table.add_column("Base", style="green")
    table.add_column("Units", style="magenta")

    for d in selected:
        table.add_row(d.name, d.base_unit, ", ".join(d.units))

    console.print(table)


# =============================================================================
# Helpers
# =============================================================================

def _split_key(key: str) -> list[str]:
    """Expand multi-digit tokens such as "12.5" into single key presses."""
    if len(key) > 1 and all(c.isdigit() or c == "." for c in key):
        return list(key)
    return [key]


def _print_history(entries: list[str]) -> None:
    """Print history newest first."""
    if not entries:
        console.print("[yellow]No history yet[/]")
        return

    table = Table(title="Calculation History")
    table.add_column("#", style="dim")
    table.add_column("Calculation", style="green")
    for i, entry in reversed(list(enumerate(entries, start=1))):
        table.add_row(str(i), entry)
    console.print(table)


if __name__ == "__main__":
    app()
