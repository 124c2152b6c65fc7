"""
QuantumCalc - calculator and unit conversion core.

A UI-independent accumulator engine with scientific functions and history,
plus unit conversion across length, weight, temperature, area, volume,
speed and currency (backed by an externally supplied rate table).
"""

__version__ = "2.0.0"
__author__ = "QuantumCalc Team"
