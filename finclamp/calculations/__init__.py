"""
Financial Calculation Kernels

Pure, deterministic formula families shared by every calculator screen.
Kernels take parsed numbers and return an immutable result, or None when
the inputs are not enough to compute anything.
"""

from finclamp.calculations import parsing, amortization, tax, compounding, ratios

__all__ = ["parsing", "amortization", "tax", "compounding", "ratios"]
