"""
Finclamp financial calculators.
"""

__version__ = "0.1.0"
