"""
Exceptions raised for programming errors.

User input never raises: blank or malformed values degrade to zero and a
kernel that cannot compute returns ``None``. These exceptions cover misuse of
the engine itself, such as writing a field that a calculator never declared.
"""


class FinclampError(Exception):
    """Base class for finclamp errors."""


class UnknownCalculatorError(FinclampError, KeyError):
    """Raised when a calculator id is not registered."""

    def __init__(self, calculator_id: str):
        self.calculator_id = calculator_id
        super().__init__(f"Unknown calculator: {calculator_id}")


class UnknownFieldError(FinclampError, KeyError):
    """Raised when a field name is not declared in a calculator schema."""

    def __init__(self, calculator_id: str, field_name: str):
        self.calculator_id = calculator_id
        self.field_name = field_name
        super().__init__(f"Field '{field_name}' is not declared for {calculator_id}")


class InvalidSlabTableError(FinclampError, ValueError):
    """Raised when a tax slab table is not contiguous from zero."""
