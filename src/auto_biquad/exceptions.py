"""Errors raised at the public API boundary."""


class AutoBiquadError(ValueError):
    """Base class for invalid input passed to the designer."""


class InvalidRangeError(AutoBiquadError):
    """Frequency bounds or point counts that cannot describe an axis."""


class LengthMismatchError(AutoBiquadError):
    """Paired sequences (x and y values) of different length."""


class EmptyInputError(AutoBiquadError):
    """No data points where at least one is required."""
