"""
Automatic design of parametric EQ filter chains (gain stage plus peaking
biquads) that match a measured frequency response to a target curve.
"""

from .core.auto_biquad import AutoBiquadDesigner, DesignResult
from .exceptions import AutoBiquadError, EmptyInputError, InvalidRangeError, LengthMismatchError
from .filters.biquad import BiquadFilter, BiquadType, GainFilter
from .optimization.settings import DesignSettings, RefinementSettings, UpdateMode

__version__ = "1.0.0"

__all__ = [
    "AutoBiquadDesigner",
    "AutoBiquadError",
    "BiquadFilter",
    "BiquadType",
    "DesignResult",
    "DesignSettings",
    "EmptyInputError",
    "GainFilter",
    "InvalidRangeError",
    "LengthMismatchError",
    "RefinementSettings",
    "UpdateMode",
]
