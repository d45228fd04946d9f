from .biquad import (
    BiquadFilter,
    BiquadType,
    FilterDescriptor,
    GainFilter,
    apply_filters,
    calculate_coefficients,
    compute_chain_db,
    filter_db,
    frequency_response,
    has_effect,
)

__all__ = [
    "BiquadFilter",
    "BiquadType",
    "FilterDescriptor",
    "GainFilter",
    "apply_filters",
    "calculate_coefficients",
    "compute_chain_db",
    "filter_db",
    "frequency_response",
    "has_effect",
]
