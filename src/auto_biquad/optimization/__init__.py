from .optimizer import get_error, make_filter, make_filters, optimize_q
from .refinement import decode_parameters, encode_parameters, nlms, refine_filters
from .settings import DesignSettings, RefinementSettings, UpdateMode

__all__ = [
    "DesignSettings",
    "RefinementSettings",
    "UpdateMode",
    "decode_parameters",
    "encode_parameters",
    "get_error",
    "make_filter",
    "make_filters",
    "nlms",
    "optimize_q",
    "refine_filters",
]
