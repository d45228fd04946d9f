import os

os.environ.setdefault("MPLBACKEND", "Agg")

import numpy as np
import pytest

from auto_biquad.filters.biquad import BiquadFilter, filter_db
from auto_biquad.utils import log_series


def bump_curve(frequencies, bumps):
    """Sum of peaking responses (dB) for (fc, q, gain) tuples."""
    total = np.zeros_like(frequencies)
    for fc, q, gain in bumps:
        total += filter_db(BiquadFilter.peaking(fc, q, gain), frequencies)
    return total


@pytest.fixture
def axis():
    return log_series(20, 20000, 500)


@pytest.fixture
def measurement_with_bump():
    """
    A measured curve with a single +6 dB (Q = 5) bump at 1 kHz, sampled more
    densely than the design axis.
    """
    x = log_series(20, 20000, 1000)
    return x, bump_curve(x, [(1000, 5, 6)])


@pytest.fixture
def measurement_with_three_bumps():
    """Three well separated resonances on an otherwise flat response."""
    x = log_series(20, 20000, 1000)
    return x, bump_curve(x, [(100, 4, 8), (1000, 3, 6), (6000, 5, 5)])


@pytest.fixture
def bumps():
    return bump_curve
