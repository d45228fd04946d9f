# src/auto_biquad/utils.py

"""
Utility functions for data manipulation: the logarithmic frequency axis,
resampling of curves onto it and dB conversions.
"""

from dataclasses import dataclass
from enum import Enum

import numpy as np
from scipy.interpolate import PchipInterpolator

from .exceptions import EmptyInputError, InvalidRangeError, LengthMismatchError

# Magnitudes are clamped here before taking the logarithm (-400 dB).
MIN_MAGNITUDE = 1e-20
# Lower bound for log10(x) so that x = 0 stays finite.
MIN_LOG_X = -1e9


class ExtrapolationMode(Enum):
    """Value returned for target points outside the input x-range."""
    HOLD = "hold"
    ZERO = "zero"
    NAN = "nan"


@dataclass(frozen=True)
class Curve:
    """
    A measured or target response: strictly increasing frequencies and one
    value (dB) per frequency. Both arrays are read-only copies of the input.
    """
    x: np.ndarray
    y: np.ndarray

    def __post_init__(self):
        x = np.array(self.x, dtype=float)
        y = np.array(self.y, dtype=float)
        if x.shape != y.shape:
            raise LengthMismatchError(
                f"x and y must be the same length (got {x.size} and {y.size}).")
        x.setflags(write=False)
        y.setflags(write=False)
        object.__setattr__(self, 'x', x)
        object.__setattr__(self, 'y', y)

    def __len__(self):
        return self.x.size


def log_series(start, end, count):
    """
    Returns `count` frequencies evenly spaced on a logarithmic scale between
    `start` and `end` (both included).
    """
    if count < 2:
        raise InvalidRangeError(f"At least two points are required (got {count}).")
    if not (0 < start < end):
        raise InvalidRangeError(f"Expected 0 < start < end (got start={start}, end={end}).")

    return np.exp(np.linspace(np.log(start), np.log(end), int(count)))


def _to_log(values):
    with np.errstate(divide='ignore'):
        return np.maximum(np.log10(values), MIN_LOG_X)


def adaptive_interpolation(x, y, target_x, log_x=True, use_spline=False,
                           extrapolation=ExtrapolationMode.HOLD):
    """
    Resamples the series (x, y) onto `target_x`.

    Each target point owns the interval reaching halfway to its neighbours.
    Where three or more input points fall into that interval their mean is
    used, so dense measurements are smoothed instead of aliased. Sparser
    regions are interpolated linearly, or with a monotone PCHIP spline when
    `use_spline` is set. Points outside the input range follow `extrapolation`;
    the default holds the first/last input value.

    Args:
        x: Strictly increasing input x-values.
        y: Input y-values, same length as `x`.
        target_x: Strictly increasing x-values to resample onto.
        log_x: Work on log10(x) instead of x.
        use_spline: Use PCHIP instead of linear interpolation for sparse data.
        extrapolation: Behaviour outside [x[0], x[-1]].

    Returns:
        A numpy array with one value per entry of `target_x`.
    """
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    target_x = np.asarray(target_x, dtype=float)

    if x.size != y.size:
        raise LengthMismatchError(
            f"x and y should be the same length (got {x.size} and {y.size}).")
    if target_x.size == 0:
        return np.array([])
    if x.size == 0:
        raise EmptyInputError("x and y cannot be empty.")

    if log_x:
        actual_x = _to_log(x)
        actual_target = _to_log(target_x)
    else:
        actual_x = x
        actual_target = target_x

    # Bin edges halfway between neighbouring target points.
    upper = np.empty_like(actual_target)
    upper[:-1] = (actual_target[1:] + actual_target[:-1]) / 2
    upper[-1] = actual_target[-1]
    lower = np.empty_like(actual_target)
    lower[1:] = upper[:-1]
    lower[0] = 2 * actual_target[0] - upper[0]

    lo = np.searchsorted(actual_x, lower, side='left')
    hi = np.searchsorted(actual_x, upper, side='left')
    counts = hi - lo

    if use_spline and x.size > 1:
        interpolated = PchipInterpolator(actual_x, y, extrapolate=False)(actual_target)
    else:
        interpolated = np.interp(actual_target, actual_x, y)

    cumulative = np.concatenate(([0.0], np.cumsum(y)))
    dense = counts >= 3
    with np.errstate(invalid='ignore', divide='ignore'):
        averaged = (cumulative[hi] - cumulative[lo]) / counts
    result = np.where(dense, averaged, interpolated)

    below = actual_target < actual_x[0]
    above = actual_target > actual_x[-1]
    if extrapolation is ExtrapolationMode.HOLD:
        result[below] = y[0]
        result[above] = y[-1]
    elif extrapolation is ExtrapolationMode.ZERO:
        result[below | above] = 0.0
    elif extrapolation is ExtrapolationMode.NAN:
        result[below | above] = np.nan
    else:
        raise ValueError(f"Unsupported extrapolation mode: {extrapolation}")

    return result


def linear_to_db(values):
    """Converts linear magnitudes to dB (20 log10)."""
    magnitudes = np.maximum(np.abs(values), MIN_MAGNITUDE)
    return 20 * np.log10(magnitudes)


def db_to_linear(values):
    """Converts dB to linear magnitudes."""
    return np.power(10.0, np.asarray(values, dtype=float) / 20)


def rms(values):
    """Root mean square of a sequence."""
    values = np.asarray(values, dtype=float)
    if values.size == 0:
        return 0.0
    return float(np.sqrt(np.mean(values ** 2)))
