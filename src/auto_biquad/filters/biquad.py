# src/auto_biquad/filters/biquad.py

"""
Filter descriptors of a designed chain and their frequency responses.

A chain is a list of `GainFilter` and `BiquadFilter` values. Both are
immutable: coefficients are synthesized once at construction and any change
of parameters produces a new filter.

Biquad coefficients follow the Audio EQ Cookbook by Robert Bristow-Johnson:
    https://webaudio.github.io/Audio-EQ-Cookbook/audio-eq-cookbook.html
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import NamedTuple, Sequence, Union

import numpy as np
from scipy import signal

from .. import config
from ..utils import linear_to_db


class BiquadType(Enum):
    """Kinds of second-order sections."""
    LOWPASS = "lowpass"
    HIGHPASS = "highpass"
    PEAKING = "peaking"
    BANDPASS = "bandpass"
    NOTCH = "notch"
    ALLPASS = "allpass"
    LOWSHELF = "lowshelf"
    HIGHSHELF = "highshelf"


# Kinds whose response depends on the gain parameter.
GAIN_TYPES = frozenset({BiquadType.PEAKING, BiquadType.LOWSHELF, BiquadType.HIGHSHELF})


class BiquadCoefficients(NamedTuple):
    """Raw (not normalized) transfer function coefficients."""
    a0: float
    a1: float
    a2: float
    b0: float
    b1: float
    b2: float

    def normalized(self):
        """Returns (b, a) arrays divided by a0."""
        with np.errstate(divide='ignore', invalid='ignore'):
            b = np.array([self.b0, self.b1, self.b2]) / self.a0
            a = np.array([self.a0, self.a1, self.a2]) / self.a0
        return b, a


def calculate_coefficients(biquad_type, sample_rate, fc, q, gain=0.0):
    """
    Synthesizes the coefficients of a second-order section.

    Args:
        biquad_type: The `BiquadType`.
        sample_rate: Sample rate in Hz.
        fc: Center/corner frequency in Hz.
        q: Quality factor.
        gain: Gain in dB, only used by peaking and shelving kinds.

    Returns:
        BiquadCoefficients (a0, a1, a2, b0, b1, b2).
    """
    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
        amp = np.power(10.0, np.float64(gain) / 40)
        w0 = 2 * np.pi * np.float64(fc) / sample_rate
        cos_w0 = np.cos(w0)
        alpha = np.sin(w0) / (2 * np.float64(q))
        sqrt_amp = np.sqrt(amp)

        if biquad_type is BiquadType.LOWPASS:
            b0 = (1 - cos_w0) / 2
            b1 = 1 - cos_w0
            b2 = (1 - cos_w0) / 2
            a0, a1, a2 = 1 + alpha, -2 * cos_w0, 1 - alpha
        elif biquad_type is BiquadType.HIGHPASS:
            b0 = (1 + cos_w0) / 2
            b1 = -(1 + cos_w0)
            b2 = (1 + cos_w0) / 2
            a0, a1, a2 = 1 + alpha, -2 * cos_w0, 1 - alpha
        elif biquad_type is BiquadType.PEAKING:
            b0 = 1 + alpha * amp
            b1 = -2 * cos_w0
            b2 = 1 - alpha * amp
            a0, a1, a2 = 1 + alpha / amp, -2 * cos_w0, 1 - alpha / amp
        elif biquad_type is BiquadType.BANDPASS:
            b0, b1, b2 = alpha, 0.0, -alpha
            a0, a1, a2 = 1 + alpha, -2 * cos_w0, 1 - alpha
        elif biquad_type is BiquadType.NOTCH:
            b0, b1, b2 = 1.0, -2 * cos_w0, 1.0
            a0, a1, a2 = 1 + alpha, -2 * cos_w0, 1 - alpha
        elif biquad_type is BiquadType.ALLPASS:
            b0, b1, b2 = 1 - alpha, -2 * cos_w0, 1 + alpha
            a0, a1, a2 = 1 + alpha, -2 * cos_w0, 1 - alpha
        elif biquad_type is BiquadType.LOWSHELF:
            b0 = amp * (amp + 1 - (amp - 1) * cos_w0 + 2 * sqrt_amp * alpha)
            b1 = 2 * amp * (amp - 1 - (amp + 1) * cos_w0)
            b2 = amp * (amp + 1 - (amp - 1) * cos_w0 - 2 * sqrt_amp * alpha)
            a0 = amp + 1 + (amp - 1) * cos_w0 + 2 * sqrt_amp * alpha
            a1 = -2 * (amp - 1 + (amp + 1) * cos_w0)
            a2 = amp + 1 + (amp - 1) * cos_w0 - 2 * sqrt_amp * alpha
        elif biquad_type is BiquadType.HIGHSHELF:
            b0 = amp * (amp + 1 + (amp - 1) * cos_w0 + 2 * sqrt_amp * alpha)
            b1 = -2 * amp * (amp - 1 + (amp + 1) * cos_w0)
            b2 = amp * (amp + 1 + (amp - 1) * cos_w0 - 2 * sqrt_amp * alpha)
            a0 = amp + 1 - (amp - 1) * cos_w0 + 2 * sqrt_amp * alpha
            a1 = 2 * (amp - 1 - (amp + 1) * cos_w0)
            a2 = amp + 1 - (amp - 1) * cos_w0 - 2 * sqrt_amp * alpha
        else:
            raise ValueError(f"Unsupported biquad type: {biquad_type}")

    return BiquadCoefficients(*(float(c) for c in (a0, a1, a2, b0, b1, b2)))


@dataclass(frozen=True)
class GainFilter:
    """Broadband gain stage; `gain` is a linear factor."""
    gain: float = 1.0
    enabled: bool = True

    @property
    def gain_db(self):
        return float(linear_to_db(self.gain))

    @property
    def has_effect(self):
        return self.enabled and not np.isnan(self.gain)

    def frequency_response(self, frequencies):
        return np.full(np.shape(frequencies), self.gain, dtype=complex)


@dataclass(frozen=True)
class BiquadFilter:
    """
    A second-order section.

    Attributes:
        biquad_type (BiquadType): Filter kind, peaking for designed chains.
        fc (float): Center frequency in Hz.
        q (float): Quality factor.
        gain (float): Gain in dB (peaking and shelving kinds).
        sample_rate (float): Sample rate used for coefficient synthesis.
        enabled (bool): Disabled filters are skipped when a chain is applied.
    """
    biquad_type: BiquadType
    fc: float
    q: float
    gain: float = 0.0
    sample_rate: float = config.SAMPLE_RATE
    enabled: bool = True
    coefficients: BiquadCoefficients = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, 'coefficients', calculate_coefficients(
            self.biquad_type, self.sample_rate, self.fc, self.q, self.gain))

    @classmethod
    def peaking(cls, fc, q, gain, sample_rate=config.SAMPLE_RATE):
        return cls(BiquadType.PEAKING, fc, q, gain, sample_rate)

    def with_params(self, **changes):
        """Returns a copy with the given fields replaced (e.g. q=2.0)."""
        return replace(self, **changes)

    @property
    def is_gain_used(self):
        return self.biquad_type in GAIN_TYPES

    @property
    def has_effect(self):
        if not self.enabled:
            return False
        if np.isnan(self.q) or not self.q > 0:
            return False
        if np.isnan(self.fc) or not (0 < self.fc < self.sample_rate / 2):
            return False
        if self.is_gain_used and np.isnan(self.gain):
            return False
        return True

    def frequency_response(self, frequencies):
        """
        Evaluates H(e^jw) at the given frequencies (Hz). A filter without
        effect responds with exactly 1 everywhere.
        """
        frequencies = np.asarray(frequencies, dtype=float)
        if not self.has_effect:
            return np.ones(frequencies.shape, dtype=complex)

        b, a = self.coefficients.normalized()
        if not (np.all(np.isfinite(b)) and np.all(np.isfinite(a))):
            return np.ones(frequencies.shape, dtype=complex)
        if frequencies.size == 0:
            return np.array([], dtype=complex)

        _, h = signal.freqz(b, a, worN=frequencies, fs=self.sample_rate)
        return h


FilterDescriptor = Union[GainFilter, BiquadFilter]


def frequency_response(filt, frequencies):
    """Complex response of any chain member."""
    if isinstance(filt, (GainFilter, BiquadFilter)):
        return filt.frequency_response(frequencies)
    raise TypeError(f"Unsupported filter: {filt!r}")


def has_effect(filt):
    if isinstance(filt, (GainFilter, BiquadFilter)):
        return filt.has_effect
    raise TypeError(f"Unsupported filter: {filt!r}")


def filter_db(filt, frequencies):
    """Magnitude response in dB; zero wherever the filter has no effect."""
    if not has_effect(filt):
        return np.zeros(np.shape(frequencies))
    return linear_to_db(frequency_response(filt, frequencies))


def compute_chain_db(frequencies, filters: Sequence[FilterDescriptor]):
    """
    Sums the dB contributions of all enabled filters.
    """
    total = np.zeros(np.shape(frequencies))
    for filt in filters:
        if has_effect(filt):
            total += filter_db(filt, frequencies)
    return total


def apply_filters(frequencies, values_db, filters: Sequence[FilterDescriptor]):
    """Returns `values_db` (one value per frequency) with the chain applied."""
    return np.asarray(values_db, dtype=float) + compute_chain_db(frequencies, filters)
