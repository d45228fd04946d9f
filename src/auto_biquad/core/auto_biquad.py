# src/auto_biquad/core/auto_biquad.py

import logging
import threading
from dataclasses import dataclass, field
from typing import List

import numpy as np

from .. import config
from ..exceptions import LengthMismatchError
from ..filters.biquad import BiquadFilter, FilterDescriptor, apply_filters, compute_chain_db
from ..optimization.optimizer import make_filters
from ..optimization.refinement import refine_filters
from ..optimization.settings import DesignSettings, RefinementSettings
from ..utils import Curve, adaptive_interpolation, log_series, rms

logger = logging.getLogger(__name__)


@dataclass
class DesignResult:
    """Everything a design run produced, sampled on its frequency axis."""
    frequencies: np.ndarray
    measured: np.ndarray
    target: np.ndarray
    filters: List[FilterDescriptor] = field(default_factory=list)

    @property
    def eq_curve(self):
        return compute_chain_db(self.frequencies, self.filters)

    @property
    def filtered(self):
        return apply_filters(self.frequencies, self.measured, self.filters)

    @property
    def initial_rms_error(self):
        return rms(self.measured - self.target)

    @property
    def rms_error(self):
        return rms(self.filtered - self.target)

    @property
    def peaking_filters(self):
        return [f for f in self.filters if isinstance(f, BiquadFilter)]


class AutoBiquadDesigner:
    """
    Designs a gain stage plus peaking filters that bend a measured curve
    toward the target curve.

    The designer runs synchronously. `stop()` may be called from another
    thread; the running design then returns the chain built so far. The
    stop request is cleared when a run finishes.

    Example:
        designer = AutoBiquadDesigner(DesignSettings(max_stages=5))
        designer.set_target(target_x, target_y)
        result = designer.design(measured_x, measured_y, refine=True)
    """

    def __init__(self, settings=None, refinement_settings=None):
        self.settings = settings or DesignSettings()
        self.refinement_settings = refinement_settings or RefinementSettings()
        self.target = Curve(config.DEFAULT_TARGET_X, config.DEFAULT_TARGET_Y)
        self.filters = []
        self._stop_event = threading.Event()

    def set_target(self, x, y):
        if len(x) != len(y):
            raise LengthMismatchError("Target X and Y must be the same length.")
        self.target = Curve(x, y)

    def get_frequencies(self):
        return log_series(self.settings.range_start, self.settings.range_end,
                          self.settings.number_of_points)

    def resample(self, x, y, frequencies=None):
        """Interpolates a curve onto the design axis (log x, values held at the edges)."""
        if frequencies is None:
            frequencies = self.get_frequencies()
        return adaptive_interpolation(x, y, frequencies, log_x=True, use_spline=False)

    def make_filters(self, x, y):
        """Greedy placement for the measured curve (x, y) against the current target."""
        try:
            frequencies = self.get_frequencies()
            measured = self.resample(x, y, frequencies)
            target = self.resample(self.target.x, self.target.y, frequencies)
            self.filters = make_filters(frequencies, measured, target, self.settings, self._stop_event)
        finally:
            self._stop_event.clear()
        return self.filters

    def refine(self, x, y, filters=None):
        """Jointly refines the peaking filters of `filters` (default: the last design)."""
        filters = self.filters if filters is None else filters
        try:
            frequencies = self.get_frequencies()
            measured = self.resample(x, y, frequencies)
            target = self.resample(self.target.x, self.target.y, frequencies)
            self.filters = refine_filters(frequencies, measured, target, filters,
                                          self.refinement_settings, self._stop_event)
        finally:
            self._stop_event.clear()
        return self.filters

    def design(self, x, y, refine=False):
        """
        Runs the full design: greedy placement, then optionally refinement.
        """
        measured_curve = Curve(x, y)

        frequencies = self.get_frequencies()
        measured = self.resample(measured_curve.x, measured_curve.y, frequencies)
        target = self.resample(self.target.x, self.target.y, frequencies)
        logger.info("Initial RMS error: %.2f dB", rms(measured - target))

        try:
            filters = make_filters(frequencies, measured, target, self.settings, self._stop_event)
            if refine and not self._stop_event.is_set():
                filters = refine_filters(frequencies, measured, target, filters,
                                         self.refinement_settings, self._stop_event)
        finally:
            self._stop_event.clear()
        self.filters = filters

        result = DesignResult(frequencies, measured, target, list(filters))
        logger.info("Design complete: %d peaking filters, RMS error %.2f dB",
                    len(result.peaking_filters), result.rms_error)
        return result

    def get_filtered_curve(self, x, y, filters=None):
        """
        Resamples (x, y) onto the design axis and applies the chain, e.g. to
        check a second measurement against the designed filters.
        """
        filters = self.filters if filters is None else filters
        frequencies = self.get_frequencies()
        return frequencies, apply_filters(frequencies, self.resample(x, y, frequencies), filters)

    def stop(self):
        """
        Request cooperative stop of an in-progress design. A stop requested
        while no run is active ends the next run right after it starts.
        """
        self._stop_event.set()
