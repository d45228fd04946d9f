# src/auto_biquad/optimization/optimizer.py

import logging

import numpy as np

from ..filters.biquad import BiquadFilter, GainFilter, filter_db
from ..utils import db_to_linear, rms
from .settings import DesignSettings

logger = logging.getLogger(__name__)


# === Error Metric ===
def get_error(filter_db_values, residual_db, max_filter_error):
    """
    Scores a candidate filter (dB response) against the residual it should
    cancel. Returns +inf if the filter overshoots by more than
    `max_filter_error` in a direction later stages cannot undo, otherwise the
    RMS of filter + residual.
    """
    f = np.asarray(filter_db_values, dtype=float)
    r = np.asarray(residual_db, dtype=float)

    too_large = np.abs(f) > max_filter_error
    overshoot = (np.sign(f) == np.sign(r)) | (np.abs(f) - max_filter_error > np.abs(r))
    if np.any(too_large & overshoot):
        return np.inf

    return rms(f + r)


# === Single Stage Design ===
def optimize_q(frequencies, residual_db, candidate, settings: DesignSettings):
    """
    Shrinking-step line search over Q for a single peaking filter.

    Phase A widens the filter (Q / step) while the error improves. Phase B
    runs `q_stages` rounds with step <- sqrt(step), trying Q * step and then
    Q / step, keeping any improvement.

    Returns:
        (best_filter, best_error)
    """
    def score(filt):
        return get_error(filter_db(filt, frequencies), residual_db, settings.max_filter_error)

    best = candidate
    error = score(best)
    step_size = settings.initial_step_size

    while True:
        trial = best.with_params(q=best.q / step_size)
        new_error = score(trial)
        if new_error < error:
            best, error = trial, new_error
        else:
            break

    for _ in range(settings.q_stages):
        step_size = np.sqrt(step_size)

        trial = best.with_params(q=best.q * step_size)
        new_error = score(trial)
        if new_error < error:
            best, error = trial, new_error
            continue

        trial = best.with_params(q=best.q / step_size)
        new_error = score(trial)
        if new_error < error:
            best, error = trial, new_error

    return best, error


def make_filter(frequencies, residual_db, settings: DesignSettings):
    """
    Places a peaking filter at the largest remaining deviation and tunes its Q.
    """
    index = int(np.argmax(np.abs(residual_db)))
    candidate = BiquadFilter.peaking(
        fc=float(frequencies[index]),
        q=settings.start_q,
        gain=-float(residual_db[index]),
        sample_rate=settings.sample_rate,
    )
    best, error = optimize_q(frequencies, residual_db, candidate, settings)
    return best, error


# === Greedy Placement ===
def initial_gain_db(difference_db, max_gain):
    """
    Broadband gain that shifts the deviation down so that no peaking filter
    needs more than `max_gain` dB of boost.
    """
    return -float(np.min(difference_db)) - max_gain


def make_filters(frequencies, measured_db, target_db, settings=None, stop_event=None):
    """
    Generates a filter chain using a sequential ("greedy") strategy.

    `measured_db` and `target_db` must already be sampled on `frequencies`.
    The chain starts with a gain stage; then, until the residual is flatter
    than `flatness_target` or `max_stages` peaking filters are placed, the
    largest deviation is targeted by one new peaking filter. Placement also
    ends early when the best candidate is infeasible or would raise the
    largest deviation, so max|residual| never grows from stage to stage.

    Args:
        frequencies: The frequency axis.
        measured_db: Measured response on the axis.
        target_db: Target response on the axis.
        settings: DesignSettings, defaults if omitted.
        stop_event: Optional threading.Event; when set, placement stops and
            the chain built so far is returned.

    Returns:
        List of filters: one GainFilter followed by BiquadFilters.
    """
    settings = settings or DesignSettings()
    frequencies = np.asarray(frequencies, dtype=float)
    difference = np.asarray(measured_db, dtype=float) - np.asarray(target_db, dtype=float)

    # 1. Broadband gain stage
    gain = initial_gain_db(difference, settings.max_gain)
    filters = [GainFilter(gain=float(db_to_linear(gain)))]
    residual = difference + gain
    logger.info("Gain stage: %.2f dB", gain)

    # 2. One peaking filter per worst deviation
    for i in range(settings.max_stages):
        if stop_event is not None and stop_event.is_set():
            logger.info("Stop requested, returning %d peaking filters.", i)
            break

        peak = float(np.max(np.abs(residual)))
        if peak < settings.flatness_target:
            logger.info("Residual within %.2f dB, done.", settings.flatness_target)
            break

        new_filter, error = make_filter(frequencies, residual, settings)
        new_residual = residual + filter_db(new_filter, frequencies)
        new_peak = float(np.max(np.abs(new_residual)))
        if not np.isfinite(error) or new_peak > peak:
            logger.info("No stage improves the residual (score %.3f, peak %.2f -> %.2f dB), done.",
                        error, peak, new_peak)
            break

        logger.info(
            "Filter %d/%d: fc=%.1f Hz, gain=%.2f dB, Q=%.2f (peak error %.2f -> %.2f dB, score %.3f)",
            i + 1, settings.max_stages, new_filter.fc, new_filter.gain, new_filter.q, peak, new_peak, error)

        filters.append(new_filter)
        residual = new_residual

    return filters
