# src/auto_biquad/optimization/refinement.py

"""
Joint refinement of all peaking filters by numeric gradient descent.
"""

import logging

import numpy as np

from ..filters.biquad import BiquadFilter, BiquadType, apply_filters
from ..utils import rms
from .settings import RefinementSettings, UpdateMode

logger = logging.getLogger(__name__)


def _is_refinable(filt):
    return isinstance(filt, BiquadFilter) and filt.biquad_type is BiquadType.PEAKING


def encode_parameters(filters):
    """
    Packs (ln fc, 10 ln Q, gain) of every peaking filter into a flat array.
    Logarithmic encodings give fc and Q steps of comparable size to gain steps.
    """
    params = []
    for filt in filters:
        params.extend([np.log(filt.fc), 10 * np.log(filt.q), filt.gain])
    return np.array(params, dtype=float)


def decode_parameters(params, filters):
    """Inverse of `encode_parameters`; returns new filters."""
    with np.errstate(over='ignore'):
        return [
            filt.with_params(
                fc=float(np.exp(params[3 * i])),
                q=float(np.exp(params[3 * i + 1] / 10)),
                gain=float(params[3 * i + 2]),
            )
            for i, filt in enumerate(filters)
        ]


def _gradient(error_func, params, j, current_error, gradient_factor):
    old = params[j]
    dx = old * gradient_factor
    if dx == 0:
        return 0.0
    params[j] = old + dx
    dy = error_func(params) - current_error
    params[j] = old
    if not np.isfinite(dy):
        return 0.0
    return dy / dx


def nlms(parameters, error_func, iterations=100, gradient_factor=0.001, step_size=0.1,
         update_mode=UpdateMode.BATCH, stop_event=None):
    """
    Minimizes `error_func` by finite-difference gradient descent.

    The step is scaled by current_error / initial_error, so it shrinks as the
    fit improves. Iteration stops as soon as the error increases; the last
    parameter vector that did not increase the error is returned, hence the
    result is never worse than `parameters`.

    Args:
        parameters: Initial parameter vector.
        error_func: Callable mapping a parameter array to a scalar error.
        iterations: Maximum number of gradient steps.
        gradient_factor: Relative perturbation used for each partial derivative.
        step_size: Base step size.
        update_mode: UpdateMode.ROLLING or UpdateMode.BATCH.
        stop_event: Optional threading.Event checked before every step.

    Returns:
        A new numpy array with the optimized parameters.
    """
    params = np.array(parameters, dtype=float)
    initial_error = error_func(params)
    accepted = params.copy()
    previous_error = initial_error

    if params.size == 0 or not np.isfinite(initial_error) or initial_error == 0:
        return accepted

    gradients = np.zeros_like(params)

    for i in range(iterations):
        if stop_event is not None and stop_event.is_set():
            break

        current_error = error_func(params)
        logger.debug("Step %d. Current Error: %s, Previous Error: %s", i, current_error, previous_error)
        if not current_error <= previous_error:
            return accepted
        accepted = params.copy()

        scale = step_size * current_error / initial_error
        for j in range(params.size):
            gradients[j] = _gradient(error_func, params, j, current_error, gradient_factor)
            if update_mode is UpdateMode.ROLLING:
                params[j] -= gradients[j] * scale

        if update_mode is UpdateMode.BATCH:
            params -= gradients * scale

        previous_error = current_error

    # the last update has not been checked yet
    if error_func(params) <= previous_error:
        return params
    return accepted


def refine_filters(frequencies, measured_db, target_db, filters, settings=None, stop_event=None):
    """
    Jointly optimizes fc, Q and gain of all peaking filters in `filters` to
    minimize the RMS deviation of the filtered measurement from the target.

    Gain stages (and any other filters) are kept unchanged and in place.

    Returns:
        A new filter list of the same length and order.
    """
    settings = settings or RefinementSettings()
    frequencies = np.asarray(frequencies, dtype=float)
    measured_db = np.asarray(measured_db, dtype=float)
    target_db = np.asarray(target_db, dtype=float)

    indices = [i for i, filt in enumerate(filters) if _is_refinable(filt)]
    fixed = [filt for filt in filters if not _is_refinable(filt)]
    peaking = [filters[i] for i in indices]
    if not peaking:
        return list(filters)

    def error_func(params):
        candidate = decode_parameters(params, peaking)
        filtered = apply_filters(frequencies, measured_db, fixed + candidate)
        return rms(filtered - target_db)

    seed = encode_parameters(peaking)
    seed_error = error_func(seed)
    optimized = nlms(
        seed,
        error_func,
        iterations=settings.iterations,
        gradient_factor=settings.gradient_factor,
        step_size=settings.step_size,
        update_mode=settings.update_mode,
        stop_event=stop_event,
    )
    logger.info("Refinement: RMS error %.3f dB -> %.3f dB", seed_error, error_func(optimized))

    refined = list(filters)
    for i, filt in zip(indices, decode_parameters(optimized, peaking)):
        refined[i] = filt
    return refined
