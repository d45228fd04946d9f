# tests/test_integration.py

from unittest.mock import patch

import numpy as np
import pytest

from auto_biquad import AutoBiquadDesigner, DesignSettings, RefinementSettings
from auto_biquad.exceptions import LengthMismatchError
from auto_biquad.filters.biquad import BiquadFilter, GainFilter
from auto_biquad.utils import log_series


def test_flat_measurement_needs_no_filters():
    """A curve already on target gets a unity gain stage and nothing else."""
    x = log_series(20, 20000, 100)
    designer = AutoBiquadDesigner(DesignSettings(max_gain=0))

    result = designer.design(x, np.zeros(len(x)))

    assert len(result.filters) == 1
    assert isinstance(result.filters[0], GainFilter)
    assert result.filters[0].gain == pytest.approx(1.0)
    assert result.rms_error == pytest.approx(0.0)


def test_single_bump_is_cancelled(measurement_with_bump):
    """
    A single resonance at 1 kHz is found by the first peaking filter, which
    cuts by roughly the height of the bump.
    """
    x, y = measurement_with_bump
    designer = AutoBiquadDesigner(DesignSettings(max_gain=0, max_filter_error=2))

    result = designer.design(x, y)
    peaking = result.peaking_filters

    assert len(peaking) >= 1
    assert peaking[0].fc == pytest.approx(1000, rel=0.05)
    assert peaking[0].gain == pytest.approx(-6, abs=1)
    assert result.rms_error < result.initial_rms_error


@pytest.mark.parametrize("max_stages", [1, 3, 5])
def test_stage_budget_is_respected(max_stages, bumps):
    rng = np.random.default_rng(0)
    x = log_series(20, 20000, 800)
    for _ in range(3):
        stage_bumps = [(rng.uniform(40, 15000), rng.uniform(0.5, 8), rng.uniform(-10, 10)) for _ in range(6)]
        designer = AutoBiquadDesigner(DesignSettings(max_stages=max_stages, q_stages=4))

        result = designer.design(x, bumps(x, stage_bumps))

        assert len(result.filters) <= max_stages + 1
        assert isinstance(result.filters[0], GainFilter)


def test_stop_skips_refinement(measurement_with_bump):
    x, y = measurement_with_bump
    designer = AutoBiquadDesigner()

    def stop_during_placement(*args, **kwargs):
        designer.stop()
        return [GainFilter(1.0)]

    with patch("auto_biquad.core.auto_biquad.make_filters", side_effect=stop_during_placement), \
            patch("auto_biquad.core.auto_biquad.refine_filters") as mock_refine:
        result = designer.design(x, y, refine=True)

    mock_refine.assert_not_called()
    assert len(result.filters) == 1


def test_set_target_length_mismatch():
    with pytest.raises(LengthMismatchError):
        AutoBiquadDesigner().set_target([20, 20000], [0])


def test_custom_target(measurement_with_bump):
    """Matching a curve to itself leaves nothing to correct."""
    x, y = measurement_with_bump
    designer = AutoBiquadDesigner(DesignSettings(max_gain=0))
    designer.set_target(x, y)

    result = designer.design(x, y)

    np.testing.assert_allclose(result.measured, result.target)
    assert len(result.peaking_filters) == 0


def test_filtered_curve_matches_result(measurement_with_bump):
    x, y = measurement_with_bump
    designer = AutoBiquadDesigner(DesignSettings(max_gain=0))
    result = designer.design(x, y)

    frequencies, filtered = designer.get_filtered_curve(x, y)

    np.testing.assert_allclose(frequencies, result.frequencies)
    np.testing.assert_allclose(filtered, result.filtered)
    np.testing.assert_allclose(result.filtered, result.measured + result.eq_curve)


def test_refinement_does_not_increase_error(measurement_with_three_bumps):
    x, y = measurement_with_three_bumps
    settings = DesignSettings(max_gain=0, max_stages=3, q_stages=4)

    greedy = AutoBiquadDesigner(settings).design(x, y)
    refined = AutoBiquadDesigner(settings, RefinementSettings(iterations=10)).design(x, y, refine=True)

    assert refined.rms_error <= greedy.rms_error + 1e-9
    assert all(isinstance(f, BiquadFilter) for f in refined.filters[1:])


def test_stop_before_run_is_honoured_once(measurement_with_bump):
    x, y = measurement_with_bump
    designer = AutoBiquadDesigner(DesignSettings(max_gain=0))

    designer.stop()
    stopped = designer.design(x, y)
    normal = designer.design(x, y)

    assert len(stopped.filters) == 1
    assert len(normal.peaking_filters) >= 1
