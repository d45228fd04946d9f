# tests/test_utils.py

import numpy as np
import pytest

from auto_biquad.exceptions import EmptyInputError, InvalidRangeError, LengthMismatchError
from auto_biquad.utils import (
    Curve,
    ExtrapolationMode,
    adaptive_interpolation,
    db_to_linear,
    linear_to_db,
    log_series,
    rms,
)


class TestLogSeries:

    @pytest.mark.parametrize("start, end, count", [(20, 20000, 500), (1, 2, 2), (0.5, 48000, 37)])
    def test_strictly_increasing_with_requested_length(self, start, end, count):
        axis = log_series(start, end, count)

        assert len(axis) == count
        assert np.all(np.diff(axis) > 0)
        assert axis[0] == pytest.approx(start)
        assert axis[-1] == pytest.approx(end)

    def test_even_spacing_in_log_space(self):
        axis = log_series(10, 10000, 4)
        np.testing.assert_allclose(axis, [10, 100, 1000, 10000])

    @pytest.mark.parametrize("start, end, count", [(20, 20000, 1), (0, 20000, 10), (-5, 20, 10), (2000, 20, 10)])
    def test_invalid_range(self, start, end, count):
        with pytest.raises(InvalidRangeError):
            log_series(start, end, count)


class TestAdaptiveInterpolation:

    def test_identity_on_own_x_values(self):
        """Resampling a curve onto its own x-values returns it unchanged."""
        x = log_series(20, 20000, 200)
        y = 5 * np.sin(np.log(x))

        np.testing.assert_allclose(adaptive_interpolation(x, y, x), y, atol=1e-12)
        np.testing.assert_allclose(adaptive_interpolation(x, y, x, log_x=False), y, atol=1e-12)

    def test_interpolates_in_log_space(self):
        result = adaptive_interpolation([10, 1000], [0, 2], [100])
        assert result[0] == pytest.approx(1.0)

    def test_linear_space(self):
        result = adaptive_interpolation([10, 1000], [0, 2], [505], log_x=False)
        assert result[0] == pytest.approx(1.0)

    def test_holds_edge_values_outside_range(self):
        result = adaptive_interpolation([100, 1000], [1, 2], [10, 100, 1000, 10000])
        np.testing.assert_allclose(result, [1, 1, 2, 2])

    def test_zero_and_nan_extrapolation(self):
        target = [10, 300, 10000]
        zero = adaptive_interpolation([100, 1000], [1, 2], target, extrapolation=ExtrapolationMode.ZERO)
        nan = adaptive_interpolation([100, 1000], [1, 2], target, extrapolation=ExtrapolationMode.NAN)

        assert zero[0] == 0 and zero[2] == 0
        assert np.isnan(nan[0]) and np.isnan(nan[2])
        assert zero[1] == pytest.approx(nan[1])

    def test_dense_input_is_averaged(self):
        """With many input points per target bin the bin mean is used."""
        x = np.linspace(100, 200, 101)
        y = np.where(np.arange(101) % 2 == 0, 1.0, -1.0)

        result = adaptive_interpolation(x, y, [100, 150, 200], log_x=False)

        # linear interpolation would hit y[50] = 1 exactly
        assert result[1] == pytest.approx(0.0)

    def test_monotone_spline_keeps_flat_segments(self):
        result = adaptive_interpolation([1, 2, 3, 4], [0, 1, 1, 2], [2.5], log_x=False, use_spline=True)
        assert result[0] == pytest.approx(1.0)

    def test_single_point_is_held(self):
        result = adaptive_interpolation([1000], [3.0], [10, 1000, 5000])
        np.testing.assert_allclose(result, [3.0, 3.0, 3.0])

    def test_length_mismatch(self):
        with pytest.raises(LengthMismatchError):
            adaptive_interpolation([1, 2, 3], [1, 2], [1.5])

    def test_empty_input(self):
        with pytest.raises(EmptyInputError):
            adaptive_interpolation([], [], [100])

    def test_empty_target(self):
        assert adaptive_interpolation([], [], []).size == 0


class TestConversions:

    def test_linear_to_db(self):
        np.testing.assert_allclose(linear_to_db([1, 10, 0.1]), [0, 20, -20])

    def test_zero_magnitude_stays_finite(self):
        assert np.isfinite(linear_to_db(0.0))

    def test_complex_values_use_magnitude(self):
        assert linear_to_db(1j * 10) == pytest.approx(20)

    def test_db_to_linear(self):
        assert db_to_linear(-20 * np.log10(2)) == pytest.approx(0.5)

    def test_rms(self):
        assert rms([3, 4]) == pytest.approx(np.sqrt(12.5))
        assert rms([]) == 0.0


class TestCurve:

    def test_values_are_read_only(self):
        curve = Curve([1, 2, 3], [4, 5, 6])

        assert len(curve) == 3
        with pytest.raises(ValueError):
            curve.x[0] = 10

    def test_length_mismatch(self):
        with pytest.raises(LengthMismatchError):
            Curve([1, 2, 3], [4, 5])
