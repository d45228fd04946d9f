# tests/test_main.py

import numpy as np
import pytest

from auto_biquad.cli.__main__ import EXIT_OK, EXIT_USAGE, build_parser, main, settings_from_args
from auto_biquad.data_import import import_xy_data, save_xy_data
from auto_biquad.eq_control.equalizer_apo import EqualizerPreset
from auto_biquad.optimization.settings import UpdateMode


@pytest.fixture
def measurement_csv(tmp_path, measurement_with_bump):
    x, y = measurement_with_bump
    path = tmp_path / "measurement.csv"
    save_xy_data(str(path), x, y)
    return path


def test_settings_from_args():
    args = build_parser().parse_args(
        ["m.csv", "--max-stages", "4", "--max-gain", "0", "--initial-step-size", "3", "--rolling"])
    design, refinement = settings_from_args(args)

    assert design.max_stages == 4
    assert design.max_gain == 0
    assert design.initial_step_size == 3
    assert refinement.update_mode is UpdateMode.ROLLING


def test_main_prints_filters(capsys, measurement_csv):
    assert main([str(measurement_csv), "--max-gain", "0", "--max-stages", "2"]) == EXIT_OK

    captured = capsys.readouterr()
    assert "Filter 0: gain" in captured.out
    assert "RMS error:" in captured.out


def test_main_writes_outputs(tmp_path, measurement_csv):
    preset = tmp_path / "config.txt"
    filtered = tmp_path / "filtered.csv"
    plot = tmp_path / "design.png"

    code = main([str(measurement_csv), "--max-gain", "0", "--max-stages", "2", "--points", "200",
                 "--preset", str(preset), "--filtered-csv", str(filtered), "--plot", str(plot)])

    assert code == EXIT_OK
    assert EqualizerPreset.load_from_file(str(preset)).filters
    x, _ = import_xy_data(str(filtered))
    assert len(x) == 200
    assert plot.stat().st_size > 0


def test_main_with_target(tmp_path, measurement_csv):
    target = tmp_path / "target.csv"
    target.write_text("frequency,target\n20,3\n20000,-3\n")

    assert main([str(measurement_csv), "--target", str(target), "--max-stages", "1"]) == EXIT_OK


def test_missing_file(tmp_path):
    assert main([str(tmp_path / "missing.csv")]) == EXIT_USAGE


def test_invalid_range(measurement_csv):
    assert main([str(measurement_csv), "--range-start", "2000", "--range-end", "20"]) == EXIT_USAGE


def test_parser_defaults():
    args = build_parser().parse_args(["m.csv"])
    assert np.isclose(args.range_start, 20)
