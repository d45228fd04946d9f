# src/auto_biquad/cli/__main__.py

"""
Command line entry point: design a filter chain for a measured curve.
"""

import argparse
import logging
import sys

from .. import config
from ..core.auto_biquad import AutoBiquadDesigner
from ..data_import.csv_importer import import_xy_data, save_xy_data
from ..eq_control.equalizer_apo import EqualizerPreset
from ..exceptions import AutoBiquadError, EmptyInputError
from ..optimization.settings import DesignSettings, RefinementSettings, UpdateMode
from ..ui.plotter import plot_design, summarize_filters

EXIT_OK = 0
EXIT_USAGE = 2

logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(
        prog="auto-biquad",
        description="Design a gain stage plus peaking filters that match a measured curve to a target.")
    parser.add_argument("measured", help="CSV file with frequency/level pairs")
    parser.add_argument("--target", help="CSV file with the target curve (default: flat 0 dB)")
    parser.add_argument("--separator", default=config.CSV_SEPARATOR, help="CSV field separator")
    parser.add_argument("--decimal-point", default=config.CSV_DECIMAL_POINT, help="Decimal point character")

    design = parser.add_argument_group("design")
    design.add_argument("--max-stages", type=int, default=config.MAX_STAGES)
    design.add_argument("--flatness-target", type=float, default=config.FLATNESS_TARGET)
    design.add_argument("--max-filter-error", type=float, default=config.MAX_FILTER_ERROR)
    design.add_argument("--max-gain", type=float, default=config.MAX_GAIN)
    design.add_argument("--start-q", type=float, default=config.START_Q)
    design.add_argument("--initial-step-size", type=float, default=config.INITIAL_STEP_SIZE,
                        help="Factor Q is divided by while the Q search improves")
    design.add_argument("--q-stages", type=int, default=config.Q_STAGES)
    design.add_argument("--points", type=int, default=config.NUMBER_OF_POINTS)
    design.add_argument("--range-start", type=float, default=config.RANGE_START)
    design.add_argument("--range-end", type=float, default=config.RANGE_END)
    design.add_argument("--sample-rate", type=float, default=config.SAMPLE_RATE)

    refine = parser.add_argument_group("refinement")
    refine.add_argument("--refine", action="store_true", help="Jointly refine all filters afterwards")
    refine.add_argument("--iterations", type=int, default=config.REFINE_ITERATIONS)
    refine.add_argument("--gradient-factor", type=float, default=config.REFINE_GRADIENT_FACTOR)
    refine.add_argument("--step-size", type=float, default=config.REFINE_STEP_SIZE)
    refine.add_argument("--rolling", action="store_true", help="Apply each gradient update immediately")

    output = parser.add_argument_group("output")
    output.add_argument("--preset", help="Write an Equalizer APO preset to this file")
    output.add_argument("--filtered-csv", help="Write the filtered curve to this CSV file")
    output.add_argument("--plot", help="Save a plot of the design to this image file")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def settings_from_args(args):
    design = DesignSettings(
        flatness_target=args.flatness_target,
        max_filter_error=args.max_filter_error,
        max_gain=args.max_gain,
        max_stages=args.max_stages,
        number_of_points=args.points,
        q_stages=args.q_stages,
        range_start=args.range_start,
        range_end=args.range_end,
        sample_rate=args.sample_rate,
        start_q=args.start_q,
        initial_step_size=args.initial_step_size,
    )
    refinement = RefinementSettings(
        iterations=args.iterations,
        gradient_factor=args.gradient_factor,
        step_size=args.step_size,
        update_mode=UpdateMode.ROLLING if args.rolling else UpdateMode.BATCH,
    )
    return design, refinement


def run(args):
    designer = AutoBiquadDesigner(*settings_from_args(args))

    x, y = import_xy_data(args.measured, args.separator, args.decimal_point)
    if len(x) == 0:
        raise EmptyInputError(f"No data points in {args.measured}")
    if args.target:
        tx, ty = import_xy_data(args.target, args.separator, args.decimal_point)
        if len(tx) == 0:
            raise EmptyInputError(f"No data points in {args.target}")
        designer.set_target(tx, ty)

    result = designer.design(x, y, refine=args.refine)

    for line in summarize_filters(result.filters):
        print(line)
    print(f"RMS error: {result.initial_rms_error:.2f} dB -> {result.rms_error:.2f} dB")

    if args.preset:
        EqualizerPreset.from_filters(result.filters).apply_to_file(args.preset)
    if args.filtered_csv:
        save_xy_data(args.filtered_csv, result.frequencies, result.filtered, header=("frequency", "filtered"))
    if args.plot:
        plot_design(result, filename=args.plot)
    return result


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format=config.LOG_FORMAT)

    try:
        run(args)
    except (AutoBiquadError, OSError) as e:
        logger.error("%s", e)
        return EXIT_USAGE
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
