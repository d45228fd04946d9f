# src/auto_biquad/ui/plotter.py

"""Static plots of a design run."""

import logging

import matplotlib.pyplot as plt

from ..filters.biquad import BiquadFilter, filter_db

logger = logging.getLogger(__name__)

REFERENCE_FREQS = [50, 100, 200, 500, 1000, 2000, 5000, 10000, 20000]


def plot_design(result, filename=None, show=False, show_stages=True):
    """
    Plot measured, target and filtered curves plus the chain response of a
    `DesignResult`.

    Args:
        result: The DesignResult to draw.
        filename: Save the figure here if given.
        show: Open an interactive window.
        show_stages: Also draw every peaking filter individually.

    Returns:
        The matplotlib Figure.
    """
    frequencies = result.frequencies
    fig, ax = plt.subplots(figsize=(12, 8))

    ax.semilogx(frequencies, result.measured, label='Original')
    ax.semilogx(frequencies, result.target, label='Target', color='k', linestyle='--')
    ax.semilogx(frequencies, result.filtered, label='Filtered')
    ax.semilogx(frequencies, result.eq_curve, label='EQ curve', alpha=0.8)

    if show_stages:
        for i, filt in enumerate(result.peaking_filters, start=1):
            ax.semilogx(frequencies, filter_db(filt, frequencies), color='grey', alpha=0.3,
                        linewidth=0.8, label='Filters' if i == 1 else None)

    ax.set_title(f'Filter design, RMS error {result.initial_rms_error:.2f} dB '
                 f'-> {result.rms_error:.2f} dB')
    ax.set_xlabel('Frequency [Hz]')
    ax.set_ylabel('Magnitude [dB]')
    ax.grid(True, which="both", ls="-", alpha=0.4)
    ax.set_xlim(frequencies[0], frequencies[-1])

    # Add vertical lines at common reference points
    for f in REFERENCE_FREQS:
        if frequencies[0] <= f <= frequencies[-1]:
            ax.axvline(x=f, color='r', linestyle='--', alpha=0.3)

    ax.axhline(y=0, color='k', linestyle='-', linewidth=0.8)
    ax.legend(loc='upper left')
    fig.tight_layout()

    if filename:
        fig.savefig(filename, dpi=150)
        logger.info("Plot saved to %s", filename)
    if show:
        plt.show()
    return fig


def summarize_filters(filters):
    """One human readable line per chain member."""
    lines = []
    for i, filt in enumerate(filters):
        if isinstance(filt, BiquadFilter):
            lines.append(f"Filter {i}: {filt.biquad_type.value} fc={filt.fc:.1f} Hz "
                         f"gain={filt.gain:.2f} dB Q={filt.q:.2f}")
        else:
            lines.append(f"Filter {i}: gain {filt.gain:.4f} ({filt.gain_db:.2f} dB)")
    return lines
