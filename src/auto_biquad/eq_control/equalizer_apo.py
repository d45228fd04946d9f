# src/auto_biquad/eq_control/equalizer_apo.py

import logging

from .. import config
from ..filters.biquad import BiquadFilter, BiquadType, GainFilter

logger = logging.getLogger(__name__)

# Equalizer APO filter codes of the biquad kinds it understands.
FILTER_CODES = {
    BiquadType.PEAKING: "PK",
    BiquadType.LOWPASS: "LPQ",
    BiquadType.HIGHPASS: "HPQ",
    BiquadType.BANDPASS: "BP",
    BiquadType.NOTCH: "NO",
    BiquadType.ALLPASS: "AP",
    BiquadType.LOWSHELF: "LSC",
    BiquadType.HIGHSHELF: "HSC",
}
FILTER_TYPES = {code: biquad_type for biquad_type, code in FILTER_CODES.items()}


class EqualizerPreset:
    """
    Represents an Equalizer APO preset configuration.

    Attributes:
        preamp (float): Preamp value in dB (default: 0.0).
        filters (list): List of filter dictionaries, each containing:
            - enabled (bool): True if the filter is enabled.
            - filter_code (str): Filter type code (e.g., 'PK', 'LSC', 'HSC').
            - fc (float): Center frequency in Hz.
            - gain (float): Gain in dB.
            - q (float): Q factor.

    Example:
        preset = EqualizerPreset.from_filters(result.filters)
        preset.apply_to_file("config.txt")
    """
    def __init__(self, preamp: float = 0.0):
        self.preamp = preamp
        self.filters = []

    @classmethod
    def from_filters(cls, filters):
        """
        Builds a preset from a designed chain. Gain stages are summed into the
        preamp, biquads become one filter line each.
        """
        preset = cls()
        for filt in filters:
            if isinstance(filt, GainFilter):
                if filt.enabled:
                    preset.preamp += filt.gain_db
            elif isinstance(filt, BiquadFilter):
                preset.add_filter(filt.enabled, FILTER_CODES[filt.biquad_type], filt.fc, filt.gain, filt.q)
            else:
                raise TypeError(f"Unsupported filter: {filt!r}")
        return preset

    def add_filter(self, enabled: bool, filter_code: str, fc: float, gain: float, q: float):
        """
        Add a filter to the preset.

        :param enabled: True if the filter is enabled; False otherwise.
        :param filter_code: Filter type (e.g., 'PK', 'LSC', 'HSC').
        :param fc: Center frequency in Hz.
        :param gain: Gain in dB.
        :param q: Q factor.
        """
        self.filters.append({
            "enabled": enabled,
            "filter_code": filter_code,
            "fc": fc,
            "gain": gain,
            "q": q,
        })

    def to_filters(self, sample_rate=config.SAMPLE_RATE):
        """Converts the preset back into a chain (gain stage first)."""
        chain = [GainFilter(gain=10 ** (self.preamp / 20))]
        for filt in self.filters:
            chain.append(BiquadFilter(
                FILTER_TYPES[filt["filter_code"]],
                filt["fc"],
                filt["q"],
                filt["gain"],
                sample_rate,
                filt["enabled"],
            ))
        return chain

    def to_string(self) -> str:
        """
        Convert the current preset into a text string formatted for Equalizer APO.
        """
        lines = [f"Preamp: {self.preamp:.2f} dB"]
        for i, filt in enumerate(self.filters, start=1):
            status = "ON" if filt["enabled"] else "OFF"
            lines.append(
                f"Filter {i}: {status} {filt['filter_code']} Fc {filt['fc']:.1f} Hz "
                f"Gain {filt['gain']:.1f} dB Q {filt['q']:.2f}"
            )
        return "\n".join(lines)

    def apply_to_file(self, config_path: str):
        """
        Write the preset configuration to the given file path.
        """
        with open(config_path, "w") as f:
            f.write(self.to_string())
        logger.info("Preset written to %s", config_path)

    @classmethod
    def load_from_file(cls, file_path: str):
        """
        Load a preset configuration from a file and return an EqualizerPreset object.
        The first line must be the preamp setting, subsequent lines are filter
        definitions; lines that cannot be parsed are skipped.
        """
        with open(file_path, "r") as f:
            lines = f.read().splitlines()

        if not lines:
            raise ValueError("Preset file is empty.")

        # e.g. "Preamp: -5.50 dB"
        preamp_line = lines[0]
        if not preamp_line.startswith("Preamp:"):
            raise ValueError("Invalid preset file: missing preamp line.")
        try:
            preamp_value = float(preamp_line.split("Preamp:")[1].strip().split()[0])
        except (IndexError, ValueError) as e:
            raise ValueError("Invalid preamp value in preset file.") from e

        preset = cls(preamp=preamp_value)
        for line in lines[1:]:
            # Filter 1: ON PK Fc 105.0 Hz Gain -1.3 dB Q 0.70
            parts = line.split()
            try:
                enabled = parts[2].upper() == "ON"
                filter_code = parts[3]
                fc = float(parts[5])
                gain = float(parts[8])
                q = float(parts[11])
            except (IndexError, ValueError) as e:
                logger.warning("Skipping preset line '%s': %s", line, e)
                continue
            if filter_code not in FILTER_TYPES:
                logger.warning("Skipping unsupported filter type '%s'", filter_code)
                continue
            preset.add_filter(enabled, filter_code, fc, gain, q)
        return preset
