from .equalizer_apo import EqualizerPreset

__all__ = ["EqualizerPreset"]
