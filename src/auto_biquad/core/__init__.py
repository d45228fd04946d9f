from .auto_biquad import AutoBiquadDesigner, DesignResult

__all__ = ["AutoBiquadDesigner", "DesignResult"]
