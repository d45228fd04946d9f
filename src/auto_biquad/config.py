# src/auto_biquad/config.py

"""
Central configuration settings for the Automatic Biquad Designer.
"""

# =============================================================================
# FREQUENCY AXIS SETTINGS
# =============================================================================
RANGE_START = 20  # Hz
RANGE_END = 20000  # Hz
NUMBER_OF_POINTS = 500  # log-spaced points between RANGE_START and RANGE_END
SAMPLE_RATE = 48000  # Hz, used for coefficient synthesis

# =============================================================================
# GREEDY PLACEMENT SETTINGS
# =============================================================================
FLATNESS_TARGET = 1.0  # stop once the largest remaining deviation is below this (dB)
MAX_FILTER_ERROR = 2.0  # overshoot tolerance of a single filter (dB)
MAX_GAIN = 6.0  # largest positive gain a peaking filter may need (dB)
MAX_STAGES = 10  # peaking filter budget
START_Q = 100  # every Q search starts narrow
INITIAL_STEP_SIZE = 2  # Q is divided by this while the error improves
Q_STAGES = 10  # refinement rounds, step size is square-rooted each round

# =============================================================================
# GRADIENT REFINEMENT SETTINGS
# =============================================================================
REFINE_ITERATIONS = 100
REFINE_GRADIENT_FACTOR = 1e-4  # relative perturbation for the numeric gradient
# 0.1 is coarse: on real curves the first step often overshoots and the
# refinement keeps the greedy result unchanged. Around 0.01 it descends,
# rolling updates in particular need the smaller step.
REFINE_STEP_SIZE = 0.1

# =============================================================================
# TARGET CURVE SETTINGS
# =============================================================================
DEFAULT_TARGET_X = (20.0, 20000.0)  # Hz
DEFAULT_TARGET_Y = (0.0, 0.0)  # dB, flat

# =============================================================================
# FILE IMPORT SETTINGS
# =============================================================================
CSV_SEPARATOR = ','
CSV_DECIMAL_POINT = '.'

# =============================================================================
# LOGGING
# =============================================================================
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
