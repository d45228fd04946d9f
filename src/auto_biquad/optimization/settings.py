"""
Per-run settings for greedy placement and gradient refinement. Defaults come
from `auto_biquad.config`.
"""

from dataclasses import dataclass
from enum import Enum

from .. import config


class UpdateMode(Enum):
    """How the numeric gradient descent applies its updates."""
    ROLLING = "rolling"  # update each parameter right after its gradient
    BATCH = "batch"  # compute all gradients first, then update


@dataclass
class DesignSettings:
    flatness_target: float = config.FLATNESS_TARGET
    initial_step_size: float = config.INITIAL_STEP_SIZE
    max_filter_error: float = config.MAX_FILTER_ERROR
    max_gain: float = config.MAX_GAIN
    max_stages: int = config.MAX_STAGES
    number_of_points: int = config.NUMBER_OF_POINTS
    q_stages: int = config.Q_STAGES
    range_start: float = config.RANGE_START
    range_end: float = config.RANGE_END
    sample_rate: float = config.SAMPLE_RATE
    start_q: float = config.START_Q


@dataclass
class RefinementSettings:
    iterations: int = config.REFINE_ITERATIONS
    gradient_factor: float = config.REFINE_GRADIENT_FACTOR
    step_size: float = config.REFINE_STEP_SIZE
    update_mode: UpdateMode = UpdateMode.BATCH
