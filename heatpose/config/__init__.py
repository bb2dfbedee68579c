"""Configuration for heatpose."""

from heatpose.config.configs import (
    MODEL_CONFIGS,
    PEFM_CONFIG,
    POSENET_CONFIG,
    ModelConfig,
    StreamConfig,
    get_model_config,
)
from heatpose.config.constants import MAX_RGB, MEAN_RGB, STD_RGB

__all__ = [
    "ModelConfig",
    "StreamConfig",
    "PEFM_CONFIG",
    "POSENET_CONFIG",
    "MODEL_CONFIGS",
    "get_model_config",
    "MAX_RGB",
    "MEAN_RGB",
    "STD_RGB",
]
