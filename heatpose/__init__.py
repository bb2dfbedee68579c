"""heatpose: single-person pose keypoints from heatmap models."""

__version__ = "1.0.0"

# Public API - Config
from heatpose.config import (
    PEFM_CONFIG,
    POSENET_CONFIG,
    ModelConfig,
    StreamConfig,
    get_model_config,
)

# Public API - Inference
from heatpose.inference import (
    BaseDetector,
    DetectorError,
    DetectorErrorCode,
    FrameDispatcher,
    FrameResult,
    HeatmapDecoder,
    Keypoint,
    KeypointSet,
    ONNXDetector,
    decode_heatmap,
)

__all__ = [
    # Inference
    "decode_heatmap",
    "HeatmapDecoder",
    "Keypoint",
    "KeypointSet",
    "BaseDetector",
    "ONNXDetector",
    "DetectorError",
    "DetectorErrorCode",
    "FrameDispatcher",
    "FrameResult",
    # Config
    "ModelConfig",
    "StreamConfig",
    "PEFM_CONFIG",
    "POSENET_CONFIG",
    "get_model_config",
]
