"""Inference helpers: detectors, heatmap decoding and frame dispatch."""

from .base import BaseDetector
from .detector_onnx import ONNXDetector
from .errors import DetectorError, DetectorErrorCode
from .keypoints import Keypoint, KeypointSet
from .postprocessing import ConfidenceTensor, HeatmapDecoder, decode_heatmap
from .preprocess import Preprocessor, scaled_image_data
from .streaming import FrameDispatcher, FrameResult

__all__ = [
    "BaseDetector",
    "ConfidenceTensor",
    "DetectorError",
    "DetectorErrorCode",
    "FrameDispatcher",
    "FrameResult",
    "HeatmapDecoder",
    "Keypoint",
    "KeypointSet",
    "ONNXDetector",
    "Preprocessor",
    "decode_heatmap",
    "scaled_image_data",
]
