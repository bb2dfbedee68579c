"""ONNX Runtime pose detector."""

from __future__ import annotations

import logging
import os

import numpy as np
import onnxruntime as ort

from heatpose.config.configs import ModelConfig

from .base import BaseDetector

logger = logging.getLogger(__name__)


class ONNXDetector(BaseDetector):
    """
    Pose detector backed by ONNX Runtime.
    - detect_frame(frame_bgr) -> (rows, cols, channels) confidence tensor
    - raises DetectorError for unscalable images or malformed outputs
    """

    def __init__(
        self,
        model_path: str,
        config: ModelConfig,
        *,
        is_quantized: bool = True,
        providers: list[str] | None = None,
        intra_op_num_threads: int = 1,
    ):
        super().__init__(config, is_quantized=is_quantized)

        if not os.path.exists(model_path):
            raise ValueError(f"ONNX model file not found: {model_path}")

        sess_options = ort.SessionOptions()
        sess_options.graph_optimization_level = ort.GraphOptimizationLevel.ORT_ENABLE_ALL
        sess_options.intra_op_num_threads = int(intra_op_num_threads)

        if providers is None:
            available = ort.get_available_providers()
            providers = [
                p for p in ("CUDAExecutionProvider", "CPUExecutionProvider") if p in available
            ]
        self.session = ort.InferenceSession(
            model_path, providers=providers, sess_options=sess_options
        )

        if not self.session.get_providers():
            raise RuntimeError("No ONNX Runtime execution providers available")

        self.model_path = model_path
        self.input_name = self.session.get_inputs()[0].name
        self.output_names = [output.name for output in self.session.get_outputs()]

        # Validate metadata
        model_metadata = self.session.get_modelmeta().custom_metadata_map
        if "keypoints" in model_metadata:
            m_depth = int(model_metadata["keypoints"])
            if m_depth != int(config.output_depth):
                raise ValueError(
                    f"Model metadata mismatch: expected keypoints={config.output_depth}, "
                    f"got {m_depth}. Model={model_path}"
                )

        logger.info(
            "[Detector] loaded %s (%s) with providers %s",
            model_path,
            config.name,
            self.session.get_providers(),
        )

    def _forward(self, x_np: np.ndarray) -> list[np.ndarray]:
        return self.session.run(self.output_names, {self.input_name: x_np})
