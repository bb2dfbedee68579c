"""Engine-agnostic detector base.

Scaling and output unpacking live here; subclasses only run the model.
"""

from __future__ import annotations

import abc
import logging
import time

import numpy as np

from heatpose.config.configs import ModelConfig

from .errors import DetectorError
from .preprocess import Preprocessor

logger = logging.getLogger(__name__)


class BaseDetector(abc.ABC):
    """Runs a pose model on one image and returns its batch-0 confidence tensor.

    Core constraints:
    - Input is float32 of shape ``config.input_shape`` (NHWC).
    - Output 0 is (batch, rows, cols, channels); only batch 0 is returned.
    """

    def __init__(self, config: ModelConfig, *, is_quantized: bool = True):
        self.config = config
        self.is_quantized = bool(is_quantized)
        self.preprocessor = Preprocessor(config, is_quantized=self.is_quantized)

        self.stats = {
            "calls": 0,
            "outputs": 0,
            "t_preprocess": 0.0,
            "t_forward": 0.0,
            "t_post": 0.0,
        }

    @property
    def img_scaler(self) -> tuple[float, float] | None:
        return self.preprocessor.img_scaler

    @property
    def img_shape(self) -> tuple[int, int] | None:
        return self.preprocessor.img_shape

    def reset(self) -> None:
        self.preprocessor.reset()

    @abc.abstractmethod
    def _forward(self, x_np: np.ndarray) -> list[np.ndarray]:
        """Run model inference.

        Args:
            x_np: float32 array of shape ``config.input_shape``.

        Returns:
            List of model outputs; output 0 must be (batch, rows, cols, channels).
        """

    def scaled_image_data(self, frame_bgr: np.ndarray | None) -> np.ndarray | None:
        t0 = time.perf_counter()
        x_np = self.preprocessor.process_one(frame_bgr)
        self.stats["t_preprocess"] += time.perf_counter() - t0
        if x_np is None:
            logger.warning(
                "[Detector] failed to scale image to %dx%d",
                self.config.input_width,
                self.config.input_height,
            )
        return x_np

    def detect(self, image_data: np.ndarray | None) -> np.ndarray:
        """Run the model on already-scaled input and return a (rows, cols, channels) tensor."""

        self.stats["calls"] += 1
        if image_data is None:
            raise DetectorError.invalid_image()

        t1 = time.perf_counter()
        outputs = self._forward(np.asarray(image_data, dtype=np.float32))
        self.stats["t_forward"] += time.perf_counter() - t1

        t2 = time.perf_counter()
        tensor = self._process(outputs)
        self.stats["t_post"] += time.perf_counter() - t2
        self.stats["outputs"] += 1
        return tensor

    def detect_frame(self, frame_bgr: np.ndarray | None) -> np.ndarray:
        return self.detect(self.scaled_image_data(frame_bgr))

    def _process(self, outputs: list[np.ndarray]) -> np.ndarray:
        if not outputs:
            raise DetectorError.invalid_results("model returned no outputs")

        y = np.asarray(outputs[0], dtype=np.float32)
        if y.ndim != 4 or y.shape[0] < 1:
            raise DetectorError.invalid_results(
                f"expected output of shape (batch, rows, cols, channels), got {y.shape}"
            )

        # batch size is 1; only batch 0 is decoded
        tensor = y[0]
        expected = self.config.output_shape[1:]
        if tensor.shape != expected:
            logger.warning(
                "[Detector] %s output shape %s differs from configured %s",
                self.config.name,
                tensor.shape,
                expected,
            )
        return tensor
