"""Image scaling for pose model inputs (numpy/cv2 only)."""

from __future__ import annotations

import cv2
import numpy as np

from heatpose.config.configs import ModelConfig
from heatpose.config.constants import MEAN_RGB, STD_RGB


def scaled_image_data(
    image_bgr: np.ndarray | None, config: ModelConfig, *, is_quantized: bool = True
) -> np.ndarray | None:
    """Scale a BGR image into the model's input tensor.

    Returns a float32 array of shape ``config.input_shape``, or None when the
    image cannot be scaled (missing, empty, or fewer color components than the
    model expects).

    Quantized models receive ``(value - 127.5) / 127.5`` in [-1, 1]; float
    models receive the raw [0, 255] values.
    """

    if image_bgr is None:
        return None
    img = np.asarray(image_bgr)
    if img.ndim == 2:
        img = img[..., None]
    if img.ndim != 3 or img.shape[0] == 0 or img.shape[1] == 0:
        return None

    n_comp = int(config.input_components)
    if img.shape[2] < n_comp:
        return None

    if img.dtype != np.uint8:
        img = img.astype(np.float32)
    if img.shape[2] >= 3:
        img = np.ascontiguousarray(img[..., 2::-1])
    resized = cv2.resize(
        img, (int(config.input_width), int(config.input_height)), interpolation=cv2.INTER_AREA
    )
    if resized.ndim == 2:
        resized = resized[..., None]
    resized = resized[..., :n_comp].astype(np.float32)

    if is_quantized:
        resized = (resized - MEAN_RGB) / STD_RGB

    batch = np.repeat(resized[None, ...], int(config.batch_size), axis=0)
    return batch.astype(np.float32)


class Preprocessor:
    """Scales frames for one model and remembers the source frame geometry."""

    def __init__(self, config: ModelConfig, *, is_quantized: bool = True):
        self.config = config
        self.is_quantized = bool(is_quantized)

        self.img_scaler: tuple[float, float] | None = None
        self.img_shape: tuple[int, int] | None = None

    def reset(self) -> None:
        self.img_scaler = None
        self.img_shape = None

    def ensure_scaler(self, frame_bgr: np.ndarray) -> None:
        if self.img_scaler is not None:
            return
        h, w = frame_bgr.shape[:2]
        self.img_shape = (int(w), int(h))
        self.img_scaler = (
            float(w) / float(self.config.input_width),
            float(h) / float(self.config.input_height),
        )

    def process_one(self, frame_bgr: np.ndarray | None) -> np.ndarray | None:
        if frame_bgr is None:
            return None
        x_np = scaled_image_data(frame_bgr, self.config, is_quantized=self.is_quantized)
        if x_np is not None:
            self.ensure_scaler(frame_bgr)
        return x_np
