import numpy as np
import pytest

from heatpose.inference import BaseDetector


class FakeDetector(BaseDetector):
    """Detector whose model returns canned outputs (or raises)."""

    def __init__(self, config, outputs=None, *, error=None, is_quantized=True):
        super().__init__(config, is_quantized=is_quantized)
        self.outputs = outputs
        self.error = error
        self.inputs = []

    def _forward(self, x_np):
        self.inputs.append(x_np)
        if self.error is not None:
            raise self.error
        return self.outputs


@pytest.fixture
def frame_bgr():
    rng = np.random.default_rng(0)
    return rng.integers(0, 256, size=(120, 160, 3), dtype=np.uint8)
