"""Model and stream configuration.

Model configurations describe the tensors a pose model expects and produces.
They are handed to the detector; the heatmap decoder never reads them and
always works on the shape of the tensor it is given.
"""

from __future__ import annotations

from dataclasses import dataclass

from heatpose.config.constants import (
    PEFM_KEYPOINTS,
    PEFM_SKELETON,
    POSENET_KEYPOINTS,
    POSENET_SKELETON,
)


@dataclass(frozen=True)
class ModelConfig:
    """Input/output tensor layout of one pose model variant."""

    name: str
    model_name: str
    model_extension: str = "onnx"

    batch_size: int = 1
    input_width: int = 192
    input_height: int = 192
    input_components: int = 3

    output_width: int = 48
    output_height: int = 48
    output_depth: int = 14

    keypoint_labels: tuple[str, ...] = ()
    skeleton: tuple[tuple[int, int], ...] = ()

    def __post_init__(self):
        if self.keypoint_labels and len(self.keypoint_labels) != self.output_depth:
            raise ValueError(
                f"{self.name}: expected {self.output_depth} keypoint labels, "
                f"got {len(self.keypoint_labels)}"
            )

    @property
    def input_shape(self) -> tuple[int, int, int, int]:
        return (self.batch_size, self.input_height, self.input_width, self.input_components)

    @property
    def output_shape(self) -> tuple[int, int, int, int]:
        return (self.batch_size, self.output_height, self.output_width, self.output_depth)

    @property
    def model_file(self) -> str:
        return f"{self.model_name}.{self.model_extension}"


@dataclass(frozen=True)
class StreamConfig:
    """Per-stream decode and preprocessing settings."""

    filter_non_positive: bool = True
    is_quantized: bool = True


# input: [1,192,192,3], output: [1,48,48,14]
PEFM_CONFIG = ModelConfig(
    name="pefm",
    model_name="model_hourglass",
    input_width=192,
    input_height=192,
    output_width=48,
    output_height=48,
    output_depth=14,
    keypoint_labels=PEFM_KEYPOINTS,
    skeleton=PEFM_SKELETON,
)

# input: [1,224,224,3], output: [1,14,14,17]
POSENET_CONFIG = ModelConfig(
    name="posenet",
    model_name="multi_person_mobilenet_v1_075_float",
    input_width=224,
    input_height=224,
    output_width=14,
    output_height=14,
    output_depth=17,
    keypoint_labels=POSENET_KEYPOINTS,
    skeleton=POSENET_SKELETON,
)

MODEL_CONFIGS = {cfg.name: cfg for cfg in (PEFM_CONFIG, POSENET_CONFIG)}


def get_model_config(name: str) -> ModelConfig:
    """Return the model configuration registered under ``name``.

    Args:
        name (str): Configuration name
            Choices:
                - 'pefm': PoseEstimationForMobile hourglass model
                - 'posenet': PoseNet MobileNet v1 0.75 model

    Returns:
        ModelConfig: The matching configuration
    """
    key = (name or "").strip().lower()
    if key not in MODEL_CONFIGS:
        raise ValueError(f"Invalid model config: {name!r} (choices: {sorted(MODEL_CONFIGS)})")
    return MODEL_CONFIGS[key]
