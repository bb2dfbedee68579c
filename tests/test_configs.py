import pytest

from heatpose.config import (
    PEFM_CONFIG,
    POSENET_CONFIG,
    ModelConfig,
    StreamConfig,
    get_model_config,
)


def test_pefm_layout():
    assert PEFM_CONFIG.input_shape == (1, 192, 192, 3)
    assert PEFM_CONFIG.output_shape == (1, 48, 48, 14)
    assert len(PEFM_CONFIG.keypoint_labels) == 14
    assert PEFM_CONFIG.model_file == "model_hourglass.onnx"


def test_posenet_layout():
    assert POSENET_CONFIG.input_shape == (1, 224, 224, 3)
    assert POSENET_CONFIG.output_shape == (1, 14, 14, 17)
    assert POSENET_CONFIG.keypoint_labels[0] == "nose"


def test_skeleton_indices_in_range():
    for cfg in (PEFM_CONFIG, POSENET_CONFIG):
        for a, b in cfg.skeleton:
            assert 0 <= a < cfg.output_depth
            assert 0 <= b < cfg.output_depth


@pytest.mark.parametrize("name", ["pefm", "PEFM", " posenet "])
def test_lookup(name):
    assert get_model_config(name).name == name.strip().lower()


def test_unknown_config():
    with pytest.raises(ValueError):
        get_model_config("openpose")


def test_label_count_must_match_depth():
    with pytest.raises(ValueError):
        ModelConfig(name="bad", model_name="bad", output_depth=2, keypoint_labels=("a",))


def test_stream_defaults():
    cfg = StreamConfig()
    assert cfg.filter_non_positive is True
    assert cfg.is_quantized is True
