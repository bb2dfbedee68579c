import logging

import numpy as np
import pytest
from conftest import FakeDetector

from heatpose.config import PEFM_CONFIG
from heatpose.inference import DetectorError, DetectorErrorCode, HeatmapDecoder, ONNXDetector


def _output(batch=1, shape=(48, 48, 14), seed=0):
    rng = np.random.default_rng(seed)
    return rng.normal(size=(batch,) + shape).astype(np.float32)


def test_detect_returns_batch_zero(frame_bgr):
    out = _output(batch=2)
    det = FakeDetector(PEFM_CONFIG, [out])
    tensor = det.detect_frame(frame_bgr)
    assert tensor.shape == (48, 48, 14)
    np.testing.assert_array_equal(tensor, out[0])
    assert det.inputs[0].shape == PEFM_CONFIG.input_shape
    assert det.stats["calls"] == 1
    assert det.stats["outputs"] == 1
    assert det.img_shape == (160, 120)


def test_missing_image_is_invalid_image():
    det = FakeDetector(PEFM_CONFIG, [_output()])
    with pytest.raises(DetectorError) as exc:
        det.detect_frame(None)
    assert exc.value.code == DetectorErrorCode.INVALID_IMAGE
    assert exc.value.domain == "heatpose.detector"
    assert det.inputs == []


@pytest.mark.parametrize(
    "outputs",
    [
        [],
        None,
        [np.zeros((48, 48, 14), dtype=np.float32)],
        [np.zeros((0, 48, 48, 14), dtype=np.float32)],
    ],
)
def test_bad_outputs_are_invalid_results(frame_bgr, outputs):
    det = FakeDetector(PEFM_CONFIG, outputs)
    with pytest.raises(DetectorError) as exc:
        det.detect_frame(frame_bgr)
    assert exc.value.code == DetectorErrorCode.INVALID_RESULTS


def test_unexpected_output_shape_is_passed_through(frame_bgr, caplog):
    det = FakeDetector(PEFM_CONFIG, [_output(shape=(14, 14, 17))])
    with caplog.at_level(logging.WARNING):
        tensor = det.detect_frame(frame_bgr)
    assert tensor.shape == (14, 14, 17)
    assert "differs from configured" in caplog.text

    kps = HeatmapDecoder().decode(tensor)
    assert len(kps) == 17


def test_detect_then_decode(frame_bgr):
    out = np.zeros((1, 48, 48, 14), dtype=np.float32)
    out[0, 12, 24, 3] = 0.8
    det = FakeDetector(PEFM_CONFIG, [out])
    kps = HeatmapDecoder(filter_non_positive=True).decode(det.detect_frame(frame_bgr))
    assert len(kps) == 14
    assert kps[3].location == (pytest.approx(0.5), pytest.approx(0.25))
    assert kps[3].confidence == pytest.approx(0.8)
    assert all(kp is None for i, kp in enumerate(kps) if i != 3)


def test_error_messages():
    err = DetectorError.invalid_results("no outputs")
    assert isinstance(err, RuntimeError)
    assert str(err) == "invalid model results: no outputs"
    assert str(DetectorError.invalid_image()) == "invalid input image"


def test_onnx_detector_requires_model_file(tmp_path):
    with pytest.raises(ValueError, match="not found"):
        ONNXDetector(str(tmp_path / "missing.onnx"), PEFM_CONFIG)
