import numpy as np
import pytest

from heatpose.inference import Keypoint, KeypointSet
from heatpose.utils import draw_keypoints, format_keypoint_rows, image_frame, to_view_points


def test_fill_covers_view():
    assert image_frame((320, 240), (1920, 1080), "fill") == (0.0, 0.0, 320.0, 240.0)


@pytest.mark.parametrize(
    "image_size, expected",
    [
        ((200, 100), (0.0, 25.0, 100.0, 50.0)),
        ((50, 100), (25.0, 0.0, 50.0, 100.0)),
        ((10, 10), (0.0, 0.0, 100.0, 100.0)),
    ],
)
def test_aspect_fit_letterboxes(image_size, expected):
    assert image_frame((100, 100), image_size, "aspect_fit") == pytest.approx(expected)


def test_unknown_mode_and_degenerate_sizes():
    assert image_frame((100, 100), (10, 10), "center") == (0.0, 0.0, 0.0, 0.0)
    assert image_frame((100, 100), (0, 10), "aspect_fit") == (0.0, 0.0, 0.0, 0.0)


def test_to_view_points():
    kps = KeypointSet((Keypoint(0.5, 0.25, 1.0), None))
    pts = to_view_points(kps, (10.0, 20.0, 200.0, 100.0))
    assert pts[0] == pytest.approx((110.0, 45.0))
    assert pts[1] is None


def test_draw_keypoints_on_copy():
    image = np.zeros((40, 40, 3), dtype=np.uint8)
    kps = KeypointSet((Keypoint(0.5, 0.5, 0.9), Keypoint(0.25, 0.25, 0.1), None))
    out = draw_keypoints(image, kps, skeleton=[(0, 1), (1, 2)], radius=2, point_color=(0, 0, 255))
    assert image.sum() == 0
    assert out[20, 20, 2] > 0
    assert out[20, 20, 0] == 0
    assert out[10, 10].any()


def test_draw_keypoints_hides_low_confidence():
    image = np.zeros((40, 40, 3), dtype=np.uint8)
    kps = KeypointSet((Keypoint(0.25, 0.25, 0.1),))
    out = draw_keypoints(image, kps, min_confidence=0.5)
    assert out.sum() == 0


def test_format_keypoint_rows():
    kps = KeypointSet((Keypoint(0.5, 0.25, 0.91234), None))
    rows = format_keypoint_rows(kps, ["top", "neck"])
    assert rows == [("top", "(0.500, 0.250)", "0.912"), ("neck", "-", "-")]
    assert format_keypoint_rows(kps)[1][0] == "1"
