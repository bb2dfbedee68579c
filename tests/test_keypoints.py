import numpy as np
import pytest

from heatpose.inference import Keypoint, KeypointSet


@pytest.fixture
def kps():
    return KeypointSet((Keypoint(0.25, 0.5, 0.9), None, Keypoint(0.0, 0.75, -1.0)))


def test_sequence_behaviour(kps):
    assert len(kps) == 3
    assert kps[1] is None
    assert kps[-1].confidence == -1.0
    assert list(kps)[0].location == (0.25, 0.5)
    assert None in kps


def test_slicing_keeps_keypoint_set(kps):
    head = kps[0:2]
    assert isinstance(head, KeypointSet)
    assert head == KeypointSet((Keypoint(0.25, 0.5, 0.9), None))
    assert len(kps[::-1]) == 3
    assert kps[5:] == KeypointSet.empty()


def test_present_skips_absent(kps):
    assert [i for i, _ in kps.present()] == [0, 2]


def test_to_arrays(kps):
    coords, scores = kps.to_arrays()
    assert coords.shape == (3, 2)
    np.testing.assert_allclose(coords[0], [0.25, 0.5])
    assert np.isnan(coords[1]).all()
    assert np.isnan(scores[1])
    assert scores[2] == -1.0


def test_labeled(kps):
    named = kps.labeled(["head", "neck", "hip"])
    assert named["head"] == Keypoint(0.25, 0.5, 0.9)
    assert named["neck"] is None

    with pytest.raises(ValueError):
        kps.labeled(["head"])


def test_empty_and_equality():
    assert len(KeypointSet.empty()) == 0
    assert KeypointSet((None,)) == KeypointSet((None,))
    assert KeypointSet((None,)) != KeypointSet.empty()
