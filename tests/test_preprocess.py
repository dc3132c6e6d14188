import numpy as np
import pytest

from core.stages.preprocess import prepare
from utils.failures import ShapeMismatchError


@pytest.mark.parametrize("height,width", [(480, 640), (224, 224), (100, 50), (1, 1)])
def test_output_shape_is_fixed_regardless_of_input(height, width):
    image = np.random.default_rng(0).integers(0, 256, size=(height, width, 3), dtype=np.uint8)

    tensor = prepare(image)

    assert tensor.shape == (1, 224, 224, 3)
    assert tensor.dtype == np.float32
    assert tensor.min() >= 0.0 and tensor.max() <= 1.0


def test_image_at_target_size_is_only_normalized():
    image = np.random.default_rng(1).integers(0, 256, size=(224, 224, 3), dtype=np.uint8)

    tensor = prepare(image)

    np.testing.assert_allclose(tensor[0], image.astype(np.float32) / 255.0)


def test_channel_order_is_preserved():
    image = np.zeros((10, 20, 3), dtype=np.uint8)
    image[..., 0] = 255  # red only

    tensor = prepare(image, 4, 4)

    assert np.allclose(tensor[0, ..., 0], 1.0)
    assert np.allclose(tensor[0, ..., 1:], 0.0)


def test_custom_target_size():
    image = np.zeros((30, 40, 3), dtype=np.uint8)
    assert prepare(image, 96, 128).shape == (1, 96, 128, 3)


def test_single_channel_image_is_a_shape_mismatch():
    with pytest.raises(ShapeMismatchError):
        prepare(np.zeros((224, 224), dtype=np.uint8))


def test_empty_image_is_a_shape_mismatch():
    with pytest.raises(ShapeMismatchError):
        prepare(np.zeros((0, 0, 3), dtype=np.uint8))
