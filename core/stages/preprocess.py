"""
Preprocessing - resizes an RGB image to the model input size and
normalizes it into a float tensor.
"""
import cv2
import numpy as np

from utils.constants import MODEL_INPUT_HEIGHT, MODEL_INPUT_WIDTH, MODEL_INPUT_CHANNELS
from utils.failures import ShapeMismatchError


def prepare(
    image: np.ndarray,
    height: int = MODEL_INPUT_HEIGHT,
    width: int = MODEL_INPUT_WIDTH,
) -> np.ndarray:
    """
    Build a model input tensor from an RGB image.

    Args:
        image: ``(h, w, 3)`` uint8 RGB array of any size.
        height: Model input height.
        width: Model input width.

    Returns:
        ``(1, height, width, 3)`` float32 array with values in [0, 1].

    Raises:
        ShapeMismatchError: If the result does not have the expected shape.
    """
    if image.ndim < 2 or image.size == 0:
        raise ShapeMismatchError(f"Cannot resize image with shape {image.shape}")

    if image.shape[:2] != (height, width):
        # cv2 takes the target size as (width, height)
        image = cv2.resize(image, (width, height), interpolation=cv2.INTER_LINEAR)

    tensor = np.expand_dims(image.astype(np.float32) / 255.0, axis=0)

    expected = (1, height, width, MODEL_INPUT_CHANNELS)
    if tensor.shape != expected:
        raise ShapeMismatchError(f"Prepared tensor has shape {tensor.shape}, expected {expected}")
    return tensor
