"""
Color Space Conversion - turns a planar YUV 4:2:0 frame into an RGB image.

Each plane is read through its own row and pixel strides, so padded rows
and interleaved chroma (pixel stride 2) work without copying. Chroma is
upsampled nearest-neighbour: the four luma pixels of a 2x2 block all use
the same U and V sample.
"""
import numpy as np

from core.events import PlanarFrame, Plane
from utils.failures import MalformedFrameError

# BT.601 full-range YUV -> RGB coefficients
R_V = 1.402
G_U = 0.344136
G_V = 0.714136
B_U = 1.772
CHROMA_OFFSET = 128.0


def _sample_grid(plane: Plane, name: str, cols: int, rows: int) -> np.ndarray:
    """
    Gather a ``rows x cols`` grid of samples from ``plane``.

    Raises:
        MalformedFrameError: If the strides are invalid or the buffer is
            too short for the last addressed sample.
    """
    if plane.row_stride <= 0 or plane.pixel_stride <= 0:
        raise MalformedFrameError(
            f"{name} plane has non-positive stride "
            f"(row={plane.row_stride}, pixel={plane.pixel_stride})"
        )
    row_span = (cols - 1) * plane.pixel_stride + 1
    if plane.row_stride < row_span:
        raise MalformedFrameError(
            f"{name} plane row stride {plane.row_stride} is shorter than a row ({row_span} bytes)"
        )

    data = np.frombuffer(plane.data, dtype=np.uint8)
    # The final row may stop right after its last sample (no trailing padding).
    required = (rows - 1) * plane.row_stride + row_span
    if data.size < required:
        raise MalformedFrameError(
            f"{name} plane holds {data.size} bytes, {required} needed for {cols}x{rows} samples"
        )

    index = (
        np.arange(rows)[:, None] * plane.row_stride
        + np.arange(cols)[None, :] * plane.pixel_stride
    )
    return data[index]


def convert(frame: PlanarFrame) -> np.ndarray:
    """
    Convert a planar YUV 4:2:0 frame to RGB.

    Args:
        frame: Frame with Y, U and V planes.

    Returns:
        ``(height, width, 3)`` uint8 array in R, G, B order.

    Raises:
        MalformedFrameError: If plane count, strides or sizes are invalid.
    """
    if len(frame.planes) != 3:
        raise MalformedFrameError(f"Expected 3 planes, got {len(frame.planes)}")
    width, height = frame.width, frame.height
    if width <= 0 or height <= 0:
        raise MalformedFrameError(f"Invalid frame size {width}x{height}")

    chroma_cols = (width + 1) // 2
    chroma_rows = (height + 1) // 2

    luma = _sample_grid(frame.y, "Y", width, height).astype(np.float64)
    u = _sample_grid(frame.u, "U", chroma_cols, chroma_rows).astype(np.float64) - CHROMA_OFFSET
    v = _sample_grid(frame.v, "V", chroma_cols, chroma_rows).astype(np.float64) - CHROMA_OFFSET

    # Nearest-neighbour upsample: pixel (x, y) reads chroma (x // 2, y // 2)
    rows = np.arange(height) // 2
    cols = np.arange(width) // 2
    u = u[rows[:, None], cols[None, :]]
    v = v[rows[:, None], cols[None, :]]

    rgb = np.empty((height, width, 3), dtype=np.float64)
    rgb[..., 0] = luma + R_V * v
    rgb[..., 1] = luma - G_U * u - G_V * v
    rgb[..., 2] = luma + B_U * u

    # Round half up; anything negative is clipped to 0 regardless.
    return np.clip(np.floor(rgb + 0.5), 0, 255).astype(np.uint8)
