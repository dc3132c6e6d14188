"""Shared fixtures for the LiveLens test suite.

Provides:
- make_frame: builds PlanarFrames from numpy planes, with optional row
  padding and interleaved (pixel stride 2) chroma
- FakeClassifier / fake_classifier: scripted stand-in for the model
- FakeCamera: Camera protocol double with per-device failures
"""
from typing import Callable, List, Optional, Sequence

import numpy as np
import pytest

from core.events import PlanarFrame, Plane
from utils.failures import CameraInitError


def _pack(samples: np.ndarray, row_stride: int, pixel_stride: int, fill: int = 0) -> bytes:
    rows, cols = samples.shape
    buf = np.full(rows * row_stride, fill, dtype=np.uint8)
    for r in range(rows):
        start = r * row_stride
        buf[start:start + cols * pixel_stride:pixel_stride] = samples[r]
    return buf.tobytes()


def build_frame(
    y: np.ndarray,
    u: np.ndarray,
    v: np.ndarray,
    y_padding: int = 0,
    chroma_padding: int = 0,
    interleaved: bool = False,
) -> PlanarFrame:
    """Pack luma/chroma sample grids into a PlanarFrame."""
    height, width = y.shape
    y_plane = Plane(_pack(y, width + y_padding, 1), row_stride=width + y_padding)

    pixel_stride = 2 if interleaved else 1
    chroma_stride = u.shape[1] * pixel_stride + chroma_padding
    u_plane = Plane(_pack(u, chroma_stride, pixel_stride), chroma_stride, pixel_stride)
    v_plane = Plane(_pack(v, chroma_stride, pixel_stride), chroma_stride, pixel_stride)
    return PlanarFrame(width=width, height=height, planes=(y_plane, u_plane, v_plane))


@pytest.fixture
def make_frame() -> Callable[..., PlanarFrame]:
    """Factory for PlanarFrames; see ``build_frame``."""
    return build_frame


@pytest.fixture
def gray_frame() -> PlanarFrame:
    y = np.full((8, 8), 235, dtype=np.uint8)
    u = np.full((4, 4), 128, dtype=np.uint8)
    return build_frame(y, u, u.copy())


class FakeClassifier:
    """Classifier double returning scripted outputs or raising scripted errors."""

    def __init__(self, output: Sequence[float] = (), error: Optional[Exception] = None,
                 input_shape=(1, 224, 224, 3)):
        self.output = np.asarray(output, dtype=np.float32)
        self.error = error
        self._input_shape = tuple(input_shape)
        self.calls: List[np.ndarray] = []

    @property
    def input_shape(self):
        return self._input_shape

    def infer(self, tensor: np.ndarray) -> np.ndarray:
        self.calls.append(tensor)
        if self.error is not None:
            raise self.error
        return self.output


@pytest.fixture
def fake_classifier() -> FakeClassifier:
    return FakeClassifier(output=[0.05, 0.91, 0.2, 0.45, 0.99, 0.3, 0.21])


class FakeCamera:
    """Camera protocol double; indices in ``broken`` fail to open."""

    def __init__(self, count: int = 2, broken: Sequence[int] = ()):
        self.devices = [f"fake{i}" for i in range(count)]
        self.broken = set(broken)
        self.opened: List[int] = []
        self.started: List[int] = []
        self.stops = 0
        self.callback = None
        self.on_failure = None
        self._current: Optional[int] = None

    def list_devices(self) -> List[str]:
        return list(self.devices)

    def open(self, index: int) -> None:
        self.opened.append(index)
        if index in self.broken:
            raise CameraInitError(f"fake{index} is broken")
        self._current = index

    def start(self, callback, on_failure=None) -> None:
        self.callback = callback
        self.on_failure = on_failure
        self.started.append(self._current)

    def stop(self) -> None:
        self.stops += 1
        self._current = None


@pytest.fixture
def labels() -> tuple:
    return ("background", "cat", "dog", "tabby", "toaster", "mug", "laptop")
