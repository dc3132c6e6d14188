"""
Typed message definitions for the LiveLens Node pipeline.

Frames flow from the camera into the scheduler; recognitions flow out
of the pipeline into the result store and, as events, onto the bus.
"""
from dataclasses import dataclass, field
from typing import Tuple, Union
import time

Buffer = Union[bytes, bytearray, memoryview]


# ─── Pipeline Messages ───────────────────────────────────────────────────

@dataclass(frozen=True)
class Plane:
    """One byte plane of a planar frame, addressed through its strides."""
    data: Buffer
    row_stride: int
    pixel_stride: int = 1


@dataclass(frozen=True)
class PlanarFrame:
    """
    A captured YUV 4:2:0 frame.

    ``planes`` holds (Y, U, V). Luma has one sample per pixel; each chroma
    sample covers a 2x2 block of luma pixels.
    """
    width: int
    height: int
    planes: Tuple[Plane, ...]
    timestamp: float = field(default_factory=time.time)
    source: str = "camera"

    @property
    def y(self) -> Plane:
        return self.planes[0]

    @property
    def u(self) -> Plane:
        return self.planes[1]

    @property
    def v(self) -> Plane:
        return self.planes[2]


@dataclass(frozen=True)
class Recognition:
    """A single labeled confidence produced by the ranker."""
    label: str
    confidence: float

    @property
    def percent(self) -> int:
        """Confidence as a truncated 0-100 integer percentage."""
        return int(self.confidence * 100)


RecognitionList = Tuple[Recognition, ...]


@dataclass(frozen=True)
class RecognitionView:
    """What the display renders for one recognition."""
    label: str
    percent: int
    tier: str


# ─── Event Bus Events (control plane) ────────────────────────────────────

@dataclass
class RecognitionsUpdated:
    """Published after a pipeline pass replaces the current recognitions."""
    recognitions: RecognitionList = ()
    frame_timestamp: float = 0.0
    timestamp: float = field(default_factory=time.time)


@dataclass
class CameraStatusChanged:
    """Published when the active camera changes or no camera can be opened."""
    available: bool = False
    index: int = -1
    count: int = 0
    name: str = ""
    timestamp: float = field(default_factory=time.time)


@dataclass
class ShutdownRequested:
    """Published to signal a graceful shutdown of all components."""
    reason: str = "user"
    timestamp: float = field(default_factory=time.time)
