"""
Protocol definitions (interfaces) for the LiveLens Node.

These define the contracts the external collaborators implement,
so the pipeline can be driven by real hardware or by test doubles.
"""
from typing import Protocol, Callable, List, Optional, Sequence, Tuple, runtime_checkable
import numpy as np

from core.events import PlanarFrame, CameraStatusChanged, RecognitionView
from utils.failures import CameraInitError


@runtime_checkable
class Camera(Protocol):
    """Interface for a camera that pushes planar frames to a callback."""

    def list_devices(self) -> List[str]:
        """Return the names of available devices in enumeration order."""
        ...

    def open(self, index: int) -> None:
        """
        Initialize the device at ``index``.

        Raises:
            CameraInitError: If the device cannot be opened.
        """
        ...

    def start(
        self,
        callback: Callable[[PlanarFrame], None],
        on_failure: Optional[Callable[[CameraInitError], None]] = None,
    ) -> None:
        """
        Begin pushing frames from the opened device to ``callback``.

        ``on_failure`` is called from the capture thread if the device stops
        delivering frames and cannot be reopened.
        """
        ...

    def stop(self) -> None:
        """Stop frame delivery and release the device."""
        ...


@runtime_checkable
class Classifier(Protocol):
    """Interface for the pre-loaded classification model."""

    @property
    def input_shape(self) -> Tuple[int, int, int, int]:
        """The exact tensor shape ``infer`` accepts, e.g. (1, 224, 224, 3)."""
        ...

    def infer(self, tensor: np.ndarray) -> np.ndarray:
        """
        Run the model on one input tensor.

        Returns:
            1-D array of per-class confidences.

        Raises:
            ModelNotLoadedError: The model has not finished loading.
            ModelExecutionError: The model failed while running.
        """
        ...


@runtime_checkable
class Display(Protocol):
    """Interface for whatever renders recognitions and camera state."""

    def show_recognitions(self, views: Sequence[RecognitionView]) -> None:
        ...

    def show_camera_status(self, status: CameraStatusChanged) -> None:
        ...
