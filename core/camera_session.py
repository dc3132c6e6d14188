"""
Camera Session - picks a working camera and keeps the display informed.

Opening walks the device list forward from the requested index and stops
at the first device that initializes. If none does, the session is
exhausted: a persistent "no camera" status is published and no frames
will flow until the next explicit start. A device that dies mid-stream is
handled the same way, starting from the device after it.
"""
from typing import Callable, Optional

from core.bus import EventBus
from core.events import PlanarFrame, CameraStatusChanged
from core.protocols import Camera
from utils.failures import CameraInitError, FailureManager
from utils.logger import Logger


class CameraSession:
    """Owns device selection, fallback and switching for one Camera."""

    def __init__(
        self,
        camera: Camera,
        on_frame: Callable[[PlanarFrame], object],
        bus: Optional[EventBus] = None,
        failures: Optional[FailureManager] = None,
    ):
        self.camera = camera
        self.on_frame = on_frame
        self.bus = bus
        self.failures = failures or FailureManager()
        self.logger = Logger("CameraSession")

        self.index: Optional[int] = None
        self.count = 0
        self.exhausted = False

    @property
    def active(self) -> bool:
        return self.index is not None

    def start(self, index: int = 0) -> bool:
        """
        Open ``index`` or, failing that, each later device in turn.

        Returns:
            True if a device is streaming, False if every candidate failed.
        """
        devices = self.camera.list_devices()
        self.count = len(devices)
        self.index = None

        for candidate in range(max(index, 0), self.count):
            try:
                self.camera.open(candidate)
                self.camera.start(self.on_frame, on_failure=self._on_camera_lost)
            except CameraInitError as e:
                self.failures.record_failure(e)
                self.logger.warning(f"Camera {candidate} unavailable, trying next device")
                continue

            self.index = candidate
            self.exhausted = False
            self.logger.info(f"Streaming from {devices[candidate]} ({candidate + 1}/{self.count})")
            self._publish(CameraStatusChanged(
                available=True, index=candidate, count=self.count, name=devices[candidate],
            ))
            return True

        self.exhausted = True
        self.logger.error("No camera available")
        self._publish(CameraStatusChanged(available=False, count=self.count))
        return False

    def switch_camera(self) -> bool:
        """Move to the next device (wrapping around). No-op with fewer than two devices."""
        if self.count < 2:
            self.logger.info("Only one camera, nothing to switch to")
            return False

        current = self.index if self.index is not None else -1
        self.camera.stop()
        return self.start((current + 1) % self.count)

    def stop(self) -> None:
        self.camera.stop()
        self.index = None

    def _on_camera_lost(self, error: CameraInitError) -> None:
        """Called from the capture thread when the streaming device dies for good."""
        lost = self.index
        self.failures.record_failure(error)
        if lost is None:
            return
        self.logger.warning(f"Camera {lost} lost while streaming, trying next device")
        self.start(lost + 1)

    def _publish(self, status: CameraStatusChanged) -> None:
        if self.bus is not None:
            self.bus.publish(status)
