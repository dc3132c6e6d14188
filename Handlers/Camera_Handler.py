"""
Camera Handler - Captures frames with OpenCV and pushes them as planar YUV.

Runs capture in a dedicated thread so a slow consumer never stalls the
device. Each BGR capture is converted to I420 and delivered to the
callback as a PlanarFrame.
"""
import threading
import time
from typing import Callable, List, Optional

import cv2
import numpy as np

from core.events import PlanarFrame, Plane
from utils.constants import (
    DEFAULT_CAMERA_WIDTH, DEFAULT_CAMERA_HEIGHT, DEFAULT_CAMERA_FPS, DEFAULT_MAX_CAMERA_DEVICES,
)
from utils.failures import CameraInitError
from utils.logger import Logger

# Max consecutive empty frames before attempting a camera restart
MAX_EMPTY_FRAMES = 50


def bgr_to_planar(frame: np.ndarray, source: str = "camera") -> PlanarFrame:
    """
    Convert a BGR capture into an I420 PlanarFrame.

    I420 needs even dimensions, so an odd trailing row or column is cropped.
    """
    height = frame.shape[0] - frame.shape[0] % 2
    width = frame.shape[1] - frame.shape[1] % 2
    frame = np.ascontiguousarray(frame[:height, :width])

    yuv = cv2.cvtColor(frame, cv2.COLOR_BGR2YUV_I420).reshape(-1)
    luma_size = width * height
    chroma_size = luma_size // 4

    return PlanarFrame(
        width=width,
        height=height,
        planes=(
            Plane(yuv[:luma_size].data, row_stride=width),
            Plane(yuv[luma_size:luma_size + chroma_size].data, row_stride=width // 2),
            Plane(yuv[luma_size + chroma_size:].data, row_stride=width // 2),
        ),
        source=source,
    )


class CameraHandler:
    """Handles interaction with local camera devices via cv2.VideoCapture."""

    def __init__(self, config: dict, capture_factory: Callable = cv2.VideoCapture):
        """
        Args:
            config: Camera-specific configuration subset
            capture_factory: Builds a capture object for a device index
        """
        self.config = config
        self.capture_factory = capture_factory
        self.logger = Logger("CameraHandler")
        self.cap = None
        self.index: Optional[int] = None
        self.active = False
        self.on_frame_captured: Optional[Callable[[PlanarFrame], None]] = None
        self.on_capture_failed: Optional[Callable[[CameraInitError], None]] = None
        self.thread: Optional[threading.Thread] = None
        self.device_id: Optional[int] = None
        self._device_ids: Optional[List[int]] = None

    # ── Camera protocol ──────────────────────────────────────────────

    def list_devices(self) -> List[str]:
        """Probe device indices once and return the ones that open."""
        if self._device_ids is None:
            max_devices = self.config.get('max_devices', DEFAULT_MAX_CAMERA_DEVICES)
            device_ids = []
            for index in range(max_devices):
                cap = self.capture_factory(index)
                try:
                    if cap.isOpened():
                        device_ids.append(index)
                finally:
                    cap.release()
            self._device_ids = device_ids
            self.logger.info(f"Found {len(device_ids)} camera device(s): {device_ids}")
        return [f"camera{device_id}" for device_id in self._device_ids]

    def open(self, index: int) -> None:
        """
        Initialize the device at position ``index`` of ``list_devices()``.

        Raises:
            CameraInitError: If the device does not open or yields no frame.
        """
        devices = self.list_devices()
        if not 0 <= index < len(devices):
            raise CameraInitError(f"No camera at index {index} ({len(devices)} available)")

        self.stop()
        device_id = self._device_ids[index]
        if not self._init_camera(device_id):
            raise CameraInitError(f"Failed to initialize {devices[index]}")
        self.index = index
        self.device_id = device_id

    def start(
        self,
        callback: Callable[[PlanarFrame], None],
        on_failure: Optional[Callable[[CameraInitError], None]] = None,
    ) -> None:
        """Start the capture thread for the opened device."""
        if self.cap is None:
            raise CameraInitError("Camera must be opened before it is started")
        if self.active:
            return

        self.on_frame_captured = callback
        self.on_capture_failed = on_failure
        self.active = True
        self.thread = threading.Thread(target=self._capture_loop, name="CameraCapture", daemon=True)
        self.thread.start()
        self.logger.info("Camera capture thread spawned.")

    def stop(self) -> None:
        """Cleanly stop the camera capture and release the device."""
        self.active = False
        if self.thread and self.thread is not threading.current_thread():
            self.thread.join(timeout=5.0)
        self.thread = None
        self._release()

    # ── Internal ─────────────────────────────────────────────────────

    def _release(self) -> None:
        if self.cap is not None:
            self.cap.release()
            self.cap = None
            self.logger.info("Camera released")

    def _init_camera(self, device_id: int) -> bool:
        """Open and configure a device. Returns True if it delivers a frame."""
        self._release()

        width = self.config.get('width', DEFAULT_CAMERA_WIDTH)
        height = self.config.get('height', DEFAULT_CAMERA_HEIGHT)
        fps = self.config.get('fps', DEFAULT_CAMERA_FPS)

        cap = self.capture_factory(device_id)
        if not cap.isOpened():
            cap.release()
            self.logger.error(f"Camera {device_id} did not open")
            return False

        cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)
        cap.set(cv2.CAP_PROP_FPS, fps)

        ok, frame = cap.read()
        if not ok or not self._is_valid_frame(frame):
            cap.release()
            self.logger.error(f"Camera {device_id} opened but returned no frame")
            return False

        self.cap = cap
        self.logger.info(f"Camera {device_id} initialized at {frame.shape[1]}x{frame.shape[0]}")
        return True

    def _is_valid_frame(self, frame) -> bool:
        """Check whether a captured frame contains actual image data."""
        if frame is None or not isinstance(frame, np.ndarray):
            return False
        if frame.size == 0 or frame.ndim != 3:
            return False
        return frame.shape[0] >= 2 and frame.shape[1] >= 2

    def _capture_loop(self) -> None:
        """Read frames until stopped, converting and forwarding each one."""
        source = f"camera{self.device_id}"
        empty_frame_count = 0

        while self.active:
            ok, frame = self.cap.read()

            if not ok or not self._is_valid_frame(frame):
                empty_frame_count += 1
                if empty_frame_count == 1:
                    self.logger.warning("Captured empty frame, waiting for camera stream...")

                if empty_frame_count >= MAX_EMPTY_FRAMES:
                    self.logger.warning(f"{MAX_EMPTY_FRAMES} consecutive empty frames. Restarting camera...")
                    if not self._init_camera(self.device_id):
                        self.logger.error("Camera restart failed, stopping capture.")
                        self.active = False
                        self._report_failure(
                            CameraInitError(f"camera{self.device_id} stopped delivering frames")
                        )
                        return
                    empty_frame_count = 0

                time.sleep(0.1)
                continue

            if empty_frame_count > 0:
                self.logger.info(f"Camera stream recovered after {empty_frame_count} empty frame(s)")
                empty_frame_count = 0

            if self.on_frame_captured:
                try:
                    self.on_frame_captured(bgr_to_planar(frame, source))
                except Exception as e:
                    self.logger.error(f"Callback error in camera thread: {e}")

    def _report_failure(self, error: CameraInitError) -> None:
        """Hand a lost device to the failure callback. It may reopen another device."""
        callback = self.on_capture_failed
        if callback is None:
            return
        try:
            callback(error)
        except Exception as e:
            self.logger.error(f"Failure callback error in camera thread: {e}")
