"""
Display Handler - Renders recognitions and camera state as log lines.

Stands in for a graphical front end: it consumes the same view models a
GUI would (label, whole-number percentage, confidence tier) and keeps the
last rendered state so it can be inspected.
"""
import threading
from typing import List, Optional, Sequence

from core.events import CameraStatusChanged, RecognitionList, RecognitionView
from utils.constants import TIER_HIGH, TIER_GOOD, TIER_FAIR
from utils.logger import Logger

NO_OBJECTS_TEXT = "No objects detected"
NO_CAMERA_TEXT = "No camera available"


def confidence_tier(percent: int) -> str:
    """Bucket a percentage into the tier used for colouring."""
    if percent > TIER_HIGH:
        return "high"
    if percent > TIER_GOOD:
        return "good"
    if percent > TIER_FAIR:
        return "fair"
    return "low"


def to_views(recognitions: RecognitionList) -> List[RecognitionView]:
    views = []
    for rec in recognitions:
        views.append(RecognitionView(rec.label, rec.percent, confidence_tier(rec.percent)))
    return views


def format_camera_status(status: CameraStatusChanged) -> str:
    if not status.available:
        return NO_CAMERA_TEXT
    return f"Camera {status.index + 1}/{status.count}"


class ConsoleDisplayHandler:
    """Display collaborator that writes each update to the log."""

    def __init__(self, only_changes: bool = True):
        """
        Args:
            only_changes: Skip rendering when the lines match the previous update.
        """
        self.only_changes = only_changes
        self.logger = Logger("Display")
        self._lock = threading.Lock()
        self.lines: List[str] = []
        self.camera_text: Optional[str] = None

    def show_recognitions(self, views: Sequence[RecognitionView]) -> None:
        if views:
            lines = [f"{view.label:<30} {view.percent:>3d}% [{view.tier}]" for view in views]
        else:
            lines = [NO_OBJECTS_TEXT]

        with self._lock:
            if self.only_changes and lines == self.lines:
                return
            self.lines = lines

        self.logger.info("Recognitions:\n  " + "\n  ".join(lines))

    def show_camera_status(self, status: CameraStatusChanged) -> None:
        text = format_camera_status(status)
        with self._lock:
            self.camera_text = text
        if status.available:
            self.logger.info(text)
        else:
            self.logger.error(text)
