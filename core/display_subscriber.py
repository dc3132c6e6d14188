"""
Display Subscriber - bridges EventBus events to the display collaborator.

Subscribes to RecognitionsUpdated and CameraStatusChanged and converts
them into the view models the display renders. This keeps the display
decoupled from the pipeline and the camera session.
"""
from core.bus import EventBus
from core.events import RecognitionsUpdated, CameraStatusChanged
from core.protocols import Display
from Handlers.Display_Handler import to_views
from utils.logger import Logger


class DisplaySubscriber:
    """
    Subscribes to display-relevant events and forwards them to a Display.
    """

    def __init__(self, bus: EventBus, display: Display):
        """
        Args:
            bus: Shared event bus.
            display: Any object implementing the Display protocol.
        """
        self.bus = bus
        self.display = display
        self.logger = Logger("DisplaySubscriber")

        self.bus.subscribe(RecognitionsUpdated, self._on_recognitions)
        self.bus.subscribe(CameraStatusChanged, self._on_camera_status)

    def _on_recognitions(self, event: RecognitionsUpdated) -> None:
        self.display.show_recognitions(to_views(event.recognitions))

    def _on_camera_status(self, event: CameraStatusChanged) -> None:
        self.logger.debug(f"Camera status: available={event.available} index={event.index}/{event.count}")
        self.display.show_camera_status(event)

    def close(self) -> None:
        """Stop receiving events."""
        self.bus.unsubscribe(RecognitionsUpdated, self._on_recognitions)
        self.bus.unsubscribe(CameraStatusChanged, self._on_camera_status)
