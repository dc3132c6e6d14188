"""
LiveLens Node - Entry Point

    CameraHandler ──push──▶ FrameScheduler ──(drop while busy)──▶ RecognitionPipeline
                                                                    │ convert → prepare → infer → rank
                                                                    ▼
                                                RecognitionStore + EventBus ──▶ DisplaySubscriber
"""
import argparse
import signal
import sys
from pathlib import Path
from threading import Event

from utils.config import Config
from utils.constants import (
    CONFIGS_DIR, DEFAULT_MODEL_PATH, DEFAULT_LABELS_PATH, CONFIDENCE_THRESHOLD, TOP_K,
    MODEL_INPUT_HEIGHT, MODEL_INPUT_WIDTH,
)
from utils.failures import ConfigError, FailureManager
from utils.logger import Logger

from core.bus import EventBus
from core.events import ShutdownRequested


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="LiveLens Node - live camera object recognition")
    parser.add_argument(
        '--camera', '-c',
        type=int,
        default=None,
        help='Index of the camera to start with (falls back to the next ones)'
    )
    parser.add_argument(
        '--model',
        type=str,
        default=None,
        help='Path to the TorchScript classification model'
    )
    parser.add_argument(
        '--labels',
        type=str,
        default=None,
        help='Path to the newline-delimited label file'
    )
    parser.add_argument(
        '--configs',
        type=str,
        default=None,
        help='Directory holding the JSON config files'
    )
    return parser.parse_args(argv)


class LiveLensNode:
    """
    LiveLens Node Orchestrator.

    Wires together:
      - CameraSession (device fallback/switching) feeding FrameScheduler
      - RecognitionPipeline running on the scheduler's worker thread
      - RecognitionStore + EventBus for publishing results
      - Console display via DisplaySubscriber
    """

    def __init__(self, args: argparse.Namespace):
        # ── 1. Foundation ────────────────────────────────────────────
        self.config = Config(args.configs or str(CONFIGS_DIR))
        if args.model:
            self.config.set('model.path', str(Path(args.model).resolve()))
        if args.labels:
            self.config.set('labels.path', str(Path(args.labels).resolve()))
        if args.camera is not None:
            self.config.set('camera.index', args.camera)

        Logger.setup(self.config.get('logging', {}))
        self.logger = Logger("LiveLensNode")
        self.logger.info("Initializing LiveLens Node...")

        self.stop_event = Event()
        self._stopped = False
        self.bus = EventBus()
        self.failures = FailureManager(self.config.get('failures', {}))

        # ── 2. Labels + Model ────────────────────────────────────────
        from Handlers.Labels_Handler import load_labels
        from core.stages.inference import TorchClassifier

        self.labels = load_labels(self.config.get_path('labels.path', DEFAULT_LABELS_PATH))
        self.classifier = TorchClassifier(
            self.config.get_path('model.path', DEFAULT_MODEL_PATH),
            input_height=self.config.get_int('model.input_height', MODEL_INPUT_HEIGHT),
            input_width=self.config.get_int('model.input_width', MODEL_INPUT_WIDTH),
        )

        # ── 3. Pipeline + Scheduler ──────────────────────────────────
        from core.results import RecognitionStore
        from core.pipeline import RecognitionPipeline
        from core.scheduler import FrameScheduler

        self.store = RecognitionStore()
        self.pipeline = RecognitionPipeline(
            classifier=self.classifier,
            labels=self.labels,
            store=self.store,
            bus=self.bus,
            failures=self.failures,
            threshold=self.config.get_float('ranking.threshold', CONFIDENCE_THRESHOLD),
            top_k=self.config.get_int('ranking.top_k', TOP_K),
        )
        self.scheduler = FrameScheduler(self.pipeline.process, failures=self.failures)

        # ── 4. Display ───────────────────────────────────────────────
        from Handlers.Display_Handler import ConsoleDisplayHandler
        from core.display_subscriber import DisplaySubscriber

        self.display = ConsoleDisplayHandler()
        self.display_subscriber = DisplaySubscriber(bus=self.bus, display=self.display)

        # ── 5. Camera ────────────────────────────────────────────────
        from Handlers.Camera_Handler import CameraHandler
        from core.camera_session import CameraSession

        self.camera = CameraHandler(self.config.get('camera', {}))
        self.camera_session = CameraSession(
            camera=self.camera,
            on_frame=self.scheduler.submit,
            bus=self.bus,
            failures=self.failures,
        )

        self.bus.subscribe(ShutdownRequested, self._on_shutdown_requested)

        # ── 6. OS Signals ────────────────────────────────────────────
        self._setup_signals()
        self.logger.info("LiveLens Node initialized successfully")

    def _setup_signals(self):
        """Handle OS signals for graceful shutdown and camera switching."""
        def shutdown_handler(sig, frame):
            self.logger.info("Shutdown signal received")
            self.request_shutdown(signal.Signals(sig).name)

        signal.signal(signal.SIGINT, shutdown_handler)
        signal.signal(signal.SIGTERM, shutdown_handler)

        if hasattr(signal, 'SIGUSR1'):
            signal.signal(signal.SIGUSR1, lambda sig, frame: self.switch_camera())

    def request_shutdown(self, reason: str = "user"):
        """Publish ShutdownRequested; the node's subscription ends the main loop."""
        self.bus.publish(ShutdownRequested(reason=reason))

    def _on_shutdown_requested(self, event: ShutdownRequested):
        self.logger.info(f"Shutdown requested ({event.reason})")
        self.stop_event.set()

    def switch_camera(self) -> bool:
        """Move to the next camera device."""
        return self.camera_session.switch_camera()

    def start(self):
        """Start model loading, the scheduler and the camera, then wait for shutdown."""
        self.logger.info("Starting LiveLens Node services...")

        self.classifier.load_async()
        self.scheduler.start()

        if not self.camera_session.start(self.config.get_int('camera.index', 0)):
            self.logger.error("No camera could be started; waiting for shutdown")

        try:
            while not self.stop_event.wait(0.5):
                pass
        finally:
            self.stop()

    def stop(self):
        """Gracefully shutdown all components."""
        if self._stopped:
            return
        self._stopped = True
        self.stop_event.set()
        self.logger.info("Stopping LiveLens Node...")

        self.camera_session.stop()
        self.scheduler.shutdown(wait=True, timeout=5.0)
        self.classifier.close()
        self._log_last_results()
        self.display_subscriber.close()
        self.bus.clear()

        self.logger.info("LiveLens Node stopped successfully")

    def _log_last_results(self):
        """Report the final contents of the result slot."""
        last = self.store.latest()
        summary = ", ".join(f"{r.label} {r.percent}%" for r in last) or "none"
        self.logger.info(f"Published {self.store.version} result set(s); last: {summary}")


def main(argv=None) -> int:
    args = parse_args(argv)
    try:
        node = LiveLensNode(args)
    except ConfigError as e:
        print(f"LiveLens failed to start: {e.message}", file=sys.stderr)
        return 1
    node.start()
    return 0


if __name__ == "__main__":
    sys.exit(main())
