"""
Frame Scheduler - admits camera frames into the pipeline one at a time.

While a pass is in flight every newly offered frame is dropped. There is
no queue: the next frame to be processed is whichever one arrives after
the current pass finishes, so results always describe a fresh frame and
memory use stays flat no matter how slow inference is.

The busy flag is a non-blocking lock acquire (an atomic test-and-set).
The admitted frame is handed to a single worker thread, so ``submit``
returns immediately and the camera thread is never held up.
"""
import threading
from queue import Queue
from typing import Callable, Optional

from core.events import PlanarFrame
from utils.failures import FailureManager
from utils.logger import Logger

_STOP = object()


class FrameScheduler:
    """
    Drop-while-busy admission control in front of a pipeline callable.

    Usage:
        scheduler = FrameScheduler(pipeline.process)
        scheduler.start()
        camera.start(scheduler.submit)
    """

    def __init__(
        self,
        process: Callable[[PlanarFrame], object],
        failures: Optional[FailureManager] = None,
    ):
        """
        Args:
            process: Runs one full pipeline pass for a frame.
            failures: Tracker for unexpected errors raised by ``process``.
        """
        self.process = process
        self.failures = failures or FailureManager()
        self.logger = Logger("FrameScheduler")

        self._busy = threading.Lock()
        self._released = threading.Condition()
        self._handoff: Queue = Queue(maxsize=1)
        self._worker: Optional[threading.Thread] = None
        self._closed = False
        self._count_lock = threading.Lock()
        self._admitted = 0
        self._dropped = 0

    # ── Lifecycle ────────────────────────────────────────────────────

    def start(self) -> bool:
        """
        Spawn the worker thread. Frames submitted before this are dropped.

        Returns:
            False if a worker left behind by a timed-out shutdown is still
            mid-pass. Only one worker ever reads the handoff.
        """
        if self._worker is not None:
            if not self._closed:
                return True
            if not self._retire_worker():
                self.logger.warning("Previous pipeline pass still running, not restarting")
                return False
        self._closed = False
        self._worker = threading.Thread(target=self._run, name="PipelineWorker", daemon=True)
        self._worker.start()
        self.logger.info("Frame scheduler running")
        return True

    def shutdown(self, wait: bool = True, timeout: Optional[float] = None) -> None:
        """Stop admitting frames; optionally wait for the in-flight pass."""
        if self._worker is None or self._closed:
            return
        self._closed = True
        # Taking the flag guarantees no pass is running and none can start.
        if self._busy.acquire(timeout=-1 if timeout is None else timeout):
            self._handoff.put(_STOP)
        else:
            self.logger.warning("Pipeline pass still running, worker left to finish on its own")
        if wait:
            self._worker.join(timeout)
        self.logger.info(f"Frame scheduler stopped (admitted={self.admitted}, dropped={self.dropped})")

    def _retire_worker(self) -> bool:
        """Stop a worker that outlived shutdown. False if it is still mid-pass."""
        if self._worker.is_alive():
            if not self._busy.acquire(blocking=False):
                return False
            self._handoff.put(_STOP)
            self._worker.join()
        self._worker = None
        return True

    # ── Admission ────────────────────────────────────────────────────

    def submit(self, frame: PlanarFrame) -> bool:
        """
        Offer a frame to the pipeline without blocking.

        Returns:
            True if the frame was admitted, False if it was dropped.
        """
        if self._closed or self._worker is None or not self._busy.acquire(blocking=False):
            with self._count_lock:
                self._dropped += 1
            return False

        if self._closed:
            # Shutdown won the race after the check above
            self._release()
            with self._count_lock:
                self._dropped += 1
            return False

        with self._count_lock:
            self._admitted += 1
        self._handoff.put_nowait(frame)
        return True

    # ── State ────────────────────────────────────────────────────────

    @property
    def busy(self) -> bool:
        return self._busy.locked()

    @property
    def admitted(self) -> int:
        with self._count_lock:
            return self._admitted

    @property
    def dropped(self) -> int:
        with self._count_lock:
            return self._dropped

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """Block until no pass is in flight. Returns False on timeout."""
        with self._released:
            return self._released.wait_for(lambda: not self._busy.locked(), timeout)

    # ── Worker ───────────────────────────────────────────────────────

    def _run(self) -> None:
        while True:
            frame = self._handoff.get()
            if frame is _STOP:
                self._release()
                break
            try:
                self.process(frame)
            except Exception as e:
                self.logger.error(f"Pipeline pass failed: {e}")
                self.failures.record_failure(e)
            finally:
                self._release()

    def _release(self) -> None:
        with self._released:
            self._busy.release()
            self._released.notify_all()
