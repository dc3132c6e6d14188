"""
Recognition Store - the single shared slot holding the latest results.

Writers replace the whole tuple; readers get whichever complete tuple was
current when they asked. Tuples are immutable, so a reader can keep using
the one it got while a newer one is published.

This is the polling side of result delivery: the bus pushes each update
to the display, while anything that only needs the current state (the
node's shutdown summary, for one) reads ``latest()`` and ``version``.
"""
import threading

from core.events import RecognitionList


class RecognitionStore:
    """Latest published RecognitionList, swapped atomically."""

    def __init__(self, initial: RecognitionList = ()):
        self._lock = threading.Lock()
        self._current: RecognitionList = tuple(initial)
        self._version = 0

    def publish(self, recognitions: RecognitionList) -> int:
        """Replace the current list. Returns the new version number."""
        snapshot = tuple(recognitions)
        with self._lock:
            self._current = snapshot
            self._version += 1
            return self._version

    def latest(self) -> RecognitionList:
        with self._lock:
            return self._current

    @property
    def version(self) -> int:
        """How many times the slot has been replaced."""
        with self._lock:
            return self._version
