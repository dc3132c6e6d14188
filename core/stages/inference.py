"""
Inference - wraps the pre-loaded classification model behind ``infer``.

The model is loaded once, optionally in a background thread so startup
is not held up by it. Until loading completes every ``infer`` call raises
ModelNotLoadedError, which the pipeline treats as "skip this frame".
"""
import threading
from typing import Optional, Tuple

import numpy as np
import torch

from Handlers.Model_Loader_Handler import ModelLoader
from utils.constants import MODEL_INPUT_HEIGHT, MODEL_INPUT_WIDTH, MODEL_INPUT_CHANNELS
from utils.failures import ModelNotLoadedError, ModelExecutionError, ShapeMismatchError
from utils.logger import Logger


class TorchClassifier:
    """
    Classification model invoker backed by a TorchScript module.

    The module receives a float32 ``(1, H, W, 3)`` tensor and must return
    ``(1, num_classes)`` (or ``(num_classes,)``) scores.
    """

    def __init__(
        self,
        model_path: str,
        loader: Optional[ModelLoader] = None,
        input_height: int = MODEL_INPUT_HEIGHT,
        input_width: int = MODEL_INPUT_WIDTH,
    ):
        self.model_path = str(model_path)
        self.loader = loader or ModelLoader()
        self._input_shape = (1, input_height, input_width, MODEL_INPUT_CHANNELS)
        self._model: Optional[torch.jit.ScriptModule] = None
        self._lock = threading.Lock()
        self._load_thread: Optional[threading.Thread] = None
        self.logger = Logger("TorchClassifier")

    @property
    def input_shape(self) -> Tuple[int, int, int, int]:
        return self._input_shape

    @property
    def loaded(self) -> bool:
        with self._lock:
            return self._model is not None

    def load(self) -> bool:
        """Load the model on the calling thread. Returns True on success."""
        model = self.loader.load_model(self.model_path)
        if model is None:
            self.logger.error(f"Classifier unavailable, frames will be skipped: {self.model_path}")
            return False
        with self._lock:
            self._model = model
        self.logger.info(f"Classifier ready ({self.loader.device}, input {self._input_shape})")
        return True

    def load_async(self) -> threading.Thread:
        """Start loading in a daemon thread and return it."""
        self._load_thread = threading.Thread(target=self.load, name="ModelLoad", daemon=True)
        self._load_thread.start()
        return self._load_thread

    def wait_loaded(self, timeout: Optional[float] = None) -> bool:
        """Block until a background load finishes. Returns ``loaded``."""
        if self._load_thread is not None:
            self._load_thread.join(timeout)
        return self.loaded

    def infer(self, tensor: np.ndarray) -> np.ndarray:
        """
        Run the classifier on one prepared tensor.

        Raises:
            ModelNotLoadedError: The model has not been loaded yet.
            ShapeMismatchError: ``tensor`` does not match ``input_shape``.
            ModelExecutionError: The model raised while running.
        """
        with self._lock:
            model = self._model
        if model is None:
            raise ModelNotLoadedError("Model is not loaded yet")

        if tuple(tensor.shape) != self._input_shape:
            raise ShapeMismatchError(
                f"Model expects input {self._input_shape}, got {tuple(tensor.shape)}"
            )

        try:
            batch = torch.from_numpy(np.ascontiguousarray(tensor, dtype=np.float32))
            with torch.inference_mode():
                output = model(batch.to(self.loader.device))
            scores = output.detach().cpu().numpy()
        except Exception as e:
            raise ModelExecutionError(f"Model execution failed: {e}") from e

        # First row of a batched output; a bare vector is used as-is
        if scores.ndim > 1:
            scores = scores[0]
        return scores.astype(np.float32).ravel()

    def close(self) -> None:
        """Drop the model so its memory can be released."""
        with self._lock:
            self._model = None
        self.loader.unload_model(self.model_path)
        self.logger.info("Classifier closed")
