import threading
from pathlib import Path
from typing import Dict, Optional

import torch
from utils.logger import Logger


class ModelLoader:
    """Handler for loading and caching TorchScript models with GPU/CPU selection."""

    def __init__(self, device: Optional[str] = None):
        self.logger = Logger("ModelLoader")
        self.device = device or ("cuda" if torch.cuda.is_available() else "cpu")
        self.model_cache: Dict[str, torch.jit.ScriptModule] = {}
        self._lock = threading.Lock()

    def load_model(self, model_path: str) -> Optional[torch.jit.ScriptModule]:
        """
        Load a TorchScript model from the specified path with caching.

        Args:
            model_path (str): Path to the local model file.

        Returns:
            The model in eval mode, or None if loading fails.
        """
        key = str(model_path)
        with self._lock:
            if key in self.model_cache:
                self.logger.info(f"Using cached model: {key}")
                return self.model_cache[key]

        if not Path(key).exists():
            self.logger.error(f"Model file not found: {key}")
            return None

        try:
            model = torch.jit.load(key, map_location=self.device)
            model.eval()
        except (RuntimeError, ValueError, OSError) as e:
            self.logger.error(f"Error loading model: {e}")
            return None

        with self._lock:
            self.model_cache[key] = model
        self.logger.info(f"Model loaded successfully on {self.device}: {key}")
        return model

    def unload_model(self, model_path: str) -> bool:
        """Remove model from cache to free memory."""
        with self._lock:
            if str(model_path) in self.model_cache:
                del self.model_cache[str(model_path)]
                self.logger.info(f"Model unloaded from cache: {model_path}")
                return True
        return False
