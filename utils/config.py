"""
Configuration management for LiveLens Node.
"""
import json
import os
from pathlib import Path
from typing import Dict, Any, Optional

from utils.failures import ConfigError


# Environment variable -> dotted config key
ENV_OVERRIDES = {
    'LIVELENS_MODEL_PATH': 'model.path',
    'LIVELENS_LABELS_PATH': 'labels.path',
    'LIVELENS_CAMERA_INDEX': 'camera.index',
    'LIVELENS_LOG_LEVEL': 'logging.level',
}


class Config:
    """Configuration manager that merges multiple domain-specific JSON files."""

    def __init__(self, configs_dir: Optional[str] = None, environ: Optional[Dict[str, str]] = None):
        """
        Initialize configuration by loading all JSON files in the configs directory.

        Args:
            configs_dir: Path to directory containing JSON configs (defaults to ./configs)
            environ: Environment mapping used for overrides (defaults to os.environ)
        """
        self.config: Dict[str, Any] = {}

        if not configs_dir:
            configs_dir = Path(__file__).parent.parent / "configs"
        else:
            configs_dir = Path(configs_dir)
        # Relative paths in config files are relative to the project root
        self.base_dir = configs_dir.resolve().parent

        if configs_dir.exists() and configs_dir.is_dir():
            for config_file in sorted(configs_dir.glob("*.json")):
                self.load_from_file(str(config_file))

        self._load_from_env(os.environ if environ is None else environ)

    def _load_from_env(self, environ: Dict[str, str]):
        """Load configuration overrides from environment variables."""
        for env_name, key in ENV_OVERRIDES.items():
            value = environ.get(env_name)
            if value:
                self.set(key, value)

    def load_from_file(self, path: str):
        """Load configuration from JSON file."""
        try:
            with open(path, 'r', encoding='utf-8') as f:
                user_config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Failed to load config from {path}: {e}") from e

        if not isinstance(user_config, dict):
            raise ConfigError(f"Config file {path} must contain a JSON object")
        self._merge_config(user_config)

    def _merge_config(self, user_config: Dict[str, Any]):
        """Merge user config with defaults recursively."""
        def update(d, u):
            for k, v in u.items():
                if isinstance(v, dict):
                    d[k] = update(d.get(k, {}), v)
                else:
                    d[k] = v
            return d

        update(self.config, user_config)

    def set(self, key: str, value: Any):
        """Set a dotted configuration key, creating sections as needed."""
        *sections, leaf = key.split('.')
        node = self.config
        for section in sections:
            node = node.setdefault(section, {})
        node[leaf] = value

    def get_int(self, key: str, default: int = 0) -> int:
        """Get config value as integer."""
        val = self.get(key, default)
        try:
            return int(val)
        except (ValueError, TypeError):
            return default

    def get_float(self, key: str, default: float = 0.0) -> float:
        """Get config value as float."""
        val = self.get(key, default)
        try:
            return float(val)
        except (ValueError, TypeError):
            return default

    def get_path(self, key: str, default: Any = None) -> Optional[Path]:
        """Get config value as a Path, resolving relative paths against base_dir."""
        val = self.get(key, default)
        if val is None or val == "":
            return None
        path = Path(val)
        return path if path.is_absolute() else self.base_dir / path

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value."""
        value = self.config
        for k in key.split('.'):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value
