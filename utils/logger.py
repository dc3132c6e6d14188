import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional


def parse_size(value, default: int = 5 * 1024 * 1024) -> int:
    """Parse a rotation size such as "5MB" or "512KB" into bytes."""
    text = str(value).strip().upper()
    try:
        if text.endswith('MB'):
            return int(text[:-2]) * 1024 * 1024
        if text.endswith('KB'):
            return int(text[:-2]) * 1024
        return int(text)
    except ValueError:
        return default


class Logger:
    """Enhanced logger with console and rotating file output."""

    _configured = False

    @classmethod
    def setup(cls, settings: dict, log_dir: Optional[Path] = None):
        """
        Global configuration for all Logger instances.

        Args:
            settings: Dictionary containing 'level', 'rotation', 'backup_count'
            log_dir: Directory for the rotating log file (defaults to ./logs)
        """
        if cls._configured:
            return

        level_name = str(settings.get('level', 'INFO')).upper()
        level = getattr(logging, level_name, logging.INFO)

        root = logging.getLogger()
        root.setLevel(level)

        if not root.handlers:
            formatter = logging.Formatter(
                '[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )

            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setFormatter(formatter)
            root.addHandler(console_handler)

            if settings.get('file', True):
                try:
                    if log_dir is None:
                        log_dir = Path(__file__).parent.parent / "logs"
                    log_dir = Path(log_dir)
                    log_dir.mkdir(parents=True, exist_ok=True)

                    file_handler = RotatingFileHandler(
                        log_dir / "livelens.log",
                        maxBytes=parse_size(settings.get('rotation', '5MB')),
                        backupCount=settings.get('backup_count', 5)
                    )
                    file_handler.setFormatter(formatter)
                    root.addHandler(file_handler)
                except OSError as e:
                    root.warning(f"Failed to initialize file logger: {e}")

        cls._configured = True

    def __init__(self, name: str = "LiveLens"):
        self.logger = logging.getLogger(name)

    def info(self, message: str):
        self.logger.info(message)

    def warning(self, message: str):
        self.logger.warning(message)

    def error(self, message: str):
        self.logger.error(message)

    def debug(self, message: str):
        self.logger.debug(message)
