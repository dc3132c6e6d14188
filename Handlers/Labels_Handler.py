"""Labels Handler - Loads the class label table for the classifier.

One label per line; line N names class N. Loaded once at startup.
"""
from pathlib import Path
from typing import Tuple

from utils.failures import ConfigError
from utils.logger import Logger


def parse_labels(text: str) -> Tuple[str, ...]:
    """
    Split newline-delimited label text into an index-aligned table.

    A trailing newline does not add an empty label, but blank lines in
    the middle are kept so later indices stay aligned.
    """
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return tuple(line.rstrip("\r") for line in lines)


def load_labels(path) -> Tuple[str, ...]:
    """
    Read the label asset at ``path``.

    Raises:
        ConfigError: If the file cannot be read.
    """
    logger = Logger("LabelsHandler")
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Failed to read labels from {path}: {e}") from e

    labels = parse_labels(text)
    logger.info(f"Loaded {len(labels)} labels from {path}")
    return labels
