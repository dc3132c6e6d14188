"""
Global constants for the LiveLens Node application.
"""
from pathlib import Path

# Project Structure
BASE_DIR = Path(__file__).parent.parent
ASSETS_DIR = BASE_DIR / "assets"
CONFIGS_DIR = BASE_DIR / "configs"
LOGS_DIR = BASE_DIR / "logs"

# Asset Paths
DEFAULT_MODEL_PATH = ASSETS_DIR / "mobilenet_v1_1.0_224.pt"
DEFAULT_LABELS_PATH = ASSETS_DIR / "labels.txt"

# Model Input / Output
MODEL_INPUT_HEIGHT = 224
MODEL_INPUT_WIDTH = 224
MODEL_INPUT_CHANNELS = 3
MODEL_NUM_CLASSES = 1001

# Ranking
CONFIDENCE_THRESHOLD = 0.2
TOP_K = 5
UNKNOWN_LABEL = "Unknown"

# Camera
DEFAULT_CAMERA_WIDTH = 640
DEFAULT_CAMERA_HEIGHT = 480
DEFAULT_CAMERA_FPS = 30
DEFAULT_MAX_CAMERA_DEVICES = 4

# Display confidence tiers (percent, exclusive lower bounds)
TIER_HIGH = 85
TIER_GOOD = 60
TIER_FAIR = 40
