"""Application configuration and constants.

Project paths, the editor settings file location and the defaults used by
the segmentation tool, the viewport and the generation panel.
"""

from pathlib import Path

# Base paths
PROJECT_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_OUTPUT_DIR = PROJECT_ROOT / "runs" / "segment"

# Editor settings (JSON)
EDITOR_SETTINGS_PATH = PROJECT_ROOT / "editor_settings.json"

# Segmentation
DEFAULT_THRESHOLD = 0.15
THRESHOLD_RANGE = (0.05, 0.5)
DEFAULT_DILATE = 3
DILATE_RANGE = (0, 10)
POSITIVE_THRESHOLD_FACTOR = 0.8  # tighter than nominal, favours precision
NEGATIVE_THRESHOLD_FACTOR = 0.6

# Mask rendering (RGBA)
MASK_COLOR = (255, 100, 255, 255)
DILATED_MASK_COLOR = (255, 100, 255, 180)
MASK_ALPHA_CUTOFF = 128

# Viewport
ZOOM_STEP = 1.2
ZOOM_RANGE = (0.1, 5.0)

# Layers
BACKGROUND_LAYER_ID = "background"
BACKGROUND_LAYER_NAME = "Background"
THUMBNAIL_MAX_SIDE = 128
DEFAULT_BRUSH_SIZE = 10

# Generation
GENERATION_STEPS_RANGE = (10, 100)
GENERATION_GUIDANCE_RANGE = (1.0, 20.0)
GENERATION_SIZES = (512, 768, 1024, 1536)
