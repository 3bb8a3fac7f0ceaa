# --- Configuration Constants ---
DEFAULT_FPS = 60
DEFAULT_RESOLUTION = (1280, 720)
NOMINAL_FRAME_MS = 1000 / 60  # Baseline frame the speed option is tuned against
MAX_FRAME_DELTA_MS = 250  # Longer gaps are treated as a stalled host

# Star distribution (world units)
SPAWN_XY_RANGE = (-1000.0, 1000.0)
SPAWN_Z_RANGE = (0.0, 2000.0)
RECYCLE_Z = -200.0  # Stars at or behind this depth are respawned

# Rendering
BRIGHTNESS_FALLOFF = 0.7  # alpha = min(1, scale * falloff)
CIRCLE_SHIFT = 4  # Sub-pixel bits passed to cv2.circle
COLOR_CACHE_SIZE = 65536  # Star colours remembered between frames

# Frame timing
FRAME_WINDOW = 120  # Two seconds at 60fps
MIN_FPS_SAMPLES = 10

# Auto-tuning
TARGET_FPS = 60
MIN_STAR_COUNT = 100
CALIBRATION_WINDOW_MS = 1000
CALIBRATION_MAX_ATTEMPTS = 8
CALIBRATION_ACCEPT = (0.9, 1.5)
CALIBRATION_RATIO_CAP = 4
OPTIMIZATION_WINDOW_MS = 3000
OPTIMIZATION_COOLDOWN_MS = 10000
OPTIMIZATION_ACCEPT = (0.85, 1.3)
OPTIMIZATION_DAMPING = 0.9
OPTIMIZATION_MAX_STEP = 0.2  # Fraction of the current count per adjustment
OPTIMIZATION_MIN_CHANGE = 0.05  # Smaller relative changes are ignored

# Persistence
CACHE_KEY = "starfield:optimal-star-count"
