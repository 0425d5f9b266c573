# Application configuration
# Module-level settings shared by the engine, the Streamlit app and the CLI.

import os

# When True the CLI logs every computation at DEBUG level.
DEBUG = os.environ.get("CONDUIT_CALC_DEBUG", "").lower() in ("1", "true", "yes")
LOG_LEVEL = "DEBUG" if DEBUG else os.environ.get("CONDUIT_CALC_LOG_LEVEL", "WARNING").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

APP_NAME = "Conduit Field Calculator"
PAGE_ICON = "📐"

# Results cached per distinct input tuple
MEMO_SIZE = 256

# Starting values per screen (also what "reset" goes back to)
BEND_DEFAULTS = {
    "offset": {"height": 10.0, "angle": 30.0},
    "saddle3": {"height": 20.0, "angle": 45.0},
    "saddle4": {"height": 20.0, "width": 25.0, "angle": 45.0},
    "roll": {"rise": 10.0, "roll": 10.0, "angle": 30.0},
    "parallel": {"spacing": 1.0, "pipe_count": 3, "angle": 60.0},
    "segmented": {"radius": 100.0, "shot_count": 15, "angle": 90.0},
}
DEFAULT_MATERIAL = "EMT"
DEFAULT_TRADE_SIZE = "0.75"
BENDER_TRADE_SIZES = ["0.5", "0.75", "1", "1.25", "1.5", "2", "2.5", "3"]

CONDUIT_FILL_DEFAULTS = {"conduit_type": "EMT", "conduit_size": "0.75", "conductors": [("12", 3)]}
BOX_FILL_DEFAULTS = {"box_type": "4x1-1/2 Sq", "count_14": 2, "count_12": 4, "device_count": 1}

# Advisory thresholds (inches / degrees)
MAX_STICK_TRAVEL = 110.0        # usable length of a 10 ft stick
FLOOR_BENDER_CLEARANCE = 22.0
MAX_DEGREES_BETWEEN_PULLS = 360.0
LEVEL_EXACT_TOLERANCE = 0.5
LEVEL_CLOSE_TOLERANCE = 2.0

# Drawing
STROKE_WIDTH = 5.0
ROUNDING_RADIUS = 15.0
PADDING_STRAIGHT = 90.0   # offsets and saddles
PADDING_ARC = 50.0        # segmented
PADDING_CONCENTRIC = 1.5
HASH_LENGTH = 6.0
