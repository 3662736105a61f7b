"""Constants and defaults for CodeCanvas scenes."""

from typing import Dict, Tuple

from .types import Dialect, ShapeType


CLIPBOARD_MIME_TYPE = "application/x-codecanvas-scene"

DEFAULT_SHAPE_COLOR = "#f9a8d4"
DEFAULT_TEXT_COLOR = "#000000"
DEFAULT_FONT_FAMILY = "Arial"
DEFAULT_FONT_SIZE = 16
DEFAULT_TEXT_CONTENT = "Enter text"

DEFAULT_CANVAS_WIDTH = 800
DEFAULT_CANVAS_HEIGHT = 600

DEFAULT_SHAPE_WIDTH = 100
DEFAULT_SHAPE_HEIGHT = 100
DEFAULT_TEXT_WIDTH = 200
DEFAULT_TEXT_HEIGHT = 50

MIN_SHAPE_SIZE = 20
CREATE_THRESHOLD = 10
MIN_TEXT_WIDTH = 50
MIN_TEXT_HEIGHT = 30
MIN_FONT_SIZE = 8
MAX_FONT_SIZE = 200

ARROW_STEP = 10
PASTE_OFFSET = 20

DEFAULT_ROUNDED_RADIUS = 10
DEFAULT_SHADOW_COLOR = "rgba(0, 0, 0, 0.3)"
DEFAULT_SHADOW_BLUR = 8
DEFAULT_SHADOW_OFFSET = 4
DEFAULT_GLOW_BLUR = 20
DEFAULT_STROKE_COLOR = "#000000"

PARALLELOGRAM_TRANSFORM = "skew(-20deg)"

# Percentage points (x%, y%) of each clip polygon.
POLYGON_POINTS: Dict[ShapeType, Tuple[Tuple[int, int], ...]] = {
    ShapeType.TRIANGLE: ((50, 0), (0, 100), (100, 100)),
    ShapeType.DIAMOND: ((50, 0), (100, 50), (50, 100), (0, 50)),
    ShapeType.HEXAGON: ((30, 0), (70, 0), (100, 50), (70, 100), (30, 100), (0, 50)),
    ShapeType.PENTAGON: ((50, 0), (100, 38), (82, 100), (18, 100), (0, 38)),
    ShapeType.STAR: (
        (50, 0), (61, 35), (98, 35), (68, 57), (79, 91),
        (50, 70), (21, 91), (32, 57), (2, 35), (39, 35),
    ),
}

EMPTY_SCENE_PLACEHOLDERS: Dict[Dialect, str] = {
    Dialect.MARKUP: "<!-- Code appears here -->",
    Dialect.STYLESHEET: "/* Code appears here */",
    Dialect.COMPONENT: "// Code appears here",
}

DIALECT_EXTENSIONS: Dict[str, Dialect] = {
    ".xml": Dialect.MARKUP,
    ".css": Dialect.STYLESHEET,
    ".tsx": Dialect.COMPONENT,
    ".jsx": Dialect.COMPONENT,
}

TRIANGLE_DIRECTIONS = ("up", "down", "left", "right")

# Allowed text style values; the first entry is the default.
FONT_WEIGHTS = ("normal", "bold")
FONT_STYLES = ("normal", "italic")
TEXT_ALIGNS = ("left", "center", "right")
