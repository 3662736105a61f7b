"""Data types for CodeCanvas scenes.

This module contains the core data structures shared by the scene model,
the interaction state machine, the style resolver and the code
generators/parsers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Set, Tuple


class ShapeType(Enum):
    """Supported shape geometries."""

    RECTANGLE = "rectangle"
    ROUNDED_RECTANGLE = "rounded-rectangle"
    CIRCLE = "circle"
    ELLIPSE = "ellipse"
    PARALLELOGRAM = "parallelogram"
    TRIANGLE = "triangle"
    DIAMOND = "diamond"
    HEXAGON = "hexagon"
    PENTAGON = "pentagon"
    STAR = "star"
    IMAGE = "image"

    @property
    def is_polygon(self) -> bool:
        """Return True for shapes rendered through a clip polygon."""
        return self in POLYGON_TYPES

    @classmethod
    def from_name(cls, name: str) -> Optional["ShapeType"]:
        """Look up a type by its dialect name, accepting camelCase aliases."""
        if not name:
            return None
        normalized = name.strip()
        if normalized == "roundedRectangle":
            normalized = "rounded-rectangle"
        try:
            return cls(normalized.lower())
        except ValueError:
            return None


POLYGON_TYPES = frozenset({
    ShapeType.TRIANGLE,
    ShapeType.DIAMOND,
    ShapeType.HEXAGON,
    ShapeType.PENTAGON,
    ShapeType.STAR,
})


class ShadowKind(Enum):
    NONE = "none"
    OUTER = "outer"
    INNER = "inner"


class Dialect(Enum):
    """Textual representations kept in sync with the scene."""

    MARKUP = "markup"
    STYLESHEET = "stylesheet"
    COMPONENT = "component"


@dataclass
class Shadow:
    kind: ShadowKind = ShadowKind.OUTER
    color: str = "rgba(0, 0, 0, 0.3)"
    blur_radius: int = 8
    offset_x: int = 4
    offset_y: int = 4


@dataclass
class Glow:
    enabled: bool = True
    color: Optional[str] = None  # None means "use the shape colour"
    blur_radius: int = 20


@dataclass
class Stroke:
    color: str = "#000000"
    width: int = 1


@dataclass
class Shape:
    """A geometric shape placed on the canvas."""

    id: int
    shape_type: ShapeType
    x: int
    y: int
    width: int = 100
    height: int = 100
    color: str = "#f9a8d4"
    z_index: int = 0
    border_radius: Optional[int] = None
    opacity: Optional[float] = None
    shadow: Optional[Shadow] = None
    glow: Optional[Glow] = None
    stroke: Optional[Stroke] = None
    image_data: str = ""  # Data URL for IMAGE shapes
    locked: bool = False

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height


@dataclass
class Text:
    """A positioned text box."""

    id: int
    x: int
    y: int
    width: int = 200
    height: int = 50
    text: str = ""
    font_size: int = 16
    color: str = "#000000"
    font_family: str = "Arial"
    font_weight: str = "normal"
    font_style: str = "normal"
    text_align: str = "left"
    z_index: int = 0
    locked: bool = False

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height


@dataclass
class Group:
    """A weak aggregation of shapes and texts moved together."""

    id: int
    shape_ids: Set[int] = field(default_factory=set)
    text_ids: Set[int] = field(default_factory=set)
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0
    z_index: int = 0
    name: str = ""

    @property
    def member_count(self) -> int:
        return len(self.shape_ids) + len(self.text_ids)


@dataclass(frozen=True)
class SceneSnapshot:
    """Immutable view of a scene handed to generators and renderers."""

    shapes: Tuple[Shape, ...] = ()
    texts: Tuple[Text, ...] = ()
    groups: Tuple[Group, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.shapes and not self.texts


@dataclass
class ParsedScene:
    """Result of parsing one dialect back into scene entities."""

    shapes: List[Shape] = field(default_factory=list)
    texts: List[Text] = field(default_factory=list)
    groups: List[Group] = field(default_factory=list)
