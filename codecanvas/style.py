"""Style resolution for shapes and texts.

``resolve_shape`` is the single place that decides how a shape is
painted. The canvas renderer and all three code generators read the
resulting descriptor instead of re-deriving geometry rules themselves.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from . import codec
from .constants import (
    DEFAULT_ROUNDED_RADIUS,
    PARALLELOGRAM_TRANSFORM,
    POLYGON_POINTS,
    TRIANGLE_DIRECTIONS,
)
from .types import Shape, ShadowKind, ShapeType, Stroke, Text


@dataclass(frozen=True)
class ShapeStyle:
    """Renderable description of a shape."""

    fill: Optional[str] = None
    background_image: Optional[str] = None
    outline: Optional[Stroke] = None
    border_radius: Optional[str] = None
    transform: Optional[str] = None
    clip_polygon: Optional[Tuple[Tuple[int, int], ...]] = None
    box_shadows: Tuple[str, ...] = ()
    filters: Tuple[str, ...] = ()
    opacity: Optional[float] = None

    @property
    def clip_path(self) -> Optional[str]:
        if self.clip_polygon is None:
            return None
        return codec.format_polygon(self.clip_polygon)


@dataclass(frozen=True)
class TextStyle:
    font_size: int
    color: str
    font_family: str
    font_weight: str
    font_style: str
    text_align: str


@dataclass(frozen=True)
class BorderSide:
    width: float
    color: str


@dataclass(frozen=True)
class TriangleBorders:
    """Zero-size box whose borders draw a triangle."""

    top: Optional[BorderSide] = None
    right: Optional[BorderSide] = None
    bottom: Optional[BorderSide] = None
    left: Optional[BorderSide] = None


def _border_radius(shape: Shape) -> Optional[str]:
    if shape.shape_type in (ShapeType.CIRCLE, ShapeType.ELLIPSE):
        return "50%"
    if shape.shape_type == ShapeType.ROUNDED_RECTANGLE:
        radius = shape.border_radius
        if radius is None:
            radius = DEFAULT_ROUNDED_RADIUS
        return f"{codec.format_number(radius)}px"
    if shape.shape_type == ShapeType.RECTANGLE:
        if shape.border_radius:
            return f"{codec.format_number(shape.border_radius)}px"
        return "0"
    return None


def glow_color(shape: Shape) -> Optional[str]:
    """Return the effective glow colour, or None when glow is off."""
    if shape.glow is None or not shape.glow.enabled:
        return None
    return shape.glow.color or shape.color


def resolve_shape(shape: Shape) -> ShapeStyle:
    polygon = POLYGON_POINTS.get(shape.shape_type)
    box_shadows: List[str] = []
    filters: List[str] = []
    effective_glow = glow_color(shape)
    if polygon is not None:
        # Clip paths cut away box-shadow, so effects become drop-shadow filters.
        if shape.shadow is not None and shape.shadow.kind == ShadowKind.OUTER:
            filters.append(codec.format_drop_shadow(shape.shadow))
        if effective_glow is not None:
            filters.append(codec.format_glow_filter(shape.glow.blur_radius, effective_glow))
    else:
        if shape.shadow is not None and shape.shadow.kind != ShadowKind.NONE:
            box_shadows.append(codec.format_shadow_layer(shape.shadow))
        if effective_glow is not None:
            box_shadows.append(codec.format_glow_layer(shape.glow.blur_radius, effective_glow))

    fill: Optional[str] = shape.color
    background_image = None
    if shape.shape_type == ShapeType.IMAGE and shape.image_data:
        fill = None
        background_image = shape.image_data

    outline = None
    if shape.stroke is not None and shape.stroke.width > 0:
        outline = shape.stroke

    return ShapeStyle(
        fill=fill,
        background_image=background_image,
        outline=outline,
        border_radius=_border_radius(shape),
        transform=PARALLELOGRAM_TRANSFORM if shape.shape_type == ShapeType.PARALLELOGRAM else None,
        clip_polygon=polygon,
        box_shadows=tuple(box_shadows),
        filters=tuple(filters),
        opacity=shape.opacity,
    )


def resolve_text(text: Text) -> TextStyle:
    return TextStyle(
        font_size=text.font_size,
        color=text.color,
        font_family=text.font_family,
        font_weight=text.font_weight,
        font_style=text.font_style,
        text_align=text.text_align,
    )


def polygon_points(shape: Shape) -> List[Tuple[float, float]]:
    """Scale the shape's percentage polygon to pixel coordinates."""
    points = POLYGON_POINTS.get(shape.shape_type)
    if points is None:
        return []
    return [(px * shape.width / 100, py * shape.height / 100) for px, py in points]


def triangle_borders(shape: Shape, direction: str = "up") -> TriangleBorders:
    """Encode a triangle as borders of a zero-size box."""
    if direction not in TRIANGLE_DIRECTIONS:
        raise ValueError(f"unknown triangle direction {direction!r}")
    width, height, fill = shape.width, shape.height, shape.color
    if direction == "up":
        side = BorderSide(width / 2, "transparent")
        return TriangleBorders(left=side, right=side, bottom=BorderSide(height, fill))
    if direction == "down":
        side = BorderSide(width / 2, "transparent")
        return TriangleBorders(left=side, right=side, top=BorderSide(height, fill))
    side = BorderSide(height / 2, "transparent")
    if direction == "left":
        return TriangleBorders(top=side, bottom=side, right=BorderSide(width, fill))
    return TriangleBorders(top=side, bottom=side, left=BorderSide(width, fill))


def triangle_from_borders(
    borders: TriangleBorders,
) -> Optional[Tuple[str, str, float, float]]:
    """Recover (direction, fill, width, height) from bordered-triangle sides.

    Returns None when the sides do not form one of the four triangles.
    """
    sides = {
        "top": borders.top,
        "right": borders.right,
        "bottom": borders.bottom,
        "left": borders.left,
    }
    coloured = [name for name, side in sides.items() if side is not None and side.color != "transparent"]
    if len(coloured) != 1:
        return None
    solid_name = coloured[0]
    solid = sides[solid_name]
    if solid_name in ("top", "bottom"):
        left, right = borders.left, borders.right
        if left is None or right is None or solid.width <= 0:
            return None
        direction = "up" if solid_name == "bottom" else "down"
        return direction, solid.color, left.width + right.width, solid.width
    top, bottom = borders.top, borders.bottom
    if top is None or bottom is None or solid.width <= 0:
        return None
    direction = "left" if solid_name == "right" else "right"
    return direction, solid.color, solid.width, top.width + bottom.width
