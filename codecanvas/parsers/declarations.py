"""Rebuild shapes and texts from CSS declarations.

The stylesheet and component parsers both reduce an entity to a
``{property: value}`` mapping in CSS spelling and hand it to the
functions here, which infer the shape type and effects.
"""

from __future__ import annotations

import re
from typing import Dict, Optional

from ..codec import (
    ParseError,
    decode_box_shadows,
    decode_filters,
    parse_float,
    parse_int,
    parse_px,
    polygon_type_for,
    split_top_level,
)
from ..constants import (
    DEFAULT_FONT_FAMILY,
    DEFAULT_SHAPE_COLOR,
    DEFAULT_TEXT_COLOR,
    FONT_STYLES,
    FONT_WEIGHTS,
    TEXT_ALIGNS,
)
from ..style import BorderSide, TriangleBorders, triangle_from_borders
from ..types import Shape, ShapeType, Stroke, Text

Declarations = Dict[str, str]


_BORDER_RE = re.compile(r"^(\d+(?:\.\d+)?)px\s+solid\s+(.+)$")
_URL_RE = re.compile(r"""^url\(\s*(["']?)(.*)\1\s*\)$""", re.DOTALL)


def parse_declaration_block(body: str) -> Declarations:
    declarations: Declarations = {}
    for item in split_top_level(body, ";"):
        name, sep, value = item.partition(":")
        name, value = name.strip().lower(), value.strip()
        if not sep or not name or not value:
            raise ParseError(f"malformed declaration {item!r}")
        declarations[name] = value
    return declarations


def _require(declarations: Declarations, name: str) -> str:
    try:
        return declarations[name]
    except KeyError:
        raise ParseError(f"missing required property {name!r}") from None


def _border_side(value: Optional[str]) -> Optional[BorderSide]:
    if value is None:
        return None
    match = _BORDER_RE.match(value)
    if not match:
        raise ParseError(f"unsupported border {value!r}")
    return BorderSide(float(match.group(1)), match.group(2).strip())


def _legacy_triangle(shape_id: int, declarations: Declarations, x: int, y: int, z_index: int) -> Shape:
    borders = TriangleBorders(
        top=_border_side(declarations.get("border-top")),
        right=_border_side(declarations.get("border-right")),
        bottom=_border_side(declarations.get("border-bottom")),
        left=_border_side(declarations.get("border-left")),
    )
    recovered = triangle_from_borders(borders)
    if recovered is None:
        raise ParseError(f"shape {shape_id} has a zero size and no triangle borders")
    _direction, fill, width, height = recovered
    return Shape(
        id=shape_id,
        shape_type=ShapeType.TRIANGLE,
        x=x,
        y=y,
        width=round(width),
        height=round(height),
        color=fill,
        z_index=z_index,
    )


def _infer_type(declarations: Declarations, width: int, height: int):
    """Return (shape_type, border_radius) implied by the declarations."""
    if "background-image" in declarations:
        return ShapeType.IMAGE, None
    if "clip-path" in declarations:
        shape_type = polygon_type_for(declarations["clip-path"])
        if shape_type is None:
            raise ParseError(f"unknown clip-path {declarations['clip-path']!r}")
        return shape_type, None
    if declarations.get("transform", "").startswith("skew("):
        return ShapeType.PARALLELOGRAM, None
    radius = declarations.get("border-radius")
    if radius is None:
        return ShapeType.RECTANGLE, None
    if radius == "50%":
        return (ShapeType.CIRCLE if width == height else ShapeType.ELLIPSE), None
    value = parse_px(radius)
    if value > 0:
        return ShapeType.ROUNDED_RECTANGLE, value
    return ShapeType.RECTANGLE, None


def shape_from_declarations(shape_id: int, declarations: Declarations) -> Shape:
    x = parse_px(_require(declarations, "left"))
    y = parse_px(_require(declarations, "top"))
    width = parse_px(_require(declarations, "width"))
    height = parse_px(_require(declarations, "height"))
    z_index = parse_int(declarations.get("z-index", "0"))

    if width == 0 and height == 0:
        return _legacy_triangle(shape_id, declarations, x, y, z_index)

    shape_type, border_radius = _infer_type(declarations, width, height)
    shape = Shape(
        id=shape_id,
        shape_type=shape_type,
        x=x,
        y=y,
        width=width,
        height=height,
        color=declarations.get("background-color", DEFAULT_SHAPE_COLOR),
        z_index=z_index,
        border_radius=border_radius,
    )
    if shape_type == ShapeType.IMAGE:
        match = _URL_RE.match(declarations["background-image"])
        if not match:
            raise ParseError("background-image must be a url()")
        shape.image_data = match.group(2)
    if "opacity" in declarations:
        opacity = parse_float(declarations["opacity"])
        if not 0.0 <= opacity <= 1.0:
            raise ParseError(f"opacity {opacity} outside [0, 1]")
        shape.opacity = opacity
    shadow = glow = None
    if "box-shadow" in declarations:
        shadow, glow = decode_box_shadows(declarations["box-shadow"])
    if "filter" in declarations:
        if shadow is not None or glow is not None:
            raise ParseError("both box-shadow and filter effects on one shape")
        shadow, glow = decode_filters(declarations["filter"])
    shape.shadow, shape.glow = shadow, glow
    if "border" in declarations:
        side = _border_side(declarations["border"])
        shape.stroke = Stroke(color=side.color, width=round(side.width))
    return shape


def _choice(declarations: Declarations, name: str, allowed) -> str:
    value = declarations.get(name, allowed[0])
    if value not in allowed:
        raise ParseError(f"invalid {name} {value!r}")
    return value


def text_from_declarations(text_id: int, declarations: Declarations, content: str = "") -> Text:
    return Text(
        id=text_id,
        x=parse_px(_require(declarations, "left")),
        y=parse_px(_require(declarations, "top")),
        width=parse_px(_require(declarations, "width")),
        height=parse_px(_require(declarations, "height")),
        text=content,
        font_size=parse_px(declarations.get("font-size", "16px")),
        color=declarations.get("color", DEFAULT_TEXT_COLOR),
        font_family=declarations.get("font-family", DEFAULT_FONT_FAMILY),
        font_weight=_choice(declarations, "font-weight", FONT_WEIGHTS),
        font_style=_choice(declarations, "font-style", FONT_STYLES),
        text_align=_choice(declarations, "text-align", TEXT_ALIGNS),
        z_index=parse_int(declarations.get("z-index", "0")),
    )
