"""Markup (XML) parser."""

from __future__ import annotations

from typing import Optional
from xml.etree import ElementTree as ET

from ..codec import ParseError, parse_float, parse_int
from ..constants import (
    DEFAULT_FONT_FAMILY,
    DEFAULT_FONT_SIZE,
    DEFAULT_GLOW_BLUR,
    DEFAULT_SHADOW_BLUR,
    DEFAULT_SHADOW_COLOR,
    DEFAULT_SHADOW_OFFSET,
    DEFAULT_SHAPE_COLOR,
    DEFAULT_STROKE_COLOR,
    DEFAULT_TEXT_COLOR,
    FONT_STYLES,
    FONT_WEIGHTS,
    TEXT_ALIGNS,
)
from ..types import Glow, Group, ParsedScene, Shadow, ShadowKind, Shape, ShapeType, Stroke, Text


def _child(element: ET.Element, tag: str) -> ET.Element:
    child = element.find(tag)
    if child is None:
        raise ParseError(f"<{element.tag}> is missing <{tag}>")
    return child


def _required(element: ET.Element, name: str) -> str:
    value = element.get(name)
    if value is None:
        raise ParseError(f"<{element.tag}> is missing {name!r}")
    return value


def _geometry(element: ET.Element):
    position = _child(element, "position")
    size = _child(element, "size")
    return (
        parse_int(_required(position, "x")),
        parse_int(_required(position, "y")),
        parse_int(_required(size, "width")),
        parse_int(_required(size, "height")),
    )


def _border_radius(shape_type: ShapeType, value: Optional[str]) -> Optional[int]:
    if value is None or value == "50%":
        return None
    radius = parse_int(value)
    if shape_type == ShapeType.ROUNDED_RECTANGLE:
        return radius
    if shape_type == ShapeType.RECTANGLE and radius != 0:
        return radius
    return None


def _shadow(style: ET.Element) -> Optional[Shadow]:
    kind_name = style.get("shadowType")
    if kind_name is None:
        return None
    try:
        kind = ShadowKind(kind_name)
    except ValueError:
        raise ParseError(f"invalid shadowType {kind_name!r}") from None
    if kind == ShadowKind.NONE:
        return None
    return Shadow(
        kind=kind,
        color=style.get("shadowColor", DEFAULT_SHADOW_COLOR),
        blur_radius=parse_int(style.get("shadowBlur", str(DEFAULT_SHADOW_BLUR))),
        offset_x=parse_int(style.get("shadowOffsetX", str(DEFAULT_SHADOW_OFFSET))),
        offset_y=parse_int(style.get("shadowOffsetY", str(DEFAULT_SHADOW_OFFSET))),
    )


def _flag(element: ET.Element, name: str) -> bool:
    value = element.get(name, "false")
    if value not in ("true", "false"):
        raise ParseError(f"invalid {name} {value!r}")
    return value == "true"


def _parse_shape(element: ET.Element) -> Shape:
    shape_id = parse_int(_required(element, "id"))
    type_name = _required(element, "type")
    shape_type = ShapeType.from_name(type_name)
    if shape_type is None:
        raise ParseError(f"unknown shape type {type_name!r}")
    x, y, width, height = _geometry(element)
    style = element.find("style")
    if style is None:
        style = ET.Element("style")

    shape = Shape(
        id=shape_id,
        shape_type=shape_type,
        x=x,
        y=y,
        width=width,
        height=height,
        color=style.get("color", DEFAULT_SHAPE_COLOR),
        z_index=parse_int(style.get("zIndex", "0")),
        border_radius=_border_radius(shape_type, style.get("borderRadius")),
        shadow=_shadow(style),
        image_data=style.get("imageData", ""),
        locked=_flag(style, "locked"),
    )
    if style.get("opacity") is not None:
        opacity = parse_float(style.get("opacity"))
        if not 0.0 <= opacity <= 1.0:
            raise ParseError(f"opacity {opacity} outside [0, 1]")
        shape.opacity = opacity
    if _flag(style, "glowEnabled"):
        shape.glow = Glow(
            enabled=True,
            color=style.get("glowColor") or None,
            blur_radius=parse_int(style.get("glowBlur", str(DEFAULT_GLOW_BLUR))),
        )
    if style.get("strokeColor") is not None or style.get("strokeWidth") is not None:
        shape.stroke = Stroke(
            color=style.get("strokeColor", DEFAULT_STROKE_COLOR),
            width=parse_int(style.get("strokeWidth", "1")),
        )
    return shape


def _choice(style: ET.Element, name: str, allowed) -> str:
    value = style.get(name, allowed[0])
    if value not in allowed:
        raise ParseError(f"invalid {name} {value!r}")
    return value


def _parse_text(element: ET.Element) -> Text:
    x, y, width, height = _geometry(element)
    style = element.find("style")
    if style is None:
        style = ET.Element("style")
    return Text(
        id=parse_int(_required(element, "id")),
        x=x,
        y=y,
        width=width,
        height=height,
        text=element.findtext("content", default=""),
        font_size=parse_int(style.get("fontSize", str(DEFAULT_FONT_SIZE))),
        color=style.get("color", DEFAULT_TEXT_COLOR),
        font_family=style.get("fontFamily", DEFAULT_FONT_FAMILY),
        font_weight=_choice(style, "fontWeight", FONT_WEIGHTS),
        font_style=_choice(style, "fontStyle", FONT_STYLES),
        text_align=_choice(style, "textAlign", TEXT_ALIGNS),
        z_index=parse_int(style.get("zIndex", "0")),
        locked=_flag(style, "locked"),
    )


def _id_set(value: str):
    return {parse_int(part) for part in value.split()}


def _parse_group(element: ET.Element) -> Group:
    return Group(
        id=parse_int(_required(element, "id")),
        shape_ids=_id_set(element.get("shapes", "")),
        text_ids=_id_set(element.get("texts", "")),
        z_index=parse_int(element.get("zIndex", "0")),
        name=element.get("name", ""),
    )


def parse_markup(text: str) -> ParsedScene:
    try:
        root = ET.fromstring(text)
    except ET.ParseError as exc:
        raise ParseError(f"malformed XML: {exc}") from exc
    if root.tag != "root":
        raise ParseError(f"expected <root>, found <{root.tag}>")

    scene = ParsedScene()
    for element in root:
        if element.tag == "shape":
            scene.shapes.append(_parse_shape(element))
        elif element.tag == "text":
            scene.texts.append(_parse_text(element))
        elif element.tag == "group":
            scene.groups.append(_parse_group(element))
    return scene
