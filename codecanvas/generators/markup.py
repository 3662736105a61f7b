"""Markup (XML) generator."""

from __future__ import annotations

from typing import List
from xml.sax.saxutils import escape

from ..codec import format_number
from ..constants import EMPTY_SCENE_PLACEHOLDERS
from ..types import Dialect, Group, SceneSnapshot, Shape, ShapeType, Text

_ATTR_ENTITIES = {'"': "&quot;"}


def _attr(name: str, value) -> str:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = format_number(value)
    return f'{name}="{escape(str(value), _ATTR_ENTITIES)}"'


def markup_border_radius(shape: Shape) -> str:
    if shape.shape_type in (ShapeType.CIRCLE, ShapeType.ELLIPSE):
        return "50%"
    if shape.border_radius is not None:
        return format_number(shape.border_radius)
    if shape.shape_type == ShapeType.ROUNDED_RECTANGLE:
        return "10"
    return "0"


def _shape_style(shape: Shape) -> str:
    attrs = [
        _attr("color", shape.color),
        _attr("zIndex", shape.z_index),
        _attr("borderRadius", markup_border_radius(shape)),
    ]
    if shape.shadow is not None:
        attrs.extend([
            _attr("shadowType", shape.shadow.kind.value),
            _attr("shadowColor", shape.shadow.color),
            _attr("shadowBlur", shape.shadow.blur_radius),
            _attr("shadowOffsetX", shape.shadow.offset_x),
            _attr("shadowOffsetY", shape.shadow.offset_y),
        ])
    if shape.opacity is not None:
        attrs.append(_attr("opacity", shape.opacity))
    if shape.glow is not None and shape.glow.enabled:
        attrs.append(_attr("glowEnabled", "true"))
        if shape.glow.color:
            attrs.append(_attr("glowColor", shape.glow.color))
        attrs.append(_attr("glowBlur", shape.glow.blur_radius))
    if shape.stroke is not None:
        attrs.extend([
            _attr("strokeColor", shape.stroke.color),
            _attr("strokeWidth", shape.stroke.width),
        ])
    if shape.image_data:
        attrs.append(_attr("imageData", shape.image_data))
    if shape.locked:
        attrs.append(_attr("locked", "true"))
    return " ".join(attrs)


def _shape_lines(shape: Shape) -> List[str]:
    return [
        f"  <shape {_attr('id', shape.id)} {_attr('type', shape.shape_type.value)}>",
        f"    <position {_attr('x', shape.x)} {_attr('y', shape.y)} />",
        f"    <size {_attr('width', shape.width)} {_attr('height', shape.height)} />",
        f"    <style {_shape_style(shape)} />",
        "  </shape>",
    ]


def _text_lines(text: Text) -> List[str]:
    style = [
        _attr("fontSize", text.font_size),
        _attr("color", text.color),
        _attr("fontFamily", text.font_family),
        _attr("fontWeight", text.font_weight),
        _attr("fontStyle", text.font_style),
        _attr("textAlign", text.text_align),
        _attr("zIndex", text.z_index),
    ]
    if text.locked:
        style.append(_attr("locked", "true"))
    return [
        f"  <text {_attr('id', text.id)}>",
        f"    <position {_attr('x', text.x)} {_attr('y', text.y)} />",
        f"    <size {_attr('width', text.width)} {_attr('height', text.height)} />",
        f"    <content>{escape(text.text)}</content>",
        f"    <style {' '.join(style)} />",
        "  </text>",
    ]


def _group_line(group: Group) -> str:
    attrs = [
        _attr("id", group.id),
        _attr("zIndex", group.z_index),
        _attr("shapes", " ".join(str(i) for i in sorted(group.shape_ids))),
        _attr("texts", " ".join(str(i) for i in sorted(group.text_ids))),
    ]
    if group.name:
        attrs.append(_attr("name", group.name))
    return f"  <group {' '.join(attrs)} />"


def generate_markup(snapshot: SceneSnapshot) -> str:
    if snapshot.is_empty:
        return EMPTY_SCENE_PLACEHOLDERS[Dialect.MARKUP]
    lines = ["<root>"]
    for shape in snapshot.shapes:
        lines.extend(_shape_lines(shape))
    for text in snapshot.texts:
        lines.extend(_text_lines(text))
    for group in snapshot.groups:
        lines.append(_group_line(group))
    lines.append("</root>")
    return "\n".join(lines)
