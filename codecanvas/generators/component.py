"""Component source (React/JSX) generator."""

from __future__ import annotations

import json
import re
from typing import List

from ..codec import format_number, format_svg_points
from ..constants import EMPTY_SCENE_PLACEHOLDERS
from ..style import polygon_points, resolve_shape
from ..types import Dialect, SceneSnapshot, Shape, ShapeType, Text
from .declarations import Declaration, shape_declarations, text_declarations

LENGTH_KEYS = frozenset({"left", "top", "width", "height", "font-size", "border-radius"})
NUMERIC_KEYS = frozenset({"z-index", "opacity"})
SVG_STYLE_KEYS = ("position", "left", "top", "z-index", "opacity", "filter")

_LENGTH_RE = re.compile(r"^(-?\d+(?:\.\d+)?)(?:px)?$")

HEADER = "import React from 'react';\n\nfunction Shapes() {\n  return (\n    <>"
FOOTER = "    </>\n  );\n}\n\nexport default Shapes;"


def camel_case(name: str) -> str:
    head, *rest = name.split("-")
    return head + "".join(part.capitalize() for part in rest)


def js_string(value: str) -> str:
    return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"


def _js_value(name: str, value: str) -> str:
    if name in LENGTH_KEYS:
        match = _LENGTH_RE.match(value)
        if match:
            return match.group(1)
    if name in NUMERIC_KEYS:
        return value
    return js_string(value)


def _style_lines(declarations: List[Declaration]) -> List[str]:
    lines = ["        style={{"]
    lines.extend(
        f"          {camel_case(name)}: {_js_value(name, value)},"
        for name, value in declarations
    )
    lines.append("        }}")
    return lines


def _shape_element(shape: Shape) -> List[str]:
    if shape.shape_type == ShapeType.TRIANGLE:
        return _triangle_element(shape)
    lines = ["      <div", f'        className="shape-{shape.id}"']
    lines.extend(_style_lines(shape_declarations(shape)))
    lines.append("      />")
    return lines


def _triangle_element(shape: Shape) -> List[str]:
    declarations = [
        (name, value) for name, value in shape_declarations(shape) if name in SVG_STYLE_KEYS
    ]
    polygon = (
        f'<polygon points="{format_svg_points(polygon_points(shape))}" '
        f'fill="{shape.color}"'
    )
    outline = resolve_shape(shape).outline
    if outline is not None:
        polygon += f' stroke="{outline.color}" strokeWidth={{{format_number(outline.width)}}}'
    lines = [
        "      <svg",
        f'        className="shape-{shape.id}"',
        f"        width={{{format_number(shape.width)}}}",
        f"        height={{{format_number(shape.height)}}}",
    ]
    lines.extend(_style_lines(declarations))
    lines.extend([
        "      >",
        f"        {polygon} />",
        "      </svg>",
    ])
    return lines


def _text_element(text: Text) -> List[str]:
    lines = ["      <div", f'        className="text-{text.id}"']
    lines.extend(_style_lines(text_declarations(text)))
    lines.extend([
        "      >",
        f"        {{{json.dumps(text.text)}}}",
        "      </div>",
    ])
    return lines


def generate_component(snapshot: SceneSnapshot) -> str:
    if snapshot.is_empty:
        return EMPTY_SCENE_PLACEHOLDERS[Dialect.COMPONENT]
    lines = [HEADER]
    for shape in snapshot.shapes:
        lines.extend(_shape_element(shape))
    for text in snapshot.texts:
        lines.extend(_text_element(text))
    lines.append(FOOTER)
    return "\n".join(lines)
