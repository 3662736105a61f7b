"""Component source (React/JSX) parser."""

from __future__ import annotations

import json
import re
from typing import Dict

from ..codec import ParseError, format_polygon, format_number, split_top_level
from ..constants import POLYGON_POINTS
from ..generators.component import LENGTH_KEYS
from ..types import ParsedScene, ShapeType
from .declarations import Declarations, shape_from_declarations, text_from_declarations

_WRAPPER_RE = re.compile(
    r"function\s+\w+\s*\(\s*\)\s*\{\s*return\s*\(\s*<>(?P<body>.*)</>\s*\)\s*;?\s*\}",
    re.DOTALL,
)
_STYLE = r"style=\{\{(?P<style>.*?)\}\}"
_SHAPE_RE = re.compile(
    r'<div\s+className="shape-(?P<id>\d+)"\s+' + _STYLE + r"\s*/>",
    re.DOTALL,
)
_TEXT_RE = re.compile(
    r'<div\s+className="text-(?P<id>\d+)"\s+' + _STYLE
    + r'\s*>\s*\{(?P<content>"(?:[^"\\]|\\.)*")\}\s*</div>',
    re.DOTALL,
)
_SVG_RE = re.compile(
    r'<svg\s+className="shape-(?P<id>\d+)"\s+width=\{(?P<width>\d+)\}\s+height=\{(?P<height>\d+)\}\s+'
    + _STYLE
    + r'\s*>\s*<polygon\s+points="[^"]*"\s+fill="(?P<fill>[^"]*)"'
    + r'(?:\s+stroke="(?P<stroke>[^"]*)"\s+strokeWidth=\{(?P<stroke_width>\d+)\})?\s*/>\s*</svg>',
    re.DOTALL,
)
_ENTITY_MARKER_RE = re.compile(r'className="(?:shape|text)-\d+"')
_STRING_RE = re.compile(r"^'((?:[^'\\]|\\.)*)'$", re.DOTALL)
_NUMBER_RE = re.compile(r"^-?\d+(?:\.\d+)?$")


def kebab_case(name: str) -> str:
    return re.sub(r"([A-Z])", lambda match: "-" + match.group(1).lower(), name)


def _js_literal(raw: str) -> str:
    raw = raw.strip()
    match = _STRING_RE.match(raw)
    if match:
        return re.sub(r"\\(.)", r"\1", match.group(1))
    if _NUMBER_RE.match(raw):
        return raw
    raise ParseError(f"unsupported style value {raw!r}")


def parse_style_object(body: str) -> Declarations:
    """Convert a JSX style object body into CSS declarations."""
    declarations: Dict[str, str] = {}
    for item in split_top_level(body, ","):
        key, sep, raw = item.partition(":")
        key = key.strip()
        if not sep or not re.match(r"^[A-Za-z]+$", key):
            raise ParseError(f"malformed style entry {item!r}")
        name = kebab_case(key)
        value = _js_literal(raw)
        if name in LENGTH_KEYS and _NUMBER_RE.match(value):
            value = f"{value}px"
        declarations[name] = value
    return declarations


def parse_component(text: str) -> ParsedScene:
    wrapper = _WRAPPER_RE.search(text)
    if wrapper is None:
        raise ParseError("no component function returning a fragment")
    body = wrapper.group("body")

    found = []
    for match in _SHAPE_RE.finditer(body):
        declarations = parse_style_object(match.group("style"))
        found.append((match.start(), "shape", shape_from_declarations(int(match.group("id")), declarations)))
    for match in _SVG_RE.finditer(body):
        declarations = parse_style_object(match.group("style"))
        declarations["width"] = f"{match.group('width')}px"
        declarations["height"] = f"{match.group('height')}px"
        declarations["background-color"] = match.group("fill")
        declarations["clip-path"] = format_polygon(POLYGON_POINTS[ShapeType.TRIANGLE])
        if match.group("stroke") is not None:
            declarations["border"] = (
                f"{format_number(int(match.group('stroke_width')))}px solid {match.group('stroke')}"
            )
        found.append((match.start(), "shape", shape_from_declarations(int(match.group("id")), declarations)))
    for match in _TEXT_RE.finditer(body):
        try:
            content = json.loads(match.group("content"))
        except json.JSONDecodeError as exc:
            raise ParseError(f"bad text literal: {exc}") from exc
        declarations = parse_style_object(match.group("style"))
        found.append((match.start(), "text", text_from_declarations(int(match.group("id")), declarations, content)))

    if len(found) != len(_ENTITY_MARKER_RE.findall(body)):
        raise ParseError("incomplete or malformed element")

    scene = ParsedScene()
    for _start, kind, entity in sorted(found, key=lambda entry: entry[0]):
        if kind == "shape":
            scene.shapes.append(entity)
        else:
            scene.texts.append(entity)
    return scene
