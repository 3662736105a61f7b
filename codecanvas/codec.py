"""Field-level codecs shared by the code generators and parsers.

Every value that appears in more than one dialect (numbers, shadow
layers, drop-shadow filters, clip polygons) is formatted and read back
here, so a generator and its parser can never disagree about a field.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Sequence, Tuple

from .constants import POLYGON_POINTS
from .types import Glow, Shadow, ShadowKind, ShapeType


class ParseError(ValueError):
    """Raised when dialect text does not match the expected grammar."""


_LAYER_RE = re.compile(
    r"^(inset\s+)?(-?\d+)(px)?\s+(-?\d+)(px)?\s+(\d+)px\s+(.+)$"
)


def format_number(value: float) -> str:
    """Format a number the same way everywhere.

    Integers carry no trailing '.0' and floats are always written in
    fixed-point form.
    """
    if isinstance(value, bool):
        raise TypeError("booleans are not numbers here")
    if isinstance(value, int):
        return str(value)
    value = float(value)
    if value.is_integer():
        return str(int(value))
    text = repr(value)
    if "e" in text:
        text = format(value, ".10f").rstrip("0").rstrip(".")
        if text in ("", "-0"):
            text = "0"
    return text


def parse_int(text: str) -> int:
    try:
        return int(str(text).strip())
    except ValueError as exc:
        raise ParseError(f"expected an integer, got {text!r}") from exc


def parse_float(text: str) -> float:
    try:
        return float(str(text).strip())
    except ValueError as exc:
        raise ParseError(f"expected a number, got {text!r}") from exc


def parse_px(text: str) -> int:
    """Read an integer pixel length such as '12px' or '12'."""
    value = str(text).strip()
    if value.endswith("px"):
        value = value[:-2]
    return parse_int(value)


def split_top_level(value: str, separator: str = ",") -> List[str]:
    """Split on a separator that is not nested in parentheses or quotes.

    ``separator`` may be " " to split on whitespace runs.
    """
    parts: List[str] = []
    depth = 0
    quote: Optional[str] = None
    current: List[str] = []
    for char in value:
        if quote:
            current.append(char)
            if char == quote:
                quote = None
            continue
        if char in ("'", '"'):
            quote = char
        elif char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                raise ParseError(f"unbalanced parentheses in {value!r}")
        is_separator = char.isspace() if separator == " " else char == separator
        if is_separator and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    if depth != 0 or quote:
        raise ParseError(f"unterminated group in {value!r}")
    parts.append("".join(current))
    return [part.strip() for part in parts if part.strip()]


# --- Shadow / glow layers -------------------------------------------------

def format_shadow_layer(shadow: Shadow) -> str:
    layer = (
        f"{format_number(shadow.offset_x)}px {format_number(shadow.offset_y)}px "
        f"{format_number(shadow.blur_radius)}px {shadow.color}"
    )
    if shadow.kind == ShadowKind.INNER:
        return f"inset {layer}"
    return layer


def format_glow_layer(blur_radius: int, color: str) -> str:
    return f"0 0 {format_number(blur_radius)}px {color}"


def format_drop_shadow(shadow: Shadow) -> str:
    return (
        f"drop-shadow({format_number(shadow.offset_x)}px {format_number(shadow.offset_y)}px "
        f"{format_number(shadow.blur_radius)}px {shadow.color})"
    )


def format_glow_filter(blur_radius: int, color: str) -> str:
    return f"drop-shadow(0 0 {format_number(blur_radius)}px {color})"


def _parse_layer(layer: str) -> Tuple[bool, int, int, int, str, bool]:
    """Return (inset, offset_x, offset_y, blur, color, is_glow).

    Glow layers are written with bare ``0 0`` offsets, shadow layers always
    with ``px``, so a zero-offset shadow stays a shadow.
    """
    match = _LAYER_RE.match(layer.strip())
    if not match:
        raise ParseError(f"unrecognized shadow layer {layer!r}")
    inset, offset_x, x_unit, offset_y, y_unit, blur, color = match.groups()
    offset_x, offset_y = int(offset_x), int(offset_y)
    is_glow = not inset and offset_x == 0 and offset_y == 0 and not x_unit and not y_unit
    return bool(inset), offset_x, offset_y, int(blur), color.strip(), is_glow


def _assign_layers(
    layers: Sequence[Tuple[bool, int, int, int, str, bool]],
) -> Tuple[Optional[Shadow], Optional[Glow]]:
    shadow: Optional[Shadow] = None
    glow: Optional[Glow] = None
    for index, (inset, offset_x, offset_y, blur, color, is_glow) in enumerate(layers):
        is_last = index == len(layers) - 1
        if is_glow and is_last and glow is None:
            glow = Glow(enabled=True, color=color, blur_radius=blur)
            continue
        if shadow is not None:
            raise ParseError("more than one shadow layer")
        shadow = Shadow(
            kind=ShadowKind.INNER if inset else ShadowKind.OUTER,
            color=color,
            blur_radius=blur,
            offset_x=offset_x,
            offset_y=offset_y,
        )
    return shadow, glow


def decode_box_shadows(value: str) -> Tuple[Optional[Shadow], Optional[Glow]]:
    """Read a box-shadow list back into a shadow and a glow.

    A trailing layer with bare ``0 0`` offsets is the glow; anything else
    is the shadow.
    """
    layers = [_parse_layer(layer) for layer in split_top_level(value, ",")]
    return _assign_layers(layers)


def decode_filters(value: str) -> Tuple[Optional[Shadow], Optional[Glow]]:
    """Read a drop-shadow filter chain back into a shadow and a glow."""
    layers = []
    for token in split_top_level(value, " "):
        if not token.startswith("drop-shadow(") or not token.endswith(")"):
            raise ParseError(f"unsupported filter {token!r}")
        inner = _parse_layer(token[len("drop-shadow("):-1])
        if inner[0]:
            raise ParseError("inset is not valid in drop-shadow")
        layers.append(inner)
    return _assign_layers(layers)


# --- Polygons -------------------------------------------------------------

def format_polygon(points: Iterable[Tuple[float, float]]) -> str:
    return "polygon(" + ", ".join(
        f"{format_number(px)}% {format_number(py)}%" for px, py in points
    ) + ")"


def polygon_type_for(value: str) -> Optional[ShapeType]:
    """Return the shape type whose clip polygon matches ``value``."""
    normalized = re.sub(r"\s+", " ", value.strip())
    for shape_type, points in POLYGON_POINTS.items():
        if format_polygon(points) == normalized:
            return shape_type
    return None


def format_svg_points(points: Iterable[Tuple[float, float]]) -> str:
    return " ".join(f"{format_number(px)},{format_number(py)}" for px, py in points)
