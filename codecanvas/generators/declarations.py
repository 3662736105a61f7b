"""CSS declaration lists shared by the stylesheet and component generators."""

from __future__ import annotations

from typing import List, Tuple

from ..codec import format_number
from ..style import resolve_shape, resolve_text
from ..types import Shape, Text

Declaration = Tuple[str, str]


def _px(value: float) -> str:
    return f"{format_number(value)}px"


def _box(entity) -> List[Declaration]:
    return [
        ("position", "absolute"),
        ("left", _px(entity.x)),
        ("top", _px(entity.y)),
        ("width", _px(entity.width)),
        ("height", _px(entity.height)),
        ("z-index", format_number(entity.z_index)),
    ]


def shape_declarations(shape: Shape) -> List[Declaration]:
    """Return the ordered declarations that paint ``shape``."""
    style = resolve_shape(shape)
    declarations = _box(shape)
    if style.background_image is not None:
        declarations.extend([
            ("background-image", f'url("{style.background_image}")'),
            ("background-size", "cover"),
            ("background-position", "center"),
            ("background-repeat", "no-repeat"),
        ])
    elif style.fill is not None:
        declarations.append(("background-color", style.fill))
    if style.opacity is not None:
        declarations.append(("opacity", format_number(style.opacity)))
    if style.border_radius is not None:
        declarations.append(("border-radius", style.border_radius))
    if style.transform is not None:
        declarations.append(("transform", style.transform))
    if style.clip_path is not None:
        declarations.append(("clip-path", style.clip_path))
    if style.box_shadows:
        declarations.append(("box-shadow", ", ".join(style.box_shadows)))
    if style.filters:
        declarations.append(("filter", " ".join(style.filters)))
    if style.outline is not None:
        declarations.append(
            ("border", f"{_px(style.outline.width)} solid {style.outline.color}")
        )
    return declarations


def text_declarations(text: Text) -> List[Declaration]:
    style = resolve_text(text)
    declarations = _box(text)
    declarations.extend([
        ("font-size", _px(style.font_size)),
        ("color", style.color),
        ("font-family", style.font_family),
        ("font-weight", style.font_weight),
        ("font-style", style.font_style),
        ("text-align", style.text_align),
    ])
    return declarations
