"""Stylesheet (CSS) generator."""

from __future__ import annotations

from typing import List

from ..constants import EMPTY_SCENE_PLACEHOLDERS
from ..types import Dialect, SceneSnapshot
from .declarations import Declaration, shape_declarations, text_declarations


def _rule(selector: str, declarations: List[Declaration]) -> str:
    body = "\n".join(f"  {name}: {value};" for name, value in declarations)
    return f"{selector} {{\n{body}\n}}"


def generate_stylesheet(snapshot: SceneSnapshot) -> str:
    if snapshot.is_empty:
        return EMPTY_SCENE_PLACEHOLDERS[Dialect.STYLESHEET]
    rules = [_rule(f".shape-{shape.id}", shape_declarations(shape)) for shape in snapshot.shapes]
    rules.extend(_rule(f".text-{text.id}", text_declarations(text)) for text in snapshot.texts)
    return "\n\n".join(rules)
