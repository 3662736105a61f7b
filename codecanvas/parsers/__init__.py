"""Source code to scene parsers, one per dialect.

``parse`` never raises on bad input: malformed text is logged at debug
level and reported as ``None`` so callers can keep the previous scene.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional

from ..codec import ParseError
from ..constants import EMPTY_SCENE_PLACEHOLDERS
from ..types import Dialect, Group, ParsedScene, SceneSnapshot
from .component import parse_component
from .markup import parse_markup
from .stylesheet import parse_stylesheet

logger = logging.getLogger(__name__)

PARSERS: Dict[Dialect, Callable[[str], ParsedScene]] = {
    Dialect.MARKUP: parse_markup,
    Dialect.STYLESHEET: parse_stylesheet,
    Dialect.COMPONENT: parse_component,
}


def _check_unique_ids(scene: ParsedScene) -> None:
    seen = set()
    for entity in list(scene.shapes) + list(scene.texts) + list(scene.groups):
        if entity.id in seen:
            raise ParseError(f"duplicate id {entity.id}")
        seen.add(entity.id)


def parse(dialect: Dialect, text: str) -> Optional[ParsedScene]:
    """Parse ``text`` in ``dialect``; return None when it is malformed."""
    stripped = text.strip()
    if not stripped or stripped == EMPTY_SCENE_PLACEHOLDERS[dialect]:
        return ParsedScene()
    try:
        scene = PARSERS[dialect](text)
        _check_unique_ids(scene)
    except ParseError as exc:
        logger.debug("Rejected %s source: %s", dialect.value, exc)
        return None
    return scene


def carry_over(dialect: Dialect, parsed: ParsedScene, current: SceneSnapshot) -> ParsedScene:
    """Copy fields ``dialect`` cannot express from the current scene by id."""
    if dialect == Dialect.MARKUP:
        return parsed
    shapes = {shape.id: shape for shape in current.shapes}
    texts = {text.id: text for text in current.texts}
    for shape in parsed.shapes:
        previous = shapes.get(shape.id)
        if previous is not None:
            shape.locked = previous.locked
    for text in parsed.texts:
        previous = texts.get(text.id)
        if previous is None:
            continue
        text.locked = previous.locked
        if dialect == Dialect.STYLESHEET:
            text.text = previous.text
    shape_ids = {shape.id for shape in parsed.shapes}
    text_ids = {text.id for text in parsed.texts}
    for group in current.groups:
        members_shapes = group.shape_ids & shape_ids
        members_texts = group.text_ids & text_ids
        if len(members_shapes) + len(members_texts) >= 2:
            parsed.groups.append(Group(
                id=group.id,
                shape_ids=set(members_shapes),
                text_ids=set(members_texts),
                z_index=group.z_index,
                name=group.name,
            ))
    return parsed


__all__ = [
    "PARSERS",
    "ParseError",
    "carry_over",
    "parse",
    "parse_component",
    "parse_markup",
    "parse_stylesheet",
]
