"""Stylesheet (CSS) parser."""

from __future__ import annotations

import re

from ..codec import ParseError
from ..types import ParsedScene
from .declarations import parse_declaration_block, shape_from_declarations, text_from_declarations

_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)
_ENTITY_SELECTOR_RE = re.compile(r"^\.(shape|text)-(\d+)$")


def _strip_comments(text: str) -> str:
    if text.count("/*") != text.count("*/"):
        raise ParseError("unterminated comment")
    return _COMMENT_RE.sub("", text)


def iter_rules(text: str):
    """Yield (selector, body) for each top-level rule."""
    position = 0
    length = len(text)
    while position < length:
        open_brace = text.find("{", position)
        if open_brace == -1:
            if text[position:].strip():
                raise ParseError(f"trailing text {text[position:].strip()[:40]!r}")
            return
        close_brace = text.find("}", open_brace)
        if close_brace == -1:
            raise ParseError("unbalanced braces")
        selector = text[position:open_brace].strip()
        body = text[open_brace + 1:close_brace]
        if "{" in body:
            raise ParseError("nested blocks are not supported")
        if not selector or "}" in selector:
            raise ParseError("rule without a selector")
        yield selector, body
        position = close_brace + 1


def parse_stylesheet(text: str) -> ParsedScene:
    scene = ParsedScene()
    for selector, body in iter_rules(_strip_comments(text)):
        match = _ENTITY_SELECTOR_RE.match(selector)
        if not match:
            continue
        kind, entity_id = match.group(1), int(match.group(2))
        declarations = parse_declaration_block(body)
        if kind == "shape":
            scene.shapes.append(shape_from_declarations(entity_id, declarations))
        else:
            scene.texts.append(text_from_declarations(entity_id, declarations))
    return scene
