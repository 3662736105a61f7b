"""Scene to source code generators, one per dialect."""

from __future__ import annotations

from typing import Callable, Dict

from ..types import Dialect, SceneSnapshot
from .component import generate_component
from .markup import generate_markup
from .stylesheet import generate_stylesheet

GENERATORS: Dict[Dialect, Callable[[SceneSnapshot], str]] = {
    Dialect.MARKUP: generate_markup,
    Dialect.STYLESHEET: generate_stylesheet,
    Dialect.COMPONENT: generate_component,
}


def generate(dialect: Dialect, snapshot: SceneSnapshot) -> str:
    """Render ``snapshot`` as source text in ``dialect``."""
    return GENERATORS[dialect](snapshot)


__all__ = [
    "GENERATORS",
    "generate",
    "generate_component",
    "generate_markup",
    "generate_stylesheet",
]
