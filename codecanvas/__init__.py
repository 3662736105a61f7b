"""CodeCanvas visual editor built with PySide6 and QML.

Shapes and texts drawn on the canvas are kept in step with source code in
one of three dialects (markup, stylesheet or component), and code typed
by the user is parsed back into the canvas.
"""

from .constants import CLIPBOARD_MIME_TYPE
from .files import SourceFiles, dialect_for_path
from .generators import generate
from .interaction import InteractionController
from .model import SceneModel
from .parsers import ParseError, parse
from .settings import EditorSettings
from .sync import SyncController
from .types import (
    Dialect,
    Glow,
    Group,
    ParsedScene,
    SceneSnapshot,
    Shadow,
    ShadowKind,
    Shape,
    ShapeType,
    Stroke,
    Text,
)
from .ui import create_codecanvas_window, main

__all__ = [
    "CLIPBOARD_MIME_TYPE",
    "Dialect",
    "EditorSettings",
    "Glow",
    "Group",
    "InteractionController",
    "ParseError",
    "ParsedScene",
    "SceneModel",
    "SceneSnapshot",
    "Shadow",
    "ShadowKind",
    "Shape",
    "ShapeType",
    "SourceFiles",
    "Stroke",
    "SyncController",
    "Text",
    "create_codecanvas_window",
    "dialect_for_path",
    "generate",
    "main",
    "parse",
]
