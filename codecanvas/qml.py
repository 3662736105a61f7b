"""QML UI definition for CodeCanvas."""

from __future__ import annotations

from pathlib import Path

QML_DIR = Path(__file__).with_name("qml_ui")
CODECANVAS_QML_PATH = QML_DIR / "CodeCanvasWindow.qml"


def load_codecanvas_qml() -> str:
    """Return the CodeCanvas window QML source as a string."""
    return CODECANVAS_QML_PATH.read_text(encoding="utf-8")


__all__ = [
    "CODECANVAS_QML_PATH",
    "QML_DIR",
    "load_codecanvas_qml",
]
