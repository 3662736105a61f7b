"""Clipboard operations mixin for SceneModel.

Copied entities travel as markup wrapped in a small JSON envelope under a
private MIME type; the plain-text flavour carries the bare markup so it
can be pasted into a code editor as well.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, List, Optional, Set

from PySide6.QtCore import QByteArray, QMimeData, Signal, Slot
from PySide6.QtGui import QGuiApplication

from .constants import CLIPBOARD_MIME_TYPE, PASTE_OFFSET
from .generators import generate_markup
from .parsers import parse
from .types import Dialect, ParsedScene, SceneSnapshot, Shape, Text

logger = logging.getLogger(__name__)

CLIPBOARD_FORMAT = "codecanvas-scene"


class ClipboardMixin:
    """Mixin providing clipboard operations."""

    # Signals (will be defined in SceneModel)
    shapesChanged: Signal
    sceneChanged: Signal

    # Attributes expected from SceneModel
    _shapes: List[Shape]
    _texts: List[Text]
    _selected_shape_ids: Set[int]
    _selected_text_ids: Set[int]
    getShape: Callable[[int], Optional[Shape]]
    getText: Callable[[int], Optional[Text]]
    add_shape: Callable[..., Shape]
    add_text: Callable[..., Text]
    select_many: Callable[..., None]

    def _init_clipboard(self) -> None:
        self._paste_offset = 0

    def _write_clipboard_payload(self, payload: Dict[str, Any], text: str) -> bool:
        clipboard = QGuiApplication.clipboard()
        if clipboard is None:
            return False
        payload_text = json.dumps(payload)
        mime_data = QMimeData()
        mime_data.setData(CLIPBOARD_MIME_TYPE, QByteArray(payload_text.encode("utf-8")))
        mime_data.setText(text)
        clipboard.setMimeData(mime_data)
        return True

    def _read_clipboard_markup(self) -> Optional[str]:
        clipboard = QGuiApplication.clipboard()
        if clipboard is None:
            return None
        mime_data = clipboard.mimeData()
        if mime_data is None:
            return None
        if mime_data.hasFormat(CLIPBOARD_MIME_TYPE):
            raw = mime_data.data(CLIPBOARD_MIME_TYPE)
            try:
                payload = json.loads(bytes(raw).decode("utf-8"))
            except (UnicodeDecodeError, json.JSONDecodeError):
                logger.debug("Ignoring unreadable clipboard payload")
                return None
            if not isinstance(payload, dict) or payload.get("format") != CLIPBOARD_FORMAT:
                return None
            markup = payload.get("markup")
            return markup if isinstance(markup, str) else None
        if mime_data.hasText():
            return mime_data.text()
        return None

    @Slot(result=bool)
    def copySelection(self) -> bool:
        shapes = [self.getShape(i) for i in sorted(self._selected_shape_ids)]
        texts = [self.getText(i) for i in sorted(self._selected_text_ids)]
        snapshot = SceneSnapshot(
            shapes=tuple(shape for shape in shapes if shape is not None),
            texts=tuple(text for text in texts if text is not None),
        )
        if snapshot.is_empty:
            return False
        markup = generate_markup(snapshot)
        payload = {"format": CLIPBOARD_FORMAT, "version": 1, "markup": markup}
        if not self._write_clipboard_payload(payload, markup):
            return False
        self._paste_offset = 0
        return True

    def paste_scene(self, scene: ParsedScene) -> bool:
        """Insert copies of ``scene`` offset from the previous paste."""
        if not scene.shapes and not scene.texts:
            return False
        self._paste_offset += PASTE_OFFSET
        offset = self._paste_offset
        new_shapes = []
        for shape in sorted(scene.shapes, key=lambda entity: entity.z_index):
            new_shapes.append(self.add_shape(
                shape.shape_type,
                shape.x + offset,
                shape.y + offset,
                shape.width,
                shape.height,
                color=shape.color,
                border_radius=shape.border_radius,
                opacity=shape.opacity,
                shadow=shape.shadow,
                glow=shape.glow,
                stroke=shape.stroke,
                image_data=shape.image_data,
            ).id)
        new_texts = []
        for text in sorted(scene.texts, key=lambda entity: entity.z_index):
            new_texts.append(self.add_text(
                text.x + offset,
                text.y + offset,
                text.text,
                text.width,
                text.height,
                font_size=text.font_size,
                color=text.color,
                font_family=text.font_family,
                font_weight=text.font_weight,
                font_style=text.font_style,
                text_align=text.text_align,
            ).id)
        self.select_many(new_shapes, new_texts)
        return True

    @Slot(result=bool)
    def pasteFromClipboard(self) -> bool:
        markup = self._read_clipboard_markup()
        if not markup:
            return False
        scene = parse(Dialect.MARKUP, markup)
        if scene is None:
            return False
        return self.paste_scene(scene)
