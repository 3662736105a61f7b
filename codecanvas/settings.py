"""Persistent editor settings backed by QSettings.

Environment variables override stored values for the current process:
CODECANVAS_CANVAS_SIZE (``WIDTHxHEIGHT``) and CODECANVAS_DEBOUNCE_MS
(applied to both debounce delays).
"""

from __future__ import annotations

import logging
import os
from typing import List, Mapping, Optional, Tuple

from PySide6.QtCore import Property, QObject, QSettings, Signal, Slot

from .constants import DEFAULT_CANVAS_HEIGHT, DEFAULT_CANVAS_WIDTH
from .types import Dialect

logger = logging.getLogger(__name__)

DEFAULT_REGENERATE_DELAY_MS = 150
DEFAULT_PARSE_DELAY_MS = 300


def _parse_canvas_size(value: str) -> Optional[Tuple[int, int]]:
    width, sep, height = value.lower().partition("x")
    try:
        size = int(width), int(height)
    except ValueError:
        return None
    if not sep or size[0] <= 0 or size[1] <= 0:
        return None
    return size


class EditorSettings(QObject):
    """Canvas size, debounce delays, default dialect and recent files."""

    MAX_RECENT_FILES = 8

    settingsChanged = Signal()
    recentFilesChanged = Signal()

    def __init__(
        self,
        settings: Optional[QSettings] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        super().__init__()
        self._settings = settings if settings is not None else QSettings("CodeCanvas", "CodeCanvas")
        self._environ = os.environ if environ is None else environ
        self._recent_files: List[str] = self._load_recent_files()

    def _int_value(self, key: str, default: int) -> int:
        stored = self._settings.value(key, default)
        try:
            return int(stored)
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid %s setting: %r", key, stored)
            return default

    def _env_debounce(self) -> Optional[int]:
        raw = self._environ.get("CODECANVAS_DEBOUNCE_MS")
        if raw is None:
            return None
        try:
            return max(0, int(raw))
        except ValueError:
            logger.warning("Ignoring invalid CODECANVAS_DEBOUNCE_MS: %r", raw)
            return None

    @property
    def canvas_size(self) -> Tuple[int, int]:
        raw = self._environ.get("CODECANVAS_CANVAS_SIZE")
        if raw:
            size = _parse_canvas_size(raw)
            if size is not None:
                return size
            logger.warning("Ignoring invalid CODECANVAS_CANVAS_SIZE: %r", raw)
        return (
            self._int_value("canvas/width", DEFAULT_CANVAS_WIDTH),
            self._int_value("canvas/height", DEFAULT_CANVAS_HEIGHT),
        )

    @Property(int, notify=settingsChanged)
    def canvasWidth(self) -> int:
        return self.canvas_size[0]

    @Property(int, notify=settingsChanged)
    def canvasHeight(self) -> int:
        return self.canvas_size[1]

    @Slot(int, int)
    def setCanvasSize(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            return
        self._settings.setValue("canvas/width", int(width))
        self._settings.setValue("canvas/height", int(height))
        self.settingsChanged.emit()

    @Property(int, notify=settingsChanged)
    def regenerateDelayMs(self) -> int:
        override = self._env_debounce()
        if override is not None:
            return override
        return self._int_value("sync/regenerateDelayMs", DEFAULT_REGENERATE_DELAY_MS)

    @Property(int, notify=settingsChanged)
    def parseDelayMs(self) -> int:
        override = self._env_debounce()
        if override is not None:
            return override
        return self._int_value("sync/parseDelayMs", DEFAULT_PARSE_DELAY_MS)

    @Slot(int, int)
    def setDebounceDelays(self, regenerate_ms: int, parse_ms: int) -> None:
        self._settings.setValue("sync/regenerateDelayMs", max(0, int(regenerate_ms)))
        self._settings.setValue("sync/parseDelayMs", max(0, int(parse_ms)))
        self.settingsChanged.emit()

    @property
    def default_dialect(self) -> Dialect:
        stored = self._settings.value("sync/defaultDialect", Dialect.MARKUP.value)
        try:
            return Dialect(stored)
        except ValueError:
            logger.warning("Ignoring invalid default dialect setting: %r", stored)
            return Dialect.MARKUP

    @Property(str, notify=settingsChanged)
    def defaultDialect(self) -> str:
        return self.default_dialect.value

    @Slot(str)
    def setDefaultDialect(self, name: str) -> None:
        try:
            dialect = Dialect(name)
        except ValueError:
            return
        self._settings.setValue("sync/defaultDialect", dialect.value)
        self.settingsChanged.emit()

    # --- Recent files -------------------------------------------------------
    def _load_recent_files(self) -> List[str]:
        stored = self._settings.value("recentFiles", [])
        # QSettings may return a string if only one item, or None
        if stored is None:
            return []
        if isinstance(stored, str):
            stored = [stored] if stored else []
        if isinstance(stored, list):
            return [path for path in stored if path and os.path.exists(path)][:self.MAX_RECENT_FILES]
        return []

    @Slot(str)
    def addRecentFile(self, path: str) -> None:
        if not path or not os.path.exists(path):
            return
        if path in self._recent_files:
            self._recent_files.remove(path)
        self._recent_files.insert(0, path)
        self._recent_files = self._recent_files[:self.MAX_RECENT_FILES]
        self._settings.setValue("recentFiles", self._recent_files)
        self.recentFilesChanged.emit()

    @Property("QVariantList", notify=recentFilesChanged)
    def recentFiles(self) -> List[str]:
        return list(self._recent_files)

    @Slot()
    def clearRecentFiles(self) -> None:
        if not self._recent_files:
            return
        self._recent_files = []
        self._settings.setValue("recentFiles", [])
        self.recentFilesChanged.emit()
