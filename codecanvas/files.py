"""Whole-file access for source files bound to the editor."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PySide6.QtCore import QObject, Signal, Slot

from .constants import DIALECT_EXTENSIONS
from .types import Dialect

logger = logging.getLogger(__name__)


def dialect_for_path(path: str) -> Optional[Dialect]:
    """Return the dialect implied by a file extension, if any."""
    return DIALECT_EXTENSIONS.get(Path(path).suffix.lower())


class SourceFiles(QObject):
    """Reads and writes source files; failures are reported, never raised."""

    errorOccurred = Signal(str)

    def read_text(self, path: str) -> Optional[str]:
        """Return the file contents, or None when it cannot be read."""
        try:
            return Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            message = f"Could not read {path}: {exc}"
            logger.warning(message)
            self.errorOccurred.emit(message)
            return None

    def write_text(self, path: str, text: str) -> bool:
        try:
            Path(path).write_text(text, encoding="utf-8")
        except OSError as exc:
            message = f"Could not write {path}: {exc}"
            logger.warning(message)
            self.errorOccurred.emit(message)
            return False
        return True

    @Slot(str, result=str)
    def readText(self, path: str) -> str:
        text = self.read_text(path)
        return text if text is not None else ""

    @Slot(str, str, result=bool)
    def writeText(self, path: str, text: str) -> bool:
        return self.write_text(path, text)

    @Slot(str, result=str)
    def dialectFor(self, path: str) -> str:
        dialect = dialect_for_path(path)
        return dialect.value if dialect else ""
