"""Keeps the source text of the active dialect and the scene in step.

Scene changes regenerate code after a debounce; typed code is parsed
after a debounce and replaces the scene. While the user is editing code,
regeneration is held back and the scene is only marked stale.
"""

from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import Property, QObject, QTimer, Signal, Slot

from .files import SourceFiles, dialect_for_path
from .generators import generate
from .model import SceneModel
from .parsers import carry_over, parse
from .types import Dialect

logger = logging.getLogger(__name__)


class SyncController(QObject):
    """Debounced regenerate/parse loop between a SceneModel and source text."""

    codeChanged = Signal()
    codeValidChanged = Signal()
    activeDialectChanged = Signal()
    editingChanged = Signal()
    boundFileChanged = Signal()

    def __init__(
        self,
        model: SceneModel,
        files: Optional[SourceFiles] = None,
        dialect: Dialect = Dialect.MARKUP,
        regenerate_delay_ms: int = 150,
        parse_delay_ms: int = 300,
    ):
        super().__init__()
        self._model = model
        self._files = files if files is not None else SourceFiles()
        self._dialect = dialect
        self._code = generate(dialect, model.snapshot())
        self._code_valid = True
        self._editing = False
        self._stale = False
        self._applying = False
        self._pending_text: Optional[str] = None
        self._bound_path = ""

        self._regen_timer = QTimer(self)
        self._regen_timer.setSingleShot(True)
        self._regen_timer.setInterval(max(0, regenerate_delay_ms))
        self._regen_timer.timeout.connect(self._regenerate_now)

        self._parse_timer = QTimer(self)
        self._parse_timer.setSingleShot(True)
        self._parse_timer.setInterval(max(0, parse_delay_ms))
        self._parse_timer.timeout.connect(self._parse_now)

        model.sceneChanged.connect(self._on_scene_changed)

    # --- Properties -----------------------------------------------------------
    @property
    def dialect(self) -> Dialect:
        return self._dialect

    @Property(str, notify=codeChanged)
    def code(self) -> str:
        return self._code

    @Property(bool, notify=codeValidChanged)
    def codeValid(self) -> bool:
        return self._code_valid

    @Property(str, notify=activeDialectChanged)
    def activeDialect(self) -> str:
        return self._dialect.value

    @Property(bool, notify=editingChanged)
    def isUserEditingCode(self) -> bool:
        return self._editing

    @Property(str, notify=boundFileChanged)
    def boundFile(self) -> str:
        return self._bound_path

    # --- Internal state setters -----------------------------------------------
    def _set_code(self, code: str) -> None:
        if code == self._code:
            return
        self._code = code
        self.codeChanged.emit()

    def _set_code_valid(self, valid: bool) -> None:
        if valid == self._code_valid:
            return
        self._code_valid = valid
        self.codeValidChanged.emit()

    def _set_editing(self, editing: bool) -> None:
        if editing == self._editing:
            return
        self._editing = editing
        self.editingChanged.emit()

    @staticmethod
    def _schedule(timer: QTimer, run) -> None:
        if timer.interval() <= 0:
            timer.stop()
            run()
        else:
            timer.start()

    # --- Scene -> code ----------------------------------------------------------
    def _on_scene_changed(self) -> None:
        if self._applying:
            return
        if self._editing:
            self._stale = True
            return
        self._schedule(self._regen_timer, self._regenerate_now)

    def _regenerate_now(self) -> None:
        self._regen_timer.stop()
        self._stale = False
        self._set_code(generate(self._dialect, self._model.snapshot()))
        self._set_code_valid(True)
        if self._bound_path:
            self._files.write_text(self._bound_path, self._code)

    # --- Code -> scene ----------------------------------------------------------
    @Slot(str)
    def editCode(self, text: str) -> None:
        """Record a user edit and schedule a parse of it."""
        self._set_editing(True)
        self._regen_timer.stop()
        self._pending_text = text
        self._set_code(text)
        self._schedule(self._parse_timer, self._parse_now)

    def _parse_now(self) -> None:
        self._parse_timer.stop()
        text = self._pending_text
        self._pending_text = None
        if text is None:
            return
        parsed = parse(self._dialect, text)
        if parsed is None:
            self._set_code_valid(False)
            return
        parsed = carry_over(self._dialect, parsed, self._model.snapshot())
        self._applying = True
        try:
            self._model.replaceScene(parsed)
        finally:
            self._applying = False
        # Whatever changed while editing has now been replaced by the code.
        self._stale = False
        self._set_code_valid(True)

    @Slot()
    def endEditing(self) -> None:
        """Leave code editing: apply any pending parse, regenerate if stale."""
        if self._parse_timer.isActive() or self._pending_text is not None:
            self._parse_now()
        self._set_editing(False)
        if self._stale:
            self._regenerate_now()

    @Slot()
    def flush(self) -> None:
        """Run pending debounced work immediately."""
        if self._pending_text is not None:
            self._parse_now()
        if self._regen_timer.isActive():
            self._regenerate_now()

    @Slot(str, result=bool)
    def setActiveDialect(self, name: str) -> bool:
        try:
            dialect = Dialect(name)
        except ValueError:
            return False
        self.endEditing()
        changed = dialect != self._dialect
        self._dialect = dialect
        self._regenerate_now()
        if changed:
            self.activeDialectChanged.emit()
        return True

    # --- Files ------------------------------------------------------------------
    @Slot(str)
    def bindFile(self, path: str) -> None:
        """Write every regenerated source to ``path``; empty unbinds."""
        if path == self._bound_path:
            return
        self._bound_path = path
        self.boundFileChanged.emit()

    @Slot(str, result=bool)
    def openFile(self, path: str) -> bool:
        """Load ``path`` in the dialect its extension names and parse it.

        An unreadable or unparseable file leaves the scene, the dialect and
        any bound file untouched.
        """
        dialect = dialect_for_path(path)
        if dialect is None:
            logger.warning("No dialect for %s", path)
            self._files.errorOccurred.emit(f"Unsupported file type: {path}")
            return False
        text = self._files.read_text(path)
        if text is None:
            return False
        parsed = parse(dialect, text)
        if parsed is None:
            message = f"Could not parse {path} as {dialect.value}"
            logger.warning(message)
            self._files.errorOccurred.emit(message)
            return False

        self.endEditing()
        self._bound_path = ""
        if dialect != self._dialect:
            self._dialect = dialect
            self.activeDialectChanged.emit()
        parsed = carry_over(dialect, parsed, self._model.snapshot())
        self._applying = True
        try:
            self._model.replaceScene(parsed)
        finally:
            self._applying = False
        self._regenerate_now()
        self._bound_path = path
        self.boundFileChanged.emit()
        logger.info("Opened %s as %s", path, dialect.value)
        return True

    @Slot(result=bool)
    def saveFile(self) -> bool:
        if not self._bound_path:
            return False
        self.flush()
        return self._files.write_text(self._bound_path, self._code)
