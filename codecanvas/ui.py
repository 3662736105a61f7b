"""UI creation functions for CodeCanvas."""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

from PySide6.QtCore import QUrl
from PySide6.QtQml import QQmlApplicationEngine

from .files import SourceFiles
from .interaction import InteractionController
from .model import SceneModel
from .qml import CODECANVAS_QML_PATH, QML_DIR
from .settings import EditorSettings
from .sync import SyncController

logger = logging.getLogger(__name__)


def create_codecanvas_window(
    scene_model: SceneModel,
    interaction: InteractionController,
    sync_controller: SyncController,
    settings: Optional[EditorSettings] = None,
    source_files: Optional[SourceFiles] = None,
) -> QQmlApplicationEngine:
    """Create and return a QQmlApplicationEngine hosting the CodeCanvas UI."""
    engine = QQmlApplicationEngine()
    if settings is None:
        settings = EditorSettings()
    if source_files is None:
        source_files = SourceFiles()
    engine.rootContext().setContextProperty("sceneModel", scene_model)
    engine.rootContext().setContextProperty("interaction", interaction)
    engine.rootContext().setContextProperty("syncController", sync_controller)
    engine.rootContext().setContextProperty("editorSettings", settings)
    engine.rootContext().setContextProperty("sourceFiles", source_files)
    engine._editor_settings = settings
    engine._source_files = source_files
    engine.addImportPath(str(QML_DIR))
    engine.load(QUrl.fromLocalFile(str(CODECANVAS_QML_PATH)))
    return engine


def _configure_logging() -> None:
    level_name = os.environ.get("CODECANVAS_LOG_LEVEL", "WARNING").upper()
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> int:
    """Main entry point for CodeCanvas standalone mode."""
    from PySide6.QtWidgets import QApplication

    _configure_logging()
    smoke_mode = "--smoke" in sys.argv or os.environ.get("CODECANVAS_SMOKE") == "1"
    args = [arg for arg in sys.argv[1:] if arg != "--smoke"]

    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv)

    settings = EditorSettings()
    width, height = settings.canvas_size
    scene_model = SceneModel(width, height)
    interaction = InteractionController(scene_model)
    source_files = SourceFiles()
    sync_controller = SyncController(
        scene_model,
        source_files,
        dialect=settings.default_dialect,
        regenerate_delay_ms=settings.regenerateDelayMs,
        parse_delay_ms=settings.parseDelayMs,
    )

    engine = create_codecanvas_window(
        scene_model,
        interaction,
        sync_controller,
        settings,
        source_files,
    )
    if not engine.rootObjects():
        logger.error("Failed to load %s", CODECANVAS_QML_PATH)
        return 1

    if smoke_mode:
        return 0

    # Load file from command line argument if provided
    if args:
        file_path = args[0]
        # Handle file:// URLs
        if file_path.startswith("file://"):
            file_path = file_path[7:]
        if os.path.exists(file_path):
            if sync_controller.openFile(file_path):
                settings.addRecentFile(file_path)
        else:
            logger.warning("File not found: %s", file_path)

    return app.exec()
