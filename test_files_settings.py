"""Tests for source file access and editor settings."""

import pytest
from PySide6.QtCore import QSettings

from codecanvas.files import SourceFiles, dialect_for_path
from codecanvas.settings import EditorSettings
from codecanvas.types import Dialect


class TestSourceFiles:
    def test_dialect_for_path(self):
        assert dialect_for_path("scene.xml") == Dialect.MARKUP
        assert dialect_for_path("/tmp/Shapes.CSS") == Dialect.STYLESHEET
        assert dialect_for_path("Shapes.tsx") == Dialect.COMPONENT
        assert dialect_for_path("Shapes.jsx") == Dialect.COMPONENT
        assert dialect_for_path("README.md") is None

    def test_dialect_for_slot(self, app):
        files = SourceFiles()
        assert files.dialectFor("a.css") == "stylesheet"
        assert files.dialectFor("a.txt") == ""

    def test_write_then_read(self, app, tmp_path):
        files = SourceFiles()
        path = str(tmp_path / "scene.xml")
        assert files.writeText(path, "<root>\n</root>") is True
        assert files.readText(path) == "<root>\n</root>"

    def test_missing_file_reports_error(self, app, tmp_path):
        files = SourceFiles()
        errors = []
        files.errorOccurred.connect(errors.append)
        assert files.read_text(str(tmp_path / "missing.css")) is None
        assert len(errors) == 1
        assert "missing.css" in errors[0]
        assert files.readText(str(tmp_path / "missing.css")) == ""

    def test_write_failure_reports_error(self, app, tmp_path):
        files = SourceFiles()
        errors = []
        files.errorOccurred.connect(errors.append)
        assert files.write_text(str(tmp_path / "no-such-dir" / "a.xml"), "x") is False
        assert errors

    def test_undecodable_file(self, app, tmp_path):
        path = tmp_path / "binary.xml"
        path.write_bytes(b"\xff\xfe\x00bad")
        assert SourceFiles().read_text(str(path)) is None


@pytest.fixture
def qsettings(app, tmp_path):
    return QSettings(str(tmp_path / "codecanvas.ini"), QSettings.IniFormat)


class TestEditorSettings:
    def test_defaults(self, qsettings):
        settings = EditorSettings(qsettings, environ={})
        assert settings.canvas_size == (800, 600)
        assert settings.regenerateDelayMs == 150
        assert settings.parseDelayMs == 300
        assert settings.default_dialect == Dialect.MARKUP
        assert settings.recentFiles == []

    def test_stored_values(self, qsettings):
        settings = EditorSettings(qsettings, environ={})
        settings.setCanvasSize(1024, 768)
        settings.setDebounceDelays(50, 75)
        settings.setDefaultDialect("component")
        settings.setDefaultDialect("yaml")
        reloaded = EditorSettings(qsettings, environ={})
        assert (reloaded.canvasWidth, reloaded.canvasHeight) == (1024, 768)
        assert (reloaded.regenerateDelayMs, reloaded.parseDelayMs) == (50, 75)
        assert reloaded.defaultDialect == "component"

    def test_environment_overrides(self, qsettings):
        environ = {"CODECANVAS_CANVAS_SIZE": "640x480", "CODECANVAS_DEBOUNCE_MS": "0"}
        settings = EditorSettings(qsettings, environ=environ)
        assert settings.canvas_size == (640, 480)
        assert settings.regenerateDelayMs == 0
        assert settings.parseDelayMs == 0

    def test_invalid_environment_is_ignored(self, qsettings):
        environ = {"CODECANVAS_CANVAS_SIZE": "huge", "CODECANVAS_DEBOUNCE_MS": "soon"}
        settings = EditorSettings(qsettings, environ=environ)
        assert settings.canvas_size == (800, 600)
        assert settings.regenerateDelayMs == 150

    def test_recent_files(self, qsettings, tmp_path):
        settings = EditorSettings(qsettings, environ={})
        paths = []
        for index in range(10):
            path = tmp_path / f"scene{index}.xml"
            path.write_text("", encoding="utf-8")
            paths.append(str(path))
            settings.addRecentFile(str(path))
        assert len(settings.recentFiles) == EditorSettings.MAX_RECENT_FILES
        assert settings.recentFiles[0] == paths[-1]

        settings.addRecentFile(paths[5])
        assert settings.recentFiles[0] == paths[5]
        assert settings.recentFiles.count(paths[5]) == 1

        settings.addRecentFile(str(tmp_path / "gone.xml"))
        assert str(tmp_path / "gone.xml") not in settings.recentFiles

        reloaded = EditorSettings(qsettings, environ={})
        assert reloaded.recentFiles == settings.recentFiles

    def test_clear_recent_files(self, qsettings, tmp_path):
        path = tmp_path / "one.css"
        path.write_text("", encoding="utf-8")
        settings = EditorSettings(qsettings, environ={})
        settings.addRecentFile(str(path))
        settings.clearRecentFiles()
        assert settings.recentFiles == []
        assert EditorSettings(qsettings, environ={}).recentFiles == []
