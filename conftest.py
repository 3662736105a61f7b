"""Shared pytest fixtures for the Qt application and scene objects."""

import os
import sys

# Tests run headless; pick the offscreen Qt platform unless one is set.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtCore import QCoreApplication
from PySide6.QtGui import QGuiApplication

from codecanvas.interaction import InteractionController
from codecanvas.model import SceneModel


@pytest.fixture(scope="session")
def app():
    """Provide a single QGuiApplication for all tests."""
    instance = QGuiApplication.instance()
    if instance is None:
        instance = QGuiApplication(sys.argv)

    yield instance

    # Clipboard-owned QMimeData must go before PySide tears down.
    clipboard = QGuiApplication.clipboard()
    if clipboard is not None:
        clipboard.clear()

    QCoreApplication.processEvents()


@pytest.fixture
def scene_model(app):
    return SceneModel()


@pytest.fixture
def controller(scene_model):
    return InteractionController(scene_model)
