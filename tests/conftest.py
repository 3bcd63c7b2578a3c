"""
Shared pytest fixtures for tweenchain tests.
"""
import os
import pytest
import sys

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtWidgets import QApplication


@pytest.fixture(scope='session')
def qt_app():
    """Create QApplication instance for tests."""
    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv)
    yield app
    # Don't quit - causes issues with pytest


@pytest.fixture
def registry(qt_app):
    """Create a frame-mode TransitionRegistry for testing."""
    from tweenchain.animation import TransitionRegistry
    reg = TransitionRegistry()
    yield reg
    reg.clear()


@pytest.fixture
def settings_manager(qt_app):
    """Create SettingsManager instance for testing."""
    from tweenchain.settings import SettingsManager
    manager = SettingsManager(organization="Test", application="TweenchainTest")
    yield manager
    # Clear test settings
    manager.clear()
