"""Shared fixtures: an offscreen QApplication and throwaway settings files."""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt6.QtCore import QSettings
from PyQt6.QtWidgets import QApplication


@pytest.fixture(scope="session", autouse=True)
def qapp():
    """One QApplication for the whole run; QObjects and timers need it."""
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def settings(tmp_path):
    """INI-backed settings isolated from the user's real ones."""
    return QSettings(str(tmp_path / "session.ini"), QSettings.Format.IniFormat)
