"""Pytest configuration and fixtures"""

import sys

import psutil
import pytest

from execop.operation import Reporter


class RecordingReporter(Reporter):
    """Reporter that keeps every message for assertions"""

    def __init__(self):
        self.infos = []
        self.errors = []

    def info(self, message):
        self.infos.append(message)

    def error(self, message):
        self.errors.append(message)


def _python_command(code):
    """Command vector running a Python snippet with the current interpreter"""
    return [sys.executable, "-c", code]


@pytest.fixture
def reporter():
    return RecordingReporter()


@pytest.fixture
def project(tmp_path):
    """Project whose default working directory is a fresh temp dir"""
    from execop.config import Project
    work_dir = tmp_path / "project"
    work_dir.mkdir()
    return Project(work_directory=work_dir)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep EXECOP_* settings from the outer shell out of the tests"""
    import os
    for key in list(os.environ):
        if key.startswith("EXECOP_"):
            monkeypatch.delenv(key)


@pytest.fixture(autouse=True)
def cleanup_processes():
    """Kill any child processes a test left running"""
    yield
    current = psutil.Process()
    children = current.children(recursive=True)
    for child in children:
        try:
            child.kill()
        except psutil.NoSuchProcess:
            pass
    psutil.wait_procs(children, timeout=2)


@pytest.fixture
def py():
    """Build a command vector from a Python snippet"""
    return _python_command
