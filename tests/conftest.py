"""Pytest fixtures for buildtree tests."""

import pytest

from helpers.logging import RecordingLogger


@pytest.fixture
def recording_logger() -> RecordingLogger:
    """Provide a logger which keeps its messages for assertions."""
    return RecordingLogger()
