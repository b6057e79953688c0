"""Shared fixtures for the wordle_rooms tests."""

import os
import tempfile

# Keep test runs from writing into ./logs; must happen before wordle_rooms is imported
os.environ.setdefault('LOG_DIR', tempfile.mkdtemp(prefix='wordle_rooms_logs_'))

import pytest  # noqa: E402


class FakeClock:
    """Manually advanced stand-in for ``time.time``."""

    def __init__(self, start=1_000_000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()
