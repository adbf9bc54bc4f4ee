"""
Pytest configuration and shared fixtures for TIF Editor tests.
"""

import pytest
import sys
import os

# Allow running the suite from a checkout without installing
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from tif_editor.models import Key
from tif_editor.palette import Color
from tif_editor.ports import Display, InputSource
from tif_editor.raster import Raster
from tif_editor.state import EditorState


class RecordingDisplay(Display):
    """Display double that keeps every instruction it receives."""

    def __init__(self):
        self.instructions = []
        self.flushes = 0

    def redraw(self, instruction):
        self.instructions.append(instruction)

    def flush(self):
        self.flushes += 1


class ScriptedInput(InputSource):
    """Input double that replays a fixed list of events."""

    def __init__(self, events):
        self.events = list(events)

    def poll_event(self):
        if not self.events:
            return None
        return self.events.pop(0)


def keys(*names):
    """Build Key events from key strings."""
    return [Key(k) for k in names]


@pytest.fixture
def raster():
    """A 3x3 all-black raster."""
    return Raster(3, 3)


@pytest.fixture
def wide_raster():
    """A 4x10 all-black raster."""
    return Raster(4, 10)


@pytest.fixture
def state(raster):
    """An EditorState over the 3x3 raster, queue already drained."""
    return EditorState(raster)


@pytest.fixture
def area_state(wide_raster):
    """An EditorState over the 4x10 raster, cursor at (1, 2), red selected."""
    s = EditorState(wide_raster)
    s.set_cursor(1, 2)
    s.set_selected_color(Color.RED)
    s.drain()
    return s


@pytest.fixture
def display():
    return RecordingDisplay()
