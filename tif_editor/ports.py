"""
Interfaces between the editor core and the terminal.
"""

from abc import ABC, abstractmethod
from typing import Optional

from .models import InputEvent, Redraw


class Display(ABC):
    """Receives redraw instructions produced by EditorState."""

    @abstractmethod
    def redraw(self, instruction: Redraw):
        ...

    @abstractmethod
    def flush(self):
        """Push buffered changes to the screen."""


class InputSource(ABC):
    @abstractmethod
    def poll_event(self) -> Optional[InputEvent]:
        """Next pending event, or None. Must not block."""
