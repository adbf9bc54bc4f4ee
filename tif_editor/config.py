"""
Configuration settings for the TIF Editor.
"""

import os
from typing import Dict, List, Tuple

import toml
from pydantic import BaseModel, ConfigDict, Field
from rich.markup import escape

from . import console


class KeyBindings(BaseModel):
    """Keys understood by the editor state machine."""

    insert: str = "i"
    area: str = "s"
    quit: List[str] = ["q", "Q"]
    paint: str = " "
    escape: str = "\x1b"

    # Move and paint in Insertion mode, drag the corner in Area mode
    paint_moves: Dict[str, Tuple[int, int]] = Field(
        default_factory=lambda: {
            "w": (-1, 0),
            "W": (-1, 0),
            "s": (1, 0),
            "S": (1, 0),
            "a": (0, -1),
            "A": (0, -1),
            "d": (0, 1),
            "D": (0, 1),
        }
    )

    model_config = ConfigDict(extra="ignore")


class EditorConfig(BaseModel):
    """Configuration settings for the editor."""

    # New document size
    default_height: int = 50
    default_width: int = 50

    # Where the image is written when no file was opened
    output_path: str = "image.tif"

    # Seconds to wait for input on each loop iteration
    poll_interval: float = 0.02

    keys: KeyBindings = Field(default_factory=KeyBindings)

    model_config = ConfigDict(extra="allow")

    @classmethod
    def load_from_toml(cls, path: str = "tif_editor.toml") -> "EditorConfig":
        """Load configuration from a TOML file."""
        if not os.path.exists(path):
            console.print(f"[yellow]Warning:[/] config file {escape(path)} not found. Using defaults.")
            return cls()

        try:
            with open(path, "r") as f:
                data = toml.load(f)

            settings = dict(data.get("editor", {}))
            if "keys" in data:
                settings["keys"] = data["keys"]
            return cls(**settings)
        except Exception as e:
            console.print(f"[red]Error loading config {escape(path)}:[/] {escape(str(e))}")
            return cls()
