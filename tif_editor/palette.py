"""
Color palette for the TIF Editor.
Eight fixed colors with independent display and wire-format lookups.
"""

from enum import Enum
from typing import Dict, Optional, Tuple


class Color(Enum):
    BLACK = "Black"
    RED = "Red"
    GREEN = "Green"
    YELLOW = "Yellow"
    BLUE = "Blue"
    MAGENTA = "Magenta"
    CYAN = "Cyan"
    WHITE = "White"

    def __str__(self) -> str:
        return self.value


# Display order doubles as the curses/ANSI color number
PALETTE = (
    Color.BLACK,
    Color.RED,
    Color.GREEN,
    Color.YELLOW,
    Color.BLUE,
    Color.MAGENTA,
    Color.CYAN,
    Color.WHITE,
)

DISPLAY_INDEX: Dict[Color, int] = {color: idx for idx, color in enumerate(PALETTE)}

# Historical token set, not derivable from display order
WIRE_TOKENS: Dict[Color, int] = {
    Color.BLUE: 0x5A,
    Color.BLACK: 0x5B,
    Color.RED: 0x5C,
    Color.GREEN: 0x5D,
    Color.MAGENTA: 0x5E,
    Color.WHITE: 0x5F,
    Color.YELLOW: 0x60,
    Color.CYAN: 0x61,
}

TOKEN_TO_COLOR: Dict[int, Color] = {token: color for color, token in WIRE_TOKENS.items()}

COLOR_RGB: Dict[Color, Tuple[int, int, int]] = {
    Color.BLACK: (0, 0, 0),
    Color.RED: (205, 49, 49),
    Color.GREEN: (13, 188, 121),
    Color.YELLOW: (229, 229, 16),
    Color.BLUE: (36, 114, 200),
    Color.MAGENTA: (188, 63, 188),
    Color.CYAN: (17, 168, 205),
    Color.WHITE: (229, 229, 229),
}

# Keys "1".."8" pick the colors in display order
DIGIT_KEYS = "12345678"


def wire_token(color: Color) -> int:
    return WIRE_TOKENS[color]


def display_index(color: Color) -> int:
    return DISPLAY_INDEX[color]


def from_wire_token(token: int) -> Optional[Color]:
    """Inverse of wire_token. Returns None for bytes outside the token set."""
    return TOKEN_TO_COLOR.get(token)


def from_display_index(index: int) -> Optional[Color]:
    if 0 <= index < len(PALETTE):
        return PALETTE[index]
    return None


def color_for_digit(key: str) -> Optional[Color]:
    """Map a digit key to its palette color, or None if it picks nothing."""
    if len(key) != 1 or key not in DIGIT_KEYS:
        return None
    return PALETTE[DIGIT_KEYS.index(key)]
