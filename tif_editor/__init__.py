"""
TIF Editor - a terminal pixel editor for 8-color run-length images.
"""

from rich.console import Console

__version__ = "0.1.0"

# Diagnostics go to stderr so they never mix with screen output
console = Console(stderr=True, soft_wrap=True)
