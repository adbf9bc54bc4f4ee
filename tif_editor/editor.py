#!/usr/bin/env python3
"""
TIF Editor - terminal front end and run loop.
"""

import argparse
import os
import shutil
import sys
import termios
import tty
from typing import Optional

from rich.markup import escape

from . import console
from .codec import DocumentStore
from .config import EditorConfig
from .errors import (
    CodecError,
    InvalidDimensions,
    NoSelection,
    OutOfBounds,
    TerminalTooSmall,
)
from .ports import Display, InputSource
from .raster import Raster
from .state import EditorState
from .terminal import TerminalDisplay, TerminalInput, required_terminal_size

# ANSI escape codes
HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"
MOUSE_ON = "\033[?1000h\033[?1002h\033[?1006h"
MOUSE_OFF = "\033[?1000l\033[?1002l\033[?1006l"

DEFAULT_CONFIG = "tif_editor.toml"


def run_loop(
    state: EditorState,
    source: InputSource,
    display: Display,
    max_events: Optional[int] = None,
):
    """
    Feed input events to the state until it asks to quit.
    Rejected moves and area operations leave the state unchanged and are ignored.
    """
    state.draw_all()
    for instruction in state.drain():
        display.redraw(instruction)
    display.flush()

    handled = 0
    while max_events is None or handled < max_events:
        event = source.poll_event()
        if event is None:
            continue
        handled += 1
        try:
            running = state.handle_event(event)
        except (OutOfBounds, NoSelection):
            running = True
        for instruction in state.drain():
            display.redraw(instruction)
        display.flush()
        if not running:
            break


class EditorApp:
    def __init__(
        self,
        raster: Raster,
        output_path: str,
        config: Optional[EditorConfig] = None,
        store: Optional[DocumentStore] = None,
    ):
        self.config = config or EditorConfig()
        self.store = store or DocumentStore()
        self.state = EditorState(raster, self.config.keys)
        self.output_path = output_path
        self.original_settings = None

    def check_terminal_size(self):
        rows, cols = required_terminal_size(self.state.raster.height, self.state.raster.width)
        size = shutil.get_terminal_size((80, 24))
        if size.lines < rows:
            raise TerminalTooSmall(f"terminal's height is too small (need {rows} rows)")
        if size.columns < cols:
            raise TerminalTooSmall(f"terminal's width is too small (need {cols} columns)")
        return size

    def setup_terminal(self):
        self.original_settings = termios.tcgetattr(sys.stdin)
        tty.setcbreak(sys.stdin)
        sys.stdout.write(HIDE_CURSOR)
        sys.stdout.write(MOUSE_ON)
        sys.stdout.write("\033[2J\033[H")
        sys.stdout.flush()

    def restore_terminal(self):
        sys.stdout.write(MOUSE_OFF)
        if self.original_settings:
            termios.tcsetattr(sys.stdin, termios.TCSADRAIN, self.original_settings)
        sys.stdout.write("\033[0m\033[2J\033[H")
        sys.stdout.write(SHOW_CURSOR)
        sys.stdout.flush()

    def run(self):
        size = self.check_terminal_size()
        display = TerminalDisplay(
            self.state.raster.height, self.state.raster.width, columns=size.columns
        )
        source = TerminalInput(timeout=self.config.poll_interval)
        try:
            self.setup_terminal()
            run_loop(self.state, source, display)
        except KeyboardInterrupt:
            pass
        finally:
            self.restore_terminal()
        self.save()

    def save(self):
        self.store.save(self.output_path, self.state.raster)
        console.print(f"Saved {escape(self.output_path)}")


def open_document(
    args: argparse.Namespace, config: EditorConfig, store: DocumentStore
) -> Raster:
    if args.file and os.path.exists(args.file) and not args.new:
        raster = store.load(args.file, args.height)
        console.print(
            f"Loaded {escape(args.file)} ({raster.height}x{raster.width})"
        )
        return raster
    height = args.height if args.height is not None else config.default_height
    width = args.width if args.width is not None else config.default_width
    return store.create(height, width)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="tif-editor", description="Paint 8-color TIF images in the terminal."
    )
    p.add_argument("file", nargs="?", help="image to open, or to create if missing")
    p.add_argument("-H", "--height", type=int, help="image height in rows")
    p.add_argument("-W", "--width", type=int, help="image width in columns (max 255)")
    p.add_argument("-n", "--new", action="store_true", help="start from a blank image")
    p.add_argument("-o", "--output", help="where to save on quit")
    p.add_argument("-c", "--config", help=f"TOML config file (default: {DEFAULT_CONFIG})")
    return p


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    config_path = args.config or DEFAULT_CONFIG
    if args.config or os.path.exists(config_path):
        config = EditorConfig.load_from_toml(config_path)
    else:
        config = EditorConfig()
    store = DocumentStore()
    try:
        raster = open_document(args, config, store)
        output = args.output or args.file or config.output_path
        EditorApp(raster, output, config, store).run()
    except (CodecError, InvalidDimensions, TerminalTooSmall, OSError, termios.error) as e:
        console.print(f"[red]Error:[/] {escape(str(e))}")
        return 1
    console.print("Editor closed.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
