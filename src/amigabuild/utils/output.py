"""
Shared output channel and user notifications.

The channel is the human readable trace of tool runs. The debug log is a
quiet timestamped file for events that must not reach the user.
"""
import time
from collections import deque
from typing import Deque, List, Optional
from rich.console import Console
from rich.text import Text


class OutputChannel:
    def __init__(self, name: str = "Amiga Assembly", console: Optional[Console] = None,
                 log_file: Optional[str] = None, history: int = 1000):
        self.name = name
        self.console = console if console else Console(stderr=True)
        self.log_file = log_file
        self._lines: Deque[str] = deque(maxlen=history)

    @property
    def lines(self) -> List[str]:
        return list(self._lines)

    def append_line(self, text: str):
        self._lines.append(text)
        self.console.print(Text(text, style="dim"))

    def log(self, msg: str):
        if not self.log_file:
            return
        with open(self.log_file, "a") as f:
            f.write(f"[{time.time()}] {msg}\n")


class Notifier:
    """Direct user-facing messages, the ones not anchored to a line."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console if console else Console(stderr=True)

    def show_error_message(self, msg: str):
        self.console.print(Text(msg, style="bold red"))

    def show_information_message(self, msg: str):
        self.console.print(Text(msg, style="cyan"))
