"""Terminal status spinner shown while source lists are scanned."""

from __future__ import annotations

import sys
from asyncio import create_task, to_thread
from time import sleep


class StatusSpinner:
    """Single-line spinner for live status updates."""

    def __init__(self, stream=None, interval: float = 0.1):
        self.spinner_chars = "|/-\\"
        self.index = 0
        self.stream = stream if stream is not None else sys.stdout
        self.interval = interval
        self.current_progress = None

    async def show_progress(self, message: str, operation):
        """Animate a spinner while awaiting the given async operation."""
        task = create_task(operation)

        self.current_progress = None
        self._update_line(f"⚡ {message}")

        while not task.done():
            progress_text = f" {self.current_progress}" if self.current_progress else ""
            spinner = self.spinner_chars[self.index]
            self._update_line(f" {spinner} {message}{progress_text}")
            self.index = (self.index + 1) % len(self.spinner_chars)
            await to_thread(sleep, self.interval)

        return await task

    def update_progress(self, completed: int, total: int):
        """Record a completed/total ratio for the next frame.

        Safe to call from the worker threads reading list files.
        """
        if total > 0:
            percentage = (completed * 100) // total
            self.current_progress = f"{completed}/{total} lists ({percentage}%)"

    def update_status(self, message: str):
        """Replace the spinner line with a final message and end the line."""
        self._update_line(message)
        self.stream.write("\n")
        self.stream.flush()

    def _update_line(self, message: str):
        self.stream.write(f"\r\033[K{message}")
        self.stream.flush()
