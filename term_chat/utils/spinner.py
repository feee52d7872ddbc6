"""Waiting indicator shown while a request is in flight."""
from __future__ import annotations

from yaspin import Spinner as SpinnerFrames, yaspin  # type: ignore

from .ansi import console

# A small robot waving while it waits; repainted in place every 150ms.
ROBOT_FRAMES = SpinnerFrames(
    ["\\🤖/ ", " 🤖/ ", " 🤖| ", " 🤖  ", "|🤖  ", "\\🤖  "],
    150,
)


class Spinner:
    """Animate on a background thread until stopped.

    ``stop()`` erases the animation so that whatever is printed next starts
    on a clean line. Usable as a context manager around a blocking call.
    """

    def __init__(self, text: str = "", frames: SpinnerFrames = ROBOT_FRAMES):
        self._started = False
        self._spinner = yaspin(frames, text=text, color="cyan")

    def start(self) -> None:
        if self._started:
            return
        console.file.flush()
        self._spinner.start()
        self._started = True

    def stop(self) -> None:
        if not self._started:
            return
        self._spinner.stop()
        console.file.flush()
        self._started = False

    def __enter__(self) -> "Spinner":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()
