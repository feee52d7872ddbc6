"""Shared console, style names and the status-line printers."""

import os

from rich.console import Console
from rich.text import Text

console = Console()


class Ansi:
    """Style names understood by rich; one place to change the palette."""

    BOLD = "bold"

    FG_GREEN = "green"
    FG_BLUE = "blue"
    FG_YELLOW = "yellow"
    FG_RED = "red"

    @staticmethod
    def style(text: str, *codes: str) -> str:
        """Wrap *text* in rich markup, or return it bare when ``NO_COLOR`` is set."""
        if os.getenv("NO_COLOR") is not None:
            return text
        return f"[{' '.join(codes)}]{text}[/]"


ASSISTANT_LABEL = Ansi.style("assistant", Ansi.FG_GREEN, Ansi.BOLD)


def _tagged(tag: str, colour: str, message: str) -> None:
    # *message* is printed literally, never parsed as markup
    console.print(Text.assemble("[", (tag, f"{Ansi.BOLD} {colour}"), "] ", str(message)))


def print_error(message: str) -> None:
    """Print ``[error] message``."""
    _tagged("error", Ansi.FG_RED, message)


def print_warning(message: str) -> None:
    _tagged("warning", Ansi.FG_YELLOW, message)
