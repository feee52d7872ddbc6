"""Rendering of chat messages: plain, boxed or as markdown."""
from __future__ import annotations

from enum import Enum

from rich.markdown import Markdown
from rich.panel import Panel
from rich.text import Text

from .ansi import ASSISTANT_LABEL, Ansi, console

MAX_CHAT_WIDTH = 90
MESSAGE_WIDTH_PERCENT = 80


class MessageType(Enum):
    USER = ("User", Ansi.FG_GREEN)
    ASSISTANT = ("Assistant", Ansi.FG_BLUE)
    SYSTEM = ("System", Ansi.FG_YELLOW)

    @property
    def title(self) -> str:
        return self.value[0]

    @property
    def colour(self) -> str:
        return self.value[1]


def _box_width(text: str, label: str) -> int:
    max_width = min(console.width, MAX_CHAT_WIDTH) * MESSAGE_WIDTH_PERCENT // 100
    lines = text.splitlines() or [""]
    if len(lines) == 1:
        # two cells of padding each side plus the border
        return min(max(len(lines[0]), len(label)) + 6, max_width)
    return max_width


def print_message(text: str, message_type: MessageType, markdown: bool = False) -> None:
    """Print *text* inside a box labelled with *message_type*.

    User messages are right aligned, everything else hugs the left margin.
    """
    body = Markdown(text) if markdown else Text(text)
    width = _box_width(text, message_type.title)
    panel = Panel(
        body,
        title=message_type.title,
        title_align="right" if message_type is MessageType.USER else "left",
        border_style=message_type.colour,
        width=width,
        padding=(0, 1),
    )
    console.print()
    if message_type is MessageType.USER:
        console.print(panel, justify="right")
    else:
        console.print(panel)


def print_reply(text: str, *, boxes: bool = False, markdown: bool = False) -> None:
    """Print a complete (non-streamed) assistant reply."""
    if boxes:
        print_message(text, MessageType.ASSISTANT, markdown=markdown)
        return
    console.print(f"\n{ASSISTANT_LABEL}> ", end="")
    if markdown:
        console.print()
        console.print(Markdown(text))
    else:
        console.print(text, markup=False, highlight=False)
    console.print()


def print_system(text: str, *, boxes: bool = False) -> None:
    """Print a status line from a command."""
    if boxes:
        print_message(text, MessageType.SYSTEM)
    else:
        console.print(text, markup=False, highlight=False)


def preview_markdown(text: str) -> None:
    console.print()
    console.print(Markdown(text))
    console.print()
