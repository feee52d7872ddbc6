"""Types shared by every command handler."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, List, Optional

from ..core.config import Config
from ..core.transcript import Message, SharedTranscript

if TYPE_CHECKING:  # pragma: no cover
    from ..core.client import ChatClient


@dataclass
class CommandContext:
    """Everything a handler may touch for one invocation."""

    transcript: SharedTranscript
    dev_message: Message
    config: Config
    client: "ChatClient"
    cmd: str
    args: List[str] = field(default_factory=list)


# A handler returns False to end the REPL; anything else keeps it running.
Handler = Callable[[CommandContext], Optional[bool]]


@dataclass(frozen=True)
class Command:
    name: str
    description: str
    run: Handler


def format_file_message(path: str, content: str) -> str:
    """Content of a user message carrying a file: its path, a separator, the text."""
    return f"{path}\n\n:::\n\n{content}"
