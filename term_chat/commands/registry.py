"""Command table, lookup and the "did you mean" suggestion."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Dict, Iterable, Optional

from ..core.config import Config
from ..core.errors import CommandError, RequestFailed
from ..core.transcript import Message, SharedTranscript
from ..utils import console, print_error
from .base import Command, CommandContext, Handler

if TYPE_CHECKING:  # pragma: no cover
    from ..core.client import ChatClient

logger = logging.getLogger(__name__)

COMMAND_PREFIX = ":"
QUIT_COMMANDS = {"q", "quit"}

COMMANDS: Dict[str, Command] = {}


def register(name: str, description: str) -> Callable[[Handler], Handler]:
    def decorator(func: Handler) -> Handler:
        COMMANDS[name] = Command(name=name, description=description, run=func)
        return func

    return decorator


def edit_distance(word1: str, word2: str) -> int:
    """Levenshtein distance; insert, delete and substitute each cost 1."""
    previous = list(range(len(word2) + 1))
    for i, c1 in enumerate(word1, start=1):
        current = [i]
        for j, c2 in enumerate(word2, start=1):
            cost = 0 if c1 == c2 else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]


def suggest(word: str, names: Optional[Iterable[str]] = None) -> Optional[str]:
    """Closest registered name to *word*; ties go to the lexicographically first."""
    candidates = sorted(COMMANDS if names is None else names)
    if not candidates:
        return None
    return min(candidates, key=lambda name: edit_distance(word, name))


def handle_command(
    cmd_line: str,
    transcript: SharedTranscript,
    dev_message: Message,
    config: Config,
    client: "ChatClient",
) -> bool:
    """Run one command line (prefix already stripped). Return False to exit REPL."""
    parts = cmd_line.strip().split()
    if not parts:
        print_error("No command provided")
        return True

    name, args = parts[0], parts[1:]
    if name in QUIT_COMMANDS:
        return False

    command = COMMANDS.get(name)
    if command is None:
        print_error(f"Unknown command: {name}")
        maybe = suggest(name)
        if maybe:
            console.print(f"Did you mean {maybe}?\n", markup=False)
        return True

    ctx = CommandContext(
        transcript=transcript,
        dev_message=dev_message,
        config=config,
        client=client,
        cmd=name,
        args=args,
    )
    logger.debug("running command %s %s", name, args)
    try:
        result = command.run(ctx)
    except (CommandError, RequestFailed, OSError, ValueError) as exc:
        print_error(f"Error executing command: {name} With error: {exc}")
        return True
    return result is not False
