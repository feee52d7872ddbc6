from .base import Command, CommandContext, format_file_message
from .registry import COMMAND_PREFIX, COMMANDS, QUIT_COMMANDS, edit_distance, handle_command, suggest

# Importing the handler modules fills the COMMANDS table.
from . import conversation, documents, system  # noqa: F401,E402
from .system import print_help  # noqa: E402

__all__ = [
    "Command",
    "CommandContext",
    "format_file_message",
    "COMMAND_PREFIX",
    "COMMANDS",
    "QUIT_COMMANDS",
    "edit_distance",
    "handle_command",
    "suggest",
    "print_help",
]
