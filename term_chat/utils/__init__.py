from .ansi import (
    Ansi,
    ASSISTANT_LABEL,
    console,
    print_error,
    print_warning,
)
from .readline import chat_prompt, install_path_completion, readline_safe_prompt
from .render import MessageType, preview_markdown, print_message, print_reply, print_system
from .spinner import Spinner

__all__ = [
    "Ansi",
    "ASSISTANT_LABEL",
    "console",
    "print_error",
    "print_warning",
    "chat_prompt",
    "install_path_completion",
    "readline_safe_prompt",
    "MessageType",
    "preview_markdown",
    "print_message",
    "print_reply",
    "print_system",
    "Spinner",
]
