"""Prompt helpers for the main input line: escape wrapping and path completion."""

import glob
import os
import re
import readline
from typing import List, Optional


# CSI escape sequences such as "\033[96m"
_ANSI_PATTERN = re.compile(r"\033\[[0-9;]*[A-Za-z]")

PROMPT_COLOUR = "\033[96m"
RESET = "\033[0m"


def readline_safe_prompt(prompt: str) -> str:
    """Return *prompt* with ANSI escapes wrapped for correct Readline width.

    GNU Readline counts escape bytes as printable characters unless they are
    wrapped between \\001 and \\002, which breaks cursor positioning once the
    input wraps past the terminal width.
    """
    if "\033[" not in prompt:  # fast-path – no colour codes present
        return prompt

    return _ANSI_PATTERN.sub(lambda m: f"\001{m.group(0)}\002", prompt)


def chat_prompt(text: str = "🗣️ ") -> str:
    if os.getenv("NO_COLOR") is not None:
        return text
    return readline_safe_prompt(f"{PROMPT_COLOUR}{text}{RESET}")


def complete_path(text: str, state: int) -> Optional[str]:
    """Readline completer returning filesystem paths that start with *text*."""
    expanded = os.path.expanduser(text)
    matches: List[str] = []
    for match in sorted(glob.glob(expanded + "*")):
        if os.path.isdir(match):
            match += os.sep
        if text.startswith("~"):
            match = "~" + match[len(os.path.expanduser("~")):]
        matches.append(match)
    return matches[state] if state < len(matches) else None


def install_path_completion() -> None:
    readline.set_completer_delims(" \t\n")
    readline.set_completer(complete_path)
    if "libedit" in (readline.__doc__ or ""):
        readline.parse_and_bind("bind ^I rl_complete")
    else:
        readline.parse_and_bind("tab: complete")
