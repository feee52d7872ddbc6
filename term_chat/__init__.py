"""Interactive terminal chat for OpenAI and Anthropic models.

Features
--------
1. One conversation, sent either to OpenAI (Responses / Chat Completions) or
   Anthropic (Messages) depending on the active model.
2. Replies are streamed token by token or printed as complete, optionally
   markdown-rendered, blocks.
3. ``:``-prefixed commands change the model, save/load the conversation, add
   files to the context, write READMEs and reports, and shell out.

Run ``tc`` or ``python -m term_chat``; ``tc --help`` lists the commands.
"""
# Re-export useful symbols for convenience
from .core import Config, Message, SharedTranscript, Transcript
from .core.client import ChatClient
from .cli import ChatCLI, run_cli

__all__ = [
    "Config",
    "Message",
    "SharedTranscript",
    "Transcript",
    "ChatClient",
    "ChatCLI",
    "run_cli",
]
