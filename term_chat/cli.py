"""Terminal chat REPL for OpenAI and Anthropic models.

Lines starting with ``:`` are commands (``:help`` lists them); everything
else is sent to the active model as a chat turn.
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from rich.panel import Panel

from .commands import COMMAND_PREFIX, handle_command, print_help
from .core import Config, DEVELOPER_ROLE, Message, RequestFailed, SharedTranscript, Transcript
from .core.client import ChatClient
from .core.config import OPENAI_MODELS, load_config, resolve_api_keys
from .core.providers import build_request, is_streamed, select_shape
from .utils import (
    Ansi,
    MessageType,
    chat_prompt,
    console,
    install_path_completion,
    print_error,
    print_message,
    print_reply,
)
from .utils.log import setup_logging

logger = logging.getLogger(__name__)

# Move the cursor up one line and clear it, removing the echoed input.
_ERASE_PREVIOUS_LINE = "\x1b[1A\x1b[2K"


class ChatCLI:
    """High-level orchestration class for the interactive REPL."""

    def __init__(self, transcript: SharedTranscript, client: ChatClient, config: Config):
        self.transcript = transcript
        self.client = client
        self.config = config

    @property
    def dev_message(self) -> Message:
        return Message(DEVELOPER_ROLE, self.config.dev_message)

    # ---------------- Command handling ---------------

    def handle_command(self, line: str) -> bool:
        """Handle ``:`` commands. Return False to exit REPL."""
        cmd_line = line.strip()
        if cmd_line.startswith(COMMAND_PREFIX):
            cmd_line = cmd_line[len(COMMAND_PREFIX):]
        return handle_command(cmd_line, self.transcript, self.dev_message, self.config, self.client)

    # ---------------- Chat turns ---------------

    def chat(self, line: str) -> Optional[str]:
        """Send *line* as a user turn and return the assistant reply, if any.

        The user message stays in the transcript even when the request fails
        or returns no content.
        """
        config = self.config
        if config.message_boxes_enabled and not config.enable_streaming:
            console.file.write(_ERASE_PREVIOUS_LINE)
            print_message(line, MessageType.USER)

        with self.transcript.locked() as transcript:
            transcript.add_user_message(line)
            shape = select_shape(transcript.model, config.enable_streaming)
            streamed = is_streamed(shape, config.enable_streaming)
            transcript.set_stream(streamed)
            request = build_request(transcript, shape, config.max_tokens)

        try:
            if streamed:
                reply: Optional[str] = self.client.stream(request)
            else:
                reply = self.client.complete(request)
        except RequestFailed as exc:
            print_error(f"Request failed: {exc}")
            return None

        if not reply:
            print_error("No content received.")
            return None

        with self.transcript.locked() as transcript:
            transcript.add_assistant_message(reply)

        if not streamed:
            print_reply(reply, boxes=config.message_boxes_enabled, markdown=config.preview_md)
        return reply

    # ---------------- Interaction loop ---------------

    def repl(self) -> None:
        """Run the interactive read–eval–print-loop."""
        console.print(Panel.fit("terminal chat", style="bold magenta"))
        with self.transcript.locked() as transcript:
            model = transcript.model
        console.print(
            Ansi.style("Type your message and press Enter. Commands start with ':'.", Ansi.FG_YELLOW),
            Ansi.style(f"Current model: {model}.", Ansi.FG_YELLOW),
            Ansi.style("Type :help for help, :q to quit.", Ansi.FG_YELLOW),
            sep="\n",
        )

        prompt = chat_prompt()
        while True:
            try:
                line = input(prompt).strip()
            except (EOFError, KeyboardInterrupt):
                console.print("\n[signal caught – exiting]", markup=False)
                break

            if not line:
                continue

            try:
                if line.startswith(COMMAND_PREFIX):
                    if not self.handle_command(line):
                        break
                    continue
                self.chat(line)
            except KeyboardInterrupt:
                console.print("\n[interrupted]", markup=False)


# ---------------------------------------------------------------------------
# Entrypoint helpers
# ---------------------------------------------------------------------------


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="tc",
        description="Interactive terminal chat for OpenAI and Anthropic models.",
        add_help=False,
    )
    parser.add_argument("-h", "--help", action="store_true", help="Show the command table and exit")
    parser.add_argument("--debug", action="store_true", help="Log requests and internals")
    return parser.parse_args(argv)


def known_models(client: ChatClient) -> List[str]:
    """Models offered for selection, depending on which providers have keys."""
    models: List[str] = list(OPENAI_MODELS) if client.openai_enabled else []
    if client.anthropic_enabled:
        try:
            models.extend(client.list_anthropic_models())
        except RequestFailed as exc:
            logger.warning("could not list Anthropic models: %s", exc)
    return models


def run_cli(argv: Optional[List[str]] = None) -> None:  # pragma: no cover
    args = _parse_args(argv)
    if args.help:
        print_help()
        return
    setup_logging(args.debug)

    openai_key, anthropic_key = resolve_api_keys()
    console.print("\n-- terminal chat -- \n")

    client = ChatClient(openai_key, anthropic_key)
    config = load_config(
        known_models(client),
        openai_enabled=client.openai_enabled,
        anthropic_enabled=client.anthropic_enabled,
    )
    client.timeout = config.request_timeout

    transcript = Transcript(config.model, config.enable_streaming)
    transcript.push(Message(DEVELOPER_ROLE, config.dev_message))

    install_path_completion()
    ChatCLI(SharedTranscript(transcript), client, config).repl()


def main() -> None:  # pragma: no cover
    try:
        run_cli()
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":  # pragma: no cover
    main()
