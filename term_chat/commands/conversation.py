"""Commands that read or rewrite the conversation transcript."""

from __future__ import annotations

from pathlib import Path

from ..core.config import read_user_input, write_config
from ..core.errors import CommandError
from ..core.transcript import Message, Transcript
from ..utils import console, print_error, print_system
from .base import CommandContext, format_file_message
from .registry import register


@register("clear", "Clears the conversation context.")
def clear_command(ctx: CommandContext) -> None:
    with ctx.transcript.locked() as transcript:
        transcript.clear()
        transcript.push(Message(ctx.dev_message.role, ctx.dev_message.content))
    # release lock before touching the terminal
    console.clear()
    console.print("\nConversation cleared.\n")


@register("debug", "Prints debug information.")
def debug_command(ctx: CommandContext) -> None:
    with ctx.transcript.locked() as transcript:
        model = transcript.model
        stream = transcript.stream
        messages = [Message(m.role, m.content) for m in transcript.messages]

    console.print(f"\nCurrent model: {model} (stream={stream})", markup=False)
    console.print("\nCurrent context messages:\n")
    for msg in messages:
        console.print(f"{msg.role}:\n{msg.content}\n:::\n", markup=False, highlight=False)
    console.print()


@register("cm", "Changes the chat model.")
def change_model_command(ctx: CommandContext) -> None:
    config = ctx.config
    boxes = config.message_boxes_enabled
    if not config.all_models:
        raise CommandError("no models are available")

    with ctx.transcript.locked() as transcript:
        current = transcript.model

    print_system(f"Current model: {current}\n", boxes=boxes)
    listing = "Available models:\n" + "".join(
        f"{i}) {model}\n" for i, model in enumerate(config.all_models, start=1)
    )
    print_system(listing, boxes=boxes)

    choice = read_user_input("\nPlease select a model by entering its number: ")
    index = int(choice) if choice.isdigit() else 0
    if not 1 <= index <= len(config.all_models):
        print_error(f"Invalid selection. Keeping current model: {current}")
        return

    model = config.all_models[index - 1]
    with ctx.transcript.locked() as transcript:
        transcript.model = model
    config.model = model
    write_config(config, ask=False)
    print_system(f"Model changed to: {model}", boxes=boxes)


@register("gf", "Adds file contents to the context. Usage: gf <path1> <path2> ...")
def gf_command(ctx: CommandContext) -> None:
    if not ctx.args:
        print_error(f"Invalid use of {ctx.cmd}. Usage: {ctx.cmd} <path1> <path2> ...")
        return

    for raw_path in ctx.args:
        path = raw_path.strip()
        try:
            content = Path(path).expanduser().read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            print_error(f"Error reading {path}: {exc}")
            continue
        with ctx.transcript.locked() as transcript:
            transcript.add_user_message(format_file_message(path, content))
        print_system(f"Added: {path}", boxes=ctx.config.message_boxes_enabled)


@register("sc", "Saves the current conversation as JSON.")
def save_conversation_command(ctx: CommandContext) -> None:
    snapshot = ctx.transcript.snapshot()
    name = read_user_input("Conversation name: ")
    if not name:
        print_error("No conversation name given. Conversation not saved.")
        return
    path = snapshot.save(name)
    console.print(f"\nConversation saved to '{path}'\n", markup=False)


@register("lc", "Loads a conversation from the conversations directory.")
def load_conversation_command(ctx: CommandContext) -> None:
    name = read_user_input("\nProvide conversation name: ")
    if not name:
        print_error("No conversation name given.")
        return
    loaded = Transcript.load(name)
    ctx.transcript.swap(loaded)
    console.print(
        f"\nLoaded conversation '{name}' (model={loaded.model}, {len(loaded.messages)} messages)\n",
        markup=False,
    )
