"""Commands about the program itself: config, shell, images, help, quit."""

from __future__ import annotations

import subprocess

from rich.style import Style
from rich.text import Text

from ..core.config import (
    Config,
    config_interview,
    confirm_action,
    delete_config,
    read_user_input,
    write_config,
)
from ..utils import console, print_error, print_warning
from .base import CommandContext
from .registry import COMMANDS, register

IMAGE_MODELS = {"2": "dall-e-2", "3": "dall-e-3"}
NAME_COLUMN = 7


@register("ec", "Edit the application configuration.")
def edit_config_command(ctx: CommandContext) -> None:
    config = ctx.config
    config_interview(config)
    with ctx.transcript.locked() as transcript:
        developer = transcript.developer_message
        if developer is not None:
            developer.content = config.dev_message
        transcript.model = config.model
    write_config(config, ask=False)
    console.print("Configuration updated successfully!")


@register("dc", "Deletes the current application config file.")
def delete_config_command(ctx: CommandContext) -> None:
    path = Config.CONFIG_PATH
    if not path.exists():
        console.print(f"\nNo config file found at {path}\n", markup=False)
        return
    if confirm_action(f"Are you sure you want to delete {path}?"):
        delete_config()
        console.print(f"\nDeleted {path}\n", markup=False)
    else:
        console.print(f"\nDid not delete: {path}\n", markup=False)


@register("sh", "Executes a program with arguments. Usage: sh <program> [args...]")
def sh_command(ctx: CommandContext) -> None:
    if not ctx.args:
        print_error("Usage: sh <program> [args...]")
        return
    program = ctx.args[0]
    try:
        result = subprocess.run(ctx.args, check=False)
    except OSError as exc:
        print_error(f"Failed to run {program}: {exc}")
        return
    if result.returncode != 0:
        print_warning(f"{program} exited with status {result.returncode}")


@register("image", "Generates an image and returns its URL.")
def image_command(ctx: CommandContext) -> None:
    if not ctx.client.openai_enabled:
        print_error("Image generation needs OPENAI_API_KEY.")
        return
    choice = read_user_input("Choose model (2 for DALL-E 2, 3 for DALL-E 3): ")
    model = IMAGE_MODELS.get(choice)
    if model is None:
        console.print("Invalid choice. Defaulting to DALL-E 2.")
        model = IMAGE_MODELS["2"]

    prompt = read_user_input("Image Prompt: ")
    if not prompt:
        print_error("An image prompt is required.")
        return

    urls = ctx.client.generate_image(model, prompt)
    if not urls:
        print_error("No images returned.")
        return
    console.print()
    for i, url in enumerate(urls, start=1):
        console.print(Text(f"Image {i} Link", style=Style(link=url, underline=True)))
    console.print()


def print_help() -> None:
    """Print the command table; also used for ``tc --help``."""
    console.print("\nAvailable commands:\n")
    for name in sorted(COMMANDS):
        description = COMMANDS[name].description
        if len(name) < NAME_COLUMN:
            console.print(f"{name:{NAME_COLUMN}} - {description}", markup=False)
        else:
            console.print(name, markup=False)
            console.print(f"{'':{NAME_COLUMN}} - {description}", markup=False)
    console.print()


@register("help", "Displays this help message.")
def help_command(ctx: CommandContext) -> None:
    print_help()


@register("quit", "Quits this program. Also 'q'.")
def quit_command(ctx: CommandContext) -> bool:
    return False
