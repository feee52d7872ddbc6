"""Commands that ask a model to write a document and save it as markdown."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, List, Optional, Set, Tuple

from ..core.config import confirm_action, read_user_input
from ..core.prompts import README_PROMPT, REPORT_PROMPT, TITLE_PROMPT
from ..core.providers import build_request, document_shape
from ..core.transcript import DEVELOPER_ROLE, Message, Transcript
from ..utils import console, preview_markdown, print_error
from .base import CommandContext, format_file_message
from .registry import register

logger = logging.getLogger(__name__)

READMES_DIR = Path("readmes")
REPORTS_DIR = Path("reports")

# Build output and dependency folders never describe the project itself.
EXCLUDED_DIRS = {"target", "build", "dist", "node_modules", "__pycache__", "venv"}


def _raise(exc: OSError) -> None:
    raise exc


def walk_directory(
    root: Path,
    extensions: Set[str],
    excluded_dirs: Iterable[str] = EXCLUDED_DIRS,
) -> Tuple[List[Tuple[str, str]], List[Tuple[str, Exception]]]:
    """Collect ``(path, content)`` for every matching file under *root*.

    Dotfiles, hidden directories and *excluded_dirs* are skipped. An empty
    *extensions* set matches every file. Files that cannot be read as text
    are returned separately in the second list.
    """
    excluded = set(excluded_dirs)
    files: List[Tuple[str, str]] = []
    failures: List[Tuple[str, Exception]] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
        dirnames[:] = sorted(d for d in dirnames if d not in excluded and not d.startswith("."))
        for filename in sorted(filenames):
            if filename.startswith("."):
                continue
            path = Path(dirpath) / filename
            if extensions and path.suffix.lstrip(".") not in extensions:
                continue
            try:
                files.append((str(path), path.read_text(encoding="utf-8")))
            except (OSError, UnicodeDecodeError) as exc:
                failures.append((str(path), exc))
    return files, failures


def sanitize_title(title: str) -> str:
    return title.replace("/", "_").replace("\\", "_").replace(" ", "_").replace('"', "")


def _ask(ctx: CommandContext, transcript: Transcript) -> Optional[str]:
    shape = document_shape(transcript.model)
    request = build_request(transcript, shape, ctx.config.max_tokens)
    return ctx.client.complete(request)


@register("readme", "Generates a README file. Usage: readme <directory> [extensions...]")
def readme_command(ctx: CommandContext) -> None:
    if not ctx.args:
        print_error("Invalid use of readme. Usage: readme <directory> [extensions...]")
        return

    root = Path(ctx.args[0]).expanduser()
    if not root.is_dir():
        print_error(f"Directory '{root}' not found.")
        return
    extensions = {ext.lstrip(".") for ext in ctx.args[1:]}

    files, failures = walk_directory(root, extensions)
    for path, exc in failures:
        print_error(f"Error reading {path}: {exc}")
    if not files:
        print_error(f"No matching files found in '{root}'.")
        return

    with ctx.transcript.locked() as transcript:
        active_model = transcript.model

    request = Transcript(ctx.config.document_model("readme", active_model))
    request.push(Message(DEVELOPER_ROLE, README_PROMPT))
    for path, content in files:
        request.add_user_message(format_file_message(path, content))

    console.print(f"\nFiles used: {[path for path, _ in files]}\n", markup=False)
    result = _ask(ctx, request)
    if result is None:
        print_error("No content received from readme command.")
        return
    result = result.replace("â€¢", "-")

    preview_markdown(result)
    name = read_user_input("\nEnter the README file name to save (without extension): ")
    if not name:
        print_error("Invalid filename. Document not saved.")
        return

    target = READMES_DIR / f"{name}.md"
    if confirm_action(f"Do you want to save this document as '{name}.md'?"):
        READMES_DIR.mkdir(parents=True, exist_ok=True)
        target.write_text(result, encoding="utf-8")
        console.print(f"\nDocument saved to '{target}'\n", markup=False)
    else:
        console.print("Document not saved.\n")


@register("doc", "Generates documentation from the conversation.")
def document_command(ctx: CommandContext) -> None:
    with ctx.transcript.locked() as transcript:
        active_model = transcript.model
        history = [Message(m.role, m.content) for m in transcript.messages if m.role != DEVELOPER_ROLE]

    report_request = Transcript(ctx.config.document_model("report", active_model))
    report_request.push(Message(DEVELOPER_ROLE, REPORT_PROMPT))
    for message in history:
        report_request.push(message)

    report = _ask(ctx, report_request)
    if report is None:
        print_error("No content received in the document report.")
        return

    title_request = Transcript(ctx.config.document_model("title", active_model))
    title_request.push(Message(DEVELOPER_ROLE, TITLE_PROMPT))
    title_request.add_user_message(report)
    title = (_ask(ctx, title_request) or "").strip() or "Report"

    target = REPORTS_DIR / f"{sanitize_title(title)}.md"
    file_contents = f"{title}\n\n{report}"
    preview_markdown(file_contents)

    if confirm_action(f"Do you want to save this document as '{target}'?"):
        REPORTS_DIR.mkdir(parents=True, exist_ok=True)
        target.write_text(file_contents, encoding="utf-8")
        console.print(f"\nDocument saved as '{target}'\n", markup=False)
    else:
        console.print("Document not saved.\n")
