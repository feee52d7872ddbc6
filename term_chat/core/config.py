"""Application configuration and credentials.

The config lives as JSON in ``~/.config/tc/tc_config.json``. A missing file
triggers an interactive interview; an unreadable one falls back to defaults.
The loaded :class:`Config` value is passed explicitly to the REPL and every
command handler.
"""

from __future__ import annotations

import json
import logging
import os
import re
import sys
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import questionary  # type: ignore

from ..utils import console, print_error
from .prompts import DEVELOPER_PROMPT

logger = logging.getLogger(__name__)

OPENAI_MODELS = [
    "gpt-4o",
    "gpt-4o-mini",
    "gpt-4o-search-preview",
    "o1",
    "o3-mini",
]

DEFAULT_MODEL = "gpt-4o-mini"

# Fields that are derived at start-up and never written to disk.
RUNTIME_FIELDS = {"all_models", "openai_enabled", "anthropic_enabled"}


@dataclass
class Config:
    model: str = DEFAULT_MODEL
    dev_message: str = DEVELOPER_PROMPT
    enable_streaming: bool = False
    preview_md: bool = True
    message_boxes_enabled: bool = False
    request_timeout: float = 120.0
    max_tokens: int = 4096
    report_model: str = "o3-mini"
    title_model: str = "gpt-4o"
    readme_model: str = "o3-mini"

    all_models: List[str] = field(default_factory=list)
    openai_enabled: bool = True
    anthropic_enabled: bool = False

    CONFIG_PATH = Path.home() / ".config" / "tc" / "tc_config.json"

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if k not in RUNTIME_FIELDS}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        if not isinstance(data, dict):
            raise ValueError(f"config must be a JSON object, not {type(data).__name__}")
        known = {f.name for f in fields(cls)} - RUNTIME_FIELDS
        return cls(**{k: v for k, v in data.items() if k in known})

    def document_model(self, kind: str, fallback: str) -> str:
        """Model for a one-off ``report``/``title``/``readme`` request.

        The defaults are OpenAI models; without OpenAI access the active
        conversation model is used instead.
        """
        if not self.openai_enabled:
            return fallback
        return getattr(self, f"{kind}_model")


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------


def read_user_input(prompt: str) -> str:
    return console.input(prompt).strip()


def confirm_action(prompt: str, default: bool = False) -> bool:
    answer = questionary.confirm(prompt, default=default).ask()
    return bool(answer)


# ---------------------------------------------------------------------------
# Credentials
# ---------------------------------------------------------------------------


def _key_from_zshrc(name: str) -> Optional[str]:
    """Fallback: read an exported key from ~/.zshrc (convenience for macOS users)."""
    zshrc_path = Path.home() / ".zshrc"
    if not zshrc_path.exists():
        return None
    pattern = re.compile(rf"(?:export\s+)?{name}\s*=\s*['\"]?([^'\"\n]+)['\"]?")
    match = pattern.search(zshrc_path.read_text(errors="replace"))
    if not match:
        return None
    key = match.group(1).strip()
    os.environ[name] = key  # inject for downstream
    return key


def resolve_api_keys() -> Tuple[Optional[str], Optional[str]]:
    """Return ``(openai_key, anthropic_key)``; exit if neither is available."""
    openai_key = os.getenv("OPENAI_API_KEY") or _key_from_zshrc("OPENAI_API_KEY")
    anthropic_key = os.getenv("ANTHROPIC_API_KEY") or _key_from_zshrc("ANTHROPIC_API_KEY")
    if not openai_key and not anthropic_key:
        sys.stderr.write(
            "Error: neither OPENAI_API_KEY nor ANTHROPIC_API_KEY is set.\n"
            "(Tried reading from environment and ~/.zshrc)\n"
        )
        sys.exit(1)
    return openai_key, anthropic_key


# ---------------------------------------------------------------------------
# Load / save
# ---------------------------------------------------------------------------


def _fallback_model(all_models: List[str]) -> str:
    if not all_models or DEFAULT_MODEL in all_models:
        return DEFAULT_MODEL
    return all_models[0]


def load_config(
    all_models: List[str], openai_enabled: bool = True, anthropic_enabled: bool = False
) -> Config:
    path = Config.CONFIG_PATH
    if path.exists():
        try:
            config = Config.from_dict(json.loads(path.read_text(encoding="utf-8")))
        except (OSError, ValueError, TypeError) as exc:
            logger.debug("config at %s unreadable: %s", path, exc)
            console.print("\nFailed to load config. Using default values.")
            config = Config()
    elif confirm_action("No config file found. Would you like to set one up?"):
        config = Config(all_models=list(all_models))
        config_interview(config)
        console.print(config.to_dict(), markup=False)
        write_config(config)
    else:
        console.print("Using default values.")
        config = Config()

    config.all_models = list(all_models)
    config.openai_enabled = openai_enabled
    config.anthropic_enabled = anthropic_enabled
    if all_models and config.model not in all_models:
        fallback = _fallback_model(all_models)
        console.print(f"\nInvalid model found in config. Using default model: {fallback}")
        config.model = fallback
    return config


def config_interview(config: Config) -> Config:
    """Ask the user for every setting and update *config* in place."""
    if config.all_models:
        choice = questionary.select(
            "Select a model:",
            choices=config.all_models,
            default=config.model if config.model in config.all_models else None,
        ).ask()
        if choice:
            config.model = choice
        else:
            print_error(f"Invalid selection. Keeping model: {config.model}")

    config.enable_streaming = confirm_action(
        "Would you like to enable streaming for eligible models (experimental)?",
        default=config.enable_streaming,
    )
    config.preview_md = confirm_action(
        "Would you like to display non-streamed model responses as rendered markdown?",
        default=config.preview_md,
    )
    config.message_boxes_enabled = confirm_action(
        "Would you like replies drawn inside message boxes?",
        default=config.message_boxes_enabled,
    )
    if confirm_action("Would you like to write a custom developer message for the AI?"):
        prompt = questionary.text("Developer message:", default=config.dev_message).ask()
        if prompt and prompt.strip():
            config.dev_message = prompt.strip()
    return config


def write_config(config: Config, ask: bool = True) -> Optional[Path]:
    """Persist *config*; with *ask* the user confirms the destination first."""
    path = Config.CONFIG_PATH
    if ask and not confirm_action(f"Save to {path}?", default=True):
        return None
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(config.to_dict(), indent=2), encoding="utf-8")
    logger.debug("config written to %s", path)
    return path


def delete_config() -> bool:
    """Delete the config file; False when there was nothing to delete."""
    path = Config.CONFIG_PATH
    if not path.exists():
        return False
    path.unlink()
    return True
