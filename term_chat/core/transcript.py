"""Conversation transcript and the lock-guarded handle shared with commands."""

from __future__ import annotations

import copy
import json
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

DEVELOPER_ROLE = "developer"
USER_ROLE = "user"
ASSISTANT_ROLE = "assistant"


@dataclass
class Message:
    role: str
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Message":
        return cls(role=str(data["role"]), content=str(data.get("content", "")))


class Transcript:
    """Ordered conversation state: active model, messages and stream flag.

    The first message, when present, is the single ``developer`` message.
    Callers that ``clear()`` the transcript are expected to push it back.
    """

    FILENAME_SUFFIX = ".json"
    CONVERSATIONS_DIR = Path("conversations")

    def __init__(
        self,
        model: str,
        stream: bool = False,
        messages: Optional[List[Message]] = None,
    ) -> None:
        self.model = model
        self.stream = stream
        self.messages: List[Message] = list(messages or [])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Transcript):
            return NotImplemented
        return (
            self.model == other.model
            and self.stream == other.stream
            and self.messages == other.messages
        )

    def __repr__(self) -> str:
        return f"Transcript(model={self.model!r}, stream={self.stream}, messages={len(self.messages)})"

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def push(self, message: Message) -> None:
        self.messages.append(message)

    def add_user_message(self, content: str) -> None:
        self.push(Message(USER_ROLE, content))

    def add_assistant_message(self, content: str) -> None:
        self.push(Message(ASSISTANT_ROLE, content))

    def clear(self) -> None:
        self.messages.clear()

    def set_stream(self, stream: bool) -> None:
        self.stream = stream

    @property
    def developer_message(self) -> Optional[Message]:
        return next((m for m in self.messages if m.role == DEVELOPER_ROLE), None)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            "model": self.model,
            "input": [m.to_dict() for m in self.messages],
            "stream": self.stream,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Transcript":
        if not isinstance(data, dict) or "model" not in data:
            raise ValueError("conversation file is missing the 'model' field")
        raw_messages = data.get("input", data.get("messages", []))
        try:
            messages = [Message.from_dict(m) for m in raw_messages]
        except (KeyError, TypeError, AttributeError) as exc:
            raise ValueError(f"conversation file has a malformed message: {exc}") from exc
        return cls(
            model=str(data["model"]),
            stream=bool(data.get("stream", False)),
            messages=messages,
        )

    @classmethod
    def path_for(cls, name: str) -> Path:
        return cls.CONVERSATIONS_DIR / f"{name}{cls.FILENAME_SUFFIX}"

    def save(self, name: str) -> Path:
        self.CONVERSATIONS_DIR.mkdir(parents=True, exist_ok=True)
        path = self.path_for(name)
        path.write_text(json.dumps(self.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
        return path

    @classmethod
    def load(cls, name: str) -> "Transcript":
        path = cls.path_for(name)
        if not path.exists():
            raise FileNotFoundError(f"Conversation '{name}' does not exist ({path}).")
        return cls.from_dict(json.loads(path.read_text(encoding="utf-8")))


class SharedTranscript:
    """The one transcript of the REPL, guarded by a mutex.

    Only one command or chat turn is ever in flight; the lock exists so that
    handlers hold the transcript just while they read or mutate it.
    """

    def __init__(self, transcript: Transcript) -> None:
        self._transcript = transcript
        self._lock = threading.Lock()

    @contextmanager
    def locked(self) -> Iterator[Transcript]:
        with self._lock:
            yield self._transcript

    def swap(self, transcript: Transcript) -> None:
        """Replace the whole transcript in a single step."""
        with self._lock:
            self._transcript = transcript

    def snapshot(self) -> Transcript:
        with self._lock:
            return copy.deepcopy(self._transcript)
