"""Translation between a transcript and each upstream wire shape.

Everything here is pure: request bodies are built from a transcript, and
response bodies are turned back into reply text. No I/O happens here.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from .errors import ResponseParseError
from .transcript import DEVELOPER_ROLE, Transcript

logger = logging.getLogger(__name__)

DEFAULT_MAX_TOKENS = 4096
SEARCH_PREVIEW_MODEL = "gpt-4o-search-preview"

FRAME_DELIMITER = "data: "
EVENT_MARKER = "event:"
_EVENT_LINE = re.compile(r"(?:^|\n)\s*" + EVENT_MARKER)
EVENT_BOUNDARY = "\n\n"
# Position right after the line break that opens a data or event line
_FRAME_START = re.compile(r"(?:^|\n)(?=" + re.escape(FRAME_DELIMITER) + "|" + EVENT_MARKER + ")")


class Shape(str, Enum):
    RESPONSES = "responses"
    CHAT = "chat"
    ANTHROPIC = "anthropic"


class Provider(str, Enum):
    OPENAI = "openai"
    ANTHROPIC = "anthropic"


# ---------------------------------------------------------------------------
# Request bodies
# ---------------------------------------------------------------------------


@dataclass
class ResponsesRequest:
    """OpenAI Responses API body."""

    model: str
    input: List[Dict[str, str]]
    stream: bool = False

    shape = Shape.RESPONSES

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ChatRequest:
    """OpenAI Chat Completions body."""

    model: str
    messages: List[Dict[str, str]]
    stream: bool = False

    shape = Shape.CHAT

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class AnthropicRequest:
    """Anthropic Messages API body; the developer message travels as ``system``."""

    model: str
    messages: List[Dict[str, str]] = field(default_factory=list)
    system: Optional[str] = None
    max_tokens: int = DEFAULT_MAX_TOKENS

    shape = Shape.ANTHROPIC

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "model": self.model,
            "messages": self.messages,
            "max_tokens": self.max_tokens,
        }
        if self.system is not None:
            body["system"] = self.system
        return body


ProviderRequest = Union[ResponsesRequest, ChatRequest, AnthropicRequest]


def to_openai_responses_body(transcript: Transcript) -> ResponsesRequest:
    return ResponsesRequest(
        model=transcript.model,
        input=[m.to_dict() for m in transcript.messages],
        stream=transcript.stream,
    )


def to_openai_chat_body(transcript: Transcript) -> ChatRequest:
    return ChatRequest(
        model=transcript.model,
        messages=[m.to_dict() for m in transcript.messages],
        stream=transcript.stream,
    )


def to_anthropic_body(transcript: Transcript, max_tokens: int = DEFAULT_MAX_TOKENS) -> AnthropicRequest:
    developer = transcript.developer_message
    return AnthropicRequest(
        model=transcript.model,
        system=developer.content if developer is not None else None,
        messages=[m.to_dict() for m in transcript.messages if m.role != DEVELOPER_ROLE],
        max_tokens=max_tokens,
    )


def build_request(
    transcript: Transcript, shape: Shape, max_tokens: int = DEFAULT_MAX_TOKENS
) -> ProviderRequest:
    if shape is Shape.ANTHROPIC:
        return to_anthropic_body(transcript, max_tokens)
    if shape is Shape.CHAT:
        return to_openai_chat_body(transcript)
    return to_openai_responses_body(transcript)


# ---------------------------------------------------------------------------
# Shape selection
# ---------------------------------------------------------------------------


def provider_for_model(model: str) -> Provider:
    return Provider.ANTHROPIC if "claude" in model.lower() else Provider.OPENAI


def select_shape(model: str, streaming_enabled: bool) -> Shape:
    """Shape for an interactive chat turn.

    Anthropic models and the search-preview model are always buffered; the
    remaining OpenAI models stream through the Responses API when streaming
    is enabled and fall back to buffered Chat Completions otherwise.
    """
    if provider_for_model(model) is Provider.ANTHROPIC:
        return Shape.ANTHROPIC
    if not streaming_enabled or model.lower() == SEARCH_PREVIEW_MODEL:
        return Shape.CHAT
    return Shape.RESPONSES


def is_streamed(shape: Shape, streaming_enabled: bool) -> bool:
    return shape is Shape.RESPONSES and streaming_enabled


def document_shape(model: str) -> Shape:
    """Shape for one-off buffered requests (reports, titles, readmes)."""
    if provider_for_model(model) is Provider.ANTHROPIC:
        return Shape.ANTHROPIC
    return Shape.RESPONSES


# ---------------------------------------------------------------------------
# Response parsing
# ---------------------------------------------------------------------------


def parse_json(raw: str) -> Any:
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise ResponseParseError(f"could not parse provider response: {exc}", raw) from exc


def _first(items: Any) -> Any:
    if isinstance(items, list) and items:
        return items[0]
    return None


def extract_text(payload: Any, shape: Shape) -> Optional[str]:
    """Return the reply text of *payload*, or None when there is none.

    An absent reply is a normal outcome (a filtered response, a reasoning-only
    output) so nothing here raises on an unexpected layout.
    """
    if not isinstance(payload, dict):
        return None

    if shape is Shape.RESPONSES:
        outputs = payload.get("output")
        if not isinstance(outputs, list):
            return None
        for output in outputs:
            if not isinstance(output, dict) or output.get("type") != "message":
                continue
            block = _first(output.get("content"))
            text = block.get("text") if isinstance(block, dict) else None
            return text if isinstance(text, str) else None
        return None

    if shape is Shape.CHAT:
        choice = _first(payload.get("choices"))
        message = choice.get("message") if isinstance(choice, dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        return content if isinstance(content, str) else None

    block = _first(payload.get("content"))
    text = block.get("text") if isinstance(block, dict) else None
    return text if isinstance(text, str) else None


def parse_delta(fragment: str) -> Optional[str]:
    """Return the ``delta`` text of one stream frame, or None for other frames."""
    body = _EVENT_LINE.split(fragment, 1)[0].strip()
    if not body:
        return None
    try:
        data = json.loads(body)
    except ValueError:
        logger.debug("skipping non-JSON stream frame: %r", body[:80])
        return None
    delta = data.get("delta") if isinstance(data, dict) else None
    return delta if isinstance(delta, str) else None


class DeltaStreamParser:
    """Incrementally split a server-sent event stream into delta fragments.

    Network chunks do not line up with events, so the buffer is first cut at
    blank lines (``\\n\\n`` or ``\\r\\n\\r\\n``). Text after the last blank
    line is held back, except for whole frames that a later ``event:`` or
    ``data: `` line has already terminated. ``close()`` flushes the rest.
    """

    def __init__(self) -> None:
        self._buffer = ""
        self.fragments: List[str] = []

    @property
    def text(self) -> str:
        return "".join(self.fragments)

    def feed(self, chunk: str) -> List[str]:
        self._buffer = (self._buffer + chunk).replace("\r\n", "\n")
        events = self._buffer.split(EVENT_BOUNDARY)
        pending = events.pop()
        starts = [m.end() for m in _FRAME_START.finditer(pending)]
        if starts and starts[-1] > 0:
            events.append(pending[:starts[-1]])
            pending = pending[starts[-1]:]
        self._buffer = pending
        return self._collect(events)

    def close(self) -> List[str]:
        events = [self._buffer]
        self._buffer = ""
        return self._collect(events)

    def _collect(self, events: List[str]) -> List[str]:
        found: List[str] = []
        for event in events:
            for piece in event.split(FRAME_DELIMITER):
                delta = parse_delta(piece)
                if delta is not None:
                    found.append(delta)
        self.fragments.extend(found)
        return found
