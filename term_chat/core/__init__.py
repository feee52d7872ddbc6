from .errors import CommandError, RequestFailed, ResponseParseError
from .transcript import Message, SharedTranscript, Transcript, DEVELOPER_ROLE
from .config import Config, OPENAI_MODELS

__all__ = [
    "CommandError",
    "RequestFailed",
    "ResponseParseError",
    "Message",
    "SharedTranscript",
    "Transcript",
    "DEVELOPER_ROLE",
    "Config",
    "OPENAI_MODELS",
]
