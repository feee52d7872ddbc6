"""Exception types shared by the client and the command layer."""

from __future__ import annotations


class RequestFailed(Exception):
    """A request to an upstream provider did not produce a usable body.

    Covers connection failures, timeouts and non-success HTTP statuses.
    """


class ResponseParseError(RequestFailed):
    """The provider answered, but the body was not the JSON we expected."""

    def __init__(self, message: str, raw: str) -> None:
        super().__init__(f"{message}\n--- raw response ---\n{raw}")
        self.raw = raw


class CommandError(Exception):
    """A command could not complete; the message is shown to the user."""
