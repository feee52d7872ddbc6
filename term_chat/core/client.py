"""HTTP client for the OpenAI and Anthropic endpoints.

Requests are either buffered (a waiting indicator runs while the call is in
flight) or streamed (delta fragments are printed the moment they arrive).
"""

from __future__ import annotations

import json
import logging
import os
from typing import Callable, Dict, List, Optional, Tuple

import requests

from ..utils import ASSISTANT_LABEL, Spinner, console
from .errors import RequestFailed
from .providers import (
    DeltaStreamParser,
    Provider,
    ProviderRequest,
    Shape,
    extract_text,
    parse_json,
)

logger = logging.getLogger(__name__)

DEFAULT_OPENAI_BASE_URL = "https://api.openai.com/v1"
DEFAULT_ANTHROPIC_BASE_URL = "https://api.anthropic.com/v1"
ANTHROPIC_VERSION = "2023-06-01"
DEFAULT_TIMEOUT = 120.0

_PATHS = {
    Shape.RESPONSES: "/responses",
    Shape.CHAT: "/chat/completions",
    Shape.ANTHROPIC: "/messages",
}


def _print_delta(text: str) -> None:
    print(text, end="", flush=True)


class ChatClient:
    """Issue requests built by :mod:`term_chat.core.providers`."""

    def __init__(
        self,
        openai_api_key: Optional[str] = None,
        anthropic_api_key: Optional[str] = None,
        *,
        openai_base_url: Optional[str] = None,
        anthropic_base_url: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.openai_api_key = openai_api_key
        self.anthropic_api_key = anthropic_api_key
        self.openai_base_url = (
            openai_base_url or os.getenv("OPENAI_BASE_URL") or DEFAULT_OPENAI_BASE_URL
        ).rstrip("/")
        self.anthropic_base_url = (
            anthropic_base_url or os.getenv("ANTHROPIC_BASE_URL") or DEFAULT_ANTHROPIC_BASE_URL
        ).rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def openai_enabled(self) -> bool:
        return bool(self.openai_api_key)

    @property
    def anthropic_enabled(self) -> bool:
        return bool(self.anthropic_api_key)

    # ------------------------------------------------------------------
    # Helper methods
    # ------------------------------------------------------------------

    def _headers(self, provider: Provider) -> Dict[str, str]:
        if provider is Provider.ANTHROPIC:
            if not self.anthropic_api_key:
                raise RequestFailed("ANTHROPIC_API_KEY is not set; Anthropic models are unavailable.")
            return {
                "x-api-key": self.anthropic_api_key,
                "anthropic-version": ANTHROPIC_VERSION,
                "Content-Type": "application/json",
            }
        if not self.openai_api_key:
            raise RequestFailed("OPENAI_API_KEY is not set; OpenAI models are unavailable.")
        return {
            "Authorization": f"Bearer {self.openai_api_key}",
            "Content-Type": "application/json",
        }

    def _target(self, shape: Shape) -> Tuple[str, Dict[str, str]]:
        if shape is Shape.ANTHROPIC:
            return self.anthropic_base_url + _PATHS[shape], self._headers(Provider.ANTHROPIC)
        return self.openai_base_url + _PATHS[shape], self._headers(Provider.OPENAI)

    def _send(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        body: Optional[dict] = None,
        stream: bool = False,
    ) -> requests.Response:
        logger.debug("%s %s (stream=%s)", method, url, stream)
        try:
            response = self.session.request(
                method,
                url,
                headers=headers,
                data=json.dumps(body) if body is not None else None,
                stream=stream,
                timeout=self.timeout,
            )
        except requests.Timeout as exc:
            raise RequestFailed(f"request to {url} timed out after {self.timeout:g}s") from exc
        except requests.RequestException as exc:
            raise RequestFailed(f"request to {url} failed: {exc}") from exc

        logger.debug("%s %s -> %s", method, url, response.status_code)
        if not response.ok:
            try:
                detail = response.text
            finally:
                response.close()
            raise RequestFailed(f"HTTP {response.status_code} from {url}: {detail}")
        return response

    def _get_json(self, url: str, provider: Provider) -> dict:
        response = self._send("GET", url, self._headers(provider))
        return parse_json(response.text)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def post(self, request: ProviderRequest) -> str:
        """Send *request* and return the raw response body.

        The waiting indicator is stopped and erased as soon as the body is in
        (or the request fails).
        """
        url, headers = self._target(request.shape)
        with Spinner():
            response = self._send("POST", url, headers, request.to_dict())
            try:
                return response.text
            except requests.RequestException as exc:
                raise RequestFailed(f"reading response from {url} failed: {exc}") from exc

    def complete(self, request: ProviderRequest) -> Optional[str]:
        """Send a buffered request and return the reply text, if there is one."""
        payload = parse_json(self.post(request))
        text = extract_text(payload, request.shape)
        if text is None:
            logger.debug("no reply text in %s response: %s", request.shape.value, payload)
        return text

    def stream(
        self,
        request: ProviderRequest,
        on_delta: Optional[Callable[[str], None]] = None,
    ) -> str:
        """Send a streaming request; print each delta as it arrives.

        Returns all fragments joined, in arrival order. Frames that are not
        delta frames (lifecycle events, ``[DONE]``) are skipped.
        """
        url, headers = self._target(request.shape)
        parser = DeltaStreamParser()
        spinner = Spinner()
        first = True

        def emit(delta: str) -> None:
            nonlocal first
            if first:
                spinner.stop()
                if on_delta is None:
                    console.print(f"\n{ASSISTANT_LABEL}> ", end="")
                first = False
            (on_delta or _print_delta)(delta)

        spinner.start()
        try:
            response = self._send("POST", url, headers, request.to_dict(), stream=True)
            try:
                response.encoding = response.encoding or "utf-8"
                for chunk in response.iter_content(chunk_size=None, decode_unicode=True):
                    for delta in parser.feed(chunk):
                        emit(delta)
                for delta in parser.close():
                    emit(delta)
            except requests.RequestException as exc:
                raise RequestFailed(f"stream from {url} broke off: {exc}") from exc
            finally:
                response.close()
        finally:
            spinner.stop()
        if on_delta is None and not first:
            print("\n")
        return parser.text

    def list_anthropic_models(self) -> List[str]:
        payload = self._get_json(f"{self.anthropic_base_url}/models", Provider.ANTHROPIC)
        data = payload.get("data", []) if isinstance(payload, dict) else []
        return [m["id"] for m in data if isinstance(m, dict) and "id" in m]

    def generate_image(self, model: str, prompt: str) -> List[str]:
        """Ask the images endpoint for a picture; return the image URLs."""
        url = f"{self.openai_base_url}/images/generations"
        with Spinner():
            response = self._send(
                "POST", url, self._headers(Provider.OPENAI), {"model": model, "prompt": prompt}
            )
            payload = parse_json(response.text)
        data = payload.get("data", []) if isinstance(payload, dict) else []
        return [item["url"] for item in data if isinstance(item, dict) and "url" in item]
