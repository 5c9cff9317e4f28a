"""
HTTP clients for the two completion backends.

  GeminiClient  : primary.  Google Generative Language `generateContent`.
  GroqClient    : secondary.  Groq's OpenAI-compatible /chat/completions.

Uses raw `requests`, no SDK dependencies.  Calls are blocking; the router
runs them in worker threads, so each client serializes use of its
Session with a lock (requests does not promise a thread-safe Session).

Every failure is raised as BackendError so the router can tell a quota
hit (fall back) from anything else (propagate).
"""

import threading
from enum import Enum

import requests

from paimon.config import (
    BACKEND_TIMEOUT,
    GEMINI_API_BASE,
    GEMINI_API_KEY,
    GEMINI_MODEL,
    GROQ_API_BASE,
    GROQ_API_KEY,
    GROQ_MODEL,
    QUOTA_STATUS_CODE,
)


class ErrorKind(Enum):
    QUOTA_EXCEEDED = "quota_exceeded"
    OTHER = "other"


class BackendError(Exception):
    """A completion backend call failed."""

    def __init__(
        self,
        backend: str,
        message: str,
        *,
        kind: ErrorKind = ErrorKind.OTHER,
        status_code: int | None = None,
    ) -> None:
        super().__init__(f"{backend}: {message}")
        self.backend = backend
        self.kind = kind
        self.status_code = status_code

    @classmethod
    def from_status(cls, backend: str, status_code: int, body: str = "") -> "BackendError":
        kind = (
            ErrorKind.QUOTA_EXCEEDED
            if status_code == QUOTA_STATUS_CODE
            else ErrorKind.OTHER
        )
        return cls(
            backend,
            f"HTTP {status_code} {body[:200]}".rstrip(),
            kind=kind,
            status_code=status_code,
        )


class _HTTPBackend:
    """Shared session handling + error mapping."""

    name = "backend"

    def __init__(self, timeout: float = BACKEND_TIMEOUT) -> None:
        self._timeout = timeout
        self._session = requests.Session()
        # Keep-alive for lower latency on repeated calls.
        self._session.headers.update({"Content-Type": "application/json"})
        self._lock = threading.Lock()

    def _post(self, url: str, payload: dict, headers: dict) -> dict:
        try:
            with self._lock:
                resp = self._session.post(
                    url, json=payload, headers=headers, timeout=self._timeout
                )
            resp.raise_for_status()
            return resp.json()
        except requests.HTTPError as e:
            raise BackendError.from_status(
                self.name, e.response.status_code, e.response.text
            ) from e
        except requests.ConnectionError as e:
            raise BackendError(self.name, "cannot reach server") from e
        except requests.Timeout as e:
            raise BackendError(self.name, "request timed out") from e
        except ValueError as e:
            raise BackendError(self.name, "response was not JSON") from e

    def close(self) -> None:
        self._session.close()


class GeminiClient(_HTTPBackend):
    """Thin wrapper around Gemini models/{model}:generateContent."""

    name = "gemini"

    def __init__(
        self,
        api_key: str = GEMINI_API_KEY,
        model: str = GEMINI_MODEL,
        base_url: str = GEMINI_API_BASE,
        timeout: float = BACKEND_TIMEOUT,
    ) -> None:
        super().__init__(timeout)
        self.model = model
        self._api_key = api_key
        self._endpoint = f"{base_url.rstrip('/')}/models/{model}:generateContent"

    def generate_content(self, system_text: str, user_text: str) -> str:
        """
        One-shot completion.  The persona and the user's text go in as two
        parts of a single user turn.  Returns "" when the model produced
        no text.
        """
        payload = {
            "contents": [
                {
                    "role": "user",
                    "parts": [{"text": system_text}, {"text": user_text}],
                }
            ]
        }
        data = self._post(
            self._endpoint, payload, headers={"x-goog-api-key": self._api_key}
        )
        return _gemini_text(data)


class GroqClient(_HTTPBackend):
    """Thin wrapper around Groq /openai/v1/chat/completions."""

    name = "groq"

    def __init__(
        self,
        api_key: str = GROQ_API_KEY,
        model: str = GROQ_MODEL,
        base_url: str = GROQ_API_BASE,
        timeout: float = BACKEND_TIMEOUT,
    ) -> None:
        super().__init__(timeout)
        self.model = model
        self._api_key = api_key
        self._endpoint = f"{base_url.rstrip('/')}/chat/completions"

    def chat_complete(self, system_text: str, messages: list[dict]) -> str:
        """
        Chat completion with a system message prepended to `messages`.
        Returns "" when the first choice carries no content.
        """
        payload = {
            "model": self.model,
            "messages": [{"role": "system", "content": system_text}, *messages],
        }
        data = self._post(
            self._endpoint,
            payload,
            headers={"Authorization": f"Bearer {self._api_key}"},
        )
        try:
            return data["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, TypeError):
            return ""


def _gemini_text(data: dict) -> str:
    """Join the text parts of the first candidate."""
    try:
        parts = data["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError):
        return ""
    return "".join(p.get("text", "") for p in parts if isinstance(p, dict))
