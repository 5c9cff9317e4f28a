"""HTTP backends: request shape, response parsing, error classification."""

import json
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from types import SimpleNamespace

import pytest
import requests

from paimon.api_client import BackendError, ErrorKind, GeminiClient, GroqClient


def _response(status: int, body) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp.url = "https://example.test/"
    resp._content = (body if isinstance(body, str) else json.dumps(body)).encode("utf-8")
    resp.encoding = "utf-8"
    return resp


@pytest.fixture
def post(monkeypatch):
    """Patch Session.post; set .response or .error, read .calls."""
    state = SimpleNamespace(response=None, error=None, calls=[])

    def fake_post(session, url, **kwargs):
        state.calls.append({"url": url, **kwargs})
        if state.error is not None:
            raise state.error
        return state.response

    monkeypatch.setattr(requests.Session, "post", fake_post)
    return state


# ----------------------------------------------------------------------
# Gemini
# ----------------------------------------------------------------------


def test_gemini_request_and_text(post):
    post.response = _response(
        200,
        {"candidates": [{"content": {"parts": [{"text": "Hi"}, {"text": "~!"}]}}]},
    )
    client = GeminiClient(api_key="g-key", model="gemini-test", base_url="https://gem.test/v1beta/")

    assert client.generate_content("persona", "hello") == "Hi~!"

    call = post.calls[0]
    assert call["url"] == "https://gem.test/v1beta/models/gemini-test:generateContent"
    assert call["headers"] == {"x-goog-api-key": "g-key"}
    assert call["json"] == {
        "contents": [
            {"role": "user", "parts": [{"text": "persona"}, {"text": "hello"}]}
        ]
    }


@pytest.mark.parametrize(
    "body",
    [{}, {"candidates": []}, {"candidates": [{"finishReason": "SAFETY"}]}],
)
def test_gemini_without_text_returns_empty(post, body):
    post.response = _response(200, body)
    assert GeminiClient(api_key="k").generate_content("p", "u") == ""


def test_gemini_429_is_quota(post):
    post.response = _response(429, {"error": {"status": "RESOURCE_EXHAUSTED"}})

    with pytest.raises(BackendError) as exc_info:
        GeminiClient(api_key="k").generate_content("p", "u")

    err = exc_info.value
    assert err.kind is ErrorKind.QUOTA_EXCEEDED
    assert err.status_code == 429
    assert err.backend == "gemini"


@pytest.mark.parametrize("status", [400, 403, 500])
def test_gemini_other_status_is_other(post, status):
    post.response = _response(status, {"error": {}})

    with pytest.raises(BackendError) as exc_info:
        GeminiClient(api_key="k").generate_content("p", "u")

    assert exc_info.value.kind is ErrorKind.OTHER
    assert exc_info.value.status_code == status


@pytest.mark.parametrize(
    "error", [requests.ConnectionError("refused"), requests.Timeout("slow")]
)
def test_transport_errors_are_other(post, error):
    post.error = error

    with pytest.raises(BackendError) as exc_info:
        GeminiClient(api_key="k").generate_content("p", "u")

    assert exc_info.value.kind is ErrorKind.OTHER
    assert exc_info.value.status_code is None


def test_non_json_body_is_other(post):
    post.response = _response(200, "<html>oops</html>")

    with pytest.raises(BackendError) as exc_info:
        GeminiClient(api_key="k").generate_content("p", "u")
    assert exc_info.value.kind is ErrorKind.OTHER


# ----------------------------------------------------------------------
# Groq
# ----------------------------------------------------------------------


def test_groq_request_and_text(post):
    post.response = _response(
        200, {"choices": [{"message": {"role": "assistant", "content": "hihi~!"}}]}
    )
    client = GroqClient(api_key="q-key", model="llama-test", base_url="https://groq.test/openai/v1")
    history = [{"role": "user", "content": "hello"}]

    assert client.chat_complete("persona", history) == "hihi~!"

    call = post.calls[0]
    assert call["url"] == "https://groq.test/openai/v1/chat/completions"
    assert call["headers"] == {"Authorization": "Bearer q-key"}
    assert call["json"] == {
        "model": "llama-test",
        "messages": [
            {"role": "system", "content": "persona"},
            {"role": "user", "content": "hello"},
        ],
    }


@pytest.mark.parametrize(
    "body",
    [
        {"choices": []},
        {"choices": [{"message": {"content": None}}]},
        {"choices": [{"message": {}}]},
    ],
)
def test_groq_missing_content_returns_empty(post, body):
    post.response = _response(200, body)
    assert GroqClient(api_key="k").chat_complete("p", []) == ""


def test_groq_errors_raise(post):
    post.response = _response(503, "unavailable")

    with pytest.raises(BackendError) as exc_info:
        GroqClient(api_key="k").chat_complete("p", [])

    assert exc_info.value.backend == "groq"
    assert exc_info.value.status_code == 503


def test_session_is_used_by_one_thread_at_a_time(monkeypatch):
    state = SimpleNamespace(active=0, peak=0)
    guard = threading.Lock()

    def slow_post(session, url, **kwargs):
        with guard:
            state.active += 1
            state.peak = max(state.peak, state.active)
        time.sleep(0.02)
        with guard:
            state.active -= 1
        return _response(200, {"choices": [{"message": {"content": "ok"}}]})

    monkeypatch.setattr(requests.Session, "post", slow_post)
    client = GroqClient(api_key="k")

    with ThreadPoolExecutor(max_workers=4) as pool:
        replies = list(pool.map(lambda _: client.chat_complete("p", []), range(8)))

    assert replies == ["ok"] * 8
    assert state.peak == 1
