"""
Shared fakes for the Paimon tests.

The fake backends stand in for GeminiClient / GroqClient: same method
names, synchronous (the router runs them in a thread), and they record
every call so tests can check what each backend was sent.
"""

import pytest

from paimon.assistant import Assistant, IncomingMessage


class FakeGemini:
    model = "fake-gemini"

    def __init__(self, reply: str = "Hi~!", error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.calls: list[tuple[str, str]] = []
        self.closed = False

    def generate_content(self, system_text: str, user_text: str) -> str:
        self.calls.append((system_text, user_text))
        if self.error is not None:
            raise self.error
        return self.reply

    def close(self) -> None:
        self.closed = True


class FakeGroq:
    model = "fake-groq"

    def __init__(self, reply: str = "Paimon thinks so, hihi~!", error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.calls: list[tuple[str, list[dict]]] = []
        self.closed = False

    def chat_complete(self, system_text: str, messages: list[dict]) -> str:
        self.calls.append((system_text, list(messages)))
        if self.error is not None:
            raise self.error
        return self.reply

    def close(self) -> None:
        self.closed = True


class FakeChannel:
    """Collects what the bot would have posted."""

    def __init__(self, fail_typing: bool = False, fail_reply: bool = False) -> None:
        self.sent: list[str] = []
        self.typing_count = 0
        self.fail_typing = fail_typing
        self.fail_reply = fail_reply

    async def reply(self, text: str) -> None:
        if self.fail_reply:
            self.fail_reply = False  # only the first send fails
            raise RuntimeError("send failed")
        self.sent.append(text)

    async def send_typing(self) -> None:
        self.typing_count += 1
        if self.fail_typing:
            raise RuntimeError("typing failed")


def make_event(
    content: str,
    channel: FakeChannel,
    *,
    author_id: str = "1001",
    author_is_bot: bool = False,
    mentions_everyone: bool = False,
    mentions_bot: bool = True,
) -> IncomingMessage:
    return IncomingMessage(
        author_id=author_id,
        author_is_bot=author_is_bot,
        mentions_everyone=mentions_everyone,
        mentions_bot=mentions_bot,
        content=content,
        reply=channel.reply,
        send_typing=channel.send_typing,
    )


@pytest.fixture
def gemini() -> FakeGemini:
    return FakeGemini()


@pytest.fixture
def groq() -> FakeGroq:
    return FakeGroq()


@pytest.fixture
def channel() -> FakeChannel:
    return FakeChannel()


@pytest.fixture
def assistant(gemini, groq) -> Assistant:
    return Assistant(primary=gemini, secondary=groq)
