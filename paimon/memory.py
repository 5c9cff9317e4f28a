"""
Conversation memory for Paimon.

Two maps, both keyed by Discord user id:
  1. History:    the last HISTORY_LIMIT messages per user, oldest first.
  2. Last reply: the most recent assistant text per user, used by
                 correction mode.

Everything lives in process memory and is gone on restart.  Entries are
created on a user's first message and never removed, so the number of
users tracked grows for the lifetime of the process while each user's
history stays bounded.
"""

from collections import deque
from dataclasses import dataclass
from enum import Enum

from paimon.config import HISTORY_LIMIT


class Role(Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


@dataclass(frozen=True, slots=True)
class Message:
    role: Role
    content: str

    def as_dict(self) -> dict:
        """OpenAI-style message dict."""
        return {"role": self.role.value, "content": self.content}


class ConversationStore:
    """Per-user bounded history + last-reply cache."""

    def __init__(self, limit: int = HISTORY_LIMIT) -> None:
        self._limit = limit
        self._history: dict[str, deque[Message]] = {}
        self._last_reply: dict[str, str] = {}

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def append_user_message(self, user_id: str, text: str) -> None:
        self._append(user_id, Message(Role.USER, text))

    def append_assistant_message(self, user_id: str, text: str) -> None:
        """Append the reply to history and remember it as the last reply."""
        self._append(user_id, Message(Role.ASSISTANT, text))
        self._last_reply[user_id] = text

    def _append(self, user_id: str, message: Message) -> None:
        history = self._history.get(user_id)
        if history is None:
            # maxlen evicts from the left once the bound is hit
            history = self._history[user_id] = deque(maxlen=self._limit)
        history.append(message)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_history(self, user_id: str) -> tuple[Message, ...]:
        """Return the user's messages in chronological order."""
        return tuple(self._history.get(user_id, ()))

    def get_last_reply(self, user_id: str) -> str | None:
        return self._last_reply.get(user_id)

    def user_count(self) -> int:
        return len(self._history)
