"""Sends a finished reply and records it in conversation memory."""

import logging
from typing import Awaitable, Callable

from paimon.config import MAX_REPLY_CHARS
from paimon.memory import ConversationStore

log = logging.getLogger("paimon.dispatcher")


class ReplyDispatcher:
    """Trims, sends and remembers Paimon's replies."""

    def __init__(self, store: ConversationStore) -> None:
        self.store = store

    async def dispatch(
        self,
        user_id: str,
        text: str,
        send: Callable[[str], Awaitable[object]],
    ) -> str:
        """
        Trim to the Discord limit, send, then store as the user's latest
        assistant message.  Send failures propagate and nothing is stored;
        nothing is retried.
        """
        text = text[:MAX_REPLY_CHARS]
        log.info("📤 Reply to %s (%d chars): %s", user_id, len(text), text[:100])
        await send(text)
        self.store.append_assistant_message(user_id, text)
        return text
