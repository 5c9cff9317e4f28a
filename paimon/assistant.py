"""
Core assistant orchestrator for Paimon.

Handles one incoming chat message start to finish:
  1. Drop messages that are not for us (bots, @everyone, no mention).
  2. Save the user message to short-term history.
  3. Show the typing indicator.
  4. Classify the intent and ask the router for a reply.
  5. Store and send the reply.

Anything that fails in 3-5 is logged and answered with a fixed apology,
so one bad message never takes the bot down.

Messages from the same user are handled one at a time (per-user lock),
so a follow-up always sees the reply to the message before it.  Messages
from different users still run concurrently.
"""

import asyncio
import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Awaitable, Callable

from paimon.api_client import GeminiClient, GroqClient
from paimon.config import APOLOGY_TEXT
from paimon.dispatcher import ReplyDispatcher
from paimon.intent import classify
from paimon.memory import ConversationStore
from paimon.personality import Personality
from paimon.router import CompletionRouter

log = logging.getLogger("paimon.assistant")


@dataclass(slots=True)
class IncomingMessage:
    """Platform-neutral view of a chat message."""

    author_id: str
    author_is_bot: bool
    mentions_everyone: bool
    mentions_bot: bool
    content: str
    reply: Callable[[str], Awaitable[object]]
    send_typing: Callable[[], Awaitable[object]]


def should_respond(event: IncomingMessage) -> bool:
    return (
        not event.author_is_bot
        and not event.mentions_everyone
        and event.mentions_bot
    )


class Assistant:
    """Paimon: ties memory, router and dispatcher together."""

    def __init__(
        self,
        primary: GeminiClient | None = None,
        secondary: GroqClient | None = None,
        store: ConversationStore | None = None,
        personality: Personality | None = None,
    ) -> None:
        self.store = store or ConversationStore()
        self.primary = primary or GeminiClient()
        self.secondary = secondary or GroqClient()
        self.router = CompletionRouter(
            self.store, self.primary, self.secondary, personality
        )
        self.dispatcher = ReplyDispatcher(self.store)
        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    # ------------------------------------------------------------------
    # Main entry point
    # ------------------------------------------------------------------

    async def handle(self, event: IncomingMessage) -> str | None:
        """Process one message.  Returns the text sent, or None if ignored."""
        if not should_respond(event):
            return None

        user_id = event.author_id
        async with self._locks[user_id]:
            log.info("📩 %s: %s", user_id, event.content[:100])
            self.store.append_user_message(user_id, event.content)

            try:
                await self._typing(event)
                mode = classify(event.content)
                reply = await self.router.complete(user_id, event.content, mode)
                return await self.dispatcher.dispatch(user_id, reply, event.reply)
            except Exception:
                log.exception("Bot error while answering %s", user_id)
                await event.reply(APOLOGY_TEXT)
                return APOLOGY_TEXT

    async def _typing(self, event: IncomingMessage) -> None:
        """Best-effort typing indicator; failure never blocks the reply."""
        try:
            await event.send_typing()
        except Exception as e:
            log.warning("Typing indicator failed: %s", e)

    # ------------------------------------------------------------------
    # Cleanup
    # ------------------------------------------------------------------

    def shutdown(self) -> None:
        """Release resources."""
        self.primary.close()
        self.secondary.close()
