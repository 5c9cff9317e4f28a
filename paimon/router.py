"""
Completion router for Paimon.

Picks a backend for one turn and returns plain reply text:

  CORRECTION + cached last reply
      -> Groq with the correction persona and only the current message.
  NORMAL (or CORRECTION with nothing to correct)
      -> Gemini with the normal persona and the current message.
      -> on a quota error only: Groq with the fallback persona and the
         user's whole rolling history.

Any other backend error propagates to the caller.  Empty completions are
replaced with a per-branch placeholder.  Output is capped at
MAX_REPLY_CHARS.
"""

import asyncio
import logging

from paimon.api_client import BackendError, ErrorKind, GeminiClient, GroqClient
from paimon.config import (
    CORRECTION_PLACEHOLDER,
    FALLBACK_PLACEHOLDER,
    MAX_REPLY_CHARS,
    PRIMARY_PLACEHOLDER,
)
from paimon.memory import ConversationStore
from paimon.personality import Mode, Personality

log = logging.getLogger("paimon.router")


class CompletionRouter:
    """Gemini first, Groq on quota exhaustion or for corrections."""

    def __init__(
        self,
        store: ConversationStore,
        primary: GeminiClient,
        secondary: GroqClient,
        personality: Personality | None = None,
    ) -> None:
        self.store = store
        self.primary = primary
        self.secondary = secondary
        self.personality = personality or Personality()

    async def complete(self, user_id: str, text: str, mode: Mode) -> str:
        """Produce the reply for one turn.  Expects `text` already in history."""
        if mode is Mode.CORRECTION:
            last_reply = self.store.get_last_reply(user_id)
            if last_reply:
                reply = await self._correct(text, last_reply)
                return reply[:MAX_REPLY_CHARS]
            log.debug("Correction from %s with no previous reply; normal turn", user_id)

        try:
            reply = await self._try_primary(text)
        except BackendError as e:
            if e.kind is not ErrorKind.QUOTA_EXCEEDED:
                raise
            log.warning("⚠️ Gemini quota exceeded, switching to Groq…")
            reply = await self._fallback(user_id)
        return reply[:MAX_REPLY_CHARS]

    # ------------------------------------------------------------------
    # Branches
    # ------------------------------------------------------------------

    async def _correct(self, text: str, last_reply: str) -> str:
        system_text = self.personality.correction(last_reply)
        reply = await asyncio.to_thread(
            self.secondary.chat_complete,
            system_text,
            [{"role": "user", "content": text}],
        )
        return reply or CORRECTION_PLACEHOLDER

    async def _try_primary(self, text: str) -> str:
        reply = await asyncio.to_thread(
            self.primary.generate_content, self.personality.normal(), text
        )
        return reply or PRIMARY_PLACEHOLDER

    async def _fallback(self, user_id: str) -> str:
        history = [m.as_dict() for m in self.store.get_history(user_id)]
        reply = await asyncio.to_thread(
            self.secondary.chat_complete, self.personality.fallback(), history
        )
        return reply or FALLBACK_PLACEHOLDER
