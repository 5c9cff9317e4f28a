"""
Discord client for Paimon.

Thin adapter: turns discord.py message events into IncomingMessage and
hands them to the Assistant.  All decisions live in assistant.py.
"""

import logging
from datetime import datetime
from zoneinfo import ZoneInfo

import discord

from paimon.assistant import Assistant, IncomingMessage
from paimon.config import TIMEZONE

log = logging.getLogger("paimon.bot")


def philippines_time(now: datetime | None = None) -> str:
    """Current time in Manila, e.g. 'Monday, October 19, 2026 at 08:30 PM'."""
    now = now or datetime.now(ZoneInfo(TIMEZONE))
    return now.astimezone(ZoneInfo(TIMEZONE)).strftime("%A, %B %d, %Y at %I:%M %p")


def to_incoming(message: discord.Message, bot_id: int | None) -> IncomingMessage:
    """Build the platform-neutral event from a discord.py message."""

    async def send_typing() -> None:
        await message.channel.typing()

    return IncomingMessage(
        author_id=str(message.author.id),
        author_is_bot=message.author.bot,
        mentions_everyone=message.mention_everyone,
        mentions_bot=bot_id is not None
        and any(u.id == bot_id for u in message.mentions),
        content=message.content,
        reply=message.reply,
        send_typing=send_typing,
    )


class PaimonBot(discord.Client):
    """discord.Client that forwards mentions to the Assistant."""

    def __init__(self, assistant: Assistant) -> None:
        intents = discord.Intents.default()
        intents.guilds = True
        intents.guild_messages = True
        intents.message_content = True
        super().__init__(intents=intents)
        self.assistant = assistant

    async def on_ready(self) -> None:
        log.info("✅ Logged in as %s!", self.user)
        log.info(
            "📜 Models: primary=%s, fallback=%s",
            self.assistant.primary.model,
            self.assistant.secondary.model,
        )
        log.info("🕒 Current PH time: %s", philippines_time())

    async def on_message(self, message: discord.Message) -> None:
        bot_id = self.user.id if self.user else None
        await self.assistant.handle(to_incoming(message, bot_id))

    async def close(self) -> None:
        log.info("Shutting down (%d users in memory)", self.assistant.store.user_count())
        self.assistant.shutdown()
        await super().close()
