#!/usr/bin/env python3
"""
Paimon: Discord chat bot.

Usage:
    paimon            (after `pip install -e .`)
    python -m paimon.main

Mention the bot in any channel it can read.  Replies come from Gemini,
or from Groq when Gemini is out of quota.  Say "wrong" / "mali" to make
Paimon reconsider her last answer.

Environment (.env in the project root):
    DISCORD_TOKEN   required
    GEMINI_API_KEY  primary backend
    GROQ_API_KEY    fallback + correction backend
"""

import logging
import sys

from paimon.assistant import Assistant
from paimon.bot import PaimonBot
from paimon.config import DISCORD_TOKEN, GEMINI_API_KEY, GROQ_API_KEY, LOG_LEVEL

# ── Logging ────────────────────────────────────────────────────────
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger("paimon")


def main() -> None:
    if not DISCORD_TOKEN:
        log.error("DISCORD_TOKEN is not set. Add it to .env and try again.")
        sys.exit(1)

    # Pre-flight check
    if not GEMINI_API_KEY:
        log.warning("GEMINI_API_KEY is not set; every Gemini call will fail.")
    if not GROQ_API_KEY:
        log.warning("GROQ_API_KEY is not set; fallback and corrections will fail.")

    bot = PaimonBot(Assistant())
    # log_handler=None keeps discord.py on the root config above
    bot.run(DISCORD_TOKEN, log_handler=None)


if __name__ == "__main__":
    main()
