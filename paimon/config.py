"""
Configuration constants for Paimon.
All tunables in one place.  Secrets are loaded from ../.env
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env from project root (one level above this package)
_ENV_PATH = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_ENV_PATH)

# --- Paths ---
BASE_DIR = Path(__file__).parent
PROMPTS_DIR = BASE_DIR / "prompts"

# --- Credentials ---
DISCORD_TOKEN = os.getenv("DISCORD_TOKEN", "")
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
GROQ_API_KEY = os.getenv("GROQ_API_KEY", "")

# --- Primary backend (Gemini) ---
GEMINI_API_BASE = os.getenv(
    "GEMINI_API_BASE", "https://generativelanguage.googleapis.com/v1beta"
)
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")

# --- Secondary backend (Groq, OpenAI-compatible) ---
GROQ_API_BASE = os.getenv("GROQ_API_BASE", "https://api.groq.com/openai/v1")
GROQ_MODEL = os.getenv("GROQ_MODEL", "llama-3.1-8b-instant")

BACKEND_TIMEOUT = float(os.getenv("BACKEND_TIMEOUT", "60"))
QUOTA_STATUS_CODE = 429        # only this status triggers the Groq fallback

# --- Memory ---
HISTORY_LIMIT = 10             # max messages kept per user

# --- Discord ---
MAX_REPLY_CHARS = 2000         # Discord message size ceiling
TIMEZONE = "Asia/Manila"

# --- Logging ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# --- Trigger phrases for correction mode ---
# Checked case-insensitively anywhere in the message.
CORRECTION_TRIGGERS = [
    "that's wrong",
    "mali",
    "mali ka",
    "wrong",
]

# --- Canned replies ---
PRIMARY_PLACEHOLDER = "🤐 Paimon got speechless!"
FALLBACK_PLACEHOLDER = "🤐 Paimon forgot!"
CORRECTION_PLACEHOLDER = "🤔 Paimon doesn't know how to fix that..."
APOLOGY_TEXT = "⚠️ Paimon got confused... baka mali ang API key?"
