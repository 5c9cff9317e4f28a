"""
Persona prompts for Paimon.

Reads the prompt templates in prompts/ and hands out the system text for
each branch of the router:
  normal.txt      : primary backend, one-shot turns
  fallback.txt    : secondary backend, when the primary is out of quota
  correction.txt  : secondary backend, when the user says the last reply
                    was wrong.  Takes {last_reply}.

Extension point: per-user persona profiles would hang off this class.
"""

from enum import Enum
from pathlib import Path

from paimon.config import PROMPTS_DIR


class Mode(Enum):
    NORMAL = "normal"
    CORRECTION = "correction"


class Personality:
    """Loads and caches the persona prompt templates."""

    def __init__(self, prompts_dir: Path = PROMPTS_DIR) -> None:
        self._dir = prompts_dir
        self._cache: dict[str, str] = {}

    def load(self, name: str) -> str:
        """Read a template from disk. Caches after first read."""
        if name not in self._cache:
            path = self._dir / f"{name}.txt"
            if not path.exists():
                raise FileNotFoundError(f"Persona prompt not found: {path}")
            self._cache[name] = path.read_text(encoding="utf-8").strip()
        return self._cache[name]

    def normal(self) -> str:
        return self.load("normal")

    def fallback(self) -> str:
        return self.load("fallback")

    def correction(self, last_reply: str) -> str:
        # last_reply may contain braces
        return self.load("correction").replace("{last_reply}", last_reply)

