"""Decides whether a message is a normal turn or a correction."""

from paimon.config import CORRECTION_TRIGGERS
from paimon.personality import Mode


def classify(text: str, triggers: list[str] = CORRECTION_TRIGGERS) -> Mode:
    """Return CORRECTION if any trigger phrase appears in the text."""
    lower = text.casefold()
    if any(trigger in lower for trigger in triggers):
        return Mode.CORRECTION
    return Mode.NORMAL
