"""Small text helpers shared by the notes and poems surfaces."""

from __future__ import annotations

import random
from typing import Optional, Tuple

NOTE_TITLE_LENGTH = 50

DEFAULT_POEM_TITLE = 'Untitled Poem'

POEM_PROMPTS: Tuple[str, ...] = (
    'Write about a moment when you felt truly at peace...',
    'Describe the colors of your emotions today...',
    'Capture a memory that makes you smile...',
    'Express what hope looks like to you...',
    'Write about the strength you carry within...',
    'Describe a place where you feel safe...',
    'Express gratitude for something small but meaningful...',
    "Write about a dream you're nurturing...",
)

# Quick-start messages offered under the chat console input.
COMFORT_PROMPTS: Tuple[str, ...] = (
    "I'm feeling overwhelmed",
    'I need encouragement',
    "I'm having a hard day",
    'Help me feel better',
)


def count_words(text: Optional[str]) -> int:
    """Return the number of whitespace separated words in ``text``."""

    if not text or not text.strip():
        return 0
    return len(text.split())


def derive_note_title(content: str) -> str:
    """Build a title for an untitled note from the start of its content."""

    text = (content or '').strip()
    title = text[:NOTE_TITLE_LENGTH].strip()
    if len(text) > NOTE_TITLE_LENGTH:
        title += '...'
    return title


def random_poem_prompt(rng: Optional[random.Random] = None) -> str:
    chooser = rng if rng is not None else random
    return chooser.choice(POEM_PROMPTS)
