"""Canned replies for the comfort chat console.

The bot is a literal, ordered list of keyword rules.  A message is lower-cased
and checked for substring membership against each rule's keywords in turn;
the first rule that matches supplies the reply.  Messages that match no rule
get one of the generic supportive replies, picked at random.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple


@dataclass(frozen=True)
class ResponseRule:
    """A named group of trigger keywords and the reply they select."""

    name: str
    keywords: Tuple[str, ...]
    response: str

    def matches(self, lowered_message: str) -> bool:
        return any(keyword in lowered_message for keyword in self.keywords)


LONELINESS_RESPONSE = (
    "I'm here for you. You are not alone. Loneliness is a feeling that many people "
    "experience, and it's okay to feel this way. Would you like to talk about what's "
    "making you feel lonely, or would you prefer to write about it in your notes?"
)
SADNESS_RESPONSE = (
    "I hear that you're feeling sad, and I want you to know that it's completely okay "
    "to feel this way. Sadness is a natural part of the human experience. Sometimes "
    "writing about our feelings can help us process them. Have you considered putting "
    "these thoughts into words in your notes?"
)
ANXIETY_RESPONSE = (
    "Feeling overwhelmed or anxious can be really challenging. Remember to breathe - "
    "you don't have to carry all of this at once. Sometimes breaking things down into "
    "smaller, manageable pieces can help. Would writing about what's weighing on your "
    "mind be helpful right now?"
)
EXHAUSTION_RESPONSE = (
    "It sounds like you're carrying a lot right now. Being tired - physically, "
    "emotionally, or mentally - is your body and mind's way of asking for care and "
    "rest. You deserve to take breaks and be gentle with yourself."
)
ANGER_RESPONSE = (
    "Anger and frustration are valid emotions, and it's important to acknowledge them. "
    "Sometimes these feelings are trying to tell us something important about our "
    "boundaries or needs. Writing can be a healthy way to express and explore these "
    "feelings."
)
FEAR_RESPONSE = (
    "Fear is one of our most basic emotions, and feeling scared doesn't make you weak - "
    "it makes you human. You've been brave enough to face fears before, and you have "
    "that same courage within you now."
)
HELP_RESPONSE = (
    "Asking for support is a sign of strength, not weakness. I'm here to listen and "
    "provide comfort through our conversation. Remember that your notes and poems can "
    "also be a form of self-support - a safe space to express and explore your thoughts."
)

# Checked top to bottom; order matters ("I need help, I'm so alone" is loneliness).
RESPONSE_RULES: Tuple[ResponseRule, ...] = (
    ResponseRule('loneliness', ('lonely', 'alone'), LONELINESS_RESPONSE),
    ResponseRule('sadness', ('sad', 'depressed', 'down'), SADNESS_RESPONSE),
    ResponseRule('anxiety', ('anxious', 'worried', 'stressed', 'overwhelmed'), ANXIETY_RESPONSE),
    ResponseRule('exhaustion', ('tired', 'exhausted', 'burnt out'), EXHAUSTION_RESPONSE),
    ResponseRule('anger', ('angry', 'frustrated', 'mad'), ANGER_RESPONSE),
    ResponseRule('fear', ('scared', 'afraid', 'fear'), FEAR_RESPONSE),
    ResponseRule('help', ('help', 'support', 'need'), HELP_RESPONSE),
)

GENERIC_RESPONSES: Tuple[str, ...] = (
    "I'm here for you. You are not alone. Your feelings are valid and it's okay to feel this way.",
    "Thank you for sharing that with me. It takes courage to open up about difficult feelings.",
    "I hear you, and I want you to know that what you're going through matters. You matter.",
    "Sometimes life can feel overwhelming, but you've made it through difficult times before, "
    "and you have the strength to get through this too.",
    "Your feelings are completely understandable. It's natural to have ups and downs - "
    "that's what makes us human.",
    "I'm glad you felt comfortable enough to share this with me. Taking time to express your "
    "thoughts and feelings is an act of self-care.",
    "Remember to be gentle with yourself. You're doing the best you can with what you have right now.",
    "Every small step forward is progress, even when it doesn't feel like it. "
    "You're stronger than you realize.",
    "It's okay to take things one day at a time, or even one moment at a time. "
    "There's no pressure to have everything figured out.",
    "Your story matters, your feelings are important, and you deserve kindness - "
    "especially from yourself.",
)


def match_rule(message: str, rules: Sequence[ResponseRule] = RESPONSE_RULES) -> Optional[ResponseRule]:
    """Return the first rule whose keywords occur in ``message``, if any."""

    lowered = (message or '').lower()
    for rule in rules:
        if rule.matches(lowered):
            return rule
    return None


def select_response(message: str, rng: Optional[random.Random] = None) -> str:
    """Pick the comfort reply for a user-authored chat message.

    Args:
        message: The raw text the user typed.
        rng: Source of randomness for the generic fallback.  Defaults to the
            module level ``random`` functions.

    Returns:
        The matching rule's canned reply, or one of ``GENERIC_RESPONSES``.
    """
    rule = match_rule(message)
    if rule is not None:
        return rule.response
    chooser = rng if rng is not None else random
    return chooser.choice(GENERIC_RESPONSES)


class ComfortResponder:
    """Callable wrapper around :func:`select_response` with its own RNG.

    The journal store takes any ``Callable[[str], str]`` as its responder;
    this class lets callers seed the fallback choice.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()

    def __call__(self, message: str) -> str:
        return select_response(message, rng=self.rng)
