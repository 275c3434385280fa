"""
Fallback Responses
==================

Polite responses for unknown input, low confidence, handler errors,
missing skills and the confirmation flow.
"""

import random
from typing import Dict, List, Optional

FALLBACK_RESPONSES: Dict[str, List[str]] = {
    "unknown": [
        "I'm not sure I understand that yet.",
        "Could you rephrase that, sir?",
        "I didn't quite catch that.",
        "I'm still learning, could you say that again?",
        "Hmm, I'm not sure what you mean. Can you try a different phrasing?",
    ],
    "low_confidence": [
        "I'm not entirely sure what you mean. Could you clarify?",
        "I think I understand, but could you be more specific?",
        "I'm having trouble understanding that request.",
        "Could you say that in a different way?",
    ],
    "error": [
        "Something went wrong on my end. Please try again.",
        "I encountered an error processing that request.",
        "Apologies, I couldn't complete that action. Please try again.",
        "There was an issue. Could you try that again?",
    ],
    "plugin_not_found": [
        "I don't have a skill for that yet.",
        "That capability isn't available at the moment.",
        "I can't help with that right now, but I'm always learning.",
    ],
}

CONFIRMATION_PENDING = "Are you sure you want to proceed with this action?"
CONFIRMATION_CANCELLED = "Alright, I've cancelled that action."
DEFAULT_RESPONSE = "I'm not sure how to respond to that."


class FallbackResponses:
    """Picks fallback messages; pass a seeded ``random.Random`` for determinism."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def pick(self, category: str) -> str:
        responses = FALLBACK_RESPONSES.get(category)
        if not responses:
            return DEFAULT_RESPONSE
        return self.rng.choice(responses)

    def unknown(self) -> str:
        return self.pick("unknown")

    def low_confidence(self) -> str:
        return self.pick("low_confidence")

    def error(self) -> str:
        return self.pick("error")

    def plugin_not_found(self) -> str:
        return self.pick("plugin_not_found")

    @staticmethod
    def confirmation_pending(action: Optional[str] = None) -> str:
        if action:
            return f"Are you sure you want to {action}?"
        return CONFIRMATION_PENDING

    @staticmethod
    def confirmation_cancelled() -> str:
        return CONFIRMATION_CANCELLED
