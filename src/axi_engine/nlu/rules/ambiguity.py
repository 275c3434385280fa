"""Vague commands that must never execute directly."""

from .matcher import Rule, hit

AMBIGUOUS_PHRASES = {
    "open it",
    "delete something",
    "do something",
    "play that thing",
    "play it",
    "open that",
    "delete it",
}


def detect_ambiguity(analysis):
    if analysis.text in AMBIGUOUS_PHRASES:
        # Low confidence pushes the decision below the clarify threshold
        return hit("ambiguous", 0.3)
    return None


RULES = [
    Rule("detect_ambiguity", "ambiguity", detect_ambiguity),
]
