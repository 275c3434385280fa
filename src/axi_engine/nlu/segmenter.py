"""
Multi-Intent Segmenter
======================

Splits "open youtube and play music" into independently interpretable
clauses. A split is accepted only when both sides carry an action verb;
"open youtube and relax" stays a single command.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional

logger = logging.getLogger(__name__)

# Longest first so "and then" is never split on "and"
CONJUNCTIONS = ["and then", "after that", "and", "then", "also", "plus"]

ACTION_VERBS = [
    "open", "close", "play", "pause", "stop", "start",
    "mute", "unmute", "search", "find", "create", "delete",
    "show", "tell", "what", "turn", "increase", "decrease",
    "list", "run", "execute", "launch", "check",
]


@dataclass(frozen=True)
class SegmentationResult:
    is_multi: bool
    segments: List[str] = field(default_factory=list)
    conjunction: Optional[str] = None


def has_action_verb(text: str) -> bool:
    """True if the first word is an action verb or one appears as a standalone word."""
    words = text.lower().split()
    return any(verb in words for verb in ACTION_VERBS)


def _find_split(text: str):
    """Earliest-listed conjunction strictly between two words, as (conjunction, match)."""
    for conjunction in CONJUNCTIONS:
        pattern = re.compile(rf"\s+{re.escape(conjunction)}\s+", re.IGNORECASE)
        for match in pattern.finditer(text):
            if match.start() > 0 and match.end() < len(text):
                return conjunction, match
    return None, None


def segment(text: str) -> SegmentationResult:
    """
    Split on the first conjunction found (one split at most).

    Further conjunctions stay inside the second segment.
    """
    if not text or not isinstance(text, str):
        return SegmentationResult(False, [text] if text else [])

    stripped = text.strip()
    conjunction, match = _find_split(stripped)
    if match is None:
        return SegmentationResult(False, [stripped])

    first = stripped[: match.start()].strip()
    second = stripped[match.end():].strip()

    if first and second and has_action_verb(first) and has_action_verb(second):
        logger.info(f"Multi-intent detected on '{conjunction}': {[first, second]}")
        return SegmentationResult(True, [first, second], conjunction)

    return SegmentationResult(False, [stripped])
