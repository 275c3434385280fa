"""
Reference Resolution
====================

Pure helpers for pronoun rewriting and follow-up detection. The context
store feeds them a session's recent entities and intents.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

# Entity keys consulted (in order) when resolving "it" / "that one"
ENTITY_PRIORITY = [
    "app", "app_name", "website", "url", "filename", "file", "folder",
    "song", "video", "query", "search_query", "name",
]

LAST_INPUT = "{last_input}"

# (pattern, replacement); "{entity}" is filled with the relevant entity
PRONOUN_PATTERNS = [
    (re.compile(r"\bopen it\b", re.IGNORECASE), "open {entity}"),
    (re.compile(r"\bplay it\b", re.IGNORECASE), "play {entity}"),
    (re.compile(r"\bclose it\b", re.IGNORECASE), "close {entity}"),
    (re.compile(r"\bdelete it\b", re.IGNORECASE), "delete {entity}"),
    (re.compile(r"\bdo it again\b", re.IGNORECASE), LAST_INPUT),
    (re.compile(r"\bagain\b", re.IGNORECASE), LAST_INPUT),
    (re.compile(r"\bthat one\b", re.IGNORECASE), "{entity}"),
    (re.compile(r"\bthe same\b", re.IGNORECASE), "{entity}"),
]


@dataclass(frozen=True)
class FollowUpRule:
    trigger: str
    requires: List[str]
    maps_to: str

    def matches(self, text: str) -> bool:
        return re.search(rf"\b{re.escape(self.trigger)}\b", text) is not None

    def applies_after(self, last_intent: str) -> bool:
        # Match on name parts so "display.brightness_up" is not a "play" intent
        parts = re.split(r"[_.]", last_intent)
        return any(req == last_intent or req in parts for req in self.requires)


FOLLOW_UPS = [
    FollowUpRule("louder", ["play", "music", "video"], "volume_up"),
    FollowUpRule("quieter", ["play", "music", "video"], "volume_down"),
    FollowUpRule("softer", ["play", "music", "video"], "volume_down"),
    FollowUpRule("stop", ["play"], "pause"),
    FollowUpRule("next", ["play", "music", "video"], "next"),
    FollowUpRule("previous", ["play", "music", "video"], "previous"),
    FollowUpRule("more", ["list_files", "search"], "continue"),
]

INTENT_LABELS = {
    "open_youtube": "Open YouTube",
    "open_website": "Open a website",
    "play": "Play music",
    "pause": "Pause playback",
    "volume_up": "Increase volume",
    "volume_down": "Decrease volume",
    "search_youtube": "Search YouTube",
    "tell_time": "Tell the time",
    "list_files": "List files",
    "create_folder": "Create a folder",
}

COMMON_ACTIONS = ["open_youtube", "play", "tell_time"]


@dataclass(frozen=True)
class PronounResolution:
    resolved: bool
    text: str
    reference: Optional[str] = None
    original: Optional[str] = None


def find_relevant_entity(
    entities: Dict[str, Any],
    history: Iterable[Dict[str, Any]] = (),
) -> Optional[str]:
    """First priority key present in ``entities``, then in older entities."""
    for candidate in [entities, *history]:
        for key in ENTITY_PRIORITY:
            value = (candidate or {}).get(key)
            if value:
                return str(value)
    return None


def resolve_pronoun(
    text: str,
    last_input: Optional[str],
    entities: Dict[str, Any],
    history: Iterable[Dict[str, Any]] = (),
) -> PronounResolution:
    """Rewrite "open it" / "do it again" style input using prior context."""
    if not text:
        return PronounResolution(False, text)

    history = list(history)
    for pattern, replacement in PRONOUN_PATTERNS:
        if not pattern.search(text):
            continue

        if replacement == LAST_INPUT:
            if last_input:
                return PronounResolution(True, last_input, "last_input", text)
            continue

        entity = find_relevant_entity(entities, history)
        if entity:
            resolved = pattern.sub(replacement.replace("{entity}", entity), text, count=1)
            return PronounResolution(True, resolved, entity, text)

    return PronounResolution(False, text)


def detect_follow_up(text: str, last_intent: Optional[str]) -> Optional[FollowUpRule]:
    """The follow-up rule triggered by ``text`` given the previous intent."""
    if not text or not last_intent:
        return None
    lower = text.lower().strip()
    for rule in FOLLOW_UPS:
        if rule.matches(lower) and rule.applies_after(last_intent):
            return rule
    return None


def intent_to_label(intent: str) -> str:
    """Human-readable label for an intent name."""
    return INTENT_LABELS.get(intent, intent.replace("_", " ").replace(".", " "))
