"""Session-scoped conversational memory."""

from .resolution import PronounResolution, FollowUpRule, intent_to_label
from .store import AwaitingConfirmation, ContextEntry, ContextStore, FollowUp, Session

__all__ = [
    "AwaitingConfirmation",
    "ContextEntry",
    "ContextStore",
    "FollowUp",
    "FollowUpRule",
    "PronounResolution",
    "Session",
    "intent_to_label",
]
