"""
Context Store
=============

Per-session short-term memory.

Each session owns:
- a rolling history of the last few interactions (newest first)
- a single awaiting-confirmation slot
- free-form session variables

History entries expire after ``context_ttl_seconds``; the confirmation slot
after ``confirmation_timeout_seconds`` (checked lazily on read); idle
sessions after ``session_idle_ttl_seconds``. A background sweep owned by
the store's lifecycle reclaims all three.

Usage:
    store = ContextStore(config, clock=fake_clock)
    store.push("s1", intent="play", entities={}, input="play music", response="Playing")
    store.detect_follow_up("s1", "louder")
"""

import asyncio
import logging
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Callable, Deque, Dict, List, Optional

from ..config import EngineConfig
from ..nlu.types import InterpretationResult, Source
from .resolution import (
    COMMON_ACTIONS,
    PronounResolution,
    find_relevant_entity,
    intent_to_label,
    resolve_pronoun,
    detect_follow_up,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


# =============================================================================
# SESSION STRUCTURES
# =============================================================================

@dataclass
class ContextEntry:
    """One remembered interaction."""
    intent: str
    entities: Dict[str, Any]
    input: str
    response: str
    timestamp: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "intent": self.intent,
            "entities": dict(self.entities),
            "input": self.input,
            "response": self.response,
            "timestamp": self.timestamp,
        }


@dataclass
class AwaitingConfirmation:
    """A pending yes/no action."""
    intent: str
    entities: Dict[str, Any]
    timestamp: float
    raw_text: str = ""
    prompt: Optional[str] = None


@dataclass
class Session:
    """State for one conversation."""
    session_id: str
    history: Deque[ContextEntry]
    created_at: float
    last_access: float
    awaiting: Optional[AwaitingConfirmation] = None
    variables: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class FollowUp:
    """A detected follow-up and the result it maps to."""
    result: InterpretationResult
    trigger: str
    reason: str


# =============================================================================
# CONTEXT STORE
# =============================================================================

class ContextStore:
    """Session-keyed short-term memory with time-based expiry."""

    def __init__(self, config: Optional[EngineConfig] = None, clock: Optional[Clock] = None):
        self.config = config or EngineConfig()
        self.clock = clock or time.monotonic
        self._sessions: Dict[str, Session] = {}
        self._sweep_task: Optional[asyncio.Task] = None
        self._running = False

    # === Lifecycle ===

    def start(self) -> None:
        """Start the periodic cleanup sweep on the running event loop."""
        if self._sweep_task is not None and not self._sweep_task.done():
            return
        self._running = True
        self._sweep_task = asyncio.get_running_loop().create_task(self._sweep_loop())
        logger.info(f"Context sweep started (interval={self.config.cleanup_interval_seconds}s)")

    async def shutdown(self) -> None:
        """Stop the sweep task."""
        self._running = False
        task, self._sweep_task = self._sweep_task, None
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            logger.info("Context sweep stopped")

    @property
    def running(self) -> bool:
        return self._sweep_task is not None and not self._sweep_task.done()

    async def _sweep_loop(self) -> None:
        while self._running:
            await asyncio.sleep(self.config.cleanup_interval_seconds)
            try:
                self.cleanup()
            except Exception as e:
                logger.error(f"Context cleanup failed: {e}")

    # === Sessions ===

    def get_session(self, session_id: str) -> Session:
        """Get (or lazily create) a session."""
        now = self.clock()
        session = self._sessions.get(session_id)
        if session is None:
            session = Session(
                session_id=session_id,
                history=deque(maxlen=self.config.max_history),
                created_at=now,
                last_access=now,
            )
            self._sessions[session_id] = session
            logger.debug(f"Created session {session_id}")
        session.last_access = now
        return session

    def destroy_session(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def clear(self) -> None:
        self._sessions.clear()

    @property
    def active_sessions(self) -> int:
        return len(self._sessions)

    # === History ===

    def _fresh(self, timestamp: float) -> bool:
        return self.clock() - timestamp < self.config.context_ttl_seconds

    def _history(self, session_id: str) -> List[ContextEntry]:
        """Unexpired entries, newest first."""
        session = self.get_session(session_id)
        return [entry for entry in session.history if self._fresh(entry.timestamp)]

    def push(
        self,
        session_id: str,
        intent: str,
        entities: Optional[Dict[str, Any]] = None,
        input: str = "",
        response: str = "",
    ) -> ContextEntry:
        """Remember an interaction. The oldest entry falls off past capacity."""
        entry = ContextEntry(
            intent=intent,
            entities=dict(entities or {}),
            input=input,
            response=response,
            timestamp=self.clock(),
        )
        self.get_session(session_id).history.appendleft(entry)
        logger.debug(f"Context updated for {session_id}: {intent}")
        return entry

    def recent(self, session_id: str, n: int = 3) -> List[ContextEntry]:
        return self._history(session_id)[:n]

    def last_entry(self, session_id: str) -> Optional[ContextEntry]:
        history = self._history(session_id)
        return history[0] if history else None

    def last_intent(self, session_id: str) -> Optional[str]:
        entry = self.last_entry(session_id)
        return entry.intent if entry else None

    def last_entities(self, session_id: str) -> Dict[str, Any]:
        entry = self.last_entry(session_id)
        return dict(entry.entities) if entry else {}

    def last_input(self, session_id: str) -> Optional[str]:
        entry = self.last_entry(session_id)
        return entry.input if entry else None

    # === Resolution ===

    def find_relevant_entity(self, session_id: str) -> Optional[str]:
        history = self._history(session_id)
        if not history:
            return None
        return find_relevant_entity(history[0].entities, [e.entities for e in history[1:]])

    def resolve_pronoun(self, session_id: str, text: str) -> PronounResolution:
        history = self._history(session_id)
        if not history:
            return PronounResolution(False, text)
        resolution = resolve_pronoun(
            text,
            last_input=history[0].input,
            entities=history[0].entities,
            history=[e.entities for e in history[1:]],
        )
        if resolution.resolved:
            logger.info(f"Resolved '{text}' -> '{resolution.text}'")
        return resolution

    def detect_follow_up(self, session_id: str, text: str) -> Optional[FollowUp]:
        last = self.last_intent(session_id)
        rule = detect_follow_up(text, last)
        if rule is None:
            return None
        reason = f'Follow-up from "{last}"'
        logger.info(f"{reason}: '{text}' -> {rule.maps_to}")
        return FollowUp(
            result=InterpretationResult(
                intent=rule.maps_to,
                confidence=self.config.followup_confidence,
                source=Source.CONTEXT,
                entities=self.last_entities(session_id),
            ),
            trigger=rule.trigger,
            reason=reason,
        )

    # === Confirmation slot ===

    def set_awaiting_confirmation(
        self,
        session_id: str,
        intent: str,
        entities: Optional[Dict[str, Any]] = None,
        raw_text: str = "",
        prompt: Optional[str] = None,
    ) -> AwaitingConfirmation:
        session = self.get_session(session_id)
        if session.awaiting is not None:
            logger.debug(f"Replacing pending confirmation for {session.awaiting.intent}")
        session.awaiting = AwaitingConfirmation(
            intent=intent,
            entities=dict(entities or {}),
            timestamp=self.clock(),
            raw_text=raw_text,
            prompt=prompt,
        )
        logger.debug(f"Awaiting confirmation for {intent} in {session_id}")
        return session.awaiting

    def _expire_confirmation(self, session: Session) -> None:
        pending = session.awaiting
        if pending and self.clock() - pending.timestamp > self.config.confirmation_timeout_seconds:
            logger.debug(f"Confirmation for {pending.intent} expired in {session.session_id}")
            session.awaiting = None

    def is_awaiting_confirmation(self, session_id: str) -> bool:
        session = self.get_session(session_id)
        self._expire_confirmation(session)
        return session.awaiting is not None

    def peek_confirmation(self, session_id: str) -> Optional[AwaitingConfirmation]:
        session = self.get_session(session_id)
        self._expire_confirmation(session)
        return session.awaiting

    def pop_confirmation(self, session_id: str) -> Optional[AwaitingConfirmation]:
        """Take the pending action (if still valid) and clear the slot."""
        session = self.get_session(session_id)
        self._expire_confirmation(session)
        pending, session.awaiting = session.awaiting, None
        return pending

    # === Clarification ===

    def generate_clarification(self, session_id: str, ambiguous_input: str = "") -> Dict[str, Any]:
        """Offer recent intents (then common actions) as options, at most four."""
        intents: List[str] = []
        for entry in self._history(session_id):
            if entry.intent not in intents:
                intents.append(entry.intent)
        intents = intents[:3]

        if len(intents) < 3:
            intents.extend(c for c in COMMON_ACTIONS if c not in intents)

        return {
            "message": "I'm not sure what you mean. Did you want to:",
            "options": [
                {"intent": intent, "label": intent_to_label(intent)} for intent in intents[:4]
            ],
            "original": ambiguous_input,
        }

    @staticmethod
    def intent_to_label(intent: str) -> str:
        return intent_to_label(intent)

    # === Session variables ===

    def set_variable(self, session_id: str, key: str, value: Any) -> None:
        self.get_session(session_id).variables[key] = value

    def get_variable(self, session_id: str, key: str, default: Any = None) -> Any:
        return self.get_session(session_id).variables.get(key, default)

    def pop_variable(self, session_id: str, key: str, default: Any = None) -> Any:
        return self.get_session(session_id).variables.pop(key, default)

    # === Expiry ===

    def cleanup(self) -> Dict[str, int]:
        """Drop expired entries, expired confirmation slots and idle sessions."""
        now = self.clock()
        removed = {"entries": 0, "confirmations": 0, "sessions": 0}

        for session_id in list(self._sessions):
            session = self._sessions[session_id]

            if now - session.last_access > self.config.session_idle_ttl_seconds:
                del self._sessions[session_id]
                removed["sessions"] += 1
                continue

            fresh = [e for e in session.history if self._fresh(e.timestamp)]
            removed["entries"] += len(session.history) - len(fresh)
            session.history = deque(fresh, maxlen=self.config.max_history)

            if session.awaiting is not None:
                self._expire_confirmation(session)
                if session.awaiting is None:
                    removed["confirmations"] += 1

        if any(removed.values()):
            logger.debug(f"Context cleanup removed {removed}")
        return removed

    def state(self, session_id: str) -> Dict[str, Any]:
        """Debug view of a session."""
        session = self.get_session(session_id)
        last = self.last_entry(session_id)
        return {
            "session_id": session_id,
            "history_length": len(self._history(session_id)),
            "last_intent": last.intent if last else None,
            "last_entities": dict(last.entities) if last else {},
            "last_input": last.input if last else None,
            "awaiting_confirmation": self.is_awaiting_confirmation(session_id),
            "variables": dict(session.variables),
            "age": self.clock() - last.timestamp if last else None,
        }
