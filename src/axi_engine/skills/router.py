"""
Skill Router
============

Turns a Decision into a response string.

Confirmation state machine (per session):

    Execute ──(requires_confirmation)──> awaiting ──"yes"──> run handler
       │                                    │
       └──> run handler                     └──other──> cancelled
    Confirm / Clarify ───────────────────> awaiting
    Unknown ─────────────────────────────> fallback

Handler failures become an apology; nothing raised by a handler reaches
the caller.
"""

import inspect
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from ..config import EngineConfig
from ..context import ContextStore
from ..context.store import AwaitingConfirmation
from ..nlu.decision import generate_confirmation
from ..nlu.types import Decision, DecisionKind
from .registry import IntentSpec, PluginRegistry
from .responses import FallbackResponses

logger = logging.getLogger(__name__)

YES_WORDS = ["yes", "yeah", "yep", "sure", "ok", "okay", "confirm", "do it", "go ahead", "please do", "y"]
_YES_PATTERN = re.compile(
    r"^(?:" + "|".join(re.escape(w) for w in sorted(YES_WORDS, key=len, reverse=True)) + r")\b"
)

# Session variable holding a request for a free-text value ("Which website?")
AWAITING_INPUT = "awaiting_input"


def is_affirmative(text: str) -> bool:
    """True for "yes"-like replies ("yes", "sure", "go ahead please", ...)."""
    lower = (text or "").lower().strip()
    lower = re.sub(r"[^\w\s']", " ", lower).strip()
    return bool(_YES_PATTERN.match(lower))


@dataclass
class HandlerContext:
    """Everything a handler may need besides its parameters."""
    session_id: str
    raw_text: str
    entities: Dict[str, Any] = field(default_factory=dict)
    store: Optional[ContextStore] = None
    config: Optional[EngineConfig] = None
    legacy: Any = None

    def settings(self, plugin: str) -> Dict[str, Any]:
        """Per-plugin settings from the engine config."""
        return self.config.skill_settings(plugin) if self.config else {}

    def request_input(self, intent: str, slot: str) -> None:
        """Treat the next turn as the value of ``slot`` for ``intent``."""
        if self.store is not None:
            self.store.set_variable(self.session_id, AWAITING_INPUT, {"intent": intent, "slot": slot})


@dataclass
class ConfirmationOutcome:
    """How a reply to a pending confirmation was resolved."""
    response: Optional[str]
    pending: Optional[AwaitingConfirmation] = None
    executed: bool = False


class SkillRouter:
    """
    Dispatches decisions to plugin handlers.

    Example:
        router = SkillRouter(registry, store, config)
        reply = await router.execute(decision, "delete notes.txt", session_id="s1")
    """

    def __init__(
        self,
        registry: PluginRegistry,
        store: ContextStore,
        config: Optional[EngineConfig] = None,
        responses: Optional[FallbackResponses] = None,
    ):
        self.registry = registry
        self.store = store
        self.config = config or store.config
        self.responses = responses or FallbackResponses()

    async def execute(
        self,
        decision: Decision,
        raw_text: str,
        legacy_context: Any = None,
        session_id: str = "default",
    ) -> str:
        """Produce the response for one decision."""
        if self.store.is_awaiting_confirmation(session_id):
            return await self.respond_to_confirmation(raw_text, session_id, legacy_context)

        kind = decision.kind
        if kind is DecisionKind.UNKNOWN:
            return self._unknown(decision, raw_text, session_id)

        spec = self.registry.get_intent_handler(decision.intent)
        if spec is None:
            logger.warning(f"No handler registered for intent: {decision.intent}")
            return self.responses.plugin_not_found()

        if kind in (DecisionKind.CONFIRM, DecisionKind.CLARIFY):
            return self._ask(decision, raw_text, session_id)

        if kind is DecisionKind.EXECUTE:
            if decision.confidence < spec.confidence:
                logger.info(
                    f"{decision.intent} below plugin minimum "
                    f"({decision.confidence:.2f} < {spec.confidence:.2f})"
                )
                return self.responses.low_confidence()
            if spec.requires_confirmation:
                return self._ask(decision, raw_text, session_id)
            return await self.invoke(spec, decision.entities, raw_text, session_id, legacy_context)

        raise ValueError(f"Unhandled decision kind: {kind}")

    def _unknown(self, decision: Decision, raw_text: str, session_id: str) -> str:
        if decision.intent == "ambiguous":
            clarification = self.store.generate_clarification(session_id, raw_text)
            labels = [option["label"] for option in clarification["options"]]
            if len(labels) > 1:
                choices = ", ".join(labels[:-1]) + f" or {labels[-1]}"
            else:
                choices = labels[0] if labels else ""
            return f"{clarification['message']} {choices}?".strip()
        return self.responses.unknown()

    def _ask(self, decision: Decision, raw_text: str, session_id: str) -> str:
        prompt = decision.prompt or generate_confirmation(decision.intent, decision.entities)
        self.store.set_awaiting_confirmation(
            session_id,
            intent=decision.intent,
            entities=decision.entities,
            raw_text=raw_text,
            prompt=prompt,
        )
        logger.info(f"Awaiting confirmation for {decision.intent} ({session_id})")
        return prompt

    async def respond_to_confirmation(
        self,
        text: str,
        session_id: str = "default",
        legacy_context: Any = None,
    ) -> Optional[str]:
        """
        Resolve a pending confirmation with this turn's reply.

        "Yes"-like input runs the stored action; anything else cancels.
        The slot is cleared either way. Returns None if nothing is pending.
        """
        outcome = await self.resolve_confirmation(text, session_id, legacy_context)
        return outcome.response

    async def resolve_confirmation(
        self,
        text: str,
        session_id: str = "default",
        legacy_context: Any = None,
    ) -> ConfirmationOutcome:
        """Like respond_to_confirmation, also reporting whether the handler ran and succeeded."""
        pending = self.store.pop_confirmation(session_id)
        if pending is None:
            return ConfirmationOutcome(None)

        if not is_affirmative(text):
            logger.info(f"Cancelled {pending.intent} ({session_id})")
            return ConfirmationOutcome(self.responses.confirmation_cancelled(), pending)

        spec = self.registry.get_intent_handler(pending.intent)
        if spec is None:
            logger.warning(f"No handler registered for confirmed intent: {pending.intent}")
            return ConfirmationOutcome(self.responses.plugin_not_found(), pending)
        logger.info(f"Confirmed {pending.intent} ({session_id})")
        response, ok = await self._call(spec, pending.entities, pending.raw_text, session_id, legacy_context)
        return ConfirmationOutcome(response, pending, executed=ok)

    def has_pending_input(self, session_id: str) -> bool:
        return self.store.get_variable(session_id, AWAITING_INPUT) is not None

    async def fill_pending_input(self, text: str, session_id: str = "default") -> Optional[str]:
        """Use this turn's text as the value a handler asked for."""
        pending = self.store.pop_variable(session_id, AWAITING_INPUT)
        if not pending:
            return None
        spec = self.registry.get_intent_handler(pending["intent"])
        if spec is None:
            return "I'm sorry, I lost track of our conversation."
        return await self.invoke(spec, {pending["slot"]: text.strip()}, text, session_id)

    async def invoke(
        self,
        spec: IntentSpec,
        params: Dict[str, Any],
        raw_text: str,
        session_id: str,
        legacy_context: Any = None,
    ) -> str:
        """Call a handler; any failure becomes an apology."""
        response, _ = await self._call(spec, params, raw_text, session_id, legacy_context)
        return response

    async def _call(
        self,
        spec: IntentSpec,
        params: Dict[str, Any],
        raw_text: str,
        session_id: str,
        legacy_context: Any = None,
    ) -> Tuple[str, bool]:
        context = HandlerContext(
            session_id=session_id,
            raw_text=raw_text,
            entities=dict(params),
            store=self.store,
            config=self.config,
            legacy=legacy_context,
        )
        try:
            result = spec.handler(dict(params), context)
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            logger.error(f"Handler for {spec.name} failed: {e}", exc_info=True)
            return self.responses.error(), False

        logger.info(f"Executed {spec.name} ({spec.plugin})")
        return ("" if result is None else str(result)), True

    def status(self) -> Dict[str, Any]:
        return {
            **self.registry.stats(),
            "active_sessions": self.store.active_sessions,
            "load_errors": self.registry.load_errors,
        }
