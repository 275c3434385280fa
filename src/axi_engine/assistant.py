"""
Assistant
=========

The command entry point: one call per user turn.

Turn order:
1. A pending yes/no confirmation consumes the turn.
2. A pending free-text request ("Which website?") consumes the turn.
3. Pronouns ("open it", "again") are rewritten from recent context.
4. Follow-ups ("louder" after "play") are resolved against the last intent.
5. Otherwise the text is split into at most two clauses and each clause
   goes through the interpretation pipeline.
6. Each decision is routed to a skill; executed intents are remembered.

Example:
    from axi_engine import Assistant

    assistant = Assistant()
    await assistant.init()
    reply = await assistant.handle_command("open youtube and play lofi", "s1")
    await assistant.shutdown()
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .config import EngineConfig, load_config
from .context import ContextStore
from .nlu import Decision, DecisionKind, InterpretationPipeline, segment
from .nlu.classifier import IntentScorer, create_scorer
from .nlu.rules import RuleMatcher
from .nlu.semantic import SemanticMatcher
from .skills import BUILTIN_PLUGINS, FallbackResponses, PluginRegistry, SkillRouter
from .skills.router import AWAITING_INPUT

logger = logging.getLogger(__name__)


class Assistant:
    """
    Conversational intent engine plus skill routing.

    Every collaborator is optional; missing ones are built from ``config``.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        registry: Optional[PluginRegistry] = None,
        store: Optional[ContextStore] = None,
        rules: Optional[RuleMatcher] = None,
        semantic: Optional[SemanticMatcher] = None,
        classifier: Optional[IntentScorer] = None,
        plugins: Optional[Iterable[Any]] = None,
        responses: Optional[FallbackResponses] = None,
    ):
        self.config = config or EngineConfig()
        self.registry = registry or PluginRegistry()
        self.store = store or ContextStore(self.config)
        self.plugins = list(plugins) if plugins is not None else list(BUILTIN_PLUGINS)

        if semantic is None:
            semantic = SemanticMatcher(
                threshold=self.config.semantic_threshold,
                vectors_path=self.config.vectors_path,
                intents_dir=self.config.intents_dir,
                build_if_missing=self.config.build_vectors_if_missing,
            )
        if classifier is None:
            classifier = create_scorer(self.config.classifier_backend, self.config.classifier_path)

        self.pipeline = InterpretationPipeline(
            config=self.config,
            rules=rules,
            semantic=semantic,
            classifier=classifier,
        )
        self.router = SkillRouter(self.registry, self.store, self.config, responses)

    @classmethod
    def from_config(cls, path: Optional[str] = None, **kwargs) -> "Assistant":
        """Build an assistant from a YAML config (see ``load_config``)."""
        return cls(config=load_config(path), **kwargs)

    @property
    def engine(self):
        return self.pipeline.engine

    @property
    def responses(self) -> FallbackResponses:
        return self.router.responses

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    async def init(self) -> None:
        """Load plugins and start the context sweep."""
        if not self.registry.initialized:
            self.registry.initialize(self.plugins, self.config.plugin_modules)
        self.store.start()
        stats = self.registry.stats()
        logger.info(
            f"Assistant ready: {stats['plugin_count']} plugins, "
            f"{stats['intent_count']} intents, {stats['error_count']} load errors"
        )

    async def reload(self) -> None:
        """Reload plugins and offline artifacts."""
        self.registry.reload()
        if self.pipeline.semantic is not None:
            self.pipeline.semantic.reload()
        reload_classifier = getattr(self.pipeline.classifier, "reload", None)
        if callable(reload_classifier):
            reload_classifier()

    async def shutdown(self) -> None:
        await self.store.shutdown()

    # =========================================================================
    # INTERPRETATION
    # =========================================================================

    def _plan(self, text: str, session_id: str) -> List[Tuple[str, Decision]]:
        """Resolve context and split into (clause, decision) pairs."""
        resolution = self.store.resolve_pronoun(session_id, text)
        if resolution.resolved:
            text = resolution.text

        follow_up = self.store.detect_follow_up(session_id, text)
        if follow_up is not None:
            return [(text, self.engine.from_context(follow_up.result, follow_up.reason))]

        segmentation = segment(text)
        if segmentation.is_multi:
            logger.info(f"Multi-intent ({segmentation.conjunction!r}): {segmentation.segments}")
        return [(clause, self.pipeline.interpret(clause)) for clause in segmentation.segments]

    def interpret(self, text: str, session_id: str = "default") -> List[Decision]:
        """Decisions for ``text`` (one per clause) without executing anything."""
        if not text or not text.strip():
            return [self.engine.unknown()]
        return [decision for _, decision in self._plan(text.strip(), session_id)]

    def trace(self, text: str) -> Dict[str, Any]:
        """Per-layer outcomes for debugging."""
        return self.pipeline.trace(text)

    # =========================================================================
    # COMMAND HANDLING
    # =========================================================================

    async def handle_command(
        self,
        text: str,
        session_id: str = "default",
        legacy_context: Any = None,
    ) -> str:
        """
        Respond to one user turn.

        Never raises; failures become an apology.
        """
        if not self.registry.initialized:
            await self.init()

        try:
            return await self._handle(text, session_id, legacy_context)
        except Exception as e:
            logger.error(f"Failed to handle '{text}': {e}", exc_info=True)
            return self.responses.error()

    async def _handle(self, text: str, session_id: str, legacy_context: Any) -> str:
        text = (text or "").strip()
        if not text:
            return self.responses.unknown()

        logger.info(f"[{session_id}] Processing: {text}")

        if self.store.is_awaiting_confirmation(session_id):
            outcome = await self.router.resolve_confirmation(text, session_id, legacy_context)
            if outcome.executed:
                pending = outcome.pending
                self.store.push(session_id, pending.intent, pending.entities, pending.raw_text, outcome.response)
            return outcome.response

        if self.router.has_pending_input(session_id):
            requested = self.store.get_variable(session_id, AWAITING_INPUT)
            response = await self.router.fill_pending_input(text, session_id)
            self.store.push(session_id, requested["intent"], {requested["slot"]: text}, text, response)
            return response

        responses = []
        for clause, decision in self._plan(text, session_id):
            response = await self.router.execute(decision, clause, legacy_context, session_id)
            responses.append(response)

            if self._executed(decision, session_id):
                self.store.push(session_id, decision.intent, decision.entities, clause, response)

            # A question back to the user ends the turn
            if self.store.is_awaiting_confirmation(session_id) or self.router.has_pending_input(session_id):
                break

        return " ".join(r for r in responses if r)

    def _executed(self, decision: Decision, session_id: str) -> bool:
        if decision.kind is not DecisionKind.EXECUTE:
            return False
        if self.store.is_awaiting_confirmation(session_id):
            return False
        spec = self.registry.get_intent_handler(decision.intent)
        return spec is not None and decision.confidence >= spec.confidence

    def status(self) -> Dict[str, Any]:
        return {
            **self.router.status(),
            "semantic_available": bool(self.pipeline.semantic and self.pipeline.semantic.available),
            "classifier_available": bool(self.pipeline.classifier and self.pipeline.classifier.available),
        }
