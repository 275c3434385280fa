"""
Tests for the Skill Router
==========================

Tests dispatch, the confirmation state machine and failure handling.
"""

from types import SimpleNamespace

import pytest

from axi_engine.nlu.types import Decision, DecisionKind, Source
from axi_engine.skills import SkillRouter
from axi_engine.skills.responses import CONFIRMATION_CANCELLED, FALLBACK_RESPONSES
from axi_engine.skills.router import AWAITING_INPUT, is_affirmative


class Recorder:
    """Collects handler calls."""

    def __init__(self):
        self.calls = []

    async def delete_file(self, params, context):
        self.calls.append(("delete_file", params))
        return f"Deleted {params.get('filename')}"

    async def play(self, params, context):
        self.calls.append(("play", params))
        return "Playing"

    async def explode(self, params, context):
        raise RuntimeError("kaboom")

    def sync_hello(self, params, context):
        return f"Hello from {context.session_id}"

    async def ask_name(self, params, context):
        context.request_input("greet", "name")
        return "What is your name?"

    async def greet(self, params, context):
        return f"Hi {params['name']}"


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def router(registry, store, config, responses, recorder):
    registry.initialize([SimpleNamespace(
        name="test",
        description="Router test plugin",
        intents={
            "delete_file": {"handler": recorder.delete_file, "confidence": 0.7, "requires_confirmation": True},
            "play": {"handler": recorder.play, "confidence": 0.5, "requires_confirmation": False},
            "strict": {"handler": recorder.play, "confidence": 0.9, "requires_confirmation": False},
            "explode": {"handler": recorder.explode, "confidence": 0.5, "requires_confirmation": False},
            "hello": {"handler": recorder.sync_hello, "confidence": 0.5, "requires_confirmation": False},
            "ask_name": {"handler": recorder.ask_name, "confidence": 0.5, "requires_confirmation": False},
            "greet": {"handler": recorder.greet, "confidence": 0.5, "requires_confirmation": False},
            "wipe": {"handler": recorder.explode, "confidence": 0.5, "requires_confirmation": True},
        },
    )])
    return SkillRouter(registry, store, config, responses)


def decision(intent, kind=DecisionKind.EXECUTE, confidence=0.9, prompt=None, **entities):
    return Decision(kind, intent, confidence, Source.SEMANTIC, "test", prompt, entities)


class TestAffirmative:

    @pytest.mark.parametrize("text", ["yes", "Yes!", "yeah", "sure", "ok", "go ahead please", "y", "do it"])
    def test_yes(self, text):
        assert is_affirmative(text)

    @pytest.mark.parametrize("text", ["no", "nope", "cancel", "", "yesterday", "maybe"])
    def test_not_yes(self, text):
        assert not is_affirmative(text)


# =============================================================================
# Dispatch
# =============================================================================

class TestExecute:
    """Test routing Execute decisions."""

    async def test_runs_handler(self, router, recorder):
        reply = await router.execute(decision("play", song="x"), "play x", session_id="s1")
        assert reply == "Playing"
        assert recorder.calls == [("play", {"song": "x"})]

    async def test_sync_handler(self, router):
        assert await router.execute(decision("hello"), "hi", session_id="s9") == "Hello from s9"

    async def test_missing_handler(self, router):
        reply = await router.execute(decision("teleport"), "teleport me", session_id="s1")
        assert reply in FALLBACK_RESPONSES["plugin_not_found"]

    async def test_below_plugin_minimum(self, router, recorder):
        reply = await router.execute(decision("strict", confidence=0.85), "strict", session_id="s1")
        assert reply in FALLBACK_RESPONSES["low_confidence"]
        assert recorder.calls == []

    async def test_handler_failure_becomes_apology(self, router):
        reply = await router.execute(decision("explode"), "explode", session_id="s1")
        assert reply in FALLBACK_RESPONSES["error"]

    async def test_unknown(self, router):
        unknown = Decision(DecisionKind.UNKNOWN, "unknown", 0.0, Source.NONE, "No match")
        reply = await router.execute(unknown, "blorp", session_id="s1")
        assert reply in FALLBACK_RESPONSES["unknown"]

    async def test_ambiguous_offers_options(self, router):
        ambiguous = Decision(DecisionKind.UNKNOWN, "ambiguous", 0.3, Source.RULES, "Ambiguous")
        reply = await router.execute(ambiguous, "do something", session_id="s1")
        assert reply.startswith("I'm not sure what you mean. Did you want to:")
        assert reply.endswith("?")


# =============================================================================
# Confirmation Flow
# =============================================================================

class TestConfirmationFlow:
    """Test the awaiting-confirmation state machine."""

    async def test_requires_confirmation_asks_first(self, router, store, recorder):
        reply = await router.execute(decision("delete_file", filename="a.txt"), "delete a.txt", session_id="s1")
        assert reply == "Are you sure you want to delete a.txt?"
        assert store.is_awaiting_confirmation("s1")
        assert recorder.calls == []

    async def test_yes_runs_stored_action(self, router, store, recorder):
        await router.execute(decision("delete_file", filename="a.txt"), "delete a.txt", session_id="s1")
        reply = await router.respond_to_confirmation("yes", "s1")
        assert reply == "Deleted a.txt"
        assert recorder.calls == [("delete_file", {"filename": "a.txt"})]
        assert not store.is_awaiting_confirmation("s1")

    async def test_anything_else_cancels(self, router, store, recorder):
        await router.execute(decision("delete_file", filename="a.txt"), "delete a.txt", session_id="s1")
        assert await router.respond_to_confirmation("no", "s1") == CONFIRMATION_CANCELLED
        assert recorder.calls == []
        assert not store.is_awaiting_confirmation("s1")

    async def test_execute_while_awaiting_resolves_confirmation(self, router, recorder):
        await router.execute(decision("delete_file", filename="a.txt"), "delete a.txt", session_id="s1")
        reply = await router.execute(decision("play"), "yes", session_id="s1")
        assert reply == "Deleted a.txt"
        assert recorder.calls == [("delete_file", {"filename": "a.txt"})]

    async def test_expired_confirmation(self, router, clock, recorder):
        await router.execute(decision("delete_file", filename="a.txt"), "delete a.txt", session_id="s1")
        clock.advance(31)
        assert await router.respond_to_confirmation("yes", "s1") is None
        assert recorder.calls == []

    async def test_confirm_decision_uses_prompt(self, router, store):
        confirm = decision("play", DecisionKind.CONFIRM, 0.6, prompt="Did you want me to play music?")
        assert await router.execute(confirm, "play", session_id="s1") == "Did you want me to play music?"
        assert store.peek_confirmation("s1").intent == "play"

    async def test_clarify_also_awaits(self, router, store, recorder):
        clarify = decision("play", DecisionKind.CLARIFY, 0.4, prompt="Did you mean play?")
        await router.execute(clarify, "plya", session_id="s1")
        assert await router.respond_to_confirmation("yes", "s1") == "Playing"
        assert recorder.calls == [("play", {})]

    async def test_sessions_are_independent(self, router, store):
        await router.execute(decision("delete_file", filename="a.txt"), "delete a.txt", session_id="s1")
        assert not store.is_awaiting_confirmation("s2")
        assert await router.respond_to_confirmation("yes", "s2") is None

    async def test_outcome_reports_success(self, router):
        await router.execute(decision("delete_file", filename="a.txt"), "delete a.txt", session_id="s1")
        outcome = await router.resolve_confirmation("yes", "s1")
        assert outcome.executed
        assert outcome.response == "Deleted a.txt"
        assert outcome.pending.intent == "delete_file"

    async def test_outcome_after_handler_failure(self, router):
        await router.execute(decision("wipe"), "wipe everything", session_id="s1")
        outcome = await router.resolve_confirmation("yes", "s1")
        assert not outcome.executed
        assert outcome.response in FALLBACK_RESPONSES["error"]

    async def test_outcome_without_handler(self, router, store):
        store.set_awaiting_confirmation("s1", "vanished")
        outcome = await router.resolve_confirmation("yes", "s1")
        assert not outcome.executed
        assert outcome.response in FALLBACK_RESPONSES["plugin_not_found"]

    async def test_outcome_when_cancelled(self, router):
        await router.execute(decision("delete_file", filename="a.txt"), "delete a.txt", session_id="s1")
        outcome = await router.resolve_confirmation("no", "s1")
        assert not outcome.executed
        assert outcome.response == CONFIRMATION_CANCELLED


# =============================================================================
# Pending Input
# =============================================================================

class TestPendingInput:
    """Test handlers asking for a free-text value."""

    async def test_fill(self, router, store):
        assert await router.execute(decision("ask_name"), "greet me", session_id="s1") == "What is your name?"
        assert router.has_pending_input("s1")
        assert await router.fill_pending_input("  Ada ", "s1") == "Hi Ada"
        assert store.get_variable("s1", AWAITING_INPUT) is None

    async def test_nothing_pending(self, router):
        assert await router.fill_pending_input("Ada", "s1") is None

    def test_status(self, router):
        status = router.status()
        assert status["intent_count"] == 8
        assert status["load_errors"] == []
