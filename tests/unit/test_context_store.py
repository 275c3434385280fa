"""
Tests for the Context Store
===========================

History TTLs, pronoun and follow-up resolution, the confirmation slot,
session variables and the sweep lifecycle. Time is driven by a fake clock.
"""

import asyncio

from axi_engine.config import EngineConfig
from axi_engine.context import ContextStore
from axi_engine.context.resolution import detect_follow_up, find_relevant_entity, resolve_pronoun
from axi_engine.nlu.types import Source


# =============================================================================
# History
# =============================================================================

class TestHistory:
    """Test the rolling history buffer."""

    def test_push_and_recent(self, store):
        store.push("s1", "play", {}, "play music", "Playing")
        store.push("s1", "volume_up", {}, "louder", "Volume up")
        assert [e.intent for e in store.recent("s1")] == ["volume_up", "play"]
        assert store.last_intent("s1") == "volume_up"
        assert store.last_input("s1") == "louder"

    def test_capacity(self, store):
        for i in range(8):
            store.push("s1", f"intent_{i}", {}, f"input {i}", "")
        session = store.get_session("s1")
        assert len(session.history) == 5
        assert store.last_intent("s1") == "intent_7"
        assert [e.intent for e in store.recent("s1", n=10)][-1] == "intent_3"

    def test_sessions_are_isolated(self, store):
        store.push("a", "play", {}, "play", "")
        assert store.last_intent("b") is None
        assert store.active_sessions == 2

    def test_entry_ttl(self, store, clock):
        store.push("s1", "play", {"song": "x"}, "play x", "")

        clock.advance(4 * 60 + 59)
        assert store.last_intent("s1") == "play"

        clock.advance(2)
        store.cleanup()
        assert store.last_intent("s1") is None
        assert len(store.get_session("s1").history) == 0

    def test_entries_expire_lazily(self, store, clock):
        store.push("s1", "play", {}, "play", "")
        clock.advance(301)
        assert store.recent("s1") == []

    def test_state(self, store):
        store.push("s1", "play", {"song": "x"}, "play x", "Playing x")
        state = store.state("s1")
        assert state["last_intent"] == "play"
        assert state["history_length"] == 1
        assert state["awaiting_confirmation"] is False


# =============================================================================
# Pronouns and Follow-ups
# =============================================================================

class TestResolution:
    """Test reference resolution."""

    def test_open_it(self, store):
        store.push("s1", "open_website", {"url": "github"}, "open github", "")
        resolution = store.resolve_pronoun("s1", "open it")
        assert resolution.resolved
        assert resolution.text == "open github"
        assert resolution.reference == "github"

    def test_entity_priority(self):
        assert find_relevant_entity({"song": "x", "app": "spotify"}) == "spotify"

    def test_falls_back_to_history(self):
        assert find_relevant_entity({}, [{}, {"filename": "a.txt"}]) == "a.txt"

    def test_again_repeats_last_input(self, store):
        store.push("s1", "play", {}, "play some jazz", "")
        resolution = store.resolve_pronoun("s1", "do it again")
        assert resolution.text == "play some jazz"
        assert resolution.reference == "last_input"

    def test_nothing_to_resolve(self, store):
        assert not store.resolve_pronoun("s1", "open it").resolved
        assert not resolve_pronoun("again", None, {}).resolved

    def test_follow_up(self, store):
        store.push("s1", "play", {}, "play music", "")
        follow_up = store.detect_follow_up("s1", "louder")
        assert follow_up.result.intent == "volume_up"
        assert follow_up.result.confidence == 0.85
        assert follow_up.result.source is Source.CONTEXT
        assert follow_up.reason == 'Follow-up from "play"'

    def test_follow_up_needs_prior_intent(self, store):
        store.push("s1", "tell_time", {}, "what time is it", "")
        assert store.detect_follow_up("s1", "louder") is None
        assert store.detect_follow_up("empty", "louder") is None

    def test_follow_up_whole_words(self):
        assert detect_follow_up("nextcloud", "play") is None
        assert detect_follow_up("next", "play").maps_to == "next"

    def test_follow_up_matches_name_parts(self):
        assert detect_follow_up("louder", "display.brightness_up") is None
        assert detect_follow_up("more", "list_files").maps_to == "continue"
        assert detect_follow_up("stop", "play").maps_to == "pause"

    def test_clarification_options(self, store):
        store.push("s1", "list_files", {}, "list files", "")
        clarification = store.generate_clarification("s1", "do something")
        intents = [o["intent"] for o in clarification["options"]]
        assert intents[0] == "list_files"
        assert len(intents) <= 4
        assert clarification["options"][0]["label"] == "List files"
        assert clarification["original"] == "do something"


# =============================================================================
# Confirmation Slot
# =============================================================================

class TestConfirmation:
    """Test the single pending-confirmation slot."""

    def test_set_and_pop(self, store):
        store.set_awaiting_confirmation("s1", "delete_file", {"filename": "a.txt"})
        assert store.is_awaiting_confirmation("s1")
        pending = store.pop_confirmation("s1")
        assert pending.intent == "delete_file"
        assert not store.is_awaiting_confirmation("s1")
        assert store.pop_confirmation("s1") is None

    def test_new_request_replaces_old(self, store):
        store.set_awaiting_confirmation("s1", "delete_file")
        store.set_awaiting_confirmation("s1", "shutdown_system")
        assert store.peek_confirmation("s1").intent == "shutdown_system"

    def test_expires_after_timeout(self, store, clock):
        store.set_awaiting_confirmation("s1", "delete_file")
        clock.advance(29)
        assert store.is_awaiting_confirmation("s1")
        clock.advance(2)
        assert not store.is_awaiting_confirmation("s1")
        assert store.pop_confirmation("s1") is None

    def test_cleanup_counts_expired_slots(self, store, clock):
        store.set_awaiting_confirmation("s1", "delete_file")
        clock.advance(31)
        removed = store.cleanup()
        assert removed["confirmations"] == 1


# =============================================================================
# Sessions and Lifecycle
# =============================================================================

class TestSessions:
    """Test variables, idle eviction and the sweep task."""

    def test_variables(self, store):
        store.set_variable("s1", "volume", 40)
        assert store.get_variable("s1", "volume") == 40
        assert store.pop_variable("s1", "volume") == 40
        assert store.get_variable("s1", "volume", "none") == "none"

    def test_idle_sessions_reclaimed(self, store, clock):
        store.get_session("old")
        clock.advance(200)
        store.get_session("new")
        clock.advance(120)
        removed = store.cleanup()
        assert removed["sessions"] == 1
        assert store.active_sessions == 1

    def test_destroy_and_clear(self, store):
        store.get_session("a")
        store.get_session("b")
        assert store.destroy_session("a")
        assert not store.destroy_session("a")
        store.clear()
        assert store.active_sessions == 0

    async def test_sweep_task_lifecycle(self, clock):
        store = ContextStore(EngineConfig(cleanup_interval_seconds=0.01), clock=clock)
        store.push("s1", "play", {}, "play", "")
        clock.advance(400)

        store.start()
        assert store.running
        await asyncio.sleep(0.05)
        await store.shutdown()

        assert not store.running
        assert store.active_sessions == 0
