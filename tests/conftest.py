"""Shared fixtures: isolated config, fake clock, store, registry and assistant."""

import random

import pytest

from axi_engine.assistant import Assistant
from axi_engine.config import EngineConfig
from axi_engine.context import ContextStore
from axi_engine.skills import FallbackResponses, PluginRegistry


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def config(tmp_path):
    return EngineConfig(
        skills={
            "files": {"base_dir": str(tmp_path)},
            "browser": {"launch": False},
            "system": {"dry_run": True},
        },
    )


@pytest.fixture
def store(config, clock):
    return ContextStore(config, clock=clock)


@pytest.fixture
def registry():
    return PluginRegistry()


@pytest.fixture
def responses():
    return FallbackResponses(random.Random(7))


@pytest.fixture
def assistant(config, store, registry, responses):
    return Assistant(config=config, registry=registry, store=store, responses=responses)
