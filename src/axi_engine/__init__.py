"""
AXI Command Engine
==================

Conversational intent resolution for a voice/text command assistant.

Example:
    import asyncio
    from axi_engine import Assistant

    async def main():
        assistant = Assistant.from_config()
        await assistant.init()
        print(await assistant.handle_command("turn up the volume", "s1"))
        await assistant.shutdown()

    asyncio.run(main())
"""

__version__ = "0.1.0"

from .config import EngineConfig, load_config
from .errors import ArtifactError, DuplicateIntentError, EngineError, PluginError, PluginValidationError
from .nlu import Decision, DecisionKind, InterpretationPipeline, InterpretationResult, Source
from .context import ContextStore
from .skills import PluginRegistry, SkillRouter
from .assistant import Assistant

__all__ = [
    "Assistant",
    "ContextStore",
    "Decision",
    "DecisionKind",
    "EngineConfig",
    "InterpretationPipeline",
    "InterpretationResult",
    "PluginRegistry",
    "SkillRouter",
    "Source",
    "load_config",
    "ArtifactError",
    "DuplicateIntentError",
    "EngineError",
    "PluginError",
    "PluginValidationError",
]
